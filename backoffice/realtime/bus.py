# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Change notification bus from the server process to connected clients."""

import asyncio
import logging
import threading
import time
import uuid
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any

from fastapi.encoders import jsonable_encoder

from backoffice.config import settings
from backoffice.realtime.topics import ChangeTopic

logger = logging.getLogger(__name__)

# Sends one wire message to one client
SendFunction = Callable[[dict[str, Any]], Awaitable[None]]


def _now_ms() -> int:
    return int(time.time() * 1000)


@dataclass(frozen=True)
class ChangeEvent:
    """A mutation notice. Never stored, never replayed."""

    topic: ChangeTopic
    data: Any = None
    timestamp: int = field(default_factory=_now_ms)

    def to_wire(self) -> dict[str, Any]:
        """Wire format: ``{"type": topic, "data"?: any, "timestamp": ms}``."""
        message: dict[str, Any] = {"type": self.topic.value, "timestamp": self.timestamp}
        if self.data is not None:
            message["data"] = self.data
        return message

    @classmethod
    def from_wire(cls, message: dict[str, Any]) -> "ChangeEvent":
        return cls(
            topic=ChangeTopic(message["type"]),
            data=message.get("data"),
            timestamp=message["timestamp"],
        )


class _Connection:
    """Registry entry: one client, its send function and its buffer."""

    def __init__(
        self,
        connection_id: str,
        send: SendFunction,
        loop: asyncio.AbstractEventLoop,
        queue_size: int,
    ) -> None:
        self.connection_id = connection_id
        self.send = send
        self.loop = loop
        self.queue: asyncio.Queue[dict[str, Any]] = asyncio.Queue(maxsize=queue_size)
        self.task: asyncio.Task | None = None
        self.dropped = 0

    def offer(self, message: dict[str, Any]) -> None:
        # Runs on the connection's own event loop
        try:
            self.queue.put_nowait(message)
        except asyncio.QueueFull:
            self.dropped += 1
            logger.warning(
                f"Connection {self.connection_id} is not keeping up; "
                f"dropped {message['type']} event"
            )

    def close(self) -> None:
        if self.task is None or self.task.done():
            return
        try:
            self.loop.call_soon_threadsafe(self.task.cancel)
        except RuntimeError:
            # Event loop already closed, the task died with it
            pass


class Subscription:
    """Stream of change events received through one bus connection."""

    def __init__(self) -> None:
        self.connection_id: str | None = None
        self._events: asyncio.Queue[ChangeEvent] = asyncio.Queue()

    async def _deliver(self, message: dict[str, Any]) -> None:
        self._events.put_nowait(ChangeEvent.from_wire(message))

    async def get(self, timeout: float | None = None) -> ChangeEvent:
        """Wait for the next event."""
        if timeout is None:
            return await self._events.get()
        return await asyncio.wait_for(self._events.get(), timeout)

    def __aiter__(self) -> "Subscription":
        return self

    async def __anext__(self) -> ChangeEvent:
        return await self.get()


class ChangeNotificationBus:
    """Fans change events out to every connected client.

    Each connection is registered under an id together with the function
    that sends one message to it. Publishing only enqueues: every connection
    has a bounded buffer drained by its own task, so a slow client can only
    overflow its own buffer and a failing one is dropped without affecting
    the publisher or the other clients. Delivery is at-most-once; nothing is
    kept for clients that are not connected.

    ``publish`` is thread-safe and may be called from sync endpoints running
    in a worker thread.
    """

    def __init__(self, queue_size: int = 100) -> None:
        self._queue_size = queue_size
        self._connections: dict[str, _Connection] = {}
        self._lock = threading.Lock()

    def connect(self, send: SendFunction, connection_id: str | None = None) -> str:
        """Register a client. Must be called from the loop that owns ``send``.

        Args:
            send: Coroutine function sending one wire message to the client
            connection_id: Optional id; a random one is generated otherwise

        Returns:
            The connection id to pass to ``disconnect``
        """
        loop = asyncio.get_running_loop()
        connection_id = connection_id or uuid.uuid4().hex
        connection = _Connection(connection_id, send, loop, self._queue_size)
        with self._lock:
            if connection_id in self._connections:
                raise ValueError(f"Connection {connection_id} is already registered")
            self._connections[connection_id] = connection
        connection.task = loop.create_task(self._pump(connection))
        logger.info(f"Client connected: {connection_id}")
        return connection_id

    def disconnect(self, connection_id: str) -> bool:
        """Remove a client. Returns False if it was not registered."""
        with self._lock:
            connection = self._connections.pop(connection_id, None)
        if connection is None:
            return False
        connection.close()
        logger.info(f"Client disconnected: {connection_id}")
        return True

    def publish(self, topic: ChangeTopic | str, data: Any = None) -> ChangeEvent | None:
        """Tell every connected client that ``topic`` changed.

        Never blocks and never raises for delivery problems. Events with an
        unknown topic or a payload that cannot be encoded as JSON are logged
        and dropped; None is returned for them.
        """
        try:
            event = ChangeEvent(topic=ChangeTopic(topic), data=jsonable_encoder(data))
        except (TypeError, ValueError) as e:
            logger.error(f"Dropping change event for {topic!r}: {e}")
            return None

        message = event.to_wire()
        with self._lock:
            connections = list(self._connections.values())
        for connection in connections:
            try:
                connection.loop.call_soon_threadsafe(connection.offer, message)
            except RuntimeError:
                logger.warning(
                    f"Event loop of connection {connection.connection_id} is closed"
                )
                self._forget(connection)

        logger.debug(
            f"Published {event.topic.value} to {len(connections)} connection(s)"
        )
        return event

    @asynccontextmanager
    async def subscribe(self) -> AsyncIterator[Subscription]:
        """Connect an in-process subscriber for the duration of the block."""
        subscription = Subscription()
        subscription.connection_id = self.connect(subscription._deliver)
        try:
            yield subscription
        finally:
            self.disconnect(subscription.connection_id)

    def close_all(self) -> None:
        """Disconnect every client, e.g. on shutdown."""
        for connection_id in self.connection_ids():
            self.disconnect(connection_id)

    def connection_ids(self) -> list[str]:
        with self._lock:
            return list(self._connections)

    @property
    def connection_count(self) -> int:
        with self._lock:
            return len(self._connections)

    async def _pump(self, connection: _Connection) -> None:
        while True:
            message = await connection.queue.get()
            try:
                await connection.send(message)
            except Exception as e:
                logger.warning(
                    f"Delivery to {connection.connection_id} failed, "
                    f"dropping connection: {e}"
                )
                self._forget(connection)
                return

    def _forget(self, connection: _Connection) -> None:
        with self._lock:
            if self._connections.get(connection.connection_id) is connection:
                del self._connections[connection.connection_id]


# Process-wide bus used by the API
change_bus = ChangeNotificationBus(queue_size=settings.realtime_queue_size)
