# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Keeps a client connected to the change notification bus."""

import asyncio
import json
import logging
from collections.abc import Callable
from typing import Any

import websockets
from websockets.exceptions import WebSocketException

from backoffice.client.invalidator import CacheInvalidator

logger = logging.getLogger(__name__)


class RealtimeSync:
    """Connects to the realtime endpoint and feeds events to an invalidator.

    The connection is retried forever with a capped back-off. The server
    keeps no backlog, so every reconnect invalidates the whole cache: events
    published while the client was away are never replayed.
    """

    def __init__(
        self,
        url: str,
        invalidator: CacheInvalidator,
        *,
        connect: Callable[[str], Any] = websockets.connect,
        reconnect_delay: float = 1.0,
        max_reconnect_delay: float = 5.0,
    ) -> None:
        self.url = url
        self.invalidator = invalidator
        self.is_connected = False
        self._connect = connect
        self._reconnect_delay = reconnect_delay
        self._max_reconnect_delay = max_reconnect_delay
        self._has_connected = False
        self._stopped = asyncio.Event()

    def stop(self) -> None:
        self._stopped.set()

    async def run(self) -> None:
        """Receive events until ``stop`` is called."""
        delay = self._reconnect_delay
        while not self._stopped.is_set():
            try:
                async with self._connect(self.url) as connection:
                    self._on_connect()
                    delay = self._reconnect_delay
                    async for raw in connection:
                        self.dispatch(raw)
                        if self._stopped.is_set():
                            break
            except (OSError, asyncio.TimeoutError, WebSocketException) as e:
                logger.info(f"Realtime connection error: {e}")
            finally:
                if self.is_connected:
                    logger.info("Realtime connection lost")
                self.is_connected = False

            if self._stopped.is_set():
                break
            try:
                await asyncio.wait_for(self._stopped.wait(), timeout=delay)
            except asyncio.TimeoutError:
                pass
            delay = min(delay * 2, self._max_reconnect_delay)

    def dispatch(self, raw: str | bytes) -> None:
        """Decode one wire message and hand it to the invalidator."""
        if raw == "pong":
            return
        try:
            message = json.loads(raw)
        except ValueError:
            logger.debug(f"Ignoring undecodable realtime message: {raw!r}")
            return
        self.invalidator.handle(message)

    def _on_connect(self) -> None:
        self.is_connected = True
        if self._has_connected:
            # Missed events are not replayed; resynchronize from the server
            stale = self.invalidator.cache.invalidate_all()
            logger.info(f"Reconnected; refetching {len(stale)} cached queries")
        else:
            logger.info("Realtime connection established")
        self._has_connected = True
