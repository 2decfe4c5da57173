# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Local cache of query results with stale marking and background refetch."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

import httpx

logger = logging.getLogger(__name__)

QueryKey = tuple[Any, ...]
Fetcher = Callable[[QueryKey], Awaitable[Any]]


def as_key(key: QueryKey | str) -> QueryKey:
    return (key,) if isinstance(key, str) else tuple(key)


@dataclass
class CachedQuery:
    """One cached result."""

    data: Any
    stale: bool = False


class QueryCache:
    """Query results keyed by tuples such as ``("/api/sales", 7)``.

    Invalidation matches by prefix: invalidating ``("/api/sales",)`` also
    marks ``("/api/sales", 7)`` stale. Stale entries are refetched in the
    background when a fetcher is configured and an event loop is running;
    otherwise they are refetched on the next ``read``.
    """

    def __init__(self, fetcher: Fetcher | None = None) -> None:
        self._fetcher = fetcher
        self._entries: dict[QueryKey, CachedQuery] = {}
        self._generations: dict[QueryKey, int] = {}
        self._refetches: set[asyncio.Task] = set()

    def set(self, key: QueryKey | str, data: Any) -> None:
        key = as_key(key)
        self._bump(key)
        self._entries[key] = CachedQuery(data=data)

    def get(self, key: QueryKey | str) -> CachedQuery | None:
        return self._entries.get(as_key(key))

    def is_stale(self, key: QueryKey | str) -> bool:
        entry = self.get(key)
        return entry is None or entry.stale

    def keys(self) -> list[QueryKey]:
        return list(self._entries)

    async def read(self, key: QueryKey | str) -> Any:
        """Return cached data, fetching it first if missing or stale."""
        key = as_key(key)
        entry = self._entries.get(key)
        if entry is not None and not entry.stale:
            return entry.data
        return await self.fetch(key)

    async def fetch(self, key: QueryKey | str) -> Any:
        """Fetch ``key`` and store the result.

        A result is only stored if the key was not invalidated or set while
        the fetch was in flight; an older fetch finishing late never
        overwrites a newer one.
        """
        if self._fetcher is None:
            raise RuntimeError("QueryCache has no fetcher configured")
        key = as_key(key)
        generation = self._generations.get(key, 0)
        data = await self._fetcher(key)
        if self._generations.get(key, 0) == generation:
            self._entries[key] = CachedQuery(data=data)
        else:
            logger.debug(f"Dropped outdated result for {key!r}")
        return data

    def invalidate(self, prefix: QueryKey | str) -> list[QueryKey]:
        """Mark every entry under ``prefix`` stale and schedule refetches.

        Returns the keys that were marked.
        """
        prefix = as_key(prefix)
        matched = [key for key in self._entries if key[: len(prefix)] == prefix]
        for key in matched:
            self._entries[key].stale = True
            self._bump(key)
            self._schedule_refetch(key)
        return matched

    def invalidate_all(self) -> list[QueryKey]:
        matched = list(self._entries)
        for key in matched:
            self._entries[key].stale = True
            self._bump(key)
            self._schedule_refetch(key)
        return matched

    async def wait_for_refetches(self) -> None:
        """Wait until all scheduled background refetches are done."""
        while self._refetches:
            await asyncio.gather(*list(self._refetches), return_exceptions=True)

    def _bump(self, key: QueryKey) -> None:
        self._generations[key] = self._generations.get(key, 0) + 1

    def _schedule_refetch(self, key: QueryKey) -> None:
        if self._fetcher is None:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No loop: the next read() refetches
            return
        task = loop.create_task(self._refetch(key))
        self._refetches.add(task)
        task.add_done_callback(self._refetches.discard)

    async def _refetch(self, key: QueryKey) -> None:
        try:
            await self.fetch(key)
        except Exception as e:
            # Entry stays stale; the next read() retries
            logger.warning(f"Background refetch of {key!r} failed: {e}")


def http_fetcher(client: httpx.AsyncClient) -> Fetcher:
    """Fetcher that GETs the first key element from the API.

    Further key elements are appended as path segments, so
    ``("/api/sales", 7)`` fetches ``/api/sales/7``.
    """

    async def fetch(key: QueryKey) -> Any:
        path = "/".join(str(part).strip("/") for part in key)
        response = await client.get("/" + path)
        response.raise_for_status()
        return response.json()

    return fetch
