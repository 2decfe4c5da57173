# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Client-side query cache kept coherent by the change notification bus."""

from backoffice.client.invalidator import TOPIC_QUERY_KEYS, CacheInvalidator
from backoffice.client.query_cache import QueryCache, http_fetcher
from backoffice.client.realtime_sync import RealtimeSync

__all__ = [
    "TOPIC_QUERY_KEYS",
    "CacheInvalidator",
    "QueryCache",
    "RealtimeSync",
    "http_fetcher",
]
