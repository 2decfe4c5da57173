# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Maps change events to the cached queries they make stale."""

import logging
from collections.abc import Mapping
from typing import Any

from backoffice.client.query_cache import QueryCache, QueryKey

logger = logging.getLogger(__name__)

# Topic -> cached query keys to invalidate. Statistics are derived from
# sales, so a sales change also invalidates the dashboard.
TOPIC_QUERY_KEYS: dict[str, tuple[str, ...]] = {
    "products": ("/api/products",),
    "categories": ("/api/categories",),
    "brands": ("/api/brands",),
    "clients": ("/api/clients",),
    "suppliers": ("/api/suppliers",),
    "sales": ("/api/sales", "/api/stats/dashboard"),
    "delivery-notes": ("/api/delivery-notes",),
    "pre-invoices": ("/api/pre-invoices",),
    "stock-movements": ("/api/stock-movements",),
    "cash-registers": ("/api/cash-registers",),
    "checks": ("/api/checks",),
    "payment-methods": ("/api/payment-methods",),
    "warehouses": ("/api/warehouses",),
    "loyalty-coupons": ("/api/loyalty-coupons",),
    "loyalty-offers": ("/api/loyalty-offers",),
    "loyalty-payment-requests": ("/api/payment-requests",),
    "price-lists": ("/api/price-lists",),
    "purchase-orders": ("/api/purchase-orders",),
    "staff-members": ("/api/employees",),
}


class CacheInvalidator:
    """Consumes change events and invalidates the matching cache entries."""

    def __init__(
        self,
        cache: QueryCache,
        table: Mapping[str, tuple[str, ...]] = TOPIC_QUERY_KEYS,
    ) -> None:
        self.cache = cache
        self._table = table

    def query_keys_for(self, topic: str) -> tuple[str, ...]:
        return self._table.get(topic, ())

    def handle(self, message: Mapping[str, Any]) -> list[QueryKey]:
        """Process one wire message ``{"type", "data"?, "timestamp"}``.

        Unknown topics and malformed messages are ignored so a newer server
        cannot break an older client. Returns the cache keys marked stale.
        """
        topic = message.get("type") if isinstance(message, Mapping) else None
        if not isinstance(topic, str):
            logger.debug(f"Ignoring malformed change message: {message!r}")
            return []

        query_keys = self.query_keys_for(topic)
        if not query_keys:
            logger.debug(f"Ignoring change event with unknown topic {topic!r}")
            return []

        invalidated: list[QueryKey] = []
        for query_key in query_keys:
            invalidated.extend(self.cache.invalidate(query_key))
        logger.debug(f"Change on {topic}: invalidated {len(invalidated)} queries")
        return invalidated
