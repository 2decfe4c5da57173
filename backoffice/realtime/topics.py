# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Change topics pushed to connected clients.

Topic values are part of the wire protocol. Adding a topic is backward
compatible (older clients ignore it); renaming one is not.
"""

from enum import Enum


class ChangeTopic(str, Enum):
    """Business resource categories whose cached views can go stale."""

    PRODUCTS = "products"
    CATEGORIES = "categories"
    BRANDS = "brands"
    CLIENTS = "clients"
    SUPPLIERS = "suppliers"
    SALES = "sales"
    DELIVERY_NOTES = "delivery-notes"
    PRE_INVOICES = "pre-invoices"
    STOCK_MOVEMENTS = "stock-movements"
    CASH_REGISTERS = "cash-registers"
    CHECKS = "checks"
    PAYMENT_METHODS = "payment-methods"
    WAREHOUSES = "warehouses"
    LOYALTY_COUPONS = "loyalty-coupons"
    LOYALTY_OFFERS = "loyalty-offers"
    LOYALTY_PAYMENT_REQUESTS = "loyalty-payment-requests"
    PRICE_LISTS = "price-lists"
    PURCHASE_ORDERS = "purchase-orders"
    STAFF_MEMBERS = "staff-members"
