# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Business modules seeded on startup."""

DEFAULT_MODULES = [
    {"code": "dashboard", "name": "Dashboard", "route": "/"},
    {"code": "pos", "name": "Point of Sale", "route": "/pos"},
    {"code": "sales", "name": "Sales", "route": "/sales"},
    {"code": "products", "name": "Products", "route": "/products"},
    {"code": "stock", "name": "Stock", "route": "/stock"},
    {"code": "clients", "name": "Clients", "route": "/clients"},
    {"code": "suppliers", "name": "Suppliers", "route": "/suppliers"},
    {
        "code": "purchase-orders",
        "name": "Purchase Orders",
        "route": "/purchase-orders",
    },
    {"code": "delivery-notes", "name": "Delivery Notes", "route": "/delivery-notes"},
    {"code": "price-lists", "name": "Price Lists", "route": "/price-lists"},
    {
        "code": "cash-registers",
        "name": "Cash Registers",
        "route": "/cash-registers",
    },
    {"code": "finance", "name": "Finance", "route": "/finance"},
    {"code": "loyalty", "name": "Loyalty", "route": "/loyalty"},
    {"code": "reports", "name": "Reports", "route": "/reports"},
    {
        "code": "staff",
        "name": "Staff",
        "description": "Employees, roles and permissions",
        "route": "/users",
    },
    {"code": "settings", "name": "Settings", "route": "/settings"},
]
