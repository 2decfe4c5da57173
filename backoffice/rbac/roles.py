# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Default roles and their module permissions."""

from backoffice.models.enums import RoleKind

ADMIN_ROLE_NAME = "admin"

ADMIN_ROLE = {
    "name": ADMIN_ROLE_NAME,
    "kind": RoleKind.SYSTEM_ADMIN,
    "is_system": True,
    "description": "Administrator with full access",
    "permissions": {},
}

VIEW = {"can_view": True}
VIEW_CREATE = {"can_view": True, "can_create": True}
VIEW_CREATE_EDIT = {"can_view": True, "can_create": True, "can_edit": True}

# Only the admin role is a system role; the others can be edited or removed
DEFAULT_ROLES = [
    ADMIN_ROLE,
    {
        "name": "sales",
        "kind": RoleKind.SCOPED,
        "is_system": False,
        "description": "Sells at the counter and manages clients",
        "permissions": {
            "dashboard": VIEW,
            "pos": VIEW_CREATE,
            "sales": VIEW_CREATE,
            "products": VIEW,
            "clients": VIEW_CREATE_EDIT,
            "price-lists": VIEW,
        },
    },
    {
        "name": "cashier",
        "kind": RoleKind.SCOPED,
        "is_system": False,
        "description": "Operates cash registers",
        "permissions": {
            "pos": VIEW_CREATE,
            "sales": VIEW,
            "cash-registers": VIEW_CREATE_EDIT,
        },
    },
    {
        "name": "warehouse",
        "kind": RoleKind.SCOPED,
        "is_system": False,
        "description": "Receives goods and keeps stock",
        "permissions": {
            "products": VIEW_CREATE_EDIT,
            "stock": VIEW_CREATE_EDIT,
            "suppliers": VIEW,
            "purchase-orders": VIEW_CREATE,
            "delivery-notes": VIEW_CREATE_EDIT,
        },
    },
]
