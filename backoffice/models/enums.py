# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Enumeration types for database models."""

from enum import Enum


class RoleKind(str, Enum):
    """How a role is authorized.

    SYSTEM_ADMIN roles bypass the permission matrix entirely; SCOPED roles are
    governed only by their module permission rows.
    """

    SYSTEM_ADMIN = "system_admin"
    SCOPED = "scoped"
