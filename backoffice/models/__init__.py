# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Database models package."""

from backoffice.models.base import Base, TimestampMixin
from backoffice.models.employee import Employee
from backoffice.models.enums import RoleKind
from backoffice.models.module import Module
from backoffice.models.role import Role
from backoffice.models.role_module_permission import RoleModulePermission
from backoffice.models.session import EmployeeSession

__all__ = [
    "Base",
    "Employee",
    "EmployeeSession",
    "Module",
    "Role",
    "RoleKind",
    "RoleModulePermission",
    "TimestampMixin",
]
