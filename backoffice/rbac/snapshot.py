# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Resolved role access and the immutable session snapshot."""

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from backoffice.models.enums import RoleKind


class Capability(str, Enum):
    """Finest grain of a module permission."""

    VIEW = "view"
    CREATE = "create"
    EDIT = "edit"
    DELETE = "delete"

    @property
    def flag(self) -> str:
        """Name of the matching boolean field, e.g. ``can_view``."""
        return f"can_{self.value}"


@dataclass(frozen=True)
class ModulePermission:
    """Capabilities held on one module."""

    module_code: str
    can_view: bool = False
    can_create: bool = False
    can_edit: bool = False
    can_delete: bool = False

    def allows(self, capability: Capability) -> bool:
        return bool(getattr(self, capability.flag))

    def to_dict(self) -> dict[str, Any]:
        return {
            "module_code": self.module_code,
            "can_view": self.can_view,
            "can_create": self.can_create,
            "can_edit": self.can_edit,
            "can_delete": self.can_delete,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ModulePermission":
        return cls(
            module_code=data["module_code"],
            can_view=bool(data.get("can_view")),
            can_create=bool(data.get("can_create")),
            can_edit=bool(data.get("can_edit")),
            can_delete=bool(data.get("can_delete")),
        )


@dataclass(frozen=True)
class SystemAdmin:
    """Role that is allowed every capability on every module.

    ``permissions`` is informational only; the guard never consults it.
    """

    name: str
    permissions: tuple[ModulePermission, ...] = ()
    kind = RoleKind.SYSTEM_ADMIN


@dataclass(frozen=True)
class Scoped:
    """Role governed exclusively by its module permission rows.

    An employee without a role resolves to ``Scoped(name=None)`` with no
    permissions.
    """

    name: str | None = None
    permissions: tuple[ModulePermission, ...] = ()
    kind = RoleKind.SCOPED


RoleAccess = SystemAdmin | Scoped


def role_access_from_dict(data: dict[str, Any]) -> RoleAccess:
    permissions = tuple(
        ModulePermission.from_dict(entry) for entry in data.get("permissions", [])
    )
    if data.get("role_kind") == RoleKind.SYSTEM_ADMIN.value:
        return SystemAdmin(name=data["role_name"], permissions=permissions)
    return Scoped(name=data.get("role_name"), permissions=permissions)


@dataclass(frozen=True)
class SessionSnapshot:
    """Identity and effective permissions frozen at login.

    The snapshot is not live: role or permission changes made after login
    only take effect once the employee logs in again.
    """

    employee_id: uuid.UUID
    username: str
    first_name: str
    last_name: str
    role_id: uuid.UUID | None
    role: RoleAccess = field(default_factory=Scoped)

    @property
    def role_name(self) -> str | None:
        return self.role.name

    @property
    def permissions(self) -> tuple[ModulePermission, ...]:
        return self.role.permissions

    @property
    def is_system_admin(self) -> bool:
        return isinstance(self.role, SystemAdmin)

    def permission_for(self, module_code: str) -> ModulePermission | None:
        for permission in self.permissions:
            if permission.module_code == module_code:
                return permission
        return None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict for the session record."""
        return {
            "employee_id": str(self.employee_id),
            "username": self.username,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "role_id": str(self.role_id) if self.role_id else None,
            "role_name": self.role_name,
            "role_kind": self.role.kind.value,
            "permissions": [p.to_dict() for p in self.permissions],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SessionSnapshot":
        role_id = data.get("role_id")
        return cls(
            employee_id=uuid.UUID(data["employee_id"]),
            username=data["username"],
            first_name=data["first_name"],
            last_name=data["last_name"],
            role_id=uuid.UUID(role_id) if role_id else None,
            role=role_access_from_dict(data),
        )
