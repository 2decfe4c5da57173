# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Authentication and session schemas."""
import uuid

from pydantic import BaseModel, Field

from backoffice.models.enums import RoleKind
from backoffice.rbac.snapshot import SessionSnapshot


class LoginRequest(BaseModel):
    """Login credentials."""

    username: str = Field(..., min_length=1, max_length=50)
    password: str = Field(..., min_length=1)


class ModulePermissionSchema(BaseModel):
    """Capabilities on one module."""

    module_code: str
    can_view: bool = False
    can_create: bool = False
    can_edit: bool = False
    can_delete: bool = False


class EmployeePublic(BaseModel):
    """Minimal public projection returned by login."""

    id: uuid.UUID
    username: str
    first_name: str
    last_name: str
    role: str | None = None

    @classmethod
    def from_snapshot(cls, snapshot: SessionSnapshot) -> "EmployeePublic":
        return cls(
            id=snapshot.employee_id,
            username=snapshot.username,
            first_name=snapshot.first_name,
            last_name=snapshot.last_name,
            role=snapshot.role_name,
        )


class SessionEmployee(BaseModel):
    """Session snapshot as shown to its owner."""

    employee_id: uuid.UUID
    username: str
    first_name: str
    last_name: str
    role_id: uuid.UUID | None = None
    role_name: str | None = None
    role_kind: RoleKind
    permissions: list[ModulePermissionSchema]

    @classmethod
    def from_snapshot(cls, snapshot: SessionSnapshot) -> "SessionEmployee":
        return cls(
            employee_id=snapshot.employee_id,
            username=snapshot.username,
            first_name=snapshot.first_name,
            last_name=snapshot.last_name,
            role_id=snapshot.role_id,
            role_name=snapshot.role_name,
            role_kind=snapshot.role.kind,
            permissions=[
                ModulePermissionSchema(**p.to_dict()) for p in snapshot.permissions
            ],
        )


class LoginResponse(BaseModel):
    """Successful login."""

    success: bool = True
    employee: EmployeePublic


class SessionResponse(BaseModel):
    """Session introspection; never an error."""

    authenticated: bool
    employee: SessionEmployee | None = None


class BootstrapAdminResponse(BaseModel):
    """Initial administrator credentials."""

    success: bool = True
    message: str
    employee_id: uuid.UUID
    username: str
    password: str
