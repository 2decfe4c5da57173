# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Role, module and permission schemas."""
import uuid

from pydantic import BaseModel, ConfigDict, Field

from backoffice.models.enums import RoleKind


class ModuleSchema(BaseModel):
    """Schema representing a business module."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    code: str
    name: str
    description: str | None = None
    route: str | None = None
    sort_order: int
    is_active: bool


class ModuleStatusUpdate(BaseModel):
    is_active: bool


class RoleSchema(BaseModel):
    """Schema representing a role."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    description: str | None = None
    is_system: bool
    kind: RoleKind


class RolePermissionSchema(BaseModel):
    """Capabilities of a role on one module."""

    module_id: uuid.UUID
    module_code: str
    can_view: bool = False
    can_create: bool = False
    can_edit: bool = False
    can_delete: bool = False


class RoleWithPermissionsSchema(RoleSchema):
    """Schema representing a role along with its permissions."""

    permissions: list[RolePermissionSchema]


class RoleCreateSchema(BaseModel):
    """Schema for creating a new role. API-created roles are always scoped."""

    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = None


class RoleUpdateSchema(BaseModel):
    """Schema for updating a role."""

    name: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = None


class PermissionGrantSchema(BaseModel):
    module_id: uuid.UUID
    can_view: bool = False
    can_create: bool = False
    can_edit: bool = False
    can_delete: bool = False


class RolePermissionsUpdate(BaseModel):
    """Replaces the whole permission matrix of a role."""

    permissions: list[PermissionGrantSchema]
