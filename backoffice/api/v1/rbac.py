# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Role and module administration endpoints."""

import uuid

from fastapi import APIRouter, Depends, status

from backoffice.api.deps import get_store, require_session, require_system_admin
from backoffice.models import Module, Role, RoleModulePermission
from backoffice.rbac.snapshot import SessionSnapshot
from backoffice.schemas.rbac import (
    ModuleSchema,
    ModuleStatusUpdate,
    RoleCreateSchema,
    RolePermissionSchema,
    RolePermissionsUpdate,
    RoleSchema,
    RoleUpdateSchema,
    RoleWithPermissionsSchema,
)
from backoffice.services import rbac_service
from backoffice.services.rbac_service import PermissionGrant
from backoffice.store import RecordStore

router = APIRouter()


def _permission_schemas(
    store: RecordStore, rows: list[RoleModulePermission]
) -> list[RolePermissionSchema]:
    schemas = []
    for row in rows:
        module = store.get(Module, row.module_id)
        if module is None:
            continue
        schemas.append(
            RolePermissionSchema(
                module_id=module.id,
                module_code=module.code,
                can_view=bool(row.can_view),
                can_create=bool(row.can_create),
                can_edit=bool(row.can_edit),
                can_delete=bool(row.can_delete),
            )
        )
    return sorted(schemas, key=lambda p: p.module_code)


def _role_with_permissions(store: RecordStore, role: Role) -> RoleWithPermissionsSchema:
    rows = rbac_service.get_role_permissions(store, role.id)
    return RoleWithPermissionsSchema(
        **RoleSchema.model_validate(role).model_dump(),
        permissions=_permission_schemas(store, rows),
    )


@router.get("/roles", response_model=list[RoleSchema], summary="List all roles")
def list_roles(
    store: RecordStore = Depends(get_store),
    _: SessionSnapshot = Depends(require_session),
):
    return rbac_service.list_roles(store)


@router.post(
    "/roles",
    response_model=RoleSchema,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new role",
)
def create_role(
    data: RoleCreateSchema,
    store: RecordStore = Depends(get_store),
    _: SessionSnapshot = Depends(require_system_admin),
):
    """Create a scoped role. Its permissions start empty."""
    return rbac_service.create_role(store, data.name, description=data.description)


@router.get(
    "/roles/{role_id}",
    response_model=RoleWithPermissionsSchema,
    summary="Get a role with its permissions",
)
def get_role(
    role_id: uuid.UUID,
    store: RecordStore = Depends(get_store),
    _: SessionSnapshot = Depends(require_session),
):
    role = rbac_service.get_role(store, role_id)
    return _role_with_permissions(store, role)


@router.put("/roles/{role_id}", response_model=RoleSchema, summary="Update a role")
def update_role(
    role_id: uuid.UUID,
    data: RoleUpdateSchema,
    store: RecordStore = Depends(get_store),
    _: SessionSnapshot = Depends(require_system_admin),
):
    return rbac_service.update_role(
        store, role_id, name=data.name, description=data.description
    )


@router.delete(
    "/roles/{role_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a role",
)
def delete_role(
    role_id: uuid.UUID,
    store: RecordStore = Depends(get_store),
    _: SessionSnapshot = Depends(require_system_admin),
) -> None:
    """Delete a non-system role. Its employees are left without a role."""
    rbac_service.delete_role(store, role_id)


@router.put(
    "/roles/{role_id}/permissions",
    response_model=RoleWithPermissionsSchema,
    summary="Replace the permissions of a role",
)
def set_role_permissions(
    role_id: uuid.UUID,
    data: RolePermissionsUpdate,
    store: RecordStore = Depends(get_store),
    _: SessionSnapshot = Depends(require_system_admin),
):
    """Replace the permission matrix of a role.

    Open sessions keep the permissions they had at login.
    """
    rbac_service.set_role_permissions(
        store,
        role_id,
        [PermissionGrant(**entry.model_dump()) for entry in data.permissions],
    )
    return _role_with_permissions(store, rbac_service.get_role(store, role_id))


@router.get("/modules", response_model=list[ModuleSchema], summary="List modules")
def list_modules(
    store: RecordStore = Depends(get_store),
    _: SessionSnapshot = Depends(require_session),
):
    return rbac_service.list_modules(store)


@router.put(
    "/modules/{module_id}/status",
    response_model=ModuleSchema,
    summary="Enable or disable a module",
)
def set_module_status(
    module_id: uuid.UUID,
    data: ModuleStatusUpdate,
    store: RecordStore = Depends(get_store),
    _: SessionSnapshot = Depends(require_system_admin),
):
    return rbac_service.set_module_status(store, module_id, data.is_active)
