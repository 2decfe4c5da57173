# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Role resolution and role/module administration."""

import logging
import uuid
from collections.abc import Iterable
from dataclasses import dataclass

from backoffice.exceptions import ConflictError, InvalidInputError, NotFoundError
from backoffice.models import Employee, Module, Role, RoleKind, RoleModulePermission
from backoffice.rbac.modules import DEFAULT_MODULES
from backoffice.rbac.roles import DEFAULT_ROLES
from backoffice.rbac.snapshot import ModulePermission, RoleAccess, Scoped, SystemAdmin
from backoffice.store import RecordStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PermissionGrant:
    """Capabilities to grant a role on one module."""

    module_id: uuid.UUID
    can_view: bool = False
    can_create: bool = False
    can_edit: bool = False
    can_delete: bool = False


def resolve_role(store: RecordStore, role_id: uuid.UUID | None) -> RoleAccess:
    """Build the effective access of a role.

    No role (or a role that no longer exists) resolves to a scoped role with
    no permissions. Null capability flags are read as False.
    """
    if role_id is None:
        return Scoped()
    role = store.get(Role, role_id)
    if role is None:
        return Scoped()

    permissions = []
    for row in store.find(RoleModulePermission, role_id=role.id):
        module = store.get(Module, row.module_id)
        if module is None:
            continue
        permissions.append(
            ModulePermission(
                module_code=module.code,
                can_view=bool(row.can_view),
                can_create=bool(row.can_create),
                can_edit=bool(row.can_edit),
                can_delete=bool(row.can_delete),
            )
        )
    permissions.sort(key=lambda p: p.module_code)

    if role.kind == RoleKind.SYSTEM_ADMIN:
        return SystemAdmin(name=role.name, permissions=tuple(permissions))
    return Scoped(name=role.name, permissions=tuple(permissions))


def get_role(store: RecordStore, role_id: uuid.UUID) -> Role:
    """Get a role or raise NotFoundError."""
    role = store.get(Role, role_id)
    if role is None:
        raise NotFoundError("Role not found")
    return role


def get_role_by_name(store: RecordStore, name: str) -> Role | None:
    """Get a role by its name."""
    return store.first(Role, name=name)


def list_roles(store: RecordStore) -> list[Role]:
    return sorted(store.find(Role), key=lambda role: role.name)


def create_role(
    store: RecordStore,
    name: str,
    description: str | None = None,
    kind: RoleKind = RoleKind.SCOPED,
    is_system: bool = False,
) -> Role:
    """Create a role. Names are unique."""
    name = name.strip()
    if not name:
        raise InvalidInputError("Role name is required")
    if get_role_by_name(store, name):
        raise ConflictError("Role with this name already exists")
    role = Role(name=name, description=description, kind=kind, is_system=is_system)
    return store.insert(role)


def update_role(
    store: RecordStore,
    role_id: uuid.UUID,
    name: str | None = None,
    description: str | None = None,
) -> Role:
    """Rename a role or change its description."""
    role = get_role(store, role_id)
    changes = {}
    if name is not None and name.strip() != role.name:
        name = name.strip()
        if not name:
            raise InvalidInputError("Role name is required")
        if get_role_by_name(store, name):
            raise ConflictError("Role with this name already exists")
        changes["name"] = name
    if description is not None:
        changes["description"] = description
    if not changes:
        return role
    return store.update(role, **changes)


def delete_role(store: RecordStore, role_id: uuid.UUID) -> None:
    """Delete a non-system role, unassigning it from its employees."""
    role = get_role(store, role_id)
    if role.is_system:
        raise ConflictError("System roles cannot be deleted")

    role_name = role.name
    with store.transaction():
        for employee in store.find(Employee, role_id=role.id):
            store.update(employee, role_id=None)
        for row in store.find(RoleModulePermission, role_id=role.id):
            store.delete(row)
        store.delete(role)
    logger.info(f"Deleted role {role_name}")


def get_role_permissions(
    store: RecordStore, role_id: uuid.UUID
) -> list[RoleModulePermission]:
    get_role(store, role_id)
    return store.find(RoleModulePermission, role_id=role_id)


def set_role_permissions(
    store: RecordStore, role_id: uuid.UUID, grants: Iterable[PermissionGrant]
) -> list[RoleModulePermission]:
    """Replace the whole permission matrix of a role.

    Later grants for the same module win, so at most one row per
    (role, module) pair is written.
    """
    role = get_role(store, role_id)

    by_module: dict[uuid.UUID, PermissionGrant] = {}
    for grant in grants:
        if store.get(Module, grant.module_id) is None:
            raise NotFoundError(f"Module {grant.module_id} not found")
        by_module[grant.module_id] = grant

    rows = []
    with store.transaction():
        for row in store.find(RoleModulePermission, role_id=role.id):
            store.delete(row)
        for grant in by_module.values():
            rows.append(
                store.insert(
                    RoleModulePermission(
                        role_id=role.id,
                        module_id=grant.module_id,
                        can_view=grant.can_view,
                        can_create=grant.can_create,
                        can_edit=grant.can_edit,
                        can_delete=grant.can_delete,
                    )
                )
            )
    logger.info(f"Replaced permissions of role {role.name} ({len(rows)} modules)")
    return rows


def list_modules(store: RecordStore) -> list[Module]:
    return sorted(store.find(Module), key=lambda module: module.sort_order)


def get_module_by_code(store: RecordStore, code: str) -> Module | None:
    return store.first(Module, code=code)


def set_module_status(store: RecordStore, module_id: uuid.UUID, is_active: bool) -> Module:
    module = store.get(Module, module_id)
    if module is None:
        raise NotFoundError("Module not found")
    return store.update(module, is_active=is_active)


def seed_defaults(store: RecordStore) -> None:
    """Seed default modules and roles.

    This function is idempotent: existing modules and roles are left as
    they are, including any permissions an admin changed.
    """
    for position, module_data in enumerate(DEFAULT_MODULES):
        if get_module_by_code(store, module_data["code"]) is None:
            store.insert(
                Module(
                    code=module_data["code"],
                    name=module_data["name"],
                    description=module_data.get("description"),
                    route=module_data.get("route"),
                    sort_order=position,
                    is_active=True,
                )
            )

    for role_data in DEFAULT_ROLES:
        if get_role_by_name(store, role_data["name"]) is not None:
            continue
        role = create_role(
            store,
            role_data["name"],
            description=role_data["description"],
            kind=role_data["kind"],
            is_system=role_data["is_system"],
        )
        grants = []
        for code, flags in role_data["permissions"].items():
            module = get_module_by_code(store, code)
            if module:
                grants.append(PermissionGrant(module_id=module.id, **flags))
        if grants:
            set_role_permissions(store, role.id, grants)
        logger.info(f"Seeded role {role.name}")
