# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Tests for rbac_service."""

import uuid

import pytest

from backoffice.exceptions import ConflictError, InvalidInputError, NotFoundError
from backoffice.models import Module, Role, RoleKind, RoleModulePermission
from backoffice.rbac.modules import DEFAULT_MODULES
from backoffice.rbac.snapshot import Capability, ModulePermission, Scoped, SystemAdmin
from backoffice.services import rbac_service
from backoffice.services.rbac_service import PermissionGrant


def module_id(store, code: str) -> uuid.UUID:
    return rbac_service.get_module_by_code(store, code).id


class TestSeedDefaults:
    def test_seeds_modules_and_roles(self, seeded_store):
        assert seeded_store.count(Module) == len(DEFAULT_MODULES)
        names = {role.name for role in rbac_service.list_roles(seeded_store)}
        assert {"admin", "sales", "cashier", "warehouse"} <= names

    def test_admin_role_is_system_admin_kind(self, seeded_store):
        admin = rbac_service.get_role_by_name(seeded_store, "admin")
        assert admin.kind == RoleKind.SYSTEM_ADMIN
        assert admin.is_system is True

    def test_is_idempotent(self, seeded_store):
        roles_before = seeded_store.count(Role)
        rows_before = seeded_store.count(RoleModulePermission)

        rbac_service.seed_defaults(seeded_store)

        assert seeded_store.count(Module) == len(DEFAULT_MODULES)
        assert seeded_store.count(Role) == roles_before
        assert seeded_store.count(RoleModulePermission) == rows_before

    def test_keeps_admin_changes(self, seeded_store):
        sales = rbac_service.get_role_by_name(seeded_store, "sales")
        rbac_service.set_role_permissions(seeded_store, sales.id, [])

        rbac_service.seed_defaults(seeded_store)

        assert rbac_service.get_role_permissions(seeded_store, sales.id) == []

    def test_modules_listed_in_sort_order(self, seeded_store):
        codes = [module.code for module in rbac_service.list_modules(seeded_store)]
        assert codes == [module["code"] for module in DEFAULT_MODULES]


class TestResolveRole:
    def test_no_role_resolves_to_empty_scoped(self, memory_store):
        assert rbac_service.resolve_role(memory_store, None) == Scoped()

    def test_dangling_role_resolves_to_empty_scoped(self, memory_store):
        assert rbac_service.resolve_role(memory_store, uuid.uuid4()) == Scoped()

    def test_system_admin_variant(self, seeded_store):
        admin = rbac_service.get_role_by_name(seeded_store, "admin")

        access = rbac_service.resolve_role(seeded_store, admin.id)

        assert isinstance(access, SystemAdmin)
        assert access.name == "admin"

    def test_scoped_role_flattens_permissions(self, seeded_store):
        role = rbac_service.create_role(seeded_store, "auditor")
        rbac_service.set_role_permissions(
            seeded_store,
            role.id,
            [
                PermissionGrant(module_id(seeded_store, "sales"), can_view=True),
                PermissionGrant(
                    module_id(seeded_store, "products"), can_view=True, can_edit=True
                ),
            ],
        )

        access = rbac_service.resolve_role(seeded_store, role.id)

        assert isinstance(access, Scoped)
        assert access.name == "auditor"
        assert access.permissions == (
            ModulePermission("products", can_view=True, can_edit=True),
            ModulePermission("sales", can_view=True),
        )

    def test_null_flags_read_as_false(self, seeded_store):
        role = rbac_service.create_role(seeded_store, "auditor")
        seeded_store.insert(
            RoleModulePermission(
                role_id=role.id,
                module_id=module_id(seeded_store, "clients"),
                can_view=True,
                can_create=None,
                can_edit=None,
                can_delete=None,
            )
        )
        # The fake store fills unset columns with their defaults; force nulls
        row = seeded_store.first(RoleModulePermission, role_id=role.id)
        seeded_store.update(row, can_create=None, can_edit=None, can_delete=None)

        (permission,) = rbac_service.resolve_role(seeded_store, role.id).permissions

        assert permission.allows(Capability.VIEW)
        assert permission.can_create is False
        assert permission.can_edit is False
        assert permission.can_delete is False


class TestRoleManagement:
    def test_create_role_defaults_to_scoped(self, memory_store):
        role = rbac_service.create_role(memory_store, "  auditor  ")

        assert role.name == "auditor"
        assert role.kind == RoleKind.SCOPED
        assert role.is_system is False

    def test_create_role_rejects_blank_name(self, memory_store):
        with pytest.raises(InvalidInputError):
            rbac_service.create_role(memory_store, "   ")

    def test_create_role_rejects_duplicate(self, memory_store):
        rbac_service.create_role(memory_store, "auditor")
        with pytest.raises(ConflictError):
            rbac_service.create_role(memory_store, "auditor")

    def test_update_role(self, memory_store):
        role = rbac_service.create_role(memory_store, "auditor")

        updated = rbac_service.update_role(
            memory_store, role.id, name="controller", description="Reads everything"
        )

        assert updated.name == "controller"
        assert updated.description == "Reads everything"

    def test_update_role_rename_conflict(self, memory_store):
        rbac_service.create_role(memory_store, "auditor")
        role = rbac_service.create_role(memory_store, "controller")

        with pytest.raises(ConflictError):
            rbac_service.update_role(memory_store, role.id, name="auditor")

    def test_get_unknown_role(self, memory_store):
        with pytest.raises(NotFoundError):
            rbac_service.get_role(memory_store, uuid.uuid4())

    def test_system_role_cannot_be_deleted(self, seeded_store):
        admin = rbac_service.get_role_by_name(seeded_store, "admin")

        with pytest.raises(ConflictError):
            rbac_service.delete_role(seeded_store, admin.id)

        assert rbac_service.get_role(seeded_store, admin.id) is admin

    def test_delete_role_unassigns_employees(self, seeded_store, employee_factory):
        sales = rbac_service.get_role_by_name(seeded_store, "sales")
        employee = employee_factory(seeded_store, role_id=sales.id)

        rbac_service.delete_role(seeded_store, sales.id)

        assert employee.role_id is None
        assert rbac_service.get_role_by_name(seeded_store, "sales") is None
        assert seeded_store.count(RoleModulePermission, role_id=sales.id) == 0


class TestSetRolePermissions:
    def test_replaces_whole_matrix(self, seeded_store):
        sales = rbac_service.get_role_by_name(seeded_store, "sales")

        rows = rbac_service.set_role_permissions(
            seeded_store,
            sales.id,
            [PermissionGrant(module_id(seeded_store, "reports"), can_view=True)],
        )

        assert len(rows) == 1
        assert rbac_service.get_role_permissions(seeded_store, sales.id) == rows

    def test_one_row_per_module(self, seeded_store):
        role = rbac_service.create_role(seeded_store, "auditor")
        reports = module_id(seeded_store, "reports")

        rbac_service.set_role_permissions(
            seeded_store,
            role.id,
            [
                PermissionGrant(reports, can_view=True),
                PermissionGrant(reports, can_view=True, can_create=True),
            ],
        )

        (row,) = rbac_service.get_role_permissions(seeded_store, role.id)
        assert row.can_create is True

    def test_unknown_module(self, seeded_store):
        role = rbac_service.create_role(seeded_store, "auditor")

        with pytest.raises(NotFoundError):
            rbac_service.set_role_permissions(
                seeded_store, role.id, [PermissionGrant(uuid.uuid4(), can_view=True)]
            )


def test_set_module_status(seeded_store):
    module = rbac_service.get_module_by_code(seeded_store, "loyalty")

    rbac_service.set_module_status(seeded_store, module.id, False)

    assert module.is_active is False


def test_set_module_status_unknown(memory_store):
    with pytest.raises(NotFoundError):
        rbac_service.set_module_status(memory_store, uuid.uuid4(), False)
