# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Tests for the SQLAlchemy-backed record store."""

import pytest

from backoffice.exceptions import ConflictError
from backoffice.models import Employee, Role, RoleModulePermission
from backoffice.security import get_password_hash
from backoffice.services import rbac_service
from backoffice.services.rbac_service import PermissionGrant


def new_employee(username: str = "ana") -> Employee:
    return Employee(
        username=username,
        password_hash=get_password_hash("secret123"),
        first_name="Ana",
        last_name="Test",
        is_active=True,
    )


class TestConstraintViolations:
    def test_duplicate_username_raises_conflict(self, db_store):
        db_store.insert(new_employee("ana"))

        with pytest.raises(ConflictError):
            db_store.insert(new_employee("ana"))

    def test_store_usable_after_conflict(self, db_store):
        db_store.insert(new_employee("ana"))
        with pytest.raises(ConflictError):
            db_store.insert(new_employee("ana"))

        db_store.insert(new_employee("bruno"))

        assert db_store.count(Employee, username="ana") == 1
        assert db_store.count(Employee) == 2

    def test_duplicate_inside_transaction_rolls_back(self, db_store):
        with pytest.raises(ConflictError):
            with db_store.transaction():
                db_store.insert(new_employee("ana"))
                db_store.insert(new_employee("ana"))

        assert db_store.count(Employee) == 0


class TestTransaction:
    def test_commits_all_writes(self, db_store):
        with db_store.transaction():
            db_store.insert(Role(name="auditor"))
            db_store.insert(Role(name="trainee"))

        db_store.db.rollback()
        assert rbac_service.get_role_by_name(db_store, "auditor") is not None
        assert rbac_service.get_role_by_name(db_store, "trainee") is not None

    def test_error_rolls_back_every_write(self, db_store):
        with pytest.raises(RuntimeError):
            with db_store.transaction():
                db_store.insert(Role(name="auditor"))
                raise RuntimeError("boom")

        assert rbac_service.get_role_by_name(db_store, "auditor") is None

    def test_nested_transaction_joins_outer(self, db_store):
        with pytest.raises(RuntimeError):
            with db_store.transaction():
                with db_store.transaction():
                    db_store.insert(Role(name="auditor"))
                raise RuntimeError("boom")

        assert rbac_service.get_role_by_name(db_store, "auditor") is None


def test_set_role_permissions_is_all_or_nothing(db_store, monkeypatch):
    sales = rbac_service.get_role_by_name(db_store, "sales")
    rows_before = db_store.count(RoleModulePermission, role_id=sales.id)
    modules = rbac_service.list_modules(db_store)[:2]
    insert = db_store.insert
    calls = []

    def failing_insert(record):
        calls.append(record)
        if len(calls) == 2:
            raise ConflictError()
        return insert(record)

    monkeypatch.setattr(db_store, "insert", failing_insert)

    with pytest.raises(ConflictError):
        rbac_service.set_role_permissions(
            db_store,
            sales.id,
            [PermissionGrant(module.id, can_view=True) for module in modules],
        )

    assert rows_before > 0
    assert db_store.count(RoleModulePermission, role_id=sales.id) == rows_before


def test_delete_role_is_all_or_nothing(db_store, monkeypatch):
    role = rbac_service.create_role(db_store, "auditor")
    employee = new_employee("ana")
    employee.role_id = role.id
    db_store.insert(employee)
    delete = db_store.delete

    def failing_delete(record):
        if isinstance(record, Role):
            raise ConflictError()
        delete(record)

    monkeypatch.setattr(db_store, "delete", failing_delete)

    with pytest.raises(ConflictError):
        rbac_service.delete_role(db_store, role.id)

    assert db_store.first(Employee, username="ana").role_id == role.id
