# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Tests for credential_service."""

import pytest

from backoffice.exceptions import InvalidCredentialsError
from backoffice.models import Employee
from backoffice.security import verify_password
from backoffice.services import credential_service


def test_verify_returns_active_employee(memory_store, employee_factory):
    employee = employee_factory(memory_store, username="ana", password="secret123")

    assert credential_service.verify(memory_store, "ana", "secret123") is employee


def test_verify_wrong_password(memory_store, employee_factory):
    employee_factory(memory_store, username="ana", password="secret123")

    with pytest.raises(InvalidCredentialsError):
        credential_service.verify(memory_store, "ana", "wrong")


def test_verify_unknown_username(memory_store):
    with pytest.raises(InvalidCredentialsError):
        credential_service.verify(memory_store, "nobody", "secret123")


def test_verify_inactive_employee_fails_with_correct_password(
    memory_store, employee_factory
):
    employee_factory(memory_store, username="ana", password="secret123", is_active=False)

    with pytest.raises(InvalidCredentialsError):
        credential_service.verify(memory_store, "ana", "secret123")


def test_verify_employee_without_credentials(memory_store, employee_factory):
    employee_factory(memory_store, username="ana", password=None)

    with pytest.raises(InvalidCredentialsError):
        credential_service.verify(memory_store, "ana", "")


def test_all_failures_share_one_message(memory_store, employee_factory):
    employee_factory(memory_store, username="ana", password="secret123")
    employee_factory(memory_store, username="old", password="secret123", is_active=False)

    messages = set()
    for username, password in [
        ("ana", "wrong"),
        ("nobody", "secret123"),
        ("old", "secret123"),
    ]:
        with pytest.raises(InvalidCredentialsError) as exc_info:
            credential_service.verify(memory_store, username, password)
        messages.add(exc_info.value.message)

    assert messages == {"Incorrect username or password"}


def test_username_is_case_sensitive(memory_store, employee_factory):
    employee_factory(memory_store, username="ana", password="secret123")

    with pytest.raises(InvalidCredentialsError):
        credential_service.verify(memory_store, "ANA", "secret123")


def test_set_password_replaces_digest(memory_store, employee_factory):
    employee: Employee = employee_factory(memory_store, password="secret123")
    old_hash = employee.password_hash

    credential_service.set_password(memory_store, employee, "newpass456")

    assert employee.password_hash != old_hash
    assert verify_password("newpass456", employee.password_hash)


def test_get_employee_by_username_includes_inactive(memory_store, employee_factory):
    employee_factory(memory_store, username="old", is_active=False)

    employee = credential_service.get_employee_by_username(memory_store, "old")

    assert employee is not None
    assert employee.is_active is False


def test_verify_overlong_password_fails_cleanly(memory_store, employee_factory):
    employee_factory(memory_store, username="ana", password="secret123")

    with pytest.raises(InvalidCredentialsError):
        credential_service.verify(memory_store, "ana", "secret123" + "x" * 80)
