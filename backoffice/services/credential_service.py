# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Employee credential lookup and verification."""

from functools import lru_cache

from backoffice.exceptions import InvalidCredentialsError
from backoffice.models import Employee
from backoffice.security import get_password_hash, verify_password
from backoffice.store import RecordStore


@lru_cache(maxsize=1)
def _dummy_hash() -> str:
    return get_password_hash("not-a-real-password")


def verify(store: RecordStore, username: str, password: str) -> Employee:
    """Return the active employee matching the credentials.

    Unknown usernames, inactive employees, employees without credentials and
    wrong passwords all raise the same InvalidCredentialsError. A hash is
    still compared when no candidate exists so response timing stays uniform.
    """
    employee = store.first(Employee, username=username, is_active=True)
    if employee is None or not employee.password_hash:
        verify_password(password, _dummy_hash())
        raise InvalidCredentialsError()
    if not verify_password(password, employee.password_hash):
        raise InvalidCredentialsError()
    return employee


def get_employee_by_username(store: RecordStore, username: str) -> Employee | None:
    """Get an employee by username, active or not."""
    return store.first(Employee, username=username)


def set_password(store: RecordStore, employee: Employee, password: str) -> Employee:
    """Replace an employee's password digest."""
    return store.update(employee, password_hash=get_password_hash(password))
