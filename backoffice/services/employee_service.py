# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Employee management."""

import logging
import uuid

from backoffice.exceptions import (
    ConflictError,
    ForbiddenError,
    InvalidInputError,
    NotFoundError,
)
from backoffice.models import Employee, Role
from backoffice.rbac.snapshot import SessionSnapshot
from backoffice.security import get_password_hash, verify_password
from backoffice.services import credential_service
from backoffice.store import RecordStore

logger = logging.getLogger(__name__)


def list_employees(store: RecordStore, include_inactive: bool = True) -> list[Employee]:
    criteria = {} if include_inactive else {"is_active": True}
    return sorted(store.find(Employee, **criteria), key=lambda e: e.username)


def get_employee(store: RecordStore, employee_id: uuid.UUID) -> Employee:
    """Get an employee or raise NotFoundError."""
    employee = store.get(Employee, employee_id)
    if employee is None:
        raise NotFoundError("Employee not found")
    return employee


def create_employee(
    store: RecordStore,
    username: str,
    password: str,
    first_name: str,
    last_name: str,
    role_id: uuid.UUID | None = None,
    position: str | None = None,
) -> Employee:
    """Create an employee with login credentials."""
    if not username or not password or not first_name or not last_name:
        raise InvalidInputError(
            "Username, password, first name and last name are required"
        )
    if store.first(Employee, username=username) is not None:
        raise ConflictError("Username already exists")
    if role_id is not None and store.get(Role, role_id) is None:
        raise NotFoundError("Role not found")

    employee = store.insert(
        Employee(
            username=username,
            password_hash=get_password_hash(password),
            first_name=first_name,
            last_name=last_name,
            position=position,
            role_id=role_id,
            is_active=True,
        )
    )
    logger.info(f"Created employee {employee.username}")
    return employee


def change_password(
    store: RecordStore,
    actor: SessionSnapshot,
    employee_id: uuid.UUID,
    new_password: str,
    current_password: str | None = None,
) -> Employee:
    """Change an employee's password.

    Employees may change their own password by proving the current one.
    System administrators may change anyone's password without it.
    """
    if not actor.is_system_admin and actor.employee_id != employee_id:
        raise ForbiddenError("You can only change your own password")
    if not new_password:
        raise InvalidInputError("New password is required")

    employee = get_employee(store, employee_id)
    if not actor.is_system_admin:
        if not current_password:
            raise InvalidInputError("Current password is required")
        if not employee.password_hash or not verify_password(
            current_password, employee.password_hash
        ):
            raise InvalidInputError("Current password is incorrect")

    employee = credential_service.set_password(store, employee, new_password)
    logger.info(f"Password changed for employee {employee.username}")
    return employee


def set_active(store: RecordStore, employee_id: uuid.UUID, is_active: bool) -> Employee:
    """Activate or deactivate an employee. Employees are never hard-deleted."""
    employee = get_employee(store, employee_id)
    employee = store.update(employee, is_active=is_active)
    logger.info(
        f"Employee {employee.username} {'activated' if is_active else 'deactivated'}"
    )
    return employee


def assign_role(
    store: RecordStore, employee_id: uuid.UUID, role_id: uuid.UUID | None
) -> Employee:
    """Assign a role (or none). Open sessions keep their old snapshot."""
    employee = get_employee(store, employee_id)
    if role_id is not None and store.get(Role, role_id) is None:
        raise NotFoundError("Role not found")
    return store.update(employee, role_id=role_id)
