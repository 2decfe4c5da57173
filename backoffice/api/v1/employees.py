# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Employee management API endpoints."""

import uuid

from fastapi import APIRouter, Depends, status

from backoffice.api.deps import (
    get_store,
    require_permission,
    require_session,
    require_system_admin,
)
from backoffice.rbac.snapshot import Capability, SessionSnapshot
from backoffice.realtime import ChangeTopic, change_bus
from backoffice.schemas.common import SuccessResponse
from backoffice.schemas.employee import (
    EmployeeCreate,
    EmployeeResponse,
    EmployeeRoleUpdate,
    EmployeeStatusUpdate,
    PasswordChange,
)
from backoffice.services import employee_service
from backoffice.store import RecordStore

router = APIRouter()


@router.get("", response_model=list[EmployeeResponse])
def list_employees(
    include_inactive: bool = True,
    store: RecordStore = Depends(get_store),
    _: SessionSnapshot = Depends(require_permission("staff", Capability.VIEW)),
):
    """List employees, optionally only the active ones."""
    return employee_service.list_employees(store, include_inactive=include_inactive)


@router.post("", response_model=EmployeeResponse, status_code=status.HTTP_201_CREATED)
def create_employee(
    data: EmployeeCreate,
    store: RecordStore = Depends(get_store),
    _: SessionSnapshot = Depends(require_system_admin),
):
    """Create an employee with login credentials. Administrators only."""
    employee = employee_service.create_employee(
        store,
        username=data.username,
        password=data.password,
        first_name=data.first_name,
        last_name=data.last_name,
        role_id=data.role_id,
        position=data.position,
    )
    change_bus.publish(ChangeTopic.STAFF_MEMBERS, {"id": employee.id})
    return employee


@router.get("/{employee_id}", response_model=EmployeeResponse)
def get_employee(
    employee_id: uuid.UUID,
    store: RecordStore = Depends(get_store),
    _: SessionSnapshot = Depends(require_permission("staff", Capability.VIEW)),
):
    return employee_service.get_employee(store, employee_id)


@router.put("/{employee_id}/password", response_model=SuccessResponse)
def change_password(
    employee_id: uuid.UUID,
    data: PasswordChange,
    store: RecordStore = Depends(get_store),
    snapshot: SessionSnapshot = Depends(require_session),
) -> SuccessResponse:
    """Change a password.

    Employees change their own password by providing the current one;
    administrators may reset any password without it.
    """
    employee_service.change_password(
        store,
        snapshot,
        employee_id,
        new_password=data.new_password,
        current_password=data.current_password,
    )
    return SuccessResponse(message="Password updated")


@router.put("/{employee_id}/status", response_model=EmployeeResponse)
def set_employee_status(
    employee_id: uuid.UUID,
    data: EmployeeStatusUpdate,
    store: RecordStore = Depends(get_store),
    _: SessionSnapshot = Depends(require_system_admin),
):
    """Activate or deactivate an employee."""
    employee = employee_service.set_active(store, employee_id, data.is_active)
    change_bus.publish(ChangeTopic.STAFF_MEMBERS, {"id": employee.id})
    return employee


@router.put("/{employee_id}/role", response_model=EmployeeResponse)
def assign_employee_role(
    employee_id: uuid.UUID,
    data: EmployeeRoleUpdate,
    store: RecordStore = Depends(get_store),
    _: SessionSnapshot = Depends(require_system_admin),
):
    """Assign a role. Takes effect at the employee's next login."""
    employee = employee_service.assign_role(store, employee_id, data.role_id)
    change_bus.publish(ChangeTopic.STAFF_MEMBERS, {"id": employee.id})
    return employee
