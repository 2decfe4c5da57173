# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Authentication API endpoints."""

from fastapi import APIRouter, Depends, Response, status

from backoffice.api.deps import get_optional_session, get_session_token, get_store
from backoffice.config import settings
from backoffice.rbac.snapshot import SessionSnapshot
from backoffice.realtime import ChangeTopic, change_bus
from backoffice.schemas.auth import (
    BootstrapAdminResponse,
    EmployeePublic,
    LoginRequest,
    LoginResponse,
    SessionEmployee,
    SessionResponse,
)
from backoffice.schemas.common import SuccessResponse
from backoffice.services import session_service
from backoffice.store import RecordStore

router = APIRouter()


def _set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
        max_age=settings.session_max_age,
    )


@router.get("/session", response_model=SessionResponse)
def get_session(
    snapshot: SessionSnapshot | None = Depends(get_optional_session),
) -> SessionResponse:
    """Describe the current session. Never fails."""
    if snapshot is None:
        return SessionResponse(authenticated=False)
    return SessionResponse(
        authenticated=True, employee=SessionEmployee.from_snapshot(snapshot)
    )


@router.post("/login", response_model=LoginResponse)
def login(
    data: LoginRequest,
    response: Response,
    store: RecordStore = Depends(get_store),
) -> LoginResponse:
    """Login with username and password."""
    result = session_service.login(store, data.username, data.password)
    _set_session_cookie(response, result.token)
    return LoginResponse(employee=EmployeePublic.from_snapshot(result.snapshot))


@router.post("/logout", response_model=SuccessResponse)
def logout(
    response: Response,
    store: RecordStore = Depends(get_store),
    token: str | None = Depends(get_session_token),
) -> SuccessResponse:
    """Logout. Succeeds even without a session."""
    session_service.logout(store, token)
    response.delete_cookie(key=settings.session_cookie_name)
    return SuccessResponse()


@router.post(
    "/bootstrap-admin",
    response_model=BootstrapAdminResponse,
    status_code=status.HTTP_201_CREATED,
)
def bootstrap_admin(store: RecordStore = Depends(get_store)) -> BootstrapAdminResponse:
    """Create the first administrator while no employee exists."""
    credentials = session_service.bootstrap_admin(store)
    change_bus.publish(ChangeTopic.STAFF_MEMBERS)
    return BootstrapAdminResponse(
        message="Administrator created. Change the password after logging in.",
        employee_id=credentials.employee_id,
        username=credentials.username,
        password=credentials.password,
    )
