# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""API dependencies for dependency injection."""

from collections.abc import Callable

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from backoffice.config import settings
from backoffice.database import get_db
from backoffice.rbac import guard
from backoffice.rbac.snapshot import Capability, SessionSnapshot
from backoffice.services import session_service
from backoffice.store import RecordStore, SqlAlchemyStore

__all__ = [
    "get_db",
    "get_optional_session",
    "get_session_token",
    "get_store",
    "require_permission",
    "require_session",
    "require_system_admin",
]


def get_store(db: Session = Depends(get_db)) -> RecordStore:
    """Record store bound to the request's database session."""
    return SqlAlchemyStore(db)


def get_session_token(request: Request) -> str | None:
    """Read the opaque session token from the configured cookie."""
    return request.cookies.get(settings.session_cookie_name)


def get_optional_session(
    store: RecordStore = Depends(get_store),
    token: str | None = Depends(get_session_token),
) -> SessionSnapshot | None:
    """Get the session snapshot if authenticated, otherwise return None."""
    return session_service.current_session(store, token)


def require_session(
    snapshot: SessionSnapshot | None = Depends(get_optional_session),
) -> SessionSnapshot:
    """Require any valid session."""
    return guard.check_authenticated(snapshot)


def require_system_admin(
    snapshot: SessionSnapshot | None = Depends(get_optional_session),
) -> SessionSnapshot:
    """Require a session whose role is of the system-admin kind."""
    return guard.check_system_admin(snapshot)


def require_permission(
    module_code: str, capability: Capability = Capability.VIEW
) -> Callable[..., SessionSnapshot]:
    """Dependency for module permission based authorization."""

    def dependency(
        snapshot: SessionSnapshot | None = Depends(get_optional_session),
    ) -> SessionSnapshot:
        return guard.check_permission(snapshot, module_code, capability)

    return dependency
