# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Employee login sessions.

A session stores a snapshot of the employee's identity and resolved
permissions taken at login. The snapshot is deliberately not refreshed:
changing a role's permissions, or the role assigned to an employee, has no
effect on sessions that are already open. The employee has to log out and
back in before the change applies.
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta

from backoffice.config import settings
from backoffice.exceptions import ConflictError, InvalidCredentialsError
from backoffice.models import Employee, EmployeeSession, RoleKind
from backoffice.models.base import utcnow
from backoffice.rbac.roles import ADMIN_ROLE
from backoffice.rbac.snapshot import SessionSnapshot
from backoffice.security import get_password_hash
from backoffice.services import credential_service, rbac_service
from backoffice.store import RecordStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoginResult:
    """Opaque session token plus the snapshot stored under it."""

    token: str
    snapshot: SessionSnapshot
    expires_at: datetime


@dataclass(frozen=True)
class AdminCredentials:
    """Initial credentials of the bootstrapped administrator."""

    employee_id: uuid.UUID
    username: str
    password: str


def build_snapshot(store: RecordStore, employee: Employee) -> SessionSnapshot:
    """Resolve an employee's role into a session snapshot."""
    return SessionSnapshot(
        employee_id=employee.id,
        username=employee.username,
        first_name=employee.first_name,
        last_name=employee.last_name,
        role_id=employee.role_id,
        role=rbac_service.resolve_role(store, employee.role_id),
    )


def login(
    store: RecordStore,
    username: str,
    password: str,
    now: datetime | None = None,
) -> LoginResult:
    """Authenticate an employee and open a session.

    Raises InvalidCredentialsError without saying which check failed.
    """
    try:
        employee = credential_service.verify(store, username, password)
    except InvalidCredentialsError:
        logger.info("Failed login attempt")
        raise

    snapshot = build_snapshot(store, employee)
    now = now or utcnow()
    expires_at = now + timedelta(hours=settings.session_expiry_hours)
    token = str(uuid.uuid4())

    with store.transaction():
        store.update(employee, last_login_at=now)
        store.insert(
            EmployeeSession(
                employee_id=employee.id,
                token=token,
                snapshot=snapshot.to_dict(),
                expires_at=expires_at,
                created_at=now,
            )
        )
    logger.info(f"Employee {employee.username} logged in")
    return LoginResult(token=token, snapshot=snapshot, expires_at=expires_at)


def current_session(
    store: RecordStore, token: str | None, now: datetime | None = None
) -> SessionSnapshot | None:
    """Get the snapshot of a live session.

    Expired records count as absent even before they are cleaned up. This
    never modifies the store.
    """
    if not token:
        return None
    record = store.first(EmployeeSession, token=token)
    if record is None or record.is_expired(now):
        return None
    return SessionSnapshot.from_dict(record.snapshot)


def logout(store: RecordStore, token: str | None) -> None:
    """Destroy a session. Unknown or already destroyed tokens are ignored."""
    if not token:
        return
    record = store.first(EmployeeSession, token=token)
    if record is None:
        return
    employee_id = record.employee_id
    store.delete(record)
    logger.info(f"Session closed for employee {employee_id}")


def cleanup_expired_sessions(store: RecordStore, now: datetime | None = None) -> int:
    """Delete all expired sessions. Returns count of deleted sessions."""
    now = now or utcnow()
    expired = store.find(EmployeeSession, where=lambda s: s.is_expired(now))
    for record in expired:
        store.delete(record)
    if expired:
        logger.info(f"Removed {len(expired)} expired sessions")
    return len(expired)


def bootstrap_admin(store: RecordStore) -> AdminCredentials:
    """Create the first administrator.

    Only allowed while no employee exists at all. Reuses an existing
    ``admin`` role when there is one. The returned password is the
    configured initial one and has to be changed after the first login.
    """
    if store.count(Employee) > 0:
        raise ConflictError("Employees already exist; bootstrap is not available")

    username = settings.bootstrap_admin_username
    password = settings.bootstrap_admin_password
    password_hash = get_password_hash(password)

    with store.transaction():
        role = rbac_service.get_role_by_name(store, ADMIN_ROLE["name"])
        if role is None:
            role = rbac_service.create_role(
                store,
                ADMIN_ROLE["name"],
                description=ADMIN_ROLE["description"],
                kind=RoleKind.SYSTEM_ADMIN,
                is_system=True,
            )
        elif role.kind != RoleKind.SYSTEM_ADMIN:
            role = store.update(role, kind=RoleKind.SYSTEM_ADMIN, is_system=True)
        admin = store.insert(
            Employee(
                username=username,
                password_hash=password_hash,
                first_name="System",
                last_name="Administrator",
                position="Administrator",
                is_active=True,
                role_id=role.id,
            )
        )
    logger.warning(
        f"Bootstrapped administrator '{username}'; change its password after login"
    )
    return AdminCredentials(employee_id=admin.id, username=username, password=password)
