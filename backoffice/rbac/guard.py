# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Request-time authorization decisions over a session snapshot."""

from enum import Enum

from backoffice.exceptions import ForbiddenError, UnauthenticatedError
from backoffice.rbac.snapshot import Capability, SessionSnapshot, SystemAdmin


class Decision(str, Enum):
    """Outcome of an authorization check."""

    ALLOW = "allow"
    DENY = "deny"

    def __bool__(self) -> bool:
        return self is Decision.ALLOW


def authorize(
    snapshot: SessionSnapshot | None, module_code: str, capability: Capability
) -> Decision:
    """Decide whether a session may use ``capability`` on ``module_code``.

    System-admin roles are allowed unconditionally; every other role is
    governed only by the permission rows frozen into the snapshot.
    """
    if snapshot is None:
        return Decision.DENY
    if isinstance(snapshot.role, SystemAdmin):
        return Decision.ALLOW

    permission = snapshot.permission_for(module_code)
    if permission is not None and permission.allows(capability):
        return Decision.ALLOW
    return Decision.DENY


def require_authenticated(snapshot: SessionSnapshot | None) -> Decision:
    """Allow any existing session, regardless of role or module."""
    return Decision.ALLOW if snapshot is not None else Decision.DENY


def can_access_module(snapshot: SessionSnapshot | None, module_code: str) -> bool:
    """Whether the module should be shown at all (view capability)."""
    return bool(authorize(snapshot, module_code, Capability.VIEW))


def check_authenticated(snapshot: SessionSnapshot | None) -> SessionSnapshot:
    """Return the snapshot or raise UnauthenticatedError."""
    if not require_authenticated(snapshot):
        raise UnauthenticatedError()
    return snapshot


def check_permission(
    snapshot: SessionSnapshot | None, module_code: str, capability: Capability
) -> SessionSnapshot:
    """Return the snapshot or raise the matching authorization error.

    A missing session is reported as unauthenticated, a session without the
    capability as forbidden.
    """
    snapshot = check_authenticated(snapshot)
    if not authorize(snapshot, module_code, capability):
        raise ForbiddenError()
    return snapshot


def check_system_admin(snapshot: SessionSnapshot | None) -> SessionSnapshot:
    """Return the snapshot if it belongs to a system administrator."""
    snapshot = check_authenticated(snapshot)
    if not snapshot.is_system_admin:
        raise ForbiddenError("Only administrators can perform this action")
    return snapshot
