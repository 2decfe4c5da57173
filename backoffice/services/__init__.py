# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Services package."""
from backoffice.services import (
    credential_service,
    employee_service,
    rbac_service,
    session_service,
)

__all__ = [
    "credential_service",
    "employee_service",
    "rbac_service",
    "session_service",
]
