# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Role model."""

from __future__ import annotations

import uuid as uuid_lib
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, Enum, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from backoffice.models.base import Base, TimestampMixin
from backoffice.models.enums import RoleKind

if TYPE_CHECKING:
    from backoffice.models.employee import Employee
    from backoffice.models.role_module_permission import RoleModulePermission


class Role(Base, TimestampMixin):
    """A named role shared by many employees."""

    __tablename__ = "roles"

    id: Mapped[uuid_lib.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid_lib.uuid4,
    )
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    # System roles cannot be deleted through the role service
    is_system: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    kind: Mapped[RoleKind] = mapped_column(
        Enum(RoleKind, native_enum=False, length=20),
        default=RoleKind.SCOPED,
        nullable=False,
    )

    permissions: Mapped[list[RoleModulePermission]] = relationship(
        "RoleModulePermission", back_populates="role", cascade="all, delete-orphan"
    )
    employees: Mapped[list[Employee]] = relationship(
        "Employee", back_populates="role"
    )

    @property
    def is_system_admin(self) -> bool:
        return self.kind == RoleKind.SYSTEM_ADMIN
