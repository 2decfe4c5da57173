# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Per-role, per-module capability flags."""

from __future__ import annotations

import uuid as uuid_lib
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, ForeignKey, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from backoffice.models.base import Base

if TYPE_CHECKING:
    from backoffice.models.module import Module
    from backoffice.models.role import Role


class RoleModulePermission(Base):
    """Capabilities a role holds on one module.

    A missing row means the role holds no capability on that module.
    """

    __tablename__ = "role_module_permissions"

    id: Mapped[uuid_lib.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid_lib.uuid4,
    )
    role_id: Mapped[uuid_lib.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("roles.id", ondelete="CASCADE"),
        nullable=False,
    )
    module_id: Mapped[uuid_lib.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("modules.id", ondelete="CASCADE"),
        nullable=False,
    )
    can_view: Mapped[bool | None] = mapped_column(Boolean, default=False)
    can_create: Mapped[bool | None] = mapped_column(Boolean, default=False)
    can_edit: Mapped[bool | None] = mapped_column(Boolean, default=False)
    can_delete: Mapped[bool | None] = mapped_column(Boolean, default=False)

    __table_args__ = (
        UniqueConstraint("role_id", "module_id", name="_role_module_uc"),
    )

    role: Mapped[Role] = relationship("Role", back_populates="permissions")
    module: Mapped[Module] = relationship("Module")
