# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Employee schemas."""
import datetime
import re
import uuid

from pydantic import BaseModel, ConfigDict, Field, field_validator

from backoffice.security import MAX_PASSWORD_BYTES, password_too_long

USERNAME_PATTERN = re.compile(r"^[a-zA-Z0-9_.-]+$")


def check_password_length(v: str) -> str:
    if password_too_long(v):
        raise ValueError(f"Password must not exceed {MAX_PASSWORD_BYTES} bytes")
    return v


class EmployeeCreate(BaseModel):
    """Schema for creating an employee with credentials."""

    username: str = Field(..., min_length=3, max_length=50)
    password: str = Field(..., min_length=6)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    position: str | None = Field(None, max_length=100)
    role_id: uuid.UUID | None = None

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        if not USERNAME_PATTERN.match(v):
            raise ValueError(
                "Username may only contain letters, digits, dots, dashes and underscores"
            )
        return v

    @field_validator("password")
    @classmethod
    def validate_password_length(cls, v: str) -> str:
        return check_password_length(v)


class PasswordChange(BaseModel):
    """Self-service requires current_password; administrators may omit it."""

    new_password: str = Field(..., min_length=6)
    current_password: str | None = None

    @field_validator("new_password")
    @classmethod
    def validate_new_password_length(cls, v: str) -> str:
        return check_password_length(v)


class EmployeeStatusUpdate(BaseModel):
    is_active: bool


class EmployeeRoleUpdate(BaseModel):
    role_id: uuid.UUID | None = None


class EmployeeResponse(BaseModel):
    """Employee as returned by the API. Never includes the password hash."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    username: str
    first_name: str
    last_name: str
    full_name: str
    position: str | None = None
    is_active: bool
    role_id: uuid.UUID | None = None
    last_login_at: datetime.datetime | None = None
    created_at: datetime.datetime
    updated_at: datetime.datetime
