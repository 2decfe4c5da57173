# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Domain exceptions and their HTTP translation."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class BackofficeError(Exception):
    """Base exception for the back-office core."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "An error occurred"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidCredentialsError(BackofficeError):
    """Unknown username, wrong password or inactive account.

    The three causes share one message on purpose so callers cannot tell
    them apart.
    """

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Incorrect username or password"

    def __init__(self) -> None:
        super().__init__()


class UnauthenticatedError(BackofficeError):
    """Raised when no valid session is attached to the request."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Not authenticated"


class ForbiddenError(BackofficeError):
    """Raised when the session lacks the capability for a module."""

    status_code = status.HTTP_403_FORBIDDEN
    default_message = "You do not have permission to perform this action"


class NotFoundError(BackofficeError):
    """Raised when a requested record does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found"


class ConflictError(BackofficeError):
    """Raised when an operation collides with existing state."""

    status_code = status.HTTP_409_CONFLICT
    default_message = "Resource already exists"


class InvalidInputError(BackofficeError):
    """Raised when required input is missing or invalid."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid input"


async def backoffice_error_handler(
    request: Request, exc: BackofficeError
) -> JSONResponse:
    """Translate a domain exception into a JSON error response."""
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log unexpected failures and hide their details from the caller."""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the domain and fallback exception handlers on an app."""
    app.add_exception_handler(BackofficeError, backoffice_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
