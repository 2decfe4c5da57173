# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Main API router for v1 endpoints."""

from fastapi import APIRouter

from backoffice.api.v1 import auth, employees, rbac, realtime

api_router = APIRouter()

# Auth routes
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])

# Employee management routes
api_router.include_router(employees.router, prefix="/employees", tags=["employees"])

# Role and module routes
api_router.include_router(rbac.router, tags=["rbac"])

# Change notification stream
api_router.include_router(realtime.router, tags=["realtime"])
