# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from backoffice import __version__
from backoffice.config import settings
from backoffice.database import SessionLocal
from backoffice.exceptions import register_exception_handlers
from backoffice.realtime import change_bus
from backoffice.schemas.common import HealthResponse
from backoffice.services import rbac_service, session_service
from backoffice.store import SqlAlchemyStore

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup and shutdown events."""
    if settings.seed_on_startup:
        logger.info("Seeding default modules and roles...")
        db = SessionLocal()
        try:
            store = SqlAlchemyStore(db)
            rbac_service.seed_defaults(store)
            session_service.cleanup_expired_sessions(store)
        except SQLAlchemyError as e:
            logger.error(f"Error seeding defaults: {e}")
        finally:
            db.close()

    yield

    logger.info("Closing realtime connections...")
    change_bus.close_all()


app = FastAPI(
    title=settings.app_name,
    description="Access control and live change notifications for a retail back-office",
    version=__version__,
    lifespan=lifespan,
)

# CORS middleware for frontend development
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)


@app.get("/health", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse(status="healthy")


# Import and include API router after it's created
from backoffice.api.v1.router import api_router  # noqa: E402

app.include_router(api_router, prefix="/api/v1")
