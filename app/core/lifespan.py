"""Application lifespan: startup and shutdown.

Single place for all startup/shutdown logic (SRP). Used by main.py;
no business logic here, only wiring of infrastructure (logging, rate
limiter, DB engine dispose).
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from app.core.config import get_settings
from app.core.limiter import configure_limiter
from app.infrastructure.persistence.database import dispose_engine
from app.shared.logging import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit dispose the SQL engine."""
    settings = get_settings()

    # ---- Startup ----
    setup_logging()
    configure_limiter()
    if not settings.database_url:
        logger.warning("DATABASE_URL is not set; database-backed routes will return 503")
    if settings.admin_signin_key is None:
        logger.warning("ADMIN_SIGNIN_KEY is not set; admin sign-in is disabled")
    logger.info("%s %s started (%s)", settings.app_name, settings.app_version, settings.environment)

    yield

    # ---- Shutdown ----
    await dispose_engine()
