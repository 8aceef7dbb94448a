"""Application lifespan management for startup and shutdown events."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from birdwatch.utils.structlog_configurator import configure_structlog
from birdwatch.web.core.container import Container

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Configure logging, prepare the database and release it on shutdown.

    Args:
        app: The FastAPI application instance.

    Yields:
        None: Control back to the application for normal operation.
    """
    # Get the container from the app (runtime dynamic attribute)
    container: Container = app.container  # type: ignore[attr-defined]

    config = container.config()
    configure_structlog(config)

    core_database = container.core_database()
    logger.info("Starting Birdwatch for site %s", config.site_name)

    try:
        await core_database.initialize()
        logger.info("Database ready at %s", core_database.db_path)

        yield

    finally:
        logger.info("Shutting down Birdwatch...")
        await core_database.dispose()
