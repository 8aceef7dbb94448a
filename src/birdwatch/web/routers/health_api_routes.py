"""Health check endpoints for monitoring service status."""

import logging
from datetime import UTC, datetime
from importlib.metadata import PackageNotFoundError, version
from typing import Annotated

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, Response

from birdwatch.config import BirdwatchConfig
from birdwatch.database.core import CoreDatabaseService
from birdwatch.web.core.container import Container
from birdwatch.web.models.health import (
    HealthCheckResponse,
    LivenessProbeResponse,
    ReadinessProbeResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health")


def get_version() -> str:
    """Get the installed application version."""
    try:
        return version("birdwatch")
    except PackageNotFoundError:
        logger.warning("Could not read installed birdwatch version")
        return "unknown"


def _timestamp() -> str:
    return datetime.now(UTC).replace(tzinfo=None).isoformat() + "Z"


@router.get("/", response_model=HealthCheckResponse)
@inject
async def health_check(
    config: Annotated[BirdwatchConfig, Depends(Provide[Container.config])],
) -> HealthCheckResponse:
    """Check basic health status of the service."""
    return HealthCheckResponse(
        status="healthy",
        timestamp=_timestamp(),
        version=get_version(),
        service="birdwatch",
        site_name=config.site_name,
    )


@router.get("/live", response_model=LivenessProbeResponse)
async def liveness_probe() -> LivenessProbeResponse:
    """Liveness probe: the process is up and serving."""
    return LivenessProbeResponse(status="alive")


@router.get("/ready", status_code=200, response_model=ReadinessProbeResponse)
@inject
async def readiness_probe(
    db_service: Annotated[CoreDatabaseService, Depends(Provide[Container.core_database])],
    response: Response,
) -> ReadinessProbeResponse:
    """Check that the database answers before traffic is routed here.

    Responds 503 when the database cannot be reached.
    """
    database_ok = await db_service.ping()
    if not database_ok:
        logger.error("Database readiness check failed")
        response.status_code = 503

    return ReadinessProbeResponse(
        status="ready" if database_ok else "not_ready",
        checks={"database": database_ok, "version": get_version()},
        timestamp=_timestamp(),
    )
