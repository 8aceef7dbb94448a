"""REST endpoints for sighting records."""

import logging
from datetime import datetime
from typing import Annotated

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from birdwatch.config import BirdwatchConfig
from birdwatch.errors import InvalidArgumentError, NotFoundError
from birdwatch.queries.pagination import Page, PageRequest
from birdwatch.sightings.manager import SightingManager
from birdwatch.sightings.models import SightingCreate, SightingRead, SightingUpdate
from birdwatch.web.core.container import Container

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sightings")


@router.post("/", status_code=status.HTTP_201_CREATED, response_model=SightingRead)
@inject
async def create_sighting(
    payload: SightingCreate,
    sighting_manager: Annotated[SightingManager, Depends(Provide[Container.sighting_manager])],
) -> SightingRead:
    """Record a sighting of an existing bird."""
    try:
        return await sighting_manager.create_sighting(payload)
    except InvalidArgumentError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except Exception as e:
        logger.error("Error creating sighting: %s", e)
        raise HTTPException(status_code=500, detail="Error creating sighting") from e


@router.get("/", response_model=Page[SightingRead])
@inject
async def list_sightings(
    sighting_manager: Annotated[SightingManager, Depends(Provide[Container.sighting_manager])],
    config: Annotated[BirdwatchConfig, Depends(Provide[Container.config])],
    page: int = Query(0, description="Zero-based page index"),
    size: int | None = Query(None, description="Items per page"),
    sort: str | None = Query(None, description="Sort as 'field' or 'field,asc|desc'"),
) -> Page[SightingRead]:
    """Get one page of all sightings, ascending by id unless sorted otherwise."""
    try:
        page_request = PageRequest.parse(page, size, sort, default_size=config.default_page_size)
        return await sighting_manager.list_sightings(page_request)
    except InvalidArgumentError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except Exception as e:
        logger.error("Error listing sightings: %s", e)
        raise HTTPException(status_code=500, detail="Error retrieving sightings") from e


@router.get("/search", response_model=Page[SightingRead])
@inject
async def search_sightings(
    sighting_manager: Annotated[SightingManager, Depends(Provide[Container.sighting_manager])],
    config: Annotated[BirdwatchConfig, Depends(Provide[Container.config])],
    bird_name: str | None = Query(None, description="Case-insensitive exact bird name"),
    location: str | None = Query(None, description="Case-insensitive part of the location"),
    from_date: datetime | None = Query(None, description="Earliest observation time, inclusive"),
    to_date: datetime | None = Query(None, description="Latest observation time, inclusive"),
    page: int = Query(0, description="Zero-based page index"),
    size: int | None = Query(None, description="Items per page"),
    sort: str | None = Query(None, description="Sort as 'field' or 'field,asc|desc'"),
) -> Page[SightingRead]:
    """Search sightings by bird name, location and observation time range."""
    try:
        page_request = PageRequest.parse(page, size, sort, default_size=config.default_page_size)
        return await sighting_manager.search_sightings(
            bird_name, location, from_date, to_date, page_request
        )
    except InvalidArgumentError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except Exception as e:
        logger.error("Error searching sightings: %s", e)
        raise HTTPException(status_code=500, detail="Error searching sightings") from e


@router.get("/{sighting_id}", response_model=SightingRead)
@inject
async def get_sighting(
    sighting_id: int,
    sighting_manager: Annotated[SightingManager, Depends(Provide[Container.sighting_manager])],
) -> SightingRead:
    """Get a specific sighting by id with its bird embedded when it still exists."""
    try:
        return await sighting_manager.get_sighting(sighting_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except Exception as e:
        logger.error("Error getting sighting: %s", e)
        raise HTTPException(status_code=500, detail="Error retrieving sighting") from e


@router.put("/{sighting_id}", response_model=SightingRead)
@inject
async def update_sighting(
    sighting_id: int,
    payload: SightingUpdate,
    sighting_manager: Annotated[SightingManager, Depends(Provide[Container.sighting_manager])],
) -> SightingRead:
    """Replace every field of a sighting."""
    try:
        return await sighting_manager.update_sighting(sighting_id, payload)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except InvalidArgumentError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except Exception as e:
        logger.error("Error updating sighting: %s", e)
        raise HTTPException(status_code=500, detail="Error updating sighting") from e


@router.delete("/{sighting_id}", status_code=status.HTTP_204_NO_CONTENT)
@inject
async def delete_sighting(
    sighting_id: int,
    sighting_manager: Annotated[SightingManager, Depends(Provide[Container.sighting_manager])],
) -> Response:
    """Delete a sighting."""
    try:
        await sighting_manager.delete_sighting(sighting_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except Exception as e:
        logger.error("Error deleting sighting: %s", e)
        raise HTTPException(status_code=500, detail="Error deleting sighting") from e
    return Response(status_code=status.HTTP_204_NO_CONTENT)
