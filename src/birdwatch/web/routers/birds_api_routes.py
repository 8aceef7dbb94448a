"""REST endpoints for bird records."""

import logging
from typing import Annotated

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from birdwatch.birds.manager import BirdManager
from birdwatch.birds.models import BirdCreate, BirdRead, BirdUpdate
from birdwatch.config import BirdwatchConfig
from birdwatch.errors import InvalidArgumentError, NotFoundError
from birdwatch.queries.pagination import Page, PageRequest
from birdwatch.web.core.container import Container

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/birds")


@router.post("/", status_code=status.HTTP_201_CREATED, response_model=BirdRead)
@inject
async def create_bird(
    payload: BirdCreate,
    bird_manager: Annotated[BirdManager, Depends(Provide[Container.bird_manager])],
) -> BirdRead:
    """Create a bird; the id is assigned by the server."""
    try:
        return await bird_manager.create_bird(payload)
    except Exception as e:
        logger.error("Error creating bird: %s", e)
        raise HTTPException(status_code=500, detail="Error creating bird") from e


@router.get("/", response_model=Page[BirdRead])
@inject
async def list_birds(
    bird_manager: Annotated[BirdManager, Depends(Provide[Container.bird_manager])],
    config: Annotated[BirdwatchConfig, Depends(Provide[Container.config])],
    page: int = Query(0, description="Zero-based page index"),
    size: int | None = Query(None, description="Items per page"),
    sort: str | None = Query(None, description="Sort as 'field' or 'field,asc|desc'"),
) -> Page[BirdRead]:
    """Get one page of all birds, ascending by id unless sorted otherwise."""
    try:
        page_request = PageRequest.parse(page, size, sort, default_size=config.default_page_size)
        return await bird_manager.list_birds(page_request)
    except InvalidArgumentError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except Exception as e:
        logger.error("Error listing birds: %s", e)
        raise HTTPException(status_code=500, detail="Error retrieving birds") from e


@router.get("/search", response_model=Page[BirdRead])
@inject
async def search_birds(
    bird_manager: Annotated[BirdManager, Depends(Provide[Container.bird_manager])],
    config: Annotated[BirdwatchConfig, Depends(Provide[Container.config])],
    name: str | None = Query(None, description="Case-insensitive part of the name"),
    color: str | None = Query(None, description="Case-insensitive exact color"),
    page: int = Query(0, description="Zero-based page index"),
    size: int | None = Query(None, description="Items per page"),
    sort: str | None = Query(None, description="Sort as 'field' or 'field,asc|desc'"),
) -> Page[BirdRead]:
    """Search birds by name and color; omitted criteria do not constrain."""
    try:
        page_request = PageRequest.parse(page, size, sort, default_size=config.default_page_size)
        return await bird_manager.search_birds(name, color, page_request)
    except InvalidArgumentError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except Exception as e:
        logger.error("Error searching birds: %s", e)
        raise HTTPException(status_code=500, detail="Error searching birds") from e


@router.get("/{bird_id}", response_model=BirdRead)
@inject
async def get_bird(
    bird_id: int,
    bird_manager: Annotated[BirdManager, Depends(Provide[Container.bird_manager])],
) -> BirdRead:
    """Get a specific bird by id."""
    try:
        return await bird_manager.get_bird(bird_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except Exception as e:
        logger.error("Error getting bird: %s", e)
        raise HTTPException(status_code=500, detail="Error retrieving bird") from e


@router.put("/{bird_id}", response_model=BirdRead)
@inject
async def update_bird(
    bird_id: int,
    payload: BirdUpdate,
    bird_manager: Annotated[BirdManager, Depends(Provide[Container.bird_manager])],
) -> BirdRead:
    """Replace every field of a bird."""
    try:
        return await bird_manager.update_bird(bird_id, payload)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except Exception as e:
        logger.error("Error updating bird: %s", e)
        raise HTTPException(status_code=500, detail="Error updating bird") from e


@router.delete("/{bird_id}", status_code=status.HTTP_204_NO_CONTENT)
@inject
async def delete_bird(
    bird_id: int,
    bird_manager: Annotated[BirdManager, Depends(Provide[Container.bird_manager])],
) -> Response:
    """Delete a bird. Its sightings remain and lose their embedded bird."""
    try:
        await bird_manager.delete_bird(bird_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except Exception as e:
        logger.error("Error deleting bird: %s", e)
        raise HTTPException(status_code=500, detail="Error deleting bird") from e
    return Response(status_code=status.HTTP_204_NO_CONTENT)
