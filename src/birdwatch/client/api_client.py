"""Async client for the Birdwatch REST API.

Responses are parsed back into the same transfer models the server emits, so
callers work with ``BirdRead``, ``SightingRead`` and ``Page`` objects rather
than raw JSON.
"""

import logging
from datetime import datetime
from typing import Any, Self

import httpx

from birdwatch.birds.models import BirdCreate, BirdRead, BirdUpdate
from birdwatch.errors import BirdwatchError
from birdwatch.queries.pagination import Page
from birdwatch.sightings.models import (
    SightingCreate,
    SightingRead,
    SightingUpdate,
    normalize_timestamp,
)

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://127.0.0.1:8000"


class ApiRequestError(BirdwatchError):
    """Raised when the API answers with an error status or cannot be reached."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class ApiNotFoundError(ApiRequestError):
    """Raised when the API reports that the requested record does not exist."""


def _paging_params(page: int | None, size: int | None, sort: str | None) -> dict[str, Any]:
    params: dict[str, Any] = {}
    if page is not None:
        params["page"] = page
    if size is not None:
        params["size"] = size
    if sort:
        params["sort"] = sort
    return params


def _criteria_params(**criteria: Any) -> dict[str, Any]:  # noqa: ANN401
    """Keep only criteria that would constrain the search.

    Datetimes are sent as naive UTC, the form the server stores and compares.
    """
    params: dict[str, Any] = {}
    for key, value in criteria.items():
        if value is None or value == "":
            continue
        if isinstance(value, datetime):
            value = normalize_timestamp(value).strftime("%Y-%m-%dT%H:%M:%S")
        params[key] = value
    return params


class BirdwatchClient:
    """Typed access to every bird and sighting endpoint.

    Use as an async context manager, or call ``aclose`` when done.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._client = httpx.AsyncClient(
            base_url=f"{base_url.rstrip('/')}/api",
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying connection pool."""
        await self._client.aclose()

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:  # noqa: ANN401
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.RequestError as e:
            logger.error("Request to %s %s failed: %s", method, url, e)
            raise ApiRequestError(f"Could not reach Birdwatch API: {e}") from e

        if response.status_code == 404:
            raise ApiNotFoundError(_error_detail(response), status_code=404)
        if response.is_error:
            logger.warning("%s %s returned %s", method, url, response.status_code)
            raise ApiRequestError(_error_detail(response), status_code=response.status_code)
        return response

    # ==================== Birds ====================

    async def create_bird(self, bird: BirdCreate) -> BirdRead:
        """Add a bird and return it with its new id."""
        response = await self._request("POST", "/birds/", json=bird.model_dump(mode="json"))
        return BirdRead.model_validate(response.json())

    async def get_bird(self, bird_id: int) -> BirdRead:
        """Fetch one bird."""
        response = await self._request("GET", f"/birds/{bird_id}")
        return BirdRead.model_validate(response.json())

    async def update_bird(self, bird_id: int, bird: BirdUpdate) -> BirdRead:
        """Replace every field of a bird."""
        response = await self._request(
            "PUT", f"/birds/{bird_id}", json=bird.model_dump(mode="json")
        )
        return BirdRead.model_validate(response.json())

    async def delete_bird(self, bird_id: int) -> None:
        """Delete a bird."""
        await self._request("DELETE", f"/birds/{bird_id}")

    async def list_birds(
        self, page: int | None = None, size: int | None = None, sort: str | None = None
    ) -> Page[BirdRead]:
        """Fetch one page of all birds."""
        response = await self._request("GET", "/birds/", params=_paging_params(page, size, sort))
        return Page[BirdRead].model_validate(response.json())

    async def search_birds(
        self,
        name: str | None = None,
        color: str | None = None,
        page: int | None = None,
        size: int | None = None,
        sort: str | None = None,
    ) -> Page[BirdRead]:
        """Fetch one page of birds matching name and color."""
        params = _criteria_params(name=name, color=color) | _paging_params(page, size, sort)
        response = await self._request("GET", "/birds/search", params=params)
        return Page[BirdRead].model_validate(response.json())

    # ==================== Sightings ====================

    async def create_sighting(self, sighting: SightingCreate) -> SightingRead:
        """Record a sighting and return it with its new id and bird."""
        response = await self._request(
            "POST", "/sightings/", json=sighting.model_dump(mode="json")
        )
        return SightingRead.model_validate(response.json())

    async def get_sighting(self, sighting_id: int) -> SightingRead:
        """Fetch one sighting."""
        response = await self._request("GET", f"/sightings/{sighting_id}")
        return SightingRead.model_validate(response.json())

    async def update_sighting(self, sighting_id: int, sighting: SightingUpdate) -> SightingRead:
        """Replace every field of a sighting."""
        response = await self._request(
            "PUT", f"/sightings/{sighting_id}", json=sighting.model_dump(mode="json")
        )
        return SightingRead.model_validate(response.json())

    async def delete_sighting(self, sighting_id: int) -> None:
        """Delete a sighting."""
        await self._request("DELETE", f"/sightings/{sighting_id}")

    async def list_sightings(
        self, page: int | None = None, size: int | None = None, sort: str | None = None
    ) -> Page[SightingRead]:
        """Fetch one page of all sightings."""
        response = await self._request(
            "GET", "/sightings/", params=_paging_params(page, size, sort)
        )
        return Page[SightingRead].model_validate(response.json())

    async def search_sightings(
        self,
        bird_name: str | None = None,
        location: str | None = None,
        from_date: datetime | None = None,
        to_date: datetime | None = None,
        page: int | None = None,
        size: int | None = None,
        sort: str | None = None,
    ) -> Page[SightingRead]:
        """Fetch one page of sightings matching bird name, location and time range."""
        params = _criteria_params(
            bird_name=bird_name, location=location, from_date=from_date, to_date=to_date
        ) | _paging_params(page, size, sort)
        response = await self._request("GET", "/sightings/search", params=params)
        return Page[SightingRead].model_validate(response.json())


def _error_detail(response: httpx.Response) -> str:
    """Pull the server's ``detail`` message out of an error response."""
    try:
        body = response.json()
    except ValueError:
        body = None
    detail = body.get("detail") if isinstance(body, dict) else None
    if isinstance(detail, str):
        return detail
    if detail:
        # Validation errors arrive as a list of problems
        return "; ".join(
            str(item.get("msg", item)) if isinstance(item, dict) else str(item)
            for item in detail
        )
    return f"HTTP {response.status_code}"
