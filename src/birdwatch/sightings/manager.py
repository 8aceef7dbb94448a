"""Sighting operations, including the reference check against birds.

Every write verifies that the referenced bird exists before the sightings
table is touched. Every read attaches a snapshot of the referenced bird,
looked up in one batch per page; a bird that has since been deleted shows up
as ``bird=None`` rather than an error.
"""

import logging
from collections.abc import Sequence
from datetime import datetime

from birdwatch.birds.models import Bird
from birdwatch.database.store import EntityStore
from birdwatch.errors import InvalidArgumentError, NotFoundError
from birdwatch.queries.pagination import Page, PageRequest, build_page, resolve_ordering
from birdwatch.queries.predicates import SightingFilter, sighting_predicate
from birdwatch.sightings.models import (
    BirdReference,
    Sighting,
    SightingCreate,
    SightingRead,
    SightingUpdate,
)

logger = logging.getLogger(__name__)

SORTABLE_FIELDS = frozenset({"id", "bird_id", "location", "observed_at"})


class SightingManager:
    """Create, read, update, delete, list and search sighting records."""

    def __init__(self, store: EntityStore[Sighting], bird_store: EntityStore[Bird]):
        self.store = store
        self.bird_store = bird_store

    async def create_sighting(self, payload: SightingCreate) -> SightingRead:
        """Store a new sighting of an existing bird.

        Raises:
            InvalidArgumentError: If ``payload.bird_id`` names no stored bird
        """
        logger.info("Creating sighting bird_id=%s location=%s", payload.bird_id, payload.location)
        async with self.bird_store.write_lock:
            await self._require_bird(payload.bird_id)
            sighting = await self.store.create(Sighting.model_validate(payload.model_dump()))
        return await self._to_read(sighting)

    async def get_sighting(self, sighting_id: int) -> SightingRead:
        """Fetch one sighting or raise NotFoundError."""
        logger.debug("Fetching sighting id=%s", sighting_id)
        return await self._to_read(await self.store.get(sighting_id))

    async def update_sighting(self, sighting_id: int, payload: SightingUpdate) -> SightingRead:
        """Replace every mutable field of a sighting.

        Raises:
            NotFoundError: If the sighting does not exist
            InvalidArgumentError: If ``payload.bird_id`` names no stored bird
        """
        logger.info("Updating sighting id=%s", sighting_id)
        if not await self.store.exists(sighting_id):
            raise NotFoundError(self.store.entity_name, sighting_id)
        async with self.bird_store.write_lock:
            await self._require_bird(payload.bird_id)
            sighting = await self.store.update(sighting_id, payload.model_dump())
        return await self._to_read(sighting)

    async def delete_sighting(self, sighting_id: int) -> None:
        """Remove a sighting or raise NotFoundError."""
        logger.info("Deleting sighting id=%s", sighting_id)
        await self.store.delete(sighting_id)

    async def list_sightings(self, page_request: PageRequest) -> Page[SightingRead]:
        """Return one page of all sightings."""
        logger.debug(
            "Listing sightings page=%s size=%s", page_request.page_index, page_request.page_size
        )
        return await self._find(SightingFilter(), page_request)

    async def search_sightings(
        self,
        bird_name: str | None,
        location: str | None,
        from_date: datetime | None,
        to_date: datetime | None,
        page_request: PageRequest,
    ) -> Page[SightingRead]:
        """Return one page of sightings matching the given criteria.

        ``bird_name`` matches the referenced bird's name exactly (ignoring
        case), ``location`` as a case-insensitive substring, and the dates
        bound ``observed_at`` inclusively. Missing criteria are ignored; a
        ``from_date`` after ``to_date`` simply matches nothing.
        """
        logger.info(
            "Searching sightings bird_name=%s location=%s from=%s to=%s",
            bird_name,
            location,
            from_date,
            to_date,
        )
        criteria = SightingFilter(
            bird_name=bird_name,
            location=location,
            from_date=from_date,
            to_date=to_date,
        )
        return await self._find(criteria, page_request)

    async def _find(
        self, criteria: SightingFilter, page_request: PageRequest
    ) -> Page[SightingRead]:
        order_by = resolve_ordering(Sighting, page_request, SORTABLE_FIELDS)
        sightings, total = await self.store.find(
            sighting_predicate(criteria),
            order_by,
            offset=page_request.offset,
            limit=page_request.page_size,
        )
        return build_page(await self._to_reads(sightings), total, page_request)

    async def _require_bird(self, bird_id: int) -> None:
        """Raise InvalidArgumentError unless the bird exists.

        Callers hold the bird store's write lock across this check and their
        own write, so a bird delete cannot land in between.
        """
        if not await self.bird_store.exists(bird_id):
            raise InvalidArgumentError(f"Bird not found with id {bird_id}")

    async def _resolve(self, sightings: Sequence[Sighting]) -> dict[int, BirdReference]:
        """Look up the birds referenced by ``sightings`` in one batch."""
        bird_ids = {sighting.bird_id for sighting in sightings}
        birds = await self.bird_store.get_many(bird_ids)
        for missing in sorted(bird_ids - birds.keys()):
            logger.debug("Sighting references missing bird id=%s", missing)
        return {bird_id: BirdReference(bird_id, birds.get(bird_id)) for bird_id in bird_ids}

    async def _to_reads(self, sightings: Sequence[Sighting]) -> list[SightingRead]:
        references = await self._resolve(sightings)
        return [
            SightingRead.from_record(sighting, references[sighting.bird_id])
            for sighting in sightings
        ]

    async def _to_read(self, sighting: Sighting) -> SightingRead:
        (read,) = await self._to_reads([sighting])
        return read
