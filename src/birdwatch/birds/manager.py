import logging

from birdwatch.birds.models import Bird, BirdCreate, BirdRead, BirdUpdate
from birdwatch.database.store import EntityStore
from birdwatch.queries.pagination import Page, PageRequest, build_page, resolve_ordering
from birdwatch.queries.predicates import BirdFilter, bird_predicate

logger = logging.getLogger(__name__)

SORTABLE_FIELDS = frozenset({"id", "name", "color", "weight", "height"})


class BirdManager:
    """Create, read, update, delete, list and search bird records."""

    def __init__(self, store: EntityStore[Bird]):
        self.store = store

    async def create_bird(self, payload: BirdCreate) -> BirdRead:
        """Store a new bird and return it with its assigned id."""
        logger.info("Creating bird name=%s", payload.name)
        bird = await self.store.create(Bird.model_validate(payload.model_dump()))
        return BirdRead.from_record(bird)

    async def get_bird(self, bird_id: int) -> BirdRead:
        """Fetch one bird or raise NotFoundError."""
        logger.debug("Fetching bird id=%s", bird_id)
        return BirdRead.from_record(await self.store.get(bird_id))

    async def update_bird(self, bird_id: int, payload: BirdUpdate) -> BirdRead:
        """Replace every mutable field of a bird; raise NotFoundError when missing."""
        logger.info("Updating bird id=%s", bird_id)
        bird = await self.store.update(bird_id, payload.model_dump())
        return BirdRead.from_record(bird)

    async def delete_bird(self, bird_id: int) -> None:
        """Remove a bird or raise NotFoundError.

        Sightings that reference the bird are left in place; they read back
        without a bird snapshot from then on.
        """
        logger.info("Deleting bird id=%s", bird_id)
        await self.store.delete(bird_id)

    async def list_birds(self, page_request: PageRequest) -> Page[BirdRead]:
        """Return one page of all birds."""
        logger.debug(
            "Listing birds page=%s size=%s", page_request.page_index, page_request.page_size
        )
        return await self._find(BirdFilter(), page_request)

    async def search_birds(
        self,
        name: str | None,
        color: str | None,
        page_request: PageRequest,
    ) -> Page[BirdRead]:
        """Return one page of birds matching the given criteria.

        ``name`` matches as a case-insensitive substring, ``color`` as a
        case-insensitive exact value. Missing or empty criteria are ignored.
        """
        logger.info("Searching birds name=%s color=%s", name, color)
        return await self._find(BirdFilter(name=name, color=color), page_request)

    async def _find(self, criteria: BirdFilter, page_request: PageRequest) -> Page[BirdRead]:
        order_by = resolve_ordering(Bird, page_request, SORTABLE_FIELDS)
        birds, total = await self.store.find(
            bird_predicate(criteria),
            order_by,
            offset=page_request.offset,
            limit=page_request.page_size,
        )
        return build_page([BirdRead.from_record(bird) for bird in birds], total, page_request)
