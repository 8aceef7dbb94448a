"""Keyed persistence for SQLModel table records.

One ``EntityStore`` wraps one table class. It knows nothing about birds or
sightings beyond the ``id`` primary key every table carries; filtering,
ordering and windows arrive as ready-made SQLAlchemy expressions.
"""

import asyncio
import logging
from collections.abc import Iterable, Sequence
from typing import Any, Generic, TypeVar

from sqlalchemy import func, select, true
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.sql.elements import ColumnElement
from sqlmodel import SQLModel

from birdwatch.database.core import CoreDatabaseService
from birdwatch.errors import NotFoundError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=SQLModel)


class EntityStore(Generic[ModelT]):
    """CRUD, batch lookup and filtered windows over a single table."""

    def __init__(self, database_service: CoreDatabaseService, model: type[ModelT]):
        self.database_service = database_service
        self.model = model
        self.entity_name = model.__name__
        # Serializes writes so update's read-then-write is not interleaved.
        # Other components may hold it to keep a check and a write atomic
        # against this store's deletes.
        self.write_lock = asyncio.Lock()

    @property
    def _id_column(self) -> Any:  # noqa: ANN401
        return self.model.id  # type: ignore[attr-defined]

    async def create(self, candidate: ModelT) -> ModelT:
        """Persist a new record and return it with its assigned id.

        Any id already set on ``candidate`` is discarded.
        """
        candidate.id = None  # type: ignore[attr-defined]
        async with self.write_lock, self.database_service.get_async_db() as session:
            try:
                session.add(candidate)
                await session.commit()
                await session.refresh(candidate)
                return candidate
            except SQLAlchemyError:
                await session.rollback()
                logger.exception("Error creating %s", self.entity_name)
                raise

    async def get(self, entity_id: int) -> ModelT:
        """Fetch one record.

        Raises:
            NotFoundError: If no record has ``entity_id``
        """
        async with self.database_service.get_async_db() as session:
            try:
                record = await session.get(self.model, entity_id)
            except SQLAlchemyError:
                await session.rollback()
                logger.exception("Error retrieving %s by id", self.entity_name)
                raise
        if record is None:
            raise NotFoundError(self.entity_name, entity_id)
        return record

    async def update(self, entity_id: int, fields: dict[str, Any]) -> ModelT:
        """Overwrite the given mutable fields of one record in a single commit.

        The ``id`` key is ignored if present.

        Raises:
            NotFoundError: If no record has ``entity_id``
        """
        async with self.write_lock, self.database_service.get_async_db() as session:
            try:
                record = await session.get(self.model, entity_id)
                if record is None:
                    raise NotFoundError(self.entity_name, entity_id)
                for key, value in fields.items():
                    if key != "id" and hasattr(record, key):
                        setattr(record, key, value)
                await session.commit()
                await session.refresh(record)
                return record
            except SQLAlchemyError:
                await session.rollback()
                logger.exception("Error updating %s", self.entity_name)
                raise

    async def delete(self, entity_id: int) -> None:
        """Remove one record.

        Raises:
            NotFoundError: If no record has ``entity_id``
        """
        async with self.write_lock, self.database_service.get_async_db() as session:
            try:
                record = await session.get(self.model, entity_id)
                if record is None:
                    raise NotFoundError(self.entity_name, entity_id)
                await session.delete(record)
                await session.commit()
            except SQLAlchemyError:
                await session.rollback()
                logger.exception("Error deleting %s", self.entity_name)
                raise

    async def exists(self, entity_id: int) -> bool:
        """Check whether a record with ``entity_id`` is stored."""
        async with self.database_service.get_async_db() as session:
            try:
                stmt = select(self._id_column).where(self._id_column == entity_id)
                result = await session.execute(stmt)
                return result.first() is not None
            except SQLAlchemyError:
                await session.rollback()
                logger.exception("Error checking %s existence", self.entity_name)
                raise

    async def get_many(self, entity_ids: Iterable[int]) -> dict[int, ModelT]:
        """Fetch every stored record among ``entity_ids`` in one query.

        Ids with no record are simply absent from the result.
        """
        wanted = set(entity_ids)
        if not wanted:
            return {}
        async with self.database_service.get_async_db() as session:
            try:
                stmt = select(self.model).where(self._id_column.in_(wanted))
                result = await session.execute(stmt)
                return {record.id: record for record in result.scalars()}  # type: ignore[attr-defined]
            except SQLAlchemyError:
                await session.rollback()
                logger.exception("Error batch retrieving %s records", self.entity_name)
                raise

    async def count(self, predicate: ColumnElement | None = None) -> int:
        """Count records matching ``predicate`` (all records when omitted)."""
        async with self.database_service.get_async_db() as session:
            try:
                stmt = select(func.count(self._id_column)).where(
                    true() if predicate is None else predicate
                )
                result = await session.scalar(stmt)
                return result or 0
            except SQLAlchemyError:
                await session.rollback()
                logger.exception("Error counting %s records", self.entity_name)
                raise

    async def find(
        self,
        predicate: ColumnElement,
        order_by: Sequence[ColumnElement],
        offset: int,
        limit: int,
    ) -> tuple[list[ModelT], int]:
        """Return one ordered window of matching records plus the total match count.

        Both queries run in the same session so the window and the count
        describe the same snapshot of the table.
        """
        async with self.database_service.get_async_db() as session:
            try:
                total = await session.scalar(
                    select(func.count(self._id_column)).where(predicate)
                )
                stmt = (
                    select(self.model)
                    .where(predicate)
                    .order_by(*order_by)
                    .offset(offset)
                    .limit(limit)
                )
                result = await session.execute(stmt)
                return list(result.scalars()), total or 0
            except SQLAlchemyError:
                await session.rollback()
                logger.exception("Error listing %s records", self.entity_name)
                raise
