"""Optional search criteria folded into a single SQL predicate.

Each filter is a plain struct of optional fields. The ``*_predicate``
functions are pure: they read the struct and return one boolean SQL
expression. A missing or empty criterion adds nothing; present criteria are
combined with AND; no criteria at all yields ``true()``.
"""

from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import String, and_, exists, func, select, true
from sqlalchemy.sql.elements import ColumnElement

from birdwatch.birds.models import Bird
from birdwatch.sightings.models import Sighting, normalize_timestamp


@dataclass(frozen=True)
class BirdFilter:
    """Criteria for bird searches."""

    name: str | None = None  # case-insensitive substring
    color: str | None = None  # case-insensitive exact match


@dataclass(frozen=True)
class SightingFilter:
    """Criteria for sighting searches."""

    bird_name: str | None = None  # case-insensitive exact match on the referenced bird
    location: str | None = None  # case-insensitive substring
    from_date: datetime | None = None  # inclusive lower bound
    to_date: datetime | None = None  # inclusive upper bound


def folded(column: ColumnElement) -> ColumnElement:
    """Column text after Unicode case folding.

    ``casefold`` is registered on every connection by ``CoreDatabaseService``.
    """
    return func.casefold(column, type_=String)


def contains_ignore_case(column: ColumnElement, value: str | None) -> ColumnElement | None:
    """Case-insensitive substring clause, or None when there is nothing to match."""
    if not value:
        return None
    # autoescape makes % and _ in the user's text match literally
    return folded(column).contains(value.casefold(), autoescape=True)


def equals_ignore_case(column: ColumnElement, value: str | None) -> ColumnElement | None:
    """Case-insensitive equality clause, or None when there is nothing to match."""
    if not value:
        return None
    return folded(column) == value.casefold()


def combine(clauses: list[ColumnElement | None]) -> ColumnElement:
    """AND together the present clauses; no clauses means match everything."""
    present = [clause for clause in clauses if clause is not None]
    if not present:
        return true()
    if len(present) == 1:
        return present[0]
    return and_(*present)


def bird_predicate(criteria: BirdFilter) -> ColumnElement:
    """Build the WHERE clause for a bird search."""
    return combine(
        [
            contains_ignore_case(Bird.name, criteria.name),  # type: ignore[arg-type]
            equals_ignore_case(Bird.color, criteria.color),  # type: ignore[arg-type]
        ]
    )


def referenced_bird_named(name: str | None) -> ColumnElement | None:
    """Match sightings whose referenced bird exists and carries ``name``.

    Sightings whose bird is gone never satisfy the EXISTS, so they are
    excluded under this criterion.
    """
    if not name:
        return None
    return exists(
        select(Bird.id).where(
            Bird.id == Sighting.bird_id,
            equals_ignore_case(Bird.name, name),  # type: ignore[arg-type]
        )
    )


def sighting_predicate(criteria: SightingFilter) -> ColumnElement:
    """Build the WHERE clause for a sighting search."""
    clauses: list[ColumnElement | None] = [
        referenced_bird_named(criteria.bird_name),
        contains_ignore_case(Sighting.location, criteria.location),  # type: ignore[arg-type]
    ]
    if criteria.from_date is not None:
        clauses.append(Sighting.observed_at >= normalize_timestamp(criteria.from_date))
    if criteria.to_date is not None:
        clauses.append(Sighting.observed_at <= normalize_timestamp(criteria.to_date))
    return combine(clauses)
