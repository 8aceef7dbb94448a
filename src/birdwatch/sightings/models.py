"""Database and transfer models for the sightings domain."""

from dataclasses import dataclass
from datetime import UTC, datetime

from pydantic import field_serializer, field_validator
from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel

from birdwatch.birds.models import Bird, BirdRead


def normalize_timestamp(value: datetime) -> datetime:
    """Bring a timestamp to the stored form: naive UTC with second precision."""
    if value.tzinfo is not None:
        value = value.astimezone(UTC).replace(tzinfo=None)
    return value.replace(microsecond=0)


class SightingBase(SQLModel):
    """Mutable fields shared by every sighting model."""

    # Weak reference: resolved by lookup, no foreign key so a bird can be deleted
    bird_id: int = Field(index=True)
    location: str = Field(min_length=1, max_length=200, index=True)
    # Plain DateTime: values are stored naive UTC, never tz-aware
    observed_at: datetime = Field(sa_type=DateTime(), index=True)

    @field_validator("location")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        """Reject whitespace-only text."""
        if not v.strip():
            raise ValueError("must not be blank")
        return v

    @field_validator("observed_at")
    @classmethod
    def validate_observed_at(cls, v: datetime) -> datetime:
        """Store observation times at second precision."""
        return normalize_timestamp(v)


class Sighting(SightingBase, table=True):
    """Represents a bird sighting record in the database."""

    __tablename__: str = "sightings"  # type: ignore[assignment]
    __table_args__ = {"sqlite_autoincrement": True}

    id: int | None = Field(default=None, primary_key=True)

    def __eq__(self, other: object) -> bool:
        """Compare sightings by identity only."""
        if not isinstance(other, Sighting):
            return NotImplemented
        if self.id is None or other.id is None:
            return self is other
        return self.id == other.id

    def __hash__(self) -> int:
        """Hash on identity, matching __eq__."""
        return hash((Sighting, self.id)) if self.id is not None else id(self)


class SightingCreate(SightingBase):
    """Payload for creating a sighting."""


class SightingUpdate(SightingBase):
    """Payload for updating a sighting.

    Updates are full replacements: bird_id, location and observed_at are all required.
    """


@dataclass(frozen=True)
class BirdReference:
    """A sighting's link to its bird: the id plus whatever the lookup found.

    The snapshot is a read-time copy, never ownership; it is None when the
    bird no longer exists.
    """

    bird_id: int
    snapshot: Bird | None = None

    @property
    def is_resolved(self) -> bool:
        """Whether the referenced bird was found."""
        return self.snapshot is not None


class SightingRead(SightingBase):
    """A sighting as handed to API and client layers, with its bird embedded."""

    id: int
    bird: BirdRead | None = None

    @field_serializer("observed_at")
    def serialize_observed_at(self, value: datetime) -> str:
        """Serialize timestamps as yyyy-MM-ddTHH:mm:ss."""
        return value.strftime("%Y-%m-%dT%H:%M:%S")

    @classmethod
    def from_record(cls, sighting: Sighting, reference: BirdReference) -> "SightingRead":
        """Build the transfer shape from a stored sighting and its resolved reference."""
        return cls(
            id=sighting.id,  # type: ignore[arg-type]
            bird_id=sighting.bird_id,
            location=sighting.location,
            observed_at=sighting.observed_at,
            bird=BirdRead.from_record(reference.snapshot) if reference.snapshot else None,
        )
