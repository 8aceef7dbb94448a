"""Database and transfer models for the birds domain."""

from pydantic import field_validator
from sqlmodel import Field, SQLModel


class BirdBase(SQLModel):
    """Mutable fields shared by every bird model."""

    name: str = Field(min_length=1, max_length=100, index=True)
    color: str = Field(min_length=1, max_length=50, index=True)
    weight: float = Field(gt=0)
    height: float = Field(gt=0)

    @field_validator("name", "color")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        """Reject whitespace-only text."""
        if not v.strip():
            raise ValueError("must not be blank")
        return v


class Bird(BirdBase, table=True):
    """Represents a bird species record in the database."""

    __tablename__: str = "birds"  # type: ignore[assignment]
    # AUTOINCREMENT stops SQLite from handing out the id of a deleted row again
    __table_args__ = {"sqlite_autoincrement": True}

    id: int | None = Field(default=None, primary_key=True)

    def __eq__(self, other: object) -> bool:
        """Compare birds by identity only."""
        if not isinstance(other, Bird):
            return NotImplemented
        if self.id is None or other.id is None:
            return self is other
        return self.id == other.id

    def __hash__(self) -> int:
        """Hash on identity, matching __eq__."""
        return hash((Bird, self.id)) if self.id is not None else id(self)


class BirdCreate(BirdBase):
    """Payload for creating a bird; the id is always assigned by the store."""


class BirdUpdate(BirdBase):
    """Payload for updating a bird; every mutable field is replaced."""


class BirdRead(BirdBase):
    """A bird as handed to API and client layers."""

    id: int

    @classmethod
    def from_record(cls, bird: Bird) -> "BirdRead":
        """Build the transfer shape from a stored bird."""
        return cls(
            id=bird.id,  # type: ignore[arg-type]
            name=bird.name,
            color=bird.color,
            weight=bird.weight,
            height=bird.height,
        )
