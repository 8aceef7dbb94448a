"""Paging windows, ordering resolution and page metadata.

A ``PageRequest`` is validated on construction so that malformed windows are
rejected before any query runs. ``build_page`` wraps a raw slice and the total
match count into a ``Page`` whose metadata is derived, never stored, so the
numbers a client sees are always consistent with each other.
"""

import math
from collections.abc import Collection, Sequence
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, computed_field
from sqlalchemy.sql.elements import ColumnElement

from birdwatch.errors import InvalidArgumentError

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 5
IDENTITY_FIELD = "id"


class SortDirection(StrEnum):
    """Direction of the primary sort key."""

    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class PageRequest:
    """A zero-based page window plus the ordering it is taken from."""

    page_index: int = 0
    page_size: int = DEFAULT_PAGE_SIZE
    sort_field: str = IDENTITY_FIELD
    sort_direction: SortDirection = SortDirection.ASC

    def __post_init__(self) -> None:
        if self.page_size <= 0:
            raise InvalidArgumentError(f"Page size must be positive, got {self.page_size}")
        if self.page_index < 0:
            raise InvalidArgumentError(f"Page index must not be negative, got {self.page_index}")
        if not self.sort_field:
            raise InvalidArgumentError("Sort field must not be empty")
        try:
            direction = SortDirection(str(self.sort_direction).lower())
        except ValueError as e:
            raise InvalidArgumentError(
                f"Sort direction must be 'asc' or 'desc', got {self.sort_direction!r}"
            ) from e
        object.__setattr__(self, "sort_direction", direction)

    @property
    def offset(self) -> int:
        """Number of matching records before this window."""
        return self.page_index * self.page_size

    @classmethod
    def parse(
        cls,
        page: int | None = None,
        size: int | None = None,
        sort: str | None = None,
        default_size: int = DEFAULT_PAGE_SIZE,
    ) -> "PageRequest":
        """Build a request from raw transport parameters.

        Args:
            page: Zero-based page index, defaults to 0
            size: Page size, defaults to ``default_size``
            sort: ``"field"`` or ``"field,asc|desc"``, defaults to ascending identity
            default_size: Size used when the caller gave none

        Raises:
            InvalidArgumentError: If any parameter is malformed
        """
        sort_field = IDENTITY_FIELD
        sort_direction = SortDirection.ASC
        if sort:
            parts = [part.strip() for part in sort.split(",")]
            if len(parts) > 2:
                raise InvalidArgumentError(f"Sort must be 'field' or 'field,direction': {sort!r}")
            sort_field = parts[0]
            if len(parts) == 2:
                sort_direction = parts[1]  # type: ignore[assignment]

        return cls(
            page_index=0 if page is None else page,
            page_size=default_size if size is None else size,
            sort_field=sort_field,
            sort_direction=sort_direction,
        )


def resolve_ordering(
    model: Any,  # noqa: ANN401
    request: PageRequest,
    sortable_fields: Collection[str],
) -> list[ColumnElement]:
    """Turn the request's sort into ORDER BY clauses for ``model``.

    A non-identity sort key is always followed by ascending identity so that
    records with equal keys keep a fixed order across pages.

    Raises:
        InvalidArgumentError: If the sort field is not sortable for this model
    """
    if request.sort_field not in sortable_fields:
        raise InvalidArgumentError(
            f"Cannot sort by {request.sort_field!r}; "
            f"sortable fields are {', '.join(sorted(sortable_fields))}"
        )

    column = getattr(model, request.sort_field)
    primary = column.desc() if request.sort_direction is SortDirection.DESC else column.asc()
    if request.sort_field == IDENTITY_FIELD:
        return [primary]
    return [primary, getattr(model, IDENTITY_FIELD).asc()]


class Page(BaseModel, Generic[T]):
    """A window over an ordered result set plus metadata describing its position."""

    items: list[T]
    total_count: int
    page_index: int
    page_size: int

    @computed_field  # type: ignore[misc]
    @property
    def total_pages(self) -> int:
        """Number of pages needed for all matches, 0 when nothing matched."""
        if self.total_count == 0:
            return 0
        return math.ceil(self.total_count / self.page_size)

    @computed_field  # type: ignore[misc]
    @property
    def number_of_elements(self) -> int:
        """Items actually present in this window."""
        return len(self.items)

    @computed_field  # type: ignore[misc]
    @property
    def is_first(self) -> bool:
        """Whether this is the first page."""
        return self.page_index == 0

    @computed_field  # type: ignore[misc]
    @property
    def is_last(self) -> bool:
        """Whether no page follows this one (also true for empty results)."""
        return self.page_index >= self.total_pages - 1

    @computed_field  # type: ignore[misc]
    @property
    def is_empty(self) -> bool:
        """Whether this window holds no items."""
        return self.number_of_elements == 0

    @computed_field  # type: ignore[misc]
    @property
    def has_next(self) -> bool:
        """Whether a following page exists."""
        return not self.is_last

    @computed_field  # type: ignore[misc]
    @property
    def has_previous(self) -> bool:
        """Whether a preceding page exists."""
        return not self.is_first


def build_page(items: Sequence[T], total_count: int, request: PageRequest) -> Page[T]:
    """Wrap a fetched window and the total match count into a Page."""
    return Page(
        items=list(items),
        total_count=total_count,
        page_index=request.page_index,
        page_size=request.page_size,
    )
