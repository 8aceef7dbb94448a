"""Tests for page requests, ordering resolution and page metadata."""

import pytest

from birdwatch.birds.models import Bird
from birdwatch.errors import InvalidArgumentError
from birdwatch.queries.pagination import (
    DEFAULT_PAGE_SIZE,
    Page,
    PageRequest,
    SortDirection,
    build_page,
    resolve_ordering,
)

BIRD_SORTABLE = {"id", "name", "color", "weight", "height"}


class TestPageRequest:
    """Should validate paging windows before any query runs."""

    def test_defaults(self):
        """Should default to the first page of five, ascending by id."""
        request = PageRequest()

        assert request.page_index == 0
        assert request.page_size == DEFAULT_PAGE_SIZE == 5
        assert request.sort_field == "id"
        assert request.sort_direction is SortDirection.ASC
        assert request.offset == 0

    def test_offset(self):
        """Should compute the offset from index and size."""
        assert PageRequest(page_index=3, page_size=7).offset == 21

    @pytest.mark.parametrize("size", [0, -1])
    def test_rejects_non_positive_size(self, size):
        """Should reject a page size that is not positive."""
        with pytest.raises(InvalidArgumentError, match="Page size"):
            PageRequest(page_size=size)

    def test_rejects_negative_index(self):
        """Should reject a negative page index."""
        with pytest.raises(InvalidArgumentError, match="Page index"):
            PageRequest(page_index=-1)

    def test_rejects_unknown_direction(self):
        """Should reject a direction other than asc or desc."""
        with pytest.raises(InvalidArgumentError, match="Sort direction"):
            PageRequest(sort_direction="sideways")  # type: ignore[arg-type]

    def test_normalizes_direction_case(self):
        """Should accept a direction regardless of case."""
        assert PageRequest(sort_direction="DESC").sort_direction is SortDirection.DESC  # type: ignore[arg-type]


class TestPageRequestParse:
    """Should turn raw transport parameters into a page request."""

    def test_all_missing(self):
        """Should fall back to every default."""
        request = PageRequest.parse()

        assert request == PageRequest()

    def test_default_size_applies_when_size_missing(self):
        """Should use the configured default size when none was given."""
        assert PageRequest.parse(default_size=20).page_size == 20

    def test_field_only(self):
        """Should sort ascending when only a field is given."""
        request = PageRequest.parse(sort="name")

        assert request.sort_field == "name"
        assert request.sort_direction is SortDirection.ASC

    def test_field_and_direction(self):
        """Should read the desktop client's 'field,direction' form."""
        request = PageRequest.parse(page=2, size=10, sort="name,desc")

        assert request.page_index == 2
        assert request.page_size == 10
        assert request.sort_field == "name"
        assert request.sort_direction is SortDirection.DESC

    def test_tolerates_spaces(self):
        """Should ignore whitespace around the sort parts."""
        request = PageRequest.parse(sort=" weight , asc ")

        assert request.sort_field == "weight"
        assert request.sort_direction is SortDirection.ASC

    def test_rejects_too_many_parts(self):
        """Should reject a sort with more than two parts."""
        with pytest.raises(InvalidArgumentError):
            PageRequest.parse(sort="name,asc,extra")

    def test_rejects_bad_size(self):
        """Should reject an explicit zero size."""
        with pytest.raises(InvalidArgumentError):
            PageRequest.parse(size=0)


class TestResolveOrdering:
    """Should build ORDER BY clauses with a stable identity tie-break."""

    def test_identity_sort_has_no_tie_break(self):
        """Should order by id alone when sorting by id."""
        ordering = resolve_ordering(Bird, PageRequest(), BIRD_SORTABLE)

        assert len(ordering) == 1
        assert str(ordering[0]) == "birds.id ASC"

    def test_non_identity_sort_adds_id(self):
        """Should follow any other key with ascending id."""
        request = PageRequest(sort_field="name", sort_direction=SortDirection.DESC)

        ordering = resolve_ordering(Bird, request, BIRD_SORTABLE)

        assert [str(clause) for clause in ordering] == ["birds.name DESC", "birds.id ASC"]

    def test_rejects_unknown_field(self):
        """Should reject a field outside the sortable set."""
        with pytest.raises(InvalidArgumentError, match="Cannot sort by 'wingspan'"):
            resolve_ordering(Bird, PageRequest(sort_field="wingspan"), BIRD_SORTABLE)


class TestPageMetadata:
    """Should derive consistent navigation metadata from totals."""

    def test_first_of_several(self):
        """Should describe the first of three pages."""
        page = build_page([1, 2, 3, 4, 5], 12, PageRequest(page_index=0, page_size=5))

        assert page.total_pages == 3
        assert page.number_of_elements == 5
        assert page.is_first is True
        assert page.is_last is False
        assert page.is_empty is False
        assert page.has_next is True
        assert page.has_previous is False

    def test_partial_last_page(self):
        """Should describe a short final page."""
        page = build_page([11, 12], 12, PageRequest(page_index=2, page_size=5))

        assert page.total_pages == 3
        assert page.number_of_elements == 2
        assert page.is_first is False
        assert page.is_last is True
        assert page.has_next is False
        assert page.has_previous is True

    def test_nothing_matched(self):
        """Should report zero pages and a first, last, empty page."""
        page = build_page([], 0, PageRequest())

        assert page.total_pages == 0
        assert page.is_first is True
        assert page.is_last is True
        assert page.is_empty is True

    def test_beyond_last_page(self):
        """Should keep totals and mark a window past the end as last and empty."""
        page = build_page([], 7, PageRequest(page_index=4, page_size=5))

        assert page.total_count == 7
        assert page.total_pages == 2
        assert page.is_last is True
        assert page.is_empty is True

    def test_exact_multiple(self):
        """Should not add a phantom page when the total divides evenly."""
        page = build_page([6, 7, 8, 9, 10], 10, PageRequest(page_index=1, page_size=5))

        assert page.total_pages == 2
        assert page.is_last is True

    def test_serializes_computed_fields(self):
        """Should include derived metadata in the JSON form."""
        page = build_page(["a"], 1, PageRequest())

        dumped = page.model_dump()

        assert dumped["items"] == ["a"]
        assert dumped["total_pages"] == 1
        assert dumped["is_first"] is True
        assert dumped["is_last"] is True
        assert dumped["number_of_elements"] == 1

    def test_round_trips_through_validation(self):
        """Should rebuild an equivalent page from its JSON form."""
        page = build_page([1, 2], 6, PageRequest(page_index=1, page_size=2))

        rebuilt = Page[int].model_validate(page.model_dump(mode="json"))

        assert rebuilt.items == [1, 2]
        assert rebuilt.total_pages == 3
        assert rebuilt.has_next is True
