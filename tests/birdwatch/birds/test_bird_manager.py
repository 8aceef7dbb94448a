"""Tests for BirdManager."""

import pytest

from birdwatch.birds.models import BirdCreate, BirdRead, BirdUpdate
from birdwatch.errors import InvalidArgumentError, NotFoundError
from birdwatch.queries.pagination import PageRequest, SortDirection


@pytest.fixture
async def three_birds(bird_manager):
    """Sparrow, Eagle and Blue Jay stored as ids 1, 2 and 3."""
    for name, color, weight, height in [
        ("Sparrow", "Brown", 10.5, 12.0),
        ("Eagle", "Black", 50.0, 80.0),
        ("Blue Jay", "Blue", 15.0, 20.0),
    ]:
        await bird_manager.create_bird(
            BirdCreate(name=name, color=color, weight=weight, height=height)
        )
    return bird_manager


class TestBirdCrud:
    """Should create, read, replace and delete birds."""

    async def test_create_returns_transfer_record(self, bird_manager, model_factory):
        """Should return a BirdRead with a store-assigned id."""
        bird = await bird_manager.create_bird(model_factory.create_bird_payload(name="Robin"))

        assert isinstance(bird, BirdRead)
        assert bird.id == 1
        assert bird.name == "Robin"

    async def test_get_missing_raises(self, bird_manager):
        """Should surface NotFoundError for an unknown id."""
        with pytest.raises(NotFoundError):
            await bird_manager.get_bird(1)

    async def test_update_replaces_all_fields(self, bird_manager, model_factory):
        """Should overwrite every mutable field and keep the id."""
        bird = await bird_manager.create_bird(model_factory.create_bird_payload())

        updated = await bird_manager.update_bird(
            bird.id, BirdUpdate(name="Tree Sparrow", color="Chestnut", weight=22.0, height=14.0)
        )

        assert updated == BirdRead(
            id=bird.id, name="Tree Sparrow", color="Chestnut", weight=22.0, height=14.0
        )
        assert await bird_manager.get_bird(bird.id) == updated

    async def test_update_missing_raises(self, bird_manager, model_factory):
        """Should raise NotFoundError when updating an unknown id."""
        with pytest.raises(NotFoundError):
            await bird_manager.update_bird(
                9, BirdUpdate(name="Ghost", color="White", weight=1.0, height=1.0)
            )

    async def test_delete(self, bird_manager, model_factory):
        """Should delete and then report the bird missing."""
        bird = await bird_manager.create_bird(model_factory.create_bird_payload())

        await bird_manager.delete_bird(bird.id)

        with pytest.raises(NotFoundError):
            await bird_manager.get_bird(bird.id)
        with pytest.raises(NotFoundError):
            await bird_manager.delete_bird(bird.id)


class TestListBirds:
    """Should page through every bird."""

    async def test_lists_all_on_one_page(self, three_birds):
        """Should return all three with single-page metadata."""
        page = await three_birds.list_birds(PageRequest(page_index=0, page_size=5))

        assert [bird.id for bird in page.items] == [1, 2, 3]
        assert page.total_count == 3
        assert page.total_pages == 1
        assert page.is_first is True
        assert page.is_last is True

    async def test_item_count_matches_window(self, three_birds):
        """Should hold min(size, remaining) items on each page."""
        pages = [
            await three_birds.list_birds(PageRequest(page_index=index, page_size=2))
            for index in range(3)
        ]

        assert [page.number_of_elements for page in pages] == [2, 1, 0]
        assert [len(page.items) for page in pages] == [2, 1, 0]
        assert [page.is_last for page in pages] == [False, True, True]

    async def test_sort_descending_by_weight(self, three_birds):
        """Should honor a requested sort field and direction."""
        page = await three_birds.list_birds(
            PageRequest(sort_field="weight", sort_direction=SortDirection.DESC)
        )

        assert [bird.name for bird in page.items] == ["Eagle", "Blue Jay", "Sparrow"]

    async def test_ties_keep_identity_order(self, bird_manager, model_factory):
        """Should break equal sort keys by ascending id on every query."""
        for name in ["C", "A", "B"]:
            await bird_manager.create_bird(model_factory.create_bird_payload(name=name))

        request = PageRequest(sort_field="color", page_size=2)
        first = await bird_manager.list_birds(request)
        second = await bird_manager.list_birds(
            PageRequest(sort_field="color", page_index=1, page_size=2)
        )
        again = await bird_manager.list_birds(request)

        assert [bird.id for bird in first.items] == [1, 2]
        assert [bird.id for bird in second.items] == [3]
        assert again.items == first.items

    async def test_unknown_sort_field(self, three_birds):
        """Should reject sorting by a field birds do not have."""
        with pytest.raises(InvalidArgumentError):
            await three_birds.list_birds(PageRequest(sort_field="location"))


class TestSearchBirds:
    """Should filter by name substring and exact color."""

    async def test_name_contains(self, three_birds):
        """Should find Blue Jay by 'jay'."""
        page = await three_birds.search_birds("jay", None, PageRequest(page_size=10))

        assert [bird.id for bird in page.items] == [3]

    async def test_color_equals(self, three_birds):
        """Should find Sparrow by 'brown'."""
        page = await three_birds.search_birds(None, "brown", PageRequest())

        assert [bird.id for bird in page.items] == [1]
        assert page.total_count == 1

    async def test_color_is_not_substring(self, bird_manager, model_factory):
        """Should not match 'GREEN' against 'Evergreen' while name search would."""
        await bird_manager.create_bird(
            model_factory.create_bird_payload(name="Evergreen Warbler", color="Evergreen")
        )

        by_color = await bird_manager.search_birds(None, "GREEN", PageRequest())
        by_name = await bird_manager.search_birds("GREEN", None, PageRequest())

        assert by_color.is_empty
        assert by_name.total_count == 1

    @pytest.mark.parametrize("name, color", [(None, None), ("", ""), ("", None)])
    async def test_unconstrained_search_matches_listing(self, three_birds, name, color):
        """Should return the same identities and metadata as plain listing."""
        request = PageRequest(page_index=0, page_size=2)

        searched = await three_birds.search_birds(name, color, request)
        listed = await three_birds.list_birds(request)

        assert searched == listed

    async def test_accented_text_ignores_case(self, bird_manager, model_factory):
        """Should fold non-ASCII letters for both name and color."""
        await bird_manager.create_bird(
            model_factory.create_bird_payload(name="Éider", color="Ébène")
        )

        by_name = await bird_manager.search_birds("éider", None, PageRequest())
        by_color = await bird_manager.search_birds(None, "ÉBÈNE", PageRequest())

        assert by_name.total_count == 1
        assert by_color.total_count == 1

    async def test_no_match(self, three_birds):
        """Should return an empty last page with zero totals."""
        page = await three_birds.search_birds("penguin", None, PageRequest())

        assert page.items == []
        assert page.total_count == 0
        assert page.total_pages == 0
        assert page.is_empty is True
        assert page.is_last is True
