"""Search predicates and pagination shared by the bird and sighting managers."""

from birdwatch.queries.pagination import Page, PageRequest, SortDirection, build_page
from birdwatch.queries.predicates import BirdFilter, SightingFilter

__all__ = [
    "BirdFilter",
    "Page",
    "PageRequest",
    "SightingFilter",
    "SortDirection",
    "build_page",
]
