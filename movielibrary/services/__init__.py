"""Catalog services: working-set orchestration and search."""

from movielibrary.services.catalog import CatalogService, WorkingSet
from movielibrary.services.search import SearchIndex, SearchResults

__all__ = [
    "CatalogService",
    "WorkingSet",
    "SearchIndex",
    "SearchResults",
]
