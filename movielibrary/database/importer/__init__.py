"""Database importer package.

Provides the one-shot seed dataset import.
"""

from movielibrary.database.importer.schemas import SeedActor, SeedGenre, SeedMovie
from movielibrary.database.importer.seed_loader import SeedLoader, SeedLoadError, SeedResult

__all__ = [
    "SeedActor",
    "SeedGenre",
    "SeedLoadError",
    "SeedLoader",
    "SeedMovie",
    "SeedResult",
]
