"""Image pipeline: crop, compress, store and cache catalog images."""

from movielibrary.images.cache import ImageCache
from movielibrary.images.exceptions import (
    ImageEncodingError,
    ImageStoreError,
    ImageWriteError,
    InvalidImageDataError,
)
from movielibrary.images.store import ImageStore, Placeholder, is_generated

__all__ = [
    "ImageCache",
    "ImageStore",
    "Placeholder",
    "is_generated",
    # Errors
    "ImageStoreError",
    "InvalidImageDataError",
    "ImageEncodingError",
    "ImageWriteError",
]
