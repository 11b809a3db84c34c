"""Managed image storage.

Turns uploaded image bytes into a normalized asset (16:10 center crop,
aggressive JPEG compression) stored under a generated reference, and
resolves references back to images.

Two reference namespaces share one string type:
    - Generated: ``<uuid>.jpg`` in canonical hyphenated form, stored in the
      managed images directory.
    - Bundled: static asset names shipped with the package. Anything that
      is not exactly a generated reference is treated as a bundled name.

Public operations are coroutines; decoding, encoding and file I/O run
in a worker thread.
"""

import asyncio
import re
from collections.abc import Iterable
from enum import Enum
from io import BytesIO
from pathlib import Path
from uuid import uuid4

from PIL import Image, ImageOps, UnidentifiedImageError

from movielibrary.images.cache import ImageCache
from movielibrary.images.exceptions import (
    ImageEncodingError,
    ImageStoreError,
    ImageWriteError,
    InvalidImageDataError,
)
from movielibrary.settings.images import ImageSettings
from movielibrary.utils.logger import setup_logger

logger = setup_logger("images.store")

# Exact shape of a generated reference: a plain file name, never a path
GENERATED_PATTERN = re.compile(
    r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}\.jpg"
)

# Extensions tried when a bundled name is given without one
BUNDLED_EXTENSIONS = (".jpg", ".jpeg", ".png", ".webp")


class Placeholder(str, Enum):
    """Deterministic fallback returned when a reference cannot be resolved."""

    MISSING_ASSET = "person.circle"
    MISSING_FILE = "exclamationmark.triangle"


def is_generated(reference: str) -> bool:
    """Check whether *reference* names a generated image.

    Only the exact ``<uuid>.jpg`` shape qualifies, so a reference can never
    reach outside the managed images directory.
    """
    return GENERATED_PATTERN.fullmatch(reference) is not None


class ImageStore:
    """Save, load and delete catalog images.

    Attributes:
        _images_dir: Managed storage for generated images.
        _bundled_dir: Static assets shipped with the package.
        _cache: Decoded image cache shared by every read.
        _config: Crop and compression parameters.

    Example:
        ```python
        store = ImageStore(images_dir, bundled_dir, ImageCache())
        reference = await store.save(upload_bytes)
        image = await store.load(reference)
        ```
    """

    def __init__(
        self,
        images_dir: Path,
        bundled_dir: Path,
        cache: ImageCache | None = None,
        config: ImageSettings | None = None,
    ) -> None:
        """Initialize image store.

        Args:
            images_dir: Directory for generated images (created on demand).
            bundled_dir: Directory of bundled assets.
            cache: Image cache. A private one is created if None.
            config: Image settings. Defaults apply if None.
        """
        self._config = config if config is not None else ImageSettings()
        self._images_dir = images_dir
        self._bundled_dir = bundled_dir
        # An empty cache is falsy, so test against None
        if cache is None:
            cache = ImageCache(
                count_limit=self._config.cache_count_limit,
                cost_limit=self._config.cache_cost_limit,
            )
        self._cache = cache

    @property
    def images_dir(self) -> Path:
        """Managed storage directory."""
        return self._images_dir

    @property
    def cache(self) -> ImageCache:
        """Image cache in front of disk reads."""
        return self._cache

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    async def save(self, data: bytes) -> str:
        """Crop, compress and store an image.

        Args:
            data: Encoded image bytes in any format Pillow can decode.

        Returns:
            Generated reference of the stored image.

        Raises:
            InvalidImageDataError: If *data* is not a decodable image.
            ImageEncodingError: If JPEG encoding fails.
            ImageWriteError: If the file cannot be written.
        """
        return await asyncio.to_thread(self._save, data)

    async def load(self, reference: str) -> Image.Image | Placeholder:
        """Resolve a reference to a decoded image. Never raises.

        Args:
            reference: Generated reference or bundled asset name.

        Returns:
            Decoded image, or a placeholder if it cannot be found.
        """
        return await asyncio.to_thread(self._load, reference)

    async def load_bytes(self, reference: str) -> bytes:
        """Resolve a reference to its stored bytes.

        Bundled assets are returned as shipped, at full quality.

        Args:
            reference: Generated reference or bundled asset name.

        Returns:
            Encoded bytes, or ``b""`` if nothing is stored.
        """
        return await asyncio.to_thread(self._load_bytes, reference)

    async def delete(self, reference: str) -> None:
        """Remove a generated image from cache and disk.

        Bundled names are left untouched.

        Args:
            reference: Image reference.
        """
        await asyncio.to_thread(self._delete, reference)

    async def migrate_bundled(self, names: Iterable[str]) -> dict[str, str]:
        """Move bundled assets into managed storage.

        Each asset goes through the same pipeline as an upload. Assets
        that cannot be read or saved are skipped.

        Args:
            names: Bundled asset names.

        Returns:
            Mapping of bundled name to generated reference.
        """
        return await asyncio.to_thread(self._migrate_bundled, list(names))

    # -------------------------------------------------------------------------
    # Transform
    # -------------------------------------------------------------------------

    def crop_to_aspect(self, image: Image.Image) -> Image.Image:
        """Center-crop *image* to the target aspect ratio.

        Wider images lose width evenly on both sides, taller images lose
        height evenly top and bottom. Images already within tolerance
        are returned unchanged.
        """
        target = self._config.target_aspect
        width, height = image.size
        aspect = width / height

        if abs(aspect - target) < self._config.aspect_tolerance:
            return image

        if aspect > target:
            new_width = round(height * target)
            left = (width - new_width) // 2
            box = (left, 0, left + new_width, height)
        else:
            new_height = round(width / target)
            top = (height - new_height) // 2
            box = (0, top, width, top + new_height)

        return image.crop(box)

    def _decode(self, data: bytes) -> Image.Image:
        try:
            image = Image.open(BytesIO(data))
            image.load()
            # Camera uploads carry their rotation in EXIF
            image = ImageOps.exif_transpose(image)
        except (
            UnidentifiedImageError,
            Image.DecompressionBombError,
            OSError,
            ValueError,
        ) as e:
            logger.error(f"Invalid image data provided to save: {e}")
            raise InvalidImageDataError(str(e)) from e
        if image.width == 0 or image.height == 0:
            raise InvalidImageDataError("Image has no pixels")
        return image

    def _encode(self, image: Image.Image) -> bytes:
        buffer = BytesIO()
        try:
            # JPEG has no alpha or palette support
            if image.mode != "RGB":
                image = image.convert("RGB")
            image.save(buffer, format="JPEG", quality=self._config.jpeg_quality)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to compress image data: {e}")
            raise ImageEncodingError(str(e)) from e
        return buffer.getvalue()

    # -------------------------------------------------------------------------
    # Blocking implementations
    # -------------------------------------------------------------------------

    def _save(self, data: bytes) -> str:
        original = self._decode(data)
        cropped = self.crop_to_aspect(original)
        encoded = self._encode(cropped)

        reference = f"{uuid4()}.jpg"
        path = self._images_dir / reference
        try:
            self._images_dir.mkdir(parents=True, exist_ok=True)
            path.write_bytes(encoded)
        except OSError as e:
            logger.error(f"Failed to write image to disk: {e}")
            raise ImageWriteError(reference, e) from e

        self._cache.put(reference, cropped)
        self._log_saved(reference, data, encoded, original, cropped)
        return reference

    def _load(self, reference: str) -> Image.Image | Placeholder:
        if is_generated(reference):
            cached = self._cache.get(reference)
            if cached is not None:
                return cached
            image = self._open(self._images_dir / reference)
            if image is None:
                logger.warning(f"Failed to load image: {reference}")
                return Placeholder.MISSING_FILE
            self._cache.put(reference, image)
            return image

        path = self._find_bundled(reference)
        image = self._open(path) if path else None
        return image if image is not None else Placeholder.MISSING_ASSET

    def _load_bytes(self, reference: str) -> bytes:
        if is_generated(reference):
            path = self._images_dir / reference
        else:
            path = self._find_bundled(reference)
        if path is None:
            return b""
        try:
            return path.read_bytes()
        except OSError:
            return b""

    def _delete(self, reference: str) -> None:
        if not is_generated(reference):
            return

        self._cache.remove(reference)
        path = self._images_dir / reference
        try:
            path.unlink()
            logger.info(f"Deleted image: {reference}")
        except FileNotFoundError:
            logger.warning(f"File does not exist: {path}")
        except OSError as e:
            logger.error(f"Failed to delete image {reference}: {e}")

    def _migrate_bundled(self, names: list[str]) -> dict[str, str]:
        unique_names = list(dict.fromkeys(names))
        logger.info(f"Starting asset migration for {len(unique_names)} images")

        mapping: dict[str, str] = {}
        for name in unique_names:
            data = self._load_bytes(name) if not is_generated(name) else b""
            if not data:
                logger.warning(f"Asset not found: {name}")
                continue
            try:
                mapping[name] = self._save(data)
            except ImageStoreError as e:
                logger.error(f"Failed to save asset {name}: {e}")
                continue
            logger.info(f"Migrated: {name} -> {mapping[name]}")

        logger.info(f"Asset migration complete: {len(mapping)}/{len(unique_names)} successful")
        return mapping

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _find_bundled(self, name: str) -> Path | None:
        """Locate a bundled asset by exact name, then by known extensions."""
        # Names are plain file names, never paths
        if not name or Path(name).name != name:
            return None
        candidates = [name, *(f"{name}{ext}" for ext in BUNDLED_EXTENSIONS)]
        for candidate in candidates:
            path = self._bundled_dir / candidate
            if path.is_file():
                return path
        return None

    @staticmethod
    def _open(path: Path) -> Image.Image | None:
        try:
            with Image.open(path) as image:
                image.load()
                return image.copy()
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError):
            return None

    @staticmethod
    def _log_saved(
        reference: str,
        data: bytes,
        encoded: bytes,
        original: Image.Image,
        cropped: Image.Image,
    ) -> None:
        reduction = int((1 - len(encoded) / len(data)) * 100)
        logger.info(
            f"Image saved: {reference} | "
            f"aspect {original.width / original.height:.2f} -> "
            f"{cropped.width / cropped.height:.2f} | "
            f"size {len(data)} -> {len(encoded)} bytes ({reduction}% reduction) | "
            f"dimensions {original.width}x{original.height} -> "
            f"{cropped.width}x{cropped.height}"
        )
