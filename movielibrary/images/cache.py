"""Bounded in-memory cache of decoded images.

Least recently used entries are evicted until both the entry count and
the cumulative cost fit their limits. Correctness never depends on a
hit: every caller falls back to disk on a miss.
"""

import threading
from collections import OrderedDict
from dataclasses import dataclass

from PIL import Image

from movielibrary.utils.logger import setup_logger

logger = setup_logger("images.cache")

# Bytes per pixel for an RGBA bitmap
_BYTES_PER_PIXEL = 4


@dataclass
class _CacheEntry:
    """Cached image and the cost it was admitted with."""

    image: Image.Image
    cost: int


class ImageCache:
    """Thread-safe LRU image cache with count and cost limits.

    Attributes:
        _entries: Reference to entry mapping, oldest first.
        _count_limit: Maximum number of entries (0 disables the limit).
        _cost_limit: Maximum cumulative cost (0 disables the limit).
        _total_cost: Sum of entry costs.
        _lock: Thread synchronization lock.
    """

    def __init__(self, count_limit: int = 100, cost_limit: int = 500 * 1024 * 1024) -> None:
        """Initialize image cache.

        Args:
            count_limit: Max cached images.
            cost_limit: Max cumulative cost in bytes.
        """
        self._entries: OrderedDict[str, _CacheEntry] = OrderedDict()
        self._count_limit = count_limit
        self._cost_limit = cost_limit
        self._total_cost = 0
        self._lock = threading.Lock()

    @staticmethod
    def estimate_cost(image: Image.Image) -> int:
        """Approximate decoded size of *image* in bytes."""
        width, height = image.size
        return width * height * _BYTES_PER_PIXEL

    def get(self, key: str) -> Image.Image | None:
        """Return the cached image for *key*, or None on a miss."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            self._entries.move_to_end(key)
            return entry.image

    def put(self, key: str, image: Image.Image, cost: int | None = None) -> None:
        """Cache *image* under *key*, evicting older entries as needed.

        Args:
            key: Image reference.
            image: Decoded image.
            cost: Admission cost; estimated from the pixel size if None.
        """
        if cost is None:
            cost = self.estimate_cost(image)
        with self._lock:
            previous = self._entries.pop(key, None)
            if previous is not None:
                self._total_cost -= previous.cost
            self._entries[key] = _CacheEntry(image=image, cost=cost)
            self._total_cost += cost
            self._evict()

    def remove(self, key: str) -> None:
        """Drop *key* from the cache if present."""
        with self._lock:
            entry = self._entries.pop(key, None)
            if entry is not None:
                self._total_cost -= entry.cost

    def clear(self) -> None:
        """Drop every entry."""
        with self._lock:
            self._entries.clear()
            self._total_cost = 0

    @property
    def total_cost(self) -> int:
        """Cumulative cost of the cached entries."""
        with self._lock:
            return self._total_cost

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    def _evict(self) -> None:
        """Drop oldest entries until both limits hold. Lock must be held."""
        while self._entries and (self._over_count() or self._over_cost()):
            key, entry = self._entries.popitem(last=False)
            self._total_cost -= entry.cost
            logger.debug(f"Evicted image {key} from cache")

    def _over_count(self) -> bool:
        return self._count_limit > 0 and len(self._entries) > self._count_limit

    def _over_cost(self) -> bool:
        return self._cost_limit > 0 and self._total_cost > self._cost_limit
