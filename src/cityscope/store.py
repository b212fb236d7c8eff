"""Thread-safe owners of shared mutable state: the item collection and the result memo."""

from __future__ import annotations

from collections import OrderedDict
from threading import Lock
from typing import Callable, Iterable, Optional

from cityscope.config import CACHE_SIZE
from cityscope.models import ClusterableItem, ClusterResult


class ItemStore:
    """Single owner of a shared, append-mostly list of map items.

    Other components read immutable snapshots; only the store mutates the
    collection. ``version`` increases on every change so callers can key
    memoised results on it.
    """

    def __init__(self, items: Iterable[ClusterableItem] = ()):
        self._lock = Lock()
        self._items: dict[str, ClusterableItem] = {}
        self._version = 0
        self.extend(items)

    def add(self, item: ClusterableItem) -> None:
        """Insert or replace an item by id."""
        with self._lock:
            self._items[item.id] = item
            self._version += 1

    def extend(self, items: Iterable[ClusterableItem]) -> int:
        items = list(items)
        if not items:
            return 0
        with self._lock:
            for item in items:
                self._items[item.id] = item
            self._version += 1
        return len(items)

    def remove(self, item_id: str) -> bool:
        with self._lock:
            if self._items.pop(item_id, None) is None:
                return False
            self._version += 1
            return True

    def snapshot(self) -> tuple[int, tuple[ClusterableItem, ...]]:
        """Current version and an immutable copy of the items, read atomically."""
        with self._lock:
            return self._version, tuple(self._items.values())

    @property
    def version(self) -> int:
        with self._lock:
            return self._version

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)


def items_key(items: Iterable[ClusterableItem]) -> tuple:
    """Hashable, order-independent fingerprint of the items' ids and positions."""
    return tuple(sorted(
        (item.id, item.point.lat, item.point.lng)
        for item in items
        if item.point is not None
    ))


class ClusterCache:
    """Bounded LRU memo of clustering results keyed on (items, zoom, config)."""

    def __init__(self, max_entries: int = CACHE_SIZE):
        self.max_entries = max(1, max_entries)
        self._lock = Lock()
        self._entries: OrderedDict[tuple, ClusterResult] = OrderedDict()
        self.hits = 0
        self.misses = 0

    def get_or_compute(self, key: tuple, compute: Callable[[], ClusterResult]) -> ClusterResult:
        """Return the cached result for ``key``, computing it outside the lock on a miss."""
        cached = self.get(key)
        if cached is not None:
            return cached
        result = compute()
        self.put(key, result)
        return result

    def get(self, key: tuple) -> Optional[ClusterResult]:
        with self._lock:
            result = self._entries.get(key)
            if result is None:
                self.misses += 1
                return None
            self._entries.move_to_end(key)
            self.hits += 1
            return result

    def put(self, key: tuple, result: ClusterResult) -> None:
        with self._lock:
            self._entries[key] = result
            self._entries.move_to_end(key)
            while len(self._entries) > self.max_entries:
                self._entries.popitem(last=False)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
