"""In-memory cache state adapter."""

import threading

from ..ports import StoragePort


class MemoryCacheStateAdapter:
    """Tracks fully cached identifiers in memory. State is lost on restart."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._cached: dict[StoragePort, set[str]] = {}

    def is_fully_cached(self, store: StoragePort, id: str) -> bool:
        with self._lock:
            return id in self._cached.get(store, ())

    def set_fully_cached(self, store: StoragePort, id: str, value: bool) -> None:
        with self._lock:
            if value:
                self._cached.setdefault(store, set()).add(id)
            elif store in self._cached:
                self._cached[store].discard(id)

    def clear(self, store: StoragePort) -> None:
        with self._lock:
            self._cached.pop(store, None)
