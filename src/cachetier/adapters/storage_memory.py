"""In-memory storage adapter."""

import io
import threading
from collections.abc import Callable
from typing import BinaryIO

from ..core.errors import UnsupportedOperationError


class _MemoryWriter(io.BytesIO):
    """BytesIO that hands its content to ``commit`` when closed.

    Leaving a ``with`` block on an exception discards the content instead.
    """

    def __init__(self, commit: Callable[[bytes], None]):
        super().__init__()
        self._commit = commit

    def close(self) -> None:
        if self.closed:
            return
        data = self.getvalue()
        super().close()
        self._commit(data)

    def abort(self) -> None:
        """Close without committing."""
        if not self.closed:
            super().close()

    def __exit__(self, exc_type, exc, tb):  # type: ignore[no-untyped-def]
        if exc_type is not None:
            self.abort()
        else:
            self.close()


class MemoryStorageAdapter:
    """Storage keeping every identifier in a dict.

    Content written through :meth:`open_output_stream` becomes visible when
    the stream is closed.
    """

    def __init__(self, supports_delete_all: bool = True, label: str = "memory"):
        """Initialize an empty storage.

        Args:
            supports_delete_all: If False, :meth:`delete_all` raises
                UnsupportedOperationError, like an append-only store.
            label: Stable name used by persisted cache state trackers.
        """
        self.supports_delete_all = supports_delete_all
        self.label = label
        self._items: dict[str, bytes] = {}
        self._lock = threading.Lock()

    def contains(self, id: str) -> bool:
        with self._lock:
            return id in self._items

    def open_output_stream(self, id: str) -> BinaryIO:
        return _MemoryWriter(lambda data: self._put(id, data))

    def open_input_stream(self, id: str) -> BinaryIO | None:
        with self._lock:
            data = self._items.get(id)
        if data is None:
            return None
        return io.BytesIO(data)

    def delete(self, id: str) -> bool:
        with self._lock:
            return self._items.pop(id, None) is not None

    def delete_all(self) -> None:
        if not self.supports_delete_all:
            raise UnsupportedOperationError("Memory storage was created without delete_all support")
        with self._lock:
            self._items.clear()

    def keys(self) -> list[str]:
        with self._lock:
            return sorted(self._items)

    def _put(self, id: str, data: bytes) -> None:
        with self._lock:
            self._items[id] = data
