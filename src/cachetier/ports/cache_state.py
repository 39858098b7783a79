"""Cache state port interface."""

from typing import Protocol

from .storage import StoragePort


class CacheStatePort(Protocol):
    """Port for tracking which identifiers are fully copied into a store."""

    def is_fully_cached(self, store: StoragePort, id: str) -> bool:
        """Return True if a complete copy of ``id`` is present in ``store``."""
        ...

    def set_fully_cached(self, store: StoragePort, id: str, value: bool) -> None:
        """Record whether ``id`` is fully present in ``store``."""
        ...

    def clear(self, store: StoragePort) -> None:
        """Forget every identifier recorded for ``store``."""
        ...
