"""Per-identifier locking for cache population."""

import threading
from collections.abc import Iterator
from contextlib import contextmanager


class KeyedLocks:
    """A registry of locks keyed by identifier.

    Each held key records the thread that acquired it. Entries only exist
    while a key is held, so the registry grows with the number of
    identifiers currently being populated.

    A key may be released from a thread other than its owner: a cache
    population started on one thread can finish when its stream is closed
    on another.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition()
        self._owners: dict[str, int] = {}

    def try_acquire(self, key: str) -> bool:
        """Acquire the lock for ``key`` without blocking.

        Returns False if it is already held, by any thread. A successful call
        must be paired with :meth:`release`.
        """
        with self._cond:
            if key in self._owners:
                return False
            self._owners[key] = threading.get_ident()
            return True

    def acquire(self, key: str, timeout: float | None = None) -> bool:
        """Wait until the lock for ``key`` is free, then take it.

        Returns False if ``timeout`` seconds pass first. Waiting on a key
        held by the calling thread itself would never end, so that raises
        ``RuntimeError`` instead.
        """
        me = threading.get_ident()
        with self._cond:
            if self._owners.get(key) == me:
                raise RuntimeError(f"Lock for {key!r} is already held by this thread")
            if not self._cond.wait_for(lambda: key not in self._owners, timeout):
                return False
            self._owners[key] = me
            return True

    def release(self, key: str) -> None:
        with self._cond:
            if key not in self._owners:
                raise RuntimeError(f"Lock for {key!r} is not held")
            del self._owners[key]
            self._cond.notify_all()

    def is_locked(self, key: str) -> bool:
        with self._cond:
            return key in self._owners

    def held_by_current_thread(self, key: str) -> bool:
        with self._cond:
            return self._owners.get(key) == threading.get_ident()

    def locked_keys(self) -> set[str]:
        """Snapshot of the keys currently held."""
        with self._cond:
            return set(self._owners)

    @contextmanager
    def hold(self, key: str, timeout: float | None = None) -> Iterator[None]:
        """Context manager around :meth:`acquire` / :meth:`release`.

        Raises:
            TimeoutError: If the lock is not free within ``timeout`` seconds.
        """
        if not self.acquire(key, timeout):
            raise TimeoutError(f"Timed out waiting for lock on {key!r}")
        try:
            yield
        finally:
            self.release(key)
