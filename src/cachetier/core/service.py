"""Core CachedStorage orchestration."""

import threading
import time
from typing import BinaryIO

from ..ports import CacheStatePort, LoggerPort, MetricsPort, StoragePort
from .errors import InvalidStateError, UnsupportedOperationError
from .locks import KeyedLocks
from .tee import TeeReader


class CachedStorage:
    """Storage that serves reads from a local copy of a remote storage.

    Reads of identifiers that are not fully cached stream from ``remote``
    and are mirrored into ``local`` as they go. Once a read drains the
    remote stream without a local write failure, the identifier is marked
    fully cached and later reads are served from ``local`` only.

    Writes always go to ``remote``. They do not invalidate a local copy:
    call :meth:`purge` after overwriting an identifier that may be cached.

    CachedStorage satisfies :class:`~cachetier.ports.StoragePort` itself, so
    it can be passed anywhere a plain storage is expected.
    """

    def __init__(
        self,
        remote: StoragePort,
        local: StoragePort,
        cache_state: CacheStatePort | None = None,
        logger: LoggerPort | None = None,
        metrics: MetricsPort | None = None,
        lazy_caching: bool = False,
        chunk_size: int = 1024,
        lock_timeout: float | None = 30.0,
    ):
        """Initialize with the remote and local storages.

        Args:
            cache_state: Tracker shared with other instances. If None, an
                in-memory tracker is created and state is lost on restart.
            lazy_caching: Start with read-through caching disabled.
            chunk_size: Bytes per read for explicit copies and skips.
            lock_timeout: Seconds :meth:`cache` waits for a read that is
                populating the same identifier. None waits forever.
        """
        from ..adapters import MemoryCacheStateAdapter, NoopMetricsAdapter, StdLoggerAdapter

        self.remote = remote
        self.local = local
        self.cache_state = cache_state if cache_state is not None else MemoryCacheStateAdapter()
        self.logger = logger if logger is not None else StdLoggerAdapter()
        self.metrics = metrics if metrics is not None else NoopMetricsAdapter()
        self.chunk_size = chunk_size
        self.lock_timeout = lock_timeout
        self._lazy_caching = lazy_caching
        self._population_locks = KeyedLocks()
        # Populations that were purged or deleted while in flight
        self._invalidated: set[str] = set()
        self._state_lock = threading.Lock()

    @property
    def lazy_caching(self) -> bool:
        """Whether reads skip populating the local storage."""
        return self._lazy_caching

    @lazy_caching.setter
    def lazy_caching(self, value: bool) -> None:
        self._lazy_caching = value

    def contains(self, id: str) -> bool:
        return self.local.contains(id) or self.remote.contains(id)

    def open_output_stream(self, id: str) -> BinaryIO:
        """Open a writer on the remote storage.

        The local copy and its fully cached flag are left as they are, so a
        cached identifier keeps serving its old bytes until purged.
        """
        return self.remote.open_output_stream(id)

    def open_input_stream(self, id: str) -> BinaryIO | None:
        """Open a reader for ``id``, caching it locally while it is read.

        Returns None if the remote storage does not have ``id``.
        """
        if self.is_fully_cached(id):
            stream = self._open_local(id)
            if stream is not None:
                return stream

        src = self.remote.open_input_stream(id)
        if src is None:
            return None

        self.metrics.increment("cachetier.read.miss")

        if self._lazy_caching:
            self.logger.debug("Reading from remote storage without caching", id=id)
            return src

        if not self._population_locks.try_acquire(id):
            self.logger.debug("Cache population already in progress, bypassing", id=id)
            self.metrics.increment("cachetier.read.bypass")
            return src

        local_stream = None
        dst = None
        try:
            # Another reader may have finished populating since the first check
            if self.is_fully_cached(id):
                local_stream = self._open_local(id)
            if local_stream is None:
                dst = self.local.open_output_stream(id)
        except OSError as e:
            self.logger.warning("Cannot open local storage for caching", id=id, error=str(e))
            self._abandon_population(id)
            return src
        except BaseException:
            self._abandon_population(id)
            src.close()
            raise

        if local_stream is not None:
            self._abandon_population(id)
            src.close()
            return local_stream

        self.logger.debug("Reading from remote storage", id=id)
        return TeeReader(
            src,
            dst,
            on_close=lambda completed, write_protected: self._finish_population(
                id, completed, write_protected
            ),
            logger=self.logger,
            id=id,
            chunk_size=self.chunk_size,
        )

    def is_fully_cached(self, id: str) -> bool:
        return self.cache_state.is_fully_cached(self.local, id)

    def cache(self, id: str) -> None:
        """Copy ``id`` from remote to local, blocking until done.

        Does nothing if ``id`` is already fully cached. If the copy fails
        the identifier stays not fully cached and the error propagates. If a
        read on another thread is populating ``id``, waits up to
        ``lock_timeout`` seconds for it to finish first.

        Raises:
            InvalidStateError: If the remote storage has no stream for ``id``,
                or a stream opened on this thread is still populating ``id``.
            TimeoutError: If the population in progress does not finish in
                time.
        """
        if self.is_fully_cached(id):
            return

        if self._population_locks.held_by_current_thread(id):
            raise InvalidStateError(
                f"A stream opened on this thread is still caching {id!r}, close it first"
            )
        if not self._population_locks.acquire(id, self.lock_timeout):
            raise TimeoutError(f"Timed out waiting for the read caching {id!r}")

        start_time = time.monotonic()
        copied = None
        completed = False
        try:
            # A read may have finished populating while this call waited
            if not self.is_fully_cached(id):
                src = self.remote.open_input_stream(id)
                if src is None:
                    raise InvalidStateError(f"Remote storage returned no stream for {id!r}")
                with src:
                    copied = self._copy_to_local(id, src)
            completed = True
        finally:
            fully_cached = self._end_population(id, completed)

        if copied is None:
            return
        if not fully_cached:
            self.logger.debug("Copy discarded, identifier was purged while caching", id=id)
            return

        self.metrics.increment("cachetier.cache.promoted")
        self.logger.log_operation(
            op="cache",
            key=id,
            sizes={"copied": copied},
            durations={"total": time.monotonic() - start_time},
        )

    def purge(self, id: str) -> bool:
        """Remove the local copy of ``id``, keeping the remote one.

        A population of ``id`` still in flight is invalidated: when it
        finishes, its copy is dropped instead of being marked fully cached.

        Returns whether a local copy existed.
        """
        with self._state_lock:
            if self._population_locks.is_locked(id):
                self._invalidated.add(id)
        deleted = self.local.delete(id)
        if deleted:
            self.cache_state.set_fully_cached(self.local, id, False)
            self.logger.debug("Purged local copy", id=id)
        return deleted

    def delete(self, id: str) -> bool:
        """Delete ``id`` remotely, then purge it locally.

        The local copy is only purged if the remote deletion reported that
        ``id`` existed.
        """
        return self.remote.delete(id) and self.purge(id)

    def delete_all(self) -> None:
        """Clear the local storage, then the remote one if it supports it."""
        with self._state_lock:
            self._invalidated.update(self._population_locks.locked_keys())
        self.local.delete_all()
        self.cache_state.clear(self.local)
        try:
            self.remote.delete_all()
        except UnsupportedOperationError:
            self.logger.debug("Remote storage does not support delete_all, skipping")

    def _open_local(self, id: str) -> BinaryIO | None:
        stream = self.local.open_input_stream(id)
        if stream is None:
            self.logger.warning("Fully cached identifier missing from local storage", id=id)
            self.cache_state.set_fully_cached(self.local, id, False)
            return None
        self.logger.debug("Reading from local storage", id=id)
        self.metrics.increment("cachetier.read.hit")
        return stream

    def _copy_to_local(self, id: str, src: BinaryIO) -> int:
        copied = 0
        # Local writers discard the copy when the block raises
        with self.local.open_output_stream(id) as dst:
            for chunk in iter(lambda: src.read(self.chunk_size), b""):
                dst.write(chunk)
                copied += len(chunk)
            dst.flush()
        return copied

    def _end_population(self, id: str, completed: bool) -> bool:
        """Record the outcome of a population and release its lock.

        Returns whether ``id`` is now fully cached.
        """
        with self._state_lock:
            invalidated = id in self._invalidated
            self._invalidated.discard(id)
            try:
                if invalidated:
                    self._drop_local(id)
                fully_cached = completed and not invalidated
                self.cache_state.set_fully_cached(self.local, id, fully_cached)
            finally:
                self._population_locks.release(id)
        return fully_cached

    def _abandon_population(self, id: str) -> None:
        with self._state_lock:
            self._invalidated.discard(id)
            self._population_locks.release(id)

    def _drop_local(self, id: str) -> None:
        try:
            if self.local.delete(id):
                self.logger.debug("Dropped copy of purged identifier", id=id)
        except OSError as e:
            self.logger.warning("Cannot drop copy of purged identifier", id=id, error=str(e))

    def _finish_population(self, id: str, completed: bool, write_protected: bool) -> None:
        fully_cached = self._end_population(id, completed and not write_protected)
        if write_protected:
            self.metrics.increment("cachetier.tee.write_failed")
        if fully_cached:
            self.metrics.increment("cachetier.cache.promoted")
            self.logger.info("Cached identifier", id=id)
        else:
            self.logger.debug(
                "Identifier not cached",
                id=id,
                completed=completed,
                write_protected=write_protected,
            )
