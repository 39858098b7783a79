"""Tests for KeyedLocks."""

import threading
import time

import pytest

from cachetier.core import KeyedLocks


class TestKeyedLocks:
    def test_try_acquire_is_exclusive_per_key(self):
        locks = KeyedLocks()

        assert locks.try_acquire("a") is True
        assert locks.try_acquire("a") is False
        assert locks.try_acquire("b") is True

        locks.release("a")
        assert locks.try_acquire("a") is True

    def test_entries_are_dropped_when_released(self):
        locks = KeyedLocks()

        locks.try_acquire("a")
        assert locks.is_locked("a")
        assert locks.locked_keys() == {"a"}
        locks.release("a")

        assert locks.is_locked("a") is False
        assert locks.locked_keys() == set()

    def test_failed_try_acquire_keeps_holder(self):
        locks = KeyedLocks()
        locks.try_acquire("a")
        locks.try_acquire("a")

        assert locks.is_locked("a")
        locks.release("a")
        assert locks.locked_keys() == set()

    def test_release_unheld_key_raises(self):
        with pytest.raises(RuntimeError):
            KeyedLocks().release("a")

    def test_hold_blocks_other_threads(self):
        locks = KeyedLocks()
        order = []

        def worker():
            with locks.hold("a"):
                order.append("worker")

        with locks.hold("a"):
            thread = threading.Thread(target=worker)
            thread.start()
            time.sleep(0.05)
            order.append("main")

        thread.join(timeout=5)
        assert order == ["main", "worker"]
        assert locks.locked_keys() == set()

    def test_owner_is_tracked_per_thread(self):
        locks = KeyedLocks()
        locks.try_acquire("a")
        seen = []

        thread = threading.Thread(target=lambda: seen.append(locks.held_by_current_thread("a")))
        thread.start()
        thread.join(timeout=5)

        assert locks.held_by_current_thread("a") is True
        assert seen == [False]

    def test_acquire_own_lock_raises_instead_of_waiting(self):
        locks = KeyedLocks()
        locks.try_acquire("a")

        with pytest.raises(RuntimeError, match="already held"):
            locks.acquire("a")

    def test_acquire_times_out(self):
        locks = KeyedLocks()
        thread = threading.Thread(target=locks.try_acquire, args=("a",))
        thread.start()
        thread.join(timeout=5)

        start = time.monotonic()
        assert locks.acquire("a", timeout=0.05) is False
        assert time.monotonic() - start < 5

        with pytest.raises(TimeoutError):
            with locks.hold("a", timeout=0.01):
                pass

    def test_release_from_another_thread_wakes_waiter(self):
        locks = KeyedLocks()
        locks.try_acquire("a")
        acquired = []

        def worker():
            acquired.append(locks.acquire("a", timeout=5))
            locks.release("a")

        thread = threading.Thread(target=worker)
        thread.start()
        time.sleep(0.05)
        locks.release("a")
        thread.join(timeout=5)

        assert acquired == [True]
