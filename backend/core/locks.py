# backend/core/locks.py

"""
Per-key mutual exclusion for short critical sections.

Row locks (``SELECT ... FOR UPDATE``) serialize writers across processes
on PostgreSQL but are a no-op on SQLite. ``KeyedLock`` serializes callers
inside one process regardless of the backend, so the two together give a
serializable read-check-write sequence per key.
"""

import threading
from contextlib import contextmanager
from typing import Dict, Hashable, Iterator


class KeyedLock:
    """A registry of reference-counted locks, one per key."""

    def __init__(self, name: str = "keyed"):
        self.name = name
        self._guard = threading.Lock()
        self._locks: Dict[Hashable, threading.Lock] = {}
        self._waiters: Dict[Hashable, int] = {}

    @contextmanager
    def hold(self, key: Hashable) -> Iterator[None]:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.Lock()
                self._waiters[key] = 0
            self._waiters[key] += 1

        lock.acquire()
        try:
            yield
        finally:
            lock.release()
            with self._guard:
                self._waiters[key] -= 1
                if self._waiters[key] == 0:
                    del self._waiters[key]
                    del self._locks[key]

    def active_keys(self) -> int:
        """Number of keys currently held or awaited."""
        with self._guard:
            return len(self._locks)
