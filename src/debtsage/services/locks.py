"""Per-entity locks serializing read-modify-write on debts and accounts."""

from __future__ import annotations

import threading
import weakref
from contextlib import ExitStack, contextmanager
from typing import Hashable, Iterator


class LockRegistry:
    """Hands out one lock per key, created on first use.

    Locks are held weakly, so an entry disappears once no caller references
    its lock and the registry does not grow with every entity ever paid.
    ``hold`` acquires several keys in sorted order so two callers locking the
    same pair of entities cannot deadlock.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: weakref.WeakValueDictionary[Hashable, threading.Lock] = (
            weakref.WeakValueDictionary()
        )

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)

    def lock_for(self, key: Hashable) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.Lock()
                self._locks[key] = lock
            return lock

    @contextmanager
    def hold(self, *keys: Hashable) -> Iterator[None]:
        ordered = sorted(set(keys), key=repr)
        with ExitStack() as stack:
            for key in ordered:
                stack.enter_context(self.lock_for(key))
            yield
