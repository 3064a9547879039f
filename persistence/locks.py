from __future__ import annotations

import threading
from pathlib import Path


class PathLockRegistry:
    """
    Provides a stable re-entrant lock per normalized file path.

    Re-entrant so a collection can hold the lock across load() and save()
    of the same document store.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, threading.RLock] = {}

    def lock_for(self, path: Path) -> threading.RLock:
        key = str(path.resolve())
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.RLock()
                self._locks[key] = lock
            return lock


GLOBAL_PATH_LOCKS = PathLockRegistry()
