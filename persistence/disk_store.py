from __future__ import annotations

from pathlib import Path
from typing import Any

from json_store import atomic_write_json, read_json

from .errors import StoreError, StoreUnavailableError
from .interfaces import KeyValueDocumentStore
from .locks import GLOBAL_PATH_LOCKS


class DiskJsonDocumentStore(KeyValueDocumentStore):
    """
    Stores a single JSON document on disk at a fixed path.

    - Returns an empty dict for a missing or empty file.
    - Writes atomically.
    - Raises StoreError for unreadable/unwritable files and invalid JSON.

    Callers doing read-modify-write must hold `lock` across both calls.
    """

    def __init__(self, path: Path):
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    @property
    def lock(self):
        return GLOBAL_PATH_LOCKS.lock_for(self._path)

    def load(self) -> dict[str, Any]:
        with self.lock:
            try:
                raw = read_json(self._path)
            except OSError as e:
                raise StoreUnavailableError(f"cannot read {self._path}: {e}") from e
            except ValueError as e:
                raise StoreError(f"corrupt document {self._path}: {e}") from e
        if raw is None:
            return {}
        if not isinstance(raw, dict):
            raise StoreError(f"corrupt document {self._path}: expected an object")
        return raw

    def save(self, doc: dict[str, Any]) -> None:
        with self.lock:
            try:
                atomic_write_json(self._path, doc)
            except OSError as e:
                raise StoreUnavailableError(f"cannot write {self._path}: {e}") from e
