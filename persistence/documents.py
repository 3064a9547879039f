from __future__ import annotations

import copy
import threading
import uuid
from pathlib import Path
from typing import Any

from .disk_store import DiskJsonDocumentStore
from .errors import DuplicateKeyError, StoreError, StoreUnavailableError
from .interfaces import DocumentCollection

ID_FIELD = "_id"


def _new_document(key_field: str, key: int, fields: dict[str, Any]) -> dict[str, Any]:
    doc: dict[str, Any] = {ID_FIELD: uuid.uuid4().hex}
    doc.update(fields)
    doc[key_field] = key
    return doc


def _apply_update(key_field: str, key: int, existing: dict[str, Any], fields: dict[str, Any]) -> dict[str, Any]:
    if key_field in fields and fields[key_field] != key:
        raise DuplicateKeyError(f"cannot change {key_field} from {key} to {fields[key_field]!r}")
    doc = dict(existing)
    doc.update(fields)
    # The store-assigned id survives every update.
    doc[ID_FIELD] = existing.get(ID_FIELD) or uuid.uuid4().hex
    doc[key_field] = key
    return doc


class MemoryDocumentCollection(DocumentCollection):
    """
    Process-local collection. Nothing survives a restart.
    """

    def __init__(self, name: str, *, key_field: str = "userid"):
        self.name = name
        self.key_field = key_field
        self._lock = threading.Lock()
        self._docs: dict[int, dict[str, Any]] = {}

    def ping(self) -> None:
        return None

    def find_one(self, key: int) -> dict[str, Any] | None:
        with self._lock:
            doc = self._docs.get(int(key))
            return copy.deepcopy(doc) if doc is not None else None

    def upsert(self, key: int, fields: dict[str, Any]) -> dict[str, Any]:
        key = int(key)
        with self._lock:
            existing = self._docs.get(key)
            if existing is None:
                doc = _new_document(self.key_field, key, fields)
            else:
                doc = _apply_update(self.key_field, key, existing, fields)
            self._docs[key] = copy.deepcopy(doc)
            return doc


class DiskDocumentCollection(DocumentCollection):
    """
    Collection persisted as one JSON file:

      { "<key>": { "_id": "...", "<key_field>": <key>, ... } }

    Keys of the top-level object enforce uniqueness of the key field.
    """

    def __init__(self, path: Path, *, key_field: str = "userid"):
        self.key_field = key_field
        self._store = DiskJsonDocumentStore(path)

    @property
    def path(self) -> Path:
        return self._store.path

    def ping(self) -> None:
        directory = self.path.parent
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StoreUnavailableError(f"cannot open store directory {directory}: {e}") from e
        if not directory.is_dir():
            raise StoreUnavailableError(f"store directory {directory} is not a directory")
        # Surface a corrupt collection at connect time rather than on first request.
        self._store.load()

    def _check(self, data: dict[str, Any], key: str) -> dict[str, Any] | None:
        doc = data.get(key)
        if doc is None:
            return None
        if not isinstance(doc, dict):
            raise StoreError(f"corrupt document for {self.key_field}={key} in {self.path}")
        return doc

    def find_one(self, key: int) -> dict[str, Any] | None:
        return self._check(self._store.load(), str(int(key)))

    def upsert(self, key: int, fields: dict[str, Any]) -> dict[str, Any]:
        skey = str(int(key))
        with self._store.lock:
            data = self._store.load()
            existing = self._check(data, skey)
            if existing is None:
                doc = _new_document(self.key_field, int(key), fields)
            else:
                doc = _apply_update(self.key_field, int(key), existing, fields)
            data[skey] = doc
            self._store.save(data)
        return doc


class UnavailableCollection(DocumentCollection):
    """
    Stands in for a collection whose connection failed at startup; every
    operation fails with the original reason.
    """

    def __init__(self, reason: str, *, key_field: str = "userid"):
        self.key_field = key_field
        self.reason = reason

    def ping(self) -> None:
        raise StoreUnavailableError(self.reason)

    def find_one(self, key: int) -> dict[str, Any] | None:
        raise StoreUnavailableError(self.reason)

    def upsert(self, key: int, fields: dict[str, Any]) -> dict[str, Any]:
        raise StoreUnavailableError(self.reason)
