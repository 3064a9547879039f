from __future__ import annotations

from typing import Any, Protocol


class KeyValueDocumentStore(Protocol):
    """
    A single JSON-like document persisted under a key.
    """

    def load(self) -> dict[str, Any]:
        """Load and return the full document (never None)."""
        ...

    def save(self, doc: dict[str, Any]) -> None:
        """Persist the full document atomically."""
        ...


class DocumentCollection(Protocol):
    """
    Minimal document-database collection: documents indexed by one unique
    integer field.

    Implementations raise persistence.errors.StoreError on any failure.
    """

    key_field: str

    def ping(self) -> None:
        """Check the collection is reachable; raise StoreUnavailableError otherwise."""
        ...

    def find_one(self, key: int) -> dict[str, Any] | None:
        """Return the document whose key field equals `key`, or None."""
        ...

    def upsert(self, key: int, fields: dict[str, Any]) -> dict[str, Any]:
        """
        Set `fields` on the document with `key`, creating it if absent.
        Returns the document as stored after the write.
        """
        ...
