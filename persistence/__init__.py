from __future__ import annotations

from .connection import connect, open_collection, parse_store_url
from .documents import DiskDocumentCollection, MemoryDocumentCollection, UnavailableCollection
from .errors import DuplicateKeyError, StoreError, StoreUnavailableError
from .interfaces import DocumentCollection, KeyValueDocumentStore
from .profile_state import DEFAULT_PROFILE, PROFILE_USER_ID, ProfileRecord, ProfileUpdate
from .repositories import AsyncDocumentProfileRepository, AsyncProfileRepository

__all__ = [
    "connect",
    "open_collection",
    "parse_store_url",
    "DiskDocumentCollection",
    "MemoryDocumentCollection",
    "UnavailableCollection",
    "DocumentCollection",
    "KeyValueDocumentStore",
    "StoreError",
    "StoreUnavailableError",
    "DuplicateKeyError",
    "DEFAULT_PROFILE",
    "PROFILE_USER_ID",
    "ProfileRecord",
    "ProfileUpdate",
    "AsyncProfileRepository",
    "AsyncDocumentProfileRepository",
]
