from __future__ import annotations

import asyncio
from dataclasses import dataclass
from urllib.parse import parse_qs, urlsplit

from .documents import DiskDocumentCollection, MemoryDocumentCollection
from .errors import StoreError, StoreUnavailableError
from .interfaces import DocumentCollection
from .paths import collection_file, store_dir

DEFAULT_COLLECTION = "users"


@dataclass(frozen=True)
class StoreLocation:
    scheme: str
    directory: str
    collection: str


def parse_store_url(url: str) -> StoreLocation:
    """
    Accepted forms:
      memory://
      file:./data               (relative directory)
      file:///var/lib/profiles  (absolute directory)
      ...?collection=<name>
    """
    parts = urlsplit(url.strip())
    scheme = parts.scheme.lower()
    if scheme not in ("memory", "file"):
        raise StoreError(f"unsupported store url scheme: {parts.scheme or '<none>'!r}")

    query = parse_qs(parts.query)
    collection = (query.get("collection") or [DEFAULT_COLLECTION])[0]

    directory = ""
    if scheme == "file":
        directory = f"{parts.netloc}{parts.path}"
        if not directory:
            raise StoreError("file store url needs a directory, e.g. file:./data")

    return StoreLocation(scheme=scheme, directory=directory, collection=collection)


def open_collection(url: str, *, key_field: str = "userid") -> DocumentCollection:
    loc = parse_store_url(url)
    if loc.scheme == "memory":
        return MemoryDocumentCollection(loc.collection, key_field=key_field)
    path = collection_file(store_dir(loc.directory), loc.collection)
    return DiskDocumentCollection(path, key_field=key_field)


async def connect(url: str, *, timeout_s: float, key_field: str = "userid") -> DocumentCollection:
    """
    Open the collection behind `url` and ping it within `timeout_s`.

    Raises StoreError when the url is invalid and StoreUnavailableError when
    the ping fails or times out.
    """
    collection = open_collection(url, key_field=key_field)
    try:
        await asyncio.wait_for(asyncio.to_thread(collection.ping), timeout=timeout_s)
    except asyncio.TimeoutError as e:
        raise StoreUnavailableError(f"store did not answer within {timeout_s:.1f}s") from e
    return collection
