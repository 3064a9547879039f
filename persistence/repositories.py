from __future__ import annotations

import asyncio
from typing import Any, Callable, Protocol, TypeVar

from pydantic import ValidationError

from .errors import StoreError, StoreUnavailableError
from .interfaces import DocumentCollection
from .profile_state import PROFILE_USER_ID, ProfileRecord, ProfileUpdate

T = TypeVar("T")


class AsyncProfileRepository(Protocol):
    async def get_profile(self) -> ProfileRecord | None: ...
    async def upsert_profile(self, update: ProfileUpdate) -> dict[str, Any]: ...


class AsyncDocumentProfileRepository(AsyncProfileRepository):
    """
    Profile persistence on top of a DocumentCollection.

    Store calls are blocking, so they run via asyncio.to_thread; reads are
    bounded by the store timeout. Every method does exactly one store call
    and raises persistence.errors.StoreError on failure.
    """

    def __init__(
        self,
        collection: DocumentCollection,
        *,
        user_id: int = PROFILE_USER_ID,
        timeout_s: float = 5.0,
    ) -> None:
        self._collection = collection
        self._user_id = int(user_id)
        self._timeout_s = timeout_s

    @property
    def user_id(self) -> int:
        return self._user_id

    async def _read(self, fn: Callable[..., T], *args: Any) -> T:
        # Reads have no side effects, so giving up on a slow one is safe.
        try:
            return await asyncio.wait_for(asyncio.to_thread(fn, *args), timeout=self._timeout_s)
        except asyncio.TimeoutError as e:
            raise StoreUnavailableError(f"store read timed out after {self._timeout_s:.1f}s") from e

    async def _write(self, fn: Callable[..., T], *args: Any) -> T:
        # A worker thread cannot be cancelled, so a write always runs to
        # completion and its outcome is what the caller sees.
        return await asyncio.to_thread(fn, *args)

    async def get_profile(self) -> ProfileRecord | None:
        doc = await self._read(self._collection.find_one, self._user_id)
        if doc is None:
            return None
        try:
            return ProfileRecord.from_store_doc(doc)
        except ValidationError as e:
            raise StoreError(f"corrupt document for {self._collection.key_field}={self._user_id}: {e}") from e

    async def upsert_profile(self, update: ProfileUpdate) -> dict[str, Any]:
        """
        Write the submitted fields under the singleton key and return them
        with the forced key, i.e. what the caller sent rather than the
        stored document.
        """
        submitted = update.submitted_fields()
        submitted[self._collection.key_field] = self._user_id
        await self._write(self._collection.upsert, self._user_id, dict(submitted))
        return submitted
