from __future__ import annotations

from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field

# Single-tenant "my profile": every read and write targets this key unless
# PROFILE_USER_ID overrides it.
PROFILE_USER_ID = 1
PROFILE_KEY_FIELD = "userid"

DEFAULT_PROFILE: dict[str, str] = {
    "name": "Anna Smith",
    "email": "anna.smith@example.com",
    "interests": "coding",
}


class ProfileUpdate(BaseModel):
    """
    Body of POST /update-profile. Every field is optional; unknown keys
    (including any caller-supplied userid) are dropped.
    """

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    name: str | None = None
    email: str | None = None
    interests: str | None = None

    @classmethod
    def from_body(cls, body: Any) -> "ProfileUpdate":
        if not isinstance(body, Mapping):
            return cls()
        return cls.model_validate(dict(body))

    def submitted_fields(self) -> dict[str, Any]:
        # Only what the caller actually sent, so partial updates leave other fields alone.
        return self.model_dump(exclude_unset=True)


class ProfileRecord(BaseModel):
    """
    A profile document as stored. `_id` is assigned by the store.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str | None = Field(default=None, alias="_id")
    userid: int
    name: str | None = None
    email: str | None = None
    interests: str | None = None

    @classmethod
    def from_store_doc(cls, doc: Mapping[str, Any]) -> "ProfileRecord":
        return cls.model_validate(doc)

    def to_response_doc(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
