from __future__ import annotations


class StoreError(Exception):
    """Any failure while talking to the document store."""


class StoreUnavailableError(StoreError):
    """The store could not be reached, opened, or answered in time."""


class DuplicateKeyError(StoreError):
    """A write would create a second document with the same unique key."""
