"""Application-wide exception hierarchy for Localing Feed.

All custom exceptions subclass ``LocalingFeedError``, enabling consistent
error handling and structured logging across the application.

Hierarchy::

    LocalingFeedError
    └── StoreError
        └── StoreQueryError      (collection: str | None)

Malformed request parameters are never errors; they are normalised to
defaults in :mod:`localing_feed.query.params`.
"""

from __future__ import annotations


class LocalingFeedError(Exception):
    """Base class for all Localing Feed exceptions."""


class StoreError(LocalingFeedError):
    """Raised when the backing content store cannot serve a request."""


class StoreQueryError(StoreError):
    """Raised when a range query against the store fails.

    The message is the store's own description of the failure (permission
    denied, validation error, connectivity) and is surfaced to the caller
    verbatim.

    Args:
        message: Human-readable description of the failure.
        collection: Physical table or collection the query targeted.
    """

    def __init__(self, message: str, collection: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.collection = collection
