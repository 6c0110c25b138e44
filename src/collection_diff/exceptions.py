# src/collection_diff/exceptions.py
from __future__ import annotations

from typing import Any


class CollectionDiffError(Exception):
    """Base class for all errors surfaced by a diff command."""

    pass


class UsageError(CollectionDiffError):
    """Raised for a malformed command. No fetch is attempted."""

    def __init__(self, message: str, usage: str = ""):
        super().__init__(message)
        self.usage = usage


class RemoteError(CollectionDiffError):
    """Raised when a revision fetch fails or the API returns an error payload."""

    def __init__(self, message: str, payload: Any = None):
        super().__init__(message)
        self.payload = payload


class RemoteConnectionError(RemoteError):
    """Raised when there's a problem connecting to the API."""

    pass


class AuthenticationError(RemoteError):
    """Raised for authentication failures (bad or missing API key)."""

    pass


class RateLimitError(RemoteError):
    """Raised when the API rate limit is exceeded."""

    pass


class InvalidRequestError(RemoteError):
    """Raised for invalid requests (e.g., bad parameters)."""

    pass


class BadResponseError(RemoteError):
    """Raised for unexpected or malformed responses from the API."""

    pass


class RevisionNotFoundError(RemoteError):
    """Raised when the API has no such collection or revision."""

    pass


class DeliveryError(CollectionDiffError):
    """
    Raised when a reply channel send fails.

    ``delivered`` is the number of chunks that went out before the failure;
    those stay sent.
    """

    def __init__(self, message: str, delivered: int = 0, total: int = 0):
        super().__init__(message)
        self.delivered = delivered
        self.total = total
