"""Typed exception hierarchy for Confluence-related errors.

This module defines the base SyncError used across the publisher and the
exceptions raised by the Confluence client. All client exceptions inherit
from ConfluenceError and carry the context needed to report the failure.
"""

from typing import Optional


class SyncError(Exception):
    """Base exception for all wiki publisher errors.

    Use this to catch any application-level error from the publisher.
    """
    pass


class ConfluenceError(SyncError):
    """Base exception for all Confluence-related errors."""
    pass


class InvalidCredentialsError(ConfluenceError):
    """Raised when API credentials are missing, invalid or rejected."""

    def __init__(self, user: str, endpoint: str):
        super().__init__(
            f"API credentials are invalid (user: {user}, endpoint: {endpoint})"
        )
        self.user = user
        self.endpoint = endpoint


class PageNotFoundError(ConfluenceError):
    """Raised when a requested page does not exist."""

    def __init__(self, page_id: str):
        super().__init__(f"Page {page_id} not found")
        self.page_id = page_id


class SpaceNotFoundError(ConfluenceError):
    """Raised when no space exists for the configured space key."""

    def __init__(self, space_key: str):
        super().__init__(f"Space '{space_key}' not found")
        self.space_key = space_key


class APIUnreachableError(ConfluenceError):
    """Raised when the Confluence API is not available or unreachable."""

    def __init__(self, endpoint: str):
        super().__init__(f"API is not available at {endpoint}")
        self.endpoint = endpoint


class APIAccessError(ConfluenceError):
    """Raised when an API call fails for any other reason."""

    def __init__(self, message: str = "Confluence API failure"):
        super().__init__(message)


class VersionConflictError(APIAccessError):
    """Raised when a page update is rejected because the version is stale."""

    def __init__(self, page_id: str, version: Optional[int] = None):
        message = f"Version conflict updating page {page_id}"
        if version is not None:
            message += f" (version {version} was rejected)"
        super().__init__(message)
        self.page_id = page_id
        self.version = version
