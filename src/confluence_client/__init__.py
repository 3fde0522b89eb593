"""Confluence client library for the wiki publisher.

This package provides a thin, typed layer over the Confluence REST API
exposing the space, page, property and attachment operations needed to
publish a page tree.
"""

from .errors import (
    SyncError,
    ConfluenceError,
    InvalidCredentialsError,
    PageNotFoundError,
    SpaceNotFoundError,
    APIUnreachableError,
    APIAccessError,
    VersionConflictError,
)

__all__ = [
    "SyncError",
    "ConfluenceError",
    "InvalidCredentialsError",
    "PageNotFoundError",
    "SpaceNotFoundError",
    "APIUnreachableError",
    "APIAccessError",
    "VersionConflictError",
]
