"""Typed exception hierarchy for reading a generated documentation site.

Resolution errors are fatal for the mapping being published: the publisher
catches them at the mapping boundary and moves on to the next mapping.
"""

from pathlib import Path
from typing import Optional

from src.confluence_client.errors import SyncError


class ResolutionError(SyncError):
    """Base exception for errors turning site files into pages."""
    pass


class NavigationError(ResolutionError):
    """Raised when the navigation menu is missing or malformed."""

    def __init__(self, index_file: Path, message: str):
        super().__init__(f"Navigation error in {index_file}: {message}")
        self.index_file = index_file
        self.message = message


class SourceReadError(ResolutionError):
    """Raised when a site file cannot be read."""

    def __init__(self, file_path: Path, reason: Optional[str] = None):
        message = f"Cannot read {file_path}"
        if reason:
            message += f": {reason}"
        super().__init__(message)
        self.file_path = file_path
        self.reason = reason


class TransformError(ResolutionError):
    """Raised when page content cannot be converted to storage format."""

    def __init__(self, title: str, reason: str):
        super().__init__(f"Cannot transform page '{title}': {reason}")
        self.title = title
        self.reason = reason
