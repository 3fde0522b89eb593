"""Publish configuration models."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional


@dataclass
class SpaceMapping:
    """One local site directory published into one Confluence space.

    Attributes:
        space_key: Target space key (e.g., "DOCS")
        path: Local directory holding index.html and the page files
        root: Optional title of a page under which all pages are nested
    """
    space_key: str
    path: str
    root: Optional[str] = None

    @property
    def index_file(self) -> Path:
        return Path(self.path) / "index.html"


@dataclass
class PublishConfig:
    """Top-level publish configuration.

    Attributes:
        url: Confluence base URL (e.g., https://example.atlassian.net/wiki)
        mappings: Space mappings, processed in order
        username: Optional explicit user (otherwise resolved by Authenticator)
        password: Optional explicit API token or password
        dry_run: If True, no remote calls are made
        nav_max_depth: Deepest navigation level accepted by the parser
    """
    url: str
    mappings: List[SpaceMapping] = field(default_factory=list)
    username: Optional[str] = None
    password: Optional[str] = None
    dry_run: bool = False
    nav_max_depth: int = 10
