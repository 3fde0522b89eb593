"""Remote page and space records returned by the Confluence API wrapper."""

from dataclasses import dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class RemotePageRecord:
    """A Confluence page as seen in the remote index.

    Records are never mutated locally. Every write returns a fresh record
    that replaces the one held by the caller.

    Attributes:
        remote_id: Confluence page ID
        title: Page title
        version: Current version number (required for updates)
    """
    remote_id: str
    title: str
    version: int

    @classmethod
    def from_api(cls, page_data: Dict[str, Any]) -> 'RemotePageRecord':
        """Build a record from a REST API page payload."""
        version_info = page_data.get('version') or {}
        return cls(
            remote_id=str(page_data['id']),
            title=page_data.get('title', ''),
            version=int(version_info.get('number', 1))
        )


@dataclass(frozen=True)
class RemoteSpace:
    """A Confluence space resolved from its key.

    Attributes:
        space_id: Numeric space identifier
        key: Space key (e.g., "DOCS")
    """
    space_id: str
    key: str
