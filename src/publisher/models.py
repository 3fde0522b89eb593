"""Result models for publish runs."""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class SyncStats:
    """Counters collected while one space mapping is reconciled.

    Attributes:
        created: Pages created in Confluence
        updated: Page bodies written
        reused: Pages matched by title to an existing remote page
        containers: Nodes without content (title-only pages)
        skipped: Pages whose source has no documentation body
        attachments_uploaded: Attachments uploaded successfully
        attachments_failed: Attachment uploads that failed
    """
    created: int = 0
    updated: int = 0
    reused: int = 0
    containers: int = 0
    skipped: int = 0
    attachments_uploaded: int = 0
    attachments_failed: int = 0

    @property
    def pages(self) -> int:
        """Number of nodes resolved to a remote page."""
        return self.created + self.reused


@dataclass
class MappingReport:
    """Outcome of publishing one space mapping.

    Attributes:
        space_key: Target space key
        path: Local site directory
        success: True if the whole tree was published
        error: Failure reason (None on success)
        exception: The exception that failed the mapping (None on success)
        stats: Counters collected up to the point of success or failure
    """
    space_key: str
    path: str
    success: bool = True
    error: Optional[str] = None
    exception: Optional[Exception] = field(default=None, repr=False, compare=False)
    stats: SyncStats = field(default_factory=SyncStats)


@dataclass
class PublishReport:
    """Outcome of a publish run over all configured mappings.

    Attributes:
        mappings: One report per mapping, in processing order
        dry_run: True if no remote calls were made
    """
    mappings: List[MappingReport] = field(default_factory=list)
    dry_run: bool = False

    @property
    def success(self) -> bool:
        return all(report.success for report in self.mappings)

    @property
    def failed(self) -> List[MappingReport]:
        return [report for report in self.mappings if not report.success]
