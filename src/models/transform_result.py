"""Result model for HTML to storage format transformation."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Tuple


@dataclass(frozen=True)
class Attachment:
    """A local file to be uploaded as a page attachment.

    Attributes:
        filename: Attachment name on the page (base name of source)
        source: Local file path
    """
    filename: str
    source: Path

    @property
    def key(self) -> Tuple[str, str]:
        return (self.filename, str(self.source))


@dataclass
class TransformResult:
    """Storage format markup plus the attachments it references.

    Attachments are de-duplicated by (filename, source) and keep the order
    in which they were first referenced.

    Attributes:
        markup: Page body in Confluence storage format
        attachments: Unique attachments referenced by the markup
    """
    markup: str = ""
    attachments: List[Attachment] = field(default_factory=list)

    def add(self, attachment: Attachment) -> bool:
        """Register an attachment unless already present.

        Returns:
            True if the attachment was added, False if it was a duplicate
        """
        if any(a.key == attachment.key for a in self.attachments):
            return False
        self.attachments.append(attachment)
        return True

    def merge(self, other: 'TransformResult') -> 'TransformResult':
        """Return a new result with other's attachments appended to ours.

        The markup of the merged result is the concatenation of both.
        """
        merged: Dict[Tuple[str, str], Attachment] = {}
        for attachment in self.attachments + other.attachments:
            merged.setdefault(attachment.key, attachment)
        return TransformResult(
            markup=self.markup + other.markup,
            attachments=list(merged.values())
        )
