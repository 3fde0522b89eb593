"""Parser contract for documentation site formats."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from bs4 import Tag

from src.models.page_tree import PageNode, PageTree


class Parser(ABC):
    """Reads a generated site into a page tree and page bodies.

    Implementations are selected by configuration; the sync engine only
    depends on this contract.
    """

    @abstractmethod
    def resolve_pages(self, root: Path) -> PageTree:
        """Build the frozen page tree for the site under root.

        Raises:
            ResolutionError: If the site navigation cannot be resolved
        """

    @abstractmethod
    def load_content(self, node: PageNode) -> Optional[Tag]:
        """Load the body element of a page.

        Returns:
            The body element, or None if the page has no body to publish

        Raises:
            SourceReadError: If the source file cannot be read
        """
