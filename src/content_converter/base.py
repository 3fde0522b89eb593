"""Transformer contract for target wiki markup formats."""

from abc import ABC, abstractmethod

from bs4 import Tag

from src.models.page_tree import PageNode
from src.models.transform_result import TransformResult


class Transformer(ABC):
    """Converts a page body element into target storage markup."""

    @abstractmethod
    def transform(self, node: PageNode, content: Tag) -> TransformResult:
        """Transform the body of node.

        The content element may be modified in place.

        Returns:
            TransformResult with the markup and the attachments it references

        Raises:
            TransformError: If the content cannot be transformed
        """
