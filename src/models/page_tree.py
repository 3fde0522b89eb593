"""Page hierarchy model for a single publish run.

The navigation menu of a generated site is flattened into an arena of
PageNode objects. Nodes refer to their parent by arena index only; the
tree itself owns the forward (children) links. A tree is built once by a
parser, frozen, walked by the sync engine and then discarded.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, List, Optional

from src.confluence_client.errors import SyncError


class PageTreeError(SyncError):
    """Base exception for page tree construction errors."""
    pass


class TreeFrozenError(PageTreeError):
    """Raised when a node is added to a tree that has been frozen."""

    def __init__(self, title: str):
        super().__init__(f"Cannot add page '{title}': page tree is frozen")
        self.title = title


@dataclass(frozen=True)
class PageNode:
    """A single page in the local documentation hierarchy.

    Equality is structural on (title, source, parent). The arena index is
    bookkeeping and takes no part in comparisons.

    Attributes:
        title: Page title, also used to match remote pages
        source: HTML file holding the page content (None for container nodes)
        parent: Arena index of the parent node (None for roots)
        index: Arena index of this node
    """
    title: str
    source: Optional[Path] = None
    parent: Optional[int] = None
    index: int = field(default=-1, compare=False)

    @property
    def has_content(self) -> bool:
        """True if the node has a source file to publish."""
        return self.source is not None


class PageTree:
    """Ordered arena of PageNode objects.

    Example:
        >>> tree = PageTree()
        >>> guide = tree.add("Guide")
        >>> intro = tree.add("Intro", Path("site/intro.html"), parent=guide)
        >>> tree.freeze()
        >>> [n.title for n in tree.walk()]
        ['Guide', 'Intro']
    """

    def __init__(self):
        self._nodes: List[PageNode] = []
        self._children: Dict[int, List[int]] = {}
        self._roots: List[int] = []
        self._frozen = False

    def add(
        self,
        title: str,
        source: Optional[Path] = None,
        parent: Optional[PageNode] = None
    ) -> PageNode:
        """Append a node and register it with its parent or as a root.

        Args:
            title: Page title
            source: Optional content file
            parent: Parent node previously returned by this tree

        Returns:
            The new PageNode

        Raises:
            TreeFrozenError: If the tree has been frozen
            ValueError: If parent does not belong to this tree
        """
        if self._frozen:
            raise TreeFrozenError(title)

        parent_index = None
        if parent is not None:
            if not 0 <= parent.index < len(self._nodes) or self._nodes[parent.index] is not parent:
                raise ValueError(f"Parent '{parent.title}' is not a node of this tree")
            parent_index = parent.index

        node = PageNode(
            title=title,
            source=source,
            parent=parent_index,
            index=len(self._nodes)
        )
        self._nodes.append(node)
        self._children[node.index] = []

        if parent_index is None:
            self._roots.append(node.index)
        else:
            self._children[parent_index].append(node.index)

        return node

    def freeze(self) -> None:
        """Mark the tree as complete; later add() calls fail."""
        self._frozen = True

    def roots(self) -> List[PageNode]:
        """Top-level nodes in document order."""
        return [self._nodes[i] for i in self._roots]

    def children(self, node: PageNode) -> List[PageNode]:
        """Direct children of node in document order."""
        return [self._nodes[i] for i in self._children[node.index]]

    def parent(self, node: PageNode) -> Optional[PageNode]:
        if node.parent is None:
            return None
        return self._nodes[node.parent]

    def depth(self, node: PageNode) -> int:
        """Number of ancestors of node (0 for roots)."""
        depth = 0
        current = node
        while current.parent is not None:
            current = self._nodes[current.parent]
            depth += 1
        return depth

    def walk(self) -> Iterator[PageNode]:
        """Yield all nodes depth-first, parents before children."""
        stack = list(reversed(self._roots))
        while stack:
            index = stack.pop()
            yield self._nodes[index]
            stack.extend(reversed(self._children[index]))

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[PageNode]:
        return iter(self._nodes)
