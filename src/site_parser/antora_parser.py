"""Parser for Antora generated documentation sites.

Antora writes every page of a site with the same navigation panel. The
panel of the site's index.html is used as the single source of the page
hierarchy: each navigation link sits in a list item carrying a data-depth
attribute, and the links appear in document order.

Example navigation markup:

    <nav class="nav-menu" data-panel="menu">
      <ul class="nav-list">
        <li class="nav-item" data-depth="1">
          <a class="nav-link" href="intro.html">Introduction</a>
          <ul class="nav-list">
            <li class="nav-item" data-depth="2">
              <a class="nav-link" href="setup/install.html">Install</a>
            </li>
          </ul>
        </li>
      </ul>
    </nav>
"""

import logging
import os
from pathlib import Path
from typing import List, Optional
from urllib.parse import unquote, urlparse

from bs4 import BeautifulSoup, Tag

from src.models.page_tree import PageNode, PageTree

from .base import Parser
from .errors import NavigationError, SourceReadError

logger = logging.getLogger(__name__)


class AntoraParser(Parser):
    """Resolves the page tree and page bodies of an Antora site.

    Files are parsed with html.parser, which keeps whitespace and line
    breaks exactly as written and decodes named entities to characters, so
    serialized output only contains entities that are valid in XML.

    Example:
        >>> parser = AntoraParser()
        >>> tree = parser.resolve_pages(Path("build/site/docs/1.0"))
        >>> body = parser.load_content(tree.roots()[0])
    """

    INDEX_FILE = "index.html"
    MENU_SELECTOR = '[data-panel="menu"]'
    DEPTH_ATTRIBUTE = "data-depth"
    BODY_SELECTOR = "article.doc"
    DEFAULT_MAX_DEPTH = 10

    def __init__(self, max_depth: int = DEFAULT_MAX_DEPTH):
        """Initialize the parser.

        Args:
            max_depth: Deepest navigation level accepted
        """
        if max_depth < 1:
            raise ValueError(f"max_depth must be at least 1, got {max_depth}")
        self.max_depth = max_depth
        self.parser = "html.parser"

    def resolve_pages(self, root: Path) -> PageTree:
        """Build the page tree from the navigation menu of root/index.html.

        Args:
            root: Site directory containing index.html

        Returns:
            Frozen PageTree with one node per navigation link

        Raises:
            SourceReadError: If index.html cannot be read
            NavigationError: If no menu is found or a depth is invalid
        """
        root = Path(root)
        index_file = root / self.INDEX_FILE
        doc = self._load(index_file)

        menus = doc.select(self.MENU_SELECTOR)
        logger.debug(f"Found {len(menus)} menu element(s) in {index_file}")
        if not menus:
            raise NavigationError(index_file, "no navigation menu found")
        if len(menus) > 1:
            logger.warning(
                f"Found {len(menus)} navigation menus in {index_file}, using the first"
            )
        menu = menus[0]

        tree = PageTree()
        stack: List[Optional[PageNode]] = [None] * (self.max_depth + 1)

        for anchor in menu.find_all("a"):
            depth = self._read_depth(anchor, index_file)
            if depth is None:
                continue

            title = " ".join(anchor.get_text().split())
            if not title:
                logger.warning(f"Skipping navigation link without text at depth {depth}")
                continue

            parent = self._find_parent(stack, depth)
            source = self._resolve_href(root, anchor.get("href"))
            node = tree.add(title, source, parent)

            stack[depth] = node
            for deeper in range(depth + 1, len(stack)):
                stack[deeper] = None

            logger.info(
                f"NavItem '{title}' (depth {depth}, "
                f"parent: {parent.title if parent else '-'}, source: {source or '-'})"
            )

        tree.freeze()
        logger.info(f"Resolved {len(tree)} page(s) from {index_file}")
        return tree

    def load_content(self, node: PageNode) -> Optional[Tag]:
        """Load the documentation body (article.doc) of a page.

        Args:
            node: Page node with a source file

        Returns:
            The article element, or None if the page has no article body

        Raises:
            ValueError: If node is a container without source
            SourceReadError: If the source file cannot be read
        """
        if node.source is None:
            raise ValueError(f"Page '{node.title}' has no source file")

        logger.info(f"Load page from {node.source}")
        doc = self._load(node.source)
        body = doc.select_one(self.BODY_SELECTOR)
        if body is None:
            logger.warning(f"No {self.BODY_SELECTOR} element found in {node.source}")
        return body

    def _read_depth(self, anchor: Tag, index_file: Path) -> Optional[int]:
        """Read the navigation depth of an anchor from its parent element.

        Returns:
            The depth, or None for anchors without a depth (decorative links)

        Raises:
            NavigationError: If the depth is not a valid integer in range
        """
        holder = anchor.parent
        if holder is None or not holder.has_attr(self.DEPTH_ATTRIBUTE):
            return None

        raw = holder[self.DEPTH_ATTRIBUTE]
        try:
            depth = int(str(raw).strip())
        except ValueError:
            raise NavigationError(index_file, f"invalid navigation depth '{raw}'")

        if depth < 0:
            raise NavigationError(index_file, f"negative navigation depth {depth}")
        if depth > self.max_depth:
            raise NavigationError(
                index_file,
                f"navigation depth {depth} exceeds the maximum of {self.max_depth}"
            )
        return depth

    @staticmethod
    def _find_parent(stack: List[Optional[PageNode]], depth: int) -> Optional[PageNode]:
        """Return the node registered at depth - 1, or the nearest shallower one."""
        for level in range(depth - 1, -1, -1):
            if stack[level] is not None:
                return stack[level]
        return None

    @staticmethod
    def _resolve_href(root: Path, href: Optional[str]) -> Optional[Path]:
        """Resolve a navigation link to a local file below root.

        External links, fragment-only links and missing links yield None,
        which makes the node a container.
        """
        if not href or not href.strip():
            return None

        parsed = urlparse(href.strip())
        if parsed.scheme or parsed.netloc:
            logger.debug(f"Treating external link {href} as container")
            return None

        path = unquote(parsed.path)
        if not path:
            return None

        return Path(os.path.normpath(root / path))

    def _load(self, file_path: Path) -> BeautifulSoup:
        """Read and parse an HTML file.

        Raises:
            SourceReadError: If the file cannot be read or decoded
        """
        try:
            content = Path(file_path).read_text(encoding="utf-8")
        except FileNotFoundError:
            raise SourceReadError(file_path, "file not found")
        except PermissionError:
            raise SourceReadError(file_path, "permission denied")
        except (OSError, UnicodeDecodeError) as e:
            raise SourceReadError(file_path, str(e))

        return BeautifulSoup(content, self.parser)
