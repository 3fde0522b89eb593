"""Reconciliation of a local page tree with a Confluence space.

The engine walks a PageTree depth-first, parents before children and
siblings in document order. Every node is matched by exact title against
a snapshot of the space taken once at the start of the pass; unmatched
nodes are created. Nodes with content get their body written, their
layout properties ensured and their attachments uploaded before any of
their children are processed, so every child is created under a valid
parent id.

State machine per node:

    lookup title in snapshot ── found ──> reuse id
                             └─ missing ─> create page
    has source? ── yes ──> extract, transform, write body, upload attachments
                └─ no ───> container page, nothing to write
    recurse into children with this page's id as parent
"""

import html
import logging
import mimetypes
import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from src.confluence_client.api_wrapper import APIWrapper
from src.confluence_client.errors import ConfluenceError
from src.content_converter.base import Transformer
from src.models.config import SpaceMapping
from src.models.page_tree import PageNode, PageTree
from src.models.remote_page import RemotePageRecord
from src.models.transform_result import Attachment
from src.site_parser.base import Parser

from .models import SyncStats

logger = logging.getLogger(__name__)


@dataclass
class SyncPass:
    """State of one reconciliation pass over a single space mapping.

    Attributes:
        space_key: Key of the target space
        index: Remote pages by title (snapshot plus pages written in this pass)
        stats: Counters for the pass
    """
    space_key: str
    index: Dict[str, RemotePageRecord] = field(default_factory=dict)
    stats: SyncStats = field(default_factory=SyncStats)


class SyncEngine:
    """Creates or updates one Confluence page per page tree node.

    In dry-run mode no API call is made at all: page ids are synthesized
    so that content extraction, transformation and the full tree walk
    still run for every node.

    Example:
        >>> engine = SyncEngine(api, AntoraParser(), StorageTransformer())
        >>> stats = engine.sync(mapping, tree)
        >>> print(f"{stats.created} created, {stats.updated} updated")
    """

    LAYOUT_PROPERTIES = ("content-appearance-draft", "content-appearance-published")
    LAYOUT_VALUE = "full-width"
    DEFAULT_MEDIA_TYPE = "application/octet-stream"

    def __init__(
        self,
        api: Optional[APIWrapper],
        parser: Parser,
        transformer: Transformer,
        dry_run: bool = False
    ):
        """Initialize the engine.

        Args:
            api: Confluence API wrapper (may be None in dry-run mode)
            parser: Parser used to load page bodies
            transformer: Transformer producing storage markup
            dry_run: If True, make no remote calls
        """
        if api is None and not dry_run:
            raise ValueError("An API wrapper is required unless dry_run is enabled")
        self.api = api
        self.parser = parser
        self.transformer = transformer
        self.dry_run = dry_run

    def sync(
        self,
        mapping: SpaceMapping,
        tree: PageTree,
        stats: Optional[SyncStats] = None
    ) -> SyncStats:
        """Reconcile a page tree with the mapping's space.

        Args:
            mapping: Target space and optional root page title
            tree: Page tree resolved from the mapping's site
            stats: Counters to update (a new instance is used if None)

        Returns:
            SyncStats for the pass

        Raises:
            ConfluenceError: If a remote call for a page fails; the pages
                below it are not processed
            ResolutionError: If a page's content cannot be read or transformed
        """
        state = self._start_pass(mapping, stats if stats is not None else SyncStats())

        parent_id = None
        if mapping.root:
            root_node = PageNode(title=mapping.root, source=mapping.index_file)
            root = self._sync_page(root_node, None, state)
            parent_id = root.remote_id

        for node in tree.roots():
            self.create_or_update(tree, node, parent_id, state)

        logger.info(
            f"Space {state.space_key}: {state.stats.created} created, "
            f"{state.stats.reused} reused, {state.stats.updated} updated, "
            f"{state.stats.attachments_uploaded} attachment(s) uploaded"
        )
        return state.stats

    def _start_pass(self, mapping: SpaceMapping, stats: SyncStats) -> SyncPass:
        """Take the one-time snapshot of the space's current pages."""
        if self.dry_run:
            logger.info(f"Dry run: skipping page lookup in space {mapping.space_key}")
            return SyncPass(space_key=mapping.space_key, stats=stats)

        space = self.api.get_space(mapping.space_key)
        index: Dict[str, RemotePageRecord] = {}
        for record in self.api.list_pages(space.key):
            index.setdefault(record.title, record)
        return SyncPass(space_key=space.key, index=index, stats=stats)

    def create_or_update(
        self,
        tree: PageTree,
        node: PageNode,
        parent_id: Optional[str],
        state: SyncPass
    ) -> RemotePageRecord:
        """Publish node and then, recursively, its children.

        Returns:
            The remote record of node after all writes
        """
        remote = self._sync_page(node, parent_id, state)
        for child in tree.children(node):
            self.create_or_update(tree, child, remote.remote_id, state)
        return remote

    def _sync_page(
        self,
        node: PageNode,
        parent_id: Optional[str],
        state: SyncPass
    ) -> RemotePageRecord:
        logger.info(f"Create or update page '{node.title}'")
        remote = self.get_or_create_page(node, parent_id, state)

        if not node.has_content:
            state.stats.containers += 1
            return remote

        content = self.parser.load_content(node)
        if content is None:
            logger.warning(f"Page '{node.title}' has no documentation body, body not written")
            state.stats.skipped += 1
            return remote

        result = self.transformer.transform(node, content)
        remote = self.update_body(node, remote, result.markup, state)
        self.upload_attachments(remote, result.attachments, state)
        return remote

    def get_or_create_page(
        self,
        node: PageNode,
        parent_id: Optional[str],
        state: SyncPass
    ) -> RemotePageRecord:
        """Return the remote page titled like node, creating it if absent."""
        existing = state.index.get(node.title)
        if existing is not None:
            logger.info(f"Page '{node.title}' with id {existing.remote_id} found")
            state.stats.reused += 1
            return existing

        if self.dry_run:
            record = RemotePageRecord(
                remote_id=f"dry-run-{uuid.uuid4().hex}",
                title=node.title,
                version=1
            )
        else:
            record = self.api.create_page(
                space_key=state.space_key,
                title=node.title,
                body=html.escape(node.title, quote=False),
                parent_id=parent_id
            )

        logger.info(f"Page '{node.title}' created with id {record.remote_id}")
        state.stats.created += 1
        state.index[node.title] = record
        return record

    def update_body(
        self,
        node: PageNode,
        remote: RemotePageRecord,
        markup: str,
        state: SyncPass
    ) -> RemotePageRecord:
        """Write a new body with the held version incremented by one.

        Raises:
            ConfluenceError: If the update or the property calls fail
        """
        if self.dry_run:
            logger.info(f"Dry run: would update body of '{node.title}' ({len(markup)} chars)")
            state.stats.updated += 1
            return remote

        try:
            updated = self.api.update_page(
                page_id=remote.remote_id,
                title=remote.title or node.title,
                version=remote.version + 1,
                body=markup
            )
            self.ensure_page_properties(updated.remote_id)
        except ConfluenceError as e:
            logger.warning(f"Failed to update page body for '{node.title}': {e}")
            raise

        state.stats.updated += 1
        state.index[node.title] = updated
        return updated

    def ensure_page_properties(self, page_id: str) -> None:
        """Create the full-width layout properties if they are missing."""
        existing = self.api.get_page_properties(page_id)
        for key in self.LAYOUT_PROPERTIES:
            if key not in existing:
                logger.debug(f"Setting property {key} on page {page_id}")
                self.api.create_page_property(page_id, key, self.LAYOUT_VALUE)

    def upload_attachments(
        self,
        remote: RemotePageRecord,
        attachments: List[Attachment],
        state: SyncPass
    ) -> None:
        """Upload attachments one by one; failures are logged and skipped."""
        for attachment in attachments:
            if self.dry_run:
                logger.info(
                    f"Dry run: would upload {attachment.filename} to page {remote.remote_id}"
                )
                continue

            media_type = mimetypes.guess_type(attachment.filename)[0] or self.DEFAULT_MEDIA_TYPE
            try:
                self.api.upload_attachment(
                    page_id=remote.remote_id,
                    file_path=attachment.source,
                    media_type=media_type,
                    name=attachment.filename
                )
            except (ConfluenceError, OSError) as e:
                logger.error(
                    f"Failed to upload attachment {attachment.filename} "
                    f"to page {remote.remote_id}: {e}"
                )
                state.stats.attachments_failed += 1
                continue

            state.stats.attachments_uploaded += 1
