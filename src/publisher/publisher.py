"""Top-level publish workflow over all configured space mappings.

Each mapping is resolved into a page tree and reconciled with its space
independently: a failure in one mapping is logged together with the page
hierarchy and recorded in the report, and the next mapping still runs.
"""

import logging
from pathlib import Path
from typing import Optional

from src.confluence_client.api_wrapper import APIWrapper
from src.confluence_client.auth import Authenticator
from src.content_converter.base import Transformer
from src.content_converter.storage_transformer import StorageTransformer
from src.models.config import PublishConfig, SpaceMapping
from src.models.page_tree import PageTree
from src.site_parser.antora_parser import AntoraParser
from src.site_parser.base import Parser

from .models import MappingReport, PublishReport
from .sync_engine import SyncEngine

logger = logging.getLogger(__name__)


def dump_tree(tree: PageTree, level: int = logging.INFO) -> None:
    """Log the page hierarchy, one line per node prefixed by its depth."""
    for node in tree.walk():
        logger.log(level, f"{'-' * (tree.depth(node) + 1)}> {node.title}")


class Publisher:
    """Publishes every space mapping of a configuration.

    Example:
        >>> publisher = Publisher(config)
        >>> report = publisher.publish()
        >>> report.success
        True
    """

    def __init__(
        self,
        config: PublishConfig,
        api: Optional[APIWrapper] = None,
        parser: Optional[Parser] = None,
        transformer: Optional[Transformer] = None
    ):
        """Initialize the publisher.

        Args:
            config: Publish configuration
            api: API wrapper (built from config when None; unused in dry-run)
            parser: Site parser (defaults to AntoraParser)
            transformer: Body transformer (defaults to StorageTransformer)
        """
        self.config = config
        self.parser = parser or AntoraParser(max_depth=config.nav_max_depth)
        self.transformer = transformer or StorageTransformer()

        if api is None and not config.dry_run:
            api = APIWrapper(Authenticator(config.url, config.username, config.password))
        self.engine = SyncEngine(api, self.parser, self.transformer, dry_run=config.dry_run)

    def publish(self) -> PublishReport:
        """Publish all mappings in configuration order.

        Returns:
            PublishReport with one MappingReport per mapping
        """
        if self.config.dry_run:
            logger.info("Dry run enabled: no changes will be made in Confluence")

        report = PublishReport(dry_run=self.config.dry_run)
        for mapping in self.config.mappings:
            report.mappings.append(self.publish_mapping(mapping))

        logger.info(
            f"Published {len(report.mappings) - len(report.failed)} of "
            f"{len(report.mappings)} mapping(s)"
        )
        return report

    def publish_mapping(self, mapping: SpaceMapping) -> MappingReport:
        """Publish one site directory into one space.

        Errors are caught here so that the remaining mappings still run.

        Returns:
            MappingReport with the outcome and the counters collected
        """
        logger.info(f"Publishing {mapping.path} to space {mapping.space_key}")
        report = MappingReport(space_key=mapping.space_key, path=str(mapping.path))

        tree = None
        try:
            tree = self.parser.resolve_pages(Path(mapping.path))
            dump_tree(tree, logging.INFO)
            self.engine.sync(mapping, tree, report.stats)
        except Exception as e:
            logger.exception(f"Failed to publish {mapping.path} to space {mapping.space_key}")
            if tree is not None:
                dump_tree(tree, logging.ERROR)
            report.success = False
            report.error = str(e) or type(e).__name__
            report.exception = e

        return report
