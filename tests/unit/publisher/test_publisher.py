"""Unit tests for publisher.publisher module."""

import logging
from pathlib import Path
from unittest.mock import Mock, patch

from src.confluence_client.errors import APIAccessError
from src.content_converter.storage_transformer import StorageTransformer
from src.models.config import PublishConfig, SpaceMapping
from src.models.page_tree import PageTree
from src.publisher.publisher import Publisher, dump_tree
from src.site_parser.antora_parser import AntoraParser
from src.site_parser.errors import NavigationError
from tests.fixtures.antora_site import write_site


def make_config(*mappings, dry_run=False):
    return PublishConfig(
        url="https://test.atlassian.net/wiki",
        mappings=list(mappings),
        username="user@example.com",
        password="token",
        dry_run=dry_run,
    )


class TestPublisherInit:
    """Test cases for Publisher construction."""

    @patch('src.publisher.publisher.APIWrapper')
    @patch('src.publisher.publisher.Authenticator')
    def test_builds_default_components(self, mock_auth, mock_api):
        """Without injected parts, the API, parser and transformer are built from config."""
        config = make_config()
        config.nav_max_depth = 4

        publisher = Publisher(config)

        mock_auth.assert_called_once_with(
            "https://test.atlassian.net/wiki", "user@example.com", "token"
        )
        mock_api.assert_called_once_with(mock_auth.return_value)
        assert publisher.engine.api is mock_api.return_value
        assert isinstance(publisher.parser, AntoraParser)
        assert publisher.parser.max_depth == 4
        assert isinstance(publisher.transformer, StorageTransformer)

    @patch('src.publisher.publisher.APIWrapper')
    def test_dry_run_needs_no_api(self, mock_api):
        """Dry-run publishers never build an API wrapper."""
        publisher = Publisher(make_config(dry_run=True))

        mock_api.assert_not_called()
        assert publisher.engine.api is None
        assert publisher.engine.dry_run is True


class TestPublish:
    """Test cases for Publisher.publish."""

    def test_failed_mapping_does_not_stop_others(self):
        """Each mapping is isolated; failures are recorded in the report."""
        parser = Mock()
        parser.resolve_pages.side_effect = [
            NavigationError(Path("a/index.html"), "no navigation menu found"),
            PageTree(),
        ]
        config = make_config(SpaceMapping("A", "a"), SpaceMapping("B", "b"))
        publisher = Publisher(config, api=Mock(), parser=parser, transformer=Mock())
        publisher.engine.sync = Mock()

        report = publisher.publish()

        first, second = report.mappings
        assert first.success is False
        assert "no navigation menu found" in first.error
        assert isinstance(first.exception, NavigationError)
        assert second.success is True
        assert report.success is False
        assert report.failed == [first]
        publisher.engine.sync.assert_called_once()

    def test_mappings_run_in_order(self):
        """Mappings are processed sequentially in configuration order."""
        parser = Mock()
        parser.resolve_pages.return_value = PageTree()
        config = make_config(SpaceMapping("A", "a"), SpaceMapping("B", "b"))
        publisher = Publisher(config, api=Mock(), parser=parser, transformer=Mock())
        publisher.engine.sync = Mock()

        report = publisher.publish()

        assert [m.space_key for m in report.mappings] == ["A", "B"]
        assert [c.args[0] for c in parser.resolve_pages.call_args_list] == [Path("a"), Path("b")]
        assert report.success is True

    def test_engine_error_keeps_partial_stats(self):
        """Counters collected before a failure are reported."""
        parser = Mock()
        parser.resolve_pages.return_value = PageTree()

        def failing_sync(mapping, tree, stats):
            stats.created = 2
            raise APIAccessError("server error")

        publisher = Publisher(
            make_config(SpaceMapping("A", "a")), api=Mock(), parser=parser, transformer=Mock()
        )
        publisher.engine.sync = Mock(side_effect=failing_sync)

        report = publisher.publish()

        assert report.mappings[0].success is False
        assert report.mappings[0].error == "server error"
        assert report.mappings[0].stats.created == 2

    def test_hierarchy_logged_at_info(self, caplog):
        """Each mapping logs its resolved hierarchy at INFO before syncing."""
        tree = PageTree()
        guide = tree.add("Guide")
        tree.add("Intro", parent=guide)
        parser = Mock()
        parser.resolve_pages.return_value = tree

        publisher = Publisher(
            make_config(SpaceMapping("A", "a")), api=Mock(), parser=parser, transformer=Mock()
        )
        publisher.engine.sync = Mock()

        with caplog.at_level(logging.INFO, logger="src.publisher.publisher"):
            publisher.publish()

        hierarchy = [r for r in caplog.records if r.getMessage() in ("-> Guide", "--> Intro")]
        assert [r.getMessage() for r in hierarchy] == ["-> Guide", "--> Intro"]
        assert all(r.levelno == logging.INFO for r in hierarchy)

    def test_failure_logs_hierarchy(self, caplog):
        """The page hierarchy is logged when a mapping fails."""
        tree = PageTree()
        guide = tree.add("Guide")
        tree.add("Intro", parent=guide)
        parser = Mock()
        parser.resolve_pages.return_value = tree

        publisher = Publisher(
            make_config(SpaceMapping("A", "a")), api=Mock(), parser=parser, transformer=Mock()
        )
        publisher.engine.sync = Mock(side_effect=APIAccessError("boom"))

        with caplog.at_level(logging.ERROR, logger="src.publisher.publisher"):
            publisher.publish()

        assert "-> Guide" in caplog.text
        assert "--> Intro" in caplog.text

    def test_dry_run_publishes_sample_site(self, tmp_path):
        """A dry run walks and transforms the whole site."""
        write_site(tmp_path)
        config = make_config(SpaceMapping("DOCS", str(tmp_path), root="Docs"), dry_run=True)

        report = Publisher(config).publish()

        assert report.dry_run is True
        assert report.success is True
        stats = report.mappings[0].stats
        assert stats.created == 7
        assert stats.updated == 4
        assert stats.containers == 2


class TestDumpTree:
    """Test cases for dump_tree helper."""

    def test_prefix_grows_with_depth(self, caplog):
        """Each line is prefixed with one dash per level."""
        tree = PageTree()
        a = tree.add("A")
        b = tree.add("B", parent=a)
        tree.add("C", parent=b)

        with caplog.at_level(logging.INFO, logger="src.publisher.publisher"):
            dump_tree(tree)

        assert caplog.messages == ["-> A", "--> B", "---> C"]
