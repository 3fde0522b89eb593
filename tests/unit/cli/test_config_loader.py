"""Unit tests for cli.config module."""

import os

import pytest
import yaml

from src.cli.config import ConfigLoader, apply_overrides
from src.cli.errors import ConfigError, ConfigNotFoundError, FilesystemError
from src.models.config import PublishConfig, SpaceMapping

VALID_CONFIG = """
url: https://example.atlassian.net/wiki/
username: me@example.com
password: secret
nav_max_depth: 5
mappings:
  - space_key: DOCS
    root: Product Documentation
    path: build/site/product
  - space_key: API
    path: /srv/site/api
"""


def write_config(tmp_path, content, name="wiki-publish.yaml"):
    path = tmp_path / name
    path.write_text(content, encoding="utf-8")
    return str(path)


class TestConfigLoaderLoad:
    """Test cases for ConfigLoader.load."""

    def test_load_valid_config(self, tmp_path):
        """A complete file is parsed into PublishConfig."""
        config = ConfigLoader.load(write_config(tmp_path, VALID_CONFIG))

        assert config.url == "https://example.atlassian.net/wiki"
        assert config.username == "me@example.com"
        assert config.password == "secret"
        assert config.dry_run is False
        assert config.nav_max_depth == 5
        assert [m.space_key for m in config.mappings] == ["DOCS", "API"]
        assert config.mappings[0].root == "Product Documentation"
        assert config.mappings[1].root is None

    def test_relative_paths_resolve_against_config_dir(self, tmp_path):
        """Relative mapping paths are anchored at the config file."""
        config = ConfigLoader.load(write_config(tmp_path, VALID_CONFIG))

        assert config.mappings[0].path == str(tmp_path / "build" / "site" / "product")
        assert config.mappings[1].path == "/srv/site/api"

    def test_defaults_for_optional_fields(self, tmp_path):
        """Optional fields fall back to defaults."""
        config = ConfigLoader.load(write_config(tmp_path, """
url: https://example.atlassian.net/wiki
mappings:
  - space_key: DOCS
    path: site
"""))
        assert config.username is None
        assert config.password is None
        assert config.dry_run is False
        assert config.nav_max_depth == 10

    def test_missing_file_raises_not_found(self, tmp_path):
        """A missing file raises ConfigNotFoundError."""
        with pytest.raises(ConfigNotFoundError):
            ConfigLoader.load(str(tmp_path / "absent.yaml"))

    def test_directory_raises_filesystem_error(self, tmp_path):
        """An unreadable path raises FilesystemError."""
        with pytest.raises(FilesystemError):
            ConfigLoader.load(str(tmp_path))

    def test_invalid_yaml_raises(self, tmp_path):
        """Broken YAML raises ConfigError."""
        with pytest.raises(ConfigError) as exc_info:
            ConfigLoader.load(write_config(tmp_path, "url: [unclosed"))
        assert "Invalid YAML syntax" in str(exc_info.value)

    def test_empty_file_raises(self, tmp_path):
        """An empty file raises ConfigError."""
        with pytest.raises(ConfigError) as exc_info:
            ConfigLoader.load(write_config(tmp_path, ""))
        assert "empty" in str(exc_info.value)

    def test_non_dict_raises(self, tmp_path):
        """A YAML list at top level is rejected."""
        with pytest.raises(ConfigError):
            ConfigLoader.load(write_config(tmp_path, "- a\n- b\n"))


class TestConfigValidation:
    """Test cases for ConfigLoader._parse_config validation."""

    def base(self, **overrides):
        config = {
            'url': 'https://example.atlassian.net/wiki',
            'mappings': [{'space_key': 'DOCS', 'path': 'site'}],
        }
        config.update(overrides)
        return config

    def test_missing_required_fields(self):
        """url and mappings are required."""
        with pytest.raises(ConfigError) as exc_info:
            ConfigLoader._parse_config({})
        assert "mappings, url" in str(exc_info.value)

    @pytest.mark.parametrize("url", ["", "example.com/wiki", "ftp://example.com", 42])
    def test_invalid_url(self, url):
        """Only http(s) URLs are accepted."""
        with pytest.raises(ConfigError) as exc_info:
            ConfigLoader._parse_config(self.base(url=url))
        assert exc_info.value.config_field == 'url'

    @pytest.mark.parametrize("mappings", [[], "DOCS", None])
    def test_invalid_mappings(self, mappings):
        """mappings must be a non-empty list."""
        with pytest.raises(ConfigError) as exc_info:
            ConfigLoader._parse_config(self.base(mappings=mappings))
        assert exc_info.value.config_field == 'mappings'

    def test_mapping_missing_field(self):
        """Each mapping needs space_key and path."""
        with pytest.raises(ConfigError) as exc_info:
            ConfigLoader._parse_config(self.base(mappings=[{'space_key': 'DOCS'}]))
        assert exc_info.value.config_field == 'mappings[0]'
        assert "path" in str(exc_info.value)

    def test_mapping_empty_string(self):
        """Empty strings are rejected with the qualified field name."""
        with pytest.raises(ConfigError) as exc_info:
            ConfigLoader._parse_config(self.base(mappings=[
                {'space_key': 'DOCS', 'path': 'a'},
                {'space_key': '  ', 'path': 'b'},
            ]))
        assert exc_info.value.config_field == 'mappings[1].space_key'

    def test_mapping_not_a_dict(self):
        """Mapping entries must be dictionaries."""
        with pytest.raises(ConfigError):
            ConfigLoader._parse_config(self.base(mappings=["DOCS"]))

    def test_empty_root_rejected(self):
        """A root title, when given, must not be empty."""
        with pytest.raises(ConfigError) as exc_info:
            ConfigLoader._parse_config(self.base(mappings=[
                {'space_key': 'DOCS', 'path': 'a', 'root': ''}
            ]))
        assert exc_info.value.config_field == 'mappings[0].root'

    @pytest.mark.parametrize("depth", [0, -3, "ten", True])
    def test_invalid_nav_max_depth(self, depth):
        """nav_max_depth must be a positive integer."""
        with pytest.raises(ConfigError) as exc_info:
            ConfigLoader._parse_config(self.base(nav_max_depth=depth))
        assert exc_info.value.config_field == 'nav_max_depth'

    def test_invalid_dry_run(self):
        """dry_run must be a boolean."""
        with pytest.raises(ConfigError):
            ConfigLoader._parse_config(self.base(dry_run="yes"))

    def test_non_string_username(self):
        """Credentials must be strings."""
        with pytest.raises(ConfigError) as exc_info:
            ConfigLoader._parse_config(self.base(username=123))
        assert exc_info.value.config_field == 'username'


class TestConfigLoaderSave:
    """Test cases for ConfigLoader.save."""

    def test_save_then_load(self, tmp_path):
        """A saved configuration loads back to the same values."""
        path = str(tmp_path / "conf" / "wiki-publish.yaml")
        config = PublishConfig(
            url="https://example.atlassian.net/wiki",
            mappings=[SpaceMapping("DOCS", "/srv/site", root="Docs")],
            dry_run=True,
            nav_max_depth=3,
        )

        ConfigLoader.save(path, config)

        assert ConfigLoader.load(path) == config

    def test_save_omits_unset_credentials(self, tmp_path):
        """Credentials are only written when set."""
        path = str(tmp_path / "wiki-publish.yaml")
        ConfigLoader.save(path, PublishConfig(
            url="https://example.atlassian.net/wiki",
            mappings=[SpaceMapping("DOCS", "/srv/site")],
        ))

        with open(path, encoding="utf-8") as f:
            saved = yaml.safe_load(f)
        assert 'username' not in saved
        assert 'password' not in saved
        assert saved['mappings'] == [{'space_key': 'DOCS', 'path': '/srv/site'}]

    @pytest.mark.skipif(os.name != "posix" or os.geteuid() == 0, reason="needs POSIX permissions")
    def test_save_to_read_only_dir_raises(self, tmp_path):
        """Write failures raise FilesystemError."""
        read_only = tmp_path / "ro"
        read_only.mkdir()
        read_only.chmod(0o500)
        try:
            with pytest.raises(FilesystemError):
                ConfigLoader.save(str(read_only / "c.yaml"), PublishConfig(url="https://x.org"))
        finally:
            read_only.chmod(0o700)


class TestApplyOverrides:
    """Test cases for apply_overrides."""

    def test_command_line_values_win(self):
        """Given values replace configured ones."""
        config = PublishConfig(url="https://a.example.com", username="a", password="b")

        apply_overrides(config, url="https://b.example.com/", username="c", password="d", dry_run=True)

        assert config.url == "https://b.example.com"
        assert config.username == "c"
        assert config.password == "d"
        assert config.dry_run is True

    def test_missing_values_keep_config(self):
        """None values leave the configuration untouched."""
        config = PublishConfig(url="https://a.example.com", username="a", dry_run=True)

        apply_overrides(config)

        assert config.url == "https://a.example.com"
        assert config.username == "a"
        assert config.dry_run is True

    def test_invalid_override_url(self):
        """An invalid override URL raises ConfigError."""
        with pytest.raises(ConfigError):
            apply_overrides(PublishConfig(url="https://a.example.com"), url="nope")
