"""YAML configuration loading and validation.

This module handles loading and saving publish configuration from YAML
files. A configuration names the Confluence instance and one or more
mappings, each publishing a generated site directory into a space.
"""

import os
from pathlib import Path
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

import yaml

from src.models.config import PublishConfig, SpaceMapping

from .errors import ConfigError, ConfigNotFoundError, FilesystemError


class ConfigLoader:
    """Handles configuration file loading, validation, and saving.

    Configuration file structure:
        url: https://example.atlassian.net/wiki
        username: me@example.com
        password: <api token>
        dry_run: false
        nav_max_depth: 10
        mappings:
          - space_key: DOCS
            root: Product Documentation
            path: build/site/product/1.0

    Relative mapping paths are resolved against the directory of the
    configuration file.
    """

    DEFAULT_CONFIG_FILE = 'wiki-publish.yaml'

    # Required top-level config fields
    REQUIRED_TOP_LEVEL_FIELDS = {'url', 'mappings'}

    # Required fields for each mapping
    REQUIRED_MAPPING_FIELDS = {'space_key', 'path'}

    # Default values for optional fields
    DEFAULTS = {
        'dry_run': False,
        'nav_max_depth': 10,
    }

    @classmethod
    def load(cls, config_path: str) -> PublishConfig:
        """Load and parse configuration from a YAML file.

        Args:
            config_path: Path to the YAML configuration file

        Returns:
            PublishConfig object with parsed configuration

        Raises:
            ConfigNotFoundError: If the file does not exist
            FilesystemError: If file cannot be read
            ConfigError: If configuration is invalid or malformed
        """
        # Read file
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                content = f.read()
        except FileNotFoundError:
            raise ConfigNotFoundError(config_path)
        except PermissionError:
            raise FilesystemError(
                config_path,
                'read',
                'Permission denied'
            )
        except (OSError, UnicodeDecodeError) as e:
            raise FilesystemError(
                config_path,
                'read',
                str(e)
            )

        # Parse YAML
        try:
            config_dict = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigError(
                f"Invalid YAML syntax: {str(e)}"
            )

        if config_dict is None:
            raise ConfigError("Configuration file is empty")

        if not isinstance(config_dict, dict):
            raise ConfigError(
                f"Configuration must be a YAML dictionary, got {type(config_dict).__name__}"
            )

        base_dir = os.path.dirname(os.path.abspath(config_path))
        return cls._parse_config(config_dict, base_dir)

    @classmethod
    def save(cls, config_path: str, config: PublishConfig) -> None:
        """Save configuration to a YAML file.

        Args:
            config_path: Path to the YAML configuration file
            config: PublishConfig object to save

        Raises:
            FilesystemError: If file cannot be written
        """
        mappings_list = []
        for mapping in config.mappings:
            mapping_dict = {'space_key': mapping.space_key}
            # Only include the root title if one is set
            if mapping.root:
                mapping_dict['root'] = mapping.root
            mapping_dict['path'] = str(mapping.path)
            mappings_list.append(mapping_dict)

        config_dict: Dict[str, Any] = {'url': config.url}
        if config.username:
            config_dict['username'] = config.username
        if config.password:
            config_dict['password'] = config.password
        config_dict['dry_run'] = config.dry_run
        config_dict['nav_max_depth'] = config.nav_max_depth
        config_dict['mappings'] = mappings_list

        # Generate YAML
        yaml_str = yaml.safe_dump(
            config_dict,
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False
        )

        # Ensure directory exists
        config_dir = os.path.dirname(config_path)
        if config_dir:
            try:
                os.makedirs(config_dir, exist_ok=True)
            except OSError as e:
                raise FilesystemError(
                    config_dir,
                    'create_directory',
                    str(e)
                )

        # Write file
        try:
            with open(config_path, 'w', encoding='utf-8') as f:
                f.write(yaml_str)
        except PermissionError:
            raise FilesystemError(
                config_path,
                'write',
                'Permission denied'
            )
        except OSError as e:
            raise FilesystemError(
                config_path,
                'write',
                str(e)
            )

    @classmethod
    def _parse_config(cls, config_dict: Dict[str, Any], base_dir: Optional[str] = None) -> PublishConfig:
        """Parse and validate configuration dictionary.

        Args:
            config_dict: Raw configuration dictionary from YAML
            base_dir: Directory that relative mapping paths are resolved against

        Returns:
            Validated PublishConfig object

        Raises:
            ConfigError: If configuration is invalid
        """
        # Validate required top-level fields
        missing_fields = cls.REQUIRED_TOP_LEVEL_FIELDS - set(config_dict.keys())
        if missing_fields:
            raise ConfigError(
                f"Missing required fields: {', '.join(sorted(missing_fields))}"
            )

        url = cls._validate_url(config_dict.get('url'))

        mappings_raw = config_dict.get('mappings')
        if not isinstance(mappings_raw, list):
            raise ConfigError(
                f"Must be a list, got {type(mappings_raw).__name__}",
                'mappings'
            )
        if not mappings_raw:
            raise ConfigError("At least one mapping is required", 'mappings')

        mappings = [
            cls._parse_mapping(mapping_dict, index, base_dir)
            for index, mapping_dict in enumerate(mappings_raw)
        ]

        username = cls._optional_string(config_dict, 'username')
        password = cls._optional_string(config_dict, 'password')

        dry_run = config_dict.get('dry_run', cls.DEFAULTS['dry_run'])
        if not isinstance(dry_run, bool):
            raise ConfigError(
                f"Must be a boolean, got {type(dry_run).__name__}",
                'dry_run'
            )

        nav_max_depth = config_dict.get('nav_max_depth', cls.DEFAULTS['nav_max_depth'])
        if isinstance(nav_max_depth, bool) or not isinstance(nav_max_depth, int):
            raise ConfigError(
                f"Must be an integer, got {type(nav_max_depth).__name__}",
                'nav_max_depth'
            )
        if nav_max_depth < 1:
            raise ConfigError(
                f"Must be a positive integer, got {nav_max_depth}",
                'nav_max_depth'
            )

        return PublishConfig(
            url=url,
            mappings=mappings,
            username=username,
            password=password,
            dry_run=dry_run,
            nav_max_depth=nav_max_depth
        )

    @classmethod
    def _parse_mapping(
        cls,
        mapping_dict: Any,
        index: int,
        base_dir: Optional[str]
    ) -> SpaceMapping:
        """Parse and validate one entry of the mappings list."""
        field_prefix = f"mappings[{index}]"
        if not isinstance(mapping_dict, dict):
            raise ConfigError(
                f"Must be a dictionary, got {type(mapping_dict).__name__}",
                field_prefix
            )

        missing_fields = cls.REQUIRED_MAPPING_FIELDS - set(mapping_dict.keys())
        if missing_fields:
            raise ConfigError(
                f"Missing required fields: {', '.join(sorted(missing_fields))}",
                field_prefix
            )

        for field_name in ('space_key', 'path'):
            value = mapping_dict.get(field_name)
            if not isinstance(value, str) or not value.strip():
                raise ConfigError(
                    "Must be a non-empty string",
                    f"{field_prefix}.{field_name}"
                )

        root = mapping_dict.get('root')
        if root is not None and (not isinstance(root, str) or not root.strip()):
            raise ConfigError(
                "Must be a non-empty string",
                f"{field_prefix}.root"
            )

        path = Path(mapping_dict['path'].strip())
        if not path.is_absolute() and base_dir:
            path = Path(base_dir) / path

        return SpaceMapping(
            space_key=mapping_dict['space_key'].strip(),
            path=str(path),
            root=root.strip() if root else None
        )

    @staticmethod
    def _validate_url(url: Any) -> str:
        if not isinstance(url, str) or not url.strip():
            raise ConfigError("Must be a non-empty string", 'url')

        parsed = urlparse(url.strip())
        if parsed.scheme not in ('http', 'https') or not parsed.netloc:
            raise ConfigError(
                f"Must be an http(s) URL, got '{url}'",
                'url'
            )
        return url.strip().rstrip('/')

    @staticmethod
    def _optional_string(config_dict: Dict[str, Any], field_name: str) -> Optional[str]:
        value = config_dict.get(field_name)
        if value is None:
            return None
        if not isinstance(value, str):
            raise ConfigError(
                f"Must be a string, got {type(value).__name__}",
                field_name
            )
        return value or None


def apply_overrides(
    config: PublishConfig,
    url: Optional[str] = None,
    username: Optional[str] = None,
    password: Optional[str] = None,
    dry_run: bool = False
) -> PublishConfig:
    """Apply command line values on top of a loaded configuration.

    Raises:
        ConfigError: If the overriding URL is invalid
    """
    if url:
        config.url = ConfigLoader._validate_url(url)
    if username:
        config.username = username
    if password:
        config.password = password
    if dry_run:
        config.dry_run = True
    return config
