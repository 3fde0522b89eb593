"""Command-line interface for publishing documentation sites to Confluence.

This package provides the `wiki-publish` CLI tool that loads the publish
configuration, resolves credentials and runs the publisher with terminal
output and exit codes.
"""

from .config import ConfigLoader, apply_overrides
from .models import ExitCode
from .errors import (
    CLIError,
    ConfigError,
    ConfigNotFoundError,
    FilesystemError,
)

__all__ = [
    'ConfigLoader',
    'apply_overrides',
    'ExitCode',
    'CLIError',
    'ConfigError',
    'ConfigNotFoundError',
    'FilesystemError',
]
