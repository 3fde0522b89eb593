"""Data models for CLI operations."""

from enum import IntEnum


class ExitCode(IntEnum):
    """Exit codes for the wiki-publish command.

    - SUCCESS (0): Every mapping was published
    - GENERAL_ERROR (1): Configuration or unexpected error, nothing published
    - PUBLISH_FAILED (2): At least one mapping failed
    - AUTH_ERROR (3): Credentials missing or rejected
    - NETWORK_ERROR (4): Confluence unreachable

    Example:
        >>> exit_code = ExitCode.SUCCESS
        >>> sys.exit(exit_code)
    """
    SUCCESS = 0
    GENERAL_ERROR = 1
    PUBLISH_FAILED = 2
    AUTH_ERROR = 3
    NETWORK_ERROR = 4
