"""Credential resolution for the Confluence API.

Credentials are taken from the first source that provides both a user and a
token: explicit values (configuration file or command line), environment
variables (optionally from a .env file via python-dotenv), and finally the
user's netrc file, which is keyed by the host of the Confluence URL.
"""

import logging
import netrc
import os
from typing import NamedTuple, Optional
from urllib.parse import urlparse

from dotenv import load_dotenv

from .errors import InvalidCredentialsError

logger = logging.getLogger(__name__)


class Credentials(NamedTuple):
    """Confluence API credentials."""
    url: str
    user: str
    api_token: str


class Authenticator:
    """Resolves Confluence credentials for a base URL.

    Credentials are never cached or logged.

    Environment variables:
        CONFLUENCE_USER: Confluence user (email address for Cloud)
        CONFLUENCE_API_TOKEN: API token or password

    Example:
        >>> auth = Authenticator("https://example.atlassian.net/wiki")
        >>> creds = auth.get_credentials()
    """

    def __init__(
        self,
        url: str,
        username: Optional[str] = None,
        password: Optional[str] = None,
        netrc_file: Optional[str] = None
    ):
        """Initialize the authenticator and load a .env file if present.

        Args:
            url: Confluence base URL
            username: Explicit user, used together with password ahead of
                      any other source
            password: Explicit API token or password
            netrc_file: Alternative netrc path (defaults to ~/.netrc)
        """
        load_dotenv()
        self._url = url.rstrip('/')
        self._username = username
        self._password = password
        self._netrc_file = netrc_file

    @property
    def url(self) -> str:
        return self._url

    def get_credentials(self) -> Credentials:
        """Resolve credentials for the configured URL.

        Returns:
            Credentials: url, user and api_token

        Raises:
            InvalidCredentialsError: If no source provides a user and token
        """
        if self._username and self._password:
            return Credentials(
                url=self._url,
                user=self._username,
                api_token=self._password
            )

        user = os.getenv('CONFLUENCE_USER')
        api_token = os.getenv('CONFLUENCE_API_TOKEN')
        if user and api_token:
            return Credentials(url=self._url, user=user, api_token=api_token)

        from_netrc = self._lookup_netrc()
        if from_netrc:
            return from_netrc

        raise InvalidCredentialsError(
            user=user or "unknown",
            endpoint=self._url
        )

    def _lookup_netrc(self) -> Optional[Credentials]:
        """Look up the host of the base URL in the netrc file."""
        host = urlparse(self._url).hostname
        if not host:
            return None

        try:
            entries = netrc.netrc(self._netrc_file)
        except FileNotFoundError:
            return None
        except (netrc.NetrcParseError, OSError) as e:
            logger.warning(f"Ignoring unreadable netrc file: {e}")
            return None

        entry = entries.authenticators(host)
        if not entry:
            return None

        login, _, password = entry
        if not login or not password:
            return None

        logger.debug(f"Using netrc credentials for host {host}")
        return Credentials(url=self._url, user=login, api_token=password)
