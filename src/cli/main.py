"""Main CLI entry point for the wiki-publish command.

This module provides the Typer application that serves as the entry point
for the wiki-publish command-line tool. It loads the YAML configuration,
applies command line overrides and publishes every configured mapping.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

import typer

from src.cli.config import ConfigLoader, apply_overrides
from src.cli.errors import CLIError, ConfigNotFoundError
from src.cli.models import ExitCode
from src.cli.output import OutputHandler
from src.confluence_client.api_wrapper import APIWrapper
from src.confluence_client.auth import Authenticator
from src.confluence_client.errors import APIUnreachableError, InvalidCredentialsError
from src.publisher.models import PublishReport
from src.publisher.publisher import Publisher

VERSION = "0.1.0"

app = typer.Typer(
    name="wiki-publish",
    help="""Publish Antora generated documentation sites to Confluence.

QUICK START:
  wiki-publish                              # Publish using ./wiki-publish.yaml
  wiki-publish --config docs.yaml           # Use another configuration file
  wiki-publish --dry-run                    # Walk the site without remote calls""",
    add_completion=False,
    rich_markup_mode=None,  # Disable Rich markup to avoid compatibility issues
    no_args_is_help=False,
)

# Module logger
logger = logging.getLogger(__name__)

CONFIG_HINT = """Create a configuration file, for example:

url: https://example.atlassian.net/wiki
mappings:
  - space_key: DOCS
    root: Product Documentation
    path: build/site/product/1.0"""


def _configure_logging(verbosity: int, logdir: Optional[str] = None) -> None:
    """Configure logging based on verbosity level.

    Configures only the 'src' namespace logger to avoid affecting third-party
    libraries. The root logger is left unchanged.

    Args:
        verbosity: Verbosity level (0=WARNING, 1=INFO, 2=DEBUG)
        logdir: Optional directory for log files (creates timestamped log file)
    """
    if verbosity == 0:
        level = logging.WARNING
    elif verbosity == 1:
        level = logging.INFO
    else:  # verbosity >= 2
        level = logging.DEBUG

    # Configure app-specific logger (not root) to avoid affecting libraries
    app_logger = logging.getLogger("src")
    app_logger.setLevel(level)
    app_logger.handlers.clear()

    # Define log format
    log_format = "%(asctime)s [%(levelname)8s] %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"
    formatter = logging.Formatter(log_format, datefmt=date_format)

    # Console handler
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    app_logger.addHandler(console_handler)

    # File handler (if logdir is specified)
    if logdir:
        log_path = Path(logdir)
        log_path.mkdir(parents=True, exist_ok=True)

        # Generate timestamped filename using local timezone
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = log_path / f"wiki-publish_{timestamp}.log"

        # Add file handler with more detailed format
        file_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        file_formatter = logging.Formatter(file_format, datefmt=date_format)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(file_formatter)
        app_logger.addHandler(file_handler)

        logger.info(f"Logging to file: {log_file}")


def _exit_code(report: PublishReport) -> ExitCode:
    """Map a publish report to the process exit code.

    Auth and network codes are used only when every failed mapping failed
    for that same reason.
    """
    if report.success:
        return ExitCode.SUCCESS

    errors = [mapping.exception for mapping in report.failed]
    if all(isinstance(error, InvalidCredentialsError) for error in errors):
        return ExitCode.AUTH_ERROR
    if all(isinstance(error, APIUnreachableError) for error in errors):
        return ExitCode.NETWORK_ERROR
    return ExitCode.PUBLISH_FAILED


def _run_publish(
    config_path: str,
    url: Optional[str],
    username: Optional[str],
    password: Optional[str],
    dry_run: bool,
    logdir: Optional[str],
    verbosity: int,
    no_color: bool
) -> None:
    """Run the publish workflow.

    Args:
        config_path: Path to the YAML configuration file
        url: Confluence base URL overriding the configuration
        username: Confluence user overriding the configuration
        password: API token overriding the configuration
        dry_run: Walk and transform the site without remote calls
        logdir: Directory for log files
        verbosity: Verbosity level
        no_color: Whether to disable colored output
    """
    # Configure logging
    _configure_logging(verbosity, logdir)

    # Create output handler with verbosity settings
    output = OutputHandler(verbosity=verbosity, no_color=no_color)

    try:
        config = ConfigLoader.load(config_path)
        apply_overrides(config, url=url, username=username, password=password, dry_run=dry_run)
    except ConfigNotFoundError as e:
        output.error(str(e))
        output.print(CONFIG_HINT)
        raise typer.Exit(ExitCode.GENERAL_ERROR)
    except CLIError as e:
        logger.error(f"Failed to load configuration: {e}")
        output.error(str(e))
        raise typer.Exit(ExitCode.GENERAL_ERROR)

    output.info(f"Publishing {len(config.mappings)} mapping(s) to {config.url}")

    try:
        api = None
        if not config.dry_run:
            authenticator = Authenticator(config.url, config.username, config.password)
            # Fail before any site is parsed when no credentials are available
            authenticator.get_credentials()
            api = APIWrapper(authenticator)

        report = Publisher(config, api=api).publish()

    except InvalidCredentialsError as e:
        logger.error(f"Authentication failed: {e}")
        output.error(f"Authentication failed: {e}")
        output.info("Set username/password, CONFLUENCE_USER/CONFLUENCE_API_TOKEN or a ~/.netrc entry")
        raise typer.Exit(ExitCode.AUTH_ERROR)

    except Exception as e:
        logger.exception("Unexpected error during publish")
        output.error(f"Unexpected error: {e}")
        raise typer.Exit(ExitCode.GENERAL_ERROR)

    output.print_report(report)
    raise typer.Exit(_exit_code(report))


@app.command()
def main_command(
    config: str = typer.Option(
        ConfigLoader.DEFAULT_CONFIG_FILE,
        "--config",
        "-c",
        help="Path to the YAML configuration file",
        metavar="PATH",
    ),
    url: Optional[str] = typer.Option(
        None,
        "--url",
        help="Confluence base URL (overrides the configuration file)",
        metavar="URL",
    ),
    username: Optional[str] = typer.Option(
        None,
        "--username",
        "-u",
        help="Confluence user (overrides the configuration file)",
    ),
    password: Optional[str] = typer.Option(
        None,
        "--password",
        "-p",
        help="Confluence API token or password (overrides the configuration file)",
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        "--dryrun",
        help="Resolve and transform all pages without calling Confluence",
    ),
    logdir: Optional[str] = typer.Option(
        None,
        "--logdir",
        help="Directory for log files (creates timestamped log file)",
    ),
    verbosity: int = typer.Option(
        0,
        "--verbosity",
        "-v",
        help="Verbosity level: 0=summary, 1=info, 2=debug",
    ),
    no_color: bool = typer.Option(
        False,
        "--no-color",
        help="Disable colored output",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show version and exit",
    ),
) -> None:
    """Publish Antora generated documentation sites to Confluence.

    \b
    QUICK START:
      wiki-publish                              # Publish using ./wiki-publish.yaml
      wiki-publish --config docs.yaml           # Use another configuration file
      wiki-publish --dry-run                    # Walk the site without remote calls

    \b
    EXIT CODES:
      0  all mappings published
      1  configuration or unexpected error
      2  one or more mappings failed
      3  authentication failure
      4  Confluence unreachable
    """
    if version:
        typer.echo(f"wiki-publish version {VERSION}")
        raise typer.Exit()

    _run_publish(config, url, username, password, dry_run, logdir, verbosity, no_color)


def main() -> None:
    """Main entry point for the CLI application.

    This function is called when the module is executed directly or
    when the console script is invoked.
    """
    app()


# Allow running as: python -m src.cli.main
if __name__ == "__main__":
    main()
