"""Terminal output handling using Rich library.

This module provides the OutputHandler class for all CLI terminal output.
Supports verbosity levels and the --no-color flag.
"""

from rich.console import Console

from src.publisher.models import MappingReport, PublishReport


class OutputHandler:
    """Handles all terminal output using Rich library.

    Attributes:
        verbosity: Verbosity level (0=summary, 1=info, 2=debug)
        console: Rich Console instance for output

    Example:
        >>> handler = OutputHandler(verbosity=1, no_color=False)
        >>> handler.success("Operation completed")
    """

    def __init__(self, verbosity: int = 0, no_color: bool = False):
        """Initialize output handler.

        Args:
            verbosity: Verbosity level (0=summary, 1=info, 2=debug)
            no_color: Disable color output if True
        """
        self.verbosity = verbosity
        self.console = Console(
            force_terminal=not no_color,
            no_color=no_color,
            highlight=False,
        )

    def success(self, message: str) -> None:
        """Display success message in green.

        Args:
            message: Success message to display
        """
        self.console.print(f"[green]✓[/green] {message}")

    def error(self, message: str) -> None:
        """Display error message in red.

        Args:
            message: Error message to display
        """
        self.console.print(f"[red]✗[/red] {message}", style="red")

    def warning(self, message: str) -> None:
        """Display warning message in yellow.

        Args:
            message: Warning message to display
        """
        self.console.print(f"[yellow]⚠[/yellow] {message}", style="yellow")

    def info(self, message: str) -> None:
        """Display info message (only if verbosity >= 1).

        Args:
            message: Info message to display
        """
        if self.verbosity >= 1:
            self.console.print(message)

    def debug(self, message: str) -> None:
        """Display debug message (only if verbosity >= 2).

        Args:
            message: Debug message to display
        """
        if self.verbosity >= 2:
            self.console.print(f"[dim]{message}[/dim]")

    def print(self, message: str) -> None:
        """Display message without formatting.

        Args:
            message: Message to display
        """
        self.console.print(message)

    def print_report(self, report: PublishReport) -> None:
        """Display the publish summary, one block per mapping.

        Args:
            report: Result of Publisher.publish()
        """
        title = "Dry Run - Publish Preview:" if report.dry_run else "Publish Summary:"
        self.console.print(f"\n[bold]{title}[/bold]")

        for mapping in report.mappings:
            self._print_mapping(mapping)

        # Overall status
        if not report.mappings:
            self.console.print("\n[yellow]No mappings to publish[/yellow]")
        elif report.success:
            self.console.print("\n[green]Publish completed successfully[/green]")
        else:
            self.console.print(
                f"\n[red]Publish failed for {len(report.failed)} of "
                f"{len(report.mappings)} mapping(s)[/red]"
            )

    def _print_mapping(self, mapping: MappingReport) -> None:
        stats = mapping.stats
        if mapping.success:
            self.console.print(f"  [green]✓[/green] {mapping.space_key} ← {mapping.path}")
        else:
            self.console.print(f"  [red]✗[/red] {mapping.space_key} ← {mapping.path}")
            self.console.print(f"    [red]{mapping.error}[/red]")

        self.console.print(
            f"    Pages: {stats.created} created, {stats.reused} existing, "
            f"{stats.updated} updated"
        )
        if stats.containers or stats.skipped:
            self.console.print(
                f"    [dim]{stats.containers} container(s), {stats.skipped} without body[/dim]"
            )
        if stats.attachments_uploaded or stats.attachments_failed:
            line = f"    Attachments: {stats.attachments_uploaded} uploaded"
            if stats.attachments_failed:
                line += f", [yellow]{stats.attachments_failed} failed[/yellow]"
            self.console.print(line)
