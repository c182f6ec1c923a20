"""Console reporter using Rich library for formatted CLI output.

Prints the generated URL on its own line, so it can be piped, followed by
a table breaking the URL into its components.
"""

from datetime import datetime, timezone

from rich import box
from rich.console import Console
from rich.table import Table

from urlbuilder.errors import UnparsableUrlError
from urlbuilder.models import GeneratedUrl
from urlbuilder.reporters.base import Reporter
from urlbuilder.url_builder import UrlBuilder


class ConsoleReporter(Reporter):
    """Rich-based console reporter for CLI output.

    Args:
        quiet: If True, print only the URL
    """

    def __init__(self, quiet: bool = False):
        # Use legacy_windows=True for ASCII-safe output on Windows consoles
        self.console = Console(legacy_windows=True)
        self.error_console = Console(stderr=True, legacy_windows=True)
        self.quiet = quiet

    def on_url_generated(self, result: GeneratedUrl) -> None:
        """Print the URL and, unless quiet, its breakdown."""
        # Plain print: markup or wrapping would corrupt the URL
        self.console.print(result.url, markup=False, highlight=False, soft_wrap=True)

        if self.quiet:
            return

        self.console.print(self.build_table(result))

    def on_error(self, message: str) -> None:
        """Print the error to stderr."""
        self.error_console.print(message, style="red", markup=False, highlight=False)

    def build_table(self, result: GeneratedUrl) -> Table:
        """Table of scheme, host, path, parameters and expiry."""
        table = Table(
            show_header=True,
            header_style="bold magenta",
            border_style="dim",
            box=box.ASCII,
        )
        table.add_column("Component", style="cyan", no_wrap=True)
        table.add_column("Value", overflow="fold")

        table.add_row("Provider", result.provider)

        try:
            parsed = UrlBuilder.parse(result.url)
        except UnparsableUrlError:
            parsed = None

        if parsed is not None:
            table.add_row("Scheme", "https" if parsed.ssl else "http")
            table.add_row("Host", parsed.hostname)
            if parsed.port:
                table.add_row("Port", str(parsed.port))
            table.add_row("Path", parsed.path)
            for param in parsed.parameters:
                table.add_row(f"  {param.key}", param.value or "")

        if result.signed:
            table.add_row("Signed", "[green]yes[/green]")
        else:
            table.add_row("Signed", "[dim]no[/dim]")

        if result.expires is not None:
            expires_at = datetime.fromtimestamp(result.expires, tz=timezone.utc)
            table.add_row("Expires", f"{expires_at.isoformat()} ({result.expires})")

        return table
