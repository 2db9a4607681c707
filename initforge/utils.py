"""Shared utility functions for initforge.

Provides Rich-based console reporting and the small naming helpers shared by
the render engine and the structure inspector.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.table import Table

if TYPE_CHECKING:  # pragma: no cover
    from initforge.models import Manifest

console = Console()

# ---------------------------------------------------------------------------
# Naming helpers
# ---------------------------------------------------------------------------


def package_path(package_name: str) -> str:
    """Convert a dotted package name into a ``/``-separated relative path.

    Examples::

        package_path("com.example.myapp") -> "com/example/myapp"
    """
    return "/".join(part for part in package_name.split(".") if part)


def format_size(size: int) -> str:
    """Format a byte count for display.

    Examples::

        format_size(512)   -> "512 B"
        format_size(2048)  -> "2.0 KiB"
    """
    if size < 1024:
        return f"{size} B"
    return f"{size / 1024:.1f} KiB"


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_summary_table(data: dict[str, str], title: str = "Summary") -> None:
    """Print a two-column key/value summary table.

    Args:
        data: Mapping of label -> value.
        title: Table title.
    """
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Item", style="dim", no_wrap=True)
    table.add_column("Value")

    for key, value in data.items():
        table.add_row(key, str(value))

    console.print(table)
    console.print()


def print_manifest(manifest: "Manifest", title: str = "Generated files") -> None:
    """Print every manifest entry with its size and executable flag."""
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Path", no_wrap=True)
    table.add_column("Size", justify="right")
    table.add_column("Exec", justify="center")

    for entry in manifest.entries:
        table.add_row(entry.path, format_size(entry.size), "x" if entry.executable else "")

    console.print(table)
    console.print()


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{message}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message."""
    console.print(f"[bold red]{message}[/bold red]")


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{message}[/bold yellow]")
