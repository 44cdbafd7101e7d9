"""Rich console utilities for styled terminal output.

This module provides a consistent interface for all wizard output using
the Rich library: status lines, progress bars, summary panels and the
tables used for the upload preview and results.
"""

from collections.abc import Generator, Mapping, Sequence
from contextlib import contextmanager

from rich.console import Console
from rich.panel import Panel
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskProgressColumn,
    TextColumn,
)
from rich.table import Table
from rich.theme import Theme

from vault_bulk_upload.models import UploadResult, UploadStatus

_THEME = Theme(
    {
        "info": "cyan",
        "success": "green",
        "warning": "yellow",
        "error": "red bold",
        "highlight": "cyan bold",
        "muted": "dim",
    }
)

_STATUS_STYLES = {
    UploadStatus.PENDING: ("muted", "…"),
    UploadStatus.SUCCESS: ("success", "✓"),
    UploadStatus.ERROR: ("error", "✗"),
}

# Shared console instance
console = Console(theme=_THEME)


def info(message: str) -> None:
    """Print an informational message."""
    console.print(f"[info]ℹ[/info] {message}")


def success(message: str) -> None:
    """Print a success message."""
    console.print(f"[success]✓[/success] {message}")


def warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[warning]⚠[/warning] {message}")


def error(message: str) -> None:
    """Print an error message."""
    console.print(f"[error]✗[/error] {message}")


def action(message: str) -> None:
    """Print an action/progress message."""
    console.print(f"[info]→[/info] {message}")


def step(message: str) -> None:
    """Print a sub-step message."""
    console.print(f"[muted]•[/muted] {message}")


def highlight(text: str) -> str:
    """Return text wrapped in highlight markup.

    Args:
        text: The text to highlight.

    Returns:
        Text wrapped in Rich markup for highlighting.

    """
    return f"[highlight]{text}[/highlight]"


@contextmanager
def spinner(message: str) -> Generator[None, None, None]:
    """Display a spinner while performing an operation.

    Args:
        message: The status message to display.

    Yields:
        None

    """
    with console.status(f"[info]{message}[/info]", spinner="dots"):
        yield


def create_upload_progress() -> Progress:
    """Create a progress bar for the secret upload loop.

    Returns:
        A configured Progress instance showing percentage and secret count.

    """
    return Progress(
        SpinnerColumn(),
        TextColumn("[bold blue]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        TextColumn("[muted]{task.completed}/{task.total}[/muted]"),
        console=console,
    )


def summary_panel(title: str, items: Mapping[str, str], *, border_style: str = "green") -> None:
    """Print a summary panel with key-value pairs.

    Args:
        title: Title for the panel.
        items: Dictionary of label -> value pairs to display.
        border_style: Rich style for the panel border.

    """
    table = Table.grid(padding=(0, 2))
    table.add_column(style="bold")
    table.add_column(style="cyan")

    for label, value in items.items():
        table.add_row(f"{label}:", value)

    console.print(Panel(table, title=f"[bold]{title}[/bold]", border_style=border_style))


def secrets_preview(grouped: Mapping[str, Mapping[str, str]]) -> None:
    """Print the grouped secrets that are about to be uploaded.

    Only key names are shown; values never reach the terminal.

    Args:
        grouped: Secret name -> {key: value} mapping.

    """
    table = Table(title="Secrets to upload", title_style="bold")
    table.add_column("Secret", style="highlight")
    table.add_column("Keys")
    table.add_column("#", justify="right", style="muted")

    for name, data in grouped.items():
        table.add_row(name, ", ".join(data), str(len(data)))

    console.print(table)


def results_table(results: Sequence[UploadResult]) -> None:
    """Print per-secret upload results.

    Args:
        results: Results in upload order.

    """
    table = Table(title="Upload results", title_style="bold")
    table.add_column("", width=1)
    table.add_column("Secret")
    table.add_column("Path", style="muted")
    table.add_column("Message")

    for result in results:
        style, icon = _STATUS_STYLES[result.status]
        message = "Waiting..." if result.status is UploadStatus.PENDING else (result.message or result.status.value)
        table.add_row(
            f"[{style}]{icon}[/{style}]",
            result.secret_name,
            result.full_path or "",
            f"[{style}]{message}[/{style}]",
        )

    console.print(table)


def newline() -> None:
    """Print an empty line."""
    console.print()
