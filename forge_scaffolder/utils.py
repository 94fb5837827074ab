"""Shared console helpers for the forge scaffolder.

Provides the single Rich console every module prints through, step headers,
coloured status messages, summary tables, a spinner progress factory and
duration formatting.
"""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.rule import Rule
from rich.table import Table
from rich.text import Text

console = Console()

# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------


def format_duration(seconds: float) -> str:
    """Format a duration in seconds to a human-readable string.

    Examples::

        format_duration(3.7)    -> "3.7s"
        format_duration(65.2)   -> "1m 5s"
        format_duration(3661.0) -> "1h 1m 1s"
    """
    if seconds < 0:
        return "0.0s"

    hours = int(seconds // 3600)
    minutes = int((seconds % 3600) // 60)
    secs = seconds % 60

    parts: list[str] = []
    if hours > 0:
        parts.append(f"{hours}h")
    if minutes > 0:
        parts.append(f"{minutes}m")

    if hours > 0 or minutes > 0:
        parts.append(f"{int(secs)}s")
    else:
        parts.append(f"{secs:.1f}s")

    return " ".join(parts)


def format_size(num_bytes: int) -> str:
    """Format a byte count, e.g. ``format_size(2048) -> "2.0 KB"``."""
    if num_bytes < 1024:
        return f"{num_bytes} B"
    if num_bytes < 1024 * 1024:
        return f"{num_bytes / 1024:.1f} KB"
    return f"{num_bytes / (1024 * 1024):.1f} MB"


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


STEP_COLORS: dict[str, str] = {
    "create-directory": "bright_cyan",
    "download": "bright_green",
    "extract": "bright_yellow",
    "relocate": "bright_magenta",
    "post-install": "bright_blue",
}


def print_banner() -> None:
    """Print the welcome banner."""
    console.print(
        Panel(
            "[bold bright_cyan]Welcome to Forge Engine Project Scaffolder![/bold bright_cyan]",
            border_style="bright_cyan",
        )
    )


def print_step_header(number: int, step: str, title: str) -> None:
    """Print a rule announcing a pipeline step, coloured by step."""
    color = STEP_COLORS.get(step, "white")
    console.print()
    console.print(Rule(f"[bold {color}] Step {number}: {title} [/bold {color}]", style=color))


def print_summary_table(data: dict[str, str], title: str = "Summary") -> None:
    """Print a two-column key/value summary table."""
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Item", style="dim", no_wrap=True)
    table.add_column("Value")

    for key, value in data.items():
        table.add_row(key, Text(str(value)))

    console.print(table)
    console.print()


def print_command_output(stdout: str, stderr: str, failed: bool = False) -> None:
    """Echo captured command output.

    Failed commands get a red panel per stream; successful ones are printed
    dimmed.
    """
    if failed:
        if stdout:
            console.print(Panel(Text(stdout), title="Command Output", border_style="red"))
        if stderr:
            console.print(Panel(Text(stderr), title="Command Error Output", border_style="red"))
        return
    if stdout:
        console.print(Text(stdout, style="dim"))
    if stderr:
        console.print(Text(stderr, style="dim yellow"))


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{escape(message)}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message."""
    console.print(f"[bold red]{escape(message)}[/bold red]")


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{escape(message)}[/bold yellow]")


def create_progress() -> Progress:
    """Create a Rich spinner for long-running steps.

    Returns:
        A ``Progress`` instance suitable for use as a context manager.
    """
    return Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    )
