"""
Console utilities and Rich formatting for pysyllabifier.

Provides CLI output with the Rich library:
- Region tables
- Status messages
- CLI help option groups
"""

from rich.box import ROUNDED
from rich.console import Console
from rich.style import Style
from rich.table import Table

# Module-level rich console instance
rich_console = Console()

# ============================================================================
# STYLES
# ============================================================================

STYLE_SUCCESS = Style(color="green", bold=True)
STYLE_ERROR = Style(color="red", bold=True)
STYLE_WARNING = Style(color="yellow")
STYLE_INFO = Style(color="cyan")


# ============================================================================
# UI COMPONENTS
# ============================================================================

def print_status(message: str, status: str = "success"):
    """Print a message prefixed with a styled status icon."""
    icon, style = {
        "success": ("✓", STYLE_SUCCESS),
        "error": ("✗", STYLE_ERROR),
        "warning": ("⚠", STYLE_WARNING),
    }.get(status, ("•", STYLE_INFO))
    rich_console.print(f"[{style.color}]{icon}[/] {message}")


def format_duration(duration: float) -> str:
    """Region length in milliseconds below one second, seconds otherwise."""
    if duration < 1:
        return f"{duration * 1000:.0f} ms"
    return f"{duration:.3f} s"


def create_region_table(title: str, rows: list[tuple[str, str, str]]) -> Table:
    """Create a styled table of (start, end, duration) rows."""
    table = Table(
        title=title,
        box=ROUNDED,
        header_style="bold cyan",
        border_style="dim",
        row_styles=["", "dim"],
    )
    table.add_column("Index", style="cyan", justify="right", no_wrap=True)
    table.add_column("Start", style="magenta", justify="left")
    table.add_column("End", style="green", justify="left")
    table.add_column("Duration", style="white", justify="right")

    for idx, (start, end, duration) in enumerate(rows):
        table.add_row(str(idx), start, end, duration)

    return table


# ============================================================================
# CLI HELP STYLING
# ============================================================================

_OPTION_GROUPS = {
    "pysyllabifier segment": [
        {
            "name": "Basic options",
            "options": ["--path", "--method"],
        },
        {
            "name": "Filtering options",
            "options": ["--max-db-drop"],
        },
        {
            "name": "Export options",
            "options": ["--export-to", "--fmt", "--output-dir"],
        },
        {
            "name": "Batch options",
            "options": ["--recursive", "--jobs"],
        },
    ],
}
