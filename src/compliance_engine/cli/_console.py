"""Rich console singleton and output helpers."""

from typing import Dict, List, Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

# Status and tables to stderr so piped JSON stays clean
console = Console(stderr=True)

# Data output to stdout (pipeable to jq)
stdout_console = Console()

STATUS_STYLES = {
    "COMPLIANT": "green",
    "GO": "green",
    "IMPROVED": "green",
    "OK": "green",
    "NEEDS_REVIEW": "yellow",
    "UNCLEAR": "yellow",
    "MEDIUM": "yellow",
    "UNCHANGED": "dim",
    "NOT_APPLICABLE": "dim",
    "VIOLATION": "red",
    "NON_COMPLIANT": "red",
    "NO_GO": "red",
    "WORSENED": "red",
    "HIGH": "red",
}


def styled(value: str) -> str:
    """Wrap a status value in its Rich colour."""
    style = STATUS_STYLES.get(value)
    return f"[{style}]{value}[/{style}]" if style else value


def print_ok(msg: str) -> None:
    """Print a success message to stderr."""
    console.print(f"[green]✓[/green] {msg}")


def print_err(msg: str) -> None:
    """Print an error message to stderr."""
    console.print(f"[red]✗[/red] {msg}")


def output_json(data: dict, *, ctx: typer.Context) -> bool:
    """Print data as JSON to stdout when --json is active.

    Returns:
        True if the data was printed.
    """
    if ctx.obj.get("json"):
        stdout_console.print_json(data=data)
        return True
    return False


def output_panel(text: str, *, title: str = "") -> None:
    console.print(Panel(text, title=title, border_style="blue"))


def output_table(
    rows: List[Dict[str, str]],
    *,
    title: str = "",
    columns: Optional[List[str]] = None,
) -> None:
    """Render rows as a Rich table on stderr."""
    if not rows:
        console.print("[dim]No data[/dim]")
        return

    cols = columns or list(rows[0].keys())
    table = Table(title=title, show_lines=False)
    for col in cols:
        table.add_column(col)
    for row in rows:
        table.add_row(*[str(row.get(c, "")) for c in cols])
    console.print(table)
