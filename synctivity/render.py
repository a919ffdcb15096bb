"""
Rendering functions for synctivity output.

This module handles all pretty-printing and table formatting.
Services return data, this module makes it human-readable.
"""

from rich.table import Table
from rich.console import Console
from rich import box
from typing import Optional

from .services.sync_service import SyncResult

console = Console()


def render_sync_summary(result: SyncResult, target: str, out: Optional[Console] = None) -> None:
    """
    Render a sync result as a table, one row per source repository.

    Args:
        result: Result of the sync run
        target: Target repository path shown in the title
        out: Console to print to (module console if None)
    """
    out = out or console

    if not result.sources:
        out.print("[yellow]No repositories synced.[/yellow]")
        return

    table = Table(
        title=f"Synced into {target}",
        box=box.ROUNDED,
        show_header=True,
        header_style="bold magenta"
    )

    table.add_column("Repository", style="cyan")
    table.add_column("Path", style="dim")
    table.add_column("Matched", justify="right")
    table.add_column("Replayed", justify="right", style="green")

    for source in result.sources:
        table.add_row(source.name, source.path, str(source.matched), str(source.replayed))

    table.add_section()
    table.add_row("[bold]Total[/bold]", "", "", f"[bold]{result.total}[/bold]")

    out.print(table)
