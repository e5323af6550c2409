"""Console rendering of version resolutions."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

if TYPE_CHECKING:
    from rich.console import Console

    from release_resolver.core.resolver import VersionResolution


def build_resolution_table(resolution: VersionResolution) -> Table:
    """Build a two-column table describing a resolution."""
    table = Table(show_header=False, box=None, pad_edge=False)
    table.add_column("Field", style="dim")
    table.add_column("Value")

    table.add_row("Current Version", f"[bold]{escape(resolution.version)}[/]")
    last_tag = escape(resolution.last_tag)
    if resolution.using_fallback_tag:
        last_tag += " [yellow](fallback)[/]"
    table.add_row("Last Tag", last_tag)
    table.add_row("Last Version", escape(resolution.last_version))
    table.add_row("Version Increment", str(resolution.bump_kind))
    table.add_row("Reason", escape(resolution.reason))
    table.add_row("Is Prerelease", "yes" if resolution.is_prerelease else "no")
    table.add_row("Commit Range", f"[cyan]{resolution.commit_range}[/]")
    return table


def render_resolution(resolution: VersionResolution, console: Console) -> None:
    """Print a resolution summary.

    The panel is green when a release is due and yellow on skip.
    """
    if resolution.should_release:
        title = f"[green]Release {resolution.tag}[/]"
        border_style = "green"
    else:
        title = "[yellow]No release[/]"
        border_style = "yellow"

    console.print(
        Panel(
            build_resolution_table(resolution),
            title=title,
            border_style=border_style,
        )
    )
