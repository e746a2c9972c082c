from __future__ import annotations

from typing import List, Optional, Sequence

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from character_dms.domain.models import Character, ThreatEntry
from character_dms.results import ImportReport


def _console(console: Optional[Console]) -> Console:
    return console or Console()


def print_characters(
    characters: Sequence[Character],
    title: str = "Characters",
    console: Optional[Console] = None,
) -> None:
    """
    Render characters as a rich table, in the order given.
    """
    out = _console(console)

    if not characters:
        out.print("[yellow](none)[/yellow]")
        return

    table = Table(title=title, box=box.ROUNDED)
    table.add_column("ID", justify="right", style="cyan", no_wrap=True)
    table.add_column("Handle", style="bold")
    table.add_column("Server", style="magenta")
    table.add_column("Occupation")
    table.add_column("WL", justify="right", style="red")
    table.add_column("Bounty (¢)", justify="right", style="yellow")
    table.add_column("Rep", justify="right", style="green")
    table.add_column("Status")

    for c in characters:
        status = "[green]active[/green]" if c.active else "[dim]archived[/dim]"
        table.add_row(
            str(c.id),
            escape(c.handle),
            c.server.value,
            escape(c.occupation),
            str(c.wanted_level),
            f"{c.bounty_cents:,}",
            str(c.reputation),
            status,
        )

    out.print(table)


def print_threats(
    entries: Sequence[ThreatEntry],
    title: str = "Top Most Wanted",
    console: Optional[Console] = None,
) -> None:
    """
    Render a ranked threat report. Rows keep the ranking order.
    """
    out = _console(console)

    if not entries:
        out.print("[yellow](none)[/yellow]")
        return

    table = Table(
        title=title,
        box=box.ROUNDED,
        caption="Sorted by Score (descending)",
    )
    table.add_column("#", justify="right", style="dim")
    table.add_column("ID", justify="right", style="cyan", no_wrap=True)
    table.add_column("Handle", style="bold")
    table.add_column("WL", justify="right", style="red")
    table.add_column("Bounty (¢)", justify="right", style="yellow")
    table.add_column("Rep", justify="right", style="green")
    table.add_column("Score", justify="right", style="bold red")

    for rank, entry in enumerate(entries, start=1):
        c = entry.character
        table.add_row(
            str(rank),
            str(c.id),
            escape(c.handle),
            str(c.wanted_level),
            f"{c.bounty_cents:,}",
            str(c.reputation),
            str(entry.score),
        )

    out.print(table)


def print_import_report(report: ImportReport, console: Optional[Console] = None) -> None:
    """
    Print the added/skipped tally, then one row per rejected line.
    """
    out = _console(console)
    out.print(report.summary())

    if not report.failures:
        return

    table = Table(title="Skipped lines", box=box.SIMPLE)
    table.add_column("Line", justify="right", style="cyan")
    table.add_column("Kind", style="magenta")
    table.add_column("Reason", style="yellow")

    rows: List[tuple[str, str, str]] = [
        (str(f.line_number), f.kind.value, "; ".join(f.reasons)) for f in report.failures
    ]
    for row in rows:
        table.add_row(*row)

    out.print(table)
