"""Rich-powered table and bar chart rendering for parsed IRC logs."""
from __future__ import annotations

from typing import Sequence

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from ..parsers.base import Event

_console = Console()

TYPE_STYLES = {
    "msg": "",
    "action": "magenta",
    "unknown": "dim",
    "join": "green",
    "part": "yellow",
    "quit": "red",
    "nick_change": "cyan",
}

EVENT_COLUMNS = ("timestamp", "type", "nick_prefix", "nick", "text")


def event_style(event_type: str) -> str:
    return TYPE_STYLES.get(event_type, "blue")


def format_event(event: Event) -> Text:
    """One-line rendering used by stream output."""
    ts = f"[{event.timestamp}] " if event.timestamp else ""
    nick = f"{event.nick_prefix or ''}{event.nick}" if event.nick else ""
    text = event.text or ""
    if event.type == "msg":
        body = f"<{nick}> {text}"
    elif event.type == "action":
        body = f"* {nick} {text}"
    elif event.type == "unknown":
        body = text
    else:
        body = f"-- {event.type}: {nick} {text}".rstrip()
    line = Text(ts, style="dim")
    line.append(body, style=event_style(event.type))
    return line


def print_events_table(
    events: Sequence[Event],
    fields: Sequence[str] | None = None,
    title: str = "Events",
    max_rows: int = 100,
    console: Console | None = None,
) -> None:
    """Render events as a Rich table.

    Args:
        events:    Parsed events.
        fields:    Columns to display. Defaults to EVENT_COLUMNS.
        title:     Table title shown in the header.
        max_rows:  Hard cap, long logs are truncated with a notice.
    """
    out = console or _console
    if not events:
        out.print("[yellow]No events to display.[/yellow]")
        return

    cols = list(fields or EVENT_COLUMNS)
    table = Table(title=title, box=box.ROUNDED, show_lines=False)
    for col in cols:
        table.add_column(col, overflow="fold", max_width=70)

    for event in events[:max_rows]:
        table.add_row(
            *[escape(str(event.get(c, ""))) for c in cols],
            style=event_style(event.type),
        )

    out.print(table)
    if len(events) > max_rows:
        out.print(
            f"[dim]... and {len(events) - max_rows} more rows (use --limit to adjust)[/dim]"
        )


def print_counter_table(
    counts: list[tuple[str, int]],
    title: str = "Top values",
    value_col: str = "Value",
    count_col: str = "Count",
    console: Console | None = None,
) -> None:
    """Render a Counter.top() result as a Rich table."""
    table = Table(title=title, box=box.SIMPLE_HEAVY)
    table.add_column("#", style="dim", width=4)
    table.add_column(value_col)
    table.add_column(count_col, justify="right", style="cyan")

    for rank, (value, count) in enumerate(counts, start=1):
        table.add_row(str(rank), escape(value), str(count))

    (console or _console).print(table)


def print_bar_chart(
    counts: list[tuple[str, int]],
    title: str = "Distribution",
    width: int = 40,
    console: Console | None = None,
) -> None:
    """Print an ASCII bar chart using Rich markup.

    Each bar is scaled relative to the maximum value.
    """
    out = console or _console
    if not counts:
        out.print("[yellow]No data for chart.[/yellow]")
        return

    max_val = max(v for _, v in counts) or 1
    max_label = max(len(k) for k, _ in counts)

    out.print(f"\n[bold]{title}[/bold]")
    for label, value in counts:
        bar = "█" * int(value / max_val * width)
        pct = value / max_val * 100
        padded = escape(f"{label:<{max_label}}")
        out.print(
            f"  {padded}  [green]{bar:<{width}}[/green]"
            f"  [cyan]{value:>6}[/cyan] [dim]({pct:.1f}%)[/dim]",
            highlight=False,
        )
    out.print()
