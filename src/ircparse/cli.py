"""ircparse CLI entry point.

Commands:
    ircparse parse    <file>           Parse and display events
    ircparse search   <file> <pattern> Regex search across events
    ircparse stats    <file>           Per-nick / per-type statistics
    ircparse dialects                  List known log dialects
"""
from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Iterator

import click
from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .config import settings
from .dialects.registry import default_registry
from .parsers.base import UNKNOWN, Event
from .parsers.irc import IRCLogParser
from .parsers.rules import RuleSet
from .search.filter_chain import FilterChain, NickFilter, TypeFilter
from .visualization.tables import format_event, print_events_table

console = Console()
err_console = Console(stderr=True)

logger = logging.getLogger(__name__)

# ── Helpers ─────────────────────────────────────────────────────────────────


def _load_rules(dialect: str | None) -> RuleSet:
    name = dialect or settings.default_dialect
    try:
        return default_registry.get(name)
    except KeyError as exc:
        raise click.BadParameter(str(exc.args[0]), param_hint="'--dialect'") from None


def _take(events: Iterator[Event], limit: int) -> list[Event]:
    collected: list[Event] = []
    for event in events:
        if limit and len(collected) >= limit:
            break
        collected.append(event)
    return collected


def _emit(events: list[Event], output_fmt: str, title: str) -> None:
    if output_fmt == "json":
        for event in events:
            click.echo(json.dumps(event.to_dict()))
    elif output_fmt == "table":
        print_events_table(events, title=title, max_rows=settings.table_max_rows, console=console)
    else:
        for event in events:
            console.print(format_event(event), highlight=False)


def _dialect_option(f):
    return click.option(
        "--dialect", "-d", default=None,
        help="Log dialect (see `ircparse dialects`). Default: $IRCPARSE_DEFAULT_DIALECT or 'default'.",
    )(f)


def _output_option(default: str):
    return click.option(
        "--output", "-o", "output_fmt", default=default,
        type=click.Choice(["table", "stream", "json"], case_sensitive=False),
        help="Output format.",
        show_default=True,
    )


# ── CLI root ─────────────────────────────────────────────────────────────────


@click.group()
@click.version_option(version="1.0.0", prog_name="ircparse")
@click.option(
    "--log-level", default=None,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Logging verbosity (default: $IRCPARSE_LOG_LEVEL or WARNING).",
)
def main(log_level: str | None) -> None:
    """ircparse: parse IRC logs into messages, actions and other events."""
    logging.basicConfig(
        level=(log_level or settings.log_level).upper(),
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
    )
    found = default_registry.discover()
    if found:
        logger.info("Loaded %d dialect(s) from entry points", found)


# ── parse ────────────────────────────────────────────────────────────────────


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@_dialect_option
@click.option(
    "--type", "-t", "types", multiple=True,
    help="Only show events of this type (repeatable, e.g. -t msg -t action).",
)
@_output_option("stream")
@click.option("--limit", "-n", default=0, type=int, help="Max events to display (0 = all).")
def parse(
    file: Path,
    dialect: str | None,
    types: tuple[str, ...],
    output_fmt: str,
    limit: int,
) -> None:
    """Parse an IRC log and display its events.

    \b
    Examples:
      ircparse parse perl-2004-02-01.log
      ircparse parse perl-2004-02-01.log -t msg -t action --output table
      ircparse parse '#python.weechatlog' --dialect weechat --output json
    """
    parser = IRCLogParser(_load_rules(dialect))
    events = parser.parse_file(str(file))
    if types:
        events = FilterChain().add(TypeFilter(*types)).apply(events)

    collected = _take(events, limit)
    if not collected:
        err_console.print("[yellow]No events found.[/yellow]")
        return

    _emit(collected, output_fmt, title=file.name)
    if output_fmt != "json":
        console.print(f"\n[dim]{len(collected)} events from {escape(file.name)}[/dim]")


# ── search ───────────────────────────────────────────────────────────────────


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("pattern")
@_dialect_option
@click.option(
    "--field", "fields", multiple=True,
    help="Field to match against (repeatable; default: text and nick).",
)
@click.option("--nick", "nicks", multiple=True, help="Only events from this nick (repeatable).")
@click.option("--type", "-t", "types", multiple=True, help="Only events of this type (repeatable).")
@click.option("--case-sensitive", is_flag=True, help="Case-sensitive matching (default: insensitive).")
@_output_option("stream")
@click.option("--limit", "-n", default=0, type=int, help="Max results to display (0 = all).")
def search(
    file: Path,
    pattern: str,
    dialect: str | None,
    fields: tuple[str, ...],
    nicks: tuple[str, ...],
    types: tuple[str, ...],
    case_sensitive: bool,
    output_fmt: str,
    limit: int,
) -> None:
    """Search events matching a regex pattern.

    \b
    Examples:
      ircparse search perl.log "closure"
      ircparse search perl.log "^rjbs$" --field nick
      ircparse search perl.log "bug" --nick alice -t msg --output table
    """
    from .search.regex_search import RegexSearch

    flags = 0 if case_sensitive else re.IGNORECASE
    try:
        searcher = RegexSearch(pattern=pattern, flags=flags, fields=list(fields) or None)
    except re.error as exc:
        raise click.BadParameter(f"invalid regex: {exc}", param_hint="'PATTERN'") from None

    chain = FilterChain().add(searcher.matches)
    if nicks:
        chain.add(NickFilter(*nicks))
    if types:
        chain.add(TypeFilter(*types))

    parser = IRCLogParser(_load_rules(dialect))
    results = _take(chain.apply(parser.parse_file(str(file))), limit)

    if not results:
        err_console.print(f"[yellow]No matches for pattern {escape(repr(pattern))}[/yellow]")
        return

    _emit(results, output_fmt, title=f"Search results: {pattern!r} in {file.name}")
    if output_fmt != "json":
        console.print(
            f"\n[dim]{len(results)} match{'es' if len(results) != 1 else ''} "
            f"for {escape(repr(pattern))} in {escape(file.name)}[/dim]"
        )


# ── stats ────────────────────────────────────────────────────────────────────


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@_dialect_option
@click.option("--by", "-b", default="nick", help="Event field to count by.", show_default=True)
@click.option("--top", default=10, type=int, help="Show top N values.", show_default=True)
@click.option("--include-unknown", is_flag=True, help="Count unrecognised lines too.")
@click.option("--chart", "-c", is_flag=True, help="Show ASCII bar chart.")
def stats(
    file: Path,
    dialect: str | None,
    by: str,
    top: int,
    include_unknown: bool,
    chart: bool,
) -> None:
    """Show aggregate statistics for an IRC log.

    \b
    Examples:
      ircparse stats perl.log
      ircparse stats perl.log --by type --chart
      ircparse stats irssi.log --dialect irssi --by channel
    """
    from .aggregators.counter import Counter
    from .visualization.tables import print_bar_chart, print_counter_table

    parser = IRCLogParser(_load_rules(dialect))
    result = parser.parse(str(file))

    counter = Counter(field=by)
    for event in result:
        if event.type == UNKNOWN and not include_unknown:
            continue
        counter.add(event)

    by_type = ", ".join(f"{t}: {n}" for t, n in result.counts().items()) or "none"
    console.print(f"\n[bold]File:[/bold] {escape(file.name)}  [bold]Events:[/bold] {len(result)} ({escape(by_type)})")

    top_counts = counter.top(top)
    if chart:
        print_bar_chart(top_counts, title=f"Distribution by '{by}'", width=40, console=console)
    else:
        print_counter_table(
            top_counts, title=f"Top {top} by '{by}'",
            value_col=by.title(), count_col="Count", console=console,
        )


# ── dialects ─────────────────────────────────────────────────────────────────


@main.command()
def dialects() -> None:
    """List the log dialects ircparse knows about."""
    tbl = Table(title="Dialects", box=box.ROUNDED)
    tbl.add_column("Name", style="bold")
    tbl.add_column("Description")
    for name, description in default_registry.describe():
        marker = " (default)" if name == settings.default_dialect else ""
        tbl.add_row(escape(f"{name}{marker}"), escape(description))
    console.print(tbl)


if __name__ == "__main__":
    main()
