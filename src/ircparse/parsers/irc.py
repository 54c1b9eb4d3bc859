"""IRC log parser: one rule set, reused for every line of every file."""
from __future__ import annotations

import logging
from typing import Iterable, Iterator

from ..config import settings
from ..result import ParseResult
from .base import Event
from .classifier import classify_line
from .rules import RuleSet

logger = logging.getLogger(__name__)


class IRCLogParser:
    """Turn IRC log lines into events.

    The rule set is built once here (or supplied ready-made) and never
    changes afterwards.  Pass a dialect's rule set to read other clients'
    logs::

        from ircparse.dialects.registry import get_dialect

        parser = IRCLogParser(get_dialect("weechat"))
        result = parser.parse("#python.weechatlog")
    """

    def __init__(self, rules: RuleSet | None = None) -> None:
        if rules is None:
            rules = RuleSet()
        elif not isinstance(rules, RuleSet):
            raise TypeError(f"rules must be a RuleSet, not {type(rules).__name__}")
        self._rules = rules

    @property
    def rules(self) -> RuleSet:
        return self._rules

    def parse_line(self, line: str) -> Event:
        return classify_line(line, self._rules)

    def parse_lines(self, lines: Iterable[str]) -> Iterator[Event]:
        """Yield one event per input line, in order."""
        for line in lines:
            yield classify_line(line, self._rules)

    def parse_file(self, path: str) -> Iterator[Event]:
        """Stream-parse a log file.

        Only the line terminator is removed; blank lines come back as
        ``unknown`` events with empty text so event N is always line N.
        """
        with open(path, encoding=settings.encoding, errors=settings.encoding_errors) as f:
            for line in f:
                yield classify_line(line.rstrip("\r\n"), self._rules)

    def parse(self, path: str) -> ParseResult:
        """Parse a whole file into a ParseResult."""
        result = ParseResult(tuple(self.parse_file(path)))
        logger.debug("Parsed %d events from %s: %s", len(result), path, result.counts())
        return result


def parse(path: str, rules: RuleSet | None = None) -> ParseResult:
    """Parse ``path`` with a throwaway parser."""
    return IRCLogParser(rules).parse(path)
