"""Ordered collection of events produced from one log."""
from __future__ import annotations

from collections import Counter as _Counter
from dataclasses import dataclass
from typing import Iterator

from .parsers.base import Event


@dataclass(frozen=True)
class ParseResult:
    """Events in input order, one per line.

    Usage::

        result = parse("perl-2004-02-01.log")
        for event in result.of_type("msg", "action"):
            print(f"{event.nick}: {event.text}")
    """

    events: tuple[Event, ...] = ()

    def __iter__(self) -> Iterator[Event]:
        return iter(self.events)

    def __len__(self) -> int:
        return len(self.events)

    def __getitem__(self, index: int) -> Event:
        return self.events[index]

    def of_type(self, *types: str) -> list[Event]:
        """Events whose type is one of ``types``."""
        wanted = set(types)
        return [e for e in self.events if e.type in wanted]

    def counts(self) -> dict[str, int]:
        """Number of events per type, most common first."""
        return dict(_Counter(e.type for e in self.events).most_common())

    def nicks(self) -> list[str]:
        """Distinct speakers in first-seen order."""
        seen: dict[str, None] = {}
        for e in self.events:
            if e.nick is not None:
                seen.setdefault(e.nick, None)
        return list(seen)
