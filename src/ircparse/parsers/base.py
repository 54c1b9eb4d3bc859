"""Event record and the parser Protocol shared by every IRC log parser."""
from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Iterable, Iterator, Mapping, Protocol, runtime_checkable

MSG = "msg"
ACTION = "action"
UNKNOWN = "unknown"


@dataclass(frozen=True)
class Event:
    """One classified line of an IRC log.

    ``type`` is ``msg``, ``action``, ``unknown`` or the name of a custom rule.
    For ``unknown`` events ``text`` holds the original line untouched and the
    other fields stay ``None``.
    """

    type: str
    text: str | None = None
    timestamp: str | None = None
    nick_prefix: str | None = None
    nick: str | None = None
    extra: Mapping[str, str | None] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        if not isinstance(self.extra, MappingProxyType):
            object.__setattr__(self, "extra", MappingProxyType(dict(self.extra)))

    @property
    def is_unknown(self) -> bool:
        return self.type == UNKNOWN

    def get(self, name: str, default: Any = None) -> Any:
        """Look up a field by name, checking ``extra`` first."""
        if name in self.extra:
            value = self.extra[name]
        elif name in _FIELD_NAMES:
            value = getattr(self, name)
        else:
            value = None
        return default if value is None else value

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "type": self.type,
            "timestamp": self.timestamp,
            "nick_prefix": self.nick_prefix,
            "nick": self.nick,
            "text": self.text,
        }
        d.update(self.extra)
        return d


_FIELD_NAMES = frozenset(("type", "text", "timestamp", "nick_prefix", "nick"))


@runtime_checkable
class LineParser(Protocol):
    """Protocol for IRC log parsers, duck-typed, no inheritance required."""

    def parse_line(self, line: str) -> Event:
        """Classify a single line. Never returns None: unmatched lines are ``unknown``."""
        ...

    def parse_lines(self, lines: Iterable[str]) -> Iterator[Event]:
        """Classify lines in order, one event per line."""
        ...

    def parse_file(self, path: str) -> Iterator[Event]:
        """Stream-parse a log file line by line."""
        ...
