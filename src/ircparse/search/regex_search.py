"""Regex-based event search with optional field targeting."""
from __future__ import annotations

import re
from typing import Iterable

from ..parsers.base import Event

DEFAULT_FIELDS = ("text", "nick")


class RegexSearch:
    """Search events using a compiled regex pattern.

    By default the ``text`` and ``nick`` fields are tested.  Pass ``fields``
    to pick others (``timestamp``, ``type``, or any key of ``Event.extra``).
    """

    def __init__(
        self,
        pattern: str,
        flags: int = re.IGNORECASE,
        fields: list[str] | None = None,
    ) -> None:
        self._regex = re.compile(pattern, flags)
        self._fields = tuple(fields) if fields else DEFAULT_FIELDS

    def _values(self, event: Event) -> Iterable[str]:
        for name in self._fields:
            value = event.get(name)
            if value is not None:
                yield str(value)

    def matches(self, event: Event) -> bool:
        """Return True if the pattern matches any relevant field value."""
        return any(self._regex.search(v) for v in self._values(event))

    def filter(self, events: Iterable[Event]) -> list[Event]:
        """Return the subset of events that match."""
        return [e for e in events if self.matches(e)]
