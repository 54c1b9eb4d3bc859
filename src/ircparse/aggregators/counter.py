"""Count events by a field value."""
from __future__ import annotations

from collections import Counter as _Counter

from ..parsers.base import Event


class Counter:
    """Count occurrences of an event field (``nick``, ``type``, ...) across events."""

    def __init__(self, field: str) -> None:
        self._field = field
        self._counts: _Counter[str] = _Counter()

    def add(self, event: Event) -> None:
        self._counts[str(event.get(self._field, "unknown"))] += 1

    def top(self, n: int = 10) -> list[tuple[str, int]]:
        return self._counts.most_common(n)

    @property
    def total(self) -> int:
        return sum(self._counts.values())
