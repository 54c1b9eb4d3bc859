"""Composable filter chain for events.

Filters are callables that accept an Event and return bool.
Chains short-circuit on the first failing predicate (AND semantics).
"""
from __future__ import annotations

from typing import Callable, Iterable, Iterator

from ..parsers.base import Event

Predicate = Callable[[Event], bool]


class FilterChain:
    """Apply multiple predicates in sequence (logical AND).

    Usage::

        chain = FilterChain()
        chain.add(TypeFilter("msg", "action"))
        chain.add(RegexSearch("perl").matches)

        results = list(chain.apply(result))
    """

    def __init__(self) -> None:
        self._predicates: list[Predicate] = []

    def add(self, predicate: Predicate) -> "FilterChain":
        """Append a predicate and return self for chaining."""
        self._predicates.append(predicate)
        return self

    def matches(self, event: Event) -> bool:
        """Return True if all predicates accept the event."""
        return all(p(event) for p in self._predicates)

    def apply(self, events: Iterable[Event]) -> Iterator[Event]:
        """Yield events that pass every predicate."""
        for event in events:
            if self.matches(event):
                yield event

    # Allow combining two chains with &
    def __and__(self, other: "FilterChain") -> "FilterChain":
        combined = FilterChain()
        combined._predicates = self._predicates + other._predicates
        return combined

    def __len__(self) -> int:
        return len(self._predicates)

    def __repr__(self) -> str:
        return f"FilterChain({len(self._predicates)} predicates)"


class AnyFilter:
    """Logical OR: accept event if at least one predicate matches."""

    def __init__(self, *predicates: Predicate) -> None:
        self._predicates = list(predicates)

    def matches(self, event: Event) -> bool:
        return any(p(event) for p in self._predicates)

    def apply(self, events: Iterable[Event]) -> Iterator[Event]:
        for event in events:
            if self.matches(event):
                yield event


class TypeFilter:
    """Accept events whose type is one of the given types."""

    def __init__(self, *types: str) -> None:
        self._types = frozenset(types)

    def __call__(self, event: Event) -> bool:
        return event.type in self._types


class NickFilter:
    """Accept events spoken by one of the given nicks (case-insensitive)."""

    def __init__(self, *nicks: str) -> None:
        self._nicks = frozenset(n.casefold() for n in nicks)

    def __call__(self, event: Event) -> bool:
        return event.nick is not None and event.nick.casefold() in self._nicks
