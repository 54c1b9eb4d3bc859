"""Classify one log line against a rule set."""
from __future__ import annotations

from .base import UNKNOWN, Event
from .rules import RuleSet


def classify_line(line: str, rules: RuleSet) -> Event:
    """Return the event for ``line``.

    Rules are tried in ``rules.rules`` order and the first match wins, so with
    the default set a line that looks like both a message and an action is a
    message.  Empty lines and lines no rule matches become ``unknown`` events
    carrying the line unmodified.  A match in which the ``nick`` group did not
    take part does not count.
    """
    if line:
        for rule in rules.rules:
            m = rule.regex.search(line)
            if m is not None and m.group("nick"):
                return Event(type=rule.name, extra=rule.extras(m), **rule.fields(m))
    return Event(type=UNKNOWN, text=line)
