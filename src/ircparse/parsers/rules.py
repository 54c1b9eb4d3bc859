"""Composable rule set for IRC log lines.

A rule set is a map of named sub-patterns plus an ordered list of top-level
rules.  A sub-pattern is either a regex string or a callable that receives the
resolved sub-pattern map and returns a regex string, so a composed unit such
as ``nick_container`` always embeds whatever ``nick`` currently is::

    rules = RuleSet().override(nick=r"(?P<nick>[a-z]+)")
    rules.source("msg")   # re-composed with the new nick pattern

Fields are bound through named groups (``timestamp``, ``nick_prefix``,
``nick``, ``channel``, ``text``), never through group positions, so changing
a composition cannot shift what lands in which event field.

Default patterns follow irssi's stock log format::

    [12:34] <@alice:#chan> hi
    [12:34] * bob waves
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Iterator, Mapping, Union

from .base import ACTION, MSG

logger = logging.getLogger(__name__)

Composer = Callable[["SubPatterns"], str]
PatternSource = Union[str, Composer]

# Named groups copied onto Event attributes; anything else goes through Rule.extra
EVENT_GROUPS = ("timestamp", "nick_prefix", "nick", "text")


class RuleSetError(ValueError):
    """A rule set could not be built (bad regex, bad reference, missing group)."""


# ---------------------------------------------------------------------------
# Default sub-patterns and compositions
# ---------------------------------------------------------------------------


def build_nick_container(p: SubPatterns) -> str:
    """``<``, optional decoration, nick, optional ``:channel``, ``>``."""
    return rf"<\s*{p['nick_prefix']}?\s*{p['nick']}(?::{p['chan']})?\s*>"


def build_msg(p: SubPatterns) -> str:
    return rf"{p['timestamp']}\s*{p['nick_container']}\s+(?P<text>.+)"


def build_action(p: SubPatterns) -> str:
    return (
        rf"{p['timestamp']}\s*{p['action_leader']}\s+"
        rf"{p['nick_prefix']}?\s*{p['nick']}\s(?P<text>.+)"
    )


DEFAULT_PATTERNS: Mapping[str, PatternSource] = MappingProxyType({
    "nick": r"(?P<nick>[\w\[\]{}()^]+)",
    "chan": r"(?P<channel>[&#][\w\[\]{}&#^]*)",
    "nick_prefix": r"(?P<nick_prefix>[%@])",
    "nick_container": build_nick_container,
    "timestamp": r"\[?(?P<timestamp>\d\d:\d\d(?::\d\d)?)?\]?",
    "action_leader": r"\*",
})


@dataclass(frozen=True)
class Rule:
    """A top-level line shape.

    ``build`` composes the regex from the sub-pattern map.  ``extra`` names
    groups to surface in ``Event.extra`` (e.g. ``("channel",)``).
    """

    name: str
    build: Composer
    extra: tuple[str, ...] = ()


# Order matters: msg is tried before action.
DEFAULT_RULES: tuple[Rule, ...] = (
    Rule(MSG, build_msg),
    Rule(ACTION, build_action),
)


@dataclass(frozen=True)
class CompiledRule:
    name: str
    regex: re.Pattern[str]
    extra: tuple[str, ...] = ()

    def fields(self, match: re.Match[str]) -> dict[str, str | None]:
        groups = self.regex.groupindex
        return {g: match.group(g) if g in groups else None for g in EVENT_GROUPS}

    def extras(self, match: re.Match[str]) -> Mapping[str, str | None]:
        return MappingProxyType({g: match.group(g) for g in self.extra})


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------


class SubPatterns:
    """Read-only view over sub-pattern sources, resolving compositions on access.

    Indexing returns the pattern wrapped in a non-capturing group, so an
    alternation inside an override stays local to where it is embedded.
    ``raw()`` returns the unwrapped text.
    """

    def __init__(self, sources: Mapping[str, PatternSource]) -> None:
        self._sources = sources
        self._resolved: dict[str, str] = {}
        self._pending: list[str] = []

    def __getitem__(self, name: str) -> str:
        return f"(?:{self.raw(name)})"

    def raw(self, name: str) -> str:
        if name in self._resolved:
            return self._resolved[name]
        if name not in self._sources:
            raise RuleSetError(f"unknown sub-pattern {name!r}")
        if name in self._pending:
            cycle = " -> ".join([*self._pending, name])
            raise RuleSetError(f"circular sub-pattern reference: {cycle}")

        source = self._sources[name]
        if callable(source):
            self._pending.append(name)
            try:
                value = source(self)
            finally:
                self._pending.pop()
        else:
            value = source

        if not isinstance(value, str):
            raise RuleSetError(
                f"sub-pattern {name!r} must be a regex string, got {type(value).__name__}"
            )
        self._resolved[name] = value
        return value

    def __contains__(self, name: object) -> bool:
        return name in self._sources

    def __iter__(self) -> Iterator[str]:
        return iter(self._sources)


def _compile(name: str, pattern: str) -> re.Pattern[str]:
    try:
        return re.compile(pattern)
    except re.error as exc:
        raise RuleSetError(f"pattern {name!r} does not compile: {exc}") from exc


# ---------------------------------------------------------------------------
# RuleSet
# ---------------------------------------------------------------------------


class RuleSet:
    """Named, compiled patterns for one log dialect.

    Everything is compiled in ``__init__``; a bad override fails here, before
    any line is read.  After construction the rule set is read-only and can be
    shared between threads.

    Args:
        patterns:    Sub-pattern overrides, merged over ``DEFAULT_PATTERNS``.
        rules:       Top-level rules in priority order (default: msg, action).
        extra_rules: Appended after ``rules``, for extra event types.
    """

    def __init__(
        self,
        patterns: Mapping[str, PatternSource] | None = None,
        rules: tuple[Rule, ...] | list[Rule] | None = None,
        extra_rules: tuple[Rule, ...] | list[Rule] = (),
    ) -> None:
        sources: dict[str, PatternSource] = dict(DEFAULT_PATTERNS)
        if patterns:
            sources.update(patterns)
        rule_defs = (tuple(rules) if rules is not None else DEFAULT_RULES) + tuple(extra_rules)

        resolver = SubPatterns(sources)
        texts: dict[str, str] = {}
        compiled: dict[str, re.Pattern[str]] = {}
        for name in sources:
            texts[name] = resolver.raw(name)
            compiled[name] = _compile(name, texts[name])

        compiled_rules: list[CompiledRule] = []
        for rule in rule_defs:
            if rule.name in compiled:
                raise RuleSetError(
                    f"rule {rule.name!r} clashes with a sub-pattern or an earlier rule"
                )
            texts[rule.name] = rule.build(resolver)
            regex = _compile(rule.name, texts[rule.name])
            missing = [g for g in ("nick", *rule.extra) if g not in regex.groupindex]
            if missing:
                raise RuleSetError(
                    f"rule {rule.name!r} has no group(s): {', '.join(missing)}"
                )
            compiled[rule.name] = regex
            compiled_rules.append(CompiledRule(rule.name, regex, rule.extra))

        self._sources = MappingProxyType(sources)
        self._rule_defs = rule_defs
        self._texts = MappingProxyType(texts)
        self._compiled = MappingProxyType(compiled)
        self._rules = tuple(compiled_rules)
        logger.debug(
            "Compiled rule set with %d sub-patterns, rules: %s",
            len(sources), ", ".join(r.name for r in self._rules),
        )

    # ------------------------------------------------------------------
    # Access
    # ------------------------------------------------------------------

    def __getitem__(self, name: str) -> re.Pattern[str]:
        """Compiled pattern for a sub-pattern or rule name (same object every call)."""
        return self._compiled[name]

    def __contains__(self, name: object) -> bool:
        return name in self._compiled

    def __iter__(self) -> Iterator[str]:
        return iter(self._compiled)

    def __len__(self) -> int:
        return len(self._compiled)

    def __repr__(self) -> str:
        return f"RuleSet(rules={[r.name for r in self._rules]!r})"

    def source(self, name: str) -> str:
        """Resolved regex text for ``name``."""
        return self._texts[name]

    @property
    def rules(self) -> tuple[CompiledRule, ...]:
        """Top-level rules in the order they are tried."""
        return self._rules

    @property
    def patterns(self) -> Mapping[str, PatternSource]:
        """Sub-pattern sources this rule set was built from."""
        return self._sources

    # ------------------------------------------------------------------
    # Derivation
    # ------------------------------------------------------------------

    def override(self, **patterns: PatternSource) -> "RuleSet":
        """Return a new rule set with some sub-patterns replaced."""
        return RuleSet({**self._sources, **patterns}, rules=self._rule_defs)

    def with_rules(self, *rules: Rule) -> "RuleSet":
        """Return a new rule set with ``rules`` tried after the existing ones."""
        return RuleSet(self._sources, rules=self._rule_defs + rules)
