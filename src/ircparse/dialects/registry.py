"""Dialect registry: discover, validate, and expose log dialects.

Discovery order:
  1. Built-in dialects registered at import time.
  2. Entry-points under the "ircparse.dialects" group (third-party packages).
  3. Dialects explicitly registered at runtime via DialectRegistry.register().

A third-party package exposes a dialect as a RuleSet or a zero-argument
callable returning one::

    [project.entry-points."ircparse.dialects"]
    znc = "my_package.dialects:znc"
"""
from __future__ import annotations

import importlib.metadata
import logging
from typing import Any, Callable

from ..parsers.rules import RuleSet
from .presets import BUILTIN_DIALECTS

logger = logging.getLogger(__name__)

DialectFactory = Callable[[], RuleSet]


class DialectRegistry:
    """Central registry mapping dialect names to rule-set factories.

    Usage::

        registry = DialectRegistry()
        registry.discover()  # loads entry-point dialects

        rules = registry.get("weechat")
    """

    def __init__(self) -> None:
        self._factories: dict[str, DialectFactory] = {}
        self._descriptions: dict[str, str] = {}
        self._built: dict[str, RuleSet] = {}

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register(self, name: str, factory: DialectFactory, description: str = "") -> None:
        if not callable(factory):
            raise TypeError(f"{factory!r} is not a callable returning a RuleSet")
        self._factories[name] = factory
        self._descriptions[name] = description
        self._built.pop(name, None)
        logger.debug("Registered dialect: %s", name)

    # ------------------------------------------------------------------
    # Discovery via entry-points
    # ------------------------------------------------------------------

    def discover(self) -> int:
        """Load all dialects from the 'ircparse.dialects' entry-point group.

        Returns the number of dialects successfully loaded.
        """
        loaded = 0
        try:
            eps = importlib.metadata.entry_points(group="ircparse.dialects")
        except Exception as exc:
            logger.warning("Entry-point discovery failed: %s", exc)
            return 0

        for ep in eps:
            try:
                obj = ep.load()
                self._auto_register(obj, ep.name)
                loaded += 1
            except Exception as exc:
                logger.warning("Failed to load dialect %r: %s", ep.name, exc)

        return loaded

    def _auto_register(self, obj: Any, ep_name: str) -> None:
        """Register an entry-point object, either a RuleSet or a factory."""
        if isinstance(obj, RuleSet):
            self.register(ep_name, lambda: obj, description=f"entry point {ep_name}")
        else:
            doc = (getattr(obj, "__doc__", None) or "").strip().splitlines()
            self.register(ep_name, obj, description=doc[0] if doc else "")

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get(self, name: str) -> RuleSet:
        """Build (once) and return the rule set for ``name``."""
        if name in self._built:
            return self._built[name]
        try:
            factory = self._factories[name]
        except KeyError:
            known = ", ".join(self.list_dialects()) or "none"
            raise KeyError(f"unknown dialect {name!r} (known: {known})") from None
        rules = factory()
        if not isinstance(rules, RuleSet):
            raise TypeError(
                f"dialect {name!r} factory returned {type(rules).__name__}, not a RuleSet"
            )
        self._built[name] = rules
        return rules

    def __contains__(self, name: object) -> bool:
        return name in self._factories

    def list_dialects(self) -> list[str]:
        return sorted(self._factories)

    def describe(self) -> list[tuple[str, str]]:
        return [(name, self._descriptions[name]) for name in self.list_dialects()]


def _with_builtins() -> DialectRegistry:
    registry = DialectRegistry()
    for name, (factory, description) in BUILTIN_DIALECTS.items():
        registry.register(name, factory, description)
    return registry


# Module-level singleton — shared across the application
default_registry = _with_builtins()


def get_dialect(name: str) -> RuleSet:
    return default_registry.get(name)
