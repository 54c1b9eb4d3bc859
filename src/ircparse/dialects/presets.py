"""Built-in dialects: rule sets for the log formats of common clients.

Each dialect is a zero-argument factory returning a RuleSet.  They only
override the sub-patterns that differ from the defaults; msg/action
composition is inherited.
"""
from __future__ import annotations

from ..parsers.rules import Rule, RuleSet, SubPatterns

# ---------------------------------------------------------------------------
# irssi: stock theme, plus the "-!-" server notices
#
#   12:34 <@alice> hi
#   12:34  * bob waves
#   12:34 -!- bob [~bob@example.org] has joined #perl
#   12:35 -!- bob [~bob@example.org] has left #perl [later]
#   12:36 -!- carol [~c@example.net] has quit [Ping timeout: 240 seconds]
#   12:37 -!- dave is now known as david
# ---------------------------------------------------------------------------


def _notice_head(p: SubPatterns) -> str:
    return rf"{p['timestamp']}\s*{p['notice_leader']}\s+{p['nick']}"


def build_join(p: SubPatterns) -> str:
    return rf"{_notice_head(p)}\s+{p['host']}\s+has joined\s+{p['chan']}"


def build_part(p: SubPatterns) -> str:
    return (
        rf"{_notice_head(p)}\s+{p['host']}\s+has left\s+{p['chan']}"
        r"(?:\s+\[(?P<text>[^\]]*)\])?"
    )


def build_quit(p: SubPatterns) -> str:
    return rf"{_notice_head(p)}\s+{p['host']}\s+has quit\s+\[(?P<text>[^\]]*)\]"


def build_nick_change(p: SubPatterns) -> str:
    return rf"{_notice_head(p)}\s+is now known as\s+(?P<text>\S+)"


IRSSI_PATTERNS = {
    # Anchored: a quit or part reason quoting "<nick> text" must not be
    # found as a message.
    "timestamp": r"^\[?(?P<timestamp>\d\d:\d\d(?::\d\d)?)?\]?",
    "notice_leader": r"-!-",
    "host": r"\[(?P<host>[^\]]*)\]",
}

IRSSI_RULES = (
    Rule("join", build_join, extra=("channel", "host")),
    Rule("part", build_part, extra=("channel", "host")),
    Rule("quit", build_quit, extra=("host",)),
    Rule("nick_change", build_nick_change),
)


def irssi() -> RuleSet:
    return RuleSet(IRSSI_PATTERNS, extra_rules=IRSSI_RULES)


# ---------------------------------------------------------------------------
# WeeChat: tab separated, full date
#
#   2024-03-01 12:34:56\t@alice\thi
#   2024-03-01 12:35:02\t *\tbob waves
# ---------------------------------------------------------------------------


def build_weechat_nick_container(p: SubPatterns) -> str:
    return rf"\t{p['nick_prefix']}?{p['nick']}"


WEECHAT_PATTERNS = {
    # Anchored: without it a later "\tnick" column inside an action line
    # would be found as a message.
    "timestamp": r"^(?P<timestamp>\d{4}-\d\d-\d\d \d\d:\d\d:\d\d)?",
    "nick_prefix": r"(?P<nick_prefix>[~&@%+])",
    "nick_container": build_weechat_nick_container,
}


def weechat() -> RuleSet:
    return RuleSet(WEECHAT_PATTERNS)


# ---------------------------------------------------------------------------
# mIRC: stock and scripted themes wrap the nick in <>, [] or ()
#
#   [12:34] <bob> hello
#   [9:05] [bob] hello
#   [12:34] (me) hello
#   [12:34] * bob waves
# ---------------------------------------------------------------------------


def build_mirc_nick_container(p: SubPatterns) -> str:
    return rf"[<\[(]\s*{p['nick_prefix']}?\s*{p['nick']}(?::{p['chan']})?\s*[>\])]"


MIRC_PATTERNS = {
    "timestamp": r"^\[?(?P<timestamp>\d{1,2}:\d\d(?::\d\d)?)?\]?",
    "nick_prefix": r"(?P<nick_prefix>[~&@%+])",
    "nick_container": build_mirc_nick_container,
}


def mirc() -> RuleSet:
    return RuleSet(MIRC_PATTERNS)


def default() -> RuleSet:
    return RuleSet()


BUILTIN_DIALECTS = {
    "default": (default, "irssi-style <nick> messages and * actions"),
    "irssi": (irssi, "default plus irssi join/part/quit/nick notices"),
    "weechat": (weechat, "WeeChat tab-separated logs with full dates"),
    "mirc": (mirc, "mIRC logs, nick in <>, [] or ()"),
}
