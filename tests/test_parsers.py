"""Tests for line classification and the IRC log parser."""
from __future__ import annotations

from pathlib import Path

import pytest

from ircparse.parsers.base import Event, LineParser
from ircparse.parsers.classifier import classify_line
from ircparse.parsers.irc import IRCLogParser, parse
from ircparse.parsers.rules import RuleSet
from ircparse.result import ParseResult


@pytest.fixture(scope="module")
def rules() -> RuleSet:
    return RuleSet()


# ---------------------------------------------------------------------------
# classify_line
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("line,expected", [
    (
        "[12:34] <bob> hello there",
        Event(type="msg", timestamp="12:34", nick_prefix=None, nick="bob", text="hello there"),
    ),
    (
        "[12:34] <@alice:#chan> hi",
        Event(type="msg", timestamp="12:34", nick_prefix="@", nick="alice", text="hi"),
    ),
    (
        "[12:34] * bob waves",
        Event(type="action", timestamp="12:34", nick_prefix=None, nick="bob", text="waves"),
    ),
    (
        "[12:34] %carol does a thing",
        Event(type="unknown", text="[12:34] %carol does a thing"),
    ),
    ("", Event(type="unknown", text="")),
])
def test_classify_line(rules: RuleSet, line: str, expected: Event) -> None:
    assert classify_line(line, rules) == expected


class TestClassifyLine:
    def test_channel_not_surfaced_by_default(self, rules: RuleSet) -> None:
        event = classify_line("[12:34] <@alice:#chan> hi", rules)
        assert event.extra == {}
        assert rules["msg"].search("[12:34] <@alice:#chan> hi").group("channel") == "#chan"

    def test_no_timestamp(self, rules: RuleSet) -> None:
        event = classify_line("<bob> hi", rules)
        assert event.type == "msg"
        assert event.timestamp is None

    def test_timestamp_with_seconds(self, rules: RuleSet) -> None:
        assert classify_line("[12:34:56] <bob> hi", rules).timestamp == "12:34:56"

    def test_unbracketed_timestamp(self, rules: RuleSet) -> None:
        assert classify_line("12:34 <bob> hi", rules).timestamp == "12:34"

    def test_action_with_prefix(self, rules: RuleSet) -> None:
        event = classify_line("[12:34] * @alice slaps bob", rules)
        assert event.type == "action"
        assert event.nick_prefix == "@"
        assert event.nick == "alice"
        assert event.text == "slaps bob"

    def test_line_terminator_not_in_text(self, rules: RuleSet) -> None:
        assert classify_line("[12:34] <bob> hi\n", rules).text == "hi"

    def test_msg_wins_over_action(self, rules: RuleSet) -> None:
        line = "* bob <al> hi"
        assert rules["msg"].search(line) is not None
        assert rules["action"].search(line) is not None
        event = classify_line(line, rules)
        assert event.type == "msg"
        assert event.nick == "al"

    @pytest.mark.parametrize("line", [
        "  padded  text  ",
        "just text\n",
        "\t",
        "<bob>",
        "* bob",
        "-!- bob has joined #perl",
    ])
    def test_unknown_keeps_line_verbatim(self, rules: RuleSet, line: str) -> None:
        event = classify_line(line, rules)
        assert event == Event(type="unknown", text=line)
        assert event.timestamp is None
        assert event.nick_prefix is None
        assert event.nick is None

    def test_matched_lines_have_nick(self, rules: RuleSet, default_log_lines) -> None:
        for line in default_log_lines:
            event = classify_line(line, rules)
            if event.type in ("msg", "action"):
                assert event.nick

    def test_idempotent(self, rules: RuleSet, default_log_lines) -> None:
        for line in default_log_lines:
            assert classify_line(line, rules) == classify_line(line, rules)

    def test_events_are_frozen(self, rules: RuleSet) -> None:
        event = classify_line("<bob> hi", rules)
        with pytest.raises(AttributeError):
            event.nick = "mallory"  # type: ignore[misc]
        with pytest.raises(TypeError):
            event.extra["channel"] = "#x"  # type: ignore[index]
        assert event.extra == {}

    def test_extra_is_copied_on_construction(self) -> None:
        extra = {"channel": "#perl"}
        event = Event(type="join", nick="bob", extra=extra)
        extra["channel"] = "#python"
        assert event.extra == {"channel": "#perl"}
        with pytest.raises(TypeError):
            event.extra["channel"] = "#x"  # type: ignore[index]


class TestEvent:
    def test_to_dict(self) -> None:
        e = Event(type="join", nick="bob", extra={"channel": "#perl"})
        assert e.to_dict() == {
            "type": "join",
            "timestamp": None,
            "nick_prefix": None,
            "nick": "bob",
            "text": None,
            "channel": "#perl",
        }

    def test_get(self) -> None:
        e = Event(type="msg", nick="bob", text="hi", extra={"channel": "#perl"})
        assert e.get("nick") == "bob"
        assert e.get("channel") == "#perl"
        assert e.get("timestamp", "-") == "-"
        assert e.get("no_such_field") is None

    def test_hashable(self) -> None:
        assert hash(Event(type="msg", nick="bob")) == hash(Event(type="msg", nick="bob"))

    def test_is_unknown(self) -> None:
        assert Event(type="unknown", text="x").is_unknown
        assert not Event(type="msg", nick="bob").is_unknown


# ---------------------------------------------------------------------------
# IRCLogParser
# ---------------------------------------------------------------------------

class TestIRCLogParser:
    def test_implements_protocol(self) -> None:
        assert isinstance(IRCLogParser(), LineParser)

    def test_rejects_non_ruleset(self) -> None:
        with pytest.raises(TypeError, match="RuleSet"):
            IRCLogParser({"msg": "x"})  # type: ignore[arg-type]

    def test_reuses_given_rules(self, rules: RuleSet) -> None:
        assert IRCLogParser(rules).rules is rules

    def test_builds_rules_once(self) -> None:
        p = IRCLogParser()
        assert p.rules is p.rules

    def test_parse_line(self) -> None:
        event = IRCLogParser().parse_line("[12:34] * bob waves")
        assert event.type == "action"

    def test_parse_lines_keeps_order(self, default_log_lines) -> None:
        events = list(IRCLogParser().parse_lines(default_log_lines))
        assert len(events) == len(default_log_lines)
        assert [e.type for e in events] == ["msg", "msg", "action", "unknown", "unknown", "msg"]

    def test_parse_file(self, tmp_log_file, default_log_lines) -> None:
        path = tmp_log_file(default_log_lines)
        events = list(IRCLogParser().parse_file(str(path)))
        assert len(events) == 6
        assert events[0].text == "hello there"
        assert events[4] == Event(type="unknown", text="")
        assert events[5].nick_prefix == "%"

    def test_parse_file_strips_crlf(self, tmp_path: Path) -> None:
        path = tmp_path / "dos.log"
        path.write_bytes(b"[12:34] <bob> hi\r\nsome noise\r\n")
        events = list(IRCLogParser().parse_file(str(path)))
        assert events[0].text == "hi"
        assert events[1] == Event(type="unknown", text="some noise")

    def test_parse_file_undecodable_bytes(self, tmp_path: Path) -> None:
        path = tmp_path / "latin1.log"
        path.write_bytes("[12:34] <bob> caf\xe9\n".encode("latin-1"))
        events = list(IRCLogParser().parse_file(str(path)))
        assert events[0].type == "msg"
        assert events[0].text.startswith("caf")

    def test_parse_returns_result(self, tmp_log_file, default_log_lines) -> None:
        path = tmp_log_file(default_log_lines)
        result = IRCLogParser().parse(str(path))
        assert isinstance(result, ParseResult)
        assert len(result) == 6

    def test_module_level_parse(self, tmp_log_file, default_log_lines) -> None:
        path = tmp_log_file(default_log_lines)
        result = parse(str(path))
        assert result.counts() == {"msg": 3, "unknown": 2, "action": 1}

    def test_module_level_parse_with_rules(self, tmp_log_file) -> None:
        path = tmp_log_file(["[bob] hi"])
        rules = RuleSet().override(nick_container=lambda p: rf"\[{p['nick']}\]")
        assert parse(str(path), rules)[0].nick == "bob"

    def test_parse_file_empty(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.log"
        path.write_text("", encoding="utf-8")
        assert list(IRCLogParser().parse_file(str(path))) == []
