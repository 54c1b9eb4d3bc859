"""Shared pytest fixtures for ircparse tests."""
from __future__ import annotations

from pathlib import Path

import pytest


@pytest.fixture()
def tmp_log_file(tmp_path: Path):
    """Return a factory that creates temporary log files."""

    def _make(lines: list[str], name: str = "test.log") -> Path:
        p = tmp_path / name
        p.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return p

    return _make


@pytest.fixture()
def default_log_lines() -> list[str]:
    return [
        "[12:34] <bob> hello there",
        "[12:34] <@alice:#chan> hi",
        "[12:35] * bob waves",
        "[12:36] %carol does a thing",
        "",
        "[12:37] <%carol> back",
    ]


@pytest.fixture()
def irssi_lines() -> list[str]:
    return [
        "12:30 -!- bob [~bob@example.org] has joined #perl",
        "12:31 <@alice> welcome bob",
        "12:32  * bob waves",
        "12:33 -!- dave is now known as david",
        "12:34 -!- bob [~bob@example.org] has left #perl [later]",
        "12:35 -!- carol [~c@example.net] has quit [Ping timeout: 240 seconds]",
        "12:35 -!- erin [~e@example.net] has quit [Quit: <erin> bye all]",
        "--- Day changed Sat Feb 01 2004",
    ]


@pytest.fixture()
def weechat_lines() -> list[str]:
    return [
        "2024-03-01 12:34:56\t@alice\thi all",
        "2024-03-01 12:35:02\t *\tbob waves",
        "2024-03-01 12:35:10\tbob\tsee\tyou",
        "2024-03-01 12:36:00\t-->\tcarol (~c@example.net) has joined #weechat",
    ]
