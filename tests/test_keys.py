"""Tests for pi.watch.keys -- pager key parsing."""

from __future__ import annotations

import pytest

from pi.watch.keys import LEGACY_KEY_SEQUENCES, Key, parse_key


# ---------------------------------------------------------------------------
# Key helper class
# ---------------------------------------------------------------------------


class TestKey:
    def test_ctrl(self) -> None:
        assert Key.ctrl("c") == "ctrl+c"

    def test_page_names(self) -> None:
        assert Key.page_up == "pageUp"
        assert Key.page_down == "pageDown"


# ---------------------------------------------------------------------------
# parse_key
# ---------------------------------------------------------------------------


class TestParseKey:
    @pytest.mark.parametrize(
        ("data", "expected"),
        [
            ("\x1b[A", Key.up),
            ("\x1b[B", Key.down),
            ("\x1b[C", Key.right),
            ("\x1b[D", Key.left),
            ("\x1bOA", Key.up),
            ("\x1bOD", Key.left),
            ("\x1b[5~", Key.page_up),
            ("\x1b[6~", Key.page_down),
            ("\x1b[H", Key.home),
            ("\x1b[4~", Key.end),
        ],
    )
    def test_legacy_sequences(self, data: str, expected: str) -> None:
        assert parse_key(data) == expected

    def test_every_table_entry_parses(self) -> None:
        for sequence, key in LEGACY_KEY_SEQUENCES.items():
            assert parse_key(sequence) == key

    def test_g_and_shift_g_stay_distinct(self) -> None:
        assert parse_key("g") == "g"
        assert parse_key("G") == "G"

    @pytest.mark.parametrize(
        ("data", "expected"),
        [
            ("\x1b", Key.escape),
            ("\r", Key.enter),
            ("\t", Key.tab),
            (" ", Key.space),
            ("\x7f", Key.backspace),
            ("\x03", "ctrl+c"),
        ],
    )
    def test_special_keys(self, data: str, expected: str) -> None:
        assert parse_key(data) == expected

    def test_empty_and_unknown(self) -> None:
        assert parse_key("") is None
        assert parse_key("\x1b[99z") is None
        assert parse_key("ab") is None
