"""Tests for pi.watch.screen -- the cell grid."""

from __future__ import annotations

from pi.watch.screen import Screen


class TestScreen:
    def test_starts_blank(self) -> None:
        screen = Screen(2, 4)
        assert screen.lines() == ["", ""]

    def test_put_clips_outside(self) -> None:
        screen = Screen(2, 4)
        assert screen.put(0, 3, "x")
        assert not screen.put(0, 4, "y")
        assert not screen.put(2, 0, "y")
        assert not screen.put(-1, 0, "y")
        assert screen.lines() == ["   x", ""]

    def test_put_text_returns_next_column(self) -> None:
        screen = Screen(1, 10)
        assert screen.put_text(0, 2, "abc") == 5
        assert screen.row_text(0) == "  abc"

    def test_put_text_clips_at_right_edge(self) -> None:
        screen = Screen(1, 4)
        screen.put_text(0, 0, "abcdef")
        assert screen.row_text(0) == "abcd"

    def test_wide_character_takes_two_cells(self) -> None:
        screen = Screen(1, 6)
        assert screen.put_text(0, 0, "日本x") == 5
        assert screen.cell_text(0, 1) == ""
        assert screen.row_text(0) == "日本x"

    def test_wide_character_not_split_at_edge(self) -> None:
        screen = Screen(1, 3)
        screen.put_text(0, 0, "a日本")
        assert screen.row_text(0) == "a日"

    def test_clear_drops_text_and_highlight(self) -> None:
        screen = Screen(1, 3)
        screen.put(0, 0, "x", highlighted=True)
        screen.clear()
        assert screen.row_text(0) == ""
        assert not screen.is_highlighted(0, 0)

    def test_resize(self) -> None:
        screen = Screen(1, 3)
        screen.resize(3, 5)
        assert (screen.rows, screen.columns) == (3, 5)
        assert screen.lines() == ["", "", ""]


class TestRenderRow:
    def test_plain(self) -> None:
        screen = Screen(1, 8)
        screen.put_text(0, 0, "abc")
        assert screen.render_row(0) == "abc"

    def test_highlighted_run_in_reverse_video(self) -> None:
        screen = Screen(1, 8)
        screen.put_text(0, 0, "abcd")
        screen.put(0, 1, "b", highlighted=True)
        screen.put(0, 2, "c", highlighted=True)
        assert screen.render_row(0) == "a\x1b[7mbc\x1b[0md"

    def test_trailing_highlight_is_reset(self) -> None:
        screen = Screen(1, 4)
        screen.put(0, 0, "a", highlighted=True)
        assert screen.render_row(0) == "\x1b[7ma\x1b[0m"

    def test_highlighted_blank_is_kept(self) -> None:
        screen = Screen(1, 4)
        screen.put(0, 2, " ", highlighted=True)
        assert screen.render_row(0) == "  \x1b[7m \x1b[0m"
