"""Tests for pi.watch.viewport -- origin bookkeeping and pager keys."""

from __future__ import annotations

import pytest

from pi.watch.keys import Key
from pi.watch.viewport import SCROLL_STEP, Pager, Viewport


class TestViewport:
    def test_scroll_up_floors_at_zero(self) -> None:
        vp = Viewport(origin_y=3)
        vp.scroll_up()
        assert vp.origin_y == 0

    def test_scroll_left_floors_at_zero(self) -> None:
        vp = Viewport(origin_x=5)
        vp.scroll_left()
        assert vp.origin_x == 0

    def test_clamp_without_height_is_noop(self) -> None:
        vp = Viewport(origin_y=500)
        assert vp.clamp(24) is False
        assert vp.origin_y == 500

    def test_clamp_pulls_origin_back(self) -> None:
        vp = Viewport(origin_y=40, content_height=30)
        assert vp.clamp(24) is True
        assert vp.origin_y == 6

    def test_clamp_never_negative(self) -> None:
        vp = Viewport(origin_y=8, content_height=5)
        vp.clamp(24)
        assert vp.origin_y == 0

    def test_clamp_inside_range_does_not_move(self) -> None:
        vp = Viewport(origin_y=4, content_height=30)
        assert vp.clamp(24) is False
        assert vp.origin_y == 4

    def test_settle_end(self) -> None:
        vp = Viewport(origin_x=16)
        vp.request_end()
        assert vp.go_to_end and vp.origin_x == 0
        vp.settle_end(100, 24)
        assert vp.origin_y == 76
        assert vp.content_height == 100
        assert not vp.go_to_end

    def test_settle_end_short_content(self) -> None:
        vp = Viewport()
        vp.request_end()
        vp.settle_end(5, 24)
        assert vp.origin_y == 0

    def test_invalidate_content(self) -> None:
        vp = Viewport(content_height=10)
        vp.invalidate_content()
        assert vp.content_height is None


class TestPager:
    def test_arrow_keys_step_by_eight(self) -> None:
        pager = Pager(Viewport())
        assert pager.handle_key(Key.down, 24)
        assert pager.handle_key(Key.right, 24)
        assert (pager.viewport.origin_x, pager.viewport.origin_y) == (
            SCROLL_STEP,
            SCROLL_STEP,
        )
        pager.handle_key(Key.up, 24)
        pager.handle_key(Key.left, 24)
        assert (pager.viewport.origin_x, pager.viewport.origin_y) == (0, 0)

    @pytest.mark.parametrize(("title_rows", "page"), [(0, 24), (2, 22)])
    def test_page_keys_step_by_body_height(self, title_rows: int, page: int) -> None:
        pager = Pager(Viewport(), title_rows)
        pager.handle_key(Key.page_down, 24)
        assert pager.viewport.origin_y == page
        pager.handle_key(Key.page_down, 24)
        pager.handle_key(Key.page_up, 24)
        assert pager.viewport.origin_y == page

    def test_g_goes_to_top(self) -> None:
        vp = Viewport(origin_x=8, origin_y=40)
        Pager(vp).handle_key("g", 24)
        assert (vp.origin_x, vp.origin_y) == (0, 0)

    def test_shift_g_requests_end(self) -> None:
        vp = Viewport(origin_x=8)
        Pager(vp).handle_key("G", 24)
        assert vp.go_to_end
        assert vp.origin_x == 0

    def test_unknown_key_is_ignored(self) -> None:
        vp = Viewport()
        assert Pager(vp).handle_key("q", 24) is False
        assert vp == Viewport()
