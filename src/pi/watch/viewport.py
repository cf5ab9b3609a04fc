"""Scrollable viewport over the command output and the pager keys driving it."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from pi.watch.keys import Key

logger = logging.getLogger(__name__)

SCROLL_STEP = 8


@dataclass
class Viewport:
    """Origin of the visible window in logical output coordinates.

    ``content_height`` is the logical y reached at the end of the current
    run's output.  It is ``None`` while the run is still streaming, which is
    when the bottom edge cannot be clamped yet.  ``go_to_end`` defers the jump
    to the last page until that height is known.
    """

    origin_x: int = 0
    origin_y: int = 0
    go_to_end: bool = False
    content_height: int | None = None

    def scroll_up(self, amount: int = SCROLL_STEP) -> None:
        self.origin_y = max(0, self.origin_y - amount)

    def scroll_down(self, amount: int = SCROLL_STEP) -> None:
        self.origin_y += amount

    def scroll_left(self, amount: int = SCROLL_STEP) -> None:
        self.origin_x = max(0, self.origin_x - amount)

    def scroll_right(self, amount: int = SCROLL_STEP) -> None:
        self.origin_x += amount

    def go_to_top(self) -> None:
        self.origin_x = 0
        self.origin_y = 0

    def request_end(self) -> None:
        self.origin_x = 0
        self.go_to_end = True

    def max_origin_y(self, height: int) -> int | None:
        if self.content_height is None:
            return None
        return max(0, self.content_height - height)

    def clamp(self, height: int) -> bool:
        """Pull ``origin_y`` back into range; return ``True`` if it moved."""
        limit = self.max_origin_y(height)
        if limit is None or self.origin_y <= limit:
            return False
        self.origin_y = limit
        return True

    def settle_end(self, content_height: int, height: int) -> None:
        """Complete a deferred go-to-end now that the content height is known."""
        self.content_height = content_height
        self.origin_y = max(0, content_height - height)
        self.go_to_end = False

    def invalidate_content(self) -> None:
        """Forget the content height; a new run has started."""
        self.content_height = None


class Pager:
    """Maps key identifiers onto viewport transitions."""

    def __init__(self, viewport: Viewport, title_rows: int = 0) -> None:
        self.viewport = viewport
        self.title_rows = title_rows

    def handle_key(self, key: str, height: int) -> bool:
        """Apply *key* and return ``True`` if the view needs redrawing."""
        vp = self.viewport
        page = max(0, height - self.title_rows)

        if key == Key.up:
            vp.scroll_up()
        elif key == Key.down:
            vp.scroll_down()
        elif key == Key.left:
            vp.scroll_left()
        elif key == Key.right:
            vp.scroll_right()
        elif key == Key.page_down:
            vp.scroll_down(page)
        elif key == Key.page_up:
            vp.scroll_up(page)
        elif key == "g":
            vp.go_to_top()
        elif key == "G":
            vp.request_end()
        else:
            return False

        logger.debug("pager %s -> origin (%d, %d)", key, vp.origin_x, vp.origin_y)
        return True
