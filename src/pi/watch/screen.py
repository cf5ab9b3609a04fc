"""In-memory cell grid backing a terminal surface.

Drawing goes into the grid; a terminal implementation decides how (and
whether) to flush it.  Each cell holds the text shown there and a highlight
flag.  A wide character occupies its own cell plus an empty continuation
cell to its right so row text stays column-aligned.
"""

from __future__ import annotations

from pi.watch.utils import grapheme_width, split_graphemes

BLANK = " "

_REVERSE = "\x1b[7m"
_RESET = "\x1b[0m"


class Screen:
    """A ``rows`` x ``columns`` grid of (text, highlighted) cells."""

    def __init__(self, rows: int, columns: int) -> None:
        self.rows = max(0, rows)
        self.columns = max(0, columns)
        self._text: list[list[str]] = []
        self._highlight: list[list[bool]] = []
        self.clear()

    def resize(self, rows: int, columns: int) -> None:
        self.rows = max(0, rows)
        self.columns = max(0, columns)
        self.clear()

    def clear(self) -> None:
        self._text = [[BLANK] * self.columns for _ in range(self.rows)]
        self._highlight = [[False] * self.columns for _ in range(self.rows)]

    def contains(self, row: int, col: int) -> bool:
        return 0 <= row < self.rows and 0 <= col < self.columns

    def put(self, row: int, col: int, text: str, highlighted: bool = False) -> bool:
        """Store one character cell; returns ``False`` if it was clipped."""
        if not self.contains(row, col):
            return False
        self._text[row][col] = text
        self._highlight[row][col] = highlighted
        return True

    def put_text(self, row: int, col: int, text: str) -> int:
        """Write *text* starting at (*row*, *col*), clipping at the right edge.

        Returns the column just past the last cell written.
        """
        for g in split_graphemes(text):
            width = grapheme_width(g)
            if width == 0:
                continue
            if col + width > self.columns:
                break
            self.put(row, col, g)
            if width == 2:
                self.put(row, col + 1, "")
            col += width
        return col

    def cell_text(self, row: int, col: int) -> str:
        return self._text[row][col]

    def is_highlighted(self, row: int, col: int) -> bool:
        return self._highlight[row][col]

    def row_text(self, row: int) -> str:
        """Plain text of *row* without trailing blanks."""
        return "".join(self._text[row]).rstrip(BLANK)

    def lines(self) -> list[str]:
        return [self.row_text(row) for row in range(self.rows)]

    def render_row(self, row: int) -> str:
        """Text of *row* with reverse-video SGR around highlighted runs."""
        out: list[str] = []
        highlighted = False
        text = self._text[row]
        flags = self._highlight[row]

        # Trailing unhighlighted blanks are left to the caller's clear-to-EOL.
        end = len(text)
        while end > 0 and text[end - 1] == BLANK and not flags[end - 1]:
            end -= 1

        for col in range(end):
            if flags[col] != highlighted:
                out.append(_REVERSE if flags[col] else _RESET)
                highlighted = flags[col]
            out.append(text[col])
        if highlighted:
            out.append(_RESET)
        return "".join(out)
