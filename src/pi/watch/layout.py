"""Laying out command output on the screen.

Output is replayed byte by byte from offset 0 to find where each byte lands:
a tab moves 8 columns right (no tab stops), a newline starts the next line,
and every other byte takes one column.  Only printable bytes are drawn, but
every byte moves the cursor.

The renderer works in two explicit phases.  *Scanning* runs when the pager
asked for the end of the output: nothing is drawn, output is pulled until the
command finishes, and the origin is then set so the last line sits on the
bottom row.  *Painting* draws the visible window, pulling more output only
while the window is not yet full.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Iterator
from datetime import datetime
from typing import TYPE_CHECKING, Callable

from pi.watch.buffer import OutputHistory, is_printable
from pi.watch.utils import take_columns, truncate_to_width, visible_width

if TYPE_CHECKING:
    from pi.watch.terminal import Terminal
    from pi.watch.viewport import Viewport

logger = logging.getLogger(__name__)

TAB_WIDTH = 8
TITLE_ELLIPSIS = "...  "

_TAB = 0x09
_NEWLINE = 0x0A


# ---------------------------------------------------------------------------
# Cursor replay
# ---------------------------------------------------------------------------


def advance(x: int, y: int, byte: int) -> tuple[int, int]:
    """Return the cursor position after laying out *byte* at (*x*, *y*)."""
    if byte == _TAB:
        return x + TAB_WIDTH, y
    if byte == _NEWLINE:
        return 0, y + 1
    return x + 1, y


def iter_positions(content: bytes, start_y: int = 0) -> Iterator[tuple[int, int, int]]:
    """Yield ``(offset, x, y)`` for every byte of *content*."""
    x, y = 0, start_y
    for offset, byte in enumerate(content):
        yield offset, x, y
        x, y = advance(x, y, byte)


def end_position(content: bytes, start_y: int = 0) -> tuple[int, int]:
    """Cursor position after replaying all of *content*."""
    x, y = 0, start_y
    for byte in content:
        x, y = advance(x, y, byte)
    return x, y


# ---------------------------------------------------------------------------
# Title bar
# ---------------------------------------------------------------------------


def format_title(interval: float, command: str, columns: int, now: float) -> str:
    """Build the header line: interval and command left, timestamp right.

    When the left part would run into the timestamp it is cut short and
    ``"...  "`` is put in front of the timestamp.
    """
    stamp = datetime.fromtimestamp(now).ctime()
    header = f"Every {interval:.1f}s: {take_columns(command, columns - 1)}"
    stamp_col = columns - len(stamp)

    if stamp_col < len(TITLE_ELLIPSIS):
        return truncate_to_width(header, columns)

    if visible_width(header) > stamp_col - 2:
        left = truncate_to_width(header, stamp_col - len(TITLE_ELLIPSIS), pad=True)
        return left + TITLE_ELLIPSIS + stamp
    return truncate_to_width(header, stamp_col, pad=True) + stamp


# ---------------------------------------------------------------------------
# Renderer
# ---------------------------------------------------------------------------


class Phase(enum.Enum):
    SCANNING = "scanning"
    PAINTING = "painting"


class Renderer:
    """Paints the current run's output through a viewport onto a terminal."""

    def __init__(
        self,
        terminal: Terminal,
        title_rows: int = 0,
        force_8bit: bool = False,
    ) -> None:
        self.terminal = terminal
        self.title_rows = title_rows
        self.force_8bit = force_8bit

    def render(
        self,
        history: OutputHistory,
        viewport: Viewport,
        rows: int,
        columns: int,
        pull: Callable[[], bool],
        title: str | None = None,
    ) -> None:
        """Draw one frame.

        *pull* reads one more chunk of command output into *history* and
        returns ``False`` once the output has ended.  The caller flushes the
        terminal afterwards.
        """
        phase = Phase.SCANNING if viewport.go_to_end else Phase.PAINTING

        while True:
            self.terminal.clear()
            if title is not None and self.title_rows:
                self.terminal.write_text(0, 0, title)

            height = self._walk(
                history, viewport, rows, columns, pull,
                paint=phase is Phase.PAINTING,
            )
            if height is None:
                return

            if phase is Phase.SCANNING:
                viewport.settle_end(height, rows)
                phase = Phase.PAINTING
                continue

            viewport.content_height = height
            if viewport.clamp(rows):
                # The output shrank under the view; paint again from the new origin.
                logger.debug("origin clamped to %d after output ended", viewport.origin_y)
                continue
            return

    def _walk(
        self,
        history: OutputHistory,
        viewport: Viewport,
        rows: int,
        columns: int,
        pull: Callable[[], bool],
        paint: bool,
    ) -> int | None:
        """Replay the output from offset 0, painting if asked.

        Returns the content height once end-of-stream is reached, or ``None``
        if painting stopped at the bottom of the window first.
        """
        origin_x = viewport.origin_x
        origin_y = viewport.origin_y
        x, y = 0, self.title_rows
        offset = 0

        while True:
            output = history.current
            content = output.content
            while offset < len(content):
                byte = content[offset]
                if paint and is_printable(byte, self.force_8bit):
                    row = y - origin_y
                    col = x - origin_x
                    if self.title_rows <= row < rows and 0 <= col < columns:
                        self.terminal.move_cursor(row, col)
                        self.terminal.write_cell(output[offset])

                x, y = advance(x, y, byte)
                offset += 1

                if paint and y > origin_y + rows:
                    return None

            if output.complete:
                return y
            pull()
