"""Terminal abstraction for fullscreen cell drawing and key polling.

Provides a ``Terminal`` protocol and a concrete ``ProcessTerminal``
implementation that puts the tty in cbreak mode, switches to the alternate
screen, and flushes an in-memory :class:`~pi.watch.screen.Screen` with ANSI
escape sequences, rewriting only the rows that changed since the last flush.
"""

from __future__ import annotations

import codecs
import logging
import os
import select
import signal
import sys
import termios
import time
import tty
from collections import deque
from typing import IO, Protocol

from pi.watch.buffer import Cell
from pi.watch.keys import KeyId, parse_key
from pi.watch.screen import Screen
from pi.watch.stdin_buffer import StdinBuffer

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# ANSI escape constants
# ---------------------------------------------------------------------------

_ENTER_ALT_SCREEN = "\x1b[?1049h"
_EXIT_ALT_SCREEN = "\x1b[?1049l"
_HIDE_CURSOR = "\x1b[?25l"
_SHOW_CURSOR = "\x1b[?25h"
_RESET_SGR = "\x1b[0m"
_CLEAR_SCREEN = "\x1b[2J\x1b[H"
_CLEAR_TO_EOL = "\x1b[K"
_MOVE_FMT = "\x1b[{};{}H"

# How long to wait for the rest of a split escape sequence.
_ESCAPE_TIMEOUT = 0.01


# ---------------------------------------------------------------------------
# Terminal protocol
# ---------------------------------------------------------------------------


class Terminal(Protocol):
    """Interface for the drawing surface used by the refresh engine."""

    @property
    def rows(self) -> int: ...

    @property
    def columns(self) -> int: ...

    def start(self) -> None: ...

    def stop(self) -> None: ...

    def query_size(self) -> tuple[int, int]: ...

    def resize(self, rows: int, columns: int) -> None: ...

    def move_cursor(self, row: int, col: int) -> None: ...

    def write_cell(self, cell: Cell) -> None: ...

    def write_text(self, row: int, col: int, text: str) -> None: ...

    def clear(self) -> None: ...

    def refresh(self) -> None: ...

    def poll_key(self, timeout: float) -> KeyId | None: ...

    def take_resize(self) -> bool: ...


# ---------------------------------------------------------------------------
# Shared grid drawing
# ---------------------------------------------------------------------------


class ScreenSurface:
    """Cursor-addressed drawing into a :class:`Screen`.

    ``write_cell`` behaves like curses ``addch``: it draws at the cursor and
    advances it one column.  Shared by every terminal implementation.
    """

    def __init__(self, rows: int = 24, columns: int = 80) -> None:
        self.screen = Screen(rows, columns)
        self._cursor_row = 0
        self._cursor_col = 0

    @property
    def rows(self) -> int:
        return self.screen.rows

    @property
    def columns(self) -> int:
        return self.screen.columns

    def resize(self, rows: int, columns: int) -> None:
        self.screen.resize(rows, columns)
        self._cursor_row = 0
        self._cursor_col = 0

    def move_cursor(self, row: int, col: int) -> None:
        self._cursor_row = row
        self._cursor_col = col

    def write_cell(self, cell: Cell) -> None:
        self.screen.put(self._cursor_row, self._cursor_col, cell.char, cell.highlighted)
        self._cursor_col += 1

    def write_text(self, row: int, col: int, text: str) -> None:
        self._cursor_row = row
        self._cursor_col = self.screen.put_text(row, col, text)

    def clear(self) -> None:
        self.screen.clear()
        self._cursor_row = 0
        self._cursor_col = 0


# ---------------------------------------------------------------------------
# ProcessTerminal implementation
# ---------------------------------------------------------------------------


class ProcessTerminal(ScreenSurface):
    """Concrete terminal backed by ``sys.stdin``/``sys.stdout``.

    Manages cbreak mode via :mod:`tty` and :mod:`termios` (signals such as
    Ctrl-C keep working), the alternate screen, and SIGWINCH-based resize
    detection.  The SIGWINCH handler only sets a flag; the engine picks it
    up with :meth:`take_resize` between frames.
    """

    def __init__(
        self,
        stdin: IO[str] | None = None,
        stdout: IO[str] | None = None,
        write_log_path: str | None = None,
    ) -> None:
        self._stdin = stdin if stdin is not None else sys.stdin
        self._stdout = stdout if stdout is not None else sys.stdout
        rows, columns = self.query_size()
        super().__init__(rows, columns)

        self._started = False
        self._resized = False
        self._original_termios: list | None = None
        self._prev_sigwinch_handler: signal.Handlers | None = None
        self._previous_lines: list[str] = []
        self._force_full = True
        self._stdin_buffer = StdinBuffer()
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._pending_keys: deque[KeyId] = deque()
        self._stdin_closed = False
        self._write_log_path: str = (
            write_log_path
            if write_log_path is not None
            else os.environ.get("PI_WATCH_WRITE_LOG", "")
        )

    # -- start / stop -------------------------------------------------------

    def start(self) -> None:
        """Enter cbreak mode and the alternate screen, and watch for resizes."""
        fd = self._stdin.fileno()
        if os.isatty(fd):
            self._original_termios = termios.tcgetattr(fd)
            tty.setcbreak(fd)

        self._prev_sigwinch_handler = signal.getsignal(signal.SIGWINCH)
        signal.signal(signal.SIGWINCH, self._on_sigwinch)

        self._started = True
        self._force_full = True
        self._raw_write(_ENTER_ALT_SCREEN + _HIDE_CURSOR + _CLEAR_SCREEN)

    def stop(self) -> None:
        """Restore terminal state.  Safe to call more than once."""
        if not self._started:
            return
        self._started = False

        self._raw_write(_RESET_SGR + _SHOW_CURSOR + _EXIT_ALT_SCREEN)

        if self._prev_sigwinch_handler is not None:
            signal.signal(signal.SIGWINCH, self._prev_sigwinch_handler)
            self._prev_sigwinch_handler = None

        if self._original_termios is not None:
            termios.tcsetattr(
                self._stdin.fileno(), termios.TCSADRAIN, self._original_termios
            )
            self._original_termios = None

    # -- geometry -----------------------------------------------------------

    def query_size(self) -> tuple[int, int]:
        try:
            size = os.get_terminal_size(self._stdout.fileno())
        except (ValueError, OSError):
            return 24, 80
        return size.lines, size.columns

    def resize(self, rows: int, columns: int) -> None:
        super().resize(rows, columns)
        self._force_full = True

    def take_resize(self) -> bool:
        """Return ``True`` once per resize notification."""
        resized = self._resized
        self._resized = False
        return resized

    # -- output -------------------------------------------------------------

    def refresh(self) -> None:
        """Flush the grid, rewriting only rows that changed since last time."""
        lines = [self.screen.render_row(row) for row in range(self.screen.rows)]
        out: list[str] = []

        if self._force_full:
            out.append(_CLEAR_SCREEN)

        for row, line in enumerate(lines):
            if (
                not self._force_full
                and row < len(self._previous_lines)
                and self._previous_lines[row] == line
            ):
                continue
            out.append(_MOVE_FMT.format(row + 1, 1))
            out.append(line)
            out.append(_CLEAR_TO_EOL)

        self._previous_lines = lines
        self._force_full = False
        if out:
            self.write("".join(out))

    def write(self, data: str) -> None:
        """Write data to stdout and optionally to the write log."""
        self._raw_write(data)

        if self._write_log_path:
            try:
                with open(self._write_log_path, "a") as f:
                    f.write(data)
            except OSError:
                logger.warning("couldn't append to write log %s", self._write_log_path)
                self._write_log_path = ""

    # -- input --------------------------------------------------------------

    def poll_key(self, timeout: float) -> KeyId | None:
        """Wait up to *timeout* seconds for a key and return its id."""
        if self._pending_keys:
            return self._pending_keys.popleft()
        if self._stdin_closed:
            time.sleep(max(0.0, timeout))
            return None

        fd = self._stdin.fileno()
        sequences = self._read_sequences(fd, timeout)
        if self._stdin_buffer.pending:
            sequences += self._read_sequences(fd, _ESCAPE_TIMEOUT)
            sequences += self._stdin_buffer.flush()

        for sequence in sequences:
            key = parse_key(sequence)
            if key is not None:
                self._pending_keys.append(key)

        return self._pending_keys.popleft() if self._pending_keys else None

    def _read_sequences(self, fd: int, timeout: float) -> list[str]:
        ready, _, _ = select.select([fd], [], [], max(0.0, timeout))
        if not ready:
            return []
        try:
            raw = os.read(fd, 1024)
        except OSError:
            return []
        if not raw:
            self._stdin_closed = True
            return []
        return self._stdin_buffer.process(self._decoder.decode(raw))

    # -- private: SIGWINCH -------------------------------------------------

    def _on_sigwinch(self, signum: int, frame: object) -> None:
        self._resized = True

    # -- private: raw write ------------------------------------------------

    def _raw_write(self, data: str) -> None:
        """Write directly to stdout, bypassing buffering."""
        try:
            self._stdout.write(data)
            self._stdout.flush()
        except OSError:
            pass
