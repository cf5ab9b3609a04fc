"""Output buffers: one rendered cell per byte of command output.

An :class:`OutputBuffer` only ever grows while its run is in flight and is
frozen once the command's stdout reaches end-of-stream.  :class:`OutputHistory`
keeps exactly two generations -- the run being shown and the one before it --
so the diff engine always has something to compare against without memory
growing run over run.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from pi.watch.errors import ResourceError

if TYPE_CHECKING:
    from pi.watch.diff import DiffEngine

logger = logging.getLogger(__name__)

HIGHLIGHT = 0x01


def is_printable(byte: int, force_8bit: bool = False) -> bool:
    """Return ``True`` if *byte* is drawn rather than only moving the cursor."""
    if 0x20 <= byte <= 0x7E:
        return True
    return force_8bit and byte >= 0xA0


@dataclass(frozen=True)
class Cell:
    """A single output byte plus its highlight attribute."""

    byte: int
    highlighted: bool = False

    @property
    def char(self) -> str:
        # Bytes map 1:1 onto latin-1 code points.
        return chr(self.byte)

    def is_printable(self, force_8bit: bool = False) -> bool:
        return is_printable(self.byte, force_8bit)


class OutputBuffer:
    """Append-only sequence of cells for a single run."""

    def __init__(self) -> None:
        self._bytes = bytearray()
        self._flags = bytearray()
        self._complete = False

    def __len__(self) -> int:
        return len(self._bytes)

    def __getitem__(self, index: int) -> Cell:
        return Cell(self._bytes[index], bool(self._flags[index] & HIGHLIGHT))

    def __repr__(self) -> str:
        state = "complete" if self._complete else "open"
        return f"OutputBuffer({bytes(self._bytes)!r}, {state})"

    @property
    def content(self) -> bytearray:
        """The raw bytes.  Callers must not mutate the returned array."""
        return self._bytes

    @property
    def complete(self) -> bool:
        """``True`` once the run's output stream has ended."""
        return self._complete

    def highlighted(self, index: int) -> bool:
        return bool(self._flags[index] & HIGHLIGHT)

    def set_highlighted(self, index: int, value: bool) -> None:
        if value:
            self._flags[index] |= HIGHLIGHT
        else:
            self._flags[index] &= ~HIGHLIGHT & 0xFF

    def append(self, data: bytes) -> range:
        """Append *data* and return the range of newly added indices."""
        if self._complete:
            raise RuntimeError("cannot append to a completed output buffer")
        start = len(self._bytes)
        self._bytes += data
        self._flags += bytes(len(data))
        return range(start, len(self._bytes))

    def freeze(self) -> None:
        self._complete = True


class OutputHistory:
    """Current and previous output generations for the watched command."""

    def __init__(self, diff: DiffEngine) -> None:
        self._diff = diff
        self.current = OutputBuffer()
        self.previous: OutputBuffer | None = None
        self.generation = 0

    def begin_run(self) -> None:
        """Start a new generation, demoting the current buffer to previous."""
        if self.generation > 0:
            self.current.freeze()
            self.previous = self.current
        self.current = OutputBuffer()
        self.generation += 1

    def feed(self, data: bytes) -> range:
        """Append *data* to the current run and highlight what changed."""
        try:
            span = self.current.append(data)
        except MemoryError as exc:
            raise ResourceError("couldn't grow the output buffer") from exc
        if self.previous is not None:
            self._diff.apply(self.current, self.previous, span)
        return span

    def finish(self) -> None:
        """Mark the current run's output as complete."""
        if not self.current.complete:
            logger.debug(
                "run %d finished with %d bytes", self.generation, len(self.current)
            )
        self.current.freeze()
