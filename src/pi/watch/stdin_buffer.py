"""StdinBuffer splits raw terminal input into complete sequences.

Input read from a non-blocking tty can end in the middle of an escape
sequence (an arrow key arriving as ``ESC`` then ``[A``).  Without buffering
that partial ``ESC`` would be taken for the escape key.  The buffer holds an
incomplete tail back until more data arrives or the caller flushes it.
"""

from __future__ import annotations

import re

ESC = "\x1b"

_SGR_MOUSE_RE = re.compile(r"^<\d+;\d+;\d+[Mm]$")


def _is_complete_sequence(data: str) -> str:
    """Classify *data* as 'complete', 'incomplete', or 'not-escape'."""
    if not data.startswith(ESC):
        return "not-escape"

    if len(data) == 1:
        return "incomplete"

    after_esc = data[1:]

    # CSI sequences: ESC [
    if after_esc.startswith("["):
        if after_esc.startswith("[M"):
            return "complete" if len(data) >= 6 else "incomplete"
        return _is_complete_csi_sequence(data)

    # SS3 sequences: ESC O
    if after_esc.startswith("O"):
        return "complete" if len(after_esc) >= 2 else "incomplete"

    # Meta key: ESC followed by a single character
    return "complete"


def _is_complete_csi_sequence(data: str) -> str:
    if len(data) < 3:
        return "incomplete"

    payload = data[2:]
    last_char = payload[-1]

    if 0x40 <= ord(last_char) <= 0x7E:
        if payload.startswith("<"):
            return "complete" if _SGR_MOUSE_RE.match(payload) else "incomplete"
        return "complete"

    return "incomplete"


def _extract_complete_sequences(buffer: str) -> tuple[list[str], str]:
    """Split *buffer* into complete sequences and an incomplete remainder."""
    sequences: list[str] = []
    pos = 0

    while pos < len(buffer):
        remaining = buffer[pos:]

        if not remaining.startswith(ESC):
            sequences.append(remaining[0])
            pos += 1
            continue

        for seq_end in range(1, len(remaining) + 1):
            candidate = remaining[:seq_end]
            if _is_complete_sequence(candidate) == "complete":
                sequences.append(candidate)
                pos += seq_end
                break
        else:
            return sequences, remaining

    return sequences, ""


class StdinBuffer:
    """Accumulates input chunks and hands back complete sequences."""

    def __init__(self) -> None:
        self._buffer: str = ""

    @property
    def pending(self) -> bool:
        """``True`` while an incomplete sequence is held back."""
        return bool(self._buffer)

    def process(self, data: str) -> list[str]:
        """Feed *data* and return every sequence it completes."""
        self._buffer += data
        sequences, self._buffer = _extract_complete_sequences(self._buffer)
        return sequences

    def flush(self) -> list[str]:
        """Give up waiting and return the held-back tail as one sequence."""
        if not self._buffer:
            return []
        sequences = [self._buffer]
        self._buffer = ""
        return sequences

    def clear(self) -> None:
        self._buffer = ""
