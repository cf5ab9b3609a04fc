"""Keyboard input parsing for the pager.

Turns a complete input sequence (as split by :mod:`pi.watch.stdin_buffer`)
into a key identifier such as ``"up"``, ``"pageDown"`` or ``"G"``.  Only the
legacy xterm/VT sequences are understood; pi-watch never enables the Kitty
keyboard protocol.
"""

from __future__ import annotations

KeyId = str


class Key:
    """Named key constants."""

    escape = "escape"
    enter = "enter"
    tab = "tab"
    space = "space"
    backspace = "backspace"
    delete = "delete"
    insert = "insert"
    home = "home"
    end = "end"
    page_up = "pageUp"
    page_down = "pageDown"
    up = "up"
    down = "down"
    left = "left"
    right = "right"

    @staticmethod
    def ctrl(key: str) -> str:
        return f"ctrl+{key}"


# Legacy escape sequences -> key names.  Both normal (CSI) and application
# (SS3) cursor modes are listed since the terminal may be in either.
LEGACY_KEY_SEQUENCES: dict[str, KeyId] = {
    "\x1b[A": Key.up,
    "\x1b[B": Key.down,
    "\x1b[C": Key.right,
    "\x1b[D": Key.left,
    "\x1b[H": Key.home,
    "\x1b[F": Key.end,
    "\x1bOA": Key.up,
    "\x1bOB": Key.down,
    "\x1bOC": Key.right,
    "\x1bOD": Key.left,
    "\x1bOH": Key.home,
    "\x1bOF": Key.end,
    "\x1b[1~": Key.home,
    "\x1b[2~": Key.insert,
    "\x1b[3~": Key.delete,
    "\x1b[4~": Key.end,
    "\x1b[5~": Key.page_up,
    "\x1b[6~": Key.page_down,
    "\x1b[7~": Key.home,
    "\x1b[8~": Key.end,
}


def parse_key(data: str) -> KeyId | None:
    """Parse one complete input sequence and return its key id, or ``None``.

    Printable characters are returned as-is, so ``"g"`` and ``"G"`` stay
    distinct.
    """
    if not data:
        return None

    key = LEGACY_KEY_SEQUENCES.get(data)
    if key is not None:
        return key

    if data == "\x1b":
        return Key.escape
    if data in ("\r", "\n"):
        return Key.enter
    if data == "\t":
        return Key.tab
    if data == " ":
        return Key.space
    if data in ("\x7f", "\x08"):
        return Key.backspace

    if len(data) == 1 and 1 <= ord(data) <= 26:
        return Key.ctrl(chr(ord(data) + ord("a") - 1))

    if len(data) == 1 and data.isprintable():
        return data

    return None
