"""Terminal text utilities: display width measurement and truncation.

Used for the title bar, where the watched command may contain wide or
combining characters even though its output is drawn byte by byte.
"""

from __future__ import annotations

import unicodedata

import grapheme
import wcwidth as _wcwidth

# ---------------------------------------------------------------------------
# Width cache (capped at 512 entries)
# ---------------------------------------------------------------------------

_width_cache: dict[str, int] = {}
_WIDTH_CACHE_MAX = 512


def _cache_width(key: str, value: int) -> int:
    if len(_width_cache) >= _WIDTH_CACHE_MAX:
        _width_cache.clear()
    _width_cache[key] = value
    return value


# ---------------------------------------------------------------------------
# Grapheme width
# ---------------------------------------------------------------------------


def grapheme_width(g: str) -> int:
    """Return the terminal display width of a single grapheme cluster.

    Control characters, combining marks and format characters take no
    columns; emoji sequences take two; everything else is up to wcwidth.
    """
    if not g:
        return 0

    if len(g) == 1:
        cp = ord(g)
        if cp < 0x20 or (0x7F <= cp <= 0x9F):
            return 0
        return max(_wcwidth.wcwidth(g), 0)

    for ch in g:
        cp = ord(ch)
        if cp in (0xFE0F, 0x200D):  # VS16, ZWJ
            return 2
        if 0x1F3FB <= cp <= 0x1F3FF or 0x1F1E6 <= cp <= 0x1F1FF:
            return 2

    first = g[0]
    if ord(first) >= 0x1F000:
        return 2
    if unicodedata.category(first)[0] == "M" or unicodedata.category(first) == "Cf":
        return 0
    return max(_wcwidth.wcwidth(first), 0)


def split_graphemes(text: str) -> list[str]:
    return list(grapheme.graphemes(text))


def visible_width(text: str) -> int:
    """Calculate the number of terminal columns *text* occupies."""
    if not text:
        return 0

    if all(0x20 <= ord(ch) <= 0x7E for ch in text):
        return len(text)

    cached = _width_cache.get(text)
    if cached is not None:
        return cached

    total = sum(grapheme_width(g) for g in grapheme.graphemes(text))
    return _cache_width(text, total)


def take_columns(text: str, max_cols: int) -> str:
    """Return the longest grapheme-aligned prefix of *text* within *max_cols*."""
    if max_cols <= 0:
        return ""
    result: list[str] = []
    cols = 0
    for g in grapheme.graphemes(text):
        w = grapheme_width(g)
        if cols + w > max_cols:
            break
        result.append(g)
        cols += w
    return "".join(result)


def truncate_to_width(
    text: str,
    max_width: int,
    ellipsis: str = "",
    pad: bool = False,
) -> str:
    """Truncate *text* to fit within *max_width* visible columns.

    When the text is too wide it is cut and *ellipsis* appended (the ellipsis
    counts towards the width).  With *pad* the result is right-padded with
    spaces to exactly *max_width*.
    """
    if max_width <= 0:
        return ""

    text_width = visible_width(text)
    if text_width <= max_width:
        return text + " " * (max_width - text_width) if pad else text

    ellipsis_width = visible_width(ellipsis)
    target_width = max_width - ellipsis_width
    if target_width <= 0:
        return take_columns(ellipsis, max_width)

    result = take_columns(text, target_width) + ellipsis
    if pad:
        result += " " * (max_width - visible_width(result))
    return result
