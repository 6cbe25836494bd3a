"""Terminal text utilities: ANSI stripping, width measurement, graphemes.

Frames are compared and measured as plain strings, so every helper here
treats ANSI SGR sequences as zero-width and cuts text only at grapheme
cluster boundaries.
"""

from __future__ import annotations

import re
import unicodedata

import grapheme
import wcwidth as _wcwidth

# ---------------------------------------------------------------------------
# Regex patterns for ANSI sequences
# ---------------------------------------------------------------------------

# CSI sequences: ESC[ <params> <final byte>
_ANSI_RE = re.compile(r"\x1b\[[0-9;?]*[A-Za-z]")

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
# Graphemes
# ---------------------------------------------------------------------------


def graphemes(text: str) -> list[str]:
    """Split *text* into user-perceived characters."""
    return list(grapheme.graphemes(text))


def grapheme_count(text: str) -> int:
    return grapheme.length(text)


def _grapheme_width(g: str) -> int:
    """Return the terminal display width of a single grapheme cluster."""
    if not g:
        return 0

    if len(g) == 1:
        cp = ord(g)
        if cp < 0x20 or (0x7F <= cp <= 0x9F):
            return 0
        return max(_wcwidth.wcwidth(g), 0)

    # Emoji presentation, ZWJ sequences, skin tones, flags
    for ch in g:
        cp = ord(ch)
        if cp in (0xFE0F, 0x200D) or 0x1F3FB <= cp <= 0x1F3FF or 0x1F1E6 <= cp <= 0x1F1FF:
            return 2

    first = g[0]
    if ord(first) >= 0x1F000:
        return 2
    if unicodedata.category(first) in ("Mn", "Me", "Cf"):
        return 0
    return max(_wcwidth.wcwidth(first), 0)


# ---------------------------------------------------------------------------
# ANSI / width
# ---------------------------------------------------------------------------


def strip_ansi(text: str) -> str:
    return _ANSI_RE.sub("", text)


def visible_width(text: str) -> int:
    """Calculate the visible terminal width of *text*.

    * Strips ANSI escape sequences.
    * Uses a fast ASCII path when possible.
    * Caches results for non-ASCII strings.
    """
    if not text:
        return 0

    stripped = strip_ansi(text)
    if not stripped:
        return 0

    if stripped.isascii() and stripped.isprintable():
        return len(stripped)

    cached = _width_cache.get(stripped)
    if cached is not None:
        return cached

    total = sum(_grapheme_width(g) for g in grapheme.graphemes(stripped))
    return _cache_width(stripped, total)


def truncate_to_width(text: str, max_width: int, ellipsis: str = "...") -> str:
    """Truncate *text* to fit within *max_width* visible columns.

    The ellipsis counts towards the width.  ANSI codes inside the kept
    prefix are preserved and a reset is appended when any were seen.
    """
    if max_width <= 0:
        return ""

    if visible_width(text) <= max_width:
        return text

    target_width = max_width - visible_width(ellipsis)
    if target_width <= 0:
        return ellipsis[:max_width]

    result: list[str] = []
    cols = 0
    saw_ansi = False
    pos = 0
    while pos < len(text):
        match = _ANSI_RE.match(text, pos)
        if match:
            result.append(match.group(0))
            saw_ansi = True
            pos = match.end()
            continue

        # Take the whole grapheme cluster starting at pos
        cluster = next(grapheme.graphemes(text[pos : pos + 16]))
        width = _grapheme_width(cluster)
        if cols + width > target_width:
            break
        result.append(cluster)
        cols += width
        pos += len(cluster)

    if saw_ansi:
        result.append("\x1b[0m")
    result.append(ellipsis)
    return "".join(result)
