"""Text measurement helpers: grapheme widths, truncation and pre-wrap layout.

Widths are measured in character cells. Wide (East Asian) characters and
emoji occupy two cells, combining marks and control characters none.
"""

from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass

import grapheme
import wcwidth as _wcwidth

# SGR sequences only; menu themes emit nothing else
_SGR_RE = re.compile(r"\x1b\[[0-9;]*m")

_width_cache: dict[str, int] = {}
_WIDTH_CACHE_MAX = 512


def _cache_width(key: str, value: int) -> int:
    if len(_width_cache) >= _WIDTH_CACHE_MAX:
        _width_cache.clear()
    _width_cache[key] = value
    return value


def grapheme_width(g: str) -> int:
    """Return the cell width of a single grapheme cluster."""
    if not g:
        return 0

    if len(g) == 1:
        cp = ord(g)
        if cp < 0x20 or (0x7F <= cp <= 0x9F):
            return 0
        return max(_wcwidth.wcwidth(g), 0)

    for ch in g:
        cp = ord(ch)
        # VS16, ZWJ, skin tones and regional indicators all force emoji presentation
        if cp in (0xFE0F, 0x200D) or 0x1F3FB <= cp <= 0x1F3FF or 0x1F1E6 <= cp <= 0x1F1FF:
            return 2

    first_cp = ord(g[0])
    if first_cp >= 0x1F000 or 0x2600 <= first_cp <= 0x27BF:
        return 2

    cat = unicodedata.category(g[0])
    if cat.startswith("M") or cat == "Cf":
        return 0

    return max(_wcwidth.wcwidth(g[0]), 0)


def visible_width(text: str) -> int:
    """Calculate the visible cell width of *text*, ignoring SGR styling."""
    if not text:
        return 0

    stripped = _SGR_RE.sub("", text)
    if not stripped:
        return 0

    if stripped.isascii() and stripped.isprintable():
        return len(stripped)

    cached = _width_cache.get(stripped)
    if cached is not None:
        return cached

    total = sum(grapheme_width(g) for g in grapheme.graphemes(stripped))
    return _cache_width(stripped, total)


def truncate_to_width(text: str, max_width: int, ellipsis: str = "...") -> str:
    """Truncate plain *text* to *max_width* cells, appending *ellipsis* when cut."""
    if max_width <= 0:
        return ""

    if visible_width(text) <= max_width:
        return text

    target = max_width - visible_width(ellipsis)
    if target <= 0:
        return _take_cells(ellipsis, max_width)
    return _take_cells(text, target) + ellipsis


def _take_cells(text: str, max_cells: int) -> str:
    result: list[str] = []
    cells = 0
    for g in grapheme.graphemes(text):
        w = grapheme_width(g)
        if cells + w > max_cells:
            break
        result.append(g)
        cells += w
    return "".join(result)


def expand_tabs(line: str, tab_size: int) -> str:
    """Replace tabs in *line* with spaces up to the next multiple of *tab_size* cells."""
    if "\t" not in line:
        return line
    tab_size = max(1, tab_size)
    result: list[str] = []
    cells = 0
    for g in grapheme.graphemes(line):
        if g == "\t":
            pad = tab_size - cells % tab_size
            result.append(" " * pad)
            cells += pad
        else:
            result.append(g)
            cells += grapheme_width(g)
    return "".join(result)


def is_whitespace_char(char: str) -> bool:
    """Return ``True`` if *char* is a whitespace character."""
    return char in (" ", "\t", "\n", "\r", "\f", "\v")


@dataclass
class TextChunk:
    """One visual row of a wrapped logical line."""

    text: str
    start_index: int
    end_index: int


def wrap_line(line: str, max_width: int) -> list[TextChunk]:
    """Wrap a single logical line the way ``white-space: pre-wrap`` does.

    Breaks after the last whitespace run that precedes a word; a word wider
    than the row is broken at the grapheme that overflows
    (``overflow-wrap: break-word``). Whitespace is preserved and may hang
    past the row edge.
    """
    if not line or max_width <= 0:
        return [TextChunk(text=line, start_index=0, end_index=len(line))]

    if visible_width(line) <= max_width:
        return [TextChunk(text=line, start_index=0, end_index=len(line))]

    segments: list[tuple[str, int]] = []
    idx = 0
    for g in grapheme.graphemes(line):
        segments.append((g, idx))
        idx += len(g)

    chunks: list[TextChunk] = []
    current_width = 0
    chunk_start = 0
    wrap_opp_index = -1
    wrap_opp_width = 0

    for i, (g, char_index) in enumerate(segments):
        g_width = grapheme_width(g)
        is_ws = is_whitespace_char(g)

        if not is_ws and current_width + g_width > max_width:
            if wrap_opp_index > chunk_start:
                chunks.append(
                    TextChunk(line[chunk_start:wrap_opp_index], chunk_start, wrap_opp_index)
                )
                chunk_start = wrap_opp_index
                current_width -= wrap_opp_width
            elif chunk_start < char_index:
                chunks.append(TextChunk(line[chunk_start:char_index], chunk_start, char_index))
                chunk_start = char_index
                current_width = 0
            wrap_opp_index = -1

        current_width += g_width

        if is_ws and i + 1 < len(segments) and not is_whitespace_char(segments[i + 1][0]):
            wrap_opp_index = segments[i + 1][1]
            wrap_opp_width = current_width

    chunks.append(TextChunk(line[chunk_start:], chunk_start, len(line)))
    return chunks
