"""Escape-aware text utilities: stripping, measuring, cell scanning, wrapping.

Everything here treats an escape sequence as zero-width.  An escape starts
with ``ESC`` and runs up to and including the first ASCII letter; a sequence
that never reaches a letter swallows the rest of its line, never the line break.

:func:`iter_cells` is the single scanner shared by table sizing, word
wrapping and both animation compositors.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterator

import grapheme
import wcwidth as _wcwidth

RESET = "\x1b[0m"

_ESCAPE_RE = re.compile(r"\x1b[^A-Za-z\n]*(?:[A-Za-z]|(?=\n)|\Z)")

TAB_WIDTH = 3

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
# Character / grapheme width
# ---------------------------------------------------------------------------


def _grapheme_width(g: str) -> int:
    """Return the terminal display width of a single grapheme cluster.

    Control characters and combining marks are zero-width, emoji sequences
    (VS16, ZWJ, skin tones, regional indicators) are two columns, and
    everything else is delegated to ``wcwidth``.
    """
    if not g:
        return 0

    if len(g) == 1:
        cp = ord(g)
        if g == "\t":
            return TAB_WIDTH
        if cp < 0x20 or (0x7F <= cp <= 0x9F):
            return 0
        return max(_wcwidth.wcwidth(g), 0)

    for ch in g:
        cp = ord(ch)
        if cp in (0xFE0F, 0x200D):
            return 2
        if 0x1F3FB <= cp <= 0x1F3FF or 0x1F1E6 <= cp <= 0x1F1FF:
            return 2

    first_cp = ord(g[0])
    if first_cp >= 0x1F000 or 0x2600 <= first_cp <= 0x27BF:
        return 2

    return max(_wcwidth.wcwidth(g[0]), 0)


# ---------------------------------------------------------------------------
# strip_styling / visual_length
# ---------------------------------------------------------------------------


def extract_escape(text: str, pos: int) -> str | None:
    """Return the escape sequence starting at *pos*, or ``None``."""
    if pos >= len(text) or text[pos] != "\x1b":
        return None
    match = _ESCAPE_RE.match(text, pos)
    return match.group(0) if match else None


def strip_styling(text: str) -> str:
    """Remove every escape sequence from *text*, leaving printable content."""
    if "\x1b" not in text:
        return text
    return _ESCAPE_RE.sub("", text)


def visual_length(text: str) -> int:
    """Return the number of terminal columns *text* occupies.

    Escapes are zero-width, tabs count as three columns and wide characters
    as two.  Single lines are expected; newlines count as zero.
    """
    if not text:
        return 0

    stripped = strip_styling(text)
    if not stripped:
        return 0

    if stripped.isascii() and stripped.isprintable():
        return len(stripped)

    cached = _width_cache.get(stripped)
    if cached is not None:
        return cached

    total = 0
    for g in grapheme.graphemes(stripped):
        total += _grapheme_width(g)
    return _cache_width(stripped, total)


def max_line_length(text: str) -> int:
    """Return the visual length of the longest line of *text*."""
    return max((visual_length(line) for line in text.split("\n")), default=0)


# ---------------------------------------------------------------------------
# iter_cells
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Cell:
    """One visible character of a styled line.

    ``escapes`` holds the escape sequences found immediately before the
    character.  A trailing cell with ``char == ""`` carries escapes that
    follow the last visible character.
    """

    char: str
    escapes: tuple[str, ...]
    column: int
    width: int


def iter_cells(line: str) -> Iterator[Cell]:
    """Yield the visual cells of *line*, tracking the visual column."""
    pending: list[str] = []
    column = 0
    i = 0
    n = len(line)

    while i < n:
        if line[i] == "\x1b":
            code = extract_escape(line, i)
            if code:
                pending.append(code)
                i += len(code)
                continue

        ch = line[i]
        width = _grapheme_width(ch)
        yield Cell(ch, tuple(pending), column, width)
        pending = []
        column += width
        i += 1

    if pending:
        yield Cell("", tuple(pending), column, 0)


# ---------------------------------------------------------------------------
# AnsiCodeTracker
# ---------------------------------------------------------------------------

_SGR_ATTRS: dict[int, str] = {
    1: "bold",
    2: "dim",
    3: "italic",
    4: "underline",
    5: "blink",
    7: "inverse",
    8: "hidden",
    9: "strikethrough",
}

_SGR_ATTR_OFF: dict[int, tuple[str, ...]] = {
    22: ("bold", "dim"),
    23: ("italic",),
    24: ("underline",),
    25: ("blink",),
    27: ("inverse",),
    28: ("hidden",),
    29: ("strikethrough",),
}


class AnsiCodeTracker:
    """Track the active SGR (Select Graphic Rendition) state of a stream.

    Lets callers close a line cleanly and re-open the same styling on the
    next one, or replay styling after a run of dropped escapes.
    """

    def __init__(self) -> None:
        self._attrs: dict[str, str] = {}
        self.fg_color: str | None = None
        self.bg_color: str | None = None

    def process(self, code: str) -> None:
        """Update tracked state from an escape; non-SGR escapes are ignored."""
        if not code.startswith("\x1b[") or not code.endswith("m"):
            return

        body = code[2:-1]
        if not body:
            self.clear()
            return

        params = body.split(";")
        i = 0
        while i < len(params):
            try:
                val = int(params[i]) if params[i] else 0
            except ValueError:
                i += 1
                continue

            if val == 0:
                self.clear()
            elif val in _SGR_ATTRS:
                self._attrs[_SGR_ATTRS[val]] = f"\x1b[{val}m"
            elif val in _SGR_ATTR_OFF:
                for name in _SGR_ATTR_OFF[val]:
                    self._attrs.pop(name, None)
            elif val in (38, 48):
                color, consumed = _extended_color(val, params, i)
                if val == 38:
                    self.fg_color = color
                else:
                    self.bg_color = color
                i += consumed
            elif val == 39:
                self.fg_color = None
            elif val == 49:
                self.bg_color = None
            elif 30 <= val <= 37 or 90 <= val <= 97:
                self.fg_color = f"\x1b[{val}m"
            elif 40 <= val <= 47 or 100 <= val <= 107:
                self.bg_color = f"\x1b[{val}m"
            i += 1

    def clear(self) -> None:
        """Reset all tracked attributes to off."""
        self._attrs.clear()
        self.fg_color = None
        self.bg_color = None

    def get_active_codes(self) -> str:
        """Return escapes that re-establish the current state."""
        parts = [self._attrs[name] for name in _SGR_ATTRS.values() if name in self._attrs]
        if self.fg_color is not None:
            parts.append(self.fg_color)
        if self.bg_color is not None:
            parts.append(self.bg_color)
        return "".join(parts)

    def has_active_codes(self) -> bool:
        return bool(self._attrs) or self.fg_color is not None or self.bg_color is not None


def _extended_color(base: int, params: list[str], i: int) -> tuple[str | None, int]:
    """Parse a ``38;5;N`` / ``38;2;R;G;B`` colour; return (code, params consumed)."""
    if i + 1 >= len(params):
        return None, 0
    mode = params[i + 1]
    if mode == "5" and i + 2 < len(params):
        return f"\x1b[{base};5;{params[i + 2]}m", 2
    if mode == "2" and i + 4 < len(params):
        r, g, b = params[i + 2 : i + 5]
        return f"\x1b[{base};2;{r};{g};{b}m", 4
    return None, 1


# ---------------------------------------------------------------------------
# wrap_text_with_ansi
# ---------------------------------------------------------------------------


def wrap_text_with_ansi(text: str, width: int) -> list[str]:
    """Word-wrap *text* to *width* columns, preserving escape sequences.

    Each physical line is wrapped separately.  Styling that is still open at
    a break is reset at the end of the line and re-opened on the next one, so
    every returned line is self-contained.
    """
    if width <= 0:
        return text.split("\n")

    tracker = AnsiCodeTracker()
    result: list[str] = []
    for physical_line in text.split("\n"):
        result.extend(_wrap_single_line(physical_line, width, tracker))
    return result


def _split_words(line: str) -> list[tuple[bool, list[Cell]]]:
    """Group cells into alternating ``(is_space, cells)`` runs."""
    runs: list[tuple[bool, list[Cell]]] = []
    for cell in iter_cells(line):
        is_space = cell.char == " "
        if runs and (runs[-1][0] == is_space or not cell.char):
            runs[-1][1].append(cell)
        else:
            runs.append((is_space, [cell]))
    return runs


def _wrap_single_line(line: str, width: int, tracker: AnsiCodeTracker) -> list[str]:
    if not line:
        return [""]

    lines: list[str] = []
    parts: list[str] = [tracker.get_active_codes()]
    col = 0
    gap: list[Cell] = []

    def commit(cells: list[Cell]) -> None:
        nonlocal col
        for cell in cells:
            for code in cell.escapes:
                tracker.process(code)
                parts.append(code)
            parts.append(cell.char)
            col += cell.width

    def flush() -> None:
        nonlocal parts, col, gap
        finished = "".join(parts)
        if tracker.has_active_codes():
            finished += RESET
        lines.append(finished)
        for cell in gap:
            for code in cell.escapes:
                tracker.process(code)
        gap = []
        parts = [tracker.get_active_codes()]
        col = 0

    for is_space, cells in _split_words(line):
        if is_space:
            gap.extend(cells)
            continue

        gap_width = sum(c.width for c in gap)
        word_width = sum(c.width for c in cells)

        if col + gap_width + word_width <= width:
            commit(gap)
            gap = []
            commit(cells)
            continue

        if word_width <= width:
            flush()
            commit(cells)
            continue

        # Word longer than a whole line: hard-break it.
        if col + gap_width < width:
            commit(gap)
            gap = []
        elif col > 0:
            flush()
        for cell in cells:
            if col + cell.width > width and col > 0:
                flush()
            commit([cell])

    if gap and col + sum(c.width for c in gap) <= width:
        commit(gap)
        gap = []

    flush()
    return lines


# ---------------------------------------------------------------------------
# truncate_to_width / pad_to_width
# ---------------------------------------------------------------------------


def truncate_to_width(text: str, max_width: int, ellipsis: str = "...") -> str:
    """Truncate *text* to *max_width* columns, appending *ellipsis* when cut.

    Escapes before the cut are kept; the ellipsis counts towards the width.
    """
    if max_width <= 0:
        return ""
    if visual_length(text) <= max_width:
        return text

    target = max_width - visual_length(ellipsis)
    if target <= 0:
        return _take_columns(ellipsis, max_width)
    return _take_columns(text, target) + ellipsis


def _take_columns(text: str, max_cols: int) -> str:
    tracker = AnsiCodeTracker()
    result: list[str] = []
    for cell in iter_cells(text):
        if cell.column + cell.width > max_cols:
            break
        for code in cell.escapes:
            tracker.process(code)
        result.extend(cell.escapes)
        result.append(cell.char)
    if tracker.has_active_codes():
        result.append(RESET)
    return "".join(result)


def pad_to_width(text: str, width: int) -> str:
    """Right-pad *text* with spaces to *width* columns (never truncates)."""
    missing = width - visual_length(text)
    if missing <= 0:
        return text
    return text + " " * missing
