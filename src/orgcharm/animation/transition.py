"""Poof transition: dissolve one rendering into another through scatter glyphs.

Styling is dropped while the transition runs; the final frame is the target
content itself.
"""

from __future__ import annotations

import math
import random

from orgcharm.utils import iter_cells, strip_styling

SCATTER_GLYPHS = "·∙•◦○◌*+×"

RIPPLE_SPREAD = 0.2
DONE_THRESHOLD = 0.95

# Phase boundaries on local progress
SCATTER_START = 0.3
SETTLE_START = 0.7

EARLY_MAX_SCATTER = 0.6
MID_SCATTER = 0.75


def _grid(text: str) -> list[list[str]]:
    """Split plain *text* into rows of single-column cells.

    A wide character occupies its first cell; the cells it covers are ``""``.
    """
    rows: list[list[str]] = []
    for line in text.split("\n"):
        row: list[str] = []
        for cell in iter_cells(line):
            if cell.width == 0:
                if row and cell.char:
                    row[-1] += cell.char
                continue
            row.append(cell.char)
            row.extend([""] * (cell.width - 1))
        rows.append(row)
    return rows


def _pick(old: str, new: str, local: float, rng: random.Random) -> str:
    roll = rng.random()
    if local < SCATTER_START:
        if roll < (local / SCATTER_START) * EARLY_MAX_SCATTER:
            return rng.choice(SCATTER_GLYPHS)
        return old
    if local < SETTLE_START:
        if roll < MID_SCATTER:
            return rng.choice(SCATTER_GLYPHS)
        return " "
    if roll < (local - SETTLE_START) / (1.0 - SETTLE_START):
        return new
    return rng.choice(SCATTER_GLYPHS)


def transition(
    from_content: str,
    to_content: str,
    progress: float,
    width: int,
    rng: random.Random | None = None,
) -> str:
    """Return one frame of the dissolve from *from_content* to *to_content*.

    Each cell's local progress lags the global one by its distance from the
    center, so the effect ripples outwards.  *rng* supplies the per-cell
    draws; a fresh OS-seeded generator is used when it is omitted.
    """
    if progress > DONE_THRESHOLD:
        return to_content

    if rng is None:
        rng = random.Random()

    source = _grid(strip_styling(from_content))
    target = _grid(strip_styling(to_content))

    rows = max(len(source), len(target))
    cols = max([width] + [len(row) for row in source] + [len(row) for row in target])

    cx = width / 2
    cy = rows / 2
    max_distance = math.hypot(cx, cy)

    out_lines: list[str] = []
    for y in range(rows):
        src_row = source[y] if y < len(source) else []
        dst_row = target[y] if y < len(target) else []
        out: list[str] = []
        skip = 0
        for x in range(cols):
            if skip:
                skip -= 1
                continue
            old = src_row[x] if x < len(src_row) else " "
            new = dst_row[x] if x < len(dst_row) else " "

            distance = math.hypot(x - cx, y - cy)
            offset = distance / max_distance * RIPPLE_SPREAD if max_distance > 0 else 0.0
            local = min(1.0, max(0.0, progress - offset))

            glyph = _pick(old, new, local, rng) or " "
            if glyph == old:
                skip = _covered(src_row, x)
            elif glyph == new:
                skip = _covered(dst_row, x)
            out.append(glyph)
        out_lines.append("".join(out))

    return "\n".join(out_lines)


def _covered(row: list[str], x: int) -> int:
    """Number of continuation cells after a wide character at *x*."""
    n = 0
    while x + 1 + n < len(row) and row[x + 1 + n] == "":
        n += 1
    return n
