"""Wave reveal: uncover styled content with a ring expanding from the center."""

from __future__ import annotations

import math

from orgcharm.utils import RESET, AnsiCodeTracker, iter_cells

RING_GLYPHS = ("▓", "▒", "░")  # inner edge to outer edge

WAVE_OVERSHOOT = 1.15
RING_FRACTION = 0.12
DONE_THRESHOLD = 0.95


class _Wave:
    def __init__(self, progress: float, width: int, height: int) -> None:
        self.cx = width / 2
        self.cy = height / 2
        self.max_radius = math.hypot(self.cx, self.cy)
        self.radius = progress * self.max_radius * WAVE_OVERSHOOT
        self.ring = RING_FRACTION * self.max_radius
        self.inner = self.radius - self.ring

    def classify(self, x: int, y: int) -> str | None:
        """Return ``None`` for a revealed cell, else the glyph to draw."""
        d = math.hypot(x - self.cx, y - self.cy)
        if d < self.inner:
            return None
        if d < self.radius and self.ring > 0:
            depth = (d - self.inner) / self.ring
            band = min(int(depth * len(RING_GLYPHS)), len(RING_GLYPHS) - 1)
            return RING_GLYPHS[band]
        return " "


def reveal(content: str, progress: float, width: int, height: int) -> str:
    """Return *content* partially revealed by a wave at *progress*.

    Revealed cells keep their character and styling; ring cells are drawn
    with shade glyphs and cells beyond the wave are blank.  Styling never
    leaks into ring or blank cells.  Lines shorter than *width* are padded
    so the ring spans the whole frame.
    """
    if progress > DONE_THRESHOLD:
        return content

    wave = _Wave(progress, width, height)
    if wave.max_radius <= 0:
        return content

    return "\n".join(_reveal_line(line, y, width, wave) for y, line in enumerate(content.split("\n")))


def _reveal_line(line: str, y: int, width: int, wave: _Wave) -> str:
    tracker = AnsiCodeTracker()
    out: list[str] = []
    styled = False
    was_inside = False
    column = 0

    for cell in iter_cells(line):
        for code in cell.escapes:
            tracker.process(code)
        if not cell.char:
            break

        column = cell.column + cell.width
        glyph = wave.classify(cell.column, y)
        if glyph is None:
            if was_inside:
                out.extend(cell.escapes)
            else:
                out.append(tracker.get_active_codes())
            out.append(cell.char)
            styled = tracker.has_active_codes()
            was_inside = True
            continue

        if styled:
            out.append(RESET)
            styled = False
        was_inside = False
        out.append(glyph * cell.width)

    if styled:
        out.append(RESET)

    for x in range(column, width):
        glyph = wave.classify(x, y)
        out.append(" " if glyph is None else glyph)

    return "".join(out)
