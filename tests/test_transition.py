"""Tests for orgcharm.animation.transition -- the dissolve compositor."""

from __future__ import annotations

import random

from orgcharm.animation.transition import SCATTER_GLYPHS, transition


def block(char: str, width: int = 80, height: int = 20) -> str:
    return "\n".join(char * width for _ in range(height))


class TestTransition:
    def test_finished_returns_target(self) -> None:
        assert transition("old", "\x1b[1mnew\x1b[0m", 1.0, 3) == "\x1b[1mnew\x1b[0m"
        assert transition("old", "new", 0.96, 3) == "new"

    def test_start_shows_source_padded(self) -> None:
        assert transition("hello", "world!!", 0.0, 10, random.Random(0)) == "hello     "

    def test_mid_phase_scatter_density(self) -> None:
        out = transition(block("a"), block("b"), 0.6, 80, random.Random(1234))
        cells = out.replace("\n", "")
        assert len(cells) == 80 * 20
        assert "a" not in cells
        assert "b" not in cells
        scattered = sum(1 for ch in cells if ch in SCATTER_GLYPHS)
        assert abs(scattered / len(cells) - 0.75) < 0.05

    def test_late_phase_has_no_source(self) -> None:
        out = transition(block("a"), block("b"), 0.95, 80, random.Random(7))
        assert "a" not in out
        assert "b" in out

    def test_same_seed_same_frame(self) -> None:
        first = transition(block("a"), block("b"), 0.4, 80, random.Random(99))
        second = transition(block("a"), block("b"), 0.4, 80, random.Random(99))
        assert first == second

    def test_styling_dropped(self) -> None:
        out = transition("\x1b[31mred\x1b[0m", "\x1b[32mgreen\x1b[0m", 0.5, 10, random.Random(3))
        assert "\x1b" not in out

    def test_row_count_covers_both(self) -> None:
        out = transition("a\nb\nc", "x", 0.0, 2, random.Random(0))
        assert out.split("\n") == ["a ", "b ", "c "]

    def test_wide_characters_keep_width(self) -> None:
        out = transition("日本", "ab", 0.0, 4, random.Random(0))
        assert out == "日本"
