"""Tests for orgcharm.utils -- escape-aware text utilities."""

from __future__ import annotations

from orgcharm.utils import (
    RESET,
    AnsiCodeTracker,
    Cell,
    iter_cells,
    max_line_length,
    pad_to_width,
    strip_styling,
    truncate_to_width,
    visual_length,
    wrap_text_with_ansi,
)


# ---------------------------------------------------------------------------
# strip_styling
# ---------------------------------------------------------------------------


class TestStripStyling:
    """Remove escape sequences, keep printable content."""

    def test_plain_text_unchanged(self) -> None:
        assert strip_styling("hello") == "hello"

    def test_sgr_removed(self) -> None:
        assert strip_styling("\x1b[1mbold\x1b[0m") == "bold"

    def test_truecolor_removed(self) -> None:
        assert strip_styling("a\x1b[38;2;1;2;3mb\x1b[0m") == "ab"

    def test_malformed_escape_consumes_rest(self) -> None:
        # No terminating letter: the rest of the line belongs to the escape.
        assert strip_styling("ab\x1b[31;") == "ab"

    def test_malformed_escape_stops_at_line_break(self) -> None:
        assert strip_styling("\x1b[31\nhello") == "\nhello"
        assert strip_styling("ok\x1b[\nnext\x1b[1mline") == "ok\nnextline"

    def test_malformed_escape_does_not_shift_next_line(self) -> None:
        assert [c.char for c in iter_cells("x\x1b[9\ny")] == ["x", "\n", "y"]

    def test_no_escape_bytes_left(self) -> None:
        text = "\x1b[1m\x1b[31mred\x1b[39m\x1b[0m and \x1b[4mplain\x1b[24m"
        assert "\x1b" not in strip_styling(text)


# ---------------------------------------------------------------------------
# visual_length
# ---------------------------------------------------------------------------


class TestVisualLength:
    """Measure terminal columns, ignoring escapes."""

    def test_plain_ascii(self) -> None:
        assert visual_length("hello") == 5

    def test_empty_string(self) -> None:
        assert visual_length("") == 0

    def test_escapes_are_zero_width(self) -> None:
        assert visual_length("\x1b[1mhi\x1b[0m") == 2

    def test_long_escape_is_still_zero_width(self) -> None:
        assert visual_length("\x1b[38;2;255;255;255;48;2;0;0;0mx") == 1

    def test_wide_characters_count_two(self) -> None:
        assert visual_length("世") == 2
        assert visual_length("A世B") == 4

    def test_tab_counts_three(self) -> None:
        assert visual_length("\t") == 3

    def test_box_drawing_is_single_width(self) -> None:
        assert visual_length("╭──╮") == 4

    def test_max_line_length(self) -> None:
        assert max_line_length("ab\n\x1b[1mabcd\x1b[0m\nabc") == 4


# ---------------------------------------------------------------------------
# iter_cells
# ---------------------------------------------------------------------------


class TestIterCells:
    """The shared per-cell scanner."""

    def test_plain_columns(self) -> None:
        cells = list(iter_cells("ab"))
        assert cells == [Cell("a", (), 0, 1), Cell("b", (), 1, 1)]

    def test_escapes_attach_to_following_char(self) -> None:
        cells = list(iter_cells("\x1b[1mab"))
        assert cells[0] == Cell("a", ("\x1b[1m",), 0, 1)
        assert cells[1] == Cell("b", (), 1, 1)

    def test_trailing_escapes_yield_empty_cell(self) -> None:
        cells = list(iter_cells("a\x1b[0m"))
        assert cells[-1] == Cell("", ("\x1b[0m",), 1, 0)

    def test_wide_char_advances_two_columns(self) -> None:
        cells = list(iter_cells("世x"))
        assert cells[0].width == 2
        assert cells[1].column == 2

    def test_multiple_escapes_buffered_together(self) -> None:
        cells = list(iter_cells("\x1b[1m\x1b[31mx"))
        assert cells[0].escapes == ("\x1b[1m", "\x1b[31m")


# ---------------------------------------------------------------------------
# AnsiCodeTracker
# ---------------------------------------------------------------------------


class TestAnsiCodeTracker:
    """Track the active SGR state."""

    def test_starts_inactive(self) -> None:
        assert not AnsiCodeTracker().has_active_codes()

    def test_combined_codes(self) -> None:
        tracker = AnsiCodeTracker()
        tracker.process("\x1b[1;31m")
        assert tracker.get_active_codes() == "\x1b[1m\x1b[31m"

    def test_reset_clears(self) -> None:
        tracker = AnsiCodeTracker()
        tracker.process("\x1b[1;31m")
        tracker.process(RESET)
        assert not tracker.has_active_codes()

    def test_truecolor_foreground(self) -> None:
        tracker = AnsiCodeTracker()
        tracker.process("\x1b[38;2;10;20;30m")
        assert tracker.fg_color == "\x1b[38;2;10;20;30m"

    def test_attribute_off(self) -> None:
        tracker = AnsiCodeTracker()
        tracker.process("\x1b[3m")
        tracker.process("\x1b[23m")
        assert not tracker.has_active_codes()

    def test_default_foreground_clears_color(self) -> None:
        tracker = AnsiCodeTracker()
        tracker.process("\x1b[38;5;197m")
        tracker.process("\x1b[39m")
        assert tracker.fg_color is None

    def test_non_sgr_ignored(self) -> None:
        tracker = AnsiCodeTracker()
        tracker.process("\x1b[2K")
        assert not tracker.has_active_codes()


# ---------------------------------------------------------------------------
# wrap_text_with_ansi
# ---------------------------------------------------------------------------


class TestWrapTextWithAnsi:
    """Word wrapping that keeps escapes intact."""

    def test_short_text_single_line(self) -> None:
        assert wrap_text_with_ansi("hello", 10) == ["hello"]

    def test_wraps_at_word_boundary(self) -> None:
        assert wrap_text_with_ansi("hello world", 5) == ["hello", "world"]

    def test_preserves_newlines(self) -> None:
        assert wrap_text_with_ansi("a\nb", 10) == ["a", "b"]

    def test_long_word_is_broken(self) -> None:
        lines = wrap_text_with_ansi("abcdefghij", 4)
        assert lines == ["abcd", "efgh", "ij"]

    def test_styled_lines_are_self_contained(self) -> None:
        lines = wrap_text_with_ansi("\x1b[1mhello world\x1b[0m", 5)
        assert [strip_styling(line) for line in lines] == ["hello", "world"]
        assert lines[0].endswith(RESET)
        assert lines[1].startswith("\x1b[1m")

    def test_lines_fit_width(self) -> None:
        text = "the quick brown fox jumps over the lazy dog " * 3
        for line in wrap_text_with_ansi(text, 12):
            assert visual_length(line) <= 12

    def test_non_positive_width_does_not_wrap(self) -> None:
        assert wrap_text_with_ansi("a b", 0) == ["a b"]


# ---------------------------------------------------------------------------
# truncate_to_width / pad_to_width
# ---------------------------------------------------------------------------


class TestTruncateToWidth:
    """Cut text to a number of columns."""

    def test_short_text_unchanged(self) -> None:
        assert truncate_to_width("hi", 10) == "hi"

    def test_adds_ellipsis(self) -> None:
        assert truncate_to_width("hello world", 8) == "hello..."

    def test_custom_ellipsis(self) -> None:
        assert truncate_to_width("hello world", 5, ellipsis="") == "hello"

    def test_zero_width(self) -> None:
        assert truncate_to_width("hello", 0) == ""

    def test_closes_open_styling(self) -> None:
        result = truncate_to_width("\x1b[31mhello world\x1b[0m", 8)
        assert result == "\x1b[31mhello\x1b[0m..."

    def test_wide_char_not_split(self) -> None:
        result = truncate_to_width("a世世", 4, ellipsis="")
        assert result == "a世"


class TestPadToWidth:
    def test_pads_plain(self) -> None:
        assert pad_to_width("ab", 4) == "ab  "

    def test_ignores_escapes(self) -> None:
        assert pad_to_width("\x1b[1mab\x1b[0m", 3) == "\x1b[1mab\x1b[0m "

    def test_never_truncates(self) -> None:
        assert pad_to_width("abcdef", 3) == "abcdef"
