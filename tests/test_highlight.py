"""Tests for orgcharm.highlight -- Pygments-backed code highlighting."""

from __future__ import annotations

from pygments.lexers import TextLexer

from orgcharm.highlight import PygmentsHighlighter, get_lexer, plain_highlighter
from orgcharm.utils import strip_styling


class TestPygmentsHighlighter:
    def test_known_language_is_coloured(self) -> None:
        code = "def f(x):\n    return x"
        out = PygmentsHighlighter()(code, "python")
        assert "\x1b[" in out
        assert strip_styling(out) == code

    def test_unknown_language_keeps_text(self) -> None:
        code = "just some words"
        out = PygmentsHighlighter()(code, "definitely-not-a-language")
        assert strip_styling(out) == code

    def test_empty_language_returns_code_unchanged(self) -> None:
        assert PygmentsHighlighter()("x = 1", "") == "x = 1"

    def test_trailing_newline_preserved(self) -> None:
        out = PygmentsHighlighter()("x = 1\n", "python")
        assert strip_styling(out) == "x = 1\n"

    def test_unknown_style_falls_back(self) -> None:
        highlighter = PygmentsHighlighter(style="no-such-style")
        assert strip_styling(highlighter("x = 1", "python")) == "x = 1"


class TestHelpers:
    def test_get_lexer_fallback(self) -> None:
        assert isinstance(get_lexer("no-such-language"), TextLexer)

    def test_plain_highlighter(self) -> None:
        assert plain_highlighter("a\tb", "go") == "a\tb"
