"""Syntax highlighting capability for code blocks.

The renderer accepts any ``(code, language) -> str`` callable.  The default
implementation below uses Pygments with a 256-colour terminal formatter.
"""

from __future__ import annotations

import logging
from typing import Callable

from pygments import highlight
from pygments.formatters import Terminal256Formatter
from pygments.lexer import Lexer
from pygments.lexers import TextLexer, get_lexer_by_name
from pygments.util import ClassNotFound

logger = logging.getLogger(__name__)

SyntaxHighlightFn = Callable[[str, str], str]  # (code, language) -> highlighted

DEFAULT_CODE_STYLE = "monokai"


def get_lexer(language: str) -> Lexer:
    """Return the lexer for *language*, or a plain-text lexer if unknown."""
    try:
        return get_lexer_by_name(language)
    except ClassNotFound:
        logger.debug("No lexer for %r, falling back to plain text", language)
        return TextLexer()


class PygmentsHighlighter:
    """Highlight code with Pygments for a 256-colour terminal."""

    def __init__(self, style: str = DEFAULT_CODE_STYLE) -> None:
        try:
            self._formatter = Terminal256Formatter(style=style)
        except ClassNotFound:
            logger.warning("Unknown code style %r, using %r", style, DEFAULT_CODE_STYLE)
            self._formatter = Terminal256Formatter(style=DEFAULT_CODE_STYLE)
        self.style = style

    def __call__(self, code: str, language: str) -> str:
        if not language:
            return code
        highlighted = highlight(code, get_lexer(language), self._formatter)
        # Pygments always terminates its output with a newline.
        if not code.endswith("\n") and highlighted.endswith("\n"):
            highlighted = highlighted[:-1]
        return highlighted


def plain_highlighter(code: str, language: str) -> str:
    """A highlighter that leaves code untouched."""
    return code
