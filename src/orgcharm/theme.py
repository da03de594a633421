"""Style roles and the theme that maps each role to an apply function.

The renderer never builds escape codes itself: it asks the theme to apply a
:class:`StyleRole` to a piece of text.  Any ``Callable[[str], str]`` can back
a role, so a theme can be plain (identity), truecolor, or something else
entirely.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Mapping

from orgcharm.utils import RESET

StyleFn = Callable[[str], str]


class StyleRole(Enum):
    """Semantic roles the renderer styles independently."""

    HEADING_1 = "heading_1"
    HEADING_2 = "heading_2"
    HEADING_3 = "heading_3"
    HEADING_4 = "heading_4"
    TODO = "todo"
    DONE = "done"
    PRIORITY = "priority"
    TAG = "tag"
    PARAGRAPH = "paragraph"
    LIST_BULLET = "list_bullet"
    LIST_ITEM = "list_item"
    DESC_TERM = "desc_term"
    DESC_SEPARATOR = "desc_separator"
    CHECKBOX_EMPTY = "checkbox_empty"
    CHECKBOX_DONE = "checkbox_done"
    CHECKBOX_PARTIAL = "checkbox_partial"
    BLOCK_HEADER = "block_header"
    CODE_BLOCK = "code_block"
    EXAMPLE = "example"
    QUOTE = "quote"
    VERSE = "verse"
    CENTER = "center"
    TABLE_BORDER = "table_border"
    TABLE_HEADER = "table_header"
    TABLE_CELL = "table_cell"
    BOLD = "bold"
    ITALIC = "italic"
    UNDERLINE = "underline"
    STRIKETHROUGH = "strikethrough"
    VERBATIM = "verbatim"
    INLINE_CODE = "inline_code"
    LINK = "link"
    HRULE = "hrule"
    KEYWORD = "keyword"
    KEYWORD_VALUE = "keyword_value"
    DRAWER_HEADER = "drawer_header"
    PROPERTY = "property"
    TIMESTAMP = "timestamp"
    FOOTNOTE_LABEL = "footnote_label"
    FOOTNOTE_CONTENT = "footnote_content"
    FOOTNOTE_REF = "footnote_ref"
    STATISTICS = "statistics"
    SCHEDULED = "scheduled"
    DEADLINE = "deadline"
    CLOSED = "closed"
    # Viewer chrome
    HEADER = "header"
    STATUS_BAR = "status_bar"
    HELP_KEY = "help_key"
    HELP_TEXT = "help_text"
    HELP_TITLE = "help_title"


HEADING_ROLES: tuple[StyleRole, ...] = (
    StyleRole.HEADING_1,
    StyleRole.HEADING_2,
    StyleRole.HEADING_3,
    StyleRole.HEADING_4,
)


def _identity(text: str) -> str:
    return text


class Theme:
    """Mapping from :class:`StyleRole` to an apply function.

    Roles that are not configured render their text unchanged.
    """

    def __init__(self, styles: Mapping[StyleRole, StyleFn] | None = None) -> None:
        self._styles: dict[StyleRole, StyleFn] = dict(styles or {})

    def apply(self, role: StyleRole, text: str) -> str:
        return self._styles.get(role, _identity)(text)

    def with_style(self, role: StyleRole, fn: StyleFn) -> Theme:
        """Return a copy of this theme with *role* overridden."""
        styles = dict(self._styles)
        styles[role] = fn
        return Theme(styles)


# ---------------------------------------------------------------------------
# Truecolor SGR styles
# ---------------------------------------------------------------------------


def _hex_to_rgb(color: str) -> tuple[int, int, int]:
    color = color.lstrip("#")
    return int(color[0:2], 16), int(color[2:4], 16), int(color[4:6], 16)


@dataclass(frozen=True)
class Style:
    """A small SGR style: colours, attributes and horizontal padding.

    Multi-line text is styled line by line and any reset inside the text
    re-opens this style, so nested styling does not cut the outer one short.
    """

    fg: str | None = None
    bg: str | None = None
    bold: bool = False
    italic: bool = False
    underline: bool = False
    strikethrough: bool = False
    padding_x: int = 0

    def prefix(self) -> str:
        parts: list[str] = []
        if self.bold:
            parts.append("\x1b[1m")
        if self.italic:
            parts.append("\x1b[3m")
        if self.underline:
            parts.append("\x1b[4m")
        if self.strikethrough:
            parts.append("\x1b[9m")
        if self.fg:
            parts.append("\x1b[38;2;{};{};{}m".format(*_hex_to_rgb(self.fg)))
        if self.bg:
            parts.append("\x1b[48;2;{};{};{}m".format(*_hex_to_rgb(self.bg)))
        return "".join(parts)

    def render(self, text: str) -> str:
        if not text:
            return ""
        return "\n".join(self._render_line(line) for line in text.split("\n"))

    def _render_line(self, line: str) -> str:
        pad = " " * self.padding_x
        body = f"{pad}{line}{pad}"
        prefix = self.prefix()
        if not prefix:
            return body
        if not line and not pad:
            return ""
        return prefix + body.replace(RESET, RESET + prefix) + RESET

    def __call__(self, text: str) -> str:
        return self.render(text)


# Tokyo Night palette
COLOR_BG = "#1a1b26"
COLOR_FG = "#c0caf5"
COLOR_SUBTLE = "#565f89"
COLOR_HIGHLIGHT = "#7aa2f7"
COLOR_ACCENT = "#bb9af7"
COLOR_PANEL = "#24283b"
COLOR_CODE_BG = "#1f2335"

COLOR_RED = "#f7768e"
COLOR_GREEN = "#9ece6a"
COLOR_YELLOW = "#e0af68"
COLOR_BLUE = "#7aa2f7"
COLOR_MAGENTA = "#bb9af7"
COLOR_CYAN = "#7dcfff"
COLOR_ORANGE = "#ff9e64"


def default_styles() -> dict[StyleRole, Style]:
    """Return the default truecolor style for every role."""
    r = StyleRole
    return {
        r.HEADING_1: Style(fg=COLOR_RED, bold=True, underline=True),
        r.HEADING_2: Style(fg=COLOR_ORANGE, bold=True),
        r.HEADING_3: Style(fg=COLOR_YELLOW, bold=True),
        r.HEADING_4: Style(fg=COLOR_GREEN),
        r.TODO: Style(fg=COLOR_BG, bg=COLOR_RED, bold=True, padding_x=1),
        r.DONE: Style(fg=COLOR_BG, bg=COLOR_GREEN, bold=True, padding_x=1),
        r.PRIORITY: Style(fg=COLOR_ORANGE, bold=True),
        r.TAG: Style(fg=COLOR_MAGENTA, italic=True),
        r.PARAGRAPH: Style(fg=COLOR_FG),
        r.LIST_BULLET: Style(fg=COLOR_CYAN, bold=True),
        r.LIST_ITEM: Style(fg=COLOR_FG),
        r.DESC_TERM: Style(fg=COLOR_YELLOW, bold=True),
        r.DESC_SEPARATOR: Style(fg=COLOR_SUBTLE, bold=True),
        r.CHECKBOX_EMPTY: Style(fg=COLOR_SUBTLE),
        r.CHECKBOX_DONE: Style(fg=COLOR_GREEN),
        r.CHECKBOX_PARTIAL: Style(fg=COLOR_YELLOW),
        r.BLOCK_HEADER: Style(fg=COLOR_SUBTLE),
        r.CODE_BLOCK: Style(fg=COLOR_FG, bg=COLOR_CODE_BG),
        r.EXAMPLE: Style(fg=COLOR_CYAN, bg=COLOR_CODE_BG),
        r.QUOTE: Style(fg=COLOR_ACCENT, italic=True),
        r.VERSE: Style(fg=COLOR_CYAN, italic=True),
        r.CENTER: Style(fg=COLOR_FG),
        r.TABLE_BORDER: Style(fg=COLOR_SUBTLE),
        r.TABLE_HEADER: Style(fg=COLOR_HIGHLIGHT, bg=COLOR_PANEL, bold=True),
        r.TABLE_CELL: Style(fg=COLOR_FG),
        r.BOLD: Style(fg="#ffffff", bold=True),
        r.ITALIC: Style(fg=COLOR_CYAN, italic=True),
        r.UNDERLINE: Style(fg=COLOR_YELLOW, underline=True),
        r.STRIKETHROUGH: Style(fg=COLOR_SUBTLE, strikethrough=True),
        r.VERBATIM: Style(fg=COLOR_GREEN, bg=COLOR_CODE_BG),
        r.INLINE_CODE: Style(fg=COLOR_ORANGE, bg=COLOR_PANEL),
        r.LINK: Style(fg=COLOR_BLUE, underline=True),
        r.HRULE: Style(fg=COLOR_SUBTLE),
        r.KEYWORD: Style(fg=COLOR_MAGENTA),
        r.KEYWORD_VALUE: Style(fg=COLOR_FG),
        r.DRAWER_HEADER: Style(fg=COLOR_SUBTLE, italic=True),
        r.PROPERTY: Style(fg=COLOR_SUBTLE),
        r.TIMESTAMP: Style(fg=COLOR_CYAN, bg=COLOR_PANEL, padding_x=1),
        r.FOOTNOTE_LABEL: Style(fg=COLOR_YELLOW, bg=COLOR_PANEL, bold=True, padding_x=1),
        r.FOOTNOTE_CONTENT: Style(fg=COLOR_FG, italic=True),
        r.FOOTNOTE_REF: Style(fg=COLOR_YELLOW, bold=True),
        r.STATISTICS: Style(fg=COLOR_GREEN, bold=True),
        r.SCHEDULED: Style(fg=COLOR_GREEN, bold=True),
        r.DEADLINE: Style(fg=COLOR_RED, bold=True),
        r.CLOSED: Style(fg=COLOR_SUBTLE, italic=True),
        r.HEADER: Style(fg=COLOR_HIGHLIGHT, bg=COLOR_PANEL, bold=True, padding_x=2),
        r.STATUS_BAR: Style(fg=COLOR_FG, bg=COLOR_HIGHLIGHT, padding_x=1),
        r.HELP_KEY: Style(fg=COLOR_HIGHLIGHT, bold=True),
        r.HELP_TEXT: Style(fg=COLOR_SUBTLE),
        r.HELP_TITLE: Style(fg=COLOR_HIGHLIGHT, bold=True),
    }


def default_theme() -> Theme:
    """The built-in truecolor theme."""
    return Theme(default_styles())


def plain_theme() -> Theme:
    """A theme that applies no styling at all."""
    return Theme()
