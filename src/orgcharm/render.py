"""Rendering engine: document tree to escape-coded terminal text.

:class:`Renderer` walks a tree of :mod:`orgcharm.nodes` and produces a single
styled string for a given content width.  Rendering is a pure function of the
nodes, the width, the :class:`~orgcharm.theme.Theme` and the highlighter; the
renderer holds no per-render state, so one instance can serve many views.
"""

from __future__ import annotations

import logging
from typing import Sequence, get_args

from orgcharm.highlight import PygmentsHighlighter, SyntaxHighlightFn
from orgcharm.nodes import (
    Block,
    DescriptiveListItem,
    Emphasis,
    FootnoteDefinition,
    FootnoteReference,
    GenericDrawer,
    HardLineBreak,
    Heading,
    HorizontalRule,
    Inline,
    KeyValueDirective,
    Link,
    List,
    ListItem,
    Node,
    Paragraph,
    PlainText,
    PropertyBlock,
    StatisticToken,
    Table,
    TableRow,
    Timestamp,
    VerbatimExample,
)
from orgcharm.theme import HEADING_ROLES, StyleRole, Theme, default_theme
from orgcharm.utils import (
    TAB_WIDTH,
    pad_to_width,
    truncate_to_width,
    visual_length,
    wrap_text_with_ansi,
)

logger = logging.getLogger(__name__)

_INLINE_TYPES = get_args(Inline)

HEADING_MARKER = "★"
BULLET = "•"
HRULE_CHAR = "─"

MIN_COLUMN_WIDTH = 3
LINK_MAX_LENGTH = 40

# Directives that only carry document metadata.
HIDDEN_KEYWORDS = frozenset({"TITLE", "AUTHOR", "DATE", "OPTIONS"})

PLANNING_KEYWORDS: tuple[tuple[str, StyleRole], ...] = (
    ("SCHEDULED:", StyleRole.SCHEDULED),
    ("DEADLINE:", StyleRole.DEADLINE),
    ("CLOSED:", StyleRole.CLOSED),
)

WEEKDAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")

_EMPHASIS_ROLES: dict[str, StyleRole] = {
    "bold": StyleRole.BOLD,
    "italic": StyleRole.ITALIC,
    "underline": StyleRole.UNDERLINE,
    "strike": StyleRole.STRIKETHROUGH,
    "verbatim": StyleRole.VERBATIM,
    "code": StyleRole.INLINE_CODE,
}

_CHECKBOXES: dict[str, tuple[str, StyleRole]] = {
    "done": ("[✓]", StyleRole.CHECKBOX_DONE),
    "partial": ("[~]", StyleRole.CHECKBOX_PARTIAL),
    "empty": ("[ ]", StyleRole.CHECKBOX_EMPTY),
}

# Horizontal space taken by the frame around each kind of box.
PARAGRAPH_MARGIN = 4
BOX_MARGIN = 6
QUOTE_MARGIN = 8
CODE_BORDER_MARGIN = 8

# Border glyphs: (left, mid, right)
_TABLE_TOP = ("╭", "┬", "╮")
_TABLE_MID = ("├", "┼", "┤")
_TABLE_BOTTOM = ("╰", "┴", "╯")


# ---------------------------------------------------------------------------
# Text helpers
# ---------------------------------------------------------------------------


def is_timestamp_shape(content: str) -> bool:
    """Return True if *content* starts with a ``dddd-dd-dd`` date shape.

    Only the shape is checked; ``9999-99-99`` is accepted.
    """
    if len(content) < 10:
        return False
    for i, ch in enumerate(content[:10]):
        if i in (4, 7):
            if ch != "-":
                return False
        elif not ("0" <= ch <= "9"):
            return False
    return True


def _collect_text(children: Sequence[Node | Inline], parts: list[str]) -> None:
    for child in children:
        match child:
            case PlainText(content=content):
                parts.append(content)
            case HardLineBreak():
                parts.append("\n")
            case Paragraph(children=inner) | Emphasis(children=inner):
                _collect_text(inner, parts)
            case VerbatimExample(lines=lines):
                parts.append("\n".join(lines))
            case _:
                pass


def extract_text(children: Sequence[Node | Inline]) -> str:
    """Concatenate the raw text of *children*, minus one trailing newline."""
    parts: list[str] = []
    _collect_text(children, parts)
    text = "".join(parts)
    if text.endswith("\n"):
        text = text[:-1]
    return text


def column_widths(rows: Sequence[Sequence[str] | None]) -> list[int]:
    """Compute table column widths from rendered cell contents.

    ``None`` marks a separator row and is ignored.  Each column is as wide as
    its widest cell, but never narrower than :data:`MIN_COLUMN_WIDTH`.
    """
    widths: list[int] = []
    for row in rows:
        if row is None:
            continue
        for i, cell in enumerate(row):
            width = max(MIN_COLUMN_WIDTH, visual_length(cell))
            if i >= len(widths):
                widths.append(width)
            elif width > widths[i]:
                widths[i] = width
    return widths


def link_icon(url: str) -> str:
    if url.startswith(("http://", "https://")):
        return "🔗"
    if url.startswith("file:"):
        return "📄"
    if url.startswith("mailto:"):
        return "📧"
    if url.endswith(".org"):
        return "📝"
    return "→"


# ---------------------------------------------------------------------------
# Renderer
# ---------------------------------------------------------------------------


class Renderer:
    """Renders document nodes to styled text.

    Args:
        theme: Role to style mapping; defaults to :func:`default_theme`.
        highlighter: ``(code, language) -> str`` used for code blocks;
            defaults to a :class:`PygmentsHighlighter`.
    """

    def __init__(
        self,
        theme: Theme | None = None,
        highlighter: SyntaxHighlightFn | None = None,
    ) -> None:
        self.theme = theme or default_theme()
        self.highlighter = highlighter or PygmentsHighlighter()

    def _style(self, role: StyleRole, text: str) -> str:
        return self.theme.apply(role, text)

    # -- block dispatch -----------------------------------------------------

    def render(self, nodes: Sequence[Node], width: int) -> str:
        """Render *nodes* at *width* columns, one line break after each."""
        parts: list[str] = []
        for node in nodes:
            rendered = self.render_node(node, width)
            if rendered:
                parts.append(rendered)
                parts.append("\n")
        return "".join(parts)

    def render_node(self, node: Node, width: int) -> str:
        match node:
            case Heading():
                return self._render_heading(node, width)
            case Block():
                return self._render_block(node, width)
            case Paragraph(children=children):
                return self._box(self.render_inlines(children), width - PARAGRAPH_MARGIN, StyleRole.PARAGRAPH)
            case List():
                return self._render_list(node, 0, width)
            case ListItem():
                return self._render_list_item(node, 0, width)
            case DescriptiveListItem():
                return self._render_descriptive_item(node, 0)
            case Table():
                return self._render_table(node)
            case HorizontalRule():
                return self._style(StyleRole.HRULE, HRULE_CHAR * max(0, width - PARAGRAPH_MARGIN))
            case KeyValueDirective():
                return self._render_keyword(node)
            case PropertyBlock():
                return self._render_properties(node)
            case GenericDrawer():
                return self._render_drawer(node, width)
            case VerbatimExample(lines=lines):
                return self._box("\n".join(lines), width - BOX_MARGIN, StyleRole.EXAMPLE, pad_x=2)
            case FootnoteDefinition():
                return self._render_footnote_definition(node, width)
            case _:
                logger.debug("Skipping unsupported node %s", type(node).__name__)
                return ""

    # -- width-bounded boxes ------------------------------------------------

    def _box(
        self,
        text: str,
        width: int,
        role: StyleRole,
        *,
        pad_x: int = 0,
        prefix: str = "",
        center: bool = False,
    ) -> str:
        """Wrap *text* into a box exactly *width* columns wide, styled per line."""
        width = max(1, width)
        if width - 2 * pad_x - visual_length(prefix) < 1:
            pad_x = 0
            prefix = ""
        inner = width - 2 * pad_x - visual_length(prefix)
        pad = " " * pad_x

        lines: list[str] = []
        for line in wrap_text_with_ansi(text.replace("\t", " " * TAB_WIDTH), inner):
            if center:
                left = max(0, inner - visual_length(line)) // 2
                line = " " * left + line
            lines.append(self._style(role, prefix + pad + pad_to_width(line, inner) + pad))
        return "\n".join(lines)

    # -- headings -----------------------------------------------------------

    def _render_heading(self, heading: Heading, width: int) -> str:
        stars = HEADING_MARKER * heading.level
        title = self.render_inlines(heading.title)

        status = ""
        if heading.status:
            role = StyleRole.DONE if heading.status == "DONE" else StyleRole.TODO
            status = self._style(role, heading.status) + " "

        priority = ""
        if heading.priority:
            priority = self._style(StyleRole.PRIORITY, f"[#{heading.priority}]") + " "

        tags = ""
        if heading.tags:
            tags = " " + self._style(StyleRole.TAG, ":" + ":".join(heading.tags) + ":")

        role = HEADING_ROLES[min(max(heading.level, 1), len(HEADING_ROLES)) - 1]
        parts = [self._style(role, f"{stars} {status}{priority}{title}{tags}"), "\n"]

        for child in heading.children:
            rendered = self.render_node(child, width)
            if rendered:
                parts.append(rendered)
                parts.append("\n")
        return "".join(parts)

    # -- blocks -------------------------------------------------------------

    def _render_block(self, block: Block, width: int) -> str:
        kind = block.kind.lower()
        if kind == "code":
            return self._render_code_block(block, width)
        if kind == "quote":
            return self._mixed_box(block.children, width - QUOTE_MARGIN, StyleRole.QUOTE, prefix="┃ ")
        if kind == "center":
            return self._mixed_box(block.children, width - BOX_MARGIN, StyleRole.CENTER, center=True)
        if kind == "verse":
            return self._box(extract_text(block.children), width - BOX_MARGIN, StyleRole.VERSE, pad_x=2)
        if kind == "example":
            return self._box(extract_text(block.children), width - BOX_MARGIN, StyleRole.EXAMPLE, pad_x=2)
        return self._box(extract_text(block.children), width - BOX_MARGIN, StyleRole.CODE_BLOCK, pad_x=2)

    def _render_code_block(self, block: Block, width: int) -> str:
        code = extract_text(block.children)
        language = block.language or ""
        highlighted = self._highlight(code, language)

        fill = max(0, width - CODE_BORDER_MARGIN)
        label = ""
        if language and fill > 1:
            label = truncate_to_width(f" {language} ", fill - 1, ellipsis="")
        if label:
            top = "┌─" + label + "─" * max(0, fill - 1 - visual_length(label)) + "┐"
        else:
            top = "┌" + "─" * fill + "┐"
        bottom = "└" + "─" * fill + "┘"

        body = self._box(highlighted, width - BOX_MARGIN, StyleRole.CODE_BLOCK, pad_x=2)
        return "\n".join(
            [self._style(StyleRole.BLOCK_HEADER, top), body, self._style(StyleRole.BLOCK_HEADER, bottom)]
        )

    def _highlight(self, code: str, language: str) -> str:
        try:
            return self.highlighter(code, language)
        except Exception:
            logger.warning("Highlighter failed for language %r", language, exc_info=True)
            return code

    def _mixed_pieces(self, children: Sequence[Node | Inline], width: int) -> list[tuple[bool, str]]:
        """Split mixed children into ``(is_block, text)`` pieces.

        Inline runs and paragraphs come back as unwrapped text.  Block nodes
        are rendered at *width*, which must already be the narrowed width
        they will be shown at.
        """
        pieces: list[tuple[bool, str]] = []
        run: list[str] = []
        for child in children:
            if isinstance(child, _INLINE_TYPES):
                run.append(self.render_inline(child))
                continue
            if run:
                pieces.append((False, "".join(run)))
                run = []
            if isinstance(child, Paragraph):
                pieces.append((False, self.render_inlines(child.children)))
            else:
                rendered = self.render_node(child, width)
                if rendered:
                    pieces.append((True, rendered.removesuffix("\n")))
        if run:
            pieces.append((False, "".join(run)))
        return pieces

    def _render_mixed(self, children: Sequence[Node | Inline], width: int) -> str:
        """Render a mix of inline runs and block nodes, blocks on their own lines."""
        return "\n".join(text for _, text in self._mixed_pieces(children, width))

    def _mixed_box(
        self,
        children: Sequence[Node | Inline],
        width: int,
        role: StyleRole,
        *,
        prefix: str = "",
        center: bool = False,
    ) -> str:
        """Box mixed content: inline runs are wrapped, nested blocks are laid out once."""
        width = max(1, width)
        if width - visual_length(prefix) < 1:
            prefix = ""
        inner = width - visual_length(prefix)

        lines: list[str] = []
        for is_block, text in self._mixed_pieces(children, inner):
            if not is_block:
                lines.append(self._box(text, width, role, prefix=prefix, center=center))
                continue
            for line in text.split("\n"):
                if center:
                    line = " " * max(0, (inner - visual_length(line)) // 2) + line
                lines.append(self._style(role, prefix + pad_to_width(line, inner)))
        return "\n".join(lines)

    # -- lists --------------------------------------------------------------

    def _render_list(self, lst: List, indent: int, width: int) -> str:
        parts: list[str] = []
        for item in lst.items:
            if isinstance(item, ListItem):
                parts.append(self._render_list_item(item, indent, width))
            elif isinstance(item, DescriptiveListItem):
                parts.append(self._render_descriptive_item(item, indent))
            else:
                continue
            parts.append("\n")
        return "".join(parts)

    def _render_list_item(self, item: ListItem, indent: int, width: int) -> str:
        bullet = BULLET
        if any(ch.isdigit() for ch in item.marker):
            bullet = item.marker

        checkbox = ""
        if item.checkbox in _CHECKBOXES:
            glyph, role = _CHECKBOXES[item.checkbox]
            checkbox = self._style(role, glyph) + " "

        content: list[str] = []
        nested: list[str] = []
        for child in item.children:
            match child:
                case Paragraph(children=inlines):
                    content.append(self.render_inlines(inlines))
                case List():
                    nested.append("\n" + self._render_list(child, indent + 1, width).removesuffix("\n"))
                case _:
                    content.append(self.render_node(child, width))

        return (
            "  " * indent
            + self._style(StyleRole.LIST_BULLET, bullet)
            + " "
            + checkbox
            + self._style(StyleRole.LIST_ITEM, "".join(content))
            + "".join(nested)
        )

    def _render_descriptive_item(self, item: DescriptiveListItem, indent: int) -> str:
        term = self.render_inlines(item.term)
        details = self.render_inlines(item.details)
        return (
            "  " * indent
            + self._style(StyleRole.LIST_BULLET, BULLET)
            + " "
            + self._style(StyleRole.DESC_TERM, term)
            + " "
            + self._style(StyleRole.DESC_SEPARATOR, "::")
            + " "
            + self._style(StyleRole.LIST_ITEM, details)
        )

    # -- tables -------------------------------------------------------------

    def _table_cells(self, rows: Sequence[TableRow]) -> list[list[str] | None]:
        cells: list[list[str] | None] = []
        for row in rows:
            if row.is_separator:
                cells.append(None)
            else:
                cells.append([self.render_inlines(cell.children).replace("\n", " ") for cell in row.cells])
        return cells

    def table_column_widths(self, table: Table) -> list[int]:
        return column_widths(self._table_cells(table.rows))

    def _render_table(self, table: Table) -> str:
        if not table.rows:
            return ""

        rows = self._table_cells(table.rows)
        widths = column_widths(rows)
        if not widths:
            return ""

        def border(glyphs: tuple[str, str, str]) -> str:
            left, mid, right = glyphs
            line = left + mid.join("─" * (w + 2) for w in widths) + right
            return self._style(StyleRole.TABLE_BORDER, line)

        has_header = len(table.rows) > 1 and table.rows[1].is_separator
        bar = self._style(StyleRole.TABLE_BORDER, "│")

        lines = [border(_TABLE_TOP)]
        for index, row in enumerate(rows):
            if row is None:
                lines.append(border(_TABLE_MID))
                continue
            role = StyleRole.TABLE_HEADER if index == 0 and has_header else StyleRole.TABLE_CELL
            padded = row + [""] * (len(widths) - len(row))
            cells = [self._style(role, f" {pad_to_width(text, w)} ") for text, w in zip(padded, widths)]
            lines.append(bar + bar.join(cells) + bar)
        lines.append(border(_TABLE_BOTTOM))
        return "\n".join(lines)

    # -- directives, drawers, footnotes ------------------------------------

    def _render_keyword(self, kw: KeyValueDirective) -> str:
        if kw.key.upper() in HIDDEN_KEYWORDS:
            return ""
        return self._style(StyleRole.KEYWORD, f"#+{kw.key}: ") + self._style(StyleRole.KEYWORD_VALUE, kw.value)

    def _render_properties(self, block: PropertyBlock) -> str:
        lines = [self._style(StyleRole.DRAWER_HEADER, ":PROPERTIES:")]
        for key, value in block.properties:
            lines.append(self._style(StyleRole.PROPERTY, f":{key}: {value}"))
        lines.append(self._style(StyleRole.DRAWER_HEADER, ":END:"))
        return "\n".join(lines)

    def _render_drawer(self, drawer: GenericDrawer, width: int) -> str:
        return "\n".join(
            [
                self._style(StyleRole.DRAWER_HEADER, f":{drawer.name}:"),
                self._render_mixed(drawer.children, width),
                self._style(StyleRole.DRAWER_HEADER, ":END:"),
            ]
        )

    def _render_footnote_definition(self, footnote: FootnoteDefinition, width: int) -> str:
        label = self._style(StyleRole.FOOTNOTE_LABEL, f"[{footnote.label}]")
        content = self._render_mixed(footnote.children, width - visual_length(label) - 1)
        return label + " " + self._style(StyleRole.FOOTNOTE_CONTENT, content)

    # -- inline -------------------------------------------------------------

    def render_inlines(self, nodes: Sequence[Inline]) -> str:
        return "".join(self.render_inline(node) for node in nodes)

    def render_inline(self, node: Inline) -> str:
        match node:
            case PlainText(content=content):
                return self.render_text(content)
            case Emphasis(kind=kind, children=children):
                content = self.render_inlines(children)
                role = _EMPHASIS_ROLES.get(kind)
                return self._style(role, content) if role else content
            case Link():
                return self._render_link(node)
            case Timestamp():
                return self._render_timestamp(node)
            case FootnoteReference(label=label):
                return self._style(StyleRole.FOOTNOTE_REF, f"[{label}]")
            case StatisticToken(text=text):
                return self._style(StyleRole.STATISTICS, f"[{text}]")
            case HardLineBreak():
                return "\n"
            case _:
                logger.debug("Skipping unsupported inline node %s", type(node).__name__)
                return ""

    def render_text(self, content: str) -> str:
        """Render plain text, styling planning keywords and bracketed dates."""
        for keyword, role in PLANNING_KEYWORDS:
            if content.startswith(keyword):
                rest = content[len(keyword) :]
                return self._style(role, keyword) + self.render_inactive_timestamps(rest)
            if content.startswith(" " + keyword):
                rest = content[len(keyword) + 1 :]
                return " " + self._style(role, keyword) + self.render_inactive_timestamps(rest)
        return self.render_inactive_timestamps(content)

    def render_inactive_timestamps(self, content: str) -> str:
        """Style every ``[dddd-dd-dd ...]`` segment; other brackets pass through.

        A bracket closes at the first ``]`` after its ``[``.
        """
        result: list[str] = []
        remaining = content
        while True:
            start = remaining.find("[")
            if start == -1:
                break
            end = remaining.find("]", start)
            if end == -1:
                break

            inner = remaining[start + 1 : end]
            if is_timestamp_shape(inner):
                result.append(remaining[:start])
                result.append(self._style(StyleRole.TIMESTAMP, f"[{inner}]"))
            else:
                result.append(remaining[: end + 1])
            remaining = remaining[end + 1 :]

        result.append(remaining)
        return "".join(result)

    def _render_link(self, link: Link) -> str:
        text = self.render_inlines(link.description) if link.description else link.url
        display = truncate_to_width(text, LINK_MAX_LENGTH)
        return self._style(StyleRole.LINK, f"{link_icon(link.url)} {display}")

    def _render_timestamp(self, ts: Timestamp) -> str:
        instant = ts.instant
        formatted = f"{instant:%Y-%m-%d} {WEEKDAYS[instant.weekday()]}"
        if not ts.is_date_only:
            formatted += f" {instant:%H:%M}"
        if ts.interval:
            formatted += f" {ts.interval}"
        return self._style(StyleRole.TIMESTAMP, "📅 " + formatted)


def render(
    nodes: Sequence[Node],
    width: int,
    theme: Theme | None = None,
    highlighter: SyntaxHighlightFn | None = None,
) -> str:
    """Render *nodes* at *width* columns with a one-off :class:`Renderer`."""
    return Renderer(theme, highlighter).render(nodes, width)
