"""Immutable document tree consumed by the renderer.

Nodes are produced by an external org parser; this module only defines their
shapes.  Block nodes and inline nodes are closed unions of frozen
dataclasses, so the renderer can dispatch on them with ``match``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal, Sequence, Union

BlockKind = Literal["quote", "verse", "center", "code", "example", "generic"]
CheckboxState = Literal["done", "partial", "empty"]
EmphasisKind = Literal["bold", "italic", "underline", "strike", "verbatim", "code"]


# ---------------------------------------------------------------------------
# Inline nodes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PlainText:
    content: str


@dataclass(frozen=True)
class Emphasis:
    kind: EmphasisKind
    children: Sequence[Inline] = ()


@dataclass(frozen=True)
class Link:
    """A link; ``description`` is empty when the URL is shown as-is."""

    url: str
    description: Sequence[Inline] = ()


@dataclass(frozen=True)
class Timestamp:
    instant: datetime
    is_date_only: bool = True
    interval: str | None = None


@dataclass(frozen=True)
class FootnoteReference:
    label: str


@dataclass(frozen=True)
class StatisticToken:
    """A progress cookie such as ``2/5`` or ``40%``."""

    text: str


@dataclass(frozen=True)
class HardLineBreak:
    pass


Inline = Union[
    PlainText,
    Emphasis,
    Link,
    Timestamp,
    FootnoteReference,
    StatisticToken,
    HardLineBreak,
]


# ---------------------------------------------------------------------------
# Block nodes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Heading:
    level: int
    title: Sequence[Inline] = ()
    status: str | None = None
    priority: str | None = None
    tags: Sequence[str] = ()
    children: Sequence[Node] = ()


@dataclass(frozen=True)
class Paragraph:
    children: Sequence[Inline] = ()


@dataclass(frozen=True)
class Block:
    """A ``#+BEGIN_...`` block.

    ``children`` may mix inline and block nodes; verbatim kinds (code,
    verse, example, generic) only use the text of their children.
    """

    kind: BlockKind | str
    children: Sequence[Node | Inline] = ()
    language: str | None = None


@dataclass(frozen=True)
class ListItem:
    marker: str = "-"
    checkbox: CheckboxState | None = None
    children: Sequence[Node] = ()


@dataclass(frozen=True)
class DescriptiveListItem:
    term: Sequence[Inline] = ()
    details: Sequence[Inline] = ()


@dataclass(frozen=True)
class List:
    items: Sequence[ListItem | DescriptiveListItem] = ()


@dataclass(frozen=True)
class TableCell:
    children: Sequence[Inline] = ()


@dataclass(frozen=True)
class TableRow:
    cells: Sequence[TableCell] = ()
    is_separator: bool = False


@dataclass(frozen=True)
class Table:
    rows: Sequence[TableRow] = ()


@dataclass(frozen=True)
class HorizontalRule:
    pass


@dataclass(frozen=True)
class KeyValueDirective:
    """A ``#+KEY: value`` line."""

    key: str
    value: str = ""


@dataclass(frozen=True)
class PropertyBlock:
    properties: Sequence[tuple[str, str]] = ()


@dataclass(frozen=True)
class GenericDrawer:
    name: str
    children: Sequence[Node | Inline] = ()


@dataclass(frozen=True)
class VerbatimExample:
    """Fixed-width ``: text`` lines."""

    lines: Sequence[str] = ()


@dataclass(frozen=True)
class FootnoteDefinition:
    label: str
    children: Sequence[Node | Inline] = ()


Node = Union[
    Heading,
    Paragraph,
    Block,
    List,
    ListItem,
    DescriptiveListItem,
    Table,
    HorizontalRule,
    KeyValueDirective,
    PropertyBlock,
    GenericDrawer,
    VerbatimExample,
    FootnoteDefinition,
]


# ---------------------------------------------------------------------------
# Document
# ---------------------------------------------------------------------------


@dataclass
class Document:
    """A parsed org file: its name, top-level nodes and raw source text."""

    name: str
    nodes: Sequence[Node] = field(default_factory=list)
    raw_content: str = ""

    def _directive(self, key: str) -> str:
        for node in self.nodes:
            if isinstance(node, KeyValueDirective) and node.key.upper() == key:
                return node.value.strip()
        return ""

    @property
    def title(self) -> str:
        title = self._directive("TITLE")
        if title:
            return title
        name = self.name
        if name.lower().endswith(".org"):
            name = name[: -len(".org")]
        return name

    @property
    def author(self) -> str:
        return self._directive("AUTHOR")

    @property
    def date(self) -> str:
        return self._directive("DATE")
