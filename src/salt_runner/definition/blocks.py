"""Block and span tree for definition documents.

The parser never looks at markdown text directly. It consumes a flat sequence
of block nodes, each carrying inline spans, produced by the tokenizer. Nested
content (blockquotes, paragraph-style list items) is kept as child blocks and
is only re-interpreted by renderers.
"""

from dataclasses import dataclass
from typing import Union

# =============================================================================
# Inline spans
# =============================================================================


@dataclass(frozen=True)
class Text:
    """Plain text run."""

    text: str


@dataclass(frozen=True)
class Code:
    """Inline code run (backtick-delimited)."""

    text: str


@dataclass(frozen=True)
class Break:
    """Hard line break."""


@dataclass(frozen=True)
class Link:
    """Hyperlink with its own inline content."""

    children: tuple["Span", ...]
    url: str
    title: str | None = None


@dataclass(frozen=True)
class Image:
    """Inline image."""

    alt: str
    url: str
    title: str | None = None


@dataclass(frozen=True)
class Emphasis:
    """Emphasised inline content."""

    children: tuple["Span", ...]


@dataclass(frozen=True)
class Strong:
    """Strongly emphasised inline content."""

    children: tuple["Span", ...]


Span = Union[Text, Code, Break, Link, Image, Emphasis, Strong]


def plain_text(spans: tuple[Span, ...] | list[Span]) -> str:
    """Flatten spans to their visible text, recursing into containers."""
    parts: list[str] = []
    for span in spans:
        if isinstance(span, (Text, Code)):
            parts.append(span.text)
        elif isinstance(span, Break):
            parts.append("\n")
        elif isinstance(span, (Link, Emphasis, Strong)):
            parts.append(plain_text(span.children))
        elif isinstance(span, Image):
            parts.append(span.alt)
    return "".join(parts)


# =============================================================================
# List items
# =============================================================================


@dataclass(frozen=True)
class SimpleItem:
    """Tight list item holding a single run of spans."""

    spans: tuple[Span, ...]


@dataclass(frozen=True)
class ParagraphItem:
    """Loose list item holding nested blocks."""

    blocks: tuple["Block", ...]


ListItem = Union[SimpleItem, ParagraphItem]

# =============================================================================
# Blocks
# =============================================================================


@dataclass(frozen=True)
class Header:
    """Heading of a given level (1-6)."""

    spans: tuple[Span, ...]
    level: int


@dataclass(frozen=True)
class Paragraph:
    """Paragraph of inline spans."""

    spans: tuple[Span, ...]


@dataclass(frozen=True)
class Blockquote:
    """Quoted blocks."""

    blocks: tuple["Block", ...]


@dataclass(frozen=True)
class CodeBlock:
    """Fenced or indented code block."""

    code: str
    lang: str | None = None


@dataclass(frozen=True)
class OrderedList:
    """Numbered list."""

    items: tuple[ListItem, ...]
    start: int = 1


@dataclass(frozen=True)
class UnorderedList:
    """Bulleted list."""

    items: tuple[ListItem, ...]


@dataclass(frozen=True)
class Raw:
    """Raw HTML block."""

    html: str


@dataclass(frozen=True)
class Hr:
    """Thematic break."""


Block = Union[Header, Paragraph, Blockquote, CodeBlock, OrderedList, UnorderedList, Raw, Hr]
