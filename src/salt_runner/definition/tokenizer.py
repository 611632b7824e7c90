"""Markdown to block-tree tokenizer.

Thin adapter over mistune's AST renderer. Mistune yields nested dict tokens;
this module folds them into the frozen block/span types from
:mod:`salt_runner.definition.blocks` so the parser stays independent of the
markdown library.
"""

import logging
from pathlib import Path
from typing import Any

import mistune

from salt_runner.definition.blocks import (
    Block,
    Blockquote,
    Break,
    Code,
    CodeBlock,
    Emphasis,
    Header,
    Hr,
    Image,
    Link,
    ListItem,
    OrderedList,
    Paragraph,
    ParagraphItem,
    Raw,
    SimpleItem,
    Span,
    Strong,
    Text,
    UnorderedList,
    plain_text,
)

logger = logging.getLogger(__name__)

_markdown = mistune.create_markdown(renderer=None)


def tokenize(source: str) -> list[Block]:
    """Tokenize markdown source into a flat sequence of top-level blocks.

    Args:
        source: Markdown document text.

    Returns:
        Top-level blocks in document order. Blank lines are dropped.

    """
    tokens: list[dict[str, Any]] = _markdown(source)  # type: ignore[assignment]
    return _convert_blocks(tokens)


def tokenize_file(path: Path) -> list[Block]:
    """Read and tokenize a markdown file (UTF-8)."""
    return tokenize(path.read_text(encoding="utf-8"))


def _convert_blocks(tokens: list[dict[str, Any]]) -> list[Block]:
    blocks: list[Block] = []
    for token in tokens:
        block = _convert_block(token)
        if block is not None:
            blocks.append(block)
    return blocks


def _convert_block(token: dict[str, Any]) -> Block | None:
    kind = token["type"]
    children = token.get("children", [])

    if kind == "heading":
        return Header(spans=_convert_spans(children), level=token["attrs"]["level"])
    if kind in ("paragraph", "block_text"):
        return Paragraph(spans=_convert_spans(children))
    if kind == "block_quote":
        return Blockquote(blocks=tuple(_convert_blocks(children)))
    if kind == "block_code":
        info = token.get("attrs", {}).get("info") or None
        return CodeBlock(code=token.get("raw", ""), lang=info)
    if kind == "list":
        attrs = token.get("attrs", {})
        items = tuple(_convert_item(child) for child in children)
        if attrs.get("ordered"):
            return OrderedList(items=items, start=attrs.get("start", 1))
        return UnorderedList(items=items)
    if kind == "block_html":
        return Raw(html=token.get("raw", ""))
    if kind == "thematic_break":
        return Hr()
    if kind != "blank_line":
        logger.debug("Dropping unsupported block token: %s", kind)
    return None


def _convert_item(token: dict[str, Any]) -> ListItem:
    """Tight single-run items become SimpleItem, anything else ParagraphItem."""
    children = token.get("children", [])
    if len(children) == 1 and children[0]["type"] == "block_text":
        return SimpleItem(spans=_convert_spans(children[0].get("children", [])))
    return ParagraphItem(blocks=tuple(_convert_blocks(children)))


def _convert_spans(tokens: list[dict[str, Any]]) -> tuple[Span, ...]:
    spans: list[Span] = []
    # Mistune splits plain text at arbitrary points; adjacent runs are joined
    # so that one visible text run is one Text span.
    pending: list[str] = []

    def flush() -> None:
        if pending:
            spans.append(Text("".join(pending)))
            pending.clear()

    for token in tokens:
        kind = token["type"]
        if kind == "text":
            pending.append(token.get("raw", ""))
            continue
        if kind == "softbreak":
            pending.append(" ")
            continue

        flush()
        if kind == "codespan":
            spans.append(Code(token.get("raw", "")))
        elif kind == "linebreak":
            spans.append(Break())
        elif kind == "inline_html":
            spans.append(Text(token.get("raw", "")))
        elif kind == "emphasis":
            spans.append(Emphasis(children=_convert_spans(token.get("children", []))))
        elif kind == "strong":
            spans.append(Strong(children=_convert_spans(token.get("children", []))))
        elif kind == "link":
            attrs = token.get("attrs", {})
            spans.append(
                Link(
                    children=_convert_spans(token.get("children", [])),
                    url=attrs.get("url", ""),
                    title=attrs.get("title"),
                )
            )
        elif kind == "image":
            attrs = token.get("attrs", {})
            alt = plain_text(_convert_spans(token.get("children", [])))
            spans.append(Image(alt=alt, url=attrs.get("url", ""), title=attrs.get("title")))
        elif "children" in token:
            spans.extend(_convert_spans(token["children"]))
        elif "raw" in token:
            spans.append(Text(token["raw"]))
    flush()
    return tuple(spans)
