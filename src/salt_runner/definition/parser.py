"""Definition parser: block sequence to ProjectDefinition.

A single forward pass over the top-level blocks of a SALT.md document.
Level-2 headers select the section mode, level-3 headers open documentation
sections, and everything else is interpreted according to the current mode.

Structural anomalies are not errors. A malformed section header or list item
stops the pass and the definition accumulated so far is returned with
``processed`` left False.

Document layout::

    # my project              <- title, ignored
    about paragraph           <- initial mode is ABOUT
    ## Help
    one line summary <!-- comments are dropped -->
    ## Commands
    - build - `go build .` - builds the binary
    ## Options
    - name - my-project
    - type - project
    ### Usage                 <- documentation section
    any blocks...
"""

import logging
from collections.abc import Iterator, Sequence
from enum import Enum
from pathlib import Path

from salt_runner.definition.blocks import (
    Block,
    Code,
    Header,
    Paragraph,
    ParagraphItem,
    Span,
    Text,
    UnorderedList,
)
from salt_runner.definition.models import Command, ProjectDefinition
from salt_runner.definition.tokenizer import tokenize_file

logger = logging.getLogger(__name__)

COMMENT_PREFIX = "<!--"


class ParseMode(Enum):
    """Section the parser is currently reading."""

    ABOUT = "about"
    HELP = "help"
    COMMANDS = "commands"
    OPTIONS = "options"
    DOCS = "docs"


# Lower-cased level-2 header text -> mode
SECTION_MODES: dict[str, ParseMode] = {
    "about": ParseMode.ABOUT,
    "help": ParseMode.HELP,
    "commands": ParseMode.COMMANDS,
    "command": ParseMode.COMMANDS,
    "options": ParseMode.OPTIONS,
    "option": ParseMode.OPTIONS,
}


class _Malformed(Exception):
    """Internal signal that stops the pass."""


def parse(blocks: Sequence[Block]) -> ProjectDefinition:
    """Reduce a block sequence into a project definition.

    Args:
        blocks: Top-level document blocks in order.

    Returns:
        The definition. ``processed`` is True only if every block was
        consumed; otherwise it holds whatever preceded the malformed block.

    """
    definition = ProjectDefinition()
    mode = ParseMode.ABOUT
    doc_section = ""

    for index, block in enumerate(blocks):
        try:
            if isinstance(block, Header):
                if block.level == 1:
                    continue
                if block.level == 2:
                    mode = _section_mode(block)
                    doc_section = ""
                    continue
                if block.level == 3:
                    mode = ParseMode.DOCS
                    doc_section = _doc_title(block)
                    definition.docs.setdefault(doc_section, [])
                    continue

            if mode is ParseMode.DOCS and doc_section:
                definition.docs[doc_section].append(block)
                continue

            if mode is ParseMode.ABOUT and isinstance(block, Paragraph):
                definition.about = _about_text(block.spans)
            elif mode is ParseMode.HELP and isinstance(block, Paragraph):
                help_text = _help_text(block.spans)
                if help_text:
                    definition.help = help_text
            elif mode is ParseMode.COMMANDS and isinstance(block, UnorderedList):
                _read_commands(block, definition)
            elif mode is ParseMode.OPTIONS and isinstance(block, UnorderedList):
                _read_options(block, definition)
        except _Malformed as e:
            logger.debug("Stopped parsing at block %d: %s", index, e)
            return definition

    definition.processed = True
    return definition


def _section_mode(header: Header) -> ParseMode:
    if len(header.spans) != 1:
        raise _Malformed(f"section header has {len(header.spans)} spans")
    span = header.spans[0]
    if not isinstance(span, Text):
        raise _Malformed("section header is not plain text")
    mode = SECTION_MODES.get(span.text.strip().lower())
    if mode is None:
        raise _Malformed(f"unknown section {span.text!r}")
    return mode


def _doc_title(header: Header) -> str:
    title = "".join(s.text for s in header.spans if isinstance(s, (Text, Code))).strip()
    if not title:
        raise _Malformed("documentation header without text")
    return title


def _about_text(spans: Sequence[Span]) -> str:
    return "".join(s.text for s in spans if isinstance(s, (Text, Code)))


def _help_text(spans: Sequence[Span]) -> str:
    parts: list[str] = []
    for span in spans:
        if isinstance(span, Text):
            if span.text.lstrip().startswith(COMMENT_PREFIX):
                continue
            parts.append(span.text)
        elif isinstance(span, Code):
            parts.append(span.text)
    return "".join(parts).strip()


def _item_spans(block: UnorderedList) -> Iterator[tuple[Span, ...]]:
    """Yield the span run of each item.

    Only text and code spans are allowed; a paragraph-style item or any other
    span kind stops the pass.
    """
    for item in block.items:
        if isinstance(item, ParagraphItem):
            raise _Malformed("paragraph list item")
        for span in item.spans:
            if not isinstance(span, (Text, Code)):
                raise _Malformed(f"{type(span).__name__.lower()} span in list item")
        yield item.spans


def _read_commands(block: UnorderedList, definition: ProjectDefinition) -> None:
    for spans in _item_spans(block):
        text_info = "".join(s.text for s in spans if isinstance(s, Text))
        cmd_info = "".join(s.text for s in spans if isinstance(s, Code))
        segments = [part.strip() for part in text_info.split("-")]
        if len(segments) == 1:
            continue
        about = segments[2] if len(segments) > 2 else cmd_info
        definition.commands[segments[0]] = Command(about=about, command=cmd_info)


def _read_options(block: UnorderedList, definition: ProjectDefinition) -> None:
    for spans in _item_spans(block):
        info = "".join(s.text for s in spans if isinstance(s, (Text, Code)))
        segments = [part.strip() for part in info.split("-")]
        if len(segments) == 1:
            continue
        directive = segments[0].lower()
        if directive == "type":
            definition.options.typ = segments[1]
        elif directive == "name":
            definition.options.name = "-".join(segments[1:])


def parse_file(path: Path) -> ProjectDefinition:
    """Tokenize and parse a definition file.

    Args:
        path: Path to a SALT.md file.

    Returns:
        The parsed definition (see :func:`parse`).

    Raises:
        OSError: If the file cannot be read.

    """
    definition = parse(tokenize_file(path))
    if not definition.processed:
        logger.warning("Definition %s is malformed, using the sections before the error", path)
    return definition
