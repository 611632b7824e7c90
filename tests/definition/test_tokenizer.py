"""Tests for salt_runner.definition.tokenizer and end-to-end SALT.md parsing."""

from pathlib import Path

from salt_runner.definition import parse, parse_file, tokenize
from salt_runner.definition.blocks import (
    Code,
    CodeBlock,
    Header,
    OrderedList,
    Paragraph,
    ParagraphItem,
    SimpleItem,
    Text,
    UnorderedList,
)

SALT_MD = """\
# my-cool-app

A tiny web service.

## Help

serve and build my-cool-app <!-- shown in salt's project list -->

## Commands

- build - `go build .` - builds the binary
- serve - `[PORT=8080] go run .`
- a plain note

## Options

- name - my-cool-app
- type - service

### Getting started

Install Go first.

```sh
salt my-cool-app serve
```

### FAQ

1. Why?
2. Because.
"""


class TestTokenize:
    """Markdown to block tree."""

    def test_headers_and_paragraphs(self) -> None:
        blocks = tokenize("# Title\n\nSome about text.\n\n## About\n")

        assert blocks == [
            Header(spans=(Text("Title"),), level=1),
            Paragraph(spans=(Text("Some about text."),)),
            Header(spans=(Text("About"),), level=2),
        ]

    def test_inline_code_is_a_code_span(self) -> None:
        (block,) = tokenize("run `make all` now\n")

        assert block == Paragraph(spans=(Text("run "), Code("make all"), Text(" now")))

    def test_tight_list_items_are_simple(self) -> None:
        (block,) = tokenize("- build - `go build .` - builds\n- b\n")

        assert isinstance(block, UnorderedList)
        assert block.items[0] == SimpleItem(
            spans=(Text("build - "), Code("go build ."), Text(" - builds"))
        )
        assert block.items[1] == SimpleItem(spans=(Text("b"),))

    def test_loose_list_items_are_paragraph_items(self) -> None:
        (block,) = tokenize("- one\n\n- two\n")

        assert isinstance(block, UnorderedList)
        assert all(isinstance(item, ParagraphItem) for item in block.items)

    def test_ordered_list(self) -> None:
        (block,) = tokenize("1. a\n2. b\n")

        assert isinstance(block, OrderedList)
        assert len(block.items) == 2

    def test_fenced_code_block(self) -> None:
        (block,) = tokenize("```sh\nmake\n```\n")

        assert isinstance(block, CodeBlock)
        assert block.lang == "sh"
        assert block.code.strip() == "make"


class TestParseDocument:
    """Full SALT.md documents."""

    def test_complete_document(self) -> None:
        definition = parse(tokenize(SALT_MD))

        assert definition.processed is True
        assert definition.name == "my-cool-app"
        assert definition.kind == "service"
        assert definition.about == "A tiny web service."
        assert definition.help == "serve and build my-cool-app"
        assert set(definition.commands) == {"build", "serve"}
        assert definition.commands["build"].command == "go build ."
        assert definition.commands["build"].about == "builds the binary"
        assert definition.commands["serve"].command == "[PORT=8080] go run ."
        assert list(definition.docs) == ["Getting started", "FAQ"]
        assert len(definition.docs["Getting started"]) == 2
        assert isinstance(definition.docs["FAQ"][0], OrderedList)

    def test_malformed_section_header(self) -> None:
        source = "Kept about.\n\n## Commands `x`\n\n- a - `b`\n"

        definition = parse(tokenize(source))

        assert definition.processed is False
        assert definition.about == "Kept about."
        assert definition.commands == {}

    def test_parse_file(self, tmp_path: Path) -> None:
        path = tmp_path / "SALT.md"
        path.write_text(SALT_MD, encoding="utf-8")

        definition = parse_file(path)

        assert definition.name == "my-cool-app"
