"""Tests for salt_runner.doc."""

from salt_runner.definition import parse, tokenize
from salt_runner.definition.blocks import (
    Blockquote,
    Code,
    CodeBlock,
    Header,
    OrderedList,
    Paragraph,
    SimpleItem,
    Text,
    UnorderedList,
)
from salt_runner.doc import blocks_to_markdown, render_project_doc


class TestBlocksToMarkdown:
    def test_common_blocks(self) -> None:
        markdown = blocks_to_markdown(
            [
                Header(spans=(Text("Details"),), level=4),
                Paragraph(spans=(Text("run "), Code("make"))),
                CodeBlock(code="make all\n", lang="sh"),
                OrderedList(items=(SimpleItem((Text("a"),)), SimpleItem((Text("b"),))), start=3),
                UnorderedList(items=(SimpleItem((Text("x"),)),)),
                Blockquote(blocks=(Paragraph(spans=(Text("quoted"),)),)),
            ]
        )

        assert markdown.split("\n\n") == [
            "#### Details",
            "run `make`",
            "```sh\nmake all\n```",
            "3. a\n4. b",
            "- x",
            "> quoted",
        ]


class TestRenderProjectDoc:
    def test_sections_in_document_order(self) -> None:
        definition = parse(
            tokenize(
                "About me.\n\n## Commands\n\n- b - `make b` - bee\n\n## Options\n\n- name - p\n\n"
                "### Second\n\ntext two\n\n### First\n\ntext one\n"
            )
        )

        page = render_project_doc(definition)

        assert page.startswith("# p\n\nAbout me.")
        assert "| b | `make b` | bee |" in page
        assert page.index("### Second") < page.index("### First")
