"""Terminal documentation for a project.

Rebuilds markdown from the stored documentation blocks so rich can render
the about text, command table and every documentation section in one page.
"""

from collections.abc import Iterable

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
    Span,
    Strong,
    Text,
    UnorderedList,
)
from salt_runner.definition.models import ProjectDefinition


def spans_to_markdown(spans: Iterable[Span]) -> str:
    parts: list[str] = []
    for span in spans:
        if isinstance(span, Text):
            parts.append(span.text)
        elif isinstance(span, Code):
            parts.append(f"`{span.text}`")
        elif isinstance(span, Break):
            parts.append("  \n")
        elif isinstance(span, Emphasis):
            parts.append(f"*{spans_to_markdown(span.children)}*")
        elif isinstance(span, Strong):
            parts.append(f"**{spans_to_markdown(span.children)}**")
        elif isinstance(span, Link):
            parts.append(f"[{spans_to_markdown(span.children)}]({span.url})")
        elif isinstance(span, Image):
            parts.append(f"![{span.alt}]({span.url})")
    return "".join(parts)


def _item_to_markdown(item: ListItem) -> str:
    if isinstance(item, ParagraphItem):
        body = blocks_to_markdown(item.blocks)
        # continuation lines are indented under the bullet
        return body.replace("\n", "\n   ")
    return spans_to_markdown(item.spans)


def blocks_to_markdown(blocks: Iterable[Block]) -> str:
    """Render blocks back to markdown, one blank line between blocks."""
    chunks: list[str] = []
    for block in blocks:
        if isinstance(block, Header):
            # nested headers render one level below section titles
            chunks.append(f"{'#' * max(block.level, 4)} {spans_to_markdown(block.spans)}")
        elif isinstance(block, Paragraph):
            chunks.append(spans_to_markdown(block.spans))
        elif isinstance(block, CodeBlock):
            chunks.append(f"```{block.lang or ''}\n{block.code.rstrip()}\n```")
        elif isinstance(block, Blockquote):
            inner = blocks_to_markdown(block.blocks)
            chunks.append("\n".join(f"> {line}" if line else ">" for line in inner.splitlines()))
        elif isinstance(block, OrderedList):
            chunks.append(
                "\n".join(
                    f"{block.start + i}. {_item_to_markdown(item)}"
                    for i, item in enumerate(block.items)
                )
            )
        elif isinstance(block, UnorderedList):
            chunks.append("\n".join(f"- {_item_to_markdown(item)}" for item in block.items))
        elif isinstance(block, Raw):
            chunks.append(block.html.rstrip())
        elif isinstance(block, Hr):
            chunks.append("---")
    return "\n\n".join(chunks)


def render_project_doc(project: ProjectDefinition) -> str:
    """Build the full markdown page for a project."""
    sections = [f"# {project.name or project.kind}"]
    if project.about:
        sections.append(project.about)
    if project.commands:
        lines = ["## Commands", "", "| command | runs | about |", "| --- | --- | --- |"]
        for name, command in sorted(project.commands.items()):
            lines.append(f"| {name} | `{command.command}` | {command.about} |")
        sections.append("\n".join(lines))
    for title, blocks in project.docs.items():
        sections.append(f"### {title}")
        body = blocks_to_markdown(blocks)
        if body:
            sections.append(body)
    return "\n\n".join(sections) + "\n"
