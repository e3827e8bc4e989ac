"""Markdown export and import.

Export turns a subtree into a heading followed by a nested list:

    # Notes

    - Design
      1. Colour rules
      2. Fonts

Import accepts headings, bullet and numbered lists and loose paragraph
lines. It is lenient: anything it cannot place structurally becomes a child
of the nearest heading.
"""

import re
from typing import Optional

from locus_outline.node import ROOT_INDENT, OutlineNode

MAX_HEADING_LEVEL = 6

HEADING_RE = re.compile(r"^(#{1,6})(?:[ \t]+(.*))?$")
BULLET_RE = re.compile(r"^( *)[-*+](?:[ \t]+(.*))?$")
ORDERED_RE = re.compile(r"^( *)\d+[.)](?:[ \t]+(.*))?$")
RULE_RE = re.compile(r"^ {0,3}([-*_])(?:[ \t]*\1){2,}[ \t]*$")


def node_to_markdown(node: OutlineNode, depth: int = 0) -> str:
    """Export one subtree.

    Args:
        node: Subtree root, rendered as a heading
        depth: Depth of node in its outline; heading level is depth + 1,
            capped at 6

    Returns:
        Markdown text
    """
    level = min(depth + 1, MAX_HEADING_LEVEL)
    heading = " ".join(node.text.split("\n"))
    lines = [f"{'#' * level} {heading}".rstrip()]

    def render_items(children: list[OutlineNode], level: int, ordered: bool) -> None:
        pad = "  " * level
        for number, child in enumerate(children, start=1):
            marker = f"{number}." if ordered else "-"
            first, *rest = child.text.split("\n")
            lines.append(f"{pad}{marker} {first}".rstrip())
            for continuation in rest:
                lines.append(f"{pad}  {continuation}".rstrip())
            render_items(child.children, level + 1, child.ol)

    if node.children:
        lines.append("")
        render_items(node.children, 0, node.ol)

    return "\n".join(lines)


def outline_to_markdown(nodes: list[OutlineNode]) -> str:
    """Export every top-level node, separated by blank lines."""
    return "\n\n".join(node_to_markdown(node) for node in nodes)


def _expand_leading_tabs(line: str) -> str:
    content = line.lstrip(" \t")
    return line[: len(line) - len(content)].replace("\t", "  ") + content


def markdown_to_tree(markdown: str, start_id: int, base_indent: int = ROOT_INDENT) -> list[OutlineNode]:
    """Import Markdown as a forest.

    - A heading of level N sets the heading depth to N - 1 and becomes a node
      at that depth.
    - A list item nested U levels (two spaces each) goes to heading depth
      + 1 + U, or depth U before any heading. Numbered items also mark
      their parent as an ordered list.
    - Other text lines become children of the nearest heading (depth 0
      before any heading).
    - Blank lines and horizontal rules are skipped.

    Args:
        markdown: Markdown text
        start_id: First id to assign, in document order
        base_indent: Indent given to the returned top-level nodes

    Returns:
        Parsed forest
    """
    roots: list[OutlineNode] = []
    stack: list[tuple[int, OutlineNode]] = []
    counter = start_id
    heading_depth: Optional[int] = None

    def add(depth: int, text: str, ordered: bool = False) -> None:
        nonlocal counter
        while stack and stack[-1][0] >= depth:
            stack.pop()
        parent = stack[-1][1] if stack else None

        node = OutlineNode(
            id=counter,
            text=text,
            indent=parent.indent + 1 if parent else base_indent,
        )
        counter += 1

        if parent is None:
            roots.append(node)
        else:
            parent.children.append(node)
            if ordered:
                parent.ol = True
        stack.append((depth, node))

    for raw_line in markdown.split("\n"):
        line = _expand_leading_tabs(raw_line.rstrip("\r"))
        if not line.strip() or RULE_RE.match(line):
            continue

        if match := HEADING_RE.match(line):
            heading_depth = len(match.group(1)) - 1
            add(heading_depth, (match.group(2) or "").strip())
            continue

        list_match = BULLET_RE.match(line)
        ordered = False
        if list_match is None:
            list_match = ORDERED_RE.match(line)
            ordered = list_match is not None

        if list_match:
            units = len(list_match.group(1)) // 2
            depth = units if heading_depth is None else heading_depth + 1 + units
            add(depth, (list_match.group(2) or "").rstrip(), ordered=ordered)
        else:
            depth = 0 if heading_depth is None else heading_depth + 1
            add(depth, line.strip())

    return roots
