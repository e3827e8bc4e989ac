"""Persisted memo file format.

One node per line; the number of leading spaces is the node's depth. The
first line is an implicit root at depth 0 that is not part of the tree; its
children form the top-level forest. Text is escaped so every node fits on
one line, and two marker lines, one level deeper than their owner, carry
the collapsed and ordered-list flags:

    root
     Notes
      !{close}
      Design%{s}rules
     Tasks
      !{ol}
      Buy%{s}milk
"""

from dataclasses import dataclass, field

from locus_outline.node import ROOT_INDENT, OutlineNode

SPACE_TOKEN = "%{s}"
NEWLINE_TOKEN = "%{n}"
CLOSE_MARKER = "!{close}"
OL_MARKER = "!{ol}"
DEFAULT_ROOT_TEXT = "root"
INITIAL_CONTENT = f"{DEFAULT_ROOT_TEXT}\n"


@dataclass
class MemoDocument:
    """Parsed memo file.

    Attributes:
        root_text: Text of the implicit root line
        nodes: Top-level forest
    """

    root_text: str = DEFAULT_ROOT_TEXT
    nodes: list[OutlineNode] = field(default_factory=list)


def encode_text(text: str) -> str:
    """Escape spaces and line breaks."""
    return text.replace(" ", SPACE_TOKEN).replace("\n", NEWLINE_TOKEN)


def decode_text(text: str) -> str:
    return text.replace(NEWLINE_TOKEN, "\n").replace(SPACE_TOKEN, " ")


def serialize_memo(nodes: list[OutlineNode], root_text: str = DEFAULT_ROOT_TEXT) -> str:
    """Render a forest as memo file content.

    Depth comes from tree structure (top-level nodes at depth 1), and
    every line, including the last, ends with a newline.
    """
    lines = [encode_text(root_text or DEFAULT_ROOT_TEXT)]

    def render(node: OutlineNode, depth: int) -> None:
        prefix = " " * depth
        lines.append(prefix + encode_text(node.text))
        if node.closed:
            lines.append(prefix + " " + CLOSE_MARKER)
        if node.ol:
            lines.append(prefix + " " + OL_MARKER)
        for child in node.children:
            render(child, depth + 1)

    for node in nodes:
        render(node, 1)

    return "".join(f"{line}\n" for line in lines)


def parse_memo(content: str) -> MemoDocument:
    """Parse memo file content.

    Parsing never fails. Empty lines are ignored, markers before any node
    are ignored, and a line indented more than one level past the previous
    open node is attached to the nearest shallower open node (its indent is
    rebased so the tree stays consistent). Lines at or above the root's
    depth after the first are treated as further root lines: skipped, with
    their children continuing the top-level forest. Parsing does not stop
    at such a line, so nothing after a stray root-level line is lost.

    Ids are assigned from 0 in file order; the root line consumes id 0.

    Args:
        content: Full file content

    Returns:
        MemoDocument with the root text and the top-level forest
    """
    lines = [line for line in content.split("\n") if line != ""]
    document = MemoDocument()
    if not lines:
        return document

    root_depth = len(lines[0]) - len(lines[0].lstrip(" "))
    document.root_text = decode_text(lines[0].lstrip(" "))

    stack: list[tuple[int, OutlineNode]] = []
    last_node = None
    id_counter = 1

    for line in lines[1:]:
        stripped = line.lstrip(" ")

        if stripped == CLOSE_MARKER:
            if last_node is not None:
                last_node.closed = True
            continue
        if stripped == OL_MARKER:
            if last_node is not None:
                last_node.ol = True
            continue

        depth = len(line) - len(stripped)
        if depth <= root_depth:
            stack = []
            last_node = None
            id_counter += 1
            continue

        while stack and stack[-1][0] >= depth:
            stack.pop()
        parent = stack[-1][1] if stack else None

        node = OutlineNode(
            id=id_counter,
            text=decode_text(stripped),
            indent=parent.indent + 1 if parent else ROOT_INDENT,
        )
        id_counter += 1

        if parent is None:
            document.nodes.append(node)
        else:
            parent.children.append(node)
        stack.append((depth, node))
        last_node = node

    return document
