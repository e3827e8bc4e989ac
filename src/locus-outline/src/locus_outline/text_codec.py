"""Plain indented-text export and import.

One node per line, two spaces per nesting level:

    Notes
      Design
        Colour rules
    Tasks
"""

from locus_outline.node import ROOT_INDENT, OutlineNode

INDENT_UNIT = "  "


def tree_to_text(nodes: list[OutlineNode]) -> str:
    """Render a forest as indented text.

    Depth is measured from the forest's roots, whatever their stored indent.
    A node with empty text becomes an indentation-only line, which
    text_to_tree() drops as blank, so empty nodes do not survive a round trip.
    """
    lines = []

    def render(node: OutlineNode, depth: int) -> None:
        lines.append(f"{INDENT_UNIT * depth}{node.text}")
        for child in node.children:
            render(child, depth + 1)

    for node in nodes:
        render(node, 0)

    return "\n".join(lines)


def _line_depth(line: str) -> tuple[int, str]:
    content = line.lstrip(" \t")
    leading = line[: len(line) - len(content)].replace("\t", INDENT_UNIT)
    return len(leading) // 2, content


def text_to_tree(text: str, start_id: int, base_indent: int = ROOT_INDENT) -> list[OutlineNode]:
    """Parse indented text into a forest.

    Blank lines are dropped before depths are measured. Leading tabs count
    as two spaces and a line's depth is its leading spaces // 2. A node's children
    are the run of following lines deeper than it, so a jump of several
    levels simply nests under the nearest shallower line.

    Args:
        text: Indented text
        start_id: First id to assign (pre-order)
        base_indent: Indent given to the returned top-level nodes

    Returns:
        Parsed forest (empty for blank input)
    """
    entries = [_line_depth(line) for line in text.split("\n") if line.strip()]
    counter = start_id
    position = 0

    def parse_level(parent_depth: int, indent: int) -> list[OutlineNode]:
        nonlocal counter, position
        siblings = []
        while position < len(entries):
            depth, content = entries[position]
            if depth <= parent_depth:
                break
            node = OutlineNode(id=counter, text=content, indent=indent)
            counter += 1
            position += 1
            node.children = parse_level(depth, indent + 1)
            siblings.append(node)
        return siblings

    return parse_level(-1, base_indent)
