"""Outline node value type and whole-tree helpers.

A tree is a plain list of top-level OutlineNode values (a forest). The
indentation invariant is structural: every child sits exactly one indent
level below its parent, and all top-level nodes share one indent value.
"""

from dataclasses import dataclass, field
from typing import Iterator, Optional

# Indent of top-level nodes. Depth 0 belongs to the implicit root of the
# persisted file, which is never materialized as a node.
ROOT_INDENT = 1


@dataclass
class OutlineNode:
    """Single outline entry with ordered children.

    Attributes:
        id: Identifier, unique across the whole tree
        text: Raw node text (may contain line breaks)
        indent: Indentation depth (child == parent + 1)
        closed: Subtree hidden from visible traversal
        ol: Render children as an ordered list
        children: Child nodes in display order
    """

    id: int
    text: str
    indent: int
    closed: bool = False
    ol: bool = False
    children: list["OutlineNode"] = field(default_factory=list)

    def copy(self) -> "OutlineNode":
        """Deep copy of this node and its full subtree (ids preserved)."""
        return OutlineNode(
            id=self.id,
            text=self.text,
            indent=self.indent,
            closed=self.closed,
            ol=self.ol,
            children=[child.copy() for child in self.children],
        )

    def walk(self) -> Iterator["OutlineNode"]:
        """Yield this node and all descendants in pre-order."""
        yield self
        for child in self.children:
            yield from child.walk()

    def rebase_indent(self, delta: int) -> None:
        """Shift indent of this node and every descendant by delta."""
        for node in self.walk():
            node.indent += delta

    def add_child(self, node_id: int, text: str = "", position: Optional[int] = None) -> "OutlineNode":
        """Add child node one level deeper.

        Args:
            node_id: Id for the new child
            text: Child text
            position: Optional index to insert at (None = append to end)

        Returns:
            The created child node
        """
        child = OutlineNode(id=node_id, text=text, indent=self.indent + 1)

        if position is None:
            self.children.append(child)
        else:
            self.children.insert(position, child)

        return child


def clone_tree(nodes: list[OutlineNode]) -> list[OutlineNode]:
    """Deep clone a forest."""
    return [node.copy() for node in nodes]


def iter_nodes(nodes: list[OutlineNode]) -> Iterator[OutlineNode]:
    """Yield every node of a forest in pre-order."""
    for node in nodes:
        yield from node.walk()


def count_nodes(nodes: list[OutlineNode]) -> int:
    """Total number of nodes in a forest."""
    return sum(1 for _ in iter_nodes(nodes))


def find_node(nodes: list[OutlineNode], node_id: int) -> Optional[OutlineNode]:
    """Find a node by id anywhere in the forest."""
    for node in iter_nodes(nodes):
        if node.id == node_id:
            return node
    return None


def next_id(nodes: list[OutlineNode]) -> int:
    """Next free id: current maximum plus one (1 for an empty tree)."""
    return max((node.id for node in iter_nodes(nodes)), default=0) + 1


def reassign_ids(node: OutlineNode, start_id: int) -> int:
    """Renumber a subtree in pre-order starting at start_id.

    Returns:
        The next unused id after the subtree
    """
    counter = start_id
    for descendant in node.walk():
        descendant.id = counter
        counter += 1
    return counter
