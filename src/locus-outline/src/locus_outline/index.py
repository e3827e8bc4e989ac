"""Side index from node id to its position in the tree.

Structural operations resolve ids through an OutlineIndex built in a single
pre-order pass over the tree they are about to mutate. Any mutation that
moves nodes invalidates the index; callers rebuild it before resolving ids
again.
"""

from dataclasses import dataclass
from typing import Iterator, Optional

from locus_outline.node import OutlineNode


@dataclass
class Location:
    """Where a node lives.

    Attributes:
        node: The node itself
        parent: Parent node (None for top-level nodes)
        siblings: The list that contains the node (parent's children or the forest)
        index: Position of the node within siblings
    """

    node: OutlineNode
    parent: Optional[OutlineNode]
    siblings: list[OutlineNode]
    index: int


class OutlineIndex:
    """Id -> Location mapping for one tree value."""

    def __init__(self, nodes: list[OutlineNode]):
        self.nodes = nodes
        self._locations: dict[int, Location] = {}

        def visit(parent: Optional[OutlineNode], siblings: list[OutlineNode]) -> None:
            for i, node in enumerate(siblings):
                self._locations[node.id] = Location(node, parent, siblings, i)
                visit(node, node.children)

        visit(None, nodes)

    def __contains__(self, node_id: int) -> bool:
        return node_id in self._locations

    def __len__(self) -> int:
        return len(self._locations)

    def locate(self, node_id: int) -> Optional[Location]:
        return self._locations.get(node_id)

    def get(self, node_id: int) -> Optional[OutlineNode]:
        location = self._locations.get(node_id)
        return location.node if location else None

    def parent_id(self, node_id: int) -> Optional[int]:
        location = self._locations.get(node_id)
        if location is None or location.parent is None:
            return None
        return location.parent.id

    def ancestors(self, node_id: int) -> Iterator[OutlineNode]:
        """Yield ancestors from the immediate parent up to the top level."""
        location = self._locations.get(node_id)
        while location is not None and location.parent is not None:
            yield location.parent
            location = self._locations.get(location.parent.id)

    def is_descendant(self, node_id: int, ancestor_id: int) -> bool:
        """True if node_id lies strictly inside ancestor_id's subtree."""
        return any(ancestor.id == ancestor_id for ancestor in self.ancestors(node_id))
