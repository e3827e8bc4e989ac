"""Structural operations on outline trees.

Every operation is pure: it clones the input forest, edits the clone and
returns it. Operations that cannot apply (unknown id, no previous sibling,
move into own subtree, ...) return None instead of raising, so callers can
ignore the gesture.
"""

from dataclasses import dataclass
from typing import Literal, Optional

from locus_outline.index import OutlineIndex
from locus_outline.node import ROOT_INDENT, OutlineNode, clone_tree, next_id

MovePosition = Literal["before", "after", "child"]


@dataclass
class InsertResult:
    """Result of an operation that created a node."""

    tree: list[OutlineNode]
    new_id: int


@dataclass
class MergeResult:
    """Result of merging two nodes.

    Attributes:
        tree: New tree value
        join_point: Offset in the merged text where the source text starts
    """

    tree: list[OutlineNode]
    join_point: int


def _edit(nodes: list[OutlineNode]) -> tuple[list[OutlineNode], OutlineIndex]:
    tree = clone_tree(nodes)
    return tree, OutlineIndex(tree)


def update_node_text(nodes: list[OutlineNode], node_id: int, text: str) -> Optional[list[OutlineNode]]:
    """Replace the text of a node."""
    tree, index = _edit(nodes)
    node = index.get(node_id)
    if node is None:
        return None
    node.text = text
    return tree


def toggle_node(nodes: list[OutlineNode], node_id: int) -> Optional[list[OutlineNode]]:
    """Flip the closed flag of a node that has children."""
    tree, index = _edit(nodes)
    node = index.get(node_id)
    if node is None or not node.children:
        return None
    node.closed = not node.closed
    return tree


def set_node_closed(nodes: list[OutlineNode], node_id: int, closed: bool) -> Optional[list[OutlineNode]]:
    tree, index = _edit(nodes)
    node = index.get(node_id)
    if node is None:
        return None
    node.closed = closed
    return tree


def toggle_ordered_list(nodes: list[OutlineNode], node_id: int) -> Optional[list[OutlineNode]]:
    """Flip whether a node's children render as a numbered list."""
    tree, index = _edit(nodes)
    node = index.get(node_id)
    if node is None:
        return None
    node.ol = not node.ol
    return tree


def indent_node(nodes: list[OutlineNode], node_id: int) -> Optional[list[OutlineNode]]:
    """Make a node the last child of its previous sibling."""
    tree, index = _edit(nodes)
    location = index.locate(node_id)
    if location is None or location.index == 0:
        return None

    node = location.siblings.pop(location.index)
    new_parent = location.siblings[location.index - 1]

    node.rebase_indent(1)
    new_parent.children.append(node)
    new_parent.closed = False

    return tree


def outdent_node(nodes: list[OutlineNode], node_id: int) -> Optional[list[OutlineNode]]:
    """Move a node out to become the next sibling of its parent.

    Siblings that followed the node are adopted as its last children, so the
    visible order of the outline does not change.
    """
    tree, index = _edit(nodes)
    location = index.locate(node_id)
    if location is None or location.parent is None:
        return None
    parent_location = index.locate(location.parent.id)

    node = location.siblings[location.index]
    following = location.siblings[location.index + 1:]
    del location.siblings[location.index:]

    for sibling in following:
        sibling.rebase_indent(1)
        node.children.append(sibling)
    node.rebase_indent(-1)

    # Removing children of the parent does not shift the parent's own position
    parent_location.siblings.insert(parent_location.index + 1, node)

    return tree


def move_node_up(nodes: list[OutlineNode], node_id: int) -> Optional[list[OutlineNode]]:
    """Swap a node with its previous sibling."""
    tree, index = _edit(nodes)
    location = index.locate(node_id)
    if location is None or location.index == 0:
        return None

    siblings, i = location.siblings, location.index
    siblings[i - 1], siblings[i] = siblings[i], siblings[i - 1]
    return tree


def move_node_down(nodes: list[OutlineNode], node_id: int) -> Optional[list[OutlineNode]]:
    """Swap a node with its next sibling."""
    tree, index = _edit(nodes)
    location = index.locate(node_id)
    if location is None or location.index >= len(location.siblings) - 1:
        return None

    siblings, i = location.siblings, location.index
    siblings[i], siblings[i + 1] = siblings[i + 1], siblings[i]
    return tree


def _add_sibling(
    nodes: list[OutlineNode], sibling_id: int, new_id: Optional[int], offset: int, text: str = ""
) -> Optional[InsertResult]:
    tree, index = _edit(nodes)
    location = index.locate(sibling_id)
    if location is None:
        return None

    if new_id is None:
        new_id = next_id(tree)
    new_node = OutlineNode(id=new_id, text=text, indent=location.node.indent)
    location.siblings.insert(location.index + offset, new_node)
    return InsertResult(tree=tree, new_id=new_id)


def add_sibling_after(
    nodes: list[OutlineNode], sibling_id: int, new_id: Optional[int] = None
) -> Optional[InsertResult]:
    """Insert an empty node right after sibling_id."""
    return _add_sibling(nodes, sibling_id, new_id, offset=1)


def add_sibling_before(
    nodes: list[OutlineNode], sibling_id: int, new_id: Optional[int] = None
) -> Optional[InsertResult]:
    """Insert an empty node right before sibling_id."""
    return _add_sibling(nodes, sibling_id, new_id, offset=0)


def _add_child(
    nodes: list[OutlineNode], parent_id: int, new_id: Optional[int], first: bool
) -> Optional[InsertResult]:
    tree, index = _edit(nodes)
    parent = index.get(parent_id)
    if parent is None:
        return None

    if new_id is None:
        new_id = next_id(tree)
    parent.add_child(new_id, position=0 if first else None)
    parent.closed = False
    return InsertResult(tree=tree, new_id=new_id)


def add_child(nodes: list[OutlineNode], parent_id: int, new_id: Optional[int] = None) -> Optional[InsertResult]:
    """Append an empty child and expand the parent."""
    return _add_child(nodes, parent_id, new_id, first=False)


def add_child_first(
    nodes: list[OutlineNode], parent_id: int, new_id: Optional[int] = None
) -> Optional[InsertResult]:
    """Prepend an empty child and expand the parent."""
    return _add_child(nodes, parent_id, new_id, first=True)


def _without(nodes: list[OutlineNode], node_ids: set[int]) -> list[OutlineNode]:
    return [
        OutlineNode(
            id=node.id,
            text=node.text,
            indent=node.indent,
            closed=node.closed,
            ol=node.ol,
            children=_without(node.children, node_ids),
        )
        for node in nodes
        if node.id not in node_ids
    ]


def delete_nodes(nodes: list[OutlineNode], node_ids: set[int]) -> Optional[list[OutlineNode]]:
    """Remove every listed node with its subtree, at any depth, in one pass.

    Ids that do not resolve are ignored, but if none resolves the result is
    None. A descendant listed together with its ancestor is removed along
    with the ancestor.
    """
    index = OutlineIndex(nodes)
    if not any(node_id in index for node_id in node_ids):
        return None
    return _without(nodes, set(node_ids))


def delete_node(nodes: list[OutlineNode], node_id: int) -> Optional[list[OutlineNode]]:
    """Remove a node and its subtree wherever it occurs."""
    return delete_nodes(nodes, {node_id})


def graft_nodes(
    nodes: list[OutlineNode], parent_id: Optional[int], forest: list[OutlineNode]
) -> Optional[list[OutlineNode]]:
    """Append a detached forest under parent_id, or at the top level for None.

    The forest is copied and rebased so its roots sit one level below the
    parent (or level with the existing top-level nodes). Ids are kept as
    given; callers allocate them from next_id() beforehand.
    """
    tree, index = _edit(nodes)
    if parent_id is None:
        siblings = tree
        indent = tree[0].indent if tree else ROOT_INDENT
    else:
        parent = index.get(parent_id)
        if parent is None:
            return None
        siblings = parent.children
        indent = parent.indent + 1
        if forest:
            parent.closed = False

    for root in clone_tree(forest):
        root.rebase_indent(indent - root.indent)
        siblings.append(root)
    return tree


def merge_nodes(
    nodes: list[OutlineNode],
    target_id: int,
    source_id: int,
    target_text: str,
    source_text: str,
) -> Optional[MergeResult]:
    """Join source into target.

    The target gets the concatenated text and adopts the source's children;
    the source disappears. When the source is a direct child of the target
    its children take its place, otherwise they are appended. The target
    is always expanded.

    Returns:
        MergeResult whose join_point is len(target_text), or None when
        either id is unknown, the ids are equal, or the target lies inside
        the source's subtree
    """
    if target_id == source_id:
        return None

    tree, index = _edit(nodes)
    target_location = index.locate(target_id)
    source_location = index.locate(source_id)
    if target_location is None or source_location is None:
        return None
    if index.is_descendant(target_id, source_id):
        return None

    target = target_location.node
    source = source_location.node
    target.text = target_text + source_text

    adopted = source.children
    for child in adopted:
        child.rebase_indent(target.indent + 1 - child.indent)
    del source_location.siblings[source_location.index]

    if source_location.parent is target:
        target.children[source_location.index:source_location.index] = adopted
    else:
        target.children.extend(adopted)
    target.closed = False

    return MergeResult(tree=tree, join_point=len(target_text))


def split_node(
    nodes: list[OutlineNode],
    node_id: int,
    before_text: str,
    after_text: str,
    new_id: Optional[int] = None,
) -> Optional[InsertResult]:
    """Split a node's text: keep before_text, put after_text in a new next sibling."""
    updated = update_node_text(nodes, node_id, before_text)
    if updated is None:
        return None

    return _add_sibling(updated, node_id, new_id, offset=1, text=after_text)


def _resolve_indent_override(index: OutlineIndex, target: OutlineNode, indent_override: int) -> OutlineNode:
    """Walk up from target to the ancestor sitting at indent_override.

    Falls back to the original target when no ancestor has exactly that
    indent.
    """
    if indent_override >= target.indent:
        return target

    current = target
    for ancestor in index.ancestors(target.id):
        if current.indent <= indent_override:
            break
        current = ancestor

    return current if current.indent == indent_override else target


def move_node(
    nodes: list[OutlineNode],
    drag_id: int,
    target_id: int,
    position: MovePosition,
    indent_override: Optional[int] = None,
) -> Optional[list[OutlineNode]]:
    """Relocate drag_id's subtree relative to target_id.

    Args:
        nodes: Tree to edit
        drag_id: Node being moved (with its subtree)
        target_id: Drop target
        position: "before"/"after" the target as a sibling, or "child" to
            append as the target's last child
        indent_override: For before/after, a shallower indent selects the
            target's ancestor at that indent as the actual insertion point

    Returns:
        New tree, or None for self-moves, moves into the node's own
        subtree, and unknown ids
    """
    if drag_id == target_id:
        return None

    tree, index = _edit(nodes)
    drag_location = index.locate(drag_id)
    if drag_location is None or target_id not in index:
        return None
    if index.is_descendant(target_id, drag_id):
        return None

    drag = drag_location.siblings.pop(drag_location.index)
    index = OutlineIndex(tree)

    if position == "child":
        target = index.get(target_id)
        drag.rebase_indent(target.indent + 1 - drag.indent)
        target.children.append(drag)
        target.closed = False
        return tree

    target = index.get(target_id)
    if indent_override is not None:
        target = _resolve_indent_override(index, target, indent_override)

    target_location = index.locate(target.id)
    drag.rebase_indent(target.indent - drag.indent)
    insert_at = target_location.index if position == "before" else target_location.index + 1
    target_location.siblings.insert(insert_at, drag)

    return tree


def filter_tree(nodes: list[OutlineNode], query: str) -> list[OutlineNode]:
    """Keep nodes whose text contains query, plus their ancestors.

    Matching is case-insensitive. Every kept node is forced open so matches
    are visible. An empty query returns the input unchanged.
    """
    if not query:
        return nodes

    lower_query = query.lower()

    def keep(siblings: list[OutlineNode]) -> list[OutlineNode]:
        result = []
        for node in siblings:
            children = keep(node.children)
            if lower_query in node.text.lower() or children:
                result.append(
                    OutlineNode(
                        id=node.id,
                        text=node.text,
                        indent=node.indent,
                        closed=False,
                        ol=node.ol,
                        children=children,
                    )
                )
        return result

    return keep(nodes)
