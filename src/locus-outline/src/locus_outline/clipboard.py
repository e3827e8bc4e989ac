"""Copy and paste of detached subtrees.

Clipboard entries are independent value copies. Ids inside them are kept
from the source tree until paste, which renumbers every pasted node.
"""

from dataclasses import dataclass
from typing import Iterable, Optional

from locus_outline.index import OutlineIndex
from locus_outline.node import OutlineNode, clone_tree, next_id, reassign_ids


@dataclass
class PasteResult:
    """Result of a paste.

    Attributes:
        tree: New tree value
        pasted_ids: Ids of the pasted top-level entries, in order
    """

    tree: list[OutlineNode]
    pasted_ids: list[int]


def copy_node(nodes: list[OutlineNode], node_id: int) -> Optional[OutlineNode]:
    """Deep copy of one node's subtree, or None if the id is unknown."""
    node = OutlineIndex(nodes).get(node_id)
    return node.copy() if node else None


def _has_selected_descendant(node: OutlineNode, selected: set[int]) -> bool:
    return any(descendant.id in selected for descendant in node.walk() if descendant is not node)


def _pruned_copy(node: OutlineNode, selected: set[int]) -> OutlineNode:
    """Copy node keeping only its selected branches.

    A node with no selected descendant is copied whole. Otherwise only the
    children that are selected (or lead to a selected node) are kept, each
    pruned by the same rule.
    """
    if not _has_selected_descendant(node, selected):
        return node.copy()

    kept = [
        _pruned_copy(child, selected)
        for child in node.children
        if child.id in selected or _has_selected_descendant(child, selected)
    ]
    return OutlineNode(
        id=node.id,
        text=node.text,
        indent=node.indent,
        closed=node.closed,
        ol=node.ol,
        children=kept,
    )


def copy_nodes(nodes: list[OutlineNode], node_ids: Iterable[int]) -> list[OutlineNode]:
    """Copy a multi-selection as a forest in tree order.

    Selected nodes whose ancestor is also selected are captured through the
    ancestor, never as entries of their own.
    """
    selected = set(node_ids)
    entries = []

    def visit(siblings: list[OutlineNode]) -> None:
        for node in siblings:
            if node.id in selected:
                entries.append(_pruned_copy(node, selected))
            else:
                visit(node.children)

    visit(nodes)
    return entries


def _paste(
    nodes: list[OutlineNode], target_id: int, entries: list[OutlineNode], id_seed: Optional[int], after: bool
) -> Optional[PasteResult]:
    tree = clone_tree(nodes)
    location = OutlineIndex(tree).locate(target_id)
    if location is None:
        return None

    counter = next_id(tree) if id_seed is None else id_seed
    clones = clone_tree(entries)
    for clone in clones:
        clone.rebase_indent(location.node.indent - clone.indent)
        counter = reassign_ids(clone, counter)

    insert_at = location.index + 1 if after else location.index
    location.siblings[insert_at:insert_at] = clones
    return PasteResult(tree=tree, pasted_ids=[clone.id for clone in clones])


def paste_after(
    nodes: list[OutlineNode], target_id: int, entries: list[OutlineNode], id_seed: Optional[int] = None
) -> Optional[PasteResult]:
    """Insert clipboard entries as siblings right after target_id.

    Args:
        nodes: Tree to paste into
        target_id: Anchor node
        entries: Clipboard forest
        id_seed: First id to assign (default: next free id in nodes)
    """
    return _paste(nodes, target_id, entries, id_seed, after=True)


def paste_before(
    nodes: list[OutlineNode], target_id: int, entries: list[OutlineNode], id_seed: Optional[int] = None
) -> Optional[PasteResult]:
    """Insert clipboard entries as siblings right before target_id."""
    return _paste(nodes, target_id, entries, id_seed, after=False)
