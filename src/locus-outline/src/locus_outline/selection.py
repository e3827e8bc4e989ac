"""Visible ordering, navigation and sibling-range selection."""

from dataclasses import dataclass, field, replace
from typing import Optional

from locus_outline.index import OutlineIndex
from locus_outline.node import OutlineNode


def flatten_visible(nodes: list[OutlineNode]) -> list[OutlineNode]:
    """Pre-order list of nodes, skipping the children of closed nodes."""
    result = []
    for node in nodes:
        result.append(node)
        if not node.closed:
            result.extend(flatten_visible(node.children))
    return result


def _visible_ids(nodes: list[OutlineNode]) -> list[int]:
    return [node.id for node in flatten_visible(nodes)]


def first_visible(nodes: list[OutlineNode]) -> Optional[int]:
    visible = _visible_ids(nodes)
    return visible[0] if visible else None


def last_visible(nodes: list[OutlineNode]) -> Optional[int]:
    visible = _visible_ids(nodes)
    return visible[-1] if visible else None


def page_visible(nodes: list[OutlineNode], node_id: int, step: int) -> Optional[int]:
    """Move step positions through the visible order, clamped to both ends.

    Returns:
        Id reached, or None if node_id is not visible
    """
    visible = _visible_ids(nodes)
    if node_id not in visible:
        return None
    position = visible.index(node_id) + step
    return visible[max(0, min(position, len(visible) - 1))]


def next_visible(nodes: list[OutlineNode], node_id: int) -> Optional[int]:
    """Id of the next visible node, or None at the end."""
    visible = _visible_ids(nodes)
    if node_id not in visible:
        return None
    position = visible.index(node_id)
    return visible[position + 1] if position + 1 < len(visible) else None


def previous_visible(nodes: list[OutlineNode], node_id: int) -> Optional[int]:
    """Id of the previous visible node, or None at the start."""
    visible = _visible_ids(nodes)
    if node_id not in visible:
        return None
    position = visible.index(node_id)
    return visible[position - 1] if position > 0 else None


def parent_of(nodes: list[OutlineNode], node_id: int) -> Optional[int]:
    return OutlineIndex(nodes).parent_id(node_id)


def sibling_range(nodes: list[OutlineNode], anchor_id: int, focus_id: int) -> Optional[list[int]]:
    """Inclusive ids between two siblings, in sibling order.

    Both ids must share the identical parent (or both be top-level). An
    ancestor/descendant pair is never a range.

    Returns:
        Ids from the earlier to the later sibling, or None
    """
    index = OutlineIndex(nodes)
    anchor = index.locate(anchor_id)
    focus = index.locate(focus_id)
    if anchor is None or focus is None or anchor.siblings is not focus.siblings:
        return None

    start, end = sorted((anchor.index, focus.index))
    return [node.id for node in anchor.siblings[start:end + 1]]


@dataclass(frozen=True)
class Selection:
    """Focused node plus optional co-selected siblings.

    Attributes:
        focused_id: Node with focus (None = nothing selected)
        anchor_id: Fixed end used when extending a range
        co_selected: Additional ids, valid only while they are all siblings
            of the focused node
    """

    focused_id: Optional[int] = None
    anchor_id: Optional[int] = None
    co_selected: frozenset[int] = field(default_factory=frozenset)

    @classmethod
    def single(cls, node_id: Optional[int]) -> "Selection":
        return cls(focused_id=node_id, anchor_id=node_id)

    def extend_to(self, nodes: list[OutlineNode], focus_id: int) -> "Selection":
        """Extend the range from the anchor to focus_id.

        The selection is returned unchanged when the anchor and focus_id are
        not siblings under the same parent.
        """
        anchor_id = self.anchor_id if self.anchor_id is not None else self.focused_id
        if anchor_id is None:
            return Selection.single(focus_id)

        ids = sibling_range(nodes, anchor_id, focus_id)
        if ids is None:
            return self
        return replace(self, focused_id=focus_id, anchor_id=anchor_id, co_selected=frozenset(ids))

    def selected_ids(self, nodes: list[OutlineNode]) -> list[int]:
        """Effective selection in tree order.

        An invalid co-selected set (members not siblings of the focused
        node) is dropped and only the focused node counts.
        """
        if self.focused_id is None:
            return []

        index = OutlineIndex(nodes)
        focus = index.locate(self.focused_id)
        if focus is None:
            return []

        sibling_ids = {node.id for node in focus.siblings}
        if self.co_selected and self.co_selected <= sibling_ids:
            wanted = self.co_selected | {self.focused_id}
            return [node.id for node in focus.siblings if node.id in wanted]
        return [self.focused_id]
