"""Bounded undo/redo history of whole-tree snapshots.

Each snapshot owns an independent deep copy of its tree, both when stored
and when handed back, so later edits can never reach into history.
"""

from dataclasses import dataclass
from typing import Optional

from locus_outline.node import OutlineNode, clone_tree, count_nodes

MAX_HISTORY = 50
DESTRUCTIVE_THRESHOLD = 0.10


@dataclass(frozen=True)
class Snapshot:
    """Tree value plus the focused node id at that point."""

    tree: tuple[OutlineNode, ...]
    selected_id: Optional[int] = None

    @classmethod
    def capture(cls, nodes: list[OutlineNode], selected_id: Optional[int] = None) -> "Snapshot":
        return cls(tree=tuple(clone_tree(nodes)), selected_id=selected_id)

    def restore(self) -> list[OutlineNode]:
        """Fresh mutable copy of the stored tree."""
        return clone_tree(list(self.tree))


@dataclass(frozen=True)
class NodeCountDelta:
    """Node count before and after a proposed commit."""

    before: int
    after: int

    @property
    def removed(self) -> int:
        return max(0, self.before - self.after)

    @property
    def removed_ratio(self) -> float:
        if self.before == 0:
            return 0.0
        return self.removed / self.before

    def is_destructive(self, threshold: float = DESTRUCTIVE_THRESHOLD) -> bool:
        """True if the commit drops threshold (or more) of the nodes."""
        return self.removed > 0 and self.removed_ratio >= threshold


class HistoryLog:
    """Current tree plus undo and redo stacks.

    Example:
        >>> history = HistoryLog(tree, selected_id=1)
        >>> history.commit(indent_node(tree, 2), selected_id=2)
        >>> history.undo().selected_id
        1
    """

    def __init__(
        self,
        nodes: list[OutlineNode],
        selected_id: Optional[int] = None,
        max_entries: int = MAX_HISTORY,
    ):
        self.max_entries = max_entries
        self._current = Snapshot.capture(nodes, selected_id)
        self._undo: list[Snapshot] = []
        self._redo: list[Snapshot] = []

    @property
    def current(self) -> Snapshot:
        return self._current

    @property
    def tree(self) -> list[OutlineNode]:
        return self._current.restore()

    @property
    def can_undo(self) -> bool:
        return bool(self._undo)

    @property
    def can_redo(self) -> bool:
        return bool(self._redo)

    def node_count_delta(self, nodes: list[OutlineNode]) -> NodeCountDelta:
        """Compare a proposed tree against the committed one.

        The caller decides whether a destructive delta needs confirmation
        before calling commit().
        """
        return NodeCountDelta(before=count_nodes(list(self._current.tree)), after=count_nodes(nodes))

    def update_selection(self, selected_id: Optional[int]) -> None:
        """Record a focus change that did not edit the tree."""
        self._current = Snapshot(tree=self._current.tree, selected_id=selected_id)

    def commit(self, nodes: list[OutlineNode], selected_id: Optional[int] = None) -> Snapshot:
        """Make nodes current, pushing the previous snapshot onto the undo stack.

        The oldest undo entry is evicted past max_entries; redo is cleared.
        """
        self._undo.append(self._current)
        if len(self._undo) > self.max_entries:
            del self._undo[0]
        self._redo.clear()
        self._current = Snapshot.capture(nodes, selected_id)
        return self._current

    def _swap(self, source: list[Snapshot], target: list[Snapshot], selected_id: Optional[int]) -> Optional[Snapshot]:
        if not source:
            return None

        current = self._current
        if selected_id is not None:
            current = Snapshot(tree=current.tree, selected_id=selected_id)
        target.append(current)
        self._current = source.pop()
        return self._current

    def undo(self, selected_id: Optional[int] = None) -> Optional[Snapshot]:
        """Restore the previous snapshot.

        Args:
            selected_id: Current focus, recorded with the snapshot moved to
                the redo stack (default: the focus stored at commit time)

        Returns:
            The restored snapshot, or None if there is nothing to undo
        """
        return self._swap(self._undo, self._redo, selected_id)

    def redo(self, selected_id: Optional[int] = None) -> Optional[Snapshot]:
        """Re-apply the most recently undone snapshot."""
        return self._swap(self._redo, self._undo, selected_id)
