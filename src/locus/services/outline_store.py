"""Editing store: one outline, its selection, clipboard and history.

The store is the single owner of mutable editing state. Every edit computes
a new tree with a pure operation from locus_outline and goes through
apply(), which guards destructive edits, commits to history and notifies
commit listeners (such as the persistence service).
"""

from typing import Callable, Literal, Optional

import structlog

from locus_outline import ops
from locus_outline.clipboard import copy_nodes, paste_after, paste_before
from locus_outline.history import DESTRUCTIVE_THRESHOLD, MAX_HISTORY, HistoryLog, NodeCountDelta, Snapshot
from locus_outline.index import OutlineIndex
from locus_outline.markdown_codec import markdown_to_tree, node_to_markdown, outline_to_markdown
from locus_outline.node import ROOT_INDENT, OutlineNode, count_nodes, next_id, reassign_ids
from locus_outline.selection import (
    Selection,
    first_visible,
    flatten_visible,
    last_visible,
    next_visible,
    page_visible,
    parent_of,
    previous_visible,
)
from locus_outline.text_codec import text_to_tree, tree_to_text
from locus.models.config import HistoryConfig

logger = structlog.get_logger()

ConfirmCallback = Callable[[NodeCountDelta], bool]
CommitListener = Callable[[list[OutlineNode]], None]
FocusDirection = Literal["next", "previous", "first", "last", "page_down", "page_up", "parent"]

PAGE_SIZE = 10


class OutlineStore:
    """
    Explicit owner of {tree, selection, clipboard, history}.

    Operations that do not apply (nothing focused, no previous sibling,
    move into own subtree, ...) return False or None and leave the store
    untouched.

    Example:
        >>> store = OutlineStore(memo_file.read())
        >>> store.add_commit_listener(persistence.schedule)
        >>> store.select(3)
        >>> store.indent()
        True
        >>> store.undo()
        True
    """

    def __init__(
        self,
        nodes: list[OutlineNode],
        max_history: int = MAX_HISTORY,
        destructive_threshold: float = DESTRUCTIVE_THRESHOLD,
        page_size: int = PAGE_SIZE,
    ) -> None:
        self._tree = nodes
        self.history = HistoryLog(nodes, max_entries=max_history)
        self.destructive_threshold = destructive_threshold
        self.page_size = page_size
        self.selection = Selection()
        self.clipboard: list[OutlineNode] = []
        self._listeners: list[CommitListener] = []

    @classmethod
    def from_config(cls, nodes: list[OutlineNode], history: HistoryConfig) -> "OutlineStore":
        return cls(nodes, max_history=history.max_entries, destructive_threshold=history.destructive_threshold)

    @property
    def tree(self) -> list[OutlineNode]:
        """Current tree value. Treat as read-only; edit through the store."""
        return self._tree

    @property
    def focused_id(self) -> Optional[int]:
        return self.selection.focused_id

    def add_commit_listener(self, listener: CommitListener) -> None:
        self._listeners.append(listener)

    def _notify(self) -> None:
        for listener in self._listeners:
            listener(self._tree)

    def apply(
        self,
        new_tree: Optional[list[OutlineNode]],
        focused_id: Optional[int] = None,
        confirm: Optional[ConfirmCallback] = None,
    ) -> bool:
        """
        Commit a new tree value.

        Args:
            new_tree: Result of a structural operation (None = not applicable)
            focused_id: Node to focus afterwards (default: keep current focus)
            confirm: Asked when the edit removes destructive_threshold or more
                of the nodes; returning False cancels the edit. Without a
                callback the edit proceeds.

        Returns:
            True if the tree was committed
        """
        if new_tree is None:
            logger.debug("operation_not_applicable", focused_id=self.focused_id)
            return False

        delta = self.history.node_count_delta(new_tree)
        if delta.is_destructive(self.destructive_threshold) and confirm is not None and not confirm(delta):
            logger.warning("destructive_edit_declined", before=delta.before, after=delta.after)
            return False

        if focused_id is None:
            focused_id = self.focused_id
        if focused_id is not None and focused_id not in OutlineIndex(new_tree):
            focused_id = None

        self.history.commit(new_tree, focused_id)
        self._tree = new_tree
        self.selection = Selection.single(focused_id)
        logger.info("history_commit", nodes=delta.after, removed=delta.removed, focused_id=focused_id)
        self._notify()
        return True

    # Selection

    def select(self, node_id: Optional[int]) -> bool:
        if node_id is not None and node_id not in OutlineIndex(self._tree):
            return False
        self.selection = Selection.single(node_id)
        self.history.update_selection(node_id)
        return True

    def extend_selection(self, node_id: int) -> bool:
        """Extend a sibling range from the anchor to node_id."""
        extended = self.selection.extend_to(self._tree, node_id)
        if extended == self.selection:
            return False
        self.selection = extended
        self.history.update_selection(extended.focused_id)
        return True

    def selected_ids(self) -> list[int]:
        return self.selection.selected_ids(self._tree)

    def move_focus(self, direction: FocusDirection) -> Optional[int]:
        """
        Move focus through the visible order.

        With nothing focused, any direction focuses the first visible node.

        Returns:
            The newly focused id, or None if focus did not move
        """
        focused = self.focused_id
        if focused is None:
            target = first_visible(self._tree)
        elif direction == "next":
            target = next_visible(self._tree, focused)
        elif direction == "previous":
            target = previous_visible(self._tree, focused)
        elif direction == "first":
            target = first_visible(self._tree)
        elif direction == "last":
            target = last_visible(self._tree)
        elif direction == "page_down":
            target = page_visible(self._tree, focused, self.page_size)
        elif direction == "page_up":
            target = page_visible(self._tree, focused, -self.page_size)
        elif direction == "parent":
            target = parent_of(self._tree, focused)
        else:
            raise ValueError(f"Unknown focus direction: {direction}")

        if target is None or target == focused:
            return None
        self.select(target)
        return target

    # Structural edits on the focused node

    def _focused_op(self, op: Callable[[list[OutlineNode], int], Optional[list[OutlineNode]]]) -> bool:
        if self.focused_id is None:
            return False
        return self.apply(op(self._tree, self.focused_id))

    def indent(self) -> bool:
        return self._focused_op(ops.indent_node)

    def outdent(self) -> bool:
        return self._focused_op(ops.outdent_node)

    def move_up(self) -> bool:
        return self._focused_op(ops.move_node_up)

    def move_down(self) -> bool:
        return self._focused_op(ops.move_node_down)

    def toggle(self, node_id: Optional[int] = None) -> bool:
        """Collapse or expand a node (default: the focused one)."""
        node_id = self.focused_id if node_id is None else node_id
        if node_id is None:
            return False
        return self.apply(ops.toggle_node(self._tree, node_id))

    def toggle_ordered_list(self, node_id: Optional[int] = None) -> bool:
        node_id = self.focused_id if node_id is None else node_id
        if node_id is None:
            return False
        return self.apply(ops.toggle_ordered_list(self._tree, node_id))

    def update_text(self, text: str) -> bool:
        if self.focused_id is None:
            return False
        return self.apply(ops.update_node_text(self._tree, self.focused_id, text))

    def add_sibling(self, before: bool = False) -> Optional[int]:
        """Add an empty sibling next to the focused node and focus it."""
        if self.focused_id is None:
            return None
        add = ops.add_sibling_before if before else ops.add_sibling_after
        result = add(self._tree, self.focused_id)
        if result is None or not self.apply(result.tree, result.new_id):
            return None
        return result.new_id

    def add_child(self, first: bool = False) -> Optional[int]:
        """Add an empty child to the focused node and focus it."""
        if self.focused_id is None:
            return None
        add = ops.add_child_first if first else ops.add_child
        result = add(self._tree, self.focused_id)
        if result is None or not self.apply(result.tree, result.new_id):
            return None
        return result.new_id

    def split(self, before_text: str, after_text: str) -> Optional[int]:
        """Split the focused node at the cursor as one history entry."""
        if self.focused_id is None:
            return None
        result = ops.split_node(self._tree, self.focused_id, before_text, after_text)
        if result is None or not self.apply(result.tree, result.new_id):
            return None
        return result.new_id

    def _merge(self, target_id: Optional[int], source_id: Optional[int], target_text: str, source_text: str) -> Optional[int]:
        if target_id is None or source_id is None:
            return None
        result = ops.merge_nodes(self._tree, target_id, source_id, target_text, source_text)
        if result is None or not self.apply(result.tree, target_id):
            return None
        return result.join_point

    def merge_with_previous(self, current_text: str) -> Optional[int]:
        """
        Join the focused node onto the previous visible node.

        Args:
            current_text: Text of the focused node as currently edited

        Returns:
            Join point in the merged text, or None
        """
        focused = self.focused_id
        if focused is None:
            return None
        target_id = previous_visible(self._tree, focused)
        if target_id is None:
            return None
        target = OutlineIndex(self._tree).get(target_id)
        return self._merge(target_id, focused, target.text, current_text)

    def merge_with_next(self, current_text: str) -> Optional[int]:
        """Pull the next visible node into the focused one."""
        focused = self.focused_id
        if focused is None:
            return None
        source_id = next_visible(self._tree, focused)
        if source_id is None:
            return None
        source = OutlineIndex(self._tree).get(source_id)
        return self._merge(focused, source_id, current_text, source.text)

    def move(
        self,
        drag_id: int,
        target_id: int,
        position: ops.MovePosition,
        indent_override: Optional[int] = None,
    ) -> bool:
        """Drop drag_id relative to target_id and focus the moved node."""
        return self.apply(ops.move_node(self._tree, drag_id, target_id, position, indent_override), drag_id)

    def delete_selection(self, confirm: Optional[ConfirmCallback] = None) -> bool:
        """
        Delete the selected nodes with their subtrees.

        Focus moves to the node now at the first deleted node's visible
        position, or the last visible node.
        """
        ids = self.selected_ids()
        if not ids:
            return False

        visible = [node.id for node in flatten_visible(self._tree)]
        position = visible.index(ids[0]) if ids[0] in visible else 0

        new_tree = ops.delete_nodes(self._tree, set(ids))
        if new_tree is None:
            return False
        remaining = [node.id for node in flatten_visible(new_tree)]
        if not remaining:
            focus = None
        else:
            focus = remaining[min(position, len(remaining) - 1)]

        return self.apply(new_tree, focus, confirm=confirm)

    # Clipboard

    def copy(self) -> int:
        """
        Copy the selection to the clipboard.

        Returns:
            Number of clipboard entries
        """
        ids = self.selected_ids()
        if not ids:
            return 0
        self.clipboard = copy_nodes(self._tree, ids)
        logger.debug("clipboard_copied", entries=len(self.clipboard), nodes=count_nodes(self.clipboard))
        return len(self.clipboard)

    def cut(self, confirm: Optional[ConfirmCallback] = None) -> bool:
        if not self.copy():
            return False
        return self.delete_selection(confirm=confirm)

    def paste(self, before: bool = False) -> list[int]:
        """
        Paste the clipboard next to the focused node (or at the top level
        of an empty outline).

        Returns:
            Ids of the pasted top-level entries (empty if nothing pasted)
        """
        if not self.clipboard:
            return []

        if self.focused_id is None:
            if self._tree:
                return []
            return self._import_forest(self.clipboard, None)

        paste = paste_before if before else paste_after
        result = paste(self._tree, self.focused_id, self.clipboard)
        if result is None or not self.apply(result.tree, result.pasted_ids[0] if result.pasted_ids else None):
            return []
        return result.pasted_ids

    # Import / export

    def _base_indent(self, parent_id: Optional[int]) -> int:
        if parent_id is None:
            return self._tree[0].indent if self._tree else ROOT_INDENT
        parent = OutlineIndex(self._tree).get(parent_id)
        return parent.indent + 1 if parent else ROOT_INDENT

    def _import_forest(self, forest: list[OutlineNode], parent_id: Optional[int]) -> list[int]:
        # Renumber from the current maximum so grafted ids never collide
        counter = next_id(self._tree)
        clones = []
        for root in forest:
            clone = root.copy()
            counter = reassign_ids(clone, counter)
            clones.append(clone)

        new_tree = ops.graft_nodes(self._tree, parent_id, clones)
        if not clones or not self.apply(new_tree, clones[0].id):
            return []
        return [clone.id for clone in clones]

    def import_text(self, text: str, parent_id: Optional[int] = None) -> list[int]:
        """Parse indented text and graft it under parent_id (or at the top level)."""
        forest = text_to_tree(text, next_id(self._tree), self._base_indent(parent_id))
        imported = self._import_forest(forest, parent_id)
        logger.info("text_imported", nodes=count_nodes(forest), parent_id=parent_id)
        return imported

    def import_markdown(self, markdown: str, parent_id: Optional[int] = None) -> list[int]:
        """Parse Markdown and graft it under parent_id (or at the top level)."""
        forest = markdown_to_tree(markdown, next_id(self._tree), self._base_indent(parent_id))
        imported = self._import_forest(forest, parent_id)
        logger.info("markdown_imported", nodes=count_nodes(forest), parent_id=parent_id)
        return imported

    def export_text(self, node_id: Optional[int] = None) -> Optional[str]:
        if node_id is None:
            return tree_to_text(self._tree)
        node = OutlineIndex(self._tree).get(node_id)
        return tree_to_text([node]) if node else None

    def export_markdown(self, node_id: Optional[int] = None) -> Optional[str]:
        if node_id is None:
            return outline_to_markdown(self._tree)
        index = OutlineIndex(self._tree)
        node = index.get(node_id)
        if node is None:
            return None
        return node_to_markdown(node, depth=sum(1 for _ in index.ancestors(node_id)))

    # History

    def _restore(self, snapshot: Optional[Snapshot]) -> bool:
        if snapshot is None:
            return False
        self._tree = snapshot.restore()
        self.selection = Selection.single(snapshot.selected_id)
        self._notify()
        return True

    def undo(self) -> bool:
        restored = self._restore(self.history.undo(self.focused_id))
        if restored:
            logger.info("history_undo", focused_id=self.focused_id)
        return restored

    def redo(self) -> bool:
        restored = self._restore(self.history.redo(self.focused_id))
        if restored:
            logger.info("history_redo", focused_id=self.focused_id)
        return restored
