"""Tests for undo/redo history."""

import pytest

from locus_outline.history import NodeCountDelta, HistoryLog, Snapshot
from locus_outline.node import OutlineNode
from locus_outline.ops import delete_node, indent_node, update_node_text


def numbered(count):
    return [OutlineNode(id=i, text=str(i), indent=1) for i in range(1, count + 1)]


class TestSnapshot:
    """Tests for Snapshot."""

    def test_capture_is_independent(self, tree):
        """Test capture is independent."""
        snapshot = Snapshot.capture(tree, 2)
        tree[0].text = "changed"

        assert snapshot.tree[0].text == "覚書"

    def test_restore_returns_fresh_copy(self, tree):
        """Test restore returns fresh copy."""
        snapshot = Snapshot.capture(tree)
        restored = snapshot.restore()
        restored[0].text = "changed"

        assert snapshot.restore()[0].text == "覚書"


class TestNodeCountDelta:
    """Tests for NodeCountDelta."""

    @pytest.mark.parametrize(
        "before,after,destructive",
        [
            (100, 90, True),
            (100, 91, False),
            (10, 9, True),
            (5, 8, False),
            (0, 0, False),
        ],
    )
    def test_threshold(self, before, after, destructive):
        """Test threshold."""
        assert NodeCountDelta(before, after).is_destructive() is destructive

    def test_removed_never_negative(self):
        """Test removed never negative."""
        delta = NodeCountDelta(before=3, after=7)

        assert delta.removed == 0
        assert delta.removed_ratio == 0.0


class TestHistoryLog:
    """Tests for HistoryLog."""

    def test_undo_redo_round_trip(self, tree):
        """Test undo redo round trip."""
        history = HistoryLog(tree, selected_id=4)
        edited = indent_node(tree, 4)
        history.commit(edited, selected_id=4)

        assert history.undo().restore() == tree
        assert history.redo().restore() == edited

    def test_undo_restores_focus(self, tree):
        """Test undo restores focus."""
        history = HistoryLog(tree, selected_id=1)
        history.commit(update_node_text(tree, 3, "x"), selected_id=3)

        assert history.undo(selected_id=3).selected_id == 1
        assert history.redo().selected_id == 3

    def test_empty_stacks(self, tree):
        """Test empty stacks."""
        history = HistoryLog(tree)

        assert not history.can_undo
        assert not history.can_redo
        assert history.undo() is None
        assert history.redo() is None

    def test_commit_clears_redo(self, tree):
        """Test commit clears redo."""
        history = HistoryLog(tree)
        history.commit(delete_node(tree, 7))
        history.undo()
        history.commit(delete_node(tree, 3))

        assert not history.can_redo

    def test_oldest_entry_evicted(self):
        """Test oldest entry evicted."""
        nodes = numbered(1)
        history = HistoryLog(nodes, max_entries=50)
        for step in range(51):
            history.commit(update_node_text(nodes, 1, f"step {step}"))

        undone = 0
        while history.undo() is not None:
            undone += 1

        assert undone == 50
        assert history.tree[0].text == "step 0"

    def test_stored_tree_is_isolated_from_caller(self, tree):
        """Test stored tree is isolated from caller."""
        history = HistoryLog(tree)
        history.commit(tree)
        tree[0].text = "mutated"

        assert history.tree[0].text == "覚書"
        assert history.undo().restore()[0].text == "覚書"

    def test_node_count_delta(self):
        """Test node count delta."""
        history = HistoryLog(numbered(10))

        assert history.node_count_delta(numbered(9)).is_destructive()
        assert not history.node_count_delta(numbered(10)).is_destructive()

    def test_update_selection_keeps_tree(self, tree):
        """Test update selection keeps tree."""
        history = HistoryLog(tree, selected_id=1)
        history.update_selection(5)

        assert history.current.selected_id == 5
        assert history.tree == tree
        assert not history.can_undo
