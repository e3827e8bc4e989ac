"""Tests for copy and paste of subtrees."""

from locus_outline.clipboard import copy_node, copy_nodes, paste_after, paste_before
from locus_outline.node import count_nodes, find_node, iter_nodes


class TestCopy:
    """Tests for copy_node and copy_nodes."""

    def test_copy_node_is_detached(self, tree):
        """Test copy node is detached."""
        entry = copy_node(tree, 2)
        entry.children[0].text = "changed"

        assert [n.id for n in entry.walk()] == [2, 3]
        assert find_node(tree, 3).text == "配色ルール"

    def test_copy_unknown(self, tree):
        """Test copy unknown."""
        assert copy_node(tree, 999) is None

    def test_ancestor_with_selected_descendant_is_pruned(self, tree, shape):
        """Test ancestor with selected descendant is pruned."""
        entries = copy_nodes(tree, [1, 3])

        assert shape(entries) == [
            ("覚書", 1, [("デザイン", 2, [("配色ルール", 3, [])])]),
        ]

    def test_disjoint_nodes_in_tree_order(self, tree, shape):
        """Test disjoint nodes in tree order."""
        entries = copy_nodes(tree, [7, 2])

        assert shape(entries) == [
            ("デザイン", 2, [("配色ルール", 3, [])]),
            ("買い物リスト", 2, []),
        ]

    def test_unselected_node_copied_whole(self, tree):
        """Test unselected node copied whole."""
        entries = copy_nodes(tree, [4])

        assert [n.id for n in entries[0].walk()] == [4, 5]


class TestPaste:
    """Tests for paste_after and paste_before."""

    def test_paste_after_adds_copied_count(self, tree):
        """Test paste after adds copied count."""
        entries = copy_nodes(tree, [1])
        result = paste_after(tree, 6, entries)

        assert count_nodes(result.tree) == count_nodes(tree) + 5
        assert [n.text for n in result.tree] == ["覚書", "タスク", "覚書"]

    def test_pasted_ids_are_fresh_and_preorder(self, tree):
        """Test pasted ids are fresh and preorder."""
        result = paste_after(tree, 6, copy_nodes(tree, [1]))

        original_ids = {n.id for n in iter_nodes(tree)}
        pasted = [n.id for n in result.tree[2].walk()]
        assert pasted == [8, 9, 10, 11, 12]
        assert original_ids.isdisjoint(pasted)
        assert result.pasted_ids == [8]

    def test_paste_rebases_to_target_depth(self, tree):
        """Test paste rebases to target depth."""
        result = paste_before(tree, 3, copy_nodes(tree, [6]))

        pasted = result.tree[0].children[0].children[0]
        assert [(n.text, n.indent) for n in pasted.walk()] == [("タスク", 3), ("買い物リスト", 4)]

    def test_multiple_entries_stay_contiguous(self, tree):
        """Test multiple entries stay contiguous."""
        entries = copy_nodes(tree, [2, 4])
        result = paste_after(tree, 6, entries, id_seed=100)

        assert [n.id for n in result.tree] == [1, 6, 100, 102]
        assert result.pasted_ids == [100, 102]
        assert all(n.indent == 1 for n in result.tree)

    def test_same_entries_can_be_pasted_twice(self, tree):
        """Test same entries can be pasted twice."""
        entries = copy_nodes(tree, [7])
        first = paste_after(tree, 7, entries)
        second = paste_after(first.tree, 7, entries)

        assert first.pasted_ids == [8]
        assert second.pasted_ids == [9]
        assert entries[0].id == 7

    def test_unknown_target(self, tree):
        """Test unknown target."""
        assert paste_after(tree, 999, copy_nodes(tree, [1])) is None
