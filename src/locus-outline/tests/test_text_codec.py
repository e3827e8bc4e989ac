"""Tests for plain indented-text export and import."""

from locus_outline.node import OutlineNode
from locus_outline.ops import add_sibling_after
from locus_outline.text_codec import text_to_tree, tree_to_text

SAMPLE_TEXT = """覚書
  デザイン
    配色ルール
  コーディング
    TypeScript入門
タスク
  買い物リスト"""


class TestTreeToText:
    """Tests for tree_to_text."""

    def test_export_whole_tree(self, tree):
        """Test export whole tree."""
        assert tree_to_text(tree) == SAMPLE_TEXT

    def test_subtree_starts_at_column_zero(self, tree):
        """Test subtree starts at column zero."""
        assert tree_to_text([tree[0].children[0]]) == "デザイン\n  配色ルール"

    def test_collapsed_nodes_are_exported(self, tree):
        """Test collapsed nodes are exported."""
        tree[0].closed = True
        assert tree_to_text(tree) == SAMPLE_TEXT

    def test_empty(self):
        """Test empty."""
        assert tree_to_text([]) == ""


class TestTextToTree:
    """Tests for text_to_tree."""

    def test_round_trip(self, tree):
        """Test round trip."""
        assert text_to_tree(tree_to_text(tree), start_id=1) == tree

    def test_empty_node_does_not_survive_round_trip(self, tree):
        """Test empty node does not survive round trip."""
        with_empty = add_sibling_after(tree, 3).tree
        text = tree_to_text(with_empty)

        assert "\n    \n" in text
        assert tree_to_text(text_to_tree(text, start_id=1)) == tree_to_text(tree)

    def test_ids_and_base_indent(self, shape):
        """Test ids and base indent."""
        nodes = text_to_tree("a\n  b\nc", start_id=10, base_indent=3)

        assert [n.id for n in nodes] == [10, 12]
        assert shape(nodes) == [("a", 3, [("b", 4, [])]), ("c", 3, [])]

    def test_blank_lines_dropped(self, shape):
        """Test blank lines dropped."""
        nodes = text_to_tree("a\n\n   \n  b\n", start_id=1)

        assert shape(nodes) == [("a", 1, [("b", 2, [])])]

    def test_tabs_count_as_one_level(self, shape):
        """Test tabs count as one level."""
        nodes = text_to_tree("a\n\tb\n\t\tc", start_id=1)

        assert shape(nodes) == [("a", 1, [("b", 2, [("c", 3, [])])])]

    def test_deep_jump_nests_under_nearest_shallower_line(self, shape):
        """Test deep jump nests under nearest shallower line."""
        nodes = text_to_tree("a\n      b\n  c", start_id=1)

        assert shape(nodes) == [("a", 1, [("b", 2, []), ("c", 2, [])])]

    def test_blank_input(self):
        """Test blank input."""
        assert text_to_tree("", start_id=1) == []
        assert text_to_tree("\n  \n", start_id=1) == []

    def test_text_after_indent_is_kept(self):
        """Test text after indent is kept."""
        nodes = text_to_tree("  a  b ", start_id=1)

        assert nodes == [OutlineNode(id=1, text="a  b ", indent=1)]
