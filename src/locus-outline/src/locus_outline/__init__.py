"""Locus outline engine - Edit and serialize collapsible outlines.

This package provides the value-level core of the Locus outliner: a tree of
text nodes, pure structural operations over it, and codecs for the formats
the outline is exchanged in.

Key features:
- OutlineNode forest with a strict indent invariant (child = parent + 1)
- Copy-on-write structural ops: indent, outdent, move, merge, split, delete
- Visible-order navigation and sibling-range selection
- Clipboard copy/paste with pruned multi-selection and fresh ids
- Bounded undo/redo history of independent snapshots
- Indented-text, Markdown and memo-file codecs

Example:
    >>> from locus_outline import text_to_tree, indent_node, tree_to_text
    >>> tree = text_to_tree("Notes\\nDesign", start_id=1)
    >>> tree_to_text(indent_node(tree, 2))
    'Notes\\n  Design'
"""

from locus_outline.node import (
    ROOT_INDENT,
    OutlineNode,
    clone_tree,
    count_nodes,
    find_node,
    iter_nodes,
    next_id,
)
from locus_outline.index import Location, OutlineIndex
from locus_outline.ops import (
    InsertResult,
    MergeResult,
    add_child,
    add_child_first,
    add_sibling_after,
    add_sibling_before,
    delete_node,
    delete_nodes,
    filter_tree,
    graft_nodes,
    indent_node,
    merge_nodes,
    move_node,
    move_node_down,
    move_node_up,
    outdent_node,
    set_node_closed,
    split_node,
    toggle_node,
    toggle_ordered_list,
    update_node_text,
)
from locus_outline.selection import (
    Selection,
    flatten_visible,
    next_visible,
    previous_visible,
    sibling_range,
)
from locus_outline.clipboard import PasteResult, copy_node, copy_nodes, paste_after, paste_before
from locus_outline.history import HistoryLog, NodeCountDelta, Snapshot
from locus_outline.text_codec import text_to_tree, tree_to_text
from locus_outline.markdown_codec import markdown_to_tree, node_to_markdown, outline_to_markdown
from locus_outline.memo import MemoDocument, parse_memo, serialize_memo
from locus_outline.paths import MemoPaths

__version__ = "0.1.0"

__all__ = [
    "ROOT_INDENT",
    "OutlineNode",
    "clone_tree",
    "count_nodes",
    "find_node",
    "iter_nodes",
    "next_id",
    "Location",
    "OutlineIndex",
    "InsertResult",
    "MergeResult",
    "add_child",
    "add_child_first",
    "add_sibling_after",
    "add_sibling_before",
    "delete_node",
    "delete_nodes",
    "filter_tree",
    "graft_nodes",
    "indent_node",
    "merge_nodes",
    "move_node",
    "move_node_down",
    "move_node_up",
    "outdent_node",
    "set_node_closed",
    "split_node",
    "toggle_node",
    "toggle_ordered_list",
    "update_node_text",
    "Selection",
    "flatten_visible",
    "next_visible",
    "previous_visible",
    "sibling_range",
    "PasteResult",
    "copy_node",
    "copy_nodes",
    "paste_after",
    "paste_before",
    "HistoryLog",
    "NodeCountDelta",
    "Snapshot",
    "text_to_tree",
    "tree_to_text",
    "markdown_to_tree",
    "node_to_markdown",
    "outline_to_markdown",
    "MemoDocument",
    "parse_memo",
    "serialize_memo",
    "MemoPaths",
]
