"""Shared fixtures for outline engine tests."""

import pytest

from locus_outline.node import OutlineNode


@pytest.fixture
def tree():
    """Sample outline used across the engine tests.

    覚書 (1)
      デザイン (2)
        配色ルール (3)
      コーディング (4)
        TypeScript入門 (5)
    タスク (6)
      買い物リスト (7)
    """
    return [
        OutlineNode(
            id=1,
            text="覚書",
            indent=1,
            children=[
                OutlineNode(
                    id=2,
                    text="デザイン",
                    indent=2,
                    children=[OutlineNode(id=3, text="配色ルール", indent=3)],
                ),
                OutlineNode(
                    id=4,
                    text="コーディング",
                    indent=2,
                    children=[OutlineNode(id=5, text="TypeScript入門", indent=3)],
                ),
            ],
        ),
        OutlineNode(
            id=6,
            text="タスク",
            indent=1,
            children=[OutlineNode(id=7, text="買い物リスト", indent=2)],
        ),
    ]


@pytest.fixture
def shape():
    """Render a forest as nested (text, indent, children) tuples for comparisons."""

    def render(nodes):
        return [(node.text, node.indent, render(node.children)) for node in nodes]

    return render
