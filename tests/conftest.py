"""Shared test fixtures for all test modules."""

import pytest

from locus_outline.node import OutlineNode
from locus_outline.paths import MemoPaths
from locus.services.memo_file import MemoFile

SAMPLE_MEMO = (
    "root\n"
    " 覚書\n"
    "  デザイン\n"
    "   配色ルール\n"
    "  コーディング\n"
    "   TypeScript入門\n"
    " タスク\n"
    "  買い物リスト\n"
)


@pytest.fixture
def sample_tree():
    """The outline stored in SAMPLE_MEMO, with the ids a parse assigns."""
    design = OutlineNode(id=2, text="デザイン", indent=2, children=[OutlineNode(id=3, text="配色ルール", indent=3)])
    coding = OutlineNode(id=4, text="コーディング", indent=2, children=[OutlineNode(id=5, text="TypeScript入門", indent=3)])
    return [
        OutlineNode(id=1, text="覚書", indent=1, children=[design, coding]),
        OutlineNode(id=6, text="タスク", indent=1, children=[OutlineNode(id=7, text="買い物リスト", indent=2)]),
    ]


@pytest.fixture
def data_dir(tmp_path):
    """Data directory holding a memo file with the sample outline."""
    directory = tmp_path / "data"
    directory.mkdir()
    (directory / "memo.cgi").write_text(SAMPLE_MEMO, encoding="utf-8")
    return directory


@pytest.fixture
def memo_file(data_dir):
    return MemoFile(MemoPaths(data_dir))
