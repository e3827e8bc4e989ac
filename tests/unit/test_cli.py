"""Unit tests for CLI commands."""

import pytest
from click.testing import CliRunner

from locus.cli import cli


@pytest.fixture
def invoke(tmp_path, data_dir, monkeypatch):
    """Run the CLI against the sample data directory."""
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    for name in ["LOCUS_DATA_DIR", "LOCUS_BACKUP_MAX", "LOCUS_HISTORY_MAX"]:
        monkeypatch.delenv(name, raising=False)

    config_file = tmp_path / "config.yaml"
    config_file.write_text(f"storage:\n  data_dir: {data_dir}\n")

    def run(*args):
        return CliRunner().invoke(cli, ["--config", str(config_file), *args], obj={})

    return run


class TestShow:
    """Test the show and search commands."""

    def test_show_outline(self, invoke):
        """Test printing the whole outline."""
        result = invoke("show")

        assert result.exit_code == 0
        for text in ["root", "覚書", "TypeScript入門", "買い物リスト"]:
            assert text in result.output

    def test_collapsed_nodes_hidden(self, invoke, data_dir):
        """Test that collapsed children are summarised, not shown."""
        content = (data_dir / "memo.cgi").read_text(encoding="utf-8")
        (data_dir / "memo.cgi").write_text(
            content.replace("  デザイン\n", "  デザイン\n   !{close}\n"), encoding="utf-8"
        )

        result = invoke("show")
        assert "配色ルール" not in result.output
        assert "(+1)" in result.output

        result = invoke("show", "--all")
        assert "配色ルール" in result.output

    def test_search(self, invoke):
        """Test that search keeps ancestors of matches."""
        result = invoke("search", "typescript")

        assert result.exit_code == 0
        assert "TypeScript入門" in result.output
        assert "覚書" in result.output
        assert "タスク" not in result.output

    def test_search_no_match(self, invoke):
        """Test search no match."""
        result = invoke("search", "nothing-here")

        assert result.exit_code == 0
        assert "No nodes match" in result.output


class TestExport:
    """Test export commands."""

    def test_export_text(self, invoke):
        """Test exporting the outline as indented text."""
        result = invoke("export-text")

        assert result.exit_code == 0
        assert result.output.startswith("覚書\n  デザイン\n    配色ルール\n")

    def test_export_markdown_subtree(self, invoke):
        """Test exporting one subtree as Markdown."""
        result = invoke("export-markdown", "--id", "6")

        assert result.exit_code == 0
        assert result.output == "# タスク\n\n- 買い物リスト\n"

    def test_export_unknown_node(self, invoke):
        """Test export unknown node."""
        result = invoke("export-text", "--id", "999")

        assert result.exit_code != 0
        assert "Node not found: 999" in result.output


class TestImport:
    """Test import commands."""

    def test_import_text_under_node(self, invoke, data_dir, tmp_path):
        """Test that an import is written and the old file backed up."""
        source = tmp_path / "items.txt"
        source.write_text("牛乳\n  低脂肪\n", encoding="utf-8")

        result = invoke("import-text", str(source), "--under", "6")

        assert result.exit_code == 0
        assert "Imported" in result.output
        content = (data_dir / "memo.cgi").read_text(encoding="utf-8")
        assert content.endswith("  買い物リスト\n  牛乳\n   低脂肪\n")
        assert (data_dir / "memo_01.cgi").exists()

    def test_import_markdown(self, invoke, data_dir, tmp_path):
        """Test appending a Markdown file at the top level."""
        source = tmp_path / "plan.md"
        source.write_text("# 計画\n\n1. 調査\n2. 実装\n", encoding="utf-8")

        result = invoke("import-markdown", str(source))

        assert result.exit_code == 0
        content = (data_dir / "memo.cgi").read_text(encoding="utf-8")
        assert content.endswith(" 計画\n  !{ol}\n  調査\n  実装\n")

    def test_import_under_missing_node(self, invoke, tmp_path):
        """Test import under missing node."""
        source = tmp_path / "items.txt"
        source.write_text("x\n")

        result = invoke("import-text", str(source), "--under", "999")

        assert result.exit_code != 0
        assert "Node not found: 999" in result.output

    def test_import_empty_file(self, invoke, data_dir, tmp_path):
        """Test that an empty import leaves the memo file alone."""
        source = tmp_path / "empty.txt"
        source.write_text("\n")

        result = invoke("import-text", str(source))

        assert result.exit_code == 0
        assert "Nothing to import" in result.output
        assert not (data_dir / "memo_01.cgi").exists()


class TestBackups:
    """Test backup listing and restore."""

    def test_no_backups(self, invoke):
        """Test no backups."""
        result = invoke("backups")

        assert result.exit_code == 0
        assert "No backups yet" in result.output

    def test_list_backups(self, invoke, data_dir):
        """Test list backups."""
        (data_dir / "memo_01.cgi").write_text("root\n")

        result = invoke("backups")

        assert result.exit_code == 0
        assert "memo_01.cgi" in result.output

    def test_restore(self, invoke, data_dir):
        """Test restoring a backup slot."""
        (data_dir / "memo_02.cgi").write_text("root\n 昔のメモ\n", encoding="utf-8")

        result = invoke("restore", "memo_02.cgi")

        assert result.exit_code == 0
        assert "Restored" in result.output
        assert (data_dir / "memo.cgi").read_text(encoding="utf-8") == "root\n 昔のメモ\n"

    @pytest.mark.parametrize(
        "name,message",
        [
            ("../memo.cgi", "Invalid backup name"),
            ("memo_05.cgi", "Backup not found"),
        ],
    )
    def test_restore_errors(self, invoke, name, message):
        """Test restore errors."""
        result = invoke("restore", name)

        assert result.exit_code != 0
        assert message in result.output


class TestConfigErrors:
    """Test configuration problems surfaced by the CLI."""

    def test_invalid_config(self, tmp_path, monkeypatch):
        """Test that a bad config file is reported, not raised."""
        monkeypatch.setenv("HOME", str(tmp_path))
        config_file = tmp_path / "config.yaml"
        config_file.write_text("storage:\n  backup_max: 0\n")

        result = CliRunner().invoke(cli, ["--config", str(config_file), "show"], obj={})

        assert result.exit_code != 0
        assert "backup_max" in result.output
