"""Unit tests for structured logging setup."""

import json

import pytest
import structlog

from locus.utils import logging as locus_logging
from locus.utils.logging import bind_memo_context, configure_logging, get_logger


@pytest.fixture(autouse=True)
def reset_structlog(monkeypatch):
    monkeypatch.delenv("LOCUS_LOG_LEVEL", raising=False)
    yield
    structlog.contextvars.clear_contextvars()
    structlog.reset_defaults()


def read_records(log_file):
    return [json.loads(line) for line in log_file.read_text(encoding="utf-8").splitlines()]


class TestConfigureLogging:
    """Test configure_logging."""

    def test_writes_json_lines(self, tmp_path):
        """Test that events are written as JSON to locus.log."""
        log_file = configure_logging(tmp_path)

        get_logger("test").info("memo_written", nodes=3)

        assert log_file == tmp_path / "locus.log"
        record = read_records(log_file)[-1]
        assert record["event"] == "memo_written"
        assert record["nodes"] == 3
        assert record["level"] == "info"

    def test_non_ascii_text_kept_readable(self, tmp_path):
        """Test that node text is logged without \\u escapes."""
        log_file = configure_logging(tmp_path)

        get_logger("test").info("text_imported", first="覚書")

        assert "覚書" in log_file.read_text(encoding="utf-8")

    def test_debug_filtered_by_default(self, tmp_path):
        """Test that DEBUG events are dropped at the default level."""
        log_file = configure_logging(tmp_path)

        get_logger("test").debug("atomic_write_success")

        assert log_file.read_text() == ""

    def test_level_from_environment(self, tmp_path, monkeypatch):
        """Test that LOCUS_LOG_LEVEL enables debug output."""
        monkeypatch.setenv("LOCUS_LOG_LEVEL", "debug")
        log_file = configure_logging(tmp_path)

        get_logger("test").debug("atomic_write_success")

        assert "atomic_write_success" in log_file.read_text()

    def test_level_argument_overrides_environment(self, tmp_path, monkeypatch):
        """Test that an explicit level wins over LOCUS_LOG_LEVEL."""
        monkeypatch.setenv("LOCUS_LOG_LEVEL", "DEBUG")
        log_file = configure_logging(tmp_path, level="warning")

        get_logger("test").info("history_commit")
        get_logger("test").warning("destructive_edit_declined")

        assert [r["event"] for r in read_records(log_file)] == ["destructive_edit_declined"]

    def test_invalid_level_falls_back_to_info(self, tmp_path, monkeypatch):
        """Test that an unknown level name means INFO."""
        monkeypatch.setenv("LOCUS_LOG_LEVEL", "chatty")
        log_file = configure_logging(tmp_path)

        get_logger("test").debug("hidden")
        get_logger("test").info("shown")

        assert [r["event"] for r in read_records(log_file)] == ["shown"]

    def test_reconfigure_switches_file_and_closes_old_one(self, tmp_path):
        """Test that a second call redirects existing loggers."""
        logger = get_logger("test")
        first = configure_logging(tmp_path / "first")
        first_stream = locus_logging._log_stream

        second = configure_logging(tmp_path / "second")
        logger.info("after_switch")

        assert first_stream.closed
        assert first.read_text() == ""
        assert "after_switch" in second.read_text()


class TestBindMemoContext:
    """Test bind_memo_context."""

    def test_memo_path_added_to_events(self, tmp_path):
        """Test that the bound memo path appears on later events."""
        log_file = configure_logging(tmp_path)

        bind_memo_context(tmp_path / "memo.cgi")
        get_logger("test").info("memo_written")

        assert read_records(log_file)[-1]["memo"] == str(tmp_path / "memo.cgi")
