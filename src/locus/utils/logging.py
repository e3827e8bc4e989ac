"""Structured logging setup for Locus."""

import structlog
from pathlib import Path
from typing import Any, Optional, TextIO
import os

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")
DEFAULT_LOG_DIR = Path("~/.cache/locus/logs")

# Handle of the log file opened by the last configure_logging() call
_log_stream: Optional[TextIO] = None


def _resolve_level(level: Optional[str]) -> str:
    """Pick the level from the argument, then LOCUS_LOG_LEVEL, then INFO."""
    candidate = (level or os.environ.get("LOCUS_LOG_LEVEL") or "INFO").upper()
    return candidate if candidate in LOG_LEVELS else "INFO"


def configure_logging(log_dir: Optional[Path] = None, level: Optional[str] = None) -> Path:
    """
    Configure structlog for JSON logging to ~/.cache/locus/logs/locus.log.

    Log level comes from the level argument, else the LOCUS_LOG_LEVEL
    environment variable, else INFO. Unknown names fall back to INFO.

    Log levels:
    - DEBUG: Individual structural operations, ignored gestures, atomic writes
    - INFO: Commits, undo/redo, backups rotated and restored, imports
    - WARNING: Destructive edits declined, invalid backup requests
    - ERROR: Persistence failures

    Calling this again (each CLI invocation does) closes the previously
    opened log file before opening the new one.

    Args:
        log_dir: Directory for the log file (default: ~/.cache/locus/logs)
        level: Explicit log level name, overriding the environment

    Returns:
        Path of the log file

    Example:
        # View logs with jq for readability:
        tail -f ~/.cache/locus/logs/locus.log | jq .
    """
    global _log_stream

    if log_dir is None:
        log_dir = DEFAULT_LOG_DIR.expanduser()
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "locus.log"

    if _log_stream is not None and not _log_stream.closed:
        _log_stream.close()
    _log_stream = open(log_file, "a", encoding="utf-8")

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(ensure_ascii=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(_resolve_level(level)),
        context_class=dict,
        logger_factory=structlog.WriteLoggerFactory(file=_log_stream),
        cache_logger_on_first_use=False,
    )
    return log_file


def bind_memo_context(memo_path: Path) -> None:
    """Attach the memo file path to every following log event."""
    structlog.contextvars.bind_contextvars(memo=str(memo_path))


def get_logger(name: str) -> Any:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (typically __name__ of calling module)

    Returns:
        Structured logger instance

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("memo_written", path="memo.cgi", nodes=42)
    """
    return structlog.get_logger(name)
