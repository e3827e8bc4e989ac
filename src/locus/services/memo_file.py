"""Memo file service: the persisted boundary of an outline.

Reads and writes the live memo file, rotates the backup ring on every write,
lists backups and restores one of them over the live file.
"""

import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

import structlog

from locus_outline.memo import DEFAULT_ROOT_TEXT, INITIAL_CONTENT, MemoDocument, parse_memo, serialize_memo
from locus_outline.node import OutlineNode, count_nodes
from locus_outline.paths import MemoPaths
from locus.models.config import StorageConfig
from locus.services.exceptions import BackupNotFoundError, InvalidBackupNameError
from locus.services.file_operations import atomic_write, rotate_backups

logger = structlog.get_logger()


@dataclass(frozen=True)
class BackupInfo:
    """One backup slot on disk."""

    name: str
    mtime: datetime


class MemoFile:
    """
    Live memo file plus its backup ring.

    Example:
        >>> memo = MemoFile(MemoPaths(Path("~/.local/share/locus").expanduser()))
        >>> nodes = memo.read()
        >>> memo.write(nodes)
        >>> [backup.name for backup in memo.list_backups()]
        ['memo_01.cgi']
    """

    def __init__(self, paths: MemoPaths) -> None:
        self.paths = paths
        self.root_text = DEFAULT_ROOT_TEXT
        # Rotation and overwrite must not interleave between writer threads
        self._write_lock = threading.Lock()

    @classmethod
    def from_config(cls, storage: StorageConfig) -> "MemoFile":
        return cls(MemoPaths(Path(storage.data_dir), storage.memo_name, storage.backup_max))

    def _parse(self, content: str) -> list[OutlineNode]:
        document: MemoDocument = parse_memo(content)
        self.root_text = document.root_text
        return document.nodes

    def read(self) -> list[OutlineNode]:
        """
        Parse the live memo file, creating an initial one if absent.

        Returns:
            Top-level forest

        Raises:
            OSError: On file I/O errors
        """
        memo_path = self.paths.memo_path
        if not memo_path.exists():
            self.paths.data_dir.mkdir(parents=True, exist_ok=True)
            atomic_write(memo_path, INITIAL_CONTENT)
            logger.info("memo_created", path=str(memo_path))

        nodes = self._parse(memo_path.read_text(encoding="utf-8"))
        logger.debug("memo_read", path=str(memo_path), nodes=count_nodes(nodes))
        return nodes

    def write(self, nodes: list[OutlineNode]) -> None:
        """
        Rotate backups, then overwrite the live file with nodes.

        Args:
            nodes: Full replacement forest

        Raises:
            OSError: On file I/O errors
        """
        content = serialize_memo(nodes, self.root_text)
        with self._write_lock:
            self.paths.data_dir.mkdir(parents=True, exist_ok=True)
            rotate_backups(self.paths)
            atomic_write(self.paths.memo_path, content)

        logger.info("memo_written", path=str(self.paths.memo_path), nodes=count_nodes(nodes))

    def list_backups(self) -> list[BackupInfo]:
        """List backup slots with modification times, newest first."""
        backups = [
            BackupInfo(
                name=path.name,
                mtime=datetime.fromtimestamp(path.stat().st_mtime, tz=timezone.utc),
            )
            for path in self.paths.list_backups()
        ]
        return sorted(backups, key=lambda backup: backup.mtime, reverse=True)

    def restore(self, name: str) -> list[OutlineNode]:
        """
        Copy a backup slot over the live file.

        The ring is not rotated, so the restored slot stays available.

        Args:
            name: Bare backup file name, e.g. "memo_03.cgi"

        Returns:
            The restored forest

        Raises:
            InvalidBackupNameError: If name is not a backup slot name
            BackupNotFoundError: If the slot has no file
            OSError: On file I/O errors
        """
        if not self.paths.is_backup_name(name):
            logger.warning("backup_name_invalid", name=name)
            raise InvalidBackupNameError(name)

        backup_path = self.paths.data_dir / name
        if not backup_path.exists():
            raise BackupNotFoundError(name)

        content = backup_path.read_text(encoding="utf-8")
        with self._write_lock:
            atomic_write(self.paths.memo_path, content)

        nodes = self._parse(content)
        logger.info("backup_restored", name=name, nodes=count_nodes(nodes))
        return nodes
