"""Memo file and backup slot paths.

This module names the files of a memo data directory: the live memo file
and its numbered backup slots (memo_01.cgi ... memo_10.cgi).
"""

import re
from pathlib import Path

BACKUP_MAX = 10
BACKUP_NAME_RE = re.compile(r"^memo_\d+\.cgi$")


class MemoPaths:
    """Path operations for a memo data directory.

    Attributes:
        data_dir: Directory holding the memo file and its backups
        memo_name: File name of the live memo file
        backup_max: Number of backup slots in the ring
    """

    def __init__(self, data_dir: Path, memo_name: str = "memo.cgi", backup_max: int = BACKUP_MAX):
        """Initialize with the data directory.

        Args:
            data_dir: Path to the data directory (created later if missing)
            memo_name: Live memo file name
            backup_max: Backup ring depth

        Raises:
            ValueError: If data_dir exists but isn't a directory
        """
        if data_dir.exists() and not data_dir.is_dir():
            raise ValueError(f"Data path is not a directory: {data_dir}")

        self.data_dir = data_dir
        self.memo_name = memo_name
        self.backup_max = backup_max

    @property
    def memo_path(self) -> Path:
        return self.data_dir / self.memo_name

    def backup_path(self, slot: int) -> Path:
        """Get path of a backup slot.

        Args:
            slot: Slot number, 1 = newest

        Returns:
            Path like data_dir/memo_01.cgi
        """
        return self.data_dir / f"memo_{slot:02d}.cgi"

    @staticmethod
    def is_backup_name(name: str) -> bool:
        """Check a bare file name against the backup naming scheme.

        Only names like memo_03.cgi pass, so user-supplied names can never
        point outside the data directory.
        """
        return bool(BACKUP_NAME_RE.match(name))

    def list_backups(self) -> list[Path]:
        """List existing backup files, sorted by name."""
        if not self.data_dir.exists():
            return []

        return sorted(
            path for path in self.data_dir.iterdir()
            if path.is_file() and self.is_backup_name(path.name)
        )
