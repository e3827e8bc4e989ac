"""Low-level file operations for the memo store.

Atomic temp-file-rename writes and the numbered backup ring that every
memo write rotates before overwriting the live file.
"""

import os
import shutil
import structlog
from pathlib import Path

from locus_outline.paths import MemoPaths

logger = structlog.get_logger()


def atomic_write(path: Path, content: str) -> None:
    """
    Atomically write content to file with temp-file-rename pattern.

    1. Write to temporary file in the same directory
    2. fsync to ensure data is on disk
    3. Atomic rename to replace original file

    Args:
        path: Target file path
        content: Content to write

    Raises:
        OSError: On file I/O errors
        PermissionError: On permission errors
    """
    # Create temporary file in same directory (ensures same filesystem for atomic rename)
    temp_path = path.parent / f".{path.name}.tmp.{os.getpid()}"

    try:
        temp_path.write_text(content, encoding='utf-8')

        with open(temp_path, 'r+', encoding='utf-8') as f:
            f.flush()
            os.fsync(f.fileno())

        # On POSIX systems, this is atomic even if target exists
        temp_path.replace(path)

        logger.debug(
            "atomic_write_success",
            path=str(path),
            size=len(content)
        )

    except Exception as e:
        # Clean up temp file on any error
        if temp_path.exists():
            temp_path.unlink()
        logger.error(
            "atomic_write_failed",
            path=str(path),
            error=str(e)
        )
        raise


def rotate_backups(paths: MemoPaths) -> None:
    """
    Shift the backup ring by one slot and save the live file into slot 1.

    Deletes the oldest slot, renames N-1 -> N ... 1 -> 2, then copies the
    current live file (if any) into slot 1. Missing slots are skipped.

    Args:
        paths: Memo paths describing the data directory and ring depth

    Raises:
        OSError: On file I/O errors
    """
    oldest = paths.backup_path(paths.backup_max)
    if oldest.exists():
        oldest.unlink()

    for slot in range(paths.backup_max - 1, 0, -1):
        source = paths.backup_path(slot)
        if source.exists():
            source.rename(paths.backup_path(slot + 1))

    if paths.memo_path.exists():
        shutil.copyfile(paths.memo_path, paths.backup_path(1))

    logger.debug("backups_rotated", data_dir=str(paths.data_dir), depth=paths.backup_max)
