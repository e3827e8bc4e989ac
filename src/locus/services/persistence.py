"""Fire-and-forget persistence of committed outlines.

Edits are committed in memory immediately; writing them to the memo file
happens in background tasks that never block or roll back the editor. A
failed write only changes the reported status.
"""

import asyncio
from enum import Enum
from typing import Optional

import structlog

from locus_outline.node import OutlineNode, clone_tree
from locus.services.memo_file import MemoFile

logger = structlog.get_logger()


class SaveStatus(str, Enum):
    """Status of the most recently finished (or started) save."""

    IDLE = "idle"
    SAVING = "saving"
    SAVED = "saved"
    ERROR = "error"


class PersistenceService:
    """
    Writes outlines to a MemoFile from background tasks.

    Saves may overlap; the file boundary resolves them last-write-wins.

    Example:
        >>> service = PersistenceService(memo_file)
        >>> store.add_commit_listener(service.schedule)
        >>> ...
        >>> await service.drain()
        >>> service.status
        <SaveStatus.SAVED: 'saved'>
    """

    def __init__(self, memo_file: MemoFile) -> None:
        self.memo_file = memo_file
        self.status = SaveStatus.IDLE
        self.last_error: Optional[str] = None
        self._tasks: set[asyncio.Task] = set()

    async def save(self, nodes: list[OutlineNode]) -> SaveStatus:
        """
        Write nodes in a worker thread and report the outcome.

        OSError from the file boundary is turned into SaveStatus.ERROR;
        it is not retried.

        Args:
            nodes: Forest to write (not mutated)

        Returns:
            SAVED or ERROR
        """
        self.status = SaveStatus.SAVING
        try:
            await asyncio.to_thread(self.memo_file.write, nodes)
        except OSError as e:
            self.status = SaveStatus.ERROR
            self.last_error = str(e)
            logger.error("persistence_failed", path=str(self.memo_file.paths.memo_path), error=str(e))
            return self.status

        self.status = SaveStatus.SAVED
        self.last_error = None
        return self.status

    def schedule(self, nodes: list[OutlineNode]) -> asyncio.Task:
        """
        Start a save without waiting for it.

        Must be called from a running event loop. The tree is copied first
        so later edits cannot leak into the write.

        Returns:
            The background task
        """
        task = asyncio.get_running_loop().create_task(self.save(clone_tree(nodes)))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    @property
    def pending(self) -> int:
        return len(self._tasks)

    async def drain(self) -> None:
        """Wait for every scheduled save to finish."""
        if self._tasks:
            await asyncio.gather(*self._tasks)
