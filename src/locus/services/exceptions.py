"""Custom exceptions for Locus services."""


class PersistenceError(Exception):
    """Raised when the memo store cannot complete a file operation.

    Attributes:
        path: Path (or bare backup name) the operation was about
        message: Human-readable error message
    """

    def __init__(self, path: str, message: str = "Memo file operation failed"):
        """Initialize PersistenceError.

        Args:
            path: Path involved in the failed operation
            message: Human-readable error message
        """
        self.path = path
        self.message = message
        super().__init__(f"{message}: {path}")


class InvalidBackupNameError(PersistenceError):
    """Raised when a restore request names something other than a backup slot."""

    def __init__(self, path: str, message: str = "Invalid backup name"):
        super().__init__(path, message)


class BackupNotFoundError(PersistenceError):
    """Raised when a restore request names a backup slot that has no file."""

    def __init__(self, path: str, message: str = "Backup not found"):
        super().__init__(path, message)
