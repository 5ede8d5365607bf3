"""Storage exceptions."""


class StorageError(Exception):
    """Base exception for local persistence errors."""

    pass


class MetadataError(StorageError):
    """Raised when the sync metadata file cannot be read or parsed."""

    pass


class GitCommandError(StorageError):
    """Raised when a git command fails and the failure is not tolerated."""

    def __init__(self, message: str, returncode: int | None = None, output: str = "") -> None:
        super().__init__(message)
        self.returncode = returncode
        self.output = output
