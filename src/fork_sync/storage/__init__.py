"""Local persistence: metadata file, run logs, and git checkpoints."""

from .exceptions import GitCommandError, MetadataError, StorageError
from .git import GitCommitter
from .metadata_store import MetadataStore
from .run_logs import clear_outcome_logs, write_outcome_log, write_run_log

__all__ = [
    "GitCommandError",
    "GitCommitter",
    "MetadataError",
    "MetadataStore",
    "StorageError",
    "clear_outcome_logs",
    "write_outcome_log",
    "write_run_log",
]
