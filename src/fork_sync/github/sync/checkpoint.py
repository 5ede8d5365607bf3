"""Checkpoint Manager - periodic metadata persistence during a sync run.

Instead of writing the metadata file only when the run ends (all-or-nothing),
it is saved after every ``every`` successful syncs, so a crash or a killed
runner loses at most ``every - 1`` recorded syncs.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from fork_sync.logging import get_logger

if TYPE_CHECKING:
    from fork_sync.schemas.metadata import SyncMetadata
    from fork_sync.storage import GitCommitter, MetadataStore

logger = get_logger(__name__)


class CheckpointManager:
    """Manages checkpoint boundaries for a sync run.

    Usage:
        store = MetadataStore(path)
        metadata = store.load()
        checkpoints = CheckpointManager(store, metadata, every=10)

        # ... sync forks ...
        checkpoints.record_success()  # Saves at every 10th success

        checkpoints.finalize()  # Save whatever is left

    Attributes:
        total_successes: Successful syncs recorded this run.
        unsaved_count: Successful syncs not yet written to disk.
        checkpoints_written: Number of saves performed.
    """

    def __init__(
        self,
        store: MetadataStore,
        metadata: SyncMetadata,
        *,
        every: int = 10,
        committer: GitCommitter | None = None,
    ) -> None:
        """Initialize the checkpoint manager.

        Args:
            store: Store the metadata is saved through.
            metadata: The record being mutated by the scheduler.
            every: Successful syncs between automatic saves.
            committer: Optional GitCommitter; when provided, each checkpoint
                       is also committed to git.
        """
        if every < 1:
            raise ValueError("Checkpoint interval must be at least 1")
        self._store = store
        self._metadata = metadata
        self._every = every
        self._committer = committer
        self._total_successes = 0
        self._unsaved_count = 0
        self._checkpoints_written = 0

    @property
    def every(self) -> int:
        """Configured checkpoint interval."""
        return self._every

    @property
    def total_successes(self) -> int:
        """Successful syncs recorded this run."""
        return self._total_successes

    @property
    def unsaved_count(self) -> int:
        """Successful syncs not yet written to disk."""
        return self._unsaved_count

    @property
    def checkpoints_written(self) -> int:
        """Number of saves performed."""
        return self._checkpoints_written

    def record_success(self) -> bool:
        """Record one successful sync, checkpointing at the interval.

        Returns:
            True if this call wrote a checkpoint.
        """
        self._total_successes += 1
        self._unsaved_count += 1
        if self._total_successes % self._every == 0:
            self.checkpoint(
                f"Update sync metadata - {self._total_successes} repositories synced"
            )
            return True
        return False

    def checkpoint(self, message: str | None = None) -> None:
        """Save the metadata now, committing it when a committer is set.

        Errors from the store propagate: a run that cannot persist its
        progress should fail.
        """
        self._store.save(self._metadata)
        self._checkpoints_written += 1
        saved = self._unsaved_count
        self._unsaved_count = 0

        logger.info(
            "Checkpoint: saved metadata after {} successful syncs ({} new)",
            self._total_successes,
            saved,
        )

        if self._committer is not None and message is not None:
            self._committer.commit([Path(self._store.path)], message)

    def finalize(self) -> None:
        """Write the final checkpoint of the run.

        Always saves, even with nothing new recorded, so that run-level
        fields such as last_run reach the disk.
        """
        self.checkpoint()
