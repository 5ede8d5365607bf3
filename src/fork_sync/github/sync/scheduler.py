"""Fork Sync Scheduler - sync every fork once, oldest first.

Forks are synced strictly one at a time in the order produced by
order_repositories(). Each attempt is classified by classify_outcome():

- success: last_update is set to now and the success counter advances,
  checkpointing the metadata at the configured interval
- failure: the fork goes to the failed list and the loop moves on
- rate limited: the fork goes to the rate limited list and the loop stops,
  since every later call would hit the same exhausted quota
"""

from __future__ import annotations

import time
from collections.abc import Iterable
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Protocol

from fork_sync.logging import bind_repo, get_logger
from fork_sync.schemas.repository import parse_repo_string

from .classifier import classify_outcome
from .enums import SyncOutcome
from .ordering import order_repositories
from .results import ForkSyncResult, RepoSyncAttempt

if TYPE_CHECKING:
    from fork_sync.schemas.github_api import ForkSyncResponse
    from fork_sync.schemas.metadata import SyncMetadata

    from .checkpoint import CheckpointManager

logger = get_logger(__name__)


class ForkSyncer(Protocol):
    """Anything that can sync one fork with its upstream.

    Implemented by GitHubClient (REST API) and GhCliForkSyncer (gh CLI).
    """

    async def sync_fork(
        self,
        owner: str,
        repo: str,
        *,
        force: bool = True,
    ) -> ForkSyncResponse: ...


class ForkSyncScheduler:
    """Runs the prioritized, rate-limit-aware sync loop.

    Usage:
        store = MetadataStore(path)
        metadata = store.load()
        checkpoints = CheckpointManager(store, metadata, every=10)

        async with GitHubClient() as client:
            scheduler = ForkSyncScheduler(client, metadata, checkpoints)
            forks = await client.list_forks("fork-the-planet")
            result = await scheduler.run(forks)

        checkpoints.finalize()
    """

    def __init__(
        self,
        syncer: ForkSyncer,
        metadata: SyncMetadata,
        checkpoints: CheckpointManager | None = None,
        *,
        force: bool = True,
    ) -> None:
        """Initialize the scheduler.

        Args:
            syncer: Performs the per-fork sync call
            metadata: Sync record, mutated in place on every success
            checkpoints: Optional CheckpointManager for periodic saves
            force: Passed to every sync call (reset diverged forks)
        """
        self._syncer = syncer
        self._metadata = metadata
        self._checkpoints = checkpoints
        self._force = force

    @property
    def metadata(self) -> SyncMetadata:
        """The sync record this scheduler updates."""
        return self._metadata

    def plan(self, repositories: Iterable[str]) -> list[str]:
        """Visit order for ``repositories`` given the current metadata."""
        return order_repositories(repositories, self._metadata)

    async def sync_repository(self, full_name: str) -> RepoSyncAttempt:
        """Sync one fork and classify the attempt.

        On success the fork's last_update is set to the completion time.
        Errors never propagate: they become FAILED or RATE_LIMITED attempts.
        """
        log = bind_repo(full_name)
        log.info("Updating {}", full_name)

        started_at = datetime.now(UTC)
        error: Exception | None = None
        response: ForkSyncResponse | None = None
        try:
            owner, name = parse_repo_string(full_name)
            response = await self._syncer.sync_fork(owner, name, force=self._force)
        except Exception as e:
            error = e
        completed_at = datetime.now(UTC)

        outcome = classify_outcome(error)
        attempt = RepoSyncAttempt(
            repository=full_name,
            outcome=outcome,
            started_at=started_at,
            completed_at=completed_at,
        )

        if outcome == SyncOutcome.SUCCESS:
            self._metadata.record_success(full_name, completed_at)
            attempt.merge_type = response.merge_type if response is not None else None
            log.info(
                "Synced {} ({})",
                full_name,
                attempt.merge_type or "done",
            )
        elif outcome == SyncOutcome.RATE_LIMITED:
            attempt.error = str(error)
            log.warning("Rate limit reached while syncing {}: {}", full_name, error)
        else:
            attempt.error = str(error) or type(error).__name__
            log.error("Failed to sync {}: {}", full_name, attempt.error)

        return attempt

    async def run(self, repositories: Iterable[str]) -> ForkSyncResult:
        """Sync every fork once, oldest first, stopping on a rate limit.

        Args:
            repositories: Fork identifiers (owner/name); order is irrelevant

        Returns:
            ForkSyncResult with counts, outcome lists and per-fork attempts
        """
        start_time = time.monotonic()
        ordered = self.plan(repositories)
        result = ForkSyncResult(total_forks=len(ordered))

        logger.info("Syncing {} forks, oldest first", len(ordered))

        for full_name in ordered:
            attempt = await self.sync_repository(full_name)
            result.attempts.append(attempt)

            if attempt.outcome == SyncOutcome.SUCCESS:
                result.succeeded += 1
                if self._checkpoints is not None:
                    self._checkpoints.record_success()
            elif attempt.outcome == SyncOutcome.RATE_LIMITED:
                result.rate_limited.append(full_name)
                logger.warning("Rate limit reached, stopping sync process")
                break
            else:
                result.failed.append(full_name)

        result.duration_seconds = time.monotonic() - start_time

        logger.info(
            "Sync loop complete: succeeded={}, failed={}, rate_limited={}, "
            "not attempted={} ({:.1f}s)",
            result.succeeded,
            len(result.failed),
            len(result.rate_limited),
            result.not_attempted,
            result.duration_seconds,
        )

        return result
