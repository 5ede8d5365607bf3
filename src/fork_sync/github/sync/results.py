"""Result objects for sync operations.

Structured results provide consistent interfaces for monitoring,
error handling, and CLI output.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from .enums import SyncOutcome


@dataclass
class RepoSyncAttempt:
    """Result of one sync call for one fork."""

    repository: str
    """Full repository name (owner/repo)."""

    outcome: SyncOutcome
    """How the attempt was classified."""

    started_at: datetime
    """When the sync call started."""

    completed_at: datetime
    """When the sync call returned."""

    merge_type: str | None = None
    """How the branch was updated (successful attempts only)."""

    error: str | None = None
    """Diagnostic text of a failed or rate limited attempt."""

    @property
    def duration_seconds(self) -> float:
        """Time taken by the sync call."""
        return (self.completed_at - self.started_at).total_seconds()

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result: dict[str, Any] = {
            "repository": self.repository,
            "outcome": self.outcome.value,
            "started_at": self.started_at.isoformat(),
            "completed_at": self.completed_at.isoformat(),
            "duration_seconds": round(self.duration_seconds, 2),
        }
        if self.merge_type:
            result["merge_type"] = self.merge_type
        if self.error:
            result["error"] = self.error
        return result


@dataclass
class ForkSyncResult:
    """Result of one sync run across all forks.

    The failed and rate_limited lists are the run's outcome logs; they
    are written to disk by the run pipeline and never persisted in the
    metadata record.
    """

    total_forks: int = 0
    """Forks in the visit order."""

    succeeded: int = 0
    """Forks synced successfully."""

    failed: list[str] = field(default_factory=list)
    """Forks whose sync failed (run continued)."""

    rate_limited: list[str] = field(default_factory=list)
    """Fork whose sync hit the rate limit (run stopped)."""

    attempts: list[RepoSyncAttempt] = field(default_factory=list)
    """Every sync call made, in order."""

    duration_seconds: float = 0.0
    """Total time taken for the loop."""

    last_run: str | None = None
    """last_run stamp written to the metadata (set by the run pipeline)."""

    workflows: dict[str, Any] | None = None
    """Workflow sweep summary, when the sweep ran."""

    @property
    def halted(self) -> bool:
        """Whether the run stopped early on a rate limit."""
        return bool(self.rate_limited)

    @property
    def attempted(self) -> int:
        """Number of forks a sync call was made for."""
        return len(self.attempts)

    @property
    def not_attempted(self) -> int:
        """Forks skipped because the run stopped early."""
        return max(0, self.total_forks - self.attempted)

    @property
    def is_clean(self) -> bool:
        """True when nothing failed and the rate limit was never hit."""
        return not self.failed and not self.rate_limited

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result: dict[str, Any] = {
            "summary": {
                "total_forks": self.total_forks,
                "attempted": self.attempted,
                "succeeded": self.succeeded,
                "failed": len(self.failed),
                "rate_limited": len(self.rate_limited),
                "not_attempted": self.not_attempted,
                "halted": self.halted,
                "duration_seconds": round(self.duration_seconds, 2),
                "last_run": self.last_run,
            },
            "failed_repos": list(self.failed),
            "rate_limited_repos": list(self.rate_limited),
            "repositories": [a.to_dict() for a in self.attempts],
        }
        if self.workflows is not None:
            result["workflows"] = self.workflows
        return result
