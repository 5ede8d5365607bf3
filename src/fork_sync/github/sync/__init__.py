"""Fork Sync module - keep organization forks in step with upstream.

Services:
- ForkSyncScheduler: Oldest-first, rate-limit-aware sync loop
- CheckpointManager: Periodic metadata saves during a run
- classify_outcome: Success / failure / rate limit classification
- order_repositories: Visit order from sync metadata
- run_fork_sync: Complete scheduled run (loop, logs, sweep, commits)
"""

from .checkpoint import CheckpointManager
from .classifier import classify_outcome, is_rate_limit_message
from .enums import OutputFormat, SyncOutcome
from .ordering import order_repositories
from .results import ForkSyncResult, RepoSyncAttempt
from .runner import RunPaths, final_commit_message, run_fork_sync
from .scheduler import ForkSyncer, ForkSyncScheduler

__all__ = [
    # Scheduler
    "ForkSyncScheduler",
    "ForkSyncer",
    "order_repositories",
    # Classification
    "SyncOutcome",
    "classify_outcome",
    "is_rate_limit_message",
    # Results
    "ForkSyncResult",
    "OutputFormat",
    "RepoSyncAttempt",
    # Checkpoints
    "CheckpointManager",
    # Full run
    "RunPaths",
    "final_commit_message",
    "run_fork_sync",
]
