"""GitHub API client module.

This module provides:
- GitHubClient: Async GitHub API client (githubkit)
- GhCliForkSyncer: Fork sync through the gh CLI
- Fork Sync: ForkSyncScheduler, CheckpointManager, run_fork_sync
- Workflow sweep: WorkflowDisabler
"""

from .client import GitHubClient
from .exceptions import (
    GitHubAuthenticationError,
    GitHubClientError,
    GitHubCommandError,
    GitHubNotFoundError,
    GitHubRateLimitError,
    GitHubRetryableError,
)
from .gh_cli import GhCliForkSyncer
from .sync import (
    CheckpointManager,
    ForkSyncResult,
    ForkSyncScheduler,
    OutputFormat,
    SyncOutcome,
    classify_outcome,
    order_repositories,
    run_fork_sync,
)
from .workflows import WorkflowDisabler, WorkflowSweepResult

__all__ = [
    # Clients
    "GhCliForkSyncer",
    "GitHubClient",
    # Exceptions
    "GitHubAuthenticationError",
    "GitHubClientError",
    "GitHubCommandError",
    "GitHubNotFoundError",
    "GitHubRateLimitError",
    "GitHubRetryableError",
    # Fork sync
    "CheckpointManager",
    "ForkSyncResult",
    "ForkSyncScheduler",
    "OutputFormat",
    "SyncOutcome",
    "classify_outcome",
    "order_repositories",
    "run_fork_sync",
    # Workflow sweep
    "WorkflowDisabler",
    "WorkflowSweepResult",
]
