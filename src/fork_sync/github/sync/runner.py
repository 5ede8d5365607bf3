"""Full sync run: everything one scheduled invocation does.

1. Remove outcome logs left by the previous run and load the metadata
2. List the organization's forks and run the sync loop
3. Stamp last_run and save the metadata
4. Write the outcome logs and the run log
5. Unless the run was rate limited, sweep workflows
6. Optionally pull, commit and push the metadata
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from fork_sync.github.exceptions import GitHubClientError
from fork_sync.github.workflows import WorkflowDisabler
from fork_sync.logging import get_logger
from fork_sync.storage import (
    GitCommitter,
    MetadataStore,
    clear_outcome_logs,
    write_outcome_log,
    write_run_log,
)

from .checkpoint import CheckpointManager
from .scheduler import ForkSyncer, ForkSyncScheduler

if TYPE_CHECKING:
    from fork_sync.config import Settings
    from fork_sync.github.client import GitHubClient

    from .results import ForkSyncResult

logger = get_logger(__name__)


class RunPaths:
    """Locations of every file a run reads or writes."""

    def __init__(self, settings: Settings, base_dir: Path | None = None) -> None:
        root = (base_dir if base_dir is not None else Path(settings.git.repo_dir)).resolve()
        self.root = root
        self.metadata = root / settings.sync.metadata_file
        self.failed_log = root / settings.sync.failed_log
        self.rate_limited_log = root / settings.sync.rate_limited_log
        self.run_log = root / settings.sync.run_log


def final_commit_message(result: ForkSyncResult, timestamp: str) -> str:
    """Commit message for the end-of-run commit."""
    if result.is_clean:
        return f"Update sync log with the latest run date and time: {timestamp}"
    return f"Update sync log - Rate limit or failures encountered: {timestamp}"


async def run_fork_sync(
    client: GitHubClient,
    settings: Settings,
    *,
    org: str | None = None,
    syncer: ForkSyncer | None = None,
    disable_workflows: bool | None = None,
    commit: bool | None = None,
    push: bool | None = None,
    base_dir: Path | None = None,
) -> ForkSyncResult:
    """Run one complete fork sync.

    Args:
        client: GitHub client used for listing (and syncing, unless ``syncer``)
        settings: Application settings
        org: Organization to sync (defaults to settings.org_name)
        syncer: Alternative per-fork sync backend (e.g. GhCliForkSyncer)
        disable_workflows: Override settings.workflows.enabled
        commit: Override settings.git.commit
        push: Override settings.git.push
        base_dir: Directory holding the metadata and log files
                  (defaults to settings.git.repo_dir)

    Returns:
        ForkSyncResult for the run

    Raises:
        GitHubClientError: If the fork listing fails
        MetadataError: If the metadata file cannot be parsed
        OSError: If the metadata cannot be saved
    """
    org_name = org or settings.org_name
    sweep_enabled = settings.workflows.enabled if disable_workflows is None else disable_workflows
    commit_enabled = settings.git.commit if commit is None else commit
    push_enabled = settings.git.push if push is None else push

    paths = RunPaths(settings, base_dir)
    clear_outcome_logs(paths.failed_log, paths.rate_limited_log)

    store = MetadataStore(paths.metadata)
    metadata = store.load()

    committer: GitCommitter | None = None
    if commit_enabled:
        committer = GitCommitter(
            paths.root,
            remote=settings.git.remote,
            branch=settings.git.branch,
        )

    checkpoints = CheckpointManager(
        store,
        metadata,
        every=settings.sync.checkpoint_every,
        committer=committer,
    )

    forks = await client.list_forks(org_name)
    logger.info("Found {} forks in {}", len(forks), org_name)

    scheduler = ForkSyncScheduler(
        syncer if syncer is not None else client,
        metadata,
        checkpoints,
        force=settings.sync.force,
    )
    result = await scheduler.run(forks)

    result.last_run = metadata.stamp_last_run()
    checkpoints.finalize()

    write_outcome_log(paths.failed_log, result.failed)
    write_outcome_log(paths.rate_limited_log, result.rate_limited)
    write_run_log(paths.run_log, result.last_run)

    if result.failed:
        logger.warning("Some repositories failed to sync: {}", ", ".join(result.failed))
    if result.rate_limited:
        logger.warning(
            "Rate limit reached for these repositories: {}", ", ".join(result.rate_limited)
        )
    logger.info("Total repositories successfully synced: {}", result.succeeded)

    if sweep_enabled and not result.halted:
        result.workflows = await _sweep_workflows(client, settings, org_name)
    elif sweep_enabled:
        logger.info("Skipping workflow sweep: the run hit the rate limit")

    if committer is not None:
        committer.pull()
        committer.commit(
            [paths.run_log, paths.metadata],
            final_commit_message(result, result.last_run),
        )
        if push_enabled:
            committer.push()

    return result


async def _sweep_workflows(
    client: GitHubClient,
    settings: Settings,
    org: str,
) -> dict[str, object]:
    """Run the workflow sweep over every organization repository.

    A failure to list repositories is reported in the summary instead of
    raised, so the run still reaches its final commit.
    """
    try:
        repos = await client.list_org_repositories(org)
    except GitHubClientError as e:
        logger.error("Could not list repositories for workflow sweep: {}", e)
        return {"error": str(e)}

    disabler = WorkflowDisabler(
        client,
        settings.workflows.whitelist,
        max_concurrent=settings.workflows.max_concurrent,
    )
    sweep = await disabler.run([repo.full_name for repo in repos])
    return sweep.to_dict()
