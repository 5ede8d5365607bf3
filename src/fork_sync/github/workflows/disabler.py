"""Workflow-disabling sweep.

Forks inherit their upstream's GitHub Actions workflows, which would run
(and bill) in the organization. The sweep disables every active workflow
in every organization repository except a whitelist of (name, path) pairs.

Repositories are processed by a bounded pool of workers (two by default);
workflows within one repository are disabled one after another. The sweep
is independent of the sync scheduler and shares no state with it.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from fork_sync.logging import bind_repo, get_logger
from fork_sync.schemas.repository import parse_repo_string

if TYPE_CHECKING:
    from fork_sync.config import WhitelistedWorkflow
    from fork_sync.github.client import GitHubClient
    from fork_sync.schemas.github_api import GitHubWorkflow

logger = get_logger(__name__)


@dataclass
class RepoWorkflowResult:
    """Result of sweeping one repository."""

    repository: str
    disabled: list[int] = field(default_factory=list)
    whitelisted: int = 0
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result: dict[str, Any] = {
            "repository": self.repository,
            "disabled": list(self.disabled),
            "whitelisted": self.whitelisted,
        }
        if self.error:
            result["error"] = self.error
        return result


@dataclass
class WorkflowSweepResult:
    """Aggregated result of a workflow sweep."""

    repo_results: list[RepoWorkflowResult] = field(default_factory=list)
    dry_run: bool = False
    duration_seconds: float = 0.0

    @property
    def total_disabled(self) -> int:
        """Workflows disabled (or that would be, in dry-run) across all repos."""
        return sum(len(r.disabled) for r in self.repo_results)

    @property
    def repos_with_errors(self) -> int:
        """Repositories whose sweep failed."""
        return sum(1 for r in self.repo_results if r.error)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "summary": {
                "total_repos": len(self.repo_results),
                "total_disabled": self.total_disabled,
                "repos_with_errors": self.repos_with_errors,
                "dry_run": self.dry_run,
                "duration_seconds": round(self.duration_seconds, 2),
            },
            "repositories": [r.to_dict() for r in self.repo_results],
        }


class WorkflowDisabler:
    """Disables non-whitelisted workflows across repositories.

    Usage:
        async with GitHubClient() as client:
            disabler = WorkflowDisabler(client, settings.workflows.whitelist)
            repos = await client.list_org_repositories("fork-the-planet")
            result = await disabler.run([r.full_name for r in repos])
    """

    def __init__(
        self,
        client: GitHubClient,
        whitelist: Sequence[WhitelistedWorkflow],
        *,
        max_concurrent: int = 2,
        dry_run: bool = False,
    ) -> None:
        """Initialize the disabler.

        Args:
            client: GitHub API client
            whitelist: Workflows to leave active
            max_concurrent: Repositories processed in parallel
            dry_run: Only report what would be disabled
        """
        if max_concurrent < 1:
            raise ValueError("max_concurrent must be at least 1")
        self._client = client
        self._whitelist = {(w.name, w.path) for w in whitelist}
        self._max_concurrent = max_concurrent
        self._dry_run = dry_run

    def is_whitelisted(self, workflow: GitHubWorkflow) -> bool:
        """Whether a workflow matches a whitelist entry on both name and path."""
        return (workflow.name, workflow.path) in self._whitelist

    def workflows_to_disable(self, workflows: Iterable[GitHubWorkflow]) -> list[GitHubWorkflow]:
        """Active workflows that are not whitelisted."""
        return [w for w in workflows if w.is_active and not self.is_whitelisted(w)]

    async def disable_repository(self, full_name: str) -> RepoWorkflowResult:
        """Disable the non-whitelisted workflows of one repository.

        Errors are recorded on the result rather than raised, so one broken
        repository doesn't stop the sweep.
        """
        log = bind_repo(full_name, name="workflows")
        result = RepoWorkflowResult(repository=full_name)

        try:
            owner, name = parse_repo_string(full_name)
            workflows = await self._client.list_workflows(owner, name)
            result.whitelisted = sum(
                1 for w in workflows if w.is_active and self.is_whitelisted(w)
            )

            for workflow in self.workflows_to_disable(workflows):
                if self._dry_run:
                    log.info(
                        "Would disable workflow {} ({}) in {}",
                        workflow.id,
                        workflow.name,
                        full_name,
                    )
                else:
                    log.info(
                        "Disabling workflow {} ({}) in {}",
                        workflow.id,
                        workflow.name,
                        full_name,
                    )
                    await self._client.disable_workflow(owner, name, workflow.id)
                result.disabled.append(workflow.id)
        except Exception as e:
            log.error("Workflow sweep failed for {}: {}", full_name, e)
            result.error = str(e) or type(e).__name__

        return result

    async def run(self, repositories: Iterable[str]) -> WorkflowSweepResult:
        """Sweep all repositories with bounded concurrency.

        Args:
            repositories: Repository identifiers (owner/name)

        Returns:
            WorkflowSweepResult with one entry per repository, in input order
        """
        start_time = time.monotonic()
        repo_list = list(dict.fromkeys(repositories))
        semaphore = asyncio.Semaphore(self._max_concurrent)

        async def _bounded(full_name: str) -> RepoWorkflowResult:
            async with semaphore:
                return await self.disable_repository(full_name)

        logger.info(
            "Sweeping workflows in {} repositories (max_concurrent={}, dry_run={})",
            len(repo_list),
            self._max_concurrent,
            self._dry_run,
        )

        results = await asyncio.gather(*(_bounded(r) for r in repo_list))

        sweep = WorkflowSweepResult(
            repo_results=list(results),
            dry_run=self._dry_run,
            duration_seconds=time.monotonic() - start_time,
        )

        logger.info(
            "Workflow sweep complete: repos={}, disabled={}, errors={} ({:.1f}s)",
            len(sweep.repo_results),
            sweep.total_disabled,
            sweep.repos_with_errors,
            sweep.duration_seconds,
        )
        return sweep
