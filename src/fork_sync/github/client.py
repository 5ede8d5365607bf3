"""Async GitHub API client wrapper using githubkit.

This module provides a typed async interface to the GitHub REST API
for listing an organization's forks, syncing them with their upstreams
and managing their Actions workflows.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from githubkit import GitHub
from githubkit.exception import RequestFailed
from pydantic import ValidationError

from fork_sync.config import get_settings
from fork_sync.logging import get_logger
from fork_sync.schemas.github_api import ForkSyncResponse, GitHubWorkflow
from fork_sync.schemas.repository import OrgRepository

from .exceptions import (
    GitHubAuthenticationError,
    GitHubClientError,
    GitHubNotFoundError,
    GitHubRateLimitError,
)

logger = get_logger(__name__)


class GitHubClient:
    """Async GitHub API client for fork maintenance.

    Usage:
        async with GitHubClient() as client:
            forks = await client.list_forks("fork-the-planet")
            for full_name in forks:
                owner, name = full_name.split("/", 1)
                await client.sync_fork(owner, name)

    Or without context manager:
        client = GitHubClient()
        forks = await client.list_forks("fork-the-planet")
        await client.close()
    """

    def __init__(self, token: str | None = None) -> None:
        """Initialize the GitHub client.

        Args:
            token: GitHub token. If not provided, uses GITHUB_TOKEN from settings.

        Raises:
            GitHubAuthenticationError: If no token is available.
        """
        self._token = token or get_settings().github_token
        if not self._token:
            raise GitHubAuthenticationError(
                "GitHub token required. Set GITHUB_TOKEN environment variable."
            )
        self._client: GitHub[Any] | None = None

    @property
    def _github(self) -> GitHub[Any]:
        """Get or create the githubkit client instance.

        Automatic retries are disabled: a rate limited call has to surface
        immediately so the sync run can stop instead of sleeping.
        """
        if self._client is None:
            self._client = GitHub(self._token, auto_retry=False)
        return self._client

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            self._client = None

    async def __aenter__(self) -> GitHubClient:
        """Async context manager entry."""
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        """Async context manager exit."""
        await self.close()

    # -------------------------------------------------------------------------
    # Rate Limit Info
    # -------------------------------------------------------------------------
    async def get_rate_limit(self) -> dict[str, int | datetime]:
        """Get current rate limit status.

        Returns:
            Dict with 'limit', 'remaining', 'reset' (datetime), 'used' keys.
        """
        try:
            resp = await self._github.rest.rate_limit.async_get()
        except RequestFailed as e:
            raise self._handle_error(e) from e
        core = resp.parsed_data.resources.core
        return {
            "limit": core.limit,
            "remaining": core.remaining,
            "used": core.used,
            "reset": datetime.fromtimestamp(core.reset, tz=UTC),
        }

    # -------------------------------------------------------------------------
    # Organization Repositories
    # -------------------------------------------------------------------------
    async def list_org_repositories(
        self,
        org: str,
        *,
        per_page: int = 100,
    ) -> list[OrgRepository]:
        """List every repository in an organization.

        Args:
            org: Organization login
            per_page: Results per page (max 100)

        Returns:
            List of OrgRepository objects
        """
        try:
            repos: list[OrgRepository] = []

            repo_data: Any
            async for repo_data in self._github.paginate(
                self._github.rest.repos.async_list_for_org,
                org=org,
                type="all",
                per_page=per_page,
            ):
                try:
                    repos.append(OrgRepository.model_validate(repo_data.model_dump()))
                except ValidationError:
                    continue

            return repos
        except RequestFailed as e:
            if e.response.status_code == 404:
                raise GitHubNotFoundError(f"Organization {org} not found") from e
            raise self._handle_error(e) from e

    async def list_forks(self, org: str) -> list[str]:
        """List the identifiers (owner/name) of every fork in an organization."""
        repos = await self.list_org_repositories(org)
        return [repo.full_name for repo in repos if repo.fork]

    # -------------------------------------------------------------------------
    # Fork Sync
    # -------------------------------------------------------------------------
    async def sync_fork(
        self,
        owner: str,
        repo: str,
        *,
        force: bool = True,
    ) -> ForkSyncResponse:
        """Bring a fork's default branch up to date with its upstream.

        Uses the merge-upstream endpoint. When that reports a conflict (the
        fork has diverged) and ``force`` is set, the fork branch is reset to
        the upstream branch head, discarding the fork's own commits.

        Args:
            owner: Fork owner
            repo: Fork name
            force: Reset diverged branches instead of failing

        Returns:
            ForkSyncResponse describing what happened

        Raises:
            GitHubNotFoundError: If the fork doesn't exist
            GitHubRateLimitError: If the rate limit is exhausted
            GitHubClientError: For any other API failure, or if the
                repository is not a fork
        """
        full_name = f"{owner}/{repo}"
        try:
            repo_resp = await self._github.rest.repos.async_get(owner=owner, repo=repo)
            fork = repo_resp.parsed_data
            parent = getattr(fork, "parent", None)
            if not fork.fork or not parent:
                raise GitHubClientError(f"{full_name} is not a fork")
            branch = fork.default_branch

            try:
                merge_resp = await self._github.rest.repos.async_merge_upstream(
                    owner=owner,
                    repo=repo,
                    branch=branch,
                )
            except RequestFailed as e:
                if e.response.status_code != 409 or not force:
                    raise
                logger.info(
                    "{} has diverged from {}, resetting {} to upstream",
                    full_name,
                    parent.full_name,
                    branch,
                )
                return await self._reset_to_upstream(
                    owner,
                    repo,
                    branch=branch,
                    upstream_owner=parent.owner.login,
                    upstream_repo=parent.name,
                    upstream_branch=parent.default_branch,
                )

            merged = merge_resp.parsed_data
            return ForkSyncResponse(
                full_name=full_name,
                branch=getattr(merged, "base_branch", None) or branch,
                merge_type=getattr(merged, "merge_type", None) or None,
                message=getattr(merged, "message", None) or "",
            )
        except RequestFailed as e:
            if e.response.status_code == 404:
                raise GitHubNotFoundError(f"Repository {full_name} not found") from e
            raise self._handle_error(e) from e

    async def _reset_to_upstream(
        self,
        owner: str,
        repo: str,
        *,
        branch: str,
        upstream_owner: str,
        upstream_repo: str,
        upstream_branch: str,
    ) -> ForkSyncResponse:
        """Force-move a fork branch to the upstream branch head."""
        branch_resp = await self._github.rest.repos.async_get_branch(
            owner=upstream_owner,
            repo=upstream_repo,
            branch=upstream_branch,
        )
        sha = branch_resp.parsed_data.commit.sha
        await self._github.rest.git.async_update_ref(
            owner=owner,
            repo=repo,
            ref=f"heads/{branch}",
            sha=sha,
            force=True,
        )
        return ForkSyncResponse(
            full_name=f"{owner}/{repo}",
            branch=branch,
            merge_type="hard-reset",
            message=f"Reset {branch} to {upstream_owner}/{upstream_repo}@{sha[:7]}",
        )

    # -------------------------------------------------------------------------
    # Actions Workflows
    # -------------------------------------------------------------------------
    async def list_workflows(
        self,
        owner: str,
        repo: str,
        *,
        per_page: int = 100,
    ) -> list[GitHubWorkflow]:
        """List the Actions workflows of a repository.

        Args:
            owner: Repository owner
            repo: Repository name
            per_page: Results per page (max 100)

        Returns:
            List of GitHubWorkflow objects
        """
        try:
            workflows: list[GitHubWorkflow] = []

            workflow_data: Any
            async for workflow_data in self._github.paginate(
                self._github.rest.actions.async_list_repo_workflows,
                map_func=lambda resp: resp.parsed_data.workflows,
                owner=owner,
                repo=repo,
                per_page=per_page,
            ):
                try:
                    workflows.append(GitHubWorkflow.model_validate(workflow_data.model_dump()))
                except ValidationError:
                    continue

            return workflows
        except RequestFailed as e:
            if e.response.status_code == 404:
                raise GitHubNotFoundError(f"Repository {owner}/{repo} not found") from e
            raise self._handle_error(e) from e

    async def disable_workflow(self, owner: str, repo: str, workflow_id: int) -> None:
        """Disable an Actions workflow.

        Args:
            owner: Repository owner
            repo: Repository name
            workflow_id: Workflow ID
        """
        try:
            await self._github.rest.actions.async_disable_workflow(
                owner=owner,
                repo=repo,
                workflow_id=workflow_id,
            )
        except RequestFailed as e:
            if e.response.status_code == 404:
                raise GitHubNotFoundError(
                    f"Workflow {workflow_id} not found in {owner}/{repo}"
                ) from e
            raise self._handle_error(e) from e

    # -------------------------------------------------------------------------
    # Error Handling
    # -------------------------------------------------------------------------
    def _handle_error(self, error: RequestFailed) -> GitHubClientError:
        """Convert githubkit exceptions to our custom exceptions."""
        status = error.response.status_code
        body = error.response.text.strip()

        if status == 401:
            return GitHubAuthenticationError("Invalid GitHub token")
        elif status in (403, 429):
            headers = error.response.headers
            remaining = headers.get("x-ratelimit-remaining")
            if status == 429 or (remaining is not None and int(remaining) == 0):
                reset_ts = int(headers.get("x-ratelimit-reset", "0") or 0)
                reset_at = datetime.fromtimestamp(reset_ts, tz=UTC) if reset_ts else None
                return GitHubRateLimitError(
                    f"GitHub API rate limit exceeded ({status}): {body}",
                    reset_at=reset_at,
                )
            # Secondary rate limits come back as a plain 403 with an explanatory body
            return GitHubClientError(f"Access forbidden ({status}): {body}")
        elif status == 404:
            return GitHubNotFoundError(str(error))
        else:
            return GitHubClientError(f"GitHub API error ({status}): {body or error}")
