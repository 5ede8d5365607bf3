"""Pydantic schemas for parsing GitHub API responses.

See:
- https://docs.github.com/en/rest/branches/branches#sync-a-fork-branch-with-the-upstream-repository
- https://docs.github.com/en/rest/actions/workflows
"""

from pydantic import BaseModel, Field


class GitHubWorkflow(BaseModel):
    """GitHub Actions workflow object.

    Maps to: GET /repos/{owner}/{repo}/actions/workflows
    """

    id: int = Field(description="Workflow ID")
    name: str = Field(description="Workflow display name")
    path: str = Field(description="Workflow file path (or dynamic/... for GitHub-managed ones)")
    state: str = Field(description="active, disabled_manually, disabled_inactivity, ...")

    @property
    def is_active(self) -> bool:
        return self.state == "active"


class ForkSyncResponse(BaseModel):
    """Outcome of syncing one fork branch with its upstream."""

    full_name: str = Field(description="Fork identifier (owner/name)")
    branch: str | None = Field(default=None, description="Fork branch that was synced")
    merge_type: str | None = Field(
        default=None,
        description="merge, fast-forward, none, or hard-reset (None when unknown, e.g. gh CLI)",
    )
    message: str = Field(default="", description="Message reported by GitHub or the gh CLI")
