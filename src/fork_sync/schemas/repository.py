"""Repository identifiers and organization repository listings."""

from pydantic import BaseModel, Field


def parse_repo_string(full_name: str) -> tuple[str, str]:
    """Split an ``owner/name`` identifier into its parts.

    Args:
        full_name: Repository identifier like 'fork-the-planet/requests'

    Returns:
        Tuple of (owner, name)

    Raises:
        ValueError: If the identifier is not exactly two non-empty parts
    """
    parts = full_name.strip().split("/")
    if len(parts) != 2 or not all(part.strip() for part in parts):
        raise ValueError(f"Repository must be in owner/name format: {full_name!r}")
    return parts[0].strip(), parts[1].strip()


class GitHubOwner(BaseModel):
    """Owner object embedded in repository responses."""

    login: str = Field(description="Organization or user login")


class OrgRepository(BaseModel):
    """Repository entry from the organization listing.

    Maps to: GET /orgs/{org}/repos
    """

    name: str = Field(description="Repository name")
    full_name: str = Field(description="Repository identifier (owner/name)")
    owner: GitHubOwner = Field(description="Repository owner")
    fork: bool = Field(default=False, description="Whether the repository is a fork")
    archived: bool = Field(default=False, description="Archived repositories are read-only")
    default_branch: str | None = Field(default=None, description="Default branch name")
