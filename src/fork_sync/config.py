"""Configuration settings for Fork Sync."""

from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class SyncConfig(BaseModel):
    """Configuration for the fork sync run.

    Controls where metadata and run logs are written, how often progress
    is checkpointed, and which backend performs the per-fork sync.
    """

    metadata_file: str = Field(
        default="sync-metadata.json",
        description="JSON file holding per-repository sync timestamps",
    )
    checkpoint_every: int = Field(
        default=10,
        ge=1,
        description="Successful syncs between metadata checkpoints (limits data loss on crash)",
    )
    force: bool = Field(
        default=True,
        description="Hard-reset forks whose branch has diverged from upstream",
    )
    backend: Literal["api", "gh"] = Field(
        default="api",
        description="Sync via the REST API ('api') or the gh CLI ('gh')",
    )

    # Run artifacts
    failed_log: str = Field(
        default="failed_repos.log",
        description="Repositories that failed to sync this run (one per line)",
    )
    rate_limited_log: str = Field(
        default="rate_limited_repos.log",
        description="Repository that hit the rate limit this run",
    )
    run_log: str = Field(
        default="sync.log",
        description="File holding the timestamp of the last completed run",
    )


class WhitelistedWorkflow(BaseModel):
    """A workflow that the disabling sweep must leave active.

    A workflow matches only when both name and path are equal.
    """

    name: str = Field(description="Workflow display name")
    path: str = Field(description="Workflow file path or dynamic path")


def _default_whitelist() -> list[WhitelistedWorkflow]:
    return [
        WhitelistedWorkflow(name="CodeQL", path="dynamic/github-code-scanning/codeql"),
        WhitelistedWorkflow(
            name="Sync Forked Repositories",
            path=".github/workflows/sync-repos.yml",
        ),
        WhitelistedWorkflow(
            name="Dependabot Updates",
            path="dynamic/dependabot/dependabot-updates",
        ),
    ]


class WorkflowsConfig(BaseModel):
    """Configuration for the workflow-disabling sweep."""

    enabled: bool = Field(
        default=True,
        description="Run the sweep after a sync run that was not rate limited",
    )
    max_concurrent: int = Field(
        default=2,
        ge=1,
        le=20,
        description="Repositories processed in parallel during the sweep",
    )
    whitelist: list[WhitelistedWorkflow] = Field(
        default_factory=_default_whitelist,
        description="Workflows that are never disabled",
    )


class GitConfig(BaseModel):
    """Configuration for committing metadata checkpoints to git."""

    commit: bool = Field(
        default=False,
        description="Commit the metadata file at each checkpoint and at run end",
    )
    push: bool = Field(
        default=False,
        description="Push after the final commit",
    )
    remote: str = Field(default="origin", description="Remote to pull from and push to")
    branch: str = Field(default="main", description="Branch to pull before the final commit")
    repo_dir: str = Field(default=".", description="Working tree holding the metadata file")


class LoggingConfig(BaseModel):
    """Configuration for logging behavior.

    Controls file logging, rotation, and output format.
    """

    log_file: str | None = Field(
        default=None,
        description="Optional path for file logging (enables rotation)",
    )
    rotation: str = Field(
        default="10 MB",
        description="When to rotate log file (e.g., '10 MB', '1 day')",
    )
    retention: str = Field(
        default="7 days",
        description="How long to keep rotated logs",
    )
    serialize: bool = Field(
        default=False,
        description="If True, output JSON format to file",
    )


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    # --------------------------------------------------------------------------
    # GitHub
    # --------------------------------------------------------------------------
    github_token: str = Field(
        default="",
        description="GitHub token with write access to the organization's forks",
    )
    org_name: str = Field(
        default="fork-the-planet",
        description="Organization whose forks are synced",
    )

    # --------------------------------------------------------------------------
    # Application
    # --------------------------------------------------------------------------
    environment: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Application environment",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )

    # --------------------------------------------------------------------------
    # Sync / Workflows / Git
    # --------------------------------------------------------------------------
    sync: SyncConfig = Field(
        default_factory=SyncConfig,
        description="Fork sync run configuration",
    )
    workflows: WorkflowsConfig = Field(
        default_factory=WorkflowsConfig,
        description="Workflow-disabling sweep configuration",
    )
    git: GitConfig = Field(
        default_factory=GitConfig,
        description="Metadata git checkpoint configuration",
    )

    # --------------------------------------------------------------------------
    # Logging Configuration
    # --------------------------------------------------------------------------
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig,
        description="Logging configuration (file output, rotation)",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
