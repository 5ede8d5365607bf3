"""Pydantic schemas for Fork Sync.

This module provides GitHub API response models and the sync metadata record.
"""

from .github_api import ForkSyncResponse, GitHubWorkflow
from .metadata import (
    EPOCH,
    LAST_RUN_FORMAT,
    LAST_UPDATE_FORMAT,
    RepoSyncRecord,
    SyncMetadata,
)
from .repository import GitHubOwner, OrgRepository, parse_repo_string

__all__ = [
    # GitHub API
    "ForkSyncResponse",
    "GitHubOwner",
    "GitHubWorkflow",
    "OrgRepository",
    # Metadata
    "EPOCH",
    "LAST_RUN_FORMAT",
    "LAST_UPDATE_FORMAT",
    "RepoSyncRecord",
    "SyncMetadata",
    # Helpers
    "parse_repo_string",
]
