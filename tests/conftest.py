"""Pytest configuration and shared fixtures.

Usage Guide:
- For metadata/ordering tests: use the timeline constants and sample_metadata_json
- For scheduler/runner tests: use FakeSyncer from tests.factories
- For CLI tests: patch fork_sync.cli.<module>.GitHubClient
"""

from collections.abc import Callable, Iterable
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import pytest

from fork_sync.config import Settings, get_settings
from fork_sync.logging import reset_logging

# -----------------------------------------------------------------------------
# Test Timeline Constants
#
# Consistent dates for deterministic ordering across tests.
# -----------------------------------------------------------------------------
JAN_10 = datetime(2024, 1, 10, 9, 0, 0, tzinfo=UTC)
JAN_15 = datetime(2024, 1, 15, 10, 0, 0, tzinfo=UTC)
JAN_16 = datetime(2024, 1, 16, 14, 0, 0, tzinfo=UTC)

JAN_10_ISO = "2024-01-10T09:00:00Z"
JAN_15_ISO = "2024-01-15T10:00:00Z"
JAN_16_ISO = "2024-01-16T14:00:00Z"

ORG = "fork-the-planet"


# -----------------------------------------------------------------------------
# Sample Data Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def sample_metadata_json() -> dict[str, Any]:
    """Metadata file content as written by a previous run."""
    return {
        f"{ORG}/requests": {"last_update": JAN_16_ISO},
        f"{ORG}/flask": {"last_update": JAN_10_ISO},
        f"{ORG}/django": {"last_update": JAN_15_ISO},
        "last_run": "2024-01-16 15:05:12",
    }


@pytest.fixture
def sample_workflows_response() -> list[dict[str, Any]]:
    """Workflow objects as returned by the Actions API."""
    return [
        {"id": 1, "name": "CodeQL", "path": "dynamic/github-code-scanning/codeql",
         "state": "active"},
        {"id": 2, "name": "CI", "path": ".github/workflows/ci.yml", "state": "active"},
        {"id": 3, "name": "Release", "path": ".github/workflows/release.yml",
         "state": "disabled_manually"},
        {"id": 4, "name": "Sync Forked Repositories",
         "path": ".github/workflows/sync-repos.yml", "state": "active"},
        {"id": 5, "name": "CodeQL", "path": ".github/workflows/codeql.yml", "state": "active"},
    ]


# -----------------------------------------------------------------------------
# Settings Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def make_settings(tmp_path: Path) -> Callable[..., Settings]:
    """Build Settings rooted in tmp_path, ignoring the environment's .env."""

    def _make(**overrides: Any) -> Settings:
        git = {"repo_dir": str(tmp_path), **overrides.pop("git", {})}
        values: dict[str, Any] = {
            "github_token": "test-token",
            "org_name": ORG,
            "git": git,
        }
        values.update(overrides)
        return Settings(_env_file=None, **values)

    return _make


@pytest.fixture(autouse=True)
def _clear_settings_cache() -> Iterable[None]:
    """Reset the cached settings around every test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def _reset_cli_logging() -> Iterable[None]:
    """Drop loguru handlers a CLI invocation bound to its captured stderr."""
    yield
    reset_logging()


# -----------------------------------------------------------------------------
# Utility Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def utc_now() -> datetime:
    """Current UTC datetime for tests."""
    return datetime.now(UTC)
