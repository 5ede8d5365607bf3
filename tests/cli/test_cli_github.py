"""Tests for GitHub verification commands."""

from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from typer.testing import CliRunner

from fork_sync.cli.app import app
from fork_sync.cli.github import _format_time_remaining
from fork_sync.github import GitHubAuthenticationError
from tests.conftest import ORG

runner = CliRunner()


@pytest.fixture(autouse=True)
def cli_env(monkeypatch):
    monkeypatch.setenv("GITHUB_TOKEN", "test-token")
    monkeypatch.setenv("ORG_NAME", ORG)


@pytest.fixture
def mock_client():
    client = MagicMock()
    client.__aenter__ = AsyncMock(return_value=client)
    client.__aexit__ = AsyncMock(return_value=None)
    client.get_rate_limit = AsyncMock(
        return_value={
            "limit": 5000,
            "remaining": 4990,
            "used": 10,
            "reset": datetime.now(UTC) + timedelta(minutes=30),
        }
    )
    client.list_forks = AsyncMock(return_value=[f"{ORG}/r{i}" for i in range(7)])
    return client


class TestGitHubTestCommand:
    @patch("fork_sync.cli.github.GitHubClient")
    def test_connection_verified(self, mock_client_cls, mock_client):
        mock_client_cls.return_value = mock_client

        result = runner.invoke(app, ["github", "test"])

        assert result.exit_code == 0
        assert "4990/5000" in result.stdout
        assert "Found 7 fork(s)" in result.stdout
        assert "and 2 more" in result.stdout
        assert "verified" in result.stdout

    @patch("fork_sync.cli.github.GitHubClient")
    def test_invalid_token(self, mock_client_cls, mock_client):
        mock_client_cls.return_value = mock_client
        mock_client.get_rate_limit = AsyncMock(side_effect=GitHubAuthenticationError("bad"))

        result = runner.invoke(app, ["github", "test"])

        assert result.exit_code == 1
        assert "Invalid GitHub token" in result.stdout

    def test_missing_token(self, monkeypatch):
        monkeypatch.setenv("GITHUB_TOKEN", "")

        result = runner.invoke(app, ["github", "test"])

        assert result.exit_code == 1
        assert "GITHUB_TOKEN not set" in result.stdout


class TestRateLimitCommand:
    @patch("fork_sync.cli.github.GitHubClient")
    def test_shows_table(self, mock_client_cls, mock_client):
        mock_client_cls.return_value = mock_client

        result = runner.invoke(app, ["github", "rate-limit"])

        assert result.exit_code == 0
        assert "4990" in result.stdout
        assert "5000" in result.stdout

    @patch("fork_sync.cli.github.GitHubClient")
    def test_exhausted(self, mock_client_cls, mock_client):
        mock_client_cls.return_value = mock_client
        mock_client.get_rate_limit = AsyncMock(
            return_value={
                "limit": 5000,
                "remaining": 0,
                "used": 5000,
                "reset": datetime.now(UTC) + timedelta(minutes=5),
            }
        )

        result = runner.invoke(app, ["github", "rate-limit"])

        assert result.exit_code == 0
        assert "exhausted" in result.stdout


class TestFormatTimeRemaining:
    @pytest.mark.parametrize(
        ("seconds", "expected"),
        [(0, "Now"), (45, "45s"), (125, "2m 5s"), (3725, "1h 2m")],
    )
    def test_format(self, seconds, expected):
        assert _format_time_remaining(seconds) == expected
