"""Tests for the 'workflows disable' command."""

import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from typer.testing import CliRunner

from fork_sync.cli.app import app
from fork_sync.schemas import GitHubOwner, GitHubWorkflow, OrgRepository
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
    client.list_org_repositories = AsyncMock(
        return_value=[
            OrgRepository(
                name="requests",
                full_name=f"{ORG}/requests",
                owner=GitHubOwner(login=ORG),
                fork=True,
            )
        ]
    )
    client.list_workflows = AsyncMock(
        return_value=[
            GitHubWorkflow(id=1, name="CI", path=".github/workflows/ci.yml", state="active"),
            GitHubWorkflow(
                id=2,
                name="CodeQL",
                path="dynamic/github-code-scanning/codeql",
                state="active",
            ),
        ]
    )
    client.disable_workflow = AsyncMock()
    return client


class TestWorkflowsDisableCommand:
    """Tests for the 'workflows disable' command."""

    def test_command_exists(self):
        result = runner.invoke(app, ["workflows", "disable", "--help"])
        assert result.exit_code == 0
        assert "--dry-run" in result.stdout

    @patch("fork_sync.cli.workflows.GitHubClient")
    def test_disables_non_whitelisted(self, mock_client_cls, mock_client):
        mock_client_cls.return_value = mock_client

        result = runner.invoke(app, ["workflows", "disable"])

        assert result.exit_code == 0
        assert "Workflow Sweep Complete" in result.stdout
        mock_client.disable_workflow.assert_awaited_once_with(ORG, "requests", 1)

    @patch("fork_sync.cli.workflows.GitHubClient")
    def test_dry_run(self, mock_client_cls, mock_client):
        mock_client_cls.return_value = mock_client

        result = runner.invoke(app, ["workflows", "disable", "--dry-run"])

        assert result.exit_code == 0
        assert "Would disable" in result.stdout
        mock_client.disable_workflow.assert_not_awaited()

    @patch("fork_sync.cli.workflows.GitHubClient")
    def test_format_json(self, mock_client_cls, mock_client):
        mock_client_cls.return_value = mock_client

        result = runner.invoke(
            app, ["-q", "workflows", "disable", "--dry-run", "--format", "json"]
        )

        assert result.exit_code == 0
        output = json.loads(result.stdout)
        assert output["summary"]["total_disabled"] == 1
        assert output["repositories"][0]["disabled"] == [1]

    @patch("fork_sync.cli.workflows.GitHubClient")
    def test_org_option(self, mock_client_cls, mock_client):
        mock_client_cls.return_value = mock_client

        runner.invoke(app, ["workflows", "disable", "--org", "other", "--dry-run"])

        mock_client.list_org_repositories.assert_awaited_once_with("other")
