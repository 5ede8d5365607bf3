"""Tests for GitCommitter.

subprocess.run is patched; no git repository is needed.
"""

import subprocess
from unittest.mock import patch

import pytest

from fork_sync.storage import GitCommandError, GitCommitter


def _completed(returncode: int = 0, stdout: str = "", stderr: str = ""):
    return subprocess.CompletedProcess(
        args=["git"], returncode=returncode, stdout=stdout, stderr=stderr
    )


@pytest.fixture
def metadata_file(tmp_path):
    path = tmp_path / "sync-metadata.json"
    path.write_text("{}\n")
    return path


class TestGitCommitterCommit:
    """Tests for commit()."""

    def test_adds_and_commits(self, tmp_path, metadata_file):
        """Existing paths are staged then committed with the message."""
        committer = GitCommitter(tmp_path)

        with patch("fork_sync.storage.git.subprocess.run", return_value=_completed()) as run:
            created = committer.commit([metadata_file], "Update sync metadata")

        assert created is True
        add_call, commit_call = run.call_args_list
        assert add_call.args[0] == ["git", "add", str(metadata_file)]
        assert commit_call.args[0] == ["git", "commit", "-m", "Update sync metadata"]
        assert add_call.kwargs["cwd"] == tmp_path

    def test_missing_paths_skipped(self, tmp_path):
        """Nothing runs when none of the paths exist."""
        committer = GitCommitter(tmp_path)

        with patch("fork_sync.storage.git.subprocess.run") as run:
            created = committer.commit([tmp_path / "missing.json"], "msg")

        assert created is False
        run.assert_not_called()

    def test_nothing_to_commit_is_not_error(self, tmp_path, metadata_file):
        """A failing commit (nothing staged) returns False."""
        committer = GitCommitter(tmp_path)
        results = [_completed(), _completed(1, stdout="nothing to commit, working tree clean")]

        with patch("fork_sync.storage.git.subprocess.run", side_effect=results):
            assert committer.commit([metadata_file], "msg") is False

    def test_add_failure_raises(self, tmp_path, metadata_file):
        committer = GitCommitter(tmp_path)

        with (
            patch(
                "fork_sync.storage.git.subprocess.run",
                return_value=_completed(128, stderr="fatal: not a git repository"),
            ),
            pytest.raises(GitCommandError, match="not a git repository") as exc_info,
        ):
            committer.commit([metadata_file], "msg")

        assert exc_info.value.returncode == 128

    def test_git_not_installed(self, tmp_path, metadata_file):
        committer = GitCommitter(tmp_path)

        with (
            patch("fork_sync.storage.git.subprocess.run", side_effect=FileNotFoundError),
            pytest.raises(GitCommandError, match="not found"),
        ):
            committer.commit([metadata_file], "msg")


class TestGitCommitterPullPush:
    """Tests for pull() and push()."""

    def test_pull_uses_remote_and_branch(self, tmp_path):
        committer = GitCommitter(tmp_path, remote="upstream", branch="trunk")

        with patch("fork_sync.storage.git.subprocess.run", return_value=_completed()) as run:
            assert committer.pull() is True

        assert run.call_args.args[0] == ["git", "pull", "upstream", "trunk"]

    def test_pull_failure_tolerated(self, tmp_path):
        committer = GitCommitter(tmp_path)

        with patch(
            "fork_sync.storage.git.subprocess.run",
            return_value=_completed(1, stderr="conflict"),
        ):
            assert committer.pull() is False

    def test_push(self, tmp_path):
        committer = GitCommitter(tmp_path, branch="main")

        with patch("fork_sync.storage.git.subprocess.run", return_value=_completed()) as run:
            committer.push()

        assert run.call_args.args[0] == ["git", "push", "origin", "HEAD:main"]

    def test_push_failure_raises(self, tmp_path):
        committer = GitCommitter(tmp_path)

        with (
            patch(
                "fork_sync.storage.git.subprocess.run",
                return_value=_completed(1, stderr="rejected"),
            ),
            pytest.raises(GitCommandError, match="rejected"),
        ):
            committer.push()
