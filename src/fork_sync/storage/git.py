"""Git checkpointing of the metadata file.

Commits are best effort in the same way as ``git commit ... || true``:
a commit with nothing staged is not an error. Pulls are tolerant too.
Only ``git add`` and ``git push`` failures are raised.
"""

from __future__ import annotations

import subprocess
from collections.abc import Sequence
from pathlib import Path

from fork_sync.logging import get_logger

from .exceptions import GitCommandError

logger = get_logger(__name__)


class GitCommitter:
    """Runs git commands in the working tree that holds the metadata file.

    Usage:
        committer = GitCommitter(Path("."), remote="origin", branch="main")
        committer.commit([Path("sync-metadata.json")], "Update sync metadata")
        committer.push()
    """

    def __init__(
        self,
        repo_dir: Path | str = ".",
        *,
        remote: str = "origin",
        branch: str = "main",
    ) -> None:
        self._repo_dir = Path(repo_dir)
        self._remote = remote
        self._branch = branch

    def _run(self, *args: str) -> subprocess.CompletedProcess[str]:
        cmd = ["git", *args]
        logger.debug("Running command: {}", " ".join(cmd))
        try:
            return subprocess.run(
                cmd,
                cwd=self._repo_dir,
                capture_output=True,
                text=True,
                check=False,
            )
        except FileNotFoundError as e:
            raise GitCommandError("git executable not found") from e

    def commit(self, paths: Sequence[Path], message: str) -> bool:
        """Stage ``paths`` and commit them.

        Returns:
            True if a commit was created, False if there was nothing to commit

        Raises:
            GitCommandError: If staging fails
        """
        existing = [str(p) for p in paths if (self._repo_dir / p).exists()]
        if not existing:
            return False

        added = self._run("add", *existing)
        if added.returncode != 0:
            raise GitCommandError(
                f"git add failed: {added.stderr.strip()}",
                returncode=added.returncode,
                output=added.stderr,
            )

        committed = self._run("commit", "-m", message)
        if committed.returncode != 0:
            logger.info("Nothing committed: {}", (committed.stdout or committed.stderr).strip())
            return False

        logger.info("Committed: {}", message)
        return True

    def pull(self) -> bool:
        """Pull intermediate commits; failures are logged and ignored."""
        pulled = self._run("pull", self._remote, self._branch)
        if pulled.returncode != 0:
            logger.warning("git pull failed (continuing): {}", pulled.stderr.strip())
            return False
        return True

    def push(self) -> None:
        """Push the current branch.

        Raises:
            GitCommandError: If the push is rejected
        """
        pushed = self._run("push", self._remote, f"HEAD:{self._branch}")
        if pushed.returncode != 0:
            raise GitCommandError(
                f"git push failed: {pushed.stderr.strip()}",
                returncode=pushed.returncode,
                output=pushed.stderr,
            )
        logger.info("Pushed to {}/{}", self._remote, self._branch)
