"""Fork sync backend that drives the GitHub CLI.

Runs ``gh repo sync <owner/repo> --force`` per fork. The CLI reports
problems only through its exit status and output text, so failures are
raised as GitHubCommandError carrying the combined output; the sync
scheduler decides from that text whether the run hit the rate limit.

gh can print a rate limit message and still exit 0, so the output is
checked for one before the exit status.
"""

from __future__ import annotations

import asyncio
import os

from fork_sync.config import get_settings
from fork_sync.logging import get_logger
from fork_sync.schemas.github_api import ForkSyncResponse

from .exceptions import GitHubClientError, GitHubCommandError
from .sync.classifier import is_rate_limit_message

logger = get_logger(__name__)


class GhCliForkSyncer:
    """Syncs forks by invoking ``gh repo sync``.

    Usage:
        syncer = GhCliForkSyncer()
        await syncer.sync_fork("fork-the-planet", "requests")
    """

    def __init__(self, executable: str = "gh", token: str | None = None) -> None:
        """Initialize the syncer.

        Args:
            executable: Name or path of the gh binary
            token: Token exported as GH_TOKEN to the CLI. If not provided,
                   uses GITHUB_TOKEN from settings; when that is empty too
                   the CLI's own login is used.
        """
        self._executable = executable
        self._token = token if token is not None else get_settings().github_token

    def _env(self) -> dict[str, str]:
        env = dict(os.environ)
        if self._token:
            env["GH_TOKEN"] = self._token
        return env

    async def sync_fork(
        self,
        owner: str,
        repo: str,
        *,
        force: bool = True,
    ) -> ForkSyncResponse:
        """Sync one fork with its upstream through the gh CLI.

        Raises:
            GitHubCommandError: If gh exits non-zero or reports a rate limit
            GitHubClientError: If the gh executable cannot be found
        """
        full_name = f"{owner}/{repo}"
        args = [self._executable, "repo", "sync", full_name]
        if force:
            args.append("--force")

        logger.debug("Running command: {}", " ".join(args))
        try:
            process = await asyncio.create_subprocess_exec(
                *args,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
                env=self._env(),
            )
        except FileNotFoundError as e:
            raise GitHubClientError(f"{self._executable} executable not found") from e

        stdout, _ = await process.communicate()
        output = stdout.decode(errors="replace").strip() if stdout else ""
        returncode = process.returncode if process.returncode is not None else -1

        if returncode != 0 or is_rate_limit_message(output):
            raise GitHubCommandError(output, returncode)

        return ForkSyncResponse(full_name=full_name, message=output)
