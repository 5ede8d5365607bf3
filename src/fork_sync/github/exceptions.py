"""GitHub client exceptions."""

from datetime import datetime


class GitHubClientError(Exception):
    """Base exception for GitHub client errors."""

    pass


class GitHubAuthenticationError(GitHubClientError):
    """Raised when authentication fails (401) or no token is configured."""

    pass


class GitHubRetryableError(GitHubClientError):
    """Base class for errors that may succeed on a later run.

    The sync scheduler never retries these within a run.
    """

    pass


class GitHubRateLimitError(GitHubRetryableError):
    """Raised when the rate limit is exceeded (403/429 with rate limit headers)."""

    def __init__(self, message: str, reset_at: datetime | None = None) -> None:
        super().__init__(message)
        self.reset_at = reset_at


class GitHubNotFoundError(GitHubClientError):
    """Raised when a resource is not found (404)."""

    pass


class GitHubCommandError(GitHubClientError):
    """Raised when the gh CLI exits non-zero or reports a rate limit.

    The message is the combined stdout/stderr of the command, which is
    the only diagnostic the CLI gives.
    """

    def __init__(self, output: str, returncode: int) -> None:
        super().__init__(output or f"gh exited with status {returncode}")
        self.output = output
        self.returncode = returncode
