"""Common CLI option factories and helpers.

This module centralizes reusable CLI options to reduce duplication
and consolidate noqa comments for Typer's required function call pattern.

It also provides:
- `run_async_command`: Unified async execution with error handling for CLI commands
- `create_syncer`: Picks the per-fork sync backend from settings
"""

from __future__ import annotations

import asyncio
from collections.abc import Coroutine
from typing import TYPE_CHECKING, Annotated, TypeVar

import typer
from rich.console import Console

from fork_sync.github.gh_cli import GhCliForkSyncer
from fork_sync.github.sync.enums import OutputFormat

if TYPE_CHECKING:
    from fork_sync.config import Settings
    from fork_sync.github.client import GitHubClient
    from fork_sync.github.sync.scheduler import ForkSyncer

# Shared console instance for CLI output
console = Console()

T = TypeVar("T")


def run_async_command(
    coro: Coroutine[object, object, T],
    *,
    error_prefix: str = "Error",
) -> T:
    """Execute async code from synchronous CLI command with unified error handling.

    Uses asyncio.run() for clean event loop management. Catches exceptions,
    prints user-friendly error messages, and exits with code 1.

    Args:
        coro: Async coroutine to execute
        error_prefix: Prefix for error messages (default: "Error")

    Returns:
        Result from the coroutine

    Raises:
        typer.Exit: Re-raised from deliberate exits, or raised with code 1 on error
    """
    try:
        return asyncio.run(coro)
    except typer.Exit:
        # Re-raise deliberate exits (e.g., from validation helpers)
        raise
    except Exception as e:
        console.print(f"[red]{error_prefix}:[/red] {e}")
        raise typer.Exit(1) from None


def create_syncer(settings: Settings, client: GitHubClient) -> ForkSyncer:
    """Per-fork sync backend selected by SYNC__BACKEND."""
    if settings.sync.backend == "gh":
        return GhCliForkSyncer(token=settings.github_token or None)
    return client


# Typer requires function calls as default arguments, which triggers B008.
# Using Annotated with a centralized type alias keeps the noqa in one place.

OutputFormatOption = Annotated[
    OutputFormat,
    typer.Option(
        "--format",
        "-f",
        help="Output format",
    ),
]
"""Output format option type for CLI commands.

Usage:
    def command(output_format: OutputFormatOption = OutputFormat.TEXT):
"""

DryRunOption = Annotated[
    bool,
    typer.Option(
        "--dry-run",
        help="Don't change anything on GitHub, just show what would happen",
    ),
]

OrgOption = Annotated[
    str | None,
    typer.Option(
        "--org",
        "-o",
        help="Organization whose forks to process (defaults to ORG_NAME)",
    ),
]

RepoArgument = Annotated[
    str,
    typer.Argument(
        help="Repository in owner/name format (e.g., fork-the-planet/requests)",
    ),
]
"""Required positional repository argument.

Usage:
    def sync_repo(repo: RepoArgument) -> None:
"""


def validate_repo(repo: str) -> tuple[str, str]:
    """Parse and validate a single repository string.

    Args:
        repo: Repository string in owner/name format

    Returns:
        Tuple of (owner, name)

    Raises:
        typer.Exit(1): If format is invalid
    """
    from fork_sync.schemas import parse_repo_string

    try:
        return parse_repo_string(repo)
    except ValueError:
        console.print("[red]Error:[/red] Repository must be in owner/name format")
        raise typer.Exit(1) from None


def require_token(settings: Settings) -> None:
    """Exit with an error when no GitHub token is configured."""
    if not settings.github_token:
        console.print("[red]Error:[/red] GITHUB_TOKEN not set in environment")
        raise typer.Exit(1)
