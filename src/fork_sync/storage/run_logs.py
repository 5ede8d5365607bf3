"""Run-scoped log files.

``failed_repos.log`` and ``rate_limited_repos.log`` list one repository per
line and only exist when the run they belong to had such repositories, so
their presence alone tells the caller the run was not clean. ``sync.log``
holds the completion time of the last run.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from fork_sync.logging import get_logger

logger = get_logger(__name__)


def clear_outcome_logs(*paths: Path) -> None:
    """Remove outcome logs left over from a previous run."""
    for path in paths:
        if path.exists():
            path.unlink()
            logger.debug("Removed stale outcome log {}", path)


def write_outcome_log(path: Path, repositories: Iterable[str]) -> bool:
    """Write repositories to an outcome log, one per line.

    Nothing is written (and any existing file is removed) when
    ``repositories`` is empty.

    Returns:
        True if the log file was written
    """
    lines = list(repositories)
    if not lines:
        path.unlink(missing_ok=True)
        return False

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("".join(f"{repo}\n" for repo in lines), encoding="utf-8")
    logger.debug("Wrote {} entries to {}", len(lines), path)
    return True


def write_run_log(path: Path, timestamp: str) -> None:
    """Replace the run log with the completion timestamp of this run."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(f"{timestamp}\n", encoding="utf-8")
