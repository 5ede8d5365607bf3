"""Outcome classification for fork sync attempts.

Every decision about whether an error means "this fork failed" or "the
whole quota is gone" is made here, so the matching strategy can change
without touching the scheduler loop.
"""

from __future__ import annotations

import re

from fork_sync.github.exceptions import GitHubRateLimitError

from .enums import SyncOutcome

RATE_LIMIT_PATTERN = re.compile(r"rate limit", re.IGNORECASE)
"""Matches GitHub's primary ("API rate limit exceeded") and secondary
("You have exceeded a secondary rate limit") messages."""


def is_rate_limit_message(text: str) -> bool:
    """Check whether diagnostic text reports an exhausted rate limit."""
    return bool(RATE_LIMIT_PATTERN.search(text))


def classify_outcome(error: BaseException | None) -> SyncOutcome:
    """Classify the result of one sync call.

    Args:
        error: The exception raised by the sync call, or None if it returned

    Returns:
        SUCCESS when there was no error, RATE_LIMITED when the error is a
        rate limit error or its text mentions the rate limit, FAILED otherwise
    """
    if error is None:
        return SyncOutcome.SUCCESS
    if isinstance(error, GitHubRateLimitError):
        return SyncOutcome.RATE_LIMITED
    if is_rate_limit_message(str(error)):
        return SyncOutcome.RATE_LIMITED
    return SyncOutcome.FAILED
