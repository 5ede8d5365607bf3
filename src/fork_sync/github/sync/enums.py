"""Enums for sync operations."""

from enum import Enum


class SyncOutcome(str, Enum):
    """Classification of a single fork sync attempt."""

    SUCCESS = "success"
    """The fork now matches its upstream."""

    FAILED = "failed"
    """The sync failed for this fork only. The run continues."""

    RATE_LIMITED = "rate_limited"
    """The API quota is exhausted. The run stops."""


class OutputFormat(str, Enum):
    """Output format for CLI commands."""

    TEXT = "text"
    """Human-readable text output."""

    JSON = "json"
    """Machine-readable JSON output."""
