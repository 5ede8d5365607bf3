"""Sync metadata record persisted between runs.

The on-disk shape is a single flat JSON object::

    {
        "fork-the-planet/requests": {"last_update": "2024-01-15T10:00:00Z"},
        "fork-the-planet/flask": {"last_update": "2024-01-16T14:00:00Z"},
        "last_run": "2024-01-16 14:05:12"
    }

Repository keys map to per-repository records; ``last_run`` is the local
completion time of the most recent run. Any other top-level keys are kept
as-is so that a save never drops data written by someone else.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

EPOCH = datetime(1970, 1, 1, tzinfo=UTC)
"""Default last_update for repositories that were never synced."""

LAST_UPDATE_FORMAT = "%Y-%m-%dT%H:%M:%SZ"
LAST_RUN_FORMAT = "%Y-%m-%d %H:%M:%S"
LAST_RUN_KEY = "last_run"


class RepoSyncRecord(BaseModel):
    """Sync state of a single repository."""

    model_config = ConfigDict(extra="allow")

    last_update: datetime = Field(
        default=EPOCH,
        description="UTC time of the last successful sync (second precision)",
    )

    @field_validator("last_update", mode="before")
    @classmethod
    def _default_missing(cls, value: Any) -> Any:
        return EPOCH if value is None else value

    @field_validator("last_update")
    @classmethod
    def _normalize_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC).replace(microsecond=0)

    @field_serializer("last_update")
    def _serialize_last_update(self, value: datetime) -> str:
        return value.strftime(LAST_UPDATE_FORMAT)


class SyncMetadata(BaseModel):
    """In-memory form of the sync metadata file.

    Loaded once per process, mutated after every successful sync and
    handed to MetadataStore.save() for persistence.
    """

    repositories: dict[str, RepoSyncRecord] = Field(
        default_factory=dict,
        description="Per-repository records keyed by owner/name",
    )
    last_run: str | None = Field(
        default=None,
        description="Local time the last run completed (YYYY-MM-DD HH:MM:SS)",
    )
    extra: dict[str, Any] = Field(
        default_factory=dict,
        description="Unrecognized top-level keys, preserved verbatim",
    )

    # -------------------------------------------------------------------------
    # Accessors
    # -------------------------------------------------------------------------
    def last_update(self, full_name: str) -> datetime:
        """Get the last sync time of a repository (epoch if never synced)."""
        record = self.repositories.get(full_name)
        return record.last_update if record is not None else EPOCH

    def record_success(self, full_name: str, synced_at: datetime | None = None) -> datetime:
        """Record a successful sync of a repository.

        The stored timestamp never moves backwards: if the existing value is
        newer than ``synced_at`` it is kept.

        Args:
            full_name: Repository identifier (owner/name)
            synced_at: Time of the sync (defaults to now, UTC)

        Returns:
            The last_update value now stored for the repository
        """
        when = synced_at if synced_at is not None else datetime.now(UTC)
        if when.tzinfo is None:
            when = when.replace(tzinfo=UTC)
        when = when.astimezone(UTC).replace(microsecond=0)

        record = self.repositories.get(full_name)
        if record is None:
            self.repositories[full_name] = RepoSyncRecord(last_update=when)
        elif when > record.last_update:
            record.last_update = when
        return self.last_update(full_name)

    def stamp_last_run(self, at: datetime | None = None) -> str:
        """Set last_run to the given (or current) local time and return it."""
        when = at if at is not None else datetime.now()
        self.last_run = when.strftime(LAST_RUN_FORMAT)
        return self.last_run

    # -------------------------------------------------------------------------
    # JSON conversion
    # -------------------------------------------------------------------------
    def to_json_dict(self) -> dict[str, Any]:
        """Flatten into the on-disk JSON object."""
        data: dict[str, Any] = dict(self.extra)
        for full_name in sorted(self.repositories):
            data[full_name] = self.repositories[full_name].model_dump(mode="json")
        if self.last_run is not None:
            data[LAST_RUN_KEY] = self.last_run
        return data

    @classmethod
    def from_json_dict(cls, data: dict[str, Any]) -> SyncMetadata:
        """Build from the on-disk JSON object.

        Raises:
            pydantic.ValidationError: If a repository entry has an invalid last_update
        """
        repositories: dict[str, RepoSyncRecord] = {}
        extra: dict[str, Any] = {}
        last_run: str | None = None

        for key, value in data.items():
            if key == LAST_RUN_KEY:
                last_run = None if value is None else str(value)
            elif isinstance(value, dict):
                repositories[key] = RepoSyncRecord.model_validate(value)
            else:
                extra[key] = value

        return cls(repositories=repositories, last_run=last_run, extra=extra)
