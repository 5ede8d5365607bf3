"""Metadata Store - load and atomically save the sync metadata file.

Writes are whole-file replacements: the new content goes to a temporary
file in the same directory which is then moved over the old file, so the
file on disk is valid JSON after every save even if the process dies
mid-write.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path

from pydantic import ValidationError

from fork_sync.logging import get_logger
from fork_sync.schemas.metadata import SyncMetadata

from .exceptions import MetadataError

logger = get_logger(__name__)


class MetadataStore:
    """Reads and writes the sync metadata JSON file.

    Usage:
        store = MetadataStore(Path("sync-metadata.json"))
        metadata = store.load()
        metadata.record_success("fork-the-planet/requests")
        store.save(metadata)
    """

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        """Location of the metadata file."""
        return self._path

    def load(self) -> SyncMetadata:
        """Load the metadata file.

        A missing or empty file yields an empty record.

        Returns:
            SyncMetadata parsed from disk

        Raises:
            MetadataError: If the file is not a valid JSON object
        """
        if not self._path.exists():
            logger.info("No metadata file at {}, starting fresh", self._path)
            return SyncMetadata()

        text = self._path.read_text(encoding="utf-8")
        if not text.strip():
            return SyncMetadata()

        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise MetadataError(f"Invalid JSON in {self._path}: {e}") from e

        if not isinstance(data, dict):
            raise MetadataError(
                f"Expected a JSON object in {self._path}, got {type(data).__name__}"
            )

        try:
            metadata = SyncMetadata.from_json_dict(data)
        except ValidationError as e:
            raise MetadataError(f"Invalid repository entry in {self._path}: {e}") from e

        logger.debug(
            "Loaded metadata for {} repositories (last run: {})",
            len(metadata.repositories),
            metadata.last_run,
        )
        return metadata

    def save(self, metadata: SyncMetadata) -> None:
        """Atomically replace the metadata file with ``metadata``."""
        directory = self._path.parent
        directory.mkdir(parents=True, exist_ok=True)

        payload = json.dumps(metadata.to_json_dict(), indent=2) + "\n"

        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self._path.name}.", suffix=".tmp", dir=directory
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as tmp:
                tmp.write(payload)
                tmp.flush()
                os.fsync(tmp.fileno())
            os.replace(tmp_name, self._path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

        logger.debug(
            "Saved metadata for {} repositories to {}",
            len(metadata.repositories),
            self._path,
        )
