"""
JSON File Storage Implementation

DESIGN DECISION: A single JSON document on disk is used as the durable
backend because:
1. The whole data set is one person's expenses (small)
2. Users can open and read their data directly
3. No database setup required

TRADEOFFS:
- The full document is rewritten on every mutation
- No transactions (a crash mid-write leaves the previous file intact
  because we write to a temp file and rename)
- One process at a time; concurrent writers are not supported
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Optional, Union

import structlog

from expense_tracker.services.storage.interface import (
    DataFormatError,
    StorageError,
)
from expense_tracker.services.storage.memory import InMemoryKeyValueStore


logger = structlog.get_logger(__name__)


class JsonFileKeyValueStore(InMemoryKeyValueStore):
    """
    Key-value store persisted as one JSON object.

    The file is read once on construction and rewritten after every
    set or remove.
    """

    def __init__(self, path: Union[str, Path]):
        self._path = Path(path)
        super().__init__(self._read_file())

    @property
    def path(self) -> Path:
        return self._path

    def _read_file(self) -> Optional[dict]:
        """Load the document, or None if the file does not exist yet."""
        if not self._path.exists():
            logger.info("store_file_missing", path=str(self._path))
            return None

        try:
            raw = self._path.read_text(encoding="utf-8")
        except OSError as e:
            raise StorageError(f"Failed to read {self._path}: {e}")

        if not raw.strip():
            return None

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise DataFormatError(f"Store file {self._path} is not valid JSON: {e}")

        if not isinstance(data, dict):
            raise DataFormatError(
                f"Store file {self._path} must hold a JSON object, got {type(data).__name__}"
            )
        return data

    async def _flush(self) -> None:
        """Write the whole document atomically (temp file + replace)."""
        directory = self._path.parent
        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self._path.name}.",
                suffix=".tmp",
                dir=directory,
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    json.dump(self._data, handle, ensure_ascii=False, indent=2)
                os.replace(tmp_name, self._path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StorageError(f"Failed to write {self._path}: {e}")
