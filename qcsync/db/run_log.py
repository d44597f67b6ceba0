"""
Append-only JSON run log.
Bounded to the most recent entries and replaced atomically on every write.
"""

import json
import logging
import os
import tempfile
from typing import List

from pydantic import ValidationError

from .models import RunLogEntry

logger = logging.getLogger(__name__)


class RunLog:
    """A JSON file holding a list of RunLogEntry, most recent last."""

    MAX_ENTRIES = 100

    def __init__(self, path: str, max_entries: int = MAX_ENTRIES):
        self.path = path
        self.max_entries = max_entries

    def read(self) -> List[RunLogEntry]:
        """
        Load all entries.

        A missing, unreadable or malformed file counts as an empty log.
        """
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                raw = json.load(f)
        except FileNotFoundError:
            return []
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable run log {self.path}: {e}")
            return []

        if not isinstance(raw, list):
            logger.warning(f"Ignoring run log {self.path}: expected a JSON list")
            return []

        entries: List[RunLogEntry] = []
        for item in raw:
            try:
                entries.append(RunLogEntry.model_validate(item))
            except ValidationError as e:
                logger.warning(f"Skipping malformed run log entry: {e}")
        return entries

    def append(self, entry: RunLogEntry) -> List[RunLogEntry]:
        """Add an entry, evict the oldest beyond the cap, and save."""
        entries = self.read()
        entries.append(entry)
        if len(entries) > self.max_entries:
            entries = entries[-self.max_entries:]
        self._write_atomic([e.model_dump(mode="json") for e in entries])
        return entries

    def _write_atomic(self, data: list) -> None:
        directory = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(directory, exist_ok=True)

        fd, tmp_path = tempfile.mkstemp(
            prefix=f"{os.path.basename(self.path)}.tmp-",
            dir=directory,
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self.path)
        except BaseException:
            try:
                os.unlink(tmp_path)
            except FileNotFoundError:
                pass
            raise
