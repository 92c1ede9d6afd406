"""
JSON-file-backed record store.

A store owns one JSON document whose top-level value is an array of records
and keeps an in-memory mirror of it. Every mutation runs under the store lock,
is written to disk in full and only then becomes the new mirror, so a failed
write leaves the mirror at the last good state.
"""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import Iterator
import copy
import json
import logging
import threading

from galeria.core.errors import StorageError

logger = logging.getLogger(__name__)


class RecordStore:
    """Ordered sequence of dict records persisted to a single JSON file."""

    def __init__(self, path: Path | str, name: str | None = None) -> None:
        self.path = Path(path)
        self.name = name or self.path.stem
        self._lock = threading.Lock()
        self._dirty = False
        self._records: list[dict] = self.load()

    def load(self) -> list[dict]:
        """Read the backing file; create it empty when missing."""
        if not self.path.exists():
            self.persist([])
            logger.info("Store %s: created %s", self.name, self.path)
            return []
        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as exc:
            logger.error("Store %s: could not read %s (%s); starting empty", self.name, self.path, exc)
            return []
        if not isinstance(data, list):
            logger.error("Store %s: %s does not hold a JSON array; starting empty", self.name, self.path)
            return []
        records = [item for item in data if isinstance(item, dict)]
        if len(records) != len(data):
            logger.warning("Store %s: skipped %d non-object entries", self.name, len(data) - len(records))
        logger.info("Store %s: loaded %d records from %s", self.name, len(records), self.path)
        return records

    def persist(self, records: list[dict]) -> None:
        """Overwrite the backing file with the full sequence."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(records, ensure_ascii=False, indent=2), encoding="utf-8")
        except (OSError, TypeError, ValueError) as exc:
            logger.error("Store %s: failed to write %s: %s", self.name, self.path, exc)
            raise StorageError() from exc

    def records(self) -> list[dict]:
        """Snapshot of the mirror; callers may modify it freely."""
        with self._lock:
            return copy.deepcopy(self._records)

    @contextmanager
    def mutate(self) -> Iterator[list[dict]]:
        """
        Yield a working copy of the records while holding the store lock.

        On normal exit the copy is persisted and published as the mirror. If
        the block raises (a domain error, for instance) nothing is written.
        A failed write marks the store dirty: the file may be half written
        while the mirror still holds the last good state.
        """
        with self._lock:
            working = copy.deepcopy(self._records)
            yield working
            try:
                self.persist(working)
            except StorageError:
                self._dirty = True
                raise
            self._records = working
            self._dirty = False

    def close(self) -> None:
        """
        Rewrite the last good state if a write failed since the last success.

        A file that could not be parsed at load time is left as it is unless
        a mutation already replaced it.
        """
        with self._lock:
            if not self._dirty:
                return
            self.persist(self._records)
            self._dirty = False
            logger.info("Store %s: restored %s on shutdown", self.name, self.path)

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)
