"""JSON File Backend - whole-store snapshot persisted as one JSON document.

Invariants:
    - load() never raises: a missing or corrupted file yields an empty snapshot
    - save() is atomic: write to a temp file, then os.replace over the target
    - OS failures on save are mapped to PersistenceError (core/errors.py)
    - File IO runs in a worker thread, never on the event loop

Design Decisions:
    - Single file over per-entity files: one rename keeps all collections consistent
    - Corrupted file resets rather than crashing: the store is ephemeral by nature
"""

import asyncio
import json
import logging
import os
from pathlib import Path

from whispr.core.errors import PersistenceError
from whispr.core.store_snapshot import (
    StoreSnapshot, snapshot_from_dict, snapshot_to_dict,
)

logger = logging.getLogger(__name__)


class JsonFileBackend:
    """SnapshotBackend storing the store state in a local JSON file."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    async def load(self) -> StoreSnapshot:
        return await asyncio.to_thread(self._read)

    async def save(self, snapshot: StoreSnapshot) -> None:
        data = snapshot_to_dict(snapshot)
        await asyncio.to_thread(self._write, data)

    async def health_check(self) -> bool:
        # The data directory is created on first save; check its nearest existing ancestor.
        directory = self.path.parent.absolute()
        while not directory.exists() and directory != directory.parent:
            directory = directory.parent
        return directory.is_dir() and os.access(directory, os.W_OK)

    def _read(self) -> StoreSnapshot:
        if not self.path.exists():
            return StoreSnapshot()
        try:
            raw = self.path.read_text(encoding="utf-8")
            return snapshot_from_dict(json.loads(raw))
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable snapshot {self.path}: {e}")
            return StoreSnapshot()

    def _write(self, data: dict) -> None:
        tmp = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(
                json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8",
            )
            os.replace(tmp, self.path)
        except OSError as e:
            raise PersistenceError(str(e), "write")
