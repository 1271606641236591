"""Debounced Flusher - coalesces rapid mutations into one durable write.

Invariants:
    - mark_dirty() cancels any pending timer and schedules a new one (trailing debounce)
    - At most one flush runs at a time (single-flight via asyncio.Lock)
    - A failed flush is logged, never raised; the dirty flag stays set so the
      next mutation (or close()) retries
    - Cancelling the timer never cancels a flush that has already started

Design Decisions:
    - Timer task only sleeps, then spawns the flush as its own task: a new
      mutation during a slow write reschedules instead of aborting the write
    - Snapshot taken inside the flush lock: the collections hold immutable
      entities, so a shallow copy is a consistent point-in-time view
"""

import asyncio
import logging
from typing import Callable

from whispr.core.errors import PersistenceError
from whispr.core.repository_protocols import SnapshotBackend
from whispr.core.store_snapshot import StoreSnapshot

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_MS = 250


class DebouncedFlusher:
    """Dirty flag + cancel-and-reschedule timer + single-flight flush."""

    def __init__(
        self,
        backend: SnapshotBackend,
        snapshot_provider: Callable[[], StoreSnapshot],
        debounce_ms: int = DEFAULT_DEBOUNCE_MS,
    ):
        self.backend = backend
        self._snapshot = snapshot_provider
        self._delay = debounce_ms / 1000
        self._dirty = False
        self._timer: asyncio.Task | None = None
        self._flush_task: asyncio.Task | None = None
        self._flush_lock = asyncio.Lock()
        self.flush_count = 0

    @property
    def dirty(self) -> bool:
        return self._dirty

    def mark_dirty(self) -> None:
        """Record a mutation and (re)start the debounce window."""
        self._dirty = True
        if self._timer and not self._timer.done():
            self._timer.cancel()
        self._timer = asyncio.get_running_loop().create_task(self._wait_then_flush())

    async def _wait_then_flush(self) -> None:
        try:
            await asyncio.sleep(self._delay)
        except asyncio.CancelledError:
            return
        self._flush_task = asyncio.get_running_loop().create_task(self.flush())

    async def flush(self) -> bool:
        """Write the current snapshot if dirty. Returns True when a write succeeded."""
        async with self._flush_lock:
            if not self._dirty:
                return False
            self._dirty = False
            snapshot = self._snapshot()
            try:
                await self.backend.save(snapshot)
            except PersistenceError as e:
                self._dirty = True
                logger.error(
                    f"Snapshot flush failed: {e.message}",
                    extra={"error_code": e.code},
                )
                return False
            except Exception as e:
                self._dirty = True
                logger.error(f"Unexpected snapshot flush failure: {e}", exc_info=True)
                return False
            self.flush_count += 1
            logger.debug("Snapshot flushed")
            return True

    async def close(self) -> None:
        """Cancel the pending timer, wait for any in-flight flush, then flush once more."""
        if self._timer and not self._timer.done():
            self._timer.cancel()
        if self._flush_task and not self._flush_task.done():
            await self._flush_task
        await self.flush()
