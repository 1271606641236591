"""Boundary Protocols - contracts between core and shell.

Invariants:
    - Core never imports from shell: dependency arrows point inward only
    - All IO (durable storage, realtime fan-out) accessed through Protocol types
    - Implementations provided by shell via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Async in Protocol: implementations do IO, but the store that produces the
      snapshot is synchronous; the service orchestrates the awaits around it
"""

from typing import Any, Protocol

from whispr.core.store_snapshot import StoreSnapshot


class SnapshotBackend(Protocol):
    """Durable storage for the whole store state - implemented by shell."""
    async def load(self) -> StoreSnapshot: ...
    async def save(self, snapshot: StoreSnapshot) -> None: ...
    async def health_check(self) -> bool: ...


class EventPublisher(Protocol):
    """Best-effort realtime fan-out - implemented by shell."""
    async def broadcast(self, event_type: str, payload: dict[str, Any]) -> int: ...
