"""Realtime Hub - best-effort fan-out of content mutation events over WebSockets.

Invariants:
    - Every event has the envelope {type, payload, timestamp}
    - A failed or timed-out send drops that observer; it never fails or stalls
      the mutation that triggered the broadcast
    - Every send is bounded by send_timeout; broadcast never blocks indefinitely
    - No backlog and no replay: a reconnecting client re-fetches full state

Design Decisions:
    - Observers are anything with an async send_text(str): FastAPI WebSocket in
      production, fakes in tests
    - Serialize once per event, not once per observer
    - Sends run concurrently (asyncio.gather), so one slow socket costs at most
      send_timeout instead of delaying the rest
"""

import asyncio
import json
import logging
from datetime import datetime
from typing import Any, Callable, Protocol

from whispr.core.clock import utc_now

logger = logging.getLogger(__name__)

DEFAULT_SEND_TIMEOUT_MS = 2000


class Observer(Protocol):
    async def send_text(self, data: str) -> None: ...


def build_event(
    event_type: str, payload: dict[str, Any], timestamp: datetime,
) -> dict[str, Any]:
    return {
        "type": event_type,
        "payload": payload,
        "timestamp": timestamp.isoformat(),
    }


class RealtimeHub:
    """Tracks connected observers and broadcasts events to all of them."""

    def __init__(
        self,
        clock: Callable[[], datetime] = utc_now,
        send_timeout_ms: int = DEFAULT_SEND_TIMEOUT_MS,
    ):
        self._now = clock
        self._send_timeout = send_timeout_ms / 1000
        self._observers: set[Observer] = set()

    @property
    def observer_count(self) -> int:
        return len(self._observers)

    async def connect(self, observer: Observer) -> None:
        """Register an (already accepted) observer and greet it.

        A failed greeting unregisters the observer and re-raises.
        """
        self._observers.add(observer)
        try:
            await asyncio.wait_for(
                observer.send_text(json.dumps(build_event("hello", {}, self._now()))),
                self._send_timeout,
            )
        except Exception:
            self._observers.discard(observer)
            raise
        logger.info(
            "Realtime observer connected",
            extra={"observers": len(self._observers)},
        )

    def disconnect(self, observer: Observer) -> None:
        self._observers.discard(observer)

    async def broadcast(self, event_type: str, payload: dict[str, Any]) -> int:
        """Send the event to every observer. Returns how many received it."""
        message = json.dumps(
            build_event(event_type, payload, self._now()), ensure_ascii=False,
        )
        observers = list(self._observers)
        results = await asyncio.gather(
            *(self._send(o, message) for o in observers), return_exceptions=True,
        )
        delivered = 0
        for observer, result in zip(observers, results):
            if result is True:
                delivered += 1
                continue
            logger.warning(
                f"Dropping realtime observer after failed send: {result!r}",
                extra={"event_type": event_type},
            )
            self._observers.discard(observer)
        return delivered

    async def _send(self, observer: Observer, message: str) -> bool:
        await asyncio.wait_for(observer.send_text(message), self._send_timeout)
        return True
