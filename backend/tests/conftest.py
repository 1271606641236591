"""Root conftest - shared fakes and fixtures.

Invariants:
    - Every test gets a fresh store, ledger and service (no shared state)
    - Time only moves when a test advances the FakeClock
    - Random draws are seeded: alias/avatar/mutuality outcomes are reproducible
"""

import os
import random
from datetime import datetime, timedelta, timezone

import pytest

# Never let a test run pick up a developer's database settings
os.environ.setdefault("PERSISTENCE_BACKEND", "json")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///test.db")

from whispr.core.content_store import ContentStore
from whispr.core.errors import PersistenceError
from whispr.core.profile_ledger import ProfileLedger
from whispr.core.store_snapshot import StoreSnapshot
from whispr.services.whispr_service import WhisprService

START = datetime(2026, 3, 14, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime = START):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


class InMemoryBackend:
    """SnapshotBackend fake: keeps every saved snapshot, can be told to fail."""

    def __init__(self, initial: StoreSnapshot | None = None):
        self.initial = initial or StoreSnapshot()
        self.saved: list[StoreSnapshot] = []
        self.fail = False
        self.healthy = True

    async def load(self) -> StoreSnapshot:
        return self.initial

    async def save(self, snapshot: StoreSnapshot) -> None:
        if self.fail:
            raise PersistenceError("disk full", "write")
        self.saved.append(snapshot)

    async def health_check(self) -> bool:
        return self.healthy


class RecordingPublisher:
    """EventPublisher fake recording (event_type, payload) pairs."""

    def __init__(self):
        self.events: list[tuple[str, dict]] = []

    async def broadcast(self, event_type: str, payload: dict) -> int:
        self.events.append((event_type, payload))
        return 1

    def types(self) -> list[str]:
        return [t for t, _ in self.events]


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def store(clock, rng):
    return ContentStore(clock, rng)


@pytest.fixture
def ledger(clock, rng):
    return ProfileLedger(clock, rng)


@pytest.fixture
def backend():
    return InMemoryBackend()


@pytest.fixture
def publisher():
    return RecordingPublisher()


@pytest.fixture
async def service(backend, publisher, clock):
    svc = WhisprService.build(
        backend,
        publisher=publisher,
        clock=clock,
        rng=random.Random(99),
        debounce_ms=10_000,
    )
    await svc.initialize()
    yield svc
    await svc.shutdown()
