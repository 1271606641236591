"""API conftest - isolated app per test with the in-memory service attached.

Design Decisions:
    - ASGITransport does not run the lifespan, so the service and hub are
      assigned to app.state directly
"""

import pytest
from httpx import ASGITransport, AsyncClient

from whispr.config import Settings
from whispr.infrastructure.realtime import RealtimeHub
from whispr.main import create_app


@pytest.fixture
def api_app(service, clock):
    app = create_app(Settings(_env_file=None))
    app.state.service = service
    app.state.hub = RealtimeHub(clock)
    return app


@pytest.fixture
async def client(api_app):
    async with AsyncClient(
        transport=ASGITransport(app=api_app), base_url="http://test",
    ) as ac:
        yield ac
