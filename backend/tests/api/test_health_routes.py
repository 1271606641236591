"""Health probes and the realtime WebSocket."""

from fastapi.testclient import TestClient

from whispr.config import Settings
from whispr.main import create_app


async def test_liveness(client):
    response = await client.get("/api/v1/health/")
    assert response.status_code == 200
    assert response.json()["service"] == "whispr-api"


async def test_readiness_reports_pending_flush(client):
    await client.post("/api/v1/profiles", json={"id": "p"})
    response = await client.get("/api/v1/health/ready")
    assert response.status_code == 200
    assert response.json()["pending_flush"] is True


async def test_readiness_fails_when_backend_unhealthy(client, backend):
    backend.healthy = False
    response = await client.get("/api/v1/health/ready")
    assert response.status_code == 503
    assert response.json()["reason"] == "persistence_unavailable"


def test_websocket_hello_and_events(tmp_path):
    settings = Settings(
        _env_file=None,
        data_file=str(tmp_path / "state.json"),
        flush_debounce_ms=0,
        log_format="text",
    )
    with TestClient(create_app(settings)) as client:
        with client.websocket_connect("/ws") as ws:
            assert ws.receive_json()["type"] == "hello"
            client.post(
                "/api/v1/confessions",
                json={"content": "live update", "category": "rant"},
                headers={"X-Whispr-Id": "u1"},
            )
            event = ws.receive_json()
            assert event["type"] == "confession:new"
            assert event["payload"]["content"] == "live update"
    assert (tmp_path / "state.json").exists()
