"""Realtime Hub - hello on connect, envelope shape, dead observers dropped."""

import asyncio
import json

import pytest

from whispr.infrastructure.realtime import RealtimeHub


class FakeSocket:
    def __init__(self, broken: bool = False):
        self.broken = broken
        self.sent: list[dict] = []

    async def send_text(self, data: str) -> None:
        if self.broken:
            raise ConnectionError("socket closed")
        self.sent.append(json.loads(data))


async def test_connect_sends_hello(clock):
    hub = RealtimeHub(clock)
    socket = FakeSocket()
    await hub.connect(socket)
    assert socket.sent[0]["type"] == "hello"
    assert hub.observer_count == 1


async def test_broadcast_envelope(clock):
    hub = RealtimeHub(clock)
    socket = FakeSocket()
    await hub.connect(socket)
    delivered = await hub.broadcast("confession:new", {"id": "c1"})
    assert delivered == 1
    assert socket.sent[-1] == {
        "type": "confession:new",
        "payload": {"id": "c1"},
        "timestamp": clock().isoformat(),
    }


async def test_failed_send_drops_observer(clock):
    hub = RealtimeHub(clock)
    good = FakeSocket()
    bad = FakeSocket()
    await hub.connect(good)
    await hub.connect(bad)
    bad.broken = True
    assert await hub.broadcast("market:new", {}) == 1
    assert hub.observer_count == 1
    assert good.sent[-1]["type"] == "market:new"


async def test_disconnect_is_idempotent(clock):
    hub = RealtimeHub(clock)
    socket = FakeSocket()
    await hub.connect(socket)
    hub.disconnect(socket)
    hub.disconnect(socket)
    assert hub.observer_count == 0
    assert await hub.broadcast("crush:new", {}) == 0


class HangingSocket(FakeSocket):
    """Accepts the greeting, then never completes another send."""

    async def send_text(self, data: str) -> None:
        if self.sent:
            await asyncio.Event().wait()
        await super().send_text(data)


async def test_stalled_observer_times_out_and_is_dropped(clock):
    hub = RealtimeHub(clock, send_timeout_ms=50)
    good = FakeSocket()
    stalled = HangingSocket()
    await hub.connect(good)
    await hub.connect(stalled)
    delivered = await asyncio.wait_for(hub.broadcast("confession:new", {}), 2)
    assert delivered == 1
    assert hub.observer_count == 1
    assert good.sent[-1]["type"] == "confession:new"


async def test_failed_greeting_unregisters(clock):
    hub = RealtimeHub(clock)
    with pytest.raises(ConnectionError):
        await hub.connect(FakeSocket(broken=True))
    assert hub.observer_count == 0
