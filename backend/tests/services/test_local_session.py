"""LocalWhisprSession - device-profile facade: no ids from callers, After Dark flag."""

from datetime import datetime, timezone

import pytest

from whispr.core.domain_types import STARTING_KARMA
from whispr.services.local_session import LocalWhisprSession


@pytest.fixture
async def session(service, clock):
    s = LocalWhisprSession(service, device_id="device-1", clock=clock)
    await s.start()
    return s


async def test_start_creates_then_reuses_device_profile(service, clock):
    first = LocalWhisprSession(service, device_id="device-1", clock=clock)
    profile = await first.start()
    second = LocalWhisprSession(service, device_id="device-1", clock=clock)
    assert await second.start() == profile
    assert len(service.ledger.all()) == 1


async def test_profile_before_start_raises(service):
    with pytest.raises(RuntimeError):
        LocalWhisprSession(service).profile


async def test_add_confession_updates_profile(session):
    confession = await session.add_confession("Had a great day!", "wholesome")
    assert confession.author_id == "device-1"
    assert session.profile.karma == STARTING_KARMA + 5
    assert session.confessions() == [confession]


async def test_after_dark_flag_follows_clock(service):
    late = LocalWhisprSession(
        service, "night-owl", clock=lambda: datetime(2026, 3, 14, 23, 30, tzinfo=timezone.utc),
    )
    await late.start()
    assert late.is_after_dark
    confession = await late.add_confession("cannot sleep again", "confession")
    assert confession.is_after_dark


async def test_daytime_is_not_after_dark(session):
    assert not session.is_after_dark


async def test_crush_flow(session):
    crush = await session.send_crush("Nova Dust", "hey you")
    assert session.crushes() == [crush]
    revealed = await session.reveal_crush(crush.id)
    assert revealed.is_revealed
    assert session.profile.matches_revealed == 1
    assert await session.delete_crush(crush.id)
    assert session.crushes() == []


async def test_market_and_comments(session):
    item = await session.add_market_item("Mini Fridge", "Works", 60, "dorm", "good")
    comment = await session.add_comment("market", item.id, "still here?")
    assert session.comments("market", item.id) == [comment]
    assert (await session.toggle_sold(item.id)).is_sold
    assert await session.delete_comment(comment.id)
    assert await session.delete_market_item(item.id)


async def test_add_comment_unknown_parent_type(session):
    assert await session.add_comment("poll", "x", "hi") is None


async def test_start_can_seed_sample_data(service, clock):
    s = LocalWhisprSession(service, clock=clock)
    await s.start(seed_sample_data=True)
    assert len(s.confessions()) == 6
    assert len(s.market_items()) == 5
    assert all(c.comment_count == 0 for c in s.confessions())


async def test_regenerate_profile_changes_alias(session):
    before = session.profile.alias
    after = await session.regenerate_profile()
    assert after.alias != before
