"""Content Store: market items - price rules, enums, images, sold toggle, cascade."""

from whispr.core.content_store import ContentStore
from whispr.core.domain_types import (
    MarketCategory, MarketCondition, MAX_PRICE, StoreLimits,
)


def _list(store, seller="seller-1", **overrides):
    fields = dict(
        title="TI-84 Plus Calculator",
        description="Battery included.",
        price=35,
        category="electronics",
        condition="good",
        seller_id=seller,
        seller_alias="Arctic Flame",
        seller_avatar_index=3,
    )
    fields.update(overrides)
    return store.create_market_item(**fields)


def test_create_market_item(store):
    item = _list(store)
    assert item.price == 35.0
    assert item.category is MarketCategory.ELECTRONICS
    assert item.condition is MarketCondition.GOOD
    assert item.is_sold is False
    assert item.image_urls == ()


def test_price_rounded_half_up(store):
    assert _list(store, price=19.999).price == 20.0


def test_price_capped(store):
    assert _list(store, price=1_000_000).price == MAX_PRICE


def test_non_positive_price_rejected(store):
    assert _list(store, price=0) is None
    assert _list(store, price=-10) is None
    assert _list(store, price=0.001) is None
    assert store.market_items == []


def test_short_title_rejected(store):
    assert _list(store, title="ab") is None


def test_bad_enums_rejected(store):
    assert _list(store, category="cars") is None
    assert _list(store, condition="broken") is None


def test_image_urls_blank_stripped_and_capped(store):
    item = _list(store, image_urls=["a.jpg", "  ", "b.jpg", "c.jpg", "d.jpg"])
    assert item.image_urls == ("a.jpg", "b.jpg", "c.jpg")


def test_toggle_sold_owner_only(store):
    item = _list(store)
    assert store.toggle_sold(item.id, "intruder") is None
    assert store.toggle_sold(item.id, "seller-1").is_sold is True
    assert store.toggle_sold(item.id, "seller-1").is_sold is False


def test_delete_owner_only_and_cascades(store):
    item = _list(store)
    store.create_comment("still available?", "buyer", "B", 0, market_item_id=item.id)
    assert store.delete_market_item(item.id, "intruder") is False
    assert len(store.comments) == 1
    assert store.delete_market_item(item.id, "seller-1") is True
    assert store.market_items == []
    assert store.comments == []


def test_list_market_items_by_category(store, clock):
    _list(store)
    clock.advance(seconds=1)
    _list(store, title="Mini Fridge", category="dorm")
    assert [i.title for i in store.list_market_items(category="dorm")] == ["Mini Fridge"]
    assert [i.title for i in store.list_market_items()] == [
        "Mini Fridge", "TI-84 Plus Calculator",
    ]


def test_market_cap_evicts_oldest_and_cascades(clock, rng):
    store = ContentStore(clock, rng, limits=StoreLimits(max_market_items=2))
    oldest = _list(store, title="Desk Lamp")
    store.create_comment("price?", "buyer", "B", 0, market_item_id=oldest.id)
    for title in ("Mini Fridge", "Bean Bag"):
        clock.advance(seconds=1)
        _list(store, title=title)
    assert [i.title for i in store.market_items] == ["Bean Bag", "Mini Fridge"]
    assert store.get_market_item(oldest.id) is None
    assert store.comments == []
