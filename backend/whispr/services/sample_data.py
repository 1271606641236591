"""Sample Data - demo confessions and listings for a fresh, empty store.

Invariants:
    - Seeding only happens when the confession feed is empty
    - Seeded confessions start with comment_count 0: no comments are seeded,
      so the comment counter matches the stored comments
    - Timestamps are relative to the injected "now"
"""

from datetime import datetime, timedelta

from whispr.core.domain_types import (
    ConfessionCategory, MarketCategory, MarketCondition, REACTION_KINDS,
)
from whispr.core.entities import Confession, MarketItem
from whispr.core.content_store import new_id

# (author_id, alias, avatar_index, karma)
_AUTHORS = {
    "sample1": ("Midnight Owl", 2, 145),
    "sample2": ("Neon Ghost", 5, 89),
    "sample3": ("Pixel Phantom", 8, 320),
    "sample4": ("Silent Spark", 11, 67),
    "sample5": ("Arctic Flame", 3, 234),
    "sample6": ("Velvet Storm", 7, 456),
}

# (author_id, category, age, reaction counts per kind, content)
_CONFESSIONS = (
    ("sample1", ConfessionCategory.CONFESSION, timedelta(minutes=30),
     {"fire": 2, "heart": 3},
     "I've been sneaking into the library after hours to study because my "
     "roommate won't stop playing music. It's actually become my favorite routine."),
    ("sample2", ConfessionCategory.HOT_TAKE, timedelta(hours=2),
     {"fire": 4, "laugh": 3},
     "Hot take: the dining hall pasta is actually elite and I'm tired of people "
     "pretending it isn't"),
    ("sample3", ConfessionCategory.WHOLESOME, timedelta(hours=5),
     {"heart": 1, "laugh": 7, "shock": 1},
     "I accidentally called my professor 'mom' today in a 200-person lecture "
     "hall. Considering transferring schools."),
    ("sample4", ConfessionCategory.CONFESSION, timedelta(hours=8),
     {"heart": 6, "sad": 1},
     "The person who always sits behind me in Psych 101... I think about you "
     "every day. Your laugh makes the whole lecture worth attending."),
    ("sample5", ConfessionCategory.HOT_TAKE, timedelta(hours=12),
     {"fire": 2, "shock": 7},
     "Unpopular opinion: 8am classes are actually superior because you have the "
     "rest of the day free. Morning people rise up."),
    ("sample6", ConfessionCategory.AFTER_DARK, timedelta(hours=14),
     {"heart": 9},
     "3am confession: I've been leaving anonymous encouraging notes on people's "
     "cars in the parking lot for the past month. Your smiles when you find them "
     "make my whole week."),
)

# (seller_id, title, description, price, category, condition, age)
_MARKET_ITEMS = (
    ("sample1", "Organic Chemistry Textbook (7th Ed)",
     "Barely used, highlighted a few pages. Cheaper than the bookstore.",
     45.0, MarketCategory.TEXTBOOKS, MarketCondition.LIKE_NEW, timedelta(hours=3)),
    ("sample3", "Mini Fridge - Perfect for Dorm",
     "Works perfectly, graduating and need to get rid of it fast. Pick up only.",
     60.0, MarketCategory.DORM, MarketCondition.GOOD, timedelta(hours=6)),
    ("sample5", "TI-84 Plus Calculator",
     "Still has all the programs loaded for Calc II. Battery included.",
     35.0, MarketCategory.ELECTRONICS, MarketCondition.GOOD, timedelta(hours=10)),
    ("sample2", "Concert Tickets - Campus Battle of Bands",
     "2 tickets for Friday's show. Can't make it anymore.",
     15.0, MarketCategory.TICKETS, MarketCondition.NEW, timedelta(hours=1)),
    ("sample6", "Essay Proofreading Service",
     "English major offering proofreading. 24hr turnaround. DM for details.",
     10.0, MarketCategory.SERVICES, MarketCondition.NEW, timedelta(hours=4)),
)


def _sample_reactions(counts: dict[str, int]) -> dict[str, tuple[str, ...]]:
    # Reactor ids are numbered per confession, so they stay distinct within a kind.
    reactions: dict[str, tuple[str, ...]] = {}
    next_id = 1
    for kind in REACTION_KINDS:
        n = counts.get(kind, 0)
        reactions[kind] = tuple(f"s{i}" for i in range(next_id, next_id + n))
        next_id += n
    return reactions


def sample_confessions(now: datetime) -> list[Confession]:
    confessions = []
    for author_id, category, age, counts, content in _CONFESSIONS:
        alias, avatar, karma = _AUTHORS[author_id]
        confessions.append(Confession(
            id=new_id(),
            content=content,
            author_id=author_id,
            author_alias=alias,
            author_avatar_index=avatar,
            author_karma=karma,
            category=category,
            created_at=now - age,
            reactions=_sample_reactions(counts),
            is_after_dark=category is ConfessionCategory.AFTER_DARK,
        ))
    return confessions


def sample_market_items(now: datetime) -> list[MarketItem]:
    items = []
    for seller_id, title, description, price, category, condition, age in _MARKET_ITEMS:
        alias, avatar, karma = _AUTHORS[seller_id]
        items.append(MarketItem(
            id=new_id(),
            title=title,
            description=description,
            price=price,
            category=category,
            condition=condition,
            seller_id=seller_id,
            seller_alias=alias,
            seller_karma=karma,
            seller_avatar_index=avatar,
            created_at=now - age,
        ))
    return items
