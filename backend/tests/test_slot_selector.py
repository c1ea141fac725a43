"""Freshness-windowed pick: preference for unused exercises, fallback, exclusion."""

import random
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from workout_rotation.services.slot_selector import SlotCriteria, freshness_pick
from workout_rotation.services.usage_ledger import UsageLedger, as_utc
from workout_rotation.schedule import DayType, Focus

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


@dataclass
class Item:
    id: int
    last_used: datetime | None = None


def _ledger(window_days=28):
    return UsageLedger(session=None, now=NOW, window_days=window_days)


def test_is_fresh_never_used():
    assert _ledger().is_fresh(Item(1)) is True


def test_is_fresh_respects_window():
    ledger = _ledger(28)
    assert ledger.is_fresh(Item(1, NOW - timedelta(days=29))) is True
    assert ledger.is_fresh(Item(2, NOW - timedelta(days=27))) is False
    assert ledger.is_fresh(Item(3, NOW - timedelta(days=28))) is False


def test_is_fresh_naive_timestamp_treated_as_utc():
    naive = (NOW - timedelta(days=40)).replace(tzinfo=None)
    assert _ledger().is_fresh(Item(1, naive)) is True
    assert as_utc(naive).tzinfo is timezone.utc


def test_pick_prefers_fresh_when_enough():
    ledger = _ledger()
    stale = [Item(i, NOW - timedelta(days=1)) for i in range(1, 6)]
    fresh = [Item(i) for i in range(10, 13)]
    for seed in range(200):
        picked = freshness_pick([*stale, *fresh], 3, ledger.is_fresh, random.Random(seed))
        assert sorted(p.id for p in picked) == [10, 11, 12]


def test_pick_falls_back_to_all_when_fresh_too_few():
    ledger = _ledger()
    stale = [Item(i, NOW - timedelta(days=1)) for i in range(1, 4)]
    fresh = [Item(10)]
    seen = set()
    for seed in range(200):
        picked = freshness_pick([*stale, *fresh], 3, ledger.is_fresh, random.Random(seed))
        assert len(picked) == 3
        assert len({p.id for p in picked}) == 3
        seen.update(p.id for p in picked)
    # stale items become eligible under fallback
    assert seen == {1, 2, 3, 10}


def test_pick_returns_fewer_when_pool_small():
    picked = freshness_pick([Item(1), Item(2)], 3, _ledger().is_fresh, random.Random(1))
    assert sorted(p.id for p in picked) == [1, 2]


def test_pick_never_reaches_outside_given_candidates():
    """Exclusion happens before the pick, so fallback cannot bring an excluded id back."""
    ledger = _ledger()
    all_items = [Item(i, NOW - timedelta(days=2)) for i in range(1, 7)]
    excluded = {1, 2, 3}
    candidates = [i for i in all_items if i.id not in excluded]
    for seed in range(100):
        picked = freshness_pick(candidates, 3, ledger.is_fresh, random.Random(seed))
        assert not excluded & {p.id for p in picked}


def test_pick_does_not_mutate_candidates():
    candidates = [Item(i) for i in range(1, 6)]
    before = [c.id for c in candidates]
    freshness_pick(candidates, 2, _ledger().is_fresh, random.Random(3))
    assert [c.id for c in candidates] == before


def test_criteria_describe():
    assert SlotCriteria(1, DayType.KICKBOXING, Focus.UPPER).describe() == "Station 1, Kickboxing, Upper"
    assert SlotCriteria(2, DayType.BOXING).describe() == "Station 2, Boxing"
