"""Tests for tri-set selection: freshness preference, fallback below the threshold, broken tri-sets skipped."""

import random
from datetime import datetime, timedelta, timezone

import pytest

from workout_rotation.db.session import async_session_maker
from workout_rotation.services import catalog
from workout_rotation.services.tri_sets import TriSetShape, create_tri_set, find_candidates, select_tri_set
from workout_rotation.services.usage_ledger import UsageLedger

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)
RECENT = NOW - timedelta(days=3)


async def _tri_sets(session, user_id, ids):
    created = []
    for start in (0, 3, 6):
        resolved = await create_tri_set(session, user_id, focus="Mixed", exercise_ids=ids[start:start + 3])
        created.append(resolved.tri_set)
    return created


async def _choices(session, user_id, trials=40):
    ledger = UsageLedger(session, now=NOW)
    chosen = set()
    for seed in range(trials):
        picked = await select_tri_set(session, user_id, "Mixed", TriSetShape.SINGLE, ledger, random.Random(seed))
        chosen.add(picked.id)
    return chosen


@pytest.mark.asyncio
async def test_select_prefers_fresh_tri_sets(test_user, add_exercises):
    user_id = test_user[0]
    ids = await add_exercises(1, "Technique", 9, focus="Mixed")
    async with async_session_maker() as session:
        first, second, used = await _tri_sets(session, user_id, ids)
        used.last_used = RECENT
        await session.flush()
        assert await _choices(session, user_id) == {first.id, second.id}


@pytest.mark.asyncio
async def test_select_falls_back_when_too_few_fresh(test_user, add_exercises):
    user_id = test_user[0]
    ids = await add_exercises(1, "Technique", 9, focus="Mixed")
    async with async_session_maker() as session:
        fresh, used_a, used_b = await _tri_sets(session, user_id, ids)
        used_a.last_used = RECENT
        used_b.last_used = RECENT
        await session.flush()
        chosen = await _choices(session, user_id)
        assert fresh.id in chosen
        assert chosen & {used_a.id, used_b.id}


@pytest.mark.asyncio
async def test_old_usage_counts_as_fresh(test_user, add_exercises):
    user_id = test_user[0]
    ids = await add_exercises(1, "Technique", 9, focus="Mixed")
    async with async_session_maker() as session:
        first, second, old = await _tri_sets(session, user_id, ids)
        first.last_used = RECENT
        old.last_used = NOW - timedelta(days=60)
        await session.flush()
        assert await _choices(session, user_id) == {second.id, old.id}


@pytest.mark.asyncio
async def test_candidates_skip_tri_set_with_deleted_exercise(test_user, add_exercises):
    user_id = test_user[0]
    ids = await add_exercises(1, "Technique", 9, focus="Mixed")
    async with async_session_maker() as session:
        intact, broken, third = await _tri_sets(session, user_id, ids)
        await catalog.delete_exercise(session, user_id, ids[3])
        candidates = await find_candidates(session, user_id, "Mixed", TriSetShape.SINGLE)
        assert [c.id for c in candidates] == [intact.id, third.id]
        assert all(len(c.phase1) == 3 for c in candidates)
