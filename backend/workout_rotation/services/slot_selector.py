"""Freshness-windowed random pick for station slots.

Prefer exercises not used within the freshness window; when there are fewer fresh
candidates than slots to fill, fall back to every candidate. Exclusions (ids already
placed in the day) are never relaxed. Static exercises are placed by rule, never drawn.
"""

import logging
import random
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from typing import TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from workout_rotation.models.exercise import Exercise
from workout_rotation.schedule import DayType, Focus
from workout_rotation.services.catalog import find_exercises
from workout_rotation.services.errors import ExhaustedPoolError
from workout_rotation.services.usage_ledger import UsageLedger

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class SlotCriteria:
    station: int
    day_type: DayType
    focus: Focus | None = None  # station 1 only

    def describe(self) -> str:
        parts = [f"Station {self.station}", self.day_type.value]
        if self.station == 1 and self.focus is not None:
            parts.append(self.focus.value)
        return ", ".join(parts)


def freshness_pick(
    candidates: Sequence[T],
    count: int,
    is_fresh: Callable[[T], bool],
    rng: random.Random,
) -> list[T]:
    """Shuffle the fresh subset (or all candidates when it is too small) and take `count`."""
    fresh = [c for c in candidates if is_fresh(c)]
    pool = fresh if len(fresh) >= count else list(candidates)
    rng.shuffle(pool)
    return pool[:count]


class SlotSelector:
    def __init__(self, session: AsyncSession, user_id: int, ledger: UsageLedger, rng: random.Random):
        self.session = session
        self.user_id = user_id
        self.ledger = ledger
        self.rng = rng

    async def candidates(self, criteria: SlotCriteria, exclude_ids: Iterable[int] = ()) -> list[Exercise]:
        return await find_exercises(
            self.session,
            self.user_id,
            station=criteria.station,
            day_type=criteria.day_type,
            focus=criteria.focus if criteria.station == 1 else None,
            exclude_ids=exclude_ids,
            include_static=False,
        )

    async def pick(self, criteria: SlotCriteria, count: int, exclude_ids: Iterable[int] = ()) -> list[Exercise]:
        """Up to `count` distinct exercises; fewer only when the unfiltered pool itself is smaller."""
        excluded = set(exclude_ids)
        pool = await self.candidates(criteria, excluded)
        picked = freshness_pick(pool, count, self.ledger.is_fresh, self.rng)
        logger.debug(
            "Slot select: user_id=%s [%s] want=%d pool=%d excluded=%d picked=%s",
            self.user_id, criteria.describe(), count, len(pool), len(excluded), [ex.id for ex in picked],
        )
        return picked

    async def pick_exactly(
        self, criteria: SlotCriteria, count: int, exclude_ids: Iterable[int] = ()
    ) -> list[Exercise]:
        """`count` exercises or ExhaustedPoolError naming the criteria."""
        picked = await self.pick(criteria, count, exclude_ids)
        if len(picked) < count:
            raise ExhaustedPoolError(
                f"Not enough exercises for {criteria.describe()}: need {count}, found {len(picked)}. "
                "Add more exercises in the exercise lab."
            )
        return picked

    async def pick_one(self, criteria: SlotCriteria, exclude_ids: Iterable[int] = ()) -> Exercise:
        picked = await self.pick(criteria, 1, exclude_ids)
        if not picked:
            raise ExhaustedPoolError("No alternative exercise for this slot")
        return picked[0]
