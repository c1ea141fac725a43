"""Usage ledger: the only reader/writer of `last_used` on exercises and tri-sets.

Selection code asks the ledger whether an item is fresh; assembly and slot edits
stage touches on it and flush them in the same transaction as the workout write.
"""

import logging
from collections.abc import Iterable
from datetime import datetime, timedelta, timezone

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from workout_rotation.config import settings
from workout_rotation.models.exercise import Exercise
from workout_rotation.models.tri_set import TriSet

logger = logging.getLogger(__name__)


def as_utc(value: datetime | None) -> datetime | None:
    """Attach UTC to naive timestamps (SQLite returns them without tzinfo)."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UsageLedger:
    def __init__(self, session: AsyncSession, now: datetime | None = None, window_days: int | None = None):
        self.session = session
        self.now = as_utc(now) or utcnow()
        self.window = timedelta(days=window_days if window_days is not None else settings.freshness_window_days)
        self._exercise_ids: set[int] = set()
        self._tri_set_ids: set[int] = set()

    @property
    def cutoff(self) -> datetime:
        return self.now - self.window

    def is_fresh(self, item: Exercise | TriSet) -> bool:
        """Never used, or last used strictly before the lookback window."""
        last = as_utc(item.last_used)
        return last is None or last < self.cutoff

    def touch_exercises(self, exercise_ids: Iterable[int | None]) -> None:
        self._exercise_ids.update(i for i in exercise_ids if i is not None)

    def touch_tri_set(self, tri_set_id: int | None) -> None:
        if tri_set_id is not None:
            self._tri_set_ids.add(tri_set_id)

    async def flush(self) -> None:
        """Apply staged touches; committed together with whatever else the session holds."""
        if self._exercise_ids:
            await self.session.execute(
                update(Exercise)
                .where(Exercise.id.in_(sorted(self._exercise_ids)))
                .values(last_used=self.now)
                .execution_options(synchronize_session="fetch")
            )
        if self._tri_set_ids:
            await self.session.execute(
                update(TriSet)
                .where(TriSet.id.in_(sorted(self._tri_set_ids)))
                .values(last_used=self.now)
                .execution_options(synchronize_session="fetch")
            )
        logger.debug(
            "Usage ledger: touched %d exercise(s), %d tri-set(s)",
            len(self._exercise_ids),
            len(self._tri_set_ids),
        )
        self._exercise_ids.clear()
        self._tri_set_ids.clear()
