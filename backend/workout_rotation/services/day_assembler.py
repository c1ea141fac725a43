"""
Day assembler: builds one training day (Station 1 phases, Station 2, Station 3) from the
catalog and tri-set registry, following the day's structural kind, and upserts it as a
single Workout row. A week is six independent days assembled in calendar order.
"""

import logging
import random
from dataclasses import dataclass, field
from datetime import date, datetime

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from workout_rotation.models.exercise import Exercise
from workout_rotation.models.workout import Workout
from workout_rotation.schedule import (
    SLOTS_PER_GROUP,
    STATIC_POSITION,
    TRAINING_DAYS,
    DayKind,
    DayOfWeek,
    DayPlan,
    plan_for,
    week_start_for,
)
from workout_rotation.services.audit import log_action
from workout_rotation.services.catalog import ensure_monday_drill, ensure_non_stop_sparring, find_static
from workout_rotation.services.errors import ExhaustedPoolError, RotationError, ValidationError
from workout_rotation.services.slot_selector import SlotCriteria, SlotSelector
from workout_rotation.services.slots import make_slot
from workout_rotation.services.tri_sets import ResolvedTriSet, TriSetShape, mark_used, select_tri_set
from workout_rotation.services.usage_ledger import UsageLedger

logger = logging.getLogger(__name__)


@dataclass
class AssembledDay:
    """Exercises chosen for each group, before they are written to a Workout."""

    phase1: list[Exercise]
    phase2: list[Exercise]
    station2: list[Exercise]
    station3: list[Exercise]
    tri_set: ResolvedTriSet | None = None

    def exercise_ids(self) -> list[int]:
        return [ex.id for ex in [*self.phase1, *self.phase2, *self.station2, *self.station3]]


@dataclass
class WeekResult:
    workouts: list[Workout] = field(default_factory=list)
    failures: dict[str, str] = field(default_factory=dict)  # day -> reason


def require_plan(day: DayOfWeek | str) -> DayPlan:
    plan = plan_for(day)
    if plan is None:
        raise ValidationError(f"Invalid day: {day}. Workouts are generated for Sunday to Thursday and Saturday.")
    return plan


class DayAssembler:
    def __init__(self, session: AsyncSession, user_id: int, ledger: UsageLedger, rng: random.Random):
        self.session = session
        self.user_id = user_id
        self.ledger = ledger
        self.rng = rng
        self.selector = SlotSelector(session, user_id, ledger, rng)

    async def build(self, plan: DayPlan) -> AssembledDay:
        used: list[int] = []
        tri_set = None
        if plan.uses_tri_sets:
            phase1, phase2, tri_set = await self._technique_station1(plan)
        else:
            criteria = SlotCriteria(station=1, day_type=plan.day_type, focus=plan.station1_focus)
            phase1 = await self.selector.pick_exactly(criteria, SLOTS_PER_GROUP, used)
            used.extend(ex.id for ex in phase1)
            phase2 = await self.selector.pick_exactly(criteria, SLOTS_PER_GROUP, used)
        used.extend(ex.id for ex in [*phase1, *phase2])

        station2 = await self.selector.pick_exactly(
            SlotCriteria(station=2, day_type=plan.day_type), SLOTS_PER_GROUP, used
        )
        used.extend(ex.id for ex in station2)

        station3 = await self._station3(plan, used)
        return AssembledDay(phase1=phase1, phase2=phase2, station2=station2, station3=station3, tri_set=tri_set)

    async def _technique_station1(
        self, plan: DayPlan
    ) -> tuple[list[Exercise], list[Exercise], ResolvedTriSet]:
        focus = plan.tri_set_focus
        if plan.kind == DayKind.TECHNIQUE_SATURDAY:
            shapes = (TriSetShape.DUAL,)
        else:
            shapes = (TriSetShape.DUAL, TriSetShape.SINGLE)
        tri_set = None
        for shape in shapes:
            try:
                tri_set = await select_tri_set(self.session, self.user_id, focus, shape, self.ledger, self.rng)
                break
            except ExhaustedPoolError:
                continue
        if tri_set is None:
            required = "with Phase 2 " if plan.kind == DayKind.TECHNIQUE_SATURDAY else ""
            raise ExhaustedPoolError(
                f"No tri-sets {required}for {plan.day.value} ({focus.value}). Create tri-sets in the exercise lab first."
            )
        logger.info(
            "Assembler: %s uses tri-set id=%s (%s) for user_id=%s",
            plan.day.value, tri_set.id, tri_set.display_name, self.user_id,
        )
        if plan.kind == DayKind.TECHNIQUE_SATURDAY:
            return list(tri_set.phase1), list(tri_set.phase2), tri_set
        drill = await ensure_monday_drill(self.session, self.user_id)
        lead = tri_set.phase2 or tri_set.phase1
        return [drill] * SLOTS_PER_GROUP, list(lead), tri_set

    async def _station3(self, plan: DayPlan, used: list[int]) -> list[Exercise]:
        if plan.fixed_station3:
            sparring = await ensure_non_stop_sparring(self.session, self.user_id)
            return [sparring] * SLOTS_PER_GROUP
        criteria = SlotCriteria(station=3, day_type=plan.day_type)
        static = await find_static(self.session, self.user_id, plan.day_type)
        if static is None:
            return await self.selector.pick_exactly(criteria, SLOTS_PER_GROUP, used)
        others = await self.selector.pick_exactly(criteria, SLOTS_PER_GROUP - 1, [*used, static.id])
        others.insert(STATIC_POSITION, static)
        return others


async def _upsert_workout(
    session: AsyncSession, user_id: int, plan: DayPlan, week_start: date, day: AssembledDay
) -> Workout:
    r = await session.execute(
        select(Workout).where(
            Workout.user_id == user_id,
            Workout.day_of_week == plan.day.value,
            Workout.week_start_date == week_start,
        )
    )
    workout = r.scalar_one_or_none()
    if workout is None:
        workout = Workout(user_id=user_id, day_of_week=plan.day.value, week_start_date=week_start)
        session.add(workout)
    workout.day_type = plan.day_type.value
    workout.filter = plan.filter.value
    workout.station1 = {
        "phase1": [make_slot(ex) for ex in day.phase1],
        "phase2": [make_slot(ex) for ex in day.phase2],
    }
    workout.station2 = [make_slot(ex) for ex in day.station2]
    workout.station3 = [make_slot(ex) for ex in day.station3]
    workout.tri_set_id = day.tri_set.id if day.tri_set else None
    await session.flush()
    return workout


async def assemble_day(
    session: AsyncSession,
    user_id: int,
    day: DayOfWeek | str,
    week_start: date,
    *,
    rng: random.Random,
    now: datetime | None = None,
) -> Workout:
    """Generate (or regenerate) one day; the workout row and usage updates share the caller's transaction."""
    plan = require_plan(day)
    week_start = week_start_for(week_start)
    ledger = UsageLedger(session, now=now)
    assembled = await DayAssembler(session, user_id, ledger, rng).build(plan)
    workout = await _upsert_workout(session, user_id, plan, week_start, assembled)
    ledger.touch_exercises(assembled.exercise_ids())
    if assembled.tri_set is not None:
        mark_used(ledger, assembled.tri_set)
    await ledger.flush()
    await log_action(
        session,
        user_id=user_id,
        action="generate",
        resource="workout",
        resource_id=str(workout.id),
        details={
            "day_of_week": plan.day.value,
            "week_start_date": week_start.isoformat(),
            "tri_set_id": workout.tri_set_id,
        },
    )
    logger.info("Assembler: generated %s %s for user_id=%s", plan.day.value, week_start.isoformat(), user_id)
    return workout


async def assemble_week(
    session: AsyncSession,
    user_id: int,
    week_start: date,
    *,
    rng: random.Random,
    now: datetime | None = None,
) -> WeekResult:
    """Replace the week: delete its workouts, then assemble each training day in order.

    Each day runs in its own SAVEPOINT. A day that fails is rolled back, logged and reported
    in `failures`; the other days still go through.
    """
    week_start = week_start_for(week_start)
    await session.execute(
        delete(Workout).where(Workout.user_id == user_id, Workout.week_start_date == week_start)
    )
    result = WeekResult()
    for day in TRAINING_DAYS:
        try:
            async with session.begin_nested():
                workout = await assemble_day(session, user_id, day, week_start, rng=rng, now=now)
        except RotationError as e:
            logger.warning("Week generation: %s failed for user_id=%s: %s", day.value, user_id, e.message)
            result.failures[day.value] = e.message
            continue
        result.workouts.append(workout)
    return result
