"""
Workout store: lookup by id or (week, day), and slot-level edits that keep the
assembly invariants (no repeats within a day, protected Station 3, tri-set linkage).
Every edit rewrites whole JSON columns on the one row, so a reader never sees half a change.
"""

import logging
import random
from dataclasses import dataclass
from datetime import date, datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from workout_rotation.models.workout import Workout
from workout_rotation.schedule import (
    SLOTS_PER_GROUP,
    DayKind,
    DayOfWeek,
    DayPlan,
    DayType,
    TriSetFocus,
    day_sort_key,
    focus_for_filter,
    plan_for,
    week_start_for,
)
from workout_rotation.services import catalog
from workout_rotation.services.audit import log_action
from workout_rotation.services.errors import (
    BusinessRuleViolation,
    NotFoundError,
    OwnershipError,
    ValidationError,
)
from workout_rotation.services.slot_selector import SlotCriteria, SlotSelector
from workout_rotation.services.slots import (
    SlotAddress,
    make_slot,
    other_slot_ids,
    workout_exercise_ids,
    write_slot,
)
from workout_rotation.services.tri_sets import get_tri_set, mark_used, resolve
from workout_rotation.services.usage_ledger import UsageLedger

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "Workout not found. Try refreshing the week."
PROTECTED_STATION3_MESSAGE = "Station 3 on Monday, Wednesday, and Saturday is always Non-Stop Sparring"


@dataclass(frozen=True)
class WorkoutLocator:
    """Direct id, or the (week, day) pair a client knows before it has the id."""

    workout_id: int | None = None
    week_start_date: date | None = None
    day_of_week: DayOfWeek | None = None

    @staticmethod
    def parse_id(raw: str | int | None) -> int | None:
        """Path ids like "undefined" or "" mean "unknown"; fall through to week + day."""
        if raw is None:
            return None
        text = str(raw).strip()
        if not text.isdigit():
            return None
        value = int(text)
        return value if value > 0 else None


async def resolve_workout(session: AsyncSession, user_id: int, locator: WorkoutLocator) -> Workout:
    workout = None
    if locator.workout_id is not None:
        workout = await session.get(Workout, locator.workout_id)
    if workout is None and locator.week_start_date is not None and locator.day_of_week is not None:
        r = await session.execute(
            select(Workout).where(
                Workout.user_id == user_id,
                Workout.day_of_week == DayOfWeek(locator.day_of_week).value,
                Workout.week_start_date == week_start_for(locator.week_start_date),
            )
        )
        workout = r.scalar_one_or_none()
    if workout is None:
        raise NotFoundError(NOT_FOUND_MESSAGE)
    if workout.user_id != user_id:
        raise OwnershipError("You don't have access to this workout. Try logging in again.")
    return workout


async def get_workout(session: AsyncSession, user_id: int, workout_id: int) -> Workout:
    return await resolve_workout(session, user_id, WorkoutLocator(workout_id=workout_id))


async def list_week(session: AsyncSession, user_id: int, week_start: date) -> list[Workout]:
    r = await session.execute(
        select(Workout).where(
            Workout.user_id == user_id,
            Workout.week_start_date == week_start_for(week_start),
        )
    )
    return sorted(r.scalars().all(), key=lambda w: day_sort_key(w.day_of_week))


async def list_all(session: AsyncSession, user_id: int) -> list[Workout]:
    r = await session.execute(select(Workout).where(Workout.user_id == user_id))
    return sorted(
        r.scalars().all(),
        key=lambda w: (-w.week_start_date.toordinal(), day_sort_key(w.day_of_week)),
    )


async def delete_workout(session: AsyncSession, user_id: int, workout_id: int) -> None:
    workout = await get_workout(session, user_id, workout_id)
    await log_action(session, user_id=user_id, action="delete", resource="workout", resource_id=str(workout.id))
    await session.delete(workout)
    await session.flush()


def _plan(workout: Workout) -> DayPlan:
    plan = plan_for(workout.day_of_week)
    if plan is None:
        raise ValidationError(f"Workout {workout.id} has no day configuration ({workout.day_of_week})")
    return plan


def _guard_protected(plan: DayPlan, address: SlotAddress) -> None:
    if address.station == 3 and plan.fixed_station3:
        logger.info("Store: refused edit of %s on %s (protected)", address.label(), plan.day.value)
        raise BusinessRuleViolation(PROTECTED_STATION3_MESSAGE)


def _criteria(workout: Workout, address: SlotAddress) -> SlotCriteria:
    day_type = DayType(workout.day_type)
    if address.station == 1:
        return SlotCriteria(station=1, day_type=day_type, focus=focus_for_filter(workout.filter))
    return SlotCriteria(station=address.station, day_type=day_type)


async def replace_slot(
    session: AsyncSession,
    user_id: int,
    locator: WorkoutLocator,
    address: SlotAddress,
    *,
    exercise_id: int | None = None,
    exercise_name: str | None = None,
    now: datetime | None = None,
) -> Workout:
    """Put a chosen exercise (by id, or by typed name, created if new) into one slot."""
    if exercise_id is None and not (exercise_name or "").strip():
        raise ValidationError("Provide exercise_id or exercise_name")
    workout = await resolve_workout(session, user_id, locator)
    plan = _plan(workout)
    _guard_protected(plan, address)

    if exercise_id is not None:
        ex = await catalog.get_exercise(session, user_id, exercise_id)
    else:
        ex = await catalog.upsert_by_name(
            session,
            user_id,
            exercise_name,
            station=address.station,
            day_type=workout.day_type,
            focus=focus_for_filter(workout.filter) if address.station == 1 else None,
        )
    if ex.id in other_slot_ids(workout, address, plan):
        logger.info("Store: refused %r in %s, already in workout id=%s", ex.name, address.label(), workout.id)
        raise BusinessRuleViolation(f'"{ex.name}" is already used elsewhere in this workout')

    write_slot(workout, address, ex)
    ledger = UsageLedger(session, now=now)
    ledger.touch_exercises([ex.id])
    await ledger.flush()
    await log_action(
        session,
        user_id=user_id,
        action="update",
        resource="workout",
        resource_id=str(workout.id),
        details={"slot": address.label(), "exercise_id": ex.id},
    )
    await session.flush()
    return workout


async def regenerate_slot(
    session: AsyncSession,
    user_id: int,
    locator: WorkoutLocator,
    address: SlotAddress,
    *,
    rng: random.Random,
    now: datetime | None = None,
) -> Workout:
    """Draw a new exercise for one slot with the same criteria assembly used; never one already in the day."""
    workout = await resolve_workout(session, user_id, locator)
    plan = _plan(workout)
    _guard_protected(plan, address)
    if address.station == 1 and plan.uses_tri_sets:
        raise BusinessRuleViolation(
            f"Station 1 on {plan.day.value} comes from a tri-set; choose a different tri-set instead"
        )

    exclude = set(workout_exercise_ids(workout))
    ledger = UsageLedger(session, now=now)
    selector = SlotSelector(session, user_id, ledger, rng)
    ex = await selector.pick_one(_criteria(workout, address), exclude)

    write_slot(workout, address, ex)
    ledger.touch_exercises([ex.id])
    await ledger.flush()
    await log_action(
        session,
        user_id=user_id,
        action="regenerate",
        resource="workout",
        resource_id=str(workout.id),
        details={"slot": address.label(), "exercise_id": ex.id},
    )
    await session.flush()
    return workout


async def apply_tri_set(
    session: AsyncSession,
    user_id: int,
    locator: WorkoutLocator,
    tri_set_id: int,
    *,
    now: datetime | None = None,
) -> Workout:
    """Overwrite Monday/Saturday Station 1 with a tri-set's phases in one write."""
    workout = await resolve_workout(session, user_id, locator)
    plan = _plan(workout)
    if not plan.uses_tri_sets:
        raise BusinessRuleViolation("Tri-sets apply only to Monday and Saturday workouts")
    tri_set = await get_tri_set(session, user_id, tri_set_id)
    if tri_set.focus != plan.tri_set_focus.value:
        raise BusinessRuleViolation(
            f"{plan.day.value} needs a {plan.tri_set_focus.value} tri-set (this one is {tri_set.focus})"
        )
    if len(tri_set.exercise_ids or []) != SLOTS_PER_GROUP:
        raise BusinessRuleViolation("Tri-set must have exactly 3 exercises in Phase 1")
    if plan.kind == DayKind.TECHNIQUE_SATURDAY and not tri_set.is_dual_phase:
        raise BusinessRuleViolation("Tri-set must have Phase 2 for Saturday")
    resolved = await resolve(session, user_id, tri_set)

    placed = {ex.id for ex in [*resolved.phase1, *resolved.phase2]}
    station2_3_ids = {s.get("exercise_id") for s in [*(workout.station2 or []), *(workout.station3 or [])]}
    clash = placed & station2_3_ids
    if clash:
        raise BusinessRuleViolation("Tri-set shares an exercise with Station 2 or Station 3 of this workout")

    workout.station1 = {
        "phase1": [make_slot(ex) for ex in resolved.phase1],
        "phase2": [make_slot(ex) for ex in resolved.phase2],
    }
    workout.tri_set_id = tri_set.id

    ledger = UsageLedger(session, now=now)
    ledger.touch_exercises(placed)
    mark_used(ledger, resolved)
    await ledger.flush()
    await log_action(
        session,
        user_id=user_id,
        action="apply_tri_set",
        resource="workout",
        resource_id=str(workout.id),
        details={"tri_set_id": tri_set.id, "focus": TriSetFocus(tri_set.focus).value},
    )
    await session.flush()
    logger.info("Store: applied tri-set id=%s to %s workout id=%s", tri_set.id, plan.day.value, workout.id)
    return workout
