"""Exercise catalog: owner-scoped queries, create-if-absent by name, the fixed drills, display dedupe."""

import logging
import re
from collections.abc import Iterable, Sequence

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from workout_rotation.config import settings
from workout_rotation.models.exercise import Exercise
from workout_rotation.schedule import (
    STATION3_STATIC_B,
    STATIONS,
    TRI_SET_EXERCISE_FOCUS,
    DayOfWeek,
    DayType,
    Focus,
    StaticCondition,
    plan_for,
)
from workout_rotation.services.errors import GenerationError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

# Last words ending in "s" that are not plurals
_NO_PLURAL_S = {"focus", "cross", "press", "bus", "plus", "us", "is", "as"}

# Fields the catalog edit surface may change; last_used belongs to the usage ledger
EDITABLE_FIELDS = ("name", "station", "focus", "day_type", "is_static", "static_condition")
REQUIRED_FIELDS = ("name", "station", "day_type", "is_static")


def normalize_name_key(name: str | None) -> str:
    """Display dedupe key: trimmed, lowercased, trailing plural "s" folded ("flutter kicks" == "flutter kick")."""
    key = (name or "").strip().lower()
    if not key:
        return key
    words = key.split()
    last = words[-1]
    if len(last) > 1 and last.endswith("s") and not last.endswith("ss") and last not in _NO_PLURAL_S:
        words[-1] = last[:-1]
    return " ".join(words)


def is_non_stop_sparring(name: str | None) -> bool:
    """"Non-Stop Sparring", "Nonstop sparring", "NON STOP SPARRING" all match."""
    return "nonstopsparring" in re.sub(r"[-\s]", "", (name or "").lower())


def dedupe_by_name(exercises: Iterable[Exercise]) -> list[Exercise]:
    seen: set[str] = set()
    out = []
    for ex in exercises:
        key = normalize_name_key(ex.name)
        if key in seen:
            continue
        seen.add(key)
        out.append(ex)
    return out


def _clean_name(name: str | None) -> str:
    cleaned = " ".join((name or "").split())
    if not cleaned:
        raise ValidationError("Exercise name must not be blank")
    return cleaned


def _check_station(station: int) -> int:
    if station not in STATIONS:
        raise ValidationError(f"Invalid station {station} (1, 2, or 3)")
    return station


async def find_exercises(
    session: AsyncSession,
    user_id: int,
    *,
    station: int | None = None,
    day_type: DayType | str | None = None,
    focus: Focus | str | Sequence[Focus | str] | None = None,
    exclude_ids: Iterable[int] = (),
    include_static: bool = True,
) -> list[Exercise]:
    """Owner-scoped catalog query ordered by name. Focus only narrows station 1."""
    q = select(Exercise).where(Exercise.user_id == user_id)
    if station is not None:
        q = q.where(Exercise.station == station)
    if day_type is not None:
        q = q.where(Exercise.day_type == DayType(day_type).value)
    if focus is not None and station in (None, 1):
        focus_list = [focus] if isinstance(focus, str) else list(focus)
        q = q.where(Exercise.focus.in_([Focus(f).value for f in focus_list]))
    excluded = [i for i in exclude_ids if i is not None]
    if excluded:
        q = q.where(Exercise.id.not_in(excluded))
    if not include_static:
        q = q.where(Exercise.is_static.is_(False))
    r = await session.execute(q.order_by(Exercise.name, Exercise.id))
    return list(r.scalars().all())


async def list_for_display(
    session: AsyncSession,
    user_id: int,
    *,
    station: int | None = None,
    day_type: DayType | str | None = None,
    focus: Sequence[Focus | str] | None = None,
    dedupe: bool = True,
) -> list[Exercise]:
    """Dropdown list. Stations 2 and 3 are per day type; without one there is nothing to offer."""
    if station in (2, 3) and day_type is None:
        return []
    rows = await find_exercises(session, user_id, station=station, day_type=day_type, focus=focus or None)
    return dedupe_by_name(rows) if dedupe else rows


async def get_exercise(session: AsyncSession, user_id: int, exercise_id: int) -> Exercise:
    r = await session.execute(
        select(Exercise).where(Exercise.id == exercise_id, Exercise.user_id == user_id)
    )
    ex = r.scalar_one_or_none()
    if not ex:
        raise NotFoundError("Exercise not found")
    return ex


async def get_exercises_by_ids(
    session: AsyncSession, user_id: int, exercise_ids: Iterable[int]
) -> dict[int, Exercise]:
    ids = sorted({i for i in exercise_ids if i is not None})
    if not ids:
        return {}
    r = await session.execute(
        select(Exercise).where(Exercise.user_id == user_id, Exercise.id.in_(ids))
    )
    return {ex.id: ex for ex in r.scalars().all()}


async def create_exercise(
    session: AsyncSession,
    user_id: int,
    *,
    name: str,
    station: int,
    day_type: DayType | str,
    focus: Focus | str | None = None,
    is_static: bool = False,
    static_condition: StaticCondition | str | None = None,
) -> Exercise:
    ex = Exercise(
        user_id=user_id,
        name=_clean_name(name),
        station=_check_station(station),
        day_type=DayType(day_type).value,
        focus=Focus(focus).value if focus else None,
        is_static=is_static,
        static_condition=StaticCondition(static_condition).value if static_condition else None,
    )
    session.add(ex)
    await session.flush()
    return ex


async def upsert_by_name(
    session: AsyncSession,
    user_id: int,
    name: str,
    *,
    station: int,
    day_type: DayType | str,
    focus: Focus | str | None = None,
) -> Exercise:
    """Existing exercise with this name, station and day type, or a new one. Used when a user types a name."""
    cleaned = _clean_name(name)
    _check_station(station)
    r = await session.execute(
        select(Exercise)
        .where(
            Exercise.user_id == user_id,
            Exercise.name == cleaned,
            Exercise.station == station,
            Exercise.day_type == DayType(day_type).value,
        )
        .order_by(Exercise.id)
        .limit(1)
    )
    ex = r.scalar_one_or_none()
    if ex:
        return ex
    logger.info("Catalog: creating exercise %r (station %s, %s) for user_id=%s", cleaned, station, day_type, user_id)
    return await create_exercise(
        session,
        user_id,
        name=cleaned,
        station=station,
        day_type=day_type,
        focus=focus if station == 1 else None,
    )


async def update_exercise(session: AsyncSession, user_id: int, exercise_id: int, changes: dict) -> Exercise:
    """Catalog edit. Never touches last_used."""
    ex = await get_exercise(session, user_id, exercise_id)
    for field, value in changes.items():
        if field not in EDITABLE_FIELDS:
            continue
        if value is None and field in REQUIRED_FIELDS:
            raise ValidationError(f"{field} cannot be empty")
        try:
            if field == "name":
                value = _clean_name(value)
            elif field == "station":
                value = _check_station(value)
            elif field == "day_type":
                value = DayType(value).value
            elif field == "focus":
                value = Focus(value).value if value else None
            elif field == "static_condition":
                value = StaticCondition(value).value if value else None
            elif field == "is_static":
                value = bool(value)
        except ValueError as e:
            raise ValidationError(f"Invalid {field}: {value!r}") from e
        setattr(ex, field, value)
    await session.flush()
    return ex


async def delete_exercise(session: AsyncSession, user_id: int, exercise_id: int) -> None:
    ex = await get_exercise(session, user_id, exercise_id)
    await session.delete(ex)
    await session.flush()


async def find_static(session: AsyncSession, user_id: int, day_type: DayType | str) -> Exercise | None:
    """Static Station 3 position-B drill for the day type (Kickboxing / Boxing), if the user has one."""
    condition = STATION3_STATIC_B.get(DayType(day_type))
    if condition is None:
        return None
    r = await session.execute(
        select(Exercise)
        .where(
            Exercise.user_id == user_id,
            Exercise.station == 3,
            Exercise.is_static.is_(True),
            Exercise.static_condition == condition.value,
        )
        .order_by(Exercise.id)
        .limit(1)
    )
    return r.scalar_one_or_none()


async def ensure_non_stop_sparring(session: AsyncSession, user_id: int) -> Exercise:
    """The canonical Station 3 drill for Monday, Wednesday and Saturday; created on first use."""
    r = await session.execute(
        select(Exercise)
        .where(Exercise.user_id == user_id, Exercise.station == 3)
        .order_by(Exercise.id)
    )
    for ex in r.scalars().all():
        if is_non_stop_sparring(ex.name):
            return ex
    try:
        ex = await create_exercise(
            session,
            user_id,
            name=settings.non_stop_sparring_name,
            station=3,
            day_type=DayType.TECHNIQUE,
            is_static=True,
            static_condition=StaticCondition.TECHNIQUE_STATION3,
        )
    except (SQLAlchemyError, ValidationError) as e:
        raise GenerationError(
            "Station 3 on Monday, Wednesday, and Saturday is always Non-Stop Sparring, "
            f"and it could not be created: {e}"
        ) from e
    logger.info("Catalog: created Non-Stop Sparring for user_id=%s", user_id)
    return ex


async def ensure_monday_drill(session: AsyncSession, user_id: int) -> Exercise:
    """Fixed Monday Station 1 Phase 1 drill; created on first use."""
    r = await session.execute(
        select(Exercise)
        .where(
            Exercise.user_id == user_id,
            Exercise.station == 1,
            Exercise.static_condition == StaticCondition.TECHNIQUE_STATION1_FIXED.value,
        )
        .order_by(Exercise.id)
        .limit(1)
    )
    ex = r.scalar_one_or_none()
    if ex:
        return ex
    try:
        ex = await create_exercise(
            session,
            user_id,
            name=settings.monday_fixed_drill_name,
            station=1,
            day_type=DayType.TECHNIQUE,
            focus=Focus.MIXED,
            is_static=True,
            static_condition=StaticCondition.TECHNIQUE_STATION1_FIXED,
        )
    except (SQLAlchemyError, ValidationError) as e:
        raise GenerationError(f"The fixed Monday drill could not be created: {e}") from e
    logger.info("Catalog: created fixed Monday drill for user_id=%s", user_id)
    return ex


async def station1_for_day(session: AsyncSession, user_id: int, day: DayOfWeek | str) -> list[Exercise]:
    """Exercises a Monday or Saturday tri-set may contain."""
    plan = plan_for(day)
    if plan is None or plan.tri_set_focus is None:
        raise ValidationError("Provide day_of_week: Monday or Saturday")
    return await find_exercises(
        session,
        user_id,
        station=1,
        day_type=DayType.TECHNIQUE,
        focus=TRI_SET_EXERCISE_FOCUS[plan.tri_set_focus],
        include_static=False,
    )
