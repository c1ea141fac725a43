"""TriSet registry: linked Station 1 groups for Monday (Mixed) and Saturday (Lower)."""

import enum
import logging
import random
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from workout_rotation.config import settings
from workout_rotation.models.exercise import Exercise
from workout_rotation.models.tri_set import TriSet
from workout_rotation.schedule import SLOTS_PER_GROUP, TRI_SET_EXERCISE_FOCUS, DayType, TriSetFocus
from workout_rotation.services.catalog import get_exercises_by_ids
from workout_rotation.services.errors import ExhaustedPoolError, NotFoundError, ValidationError
from workout_rotation.services.usage_ledger import UsageLedger

logger = logging.getLogger(__name__)


class TriSetShape(str, enum.Enum):
    SINGLE = "single"  # Phase 1 only
    DUAL = "dual"      # Phase 1 + Phase 2
    ANY = "any"


@dataclass
class ResolvedTriSet:
    """TriSet with both phases resolved to exercises, in A/B/C order."""

    tri_set: TriSet
    phase1: list[Exercise]
    phase2: list[Exercise]

    @property
    def id(self) -> int:
        return self.tri_set.id

    @property
    def display_name(self) -> str:
        return display_name(self.tri_set, self.phase1)


def display_name(tri_set: TriSet, phase1: Sequence[Exercise] = ()) -> str:
    if (tri_set.concept or "").strip():
        return tri_set.concept.strip()
    if (tri_set.name or "").strip():
        return tri_set.name.strip()
    names = [ex.name for ex in phase1 if ex is not None and ex.name]
    return " → ".join(names) if names else "Tri-set"


def matches_shape(tri_set: TriSet, shape: TriSetShape) -> bool:
    if len(tri_set.exercise_ids or []) != SLOTS_PER_GROUP:
        return False
    phase2 = tri_set.phase2_exercise_ids or []
    if shape == TriSetShape.DUAL:
        return len(phase2) == SLOTS_PER_GROUP
    if shape == TriSetShape.SINGLE:
        return len(phase2) == 0
    return len(phase2) in (0, SLOTS_PER_GROUP)


def _check_group(ids: Sequence[int] | None, label: str, allow_empty: bool) -> list[int]:
    ids = list(ids or [])
    if allow_empty and not ids:
        return []
    if len(ids) != SLOTS_PER_GROUP:
        raise ValidationError(f"{label} must have exactly 3 exercises in grid order (A, B, C)")
    if len(set(ids)) != len(ids):
        raise ValidationError(f"{label} must not repeat an exercise")
    return ids


async def create_tri_set(
    session: AsyncSession,
    user_id: int,
    *,
    focus: TriSetFocus | str,
    exercise_ids: Sequence[int],
    phase2_exercise_ids: Sequence[int] | None = None,
    name: str | None = None,
    concept: str | None = None,
) -> ResolvedTriSet:
    """Register a tri-set; every exercise must be Station 1, Technique, owned, and of the focus the tag allows."""
    try:
        tag = TriSetFocus(focus)
    except ValueError:
        raise ValidationError("Tri-set focus must be Mixed or Lower")
    phase1_ids = _check_group(exercise_ids, "Phase 1", allow_empty=False)
    phase2_ids = _check_group(phase2_exercise_ids, "Phase 2", allow_empty=True)
    if set(phase1_ids) & set(phase2_ids):
        raise ValidationError("Phase 1 and Phase 2 must not share exercises")

    by_id = await get_exercises_by_ids(session, user_id, [*phase1_ids, *phase2_ids])
    allowed_focus = {f.value for f in TRI_SET_EXERCISE_FOCUS[tag]}
    for ex_id in [*phase1_ids, *phase2_ids]:
        ex = by_id.get(ex_id)
        if ex is None:
            raise ValidationError("All exercises must exist and belong to you")
        if ex.station != 1 or ex.day_type != DayType.TECHNIQUE.value:
            raise ValidationError(
                f'Exercise "{ex.name}" must be Station 1, Technique (found Station {ex.station}, {ex.day_type})'
            )
        if ex.focus not in allowed_focus:
            raise ValidationError(
                f'Exercise "{ex.name}" must have focus {" or ".join(sorted(allowed_focus))} '
                f"for a {tag.value} tri-set (found {ex.focus})"
            )

    tri_set = TriSet(
        user_id=user_id,
        day_type=DayType.TECHNIQUE.value,
        focus=tag.value,
        name=(name or "").strip(),
        concept=(concept or "").strip(),
        exercise_ids=phase1_ids,
        phase2_exercise_ids=phase2_ids,
    )
    session.add(tri_set)
    await session.flush()
    return ResolvedTriSet(
        tri_set=tri_set,
        phase1=[by_id[i] for i in phase1_ids],
        phase2=[by_id[i] for i in phase2_ids],
    )


async def resolve(session: AsyncSession, user_id: int, tri_set: TriSet) -> ResolvedTriSet:
    """Load both phases. Raises NotFoundError if a referenced exercise has since been deleted."""
    by_id = await get_exercises_by_ids(
        session, user_id, [*(tri_set.exercise_ids or []), *(tri_set.phase2_exercise_ids or [])]
    )
    try:
        phase1 = [by_id[i] for i in tri_set.exercise_ids or []]
        phase2 = [by_id[i] for i in tri_set.phase2_exercise_ids or []]
    except KeyError:
        raise NotFoundError(f"Tri-set {display_name(tri_set)!r} references a deleted exercise")
    return ResolvedTriSet(tri_set=tri_set, phase1=phase1, phase2=phase2)


async def get_tri_set(session: AsyncSession, user_id: int, tri_set_id: int) -> TriSet:
    r = await session.execute(select(TriSet).where(TriSet.id == tri_set_id, TriSet.user_id == user_id))
    tri_set = r.scalar_one_or_none()
    if not tri_set:
        raise NotFoundError("Tri-set not found")
    return tri_set


async def list_tri_sets(
    session: AsyncSession, user_id: int, focus: TriSetFocus | str | None = None
) -> list[ResolvedTriSet]:
    q = select(TriSet).where(TriSet.user_id == user_id)
    if focus is not None:
        q = q.where(TriSet.focus == TriSetFocus(focus).value)
    r = await session.execute(q.order_by(TriSet.name, TriSet.id))
    rows = list(r.scalars().all())
    by_id = await get_exercises_by_ids(
        session,
        user_id,
        [i for ts in rows for i in [*(ts.exercise_ids or []), *(ts.phase2_exercise_ids or [])]],
    )
    return [
        ResolvedTriSet(
            tri_set=ts,
            phase1=[by_id[i] for i in ts.exercise_ids or [] if i in by_id],
            phase2=[by_id[i] for i in ts.phase2_exercise_ids or [] if i in by_id],
        )
        for ts in rows
    ]


async def find_candidates(
    session: AsyncSession,
    user_id: int,
    focus: TriSetFocus | str,
    shape: TriSetShape = TriSetShape.ANY,
    exclude_ids: Iterable[int] = (),
) -> list[ResolvedTriSet]:
    """Tri-sets of the focus tag with the requested shape whose exercises all still exist."""
    q = select(TriSet).where(
        TriSet.user_id == user_id,
        TriSet.day_type == DayType.TECHNIQUE.value,
        TriSet.focus == TriSetFocus(focus).value,
    )
    excluded = [i for i in exclude_ids if i is not None]
    if excluded:
        q = q.where(TriSet.id.not_in(excluded))
    r = await session.execute(q.order_by(TriSet.id))
    rows = [ts for ts in r.scalars().all() if matches_shape(ts, shape)]
    by_id = await get_exercises_by_ids(
        session,
        user_id,
        [i for ts in rows for i in [*(ts.exercise_ids or []), *(ts.phase2_exercise_ids or [])]],
    )
    candidates = []
    for ts in rows:
        ids = [*(ts.exercise_ids or []), *(ts.phase2_exercise_ids or [])]
        if any(i not in by_id for i in ids):
            logger.info("Tri-set id=%s skipped: references a deleted exercise", ts.id)
            continue
        candidates.append(
            ResolvedTriSet(
                tri_set=ts,
                phase1=[by_id[i] for i in ts.exercise_ids or []],
                phase2=[by_id[i] for i in ts.phase2_exercise_ids or []],
            )
        )
    return candidates


async def select_tri_set(
    session: AsyncSession,
    user_id: int,
    focus: TriSetFocus | str,
    shape: TriSetShape,
    ledger: UsageLedger,
    rng: random.Random,
    exclude_ids: Iterable[int] = (),
) -> ResolvedTriSet:
    """Random fresh tri-set; with fewer than `tri_set_fallback_threshold` fresh ones, any tri-set of the shape."""
    candidates = await find_candidates(session, user_id, focus, shape, exclude_ids)
    if not candidates:
        raise ExhaustedPoolError(
            f"No {TriSetFocus(focus).value} tri-sets ({shape.value} phase) available. "
            "Create tri-sets in the exercise lab first."
        )
    fresh = [c for c in candidates if ledger.is_fresh(c.tri_set)]
    pool = fresh if len(fresh) >= settings.tri_set_fallback_threshold else candidates
    chosen = rng.choice(pool)
    logger.debug(
        "Tri-set select: user_id=%s focus=%s shape=%s chose id=%s from %d (fresh %d)",
        user_id, TriSetFocus(focus).value, shape.value, chosen.id, len(pool), len(fresh),
    )
    return chosen


def mark_used(ledger: UsageLedger, tri_set: ResolvedTriSet | TriSet) -> None:
    ledger.touch_tri_set(tri_set.id)
