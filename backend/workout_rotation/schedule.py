"""Weekly template: day types, filters, focus tags and the per-day structural rules.

Each configured weekday maps to a DayPlan whose `kind` decides how Station 1 and
Station 3 are filled. Code downstream branches on the kind, not on day names.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import date, timedelta


class DayOfWeek(str, enum.Enum):
    SUNDAY = "Sunday"
    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"
    SATURDAY = "Saturday"

    @property
    def offset(self) -> int:
        """Days after the Sunday that starts the week."""
        return _DAY_ORDER.index(self)


_DAY_ORDER = list(DayOfWeek)


class DayType(str, enum.Enum):
    KICKBOXING = "Kickboxing"
    BOXING = "Boxing"
    TECHNIQUE = "Technique"
    CONDITIONING = "Conditioning"


class WorkoutFilter(str, enum.Enum):
    UPPER_BODY = "Upper Body"
    LOWER_BODY = "Lower Body"
    MIXED_FULL_BODY = "Mixed/Full Body"
    FULL_BODY = "Full Body"
    CARDIO = "Cardio"
    ABS = "Abs"


class Focus(str, enum.Enum):
    UPPER = "Upper"
    LOWER = "Lower"
    MIXED = "Mixed"
    FULL_BODY = "Full Body"
    CARDIO = "Cardio"
    ABS = "Abs"


class StaticCondition(str, enum.Enum):
    KICKBOXING_STATION3_B = "kickboxing-station3-b"
    BOXING_STATION3_B = "boxing-station3-b"
    TECHNIQUE_STATION3 = "technique-station3"
    CONDITIONING_STATION3 = "conditioning-station3"
    TECHNIQUE_STATION1_FIXED = "technique-station1-fixed"


class TriSetFocus(str, enum.Enum):
    MIXED = "Mixed"  # Monday
    LOWER = "Lower"  # Saturday


class DayKind(str, enum.Enum):
    RANDOM_STATIONS = "random_stations"
    FIXED_DRILL = "fixed_drill"  # random Station 1/2, Non-Stop Sparring at Station 3
    TECHNIQUE_MONDAY = "technique_monday"
    TECHNIQUE_SATURDAY = "technique_saturday"


STATIONS = (1, 2, 3)
SLOTS_PER_GROUP = 3

# Tri-set exercise focus allowed per tri-set focus tag
TRI_SET_EXERCISE_FOCUS: dict[TriSetFocus, tuple[Focus, ...]] = {
    TriSetFocus.MIXED: (Focus.MIXED, Focus.FULL_BODY),
    TriSetFocus.LOWER: (Focus.LOWER,),
}

# Static Station 3 position-B drill per day type
STATION3_STATIC_B: dict[DayType, StaticCondition] = {
    DayType.KICKBOXING: StaticCondition.KICKBOXING_STATION3_B,
    DayType.BOXING: StaticCondition.BOXING_STATION3_B,
}
STATIC_POSITION = 1

_PASS_THROUGH_FOCUS = {
    WorkoutFilter.FULL_BODY: Focus.FULL_BODY,
    WorkoutFilter.CARDIO: Focus.CARDIO,
    WorkoutFilter.ABS: Focus.ABS,
}


def focus_for_filter(workout_filter: WorkoutFilter | str) -> Focus:
    """Station 1 focus tag for a day's overall filter."""
    wf = WorkoutFilter(workout_filter)
    if wf == WorkoutFilter.UPPER_BODY:
        return Focus.UPPER
    if wf == WorkoutFilter.LOWER_BODY:
        return Focus.LOWER
    return _PASS_THROUGH_FOCUS.get(wf, Focus.MIXED)


@dataclass(frozen=True)
class DayPlan:
    day: DayOfWeek
    day_type: DayType
    filter: WorkoutFilter
    kind: DayKind

    @property
    def station1_focus(self) -> Focus:
        return focus_for_filter(self.filter)

    @property
    def uses_tri_sets(self) -> bool:
        return self.kind in (DayKind.TECHNIQUE_MONDAY, DayKind.TECHNIQUE_SATURDAY)

    @property
    def fixed_station3(self) -> bool:
        return self.kind != DayKind.RANDOM_STATIONS

    @property
    def tri_set_focus(self) -> TriSetFocus | None:
        if self.kind == DayKind.TECHNIQUE_MONDAY:
            return TriSetFocus.MIXED
        if self.kind == DayKind.TECHNIQUE_SATURDAY:
            return TriSetFocus.LOWER
        return None

    @property
    def replicated_phase1(self) -> bool:
        """Monday Station 1 Phase 1 holds the fixed drill three times."""
        return self.kind == DayKind.TECHNIQUE_MONDAY


def _plan(day: DayOfWeek, day_type: DayType, wf: WorkoutFilter, kind: DayKind) -> DayPlan:
    return DayPlan(day=day, day_type=day_type, filter=wf, kind=kind)


DAY_PLANS: dict[DayOfWeek, DayPlan] = {
    DayOfWeek.SUNDAY: _plan(DayOfWeek.SUNDAY, DayType.KICKBOXING, WorkoutFilter.UPPER_BODY, DayKind.RANDOM_STATIONS),
    DayOfWeek.MONDAY: _plan(DayOfWeek.MONDAY, DayType.TECHNIQUE, WorkoutFilter.MIXED_FULL_BODY, DayKind.TECHNIQUE_MONDAY),
    DayOfWeek.TUESDAY: _plan(DayOfWeek.TUESDAY, DayType.BOXING, WorkoutFilter.UPPER_BODY, DayKind.RANDOM_STATIONS),
    DayOfWeek.WEDNESDAY: _plan(DayOfWeek.WEDNESDAY, DayType.CONDITIONING, WorkoutFilter.LOWER_BODY, DayKind.FIXED_DRILL),
    DayOfWeek.THURSDAY: _plan(DayOfWeek.THURSDAY, DayType.KICKBOXING, WorkoutFilter.MIXED_FULL_BODY, DayKind.RANDOM_STATIONS),
    DayOfWeek.SATURDAY: _plan(DayOfWeek.SATURDAY, DayType.TECHNIQUE, WorkoutFilter.LOWER_BODY, DayKind.TECHNIQUE_SATURDAY),
}

TRAINING_DAYS: tuple[DayOfWeek, ...] = tuple(d for d in _DAY_ORDER if d in DAY_PLANS)


def plan_for(day: DayOfWeek | str) -> DayPlan | None:
    """DayPlan for a weekday, or None for a day with no configuration (Friday)."""
    try:
        return DAY_PLANS.get(DayOfWeek(day))
    except ValueError:
        return None


def week_start_for(d: date) -> date:
    """Sunday on or before d."""
    return d - timedelta(days=(d.weekday() + 1) % 7)


def day_sort_key(day: DayOfWeek | str) -> int:
    return DayOfWeek(day).offset
