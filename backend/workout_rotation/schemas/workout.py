"""Pydantic schemas for workout generation and slot edits."""

from datetime import date

from pydantic import BaseModel, Field

from workout_rotation.schedule import DayOfWeek


class GenerateDayRequest(BaseModel):
    day_of_week: str
    week_start_date: date


class GenerateWeekRequest(BaseModel):
    week_start_date: date


class WorkoutLocatorFields(BaseModel):
    """Fallback lookup when the path id is unknown to the client."""

    week_start_date: date | None = None
    day_of_week: DayOfWeek | None = None


class SlotFields(WorkoutLocatorFields):
    station: int
    slot_index: int
    phase: int | None = None  # station 1 only; defaults to 1


class ReplaceSlotRequest(SlotFields):
    """Replace one slot with an existing exercise (by id) or a typed name (created if new)."""

    exercise_id: int | None = None
    exercise_name: str | None = Field(None, max_length=512)


class RegenerateSlotRequest(SlotFields):
    pass


class ApplyTriSetRequest(WorkoutLocatorFields):
    tri_set_id: int


class SlotResponse(BaseModel):
    exercise_id: int | None
    name: str | None


class WorkoutResponse(BaseModel):
    """Single generated workout as returned by the API."""

    id: int
    day_of_week: str
    day_type: str
    filter: str
    week_start_date: str
    station1: dict[str, list[SlotResponse]]
    station2: list[SlotResponse]
    station3: list[SlotResponse]
    tri_set_id: int | None


class WeekResponse(BaseModel):
    items: list[WorkoutResponse]
    failures: dict[str, str] = Field(default_factory=dict)
