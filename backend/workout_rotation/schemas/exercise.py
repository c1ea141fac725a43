"""Pydantic schemas for the exercise catalog API."""

from pydantic import BaseModel, Field

from workout_rotation.schedule import DayType, Focus, StaticCondition


class ExerciseCreate(BaseModel):
    """Body for adding an exercise to the catalog."""

    name: str = Field(..., min_length=1, max_length=512)
    station: int = Field(..., ge=1, le=3)
    day_type: DayType
    focus: Focus | None = None
    is_static: bool = False
    static_condition: StaticCondition | None = None


class ExerciseUpdate(BaseModel):
    """Body for editing an exercise (partial). Usage history is not editable."""

    name: str | None = Field(None, min_length=1, max_length=512)
    station: int | None = Field(None, ge=1, le=3)
    day_type: DayType | None = None
    focus: Focus | None = None
    is_static: bool | None = None
    static_condition: StaticCondition | None = None


class ExerciseResponse(BaseModel):
    id: int
    name: str
    station: int
    focus: str | None
    day_type: str
    is_static: bool
    static_condition: str | None
    last_used: str | None
