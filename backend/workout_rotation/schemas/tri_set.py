"""Pydantic schemas for the tri-set registry API."""

from pydantic import BaseModel, Field

from workout_rotation.schedule import TriSetFocus


class TriSetCreate(BaseModel):
    """Body for registering a tri-set. Phase 1 is three ids in A, B, C order; Phase 2 is empty or three."""

    focus: TriSetFocus
    exercise_ids: list[int]
    phase2_exercise_ids: list[int] = Field(default_factory=list)
    name: str | None = Field(None, max_length=255)
    concept: str | None = Field(None, max_length=255)


class TriSetResponse(BaseModel):
    id: int
    focus: str
    name: str
    concept: str
    display_name: str
    exercise_ids: list[int]
    phase2_exercise_ids: list[int]
    phase1: list[dict]
    phase2: list[dict]
    last_used: str | None
