"""Exercise catalog API: list for dropdowns, tri-set builder options, and catalog maintenance."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from workout_rotation.api.deps import get_current_user
from workout_rotation.db.session import get_db
from workout_rotation.models.exercise import Exercise
from workout_rotation.models.user import User
from workout_rotation.schedule import DayOfWeek, DayType, Focus
from workout_rotation.schemas.exercise import ExerciseCreate, ExerciseResponse, ExerciseUpdate
from workout_rotation.services import catalog
from workout_rotation.services.audit import log_action
from workout_rotation.services.usage_ledger import as_utc

router = APIRouter(prefix="/exercises", tags=["exercises"])

_AUTH_RESPONSES = {401: {"description": "Not authenticated"}}


def _row_to_response(row: Exercise) -> dict:
    last_used = as_utc(row.last_used)
    return {
        "id": row.id,
        "name": row.name,
        "station": row.station,
        "focus": row.focus,
        "day_type": row.day_type,
        "is_static": row.is_static,
        "static_condition": row.static_condition,
        "last_used": last_used.isoformat() if last_used else None,
    }


@router.get(
    "",
    response_model=list[ExerciseResponse],
    summary="List exercises",
    responses=_AUTH_RESPONSES,
)
async def list_exercises(
    session: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User, Depends(get_current_user)],
    station: int | None = Query(default=None, ge=1, le=3),
    day_type: DayType | None = None,
    focus: Annotated[list[Focus] | None, Query()] = None,
    dedupe: bool = True,
) -> list[dict]:
    """Catalog entries for a dropdown. Stations 2 and 3 need a day_type; names are deduped by default."""
    rows = await catalog.list_for_display(
        session, user.id, station=station, day_type=day_type, focus=focus, dedupe=dedupe
    )
    return [_row_to_response(r) for r in rows]


@router.get(
    "/station1-for-day",
    response_model=list[ExerciseResponse],
    summary="Station 1 exercises a tri-set may use",
    responses=_AUTH_RESPONSES,
)
async def station1_for_day(
    session: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User, Depends(get_current_user)],
    day_of_week: DayOfWeek,
) -> list[dict]:
    """Monday: Technique Mixed or Full Body. Saturday: Technique Lower."""
    rows = await catalog.station1_for_day(session, user.id, day_of_week)
    return [_row_to_response(r) for r in rows]


@router.post(
    "",
    response_model=ExerciseResponse,
    status_code=201,
    summary="Create exercise",
    responses=_AUTH_RESPONSES,
)
async def create_exercise(
    session: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User, Depends(get_current_user)],
    body: ExerciseCreate,
) -> dict:
    ex = await catalog.create_exercise(
        session,
        user.id,
        name=body.name,
        station=body.station,
        day_type=body.day_type,
        focus=body.focus,
        is_static=body.is_static,
        static_condition=body.static_condition,
    )
    await log_action(session, user_id=user.id, action="create", resource="exercise", resource_id=str(ex.id))
    await session.commit()
    return _row_to_response(ex)


@router.get(
    "/{exercise_id}",
    response_model=ExerciseResponse,
    summary="Get exercise",
    responses={**_AUTH_RESPONSES, 404: {"description": "Exercise not found"}},
)
async def get_exercise(
    session: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User, Depends(get_current_user)],
    exercise_id: int,
) -> dict:
    ex = await catalog.get_exercise(session, user.id, exercise_id)
    return _row_to_response(ex)


@router.put(
    "/{exercise_id}",
    response_model=ExerciseResponse,
    summary="Update exercise",
    responses={**_AUTH_RESPONSES, 404: {"description": "Exercise not found"}},
)
async def update_exercise(
    session: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User, Depends(get_current_user)],
    exercise_id: int,
    body: ExerciseUpdate,
) -> dict:
    """Edit catalog fields. Usage history (last_used) is left as it was."""
    changes = body.model_dump(exclude_unset=True)
    ex = await catalog.update_exercise(session, user.id, exercise_id, changes)
    await log_action(
        session,
        user_id=user.id,
        action="update",
        resource="exercise",
        resource_id=str(ex.id),
        details={"fields": sorted(changes)},
    )
    await session.commit()
    await session.refresh(ex)
    return _row_to_response(ex)


@router.delete(
    "/{exercise_id}",
    status_code=204,
    summary="Delete exercise",
    responses={**_AUTH_RESPONSES, 404: {"description": "Exercise not found"}},
)
async def delete_exercise(
    session: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User, Depends(get_current_user)],
    exercise_id: int,
) -> Response:
    """Workouts keep their name snapshot of the deleted exercise."""
    await catalog.delete_exercise(session, user.id, exercise_id)
    await log_action(session, user_id=user.id, action="delete", resource="exercise", resource_id=str(exercise_id))
    await session.commit()
    return Response(status_code=204)
