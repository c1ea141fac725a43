"""Workouts API: generate a day or a week, read them back, and edit single slots or the tri-set."""

import random
from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from workout_rotation.api.deps import get_current_user, get_rng
from workout_rotation.db.session import get_db
from workout_rotation.models.user import User
from workout_rotation.models.workout import Workout
from workout_rotation.schemas.workout import (
    ApplyTriSetRequest,
    GenerateDayRequest,
    GenerateWeekRequest,
    RegenerateSlotRequest,
    ReplaceSlotRequest,
    WeekResponse,
    WorkoutLocatorFields,
    WorkoutResponse,
)
from workout_rotation.services import workout_store
from workout_rotation.services.day_assembler import assemble_day, assemble_week
from workout_rotation.services.slots import SlotAddress
from workout_rotation.services.workout_store import WorkoutLocator

router = APIRouter(prefix="/workouts", tags=["workouts"])

_AUTH_RESPONSES = {401: {"description": "Not authenticated"}}


def _slots(values: list | None) -> list[dict]:
    return [
        {"exercise_id": s.get("exercise_id"), "name": s.get("name")}
        for s in values or []
        if isinstance(s, dict)
    ]


def _row_to_response(row: Workout) -> dict:
    station1 = row.station1 or {}
    return {
        "id": row.id,
        "day_of_week": row.day_of_week,
        "day_type": row.day_type,
        "filter": row.filter,
        "week_start_date": row.week_start_date.isoformat() if row.week_start_date else None,
        "station1": {
            "phase1": _slots(station1.get("phase1")),
            "phase2": _slots(station1.get("phase2")),
        },
        "station2": _slots(row.station2),
        "station3": _slots(row.station3),
        "tri_set_id": row.tri_set_id,
    }


def _locator(workout_id: str, body: WorkoutLocatorFields) -> WorkoutLocator:
    return WorkoutLocator(
        workout_id=WorkoutLocator.parse_id(workout_id),
        week_start_date=body.week_start_date,
        day_of_week=body.day_of_week,
    )


@router.post(
    "/generate",
    response_model=WorkoutResponse,
    status_code=201,
    summary="Generate one day",
    responses=_AUTH_RESPONSES,
)
async def generate_day(
    session: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User, Depends(get_current_user)],
    rng: Annotated[random.Random, Depends(get_rng)],
    body: GenerateDayRequest,
) -> dict:
    """Assemble (or re-assemble) the workout for one day of the week."""
    workout = await assemble_day(session, user.id, body.day_of_week, body.week_start_date, rng=rng)
    await session.commit()
    await session.refresh(workout)
    return _row_to_response(workout)


@router.post(
    "/generate-week",
    response_model=WeekResponse,
    status_code=201,
    summary="Generate a whole week",
    responses=_AUTH_RESPONSES,
)
async def generate_week(
    session: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User, Depends(get_current_user)],
    rng: Annotated[random.Random, Depends(get_rng)],
    body: GenerateWeekRequest,
) -> dict:
    """Replace the week's workouts. Days that cannot be assembled are reported in `failures`."""
    result = await assemble_week(session, user.id, body.week_start_date, rng=rng)
    await session.commit()
    for w in result.workouts:
        await session.refresh(w)
    return {"items": [_row_to_response(w) for w in result.workouts], "failures": result.failures}


@router.get(
    "/week",
    response_model=list[WorkoutResponse],
    summary="Workouts of one week",
    responses=_AUTH_RESPONSES,
)
async def get_week(
    session: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User, Depends(get_current_user)],
    week_start_date: date,
) -> list[dict]:
    rows = await workout_store.list_week(session, user.id, week_start_date)
    return [_row_to_response(r) for r in rows]


@router.get(
    "",
    response_model=list[WorkoutResponse],
    summary="List workouts",
    responses=_AUTH_RESPONSES,
)
async def list_workouts(
    session: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User, Depends(get_current_user)],
) -> list[dict]:
    """All workouts of the current user, newest week first."""
    rows = await workout_store.list_all(session, user.id)
    return [_row_to_response(r) for r in rows]


@router.get(
    "/{workout_id}",
    response_model=WorkoutResponse,
    summary="Get workout",
    responses={**_AUTH_RESPONSES, 404: {"description": "Workout not found"}},
)
async def get_workout(
    session: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User, Depends(get_current_user)],
    workout_id: str,
) -> dict:
    workout = await workout_store.resolve_workout(
        session, user.id, WorkoutLocator(workout_id=WorkoutLocator.parse_id(workout_id))
    )
    return _row_to_response(workout)


@router.delete(
    "/{workout_id}",
    status_code=204,
    summary="Delete workout",
    responses={**_AUTH_RESPONSES, 404: {"description": "Workout not found"}},
)
async def delete_workout(
    session: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User, Depends(get_current_user)],
    workout_id: int,
) -> Response:
    await workout_store.delete_workout(session, user.id, workout_id)
    await session.commit()
    return Response(status_code=204)


@router.patch(
    "/{workout_id}/exercise",
    response_model=WorkoutResponse,
    summary="Replace one slot",
    responses={**_AUTH_RESPONSES, 404: {"description": "Workout not found"}},
)
async def replace_slot(
    session: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User, Depends(get_current_user)],
    workout_id: str,
    body: ReplaceSlotRequest,
) -> dict:
    """Put an exercise chosen by id, or typed by name, into one slot."""
    address = SlotAddress.parse(body.station, body.slot_index, body.phase)
    workout = await workout_store.replace_slot(
        session,
        user.id,
        _locator(workout_id, body),
        address,
        exercise_id=body.exercise_id,
        exercise_name=body.exercise_name,
    )
    await session.commit()
    await session.refresh(workout)
    return _row_to_response(workout)


@router.patch(
    "/{workout_id}/regenerate-slot",
    response_model=WorkoutResponse,
    summary="Regenerate one slot",
    responses={**_AUTH_RESPONSES, 404: {"description": "Workout not found"}},
)
async def regenerate_slot(
    session: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User, Depends(get_current_user)],
    rng: Annotated[random.Random, Depends(get_rng)],
    workout_id: str,
    body: RegenerateSlotRequest,
) -> dict:
    address = SlotAddress.parse(body.station, body.slot_index, body.phase)
    workout = await workout_store.regenerate_slot(
        session, user.id, _locator(workout_id, body), address, rng=rng
    )
    await session.commit()
    await session.refresh(workout)
    return _row_to_response(workout)


@router.patch(
    "/{workout_id}/tri-set",
    response_model=WorkoutResponse,
    summary="Apply a tri-set to Station 1",
    responses={**_AUTH_RESPONSES, 404: {"description": "Workout not found"}},
)
async def apply_tri_set(
    session: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User, Depends(get_current_user)],
    workout_id: str,
    body: ApplyTriSetRequest,
) -> dict:
    workout = await workout_store.apply_tri_set(session, user.id, _locator(workout_id, body), body.tri_set_id)
    await session.commit()
    await session.refresh(workout)
    return _row_to_response(workout)
