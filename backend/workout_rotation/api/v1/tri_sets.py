"""Tri-set registry API."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from workout_rotation.api.deps import get_current_user
from workout_rotation.db.session import get_db
from workout_rotation.models.user import User
from workout_rotation.schedule import TriSetFocus
from workout_rotation.schemas.tri_set import TriSetCreate, TriSetResponse
from workout_rotation.services import tri_sets
from workout_rotation.services.audit import log_action
from workout_rotation.services.tri_sets import ResolvedTriSet
from workout_rotation.services.usage_ledger import as_utc

router = APIRouter(prefix="/tri-sets", tags=["tri-sets"])


def _row_to_response(resolved: ResolvedTriSet) -> dict:
    ts = resolved.tri_set
    last_used = as_utc(ts.last_used)
    return {
        "id": ts.id,
        "focus": ts.focus,
        "name": ts.name or "",
        "concept": ts.concept or "",
        "display_name": resolved.display_name,
        "exercise_ids": list(ts.exercise_ids or []),
        "phase2_exercise_ids": list(ts.phase2_exercise_ids or []),
        "phase1": [{"exercise_id": ex.id, "name": ex.name} for ex in resolved.phase1],
        "phase2": [{"exercise_id": ex.id, "name": ex.name} for ex in resolved.phase2],
        "last_used": last_used.isoformat() if last_used else None,
    }


@router.get(
    "",
    response_model=list[TriSetResponse],
    summary="List tri-sets",
    responses={401: {"description": "Not authenticated"}},
)
async def list_tri_sets(
    session: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User, Depends(get_current_user)],
    focus: TriSetFocus | None = None,
) -> list[dict]:
    rows = await tri_sets.list_tri_sets(session, user.id, focus)
    return [_row_to_response(r) for r in rows]


@router.post(
    "",
    response_model=TriSetResponse,
    status_code=201,
    summary="Create tri-set",
    responses={401: {"description": "Not authenticated"}},
)
async def create_tri_set(
    session: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User, Depends(get_current_user)],
    body: TriSetCreate,
) -> dict:
    """Register a Monday (Mixed) or Saturday (Lower) tri-set of Station 1 Technique exercises."""
    resolved = await tri_sets.create_tri_set(
        session,
        user.id,
        focus=body.focus,
        exercise_ids=body.exercise_ids,
        phase2_exercise_ids=body.phase2_exercise_ids,
        name=body.name,
        concept=body.concept,
    )
    await log_action(
        session, user_id=user.id, action="create", resource="tri_set", resource_id=str(resolved.id)
    )
    await session.commit()
    return _row_to_response(resolved)
