"""Weekly schedule endpoints: merged view and manual per-exercise edits."""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.routes.dependencies import get_current_user_id, get_optional_user_id
from app.db.database import get_db
from app.schemas.schedule import (
    WeeklyScheduleView,
    WorkoutModificationKey,
    WorkoutModificationResponse,
    WorkoutModificationUpdate,
)
from app.services.modification_tracker import ModificationTracker
from app.services.schedule_assembler import ScheduleAssembler

router = APIRouter()


@router.get("", response_model=WeeklyScheduleView)
async def get_schedule(
    user_id: int | None = Depends(get_optional_user_id),
    db: AsyncSession = Depends(get_db),
):
    """
    Get the active week's schedule.

    Anonymous callers get the default program with empty prescriptions;
    authenticated callers see their personalized and manually edited values.
    """
    return await ScheduleAssembler(db).get_weekly_schedule(user_id)


@router.patch("/workout/update", response_model=WorkoutModificationResponse)
async def update_workout(
    request: WorkoutModificationUpdate,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Record a manual sets/reps/weight edit over a personalized workout."""
    return await ModificationTracker(db).update_workout_modification(user_id, request)


@router.post("/workout/reset", response_model=WorkoutModificationResponse)
async def reset_workout(
    request: WorkoutModificationKey,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Drop the manual edit so the personalized values apply again."""
    return await ModificationTracker(db).reset_workout_modification(user_id, request)
