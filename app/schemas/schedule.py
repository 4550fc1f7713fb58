"""Schemas for the weekly schedule view and manual workout edits."""
from datetime import date

from pydantic import BaseModel, Field, field_validator

from app.config.weekly_plan import WEEKDAY_ORDER
from app.models.enums import ModificationType, WeightUnit


class WeightView(BaseModel):
    value: float
    unit: str | None = None


class ScheduledWorkout(BaseModel):
    workout_id: int
    name: str
    category: str
    type: str
    sets: int | None = None
    reps: int | None = None
    weight: WeightView | None = None
    is_modified: bool = False
    modification_type: ModificationType | None = None


class ScheduleDay(BaseModel):
    day: str
    category: str
    workouts: list[ScheduledWorkout]


class WeeklyScheduleView(BaseModel):
    program_id: int
    program_start: date
    expires_on: date
    user_name: str | None = None
    schedule: list[ScheduleDay]


class WorkoutModificationKey(BaseModel):
    """Identifies one personalized row of the caller's schedule."""
    program_id: int
    workout_id: int
    day: str

    @field_validator("day")
    @classmethod
    def validate_day(cls, v: str) -> str:
        if v not in WEEKDAY_ORDER:
            raise ValueError(f"day must be one of: {', '.join(WEEKDAY_ORDER)}")
        return v


class WorkoutModificationUpdate(WorkoutModificationKey):
    sets: int | None = Field(default=None, ge=1, le=20)
    reps: int | None = Field(default=None, ge=1, le=100)
    weight_value: float | None = Field(default=None, ge=0)
    weight_unit: WeightUnit | None = None


class WorkoutModificationResponse(BaseModel):
    message: str
    modification_type: ModificationType | None = None
    workout: ScheduledWorkout | None = None
