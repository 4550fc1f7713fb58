"""
ScheduleAssembler - Builds the weekly view from the default program and a user's overrides.

Every prescription field goes through one precedence chain:
baseline (default program, no values) -> personalized -> manually modified.
The latest layer holding a non-null value wins.
"""

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from app.config.weekly_plan import WEEKLY_WORKOUT_PLAN
from app.models.enums import ModificationType, WorkoutType
from app.models.program import UserProgramSchedule
from app.models.user import User
from app.repositories.program_repository import ProgramRepository
from app.repositories.user_schedule_repository import UserScheduleRepository
from app.schemas.schedule import ScheduleDay, ScheduledWorkout, WeeklyScheduleView, WeightView
from app.services.base import BaseService
from app.services.program_generator import ProgramGenerator


@dataclass(frozen=True)
class ResolvedPrescription:
    sets: int | None = None
    reps: int | None = None
    weight_value: float | None = None
    weight_unit: str | None = None
    is_modified: bool = False
    modification_type: str | None = None

    @property
    def weight(self) -> WeightView | None:
        if self.weight_value is None:
            return None
        return WeightView(value=self.weight_value, unit=self.weight_unit)


def latest_non_null(*layers):
    """Value of the last layer that is not None."""
    for value in reversed(layers):
        if value is not None:
            return value
    return None


def resolve_prescription(override: UserProgramSchedule | None) -> ResolvedPrescription:
    """Collapse the baseline/personalized/manual layers of one row."""
    if override is None:
        return ResolvedPrescription()

    manual = bool(override.is_modified)
    manual_sets = override.sets_modified if manual else None
    manual_reps = override.reps_modified if manual else None
    manual_weight = override.weight_modified if manual else None

    if manual_weight is not None:
        weight_value = manual_weight
        weight_unit = latest_non_null(override.weight_unit, override.weight_unit_modified)
    else:
        weight_value = override.weight_value
        weight_unit = override.weight_unit

    return ResolvedPrescription(
        sets=latest_non_null(None, override.sets, manual_sets),
        reps=latest_non_null(None, override.reps, manual_reps),
        weight_value=weight_value,
        weight_unit=weight_unit,
        is_modified=manual,
        modification_type=override.modification_type if manual else None,
    )


def compound_first(rows: list) -> list:
    """Stable sort putting Compound rows ahead of every other type."""
    return sorted(rows, key=lambda row: row.type != WorkoutType.COMPOUND.value)


def to_scheduled_workout(workout_id: int, workout, override: UserProgramSchedule | None) -> ScheduledWorkout:
    """``workout`` is anything exposing catalog name, category and type."""
    resolved = resolve_prescription(override)
    return ScheduledWorkout(
        workout_id=workout_id,
        name=workout.name,
        category=workout.category,
        type=workout.type,
        sets=resolved.sets,
        reps=resolved.reps,
        weight=resolved.weight,
        is_modified=resolved.is_modified,
        modification_type=(
            ModificationType(resolved.modification_type)
            if resolved.modification_type
            else None
        ),
    )


class ScheduleAssembler(BaseService):
    def __init__(self, session: AsyncSession):
        super().__init__(session)
        self._generator = ProgramGenerator(session)
        self._programs = ProgramRepository(session)
        self._user_schedules = UserScheduleRepository(session)

    async def get_weekly_schedule(self, user_id: int | None = None) -> WeeklyScheduleView:
        program = await self._generator.ensure_active_program()
        default_rows = await self._programs.list_schedule_rows(program.program_id)

        overrides: dict[tuple[str, int], UserProgramSchedule] = {}
        user_name = None
        if user_id is not None:
            user = await self._session.get(User, user_id)
            user_name = user.name if user else None
            for entry in await self._user_schedules.list_for(user_id, program.program_id):
                overrides[(entry.day, entry.workout_id)] = entry

        schedule = []
        for day, plan in WEEKLY_WORKOUT_PLAN.items():
            day_rows = compound_first([row for row in default_rows if row.day == day])
            schedule.append(
                ScheduleDay(
                    day=day,
                    category=plan["label"],
                    workouts=[
                        to_scheduled_workout(row.workout_id, row, overrides.get((day, row.workout_id)))
                        for row in day_rows
                    ],
                )
            )

        return WeeklyScheduleView(
            program_id=program.program_id,
            program_start=program.start_date,
            expires_on=program.end_date,
            user_name=user_name,
            schedule=schedule,
        )
