"""
ModificationTracker - Manual sets/reps/weight edits layered over personalized rows.
"""

from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError, ValidationError
from app.core.logging import get_logger
from app.core.transactions import transactional
from app.models.enums import ModificationType, WeightUnit
from app.models.program import UserProgramSchedule
from app.models.workout import Workout
from app.repositories.user_schedule_repository import UserScheduleRepository
from app.schemas.schedule import (
    ScheduledWorkout,
    WorkoutModificationKey,
    WorkoutModificationResponse,
    WorkoutModificationUpdate,
)
from app.services.base import BaseService
from app.services.schedule_assembler import to_scheduled_workout

logger = get_logger(__name__)

LB_PER_KG = 2.20462

TRACKED_FIELDS = ("sets", "reps", "weight_value")


def convert_weight(value: float, from_unit: str | None, to_unit: str | None) -> float:
    if not from_unit or not to_unit or from_unit == to_unit:
        return value
    if from_unit == WeightUnit.KG.value and to_unit == WeightUnit.LB.value:
        return value * LB_PER_KG
    if from_unit == WeightUnit.LB.value and to_unit == WeightUnit.KG.value:
        return value / LB_PER_KG
    return value


def classify_modification(baseline: dict, candidate: dict) -> ModificationType:
    """Compare candidate sets/reps/weight_value against the baseline values."""
    increased = reduced = 0
    for field in TRACKED_FIELDS:
        before, after = baseline.get(field), candidate.get(field)
        if before is None or after is None:
            continue
        before, after = round(float(before), 2), round(float(after), 2)
        if after > before:
            increased += 1
        elif after < before:
            reduced += 1

    if increased and reduced:
        return ModificationType.MIXED
    if increased:
        return ModificationType.INCREASED
    if reduced:
        return ModificationType.REDUCED
    return ModificationType.UNCHANGED


def _baseline_of(entry: UserProgramSchedule) -> dict:
    return {"sets": entry.sets, "reps": entry.reps, "weight_value": entry.weight_value}


def _same_values(current: dict, candidate: dict) -> bool:
    if current["weight_unit"] != candidate["weight_unit"]:
        return False
    return all(
        (current[field] is None) == (candidate[field] is None)
        and (current[field] is None or round(float(current[field]), 2) == round(float(candidate[field]), 2))
        for field in TRACKED_FIELDS
    )


def _current_of(entry: UserProgramSchedule) -> dict:
    """Values in effect now: the manual layer where set, else the personalized ones."""
    manual = entry.is_modified

    def pick(modified, personalized):
        return modified if manual and modified is not None else personalized

    return {
        "sets": pick(entry.sets_modified, entry.sets),
        "reps": pick(entry.reps_modified, entry.reps),
        "weight_value": pick(entry.weight_modified, entry.weight_value),
        "weight_unit": pick(entry.weight_unit_modified, entry.weight_unit),
    }


def _candidate_for(entry: UserProgramSchedule, request: WorkoutModificationUpdate) -> dict:
    """Requested values over the ones currently in effect."""
    candidate = _current_of(entry)
    for field in TRACKED_FIELDS:
        if getattr(request, field) is not None:
            candidate[field] = getattr(request, field)
    if request.weight_unit:
        candidate["weight_unit"] = request.weight_unit.value
    return candidate


class ModificationTracker(BaseService):
    def __init__(self, session: AsyncSession):
        super().__init__(session)
        self._user_schedules = UserScheduleRepository(session)

    async def _get_entry(self, user_id: int, key: WorkoutModificationKey) -> UserProgramSchedule:
        entry = await self._user_schedules.get_entry(
            user_id, key.program_id, key.workout_id, key.day
        )
        return self._require(
            entry,
            "ScheduleEntry",
            "Workout not found in your personalized schedule",
            {"program_id": key.program_id, "workout_id": key.workout_id, "day": key.day},
        )

    async def update_workout_modification(
        self,
        user_id: int,
        request: WorkoutModificationUpdate,
    ) -> WorkoutModificationResponse:
        if all(getattr(request, field) is None for field in (*TRACKED_FIELDS, "weight_unit")):
            raise ValidationError("modification", "Provide at least one of sets, reps, weight_value, weight_unit")

        entry = await self._get_entry(user_id, request)

        candidate = _candidate_for(entry, request)
        if entry.is_modified and _same_values(_current_of(entry), candidate):
            raise ValidationError(
                "modification",
                "No changes compared to the current values",
                {"program_id": request.program_id, "workout_id": request.workout_id, "day": request.day},
            )

        comparable = dict(candidate)
        if candidate["weight_value"] is not None:
            comparable["weight_value"] = convert_weight(
                candidate["weight_value"], candidate["weight_unit"], entry.weight_unit
            )

        modification_type = classify_modification(_baseline_of(entry), comparable)
        if modification_type == ModificationType.UNCHANGED:
            raise ValidationError(
                "modification",
                "No changes compared to the personalized values",
                {"program_id": request.program_id, "workout_id": request.workout_id, "day": request.day},
            )

        await self._apply(entry, candidate, modification_type)
        logger.info(
            "workout_modified",
            user_id=user_id,
            program_id=entry.program_id,
            workout_id=entry.workout_id,
            day=entry.day,
            modification_type=modification_type.value,
        )
        return WorkoutModificationResponse(
            message="Workout modification saved",
            modification_type=modification_type,
            workout=await self._view(entry),
        )

    @transactional
    async def _apply(self, entry: UserProgramSchedule, candidate: dict, modification_type: ModificationType) -> None:
        entry.sets_modified = candidate["sets"]
        entry.reps_modified = candidate["reps"]
        entry.weight_modified = candidate["weight_value"]
        entry.weight_unit_modified = candidate["weight_unit"]
        entry.is_modified = True
        entry.modification_type = modification_type.value
        entry.updated_at = datetime.utcnow()
        await self._session.flush()

    async def reset_workout_modification(
        self,
        user_id: int,
        key: WorkoutModificationKey,
    ) -> WorkoutModificationResponse:
        entry = await self._get_entry(user_id, key)
        if not entry.is_modified:
            raise NotFoundError(
                "Modification",
                "No manual modification to reset",
                {"program_id": key.program_id, "workout_id": key.workout_id, "day": key.day},
            )

        await self._clear(entry)
        logger.info(
            "workout_modification_reset",
            user_id=user_id,
            program_id=entry.program_id,
            workout_id=entry.workout_id,
            day=entry.day,
        )
        return WorkoutModificationResponse(
            message="Workout modification reset",
            workout=await self._view(entry),
        )

    @transactional
    async def _clear(self, entry: UserProgramSchedule) -> None:
        entry.sets_modified = None
        entry.reps_modified = None
        entry.weight_modified = None
        entry.weight_unit_modified = None
        entry.is_modified = False
        entry.modification_type = None
        entry.updated_at = datetime.utcnow()
        await self._session.flush()

    async def _view(self, entry: UserProgramSchedule) -> ScheduledWorkout:
        workout = await self._get_or_404(Workout, entry.workout_id)
        return to_scheduled_workout(entry.workout_id, workout, entry)
