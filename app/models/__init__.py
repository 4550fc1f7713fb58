"""ORM models."""
from app.models.enums import (
    ExperienceLevel,
    InjuryArea,
    ModificationType,
    ProgramStatus,
    TrainingGoal,
    WeightUnit,
    WorkoutType,
)
from app.models.program import ProgramMetadata, ProgramSchedule, UserProgramSchedule
from app.models.user import User, UserProfile
from app.models.workout import Workout

__all__ = [
    "ExperienceLevel",
    "InjuryArea",
    "ModificationType",
    "ProgramStatus",
    "TrainingGoal",
    "WeightUnit",
    "WorkoutType",
    "ProgramMetadata",
    "ProgramSchedule",
    "UserProgramSchedule",
    "User",
    "UserProfile",
    "Workout",
]
