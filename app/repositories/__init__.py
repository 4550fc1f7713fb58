"""Repositories package."""
from app.repositories.base import Repository
from app.repositories.program_repository import ProgramRepository
from app.repositories.user_repository import UserRepository
from app.repositories.user_schedule_repository import UserScheduleRepository
from app.repositories.workout_repository import WorkoutRepository

__all__ = [
    "Repository",
    "ProgramRepository",
    "UserRepository",
    "UserScheduleRepository",
    "WorkoutRepository",
]
