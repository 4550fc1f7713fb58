"""
ProgramGenerator - Keeps exactly one active 7-day program and seeds its default schedule.

Responsible for:
- Returning the current active window while it has not expired
- Expiring the old window and creating a new one once end_date is reached
- Sampling catalog workouts per day/category from the weekly template
"""

from dataclasses import dataclass
from datetime import date, timedelta

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import weekly_plan
from app.config.settings import get_settings
from app.core.logging import get_logger
from app.core.transactions import transactional
from app.models.enums import WorkoutType
from app.models.program import ProgramMetadata
from app.repositories.program_repository import ProgramRepository
from app.repositories.workout_repository import WorkoutRepository
from app.services.base import BaseService

logger = get_logger(__name__)


@dataclass(frozen=True)
class ActiveProgram:
    program_id: int
    start_date: date
    end_date: date

    @classmethod
    def from_model(cls, program: ProgramMetadata) -> "ActiveProgram":
        return cls(
            program_id=program.id,
            start_date=program.start_date,
            end_date=program.end_date,
        )


class ProgramGenerator(BaseService):
    """
    Lazily generates the shared weekly program.

    The window is [start_date, end_date) with end_date = start_date + window
    days; a new program is created once today reaches end_date.
    """

    def __init__(self, session: AsyncSession):
        super().__init__(session)
        self._programs = ProgramRepository(session)
        self._workouts = WorkoutRepository(session)
        self._window_days = get_settings().program_window_days

    async def ensure_active_program(self, today: date | None = None) -> ActiveProgram:
        today = today or date.today()

        program = await self._programs.get_active_program()
        if program is not None and today < program.end_date:
            return ActiveProgram.from_model(program)

        try:
            return await self._create_program(today, stale=program)
        except IntegrityError:
            # Another request activated a program between our read and write
            logger.warning("program_activation_race", today=today.isoformat())
            winner = await self._programs.get_active_program()
            if winner is None:
                raise
            return ActiveProgram.from_model(winner)

    @transactional
    async def _create_program(self, today: date, stale: ProgramMetadata | None = None) -> ActiveProgram:
        # Only the row we read is expired; a program activated meanwhile by
        # another request makes our insert hit the single-active index
        expired = await self._programs.expire_program(stale.id) if stale is not None else 0

        program = await self._programs.create_program(
            start_date=today,
            end_date=today + timedelta(days=self._window_days),
        )

        entries: list[tuple[str, int]] = []
        for day, plan in weekly_plan.WEEKLY_WORKOUT_PLAN.items():
            for workout_id in await self.sample_day(plan["categories"]):
                entries.append((day, workout_id))

        self._programs.add_schedule_entries(program.id, entries)
        await self._programs.flush()

        logger.info(
            "program_created",
            program_id=program.id,
            start_date=program.start_date.isoformat(),
            end_date=program.end_date.isoformat(),
            expired_programs=expired,
            schedule_entries=len(entries),
        )
        return ActiveProgram.from_model(program)

    async def sample_day(self, categories: list[str]) -> list[int]:
        """Workout ids for one template day, grouped by category in template order."""
        special = weekly_plan.is_special_day(categories)
        workout_ids: list[int] = []

        for category in categories:
            if special:
                workout_ids.extend(
                    await self._workouts.sample_ids(
                        category, weekly_plan.special_day_sample_size
                    )
                )
            else:
                workout_ids.extend(
                    await self._workouts.sample_ids(
                        category,
                        weekly_plan.split_day_compound_count,
                        workout_type=WorkoutType.COMPOUND.value,
                    )
                )
                workout_ids.extend(
                    await self._workouts.sample_ids(
                        category,
                        weekly_plan.split_day_accessory_count,
                        workout_type=WorkoutType.ACCESSORY.value,
                    )
                )

        return workout_ids
