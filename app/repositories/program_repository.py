from __future__ import annotations
from datetime import date
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update
from app.models.enums import ProgramStatus
from app.models.program import ProgramMetadata, ProgramSchedule
from app.models.workout import Workout
from app.repositories.base import Repository


class ProgramRepository(Repository[ProgramMetadata, int]):
    def __init__(self, session: AsyncSession):
        self._session = session

    async def get(self, id: int) -> ProgramMetadata | None:
        return await self._session.get(ProgramMetadata, id)

    async def get_active_program(self) -> ProgramMetadata | None:
        result = await self._session.execute(
            select(ProgramMetadata)
            .where(ProgramMetadata.status == int(ProgramStatus.ACTIVE))
            .order_by(ProgramMetadata.id.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def expire_program(self, program_id: int) -> int:
        """Expire one program only if it is still the active row that was read."""
        result = await self._session.execute(
            update(ProgramMetadata)
            .where(
                ProgramMetadata.id == program_id,
                ProgramMetadata.status == int(ProgramStatus.ACTIVE),
            )
            .values(status=int(ProgramStatus.EXPIRED))
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount

    async def create_program(self, start_date: date, end_date: date) -> ProgramMetadata:
        program = ProgramMetadata(
            start_date=start_date,
            end_date=end_date,
            status=int(ProgramStatus.ACTIVE),
        )
        return await self.create(program)

    def add_schedule_entries(self, program_id: int, entries: list[tuple[str, int]]) -> None:
        self._session.add_all(
            [
                ProgramSchedule(program_id=program_id, day=day, workout_id=workout_id)
                for day, workout_id in entries
            ]
        )

    async def list_schedule_rows(self, program_id: int) -> list:
        """Default schedule joined with catalog display fields, in insertion order.

        Each row exposes ``day``, ``workout_id``, ``name``, ``category`` and ``type``.
        """
        result = await self._session.execute(
            select(
                ProgramSchedule.day,
                ProgramSchedule.workout_id,
                Workout.name,
                Workout.category,
                Workout.type,
            )
            .join(Workout, ProgramSchedule.workout_id == Workout.id)
            .where(ProgramSchedule.program_id == program_id)
            .order_by(ProgramSchedule.id)
        )
        return list(result.all())
