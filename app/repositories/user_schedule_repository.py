from __future__ import annotations
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete, and_, func
from app.models.program import UserProgramSchedule
from app.repositories.base import Repository


class UserScheduleRepository(Repository[UserProgramSchedule, int]):
    """Per-user overrides of the default program."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def get(self, id: int) -> UserProgramSchedule | None:
        return await self._session.get(UserProgramSchedule, id)

    async def exists_for(self, user_id: int, program_id: int) -> bool:
        result = await self._session.execute(
            select(func.count(UserProgramSchedule.id)).where(
                and_(
                    UserProgramSchedule.user_id == user_id,
                    UserProgramSchedule.program_id == program_id,
                )
            )
        )
        return result.scalar_one() > 0

    async def list_for(self, user_id: int, program_id: int) -> list[UserProgramSchedule]:
        result = await self._session.execute(
            select(UserProgramSchedule)
            .where(
                and_(
                    UserProgramSchedule.user_id == user_id,
                    UserProgramSchedule.program_id == program_id,
                )
            )
            .order_by(UserProgramSchedule.id)
        )
        return list(result.scalars().all())

    async def get_entry(
        self,
        user_id: int,
        program_id: int,
        workout_id: int,
        day: str,
    ) -> UserProgramSchedule | None:
        result = await self._session.execute(
            select(UserProgramSchedule).where(
                and_(
                    UserProgramSchedule.user_id == user_id,
                    UserProgramSchedule.program_id == program_id,
                    UserProgramSchedule.workout_id == workout_id,
                    UserProgramSchedule.day == day,
                )
            )
        )
        return result.scalar_one_or_none()

    async def bulk_insert(self, rows: list[dict]) -> None:
        self._session.add_all([UserProgramSchedule(**row) for row in rows])
        await self._session.flush()

    async def delete_for(self, user_id: int, program_id: int) -> int:
        result = await self._session.execute(
            delete(UserProgramSchedule).where(
                and_(
                    UserProgramSchedule.user_id == user_id,
                    UserProgramSchedule.program_id == program_id,
                )
            )
        )
        return result.rowcount
