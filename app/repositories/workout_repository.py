from __future__ import annotations
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from app.models.workout import Workout
from app.repositories.base import Repository


class WorkoutRepository(Repository[Workout, int]):
    def __init__(self, session: AsyncSession):
        self._session = session

    async def get(self, id: int) -> Workout | None:
        return await self._session.get(Workout, id)

    async def sample_ids(
        self,
        category: str,
        limit: int,
        workout_type: str | None = None,
    ) -> list[int]:
        """Uniformly pick up to ``limit`` distinct workout ids of a category."""
        query = select(Workout.id).where(Workout.category == category)
        if workout_type is not None:
            query = query.where(Workout.type == workout_type)
        query = query.order_by(func.random()).limit(limit)

        result = await self._session.execute(query)
        return list(result.scalars().all())

    async def count(self) -> int:
        result = await self._session.execute(select(func.count(Workout.id)))
        return result.scalar_one()

    async def list_names(self) -> set[str]:
        result = await self._session.execute(select(Workout.name))
        return set(result.scalars().all())

    def add_all(self, workouts: list[Workout]) -> None:
        self._session.add_all(workouts)
