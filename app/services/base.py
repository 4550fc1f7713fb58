from typing import TypeVar

from sqlalchemy.ext.asyncio import AsyncSession
from app.core.exceptions import NotFoundError

T = TypeVar("T")
M = TypeVar("M")


class BaseService:
    """Holds the request session and the not-found helpers shared by services."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def _get_or_404(self, model: type[M], id: int, error_msg: str | None = None) -> M:
        result = await self._session.get(model, id)
        if not result:
            entity_name = model.__name__
            raise NotFoundError(
                entity_name,
                error_msg or f"{entity_name} {id} not found",
                {"id": id}
            )
        return result

    @staticmethod
    def _require(value: T | None, entity: str, message: str, details: dict | None = None) -> T:
        """Return ``value`` or raise NotFoundError for a lookup that found nothing."""
        if value is None:
            raise NotFoundError(entity, message, details)
        return value
