from __future__ import annotations
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, and_
from app.models.user import User, UserProfile
from app.repositories.base import Repository


class UserRepository(Repository[User, int]):
    def __init__(self, session: AsyncSession):
        self._session = session

    async def get(self, id: int) -> User | None:
        return await self._session.get(User, id)

    async def get_by_email(self, email: str) -> User | None:
        result = await self._session.execute(
            select(User).where(User.email == email)
        )
        return result.scalar_one_or_none()

    async def get_by_api_token_hash(self, token_hash: str) -> User | None:
        result = await self._session.execute(
            select(User).where(User.api_token_hash == token_hash)
        )
        return result.scalar_one_or_none()

    async def email_taken(self, email: str, exclude_user_id: int) -> bool:
        result = await self._session.execute(
            select(User.id).where(
                and_(
                    User.email == email,
                    User.id != exclude_user_id,
                )
            )
        )
        return result.first() is not None

    async def get_profile(self, user_id: int) -> UserProfile | None:
        result = await self._session.execute(
            select(UserProfile).where(UserProfile.user_id == user_id)
        )
        return result.scalar_one_or_none()
