"""
UserProfileService - Read and partial update of the caller's account and profile.
"""

from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ConflictError, ValidationError
from app.core.logging import get_logger
from app.core.transactions import transactional
from app.models.user import User, UserProfile
from app.repositories.user_repository import UserRepository
from app.schemas.user import UserProfileResponse, UserProfileUpdate
from app.services.base import BaseService

logger = get_logger(__name__)

ACCOUNT_FIELDS = ("email", "name")


def _to_response(user: User, profile: UserProfile | None) -> UserProfileResponse:
    data = {"id": user.id, "email": user.email, "name": user.name}
    if profile is not None:
        data.update(
            birthday=profile.birthday,
            height=profile.height,
            height_unit=profile.height_unit,
            weight=profile.weight,
            weight_unit=profile.weight_unit,
            background=profile.background,
            training_goal=profile.training_goal,
            training_experience=profile.training_experience,
            injury_caution_area=profile.injury_caution_area,
        )
    return UserProfileResponse(**data)


class UserProfileService(BaseService):
    def __init__(self, session: AsyncSession):
        super().__init__(session)
        self._users = UserRepository(session)

    async def get_profile(self, user_id: int) -> UserProfileResponse:
        user = await self._get_or_404(User, user_id, "User not found")
        profile = await self._users.get_profile(user_id)
        return _to_response(user, profile)

    async def update_profile(self, user_id: int, request: UserProfileUpdate) -> UserProfileResponse:
        changes = request.model_dump(exclude_unset=True, mode="json")
        # explicit nulls for required account columns are ignored
        for field in ACCOUNT_FIELDS:
            if field in changes and changes[field] is None:
                del changes[field]
        if not changes:
            raise ValidationError("profile", "No fields to update")

        user = await self._get_or_404(User, user_id, "User not found")

        email = changes.get("email")
        if email and email != user.email and await self._users.email_taken(email, user_id):
            raise ConflictError("Email already in use", code="CF_EMAIL_TAKEN", details={"email": email})

        if "birthday" in changes:
            changes["birthday"] = request.birthday

        profile = await self._apply(user, changes)
        logger.info("user_profile_updated", user_id=user_id, fields=sorted(changes))
        return _to_response(user, profile)

    @transactional
    async def _apply(self, user: User, changes: dict) -> UserProfile | None:
        for field in ACCOUNT_FIELDS:
            if field in changes:
                setattr(user, field, changes.pop(field))

        profile = await self._users.get_profile(user.id)
        if changes:
            if profile is None:
                profile = UserProfile(user_id=user.id)
                self._session.add(profile)
            for field, value in changes.items():
                setattr(profile, field, value)
            profile.updated_at = datetime.utcnow()

        await self._session.flush()
        return profile
