"""User profile endpoints."""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.routes.dependencies import get_current_user_id
from app.db.database import get_db
from app.schemas.user import UserProfileResponse, UserProfileUpdate
from app.services.user_profile import UserProfileService

router = APIRouter()


@router.get("", response_model=UserProfileResponse)
async def get_profile(
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    return await UserProfileService(db).get_profile(user_id)


@router.put("", response_model=UserProfileResponse)
async def update_profile(
    request: UserProfileUpdate,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Partially update the caller's profile; the profile row is created on first write."""
    return await UserProfileService(db).update_profile(user_id, request)
