"""LLM personalization endpoints."""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.routes.dependencies import get_current_user_id, get_llm_provider_dep
from app.db.database import get_db
from app.llm import LLMProvider
from app.schemas.personalization import PersonalizationReset, PersonalizationResult
from app.services.personalization import PersonalizationService

router = APIRouter()


@router.post("/plan", response_model=PersonalizationResult)
async def personalize_plan(
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
    provider: LLMProvider = Depends(get_llm_provider_dep),
):
    """
    Ask the language model for sets/reps/weight on every workout of the active program.

    Fails with 409 when the caller already has a personalized plan for this program.
    """
    return await PersonalizationService(db, provider).personalize_plan(user_id)


@router.delete("/reset", response_model=PersonalizationReset)
async def reset_personalization(
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Delete the caller's personalized rows for the active program."""
    return await PersonalizationService(db).reset_personalized_plan(user_id)
