"""Health check endpoints for monitoring system status."""
import time
from datetime import datetime

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy import text

from app.config.settings import get_settings
from app.core.logging import get_logger
from app.db.database import engine
from app.api.routes.dependencies import get_llm_provider_dep
from app.llm import LLMProvider

router = APIRouter(prefix="/health", tags=["health"])
settings = get_settings()
logger = get_logger(__name__)


class HealthCheckResponse(BaseModel):
    """Liveness plus primary database reachability."""

    status: str = Field(..., description="Overall status: healthy or unhealthy")
    app: str
    timestamp: str = Field(..., description="ISO 8601 timestamp of check")
    database: dict = Field(..., description="Primary database status")


class LLMHealthResponse(BaseModel):
    status: str
    provider: str
    model: str


async def check_primary_health() -> tuple[bool, float]:
    """Check primary database health."""
    try:
        start_time = time.time()
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True, (time.time() - start_time) * 1000
    except Exception as e:
        logger.warning("database_health_check_failed", error=str(e))
        return False, 0


@router.get("", response_model=HealthCheckResponse)
async def health_check():
    """
    Public health check endpoint.

    Returns basic system health status without requiring authentication.
    """
    healthy, response_time = await check_primary_health()
    status = "healthy" if healthy else "unhealthy"

    return HealthCheckResponse(
        status=status,
        app=settings.app_name,
        timestamp=datetime.utcnow().isoformat(),
        database={"status": status, "response_time_ms": round(response_time, 2)},
    )


@router.get("/llm", response_model=LLMHealthResponse)
async def llm_health_check(provider: LLMProvider = Depends(get_llm_provider_dep)):
    """Check LLM provider availability."""
    is_healthy = await provider.health_check()

    return LLMHealthResponse(
        status="healthy" if is_healthy else "unhealthy",
        provider=settings.llm_provider,
        model=settings.openai_model,
    )
