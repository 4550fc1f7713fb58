"""Main FastAPI application."""
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded

from app.config.settings import get_settings
from app.core.error_handlers import (
    domain_error_handler,
    request_validation_error_handler,
    unhandled_error_handler,
)
from app.core.exceptions import DomainError
from app.core.logging import configure_logging, get_logger
from app.db.database import close_engine, init_db
from app.llm import cleanup_llm_provider
from app.middleware import RequestIDMiddleware, limiter, rate_limit_exceeded_handler

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    settings = get_settings()
    configure_logging()

    if settings.auto_create_schema:
        await init_db()

    logger.info("app_started", environment=settings.environment)
    yield

    await cleanup_llm_provider()
    await close_engine()
    logger.info("app_stopped")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Weekly workout schedule with optional LLM-personalized sets, reps and weights",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestIDMiddleware)

    app.state.limiter = limiter
    app.add_exception_handler(DomainError, domain_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    from app.api.routes import (
        auth_router,
        health_router,
        personalize_router,
        schedule_router,
        user_profile_router,
    )

    app.include_router(auth_router, prefix="/auth", tags=["Authentication"])
    app.include_router(schedule_router, prefix="/schedule", tags=["Schedule"])
    app.include_router(personalize_router, prefix="/personalize", tags=["Personalization"])
    app.include_router(user_profile_router, prefix="/user-profile", tags=["User Profile"])
    app.include_router(health_router)

    return app


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app.main:app", host="0.0.0.0", port=8000, reload=True)
