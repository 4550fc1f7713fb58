"""API routes module."""
from app.api.routes.auth import router as auth_router
from app.api.routes.health import router as health_router
from app.api.routes.personalize import router as personalize_router
from app.api.routes.schedule import router as schedule_router
from app.api.routes.user_profile import router as user_profile_router

__all__ = [
    "auth_router",
    "health_router",
    "personalize_router",
    "schedule_router",
    "user_profile_router",
]
