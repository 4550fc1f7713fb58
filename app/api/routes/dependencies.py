"""Shared dependencies for API routes."""
from fastapi import Depends, Header, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import AuthenticationError, AuthorizationError
from app.core.logging import add_log_context
from app.db.database import get_db
from app.llm import LLMProvider, get_llm_provider
from app.models.user import User
from app.repositories.user_repository import UserRepository
from app.security import hash_api_token, verify_token


def _bearer_token(authorization: str) -> str:
    try:
        scheme, token = authorization.split()
    except ValueError:
        raise AuthenticationError("Invalid authorization header format")
    if scheme.lower() != "bearer":
        raise AuthenticationError("Invalid authentication scheme")
    return token


async def _resolve_user_id(
    db: AsyncSession,
    authorization: str | None,
    api_token: str | None,
) -> int | None:
    """User id carried by the request, None when no credential was sent.

    A credential that is present but does not resolve is always rejected.
    """
    if authorization:
        user_id = verify_token(_bearer_token(authorization))
        if user_id is None:
            raise AuthenticationError("Invalid or expired token")
        return user_id

    if api_token:
        user = await UserRepository(db).get_by_api_token_hash(hash_api_token(api_token))
        if user is None:
            raise AuthenticationError("Invalid API token", code="AUTH_API_TOKEN")
        return user.id

    return None


async def get_optional_user_id(
    authorization: str | None = Header(None, alias="Authorization"),
    x_api_token: str | None = Header(None, alias="X-API-Token"),
    token: str | None = Query(None),
    db: AsyncSession = Depends(get_db),
) -> int | None:
    """Caller's user id for endpoints that also serve anonymous requests."""
    user_id = await _resolve_user_id(db, authorization, x_api_token or token)
    if user_id is not None:
        add_log_context(user_id=user_id)
    return user_id


async def get_current_user_id(
    user_id: int | None = Depends(get_optional_user_id),
) -> int:
    """Caller's user id from a bearer JWT or an API token.

    Raises:
        AuthenticationError: If no credential was sent or it is invalid
    """
    if user_id is None:
        raise AuthenticationError("No authorization header provided")
    return user_id


async def get_current_user(
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Get current user row for the authenticated caller."""
    user = await db.get(User, user_id)
    if not user:
        raise AuthenticationError("User not found")
    if not user.is_active:
        raise AuthorizationError("User account is inactive")
    return user


def get_llm_provider_dep() -> LLMProvider:
    """LLM provider used by personalization; overridden in tests."""
    return get_llm_provider()
