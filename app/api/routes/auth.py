"""Authentication endpoints for user registration and login."""
from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.routes.dependencies import get_current_user
from app.config.settings import get_settings
from app.core.exceptions import AuthenticationError, AuthorizationError, ConflictError
from app.core.logging import get_logger
from app.core.password import validate_password
from app.db.database import get_db
from app.middleware.rate_limit import limiter
from app.models.user import User
from app.repositories.user_repository import UserRepository
from app.schemas.user import (
    ApiTokenResponse,
    RegisterResponse,
    TokenResponse,
    UserLogin,
    UserProfileResponse,
    UserRegister,
)
from app.security import (
    create_access_token,
    generate_api_token,
    get_password_hash,
    hash_api_token,
    verify_password,
)
from app.services.user_profile import UserProfileService

router = APIRouter()
settings = get_settings()
logger = get_logger(__name__)


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
async def register(
    user_data: UserRegister,
    db: AsyncSession = Depends(get_db),
):
    """Register a new user.

    Returns:
        JWT access token, user ID and the plain API token (shown once)

    Raises:
        ConflictError: If email already registered
        PasswordValidationError: If the password is too weak
    """
    validate_password(user_data.password)

    users = UserRepository(db)
    if await users.get_by_email(user_data.email):
        raise ConflictError(
            "Email already registered",
            code="CF_EMAIL_TAKEN",
            details={"email": user_data.email},
        )

    api_token = generate_api_token()
    new_user = User(
        email=user_data.email,
        hashed_password=get_password_hash(user_data.password),
        name=user_data.name,
        is_active=True,
        api_token_hash=hash_api_token(api_token),
    )

    db.add(new_user)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ConflictError(
            "Email already registered",
            code="CF_EMAIL_TAKEN",
            details={"email": user_data.email},
        )
    await db.refresh(new_user)

    logger.info("user_registered", user_id=new_user.id)

    return RegisterResponse(
        access_token=create_access_token(new_user.id),
        user_id=new_user.id,
        api_token=api_token,
    )


@router.post("/login", response_model=TokenResponse)
@limiter.limit(settings.login_rate_limit)
async def login(
    request: Request,
    user_data: UserLogin,
    db: AsyncSession = Depends(get_db),
):
    """Authenticate user and return JWT token.

    Raises:
        AuthenticationError: If credentials are invalid
        AuthorizationError: If the account is inactive
    """
    user = await UserRepository(db).get_by_email(user_data.email)

    if not user or not verify_password(user_data.password, user.hashed_password):
        logger.info("login_failed", reason="invalid_credentials")
        raise AuthenticationError(
            "Incorrect email or password",
            details={"email": user_data.email},
        )

    if not user.is_active:
        logger.info("login_failed", reason="inactive", user_id=user.id)
        raise AuthorizationError(
            "User account is inactive",
            code="AUTH_ACCOUNT_INACTIVE",
            details={"user_id": user.id},
        )

    logger.info("login_succeeded", user_id=user.id)
    return TokenResponse(access_token=create_access_token(user.id), user_id=user.id)


@router.get("/me", response_model=UserProfileResponse)
async def me(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Get the caller's account and profile fields."""
    return await UserProfileService(db).get_profile(current_user.id)


@router.post("/api-token", response_model=ApiTokenResponse)
async def rotate_api_token(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Replace the caller's API token; the previous token stops working."""
    api_token = generate_api_token()
    current_user.api_token_hash = hash_api_token(api_token)
    await db.commit()

    logger.info("api_token_rotated", user_id=current_user.id)
    return ApiTokenResponse(api_token=api_token)
