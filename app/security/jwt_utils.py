"""JWT and API token utilities for authentication."""
import hashlib
from datetime import datetime, timedelta
from secrets import token_hex
from typing import Optional

import bcrypt
from jose import JWTError, jwt

from app.config.settings import get_settings

settings = get_settings()


def get_password_hash(password: str) -> str:
    """Hash a password using bcrypt."""
    salt = bcrypt.gensalt()
    return bcrypt.hashpw(password.encode('utf-8'), salt).decode('utf-8')


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against a hash."""
    return bcrypt.checkpw(
        plain_password.encode('utf-8'),
        hashed_password.encode('utf-8')
    )


def create_access_token(
    user_id: int,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Create a JWT access token for a user.

    Args:
        user_id: User the token is issued to (stored as ``sub``)
        expires_delta: Optional expiration time delta

    Returns:
        Encoded JWT token string
    """
    expire = datetime.utcnow() + (
        expires_delta or timedelta(days=settings.access_token_expire_days)
    )

    to_encode = {"sub": str(user_id), "exp": expire}

    return jwt.encode(
        to_encode,
        settings.secret_key,
        algorithm=settings.algorithm,
    )


def decode_access_token(token: str) -> Optional[dict]:
    """Decode a JWT access token.

    Returns:
        Decoded token payload or None if invalid or expired
    """
    try:
        return jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.algorithm],
        )
    except JWTError:
        return None


def verify_token(token: str) -> Optional[int]:
    """Verify a JWT token and extract the user ID."""
    payload = decode_access_token(token)

    if payload is None:
        return None

    subject = payload.get("sub")

    if subject is None:
        return None

    try:
        return int(subject)
    except (TypeError, ValueError):
        return None


def generate_api_token() -> str:
    """Generate a random API token (64 hex characters)."""
    return token_hex(32)


def hash_api_token(token: str) -> str:
    """SHA-256 hex digest used to store and look up API tokens."""
    return hashlib.sha256(token.encode('utf-8')).hexdigest()
