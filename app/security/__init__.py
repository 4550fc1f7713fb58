"""Security utilities for authentication."""
from .jwt_utils import (
    verify_password,
    get_password_hash,
    create_access_token,
    decode_access_token,
    verify_token,
    generate_api_token,
    hash_api_token,
)

__all__ = [
    "verify_password",
    "get_password_hash",
    "create_access_token",
    "decode_access_token",
    "verify_token",
    "generate_api_token",
    "hash_api_token",
]
