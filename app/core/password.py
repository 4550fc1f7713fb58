import re

from app.core.exceptions import PasswordValidationError

MIN_PASSWORD_LENGTH = 8

COMMON_PASSWORDS = {
    'password', '12345678', 'qwerty123', 'abc12345', 'password1', '123456789',
    'letmein1', 'passw0rd', 'password123', 'welcome1', 'test1234', 'iloveyou1',
}


def validate_password(password: str) -> None:
    if len(password) < MIN_PASSWORD_LENGTH:
        raise PasswordValidationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters long (got {len(password)})",
            {"min_length": MIN_PASSWORD_LENGTH},
        )

    if not re.search(r'[A-Za-z]', password):
        raise PasswordValidationError(
            "Password must contain at least one letter"
        )

    if not re.search(r'\d', password):
        raise PasswordValidationError(
            "Password must contain at least one digit"
        )

    if password.lower() in COMMON_PASSWORDS:
        raise PasswordValidationError(
            "Password is too common and easily guessable"
        )
