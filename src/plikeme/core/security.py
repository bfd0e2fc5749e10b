"""Password hashing, password policy and JWT helpers."""
from __future__ import annotations

import re
from datetime import UTC, datetime, timedelta
from typing import Any

from jose import jwt
from passlib.context import CryptContext

from plikeme.core.settings import settings

PASSWORD_SPECIAL_CHARS = '!@#$%^&*(),.?":{}|<>'
_SPECIAL_RE = re.compile("[" + re.escape(PASSWORD_SPECIAL_CHARS) + "]")

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


class PasswordPolicyError(ValueError):
    """Raised when a password does not satisfy the password rules."""

    def __init__(self, errors: list[str]) -> None:
        super().__init__(errors[0] if errors else "Invalid password")
        self.errors = errors


def password_errors(password: str) -> list[str]:
    """Return every password rule the given password violates.

    Args:
        password: Candidate plain-text password.

    Returns:
        Human readable messages, empty when the password is acceptable.
    """
    errors: list[str] = []
    min_length = settings.password_min_length
    if len(password) < min_length:
        errors.append(f"Password must be at least {min_length} characters long")
    if not re.search(r"[A-Z]", password):
        errors.append("Password must contain at least one uppercase letter")
    if not re.search(r"[a-z]", password):
        errors.append("Password must contain at least one lowercase letter")
    if not re.search(r"\d", password):
        errors.append("Password must contain at least one number")
    if not _SPECIAL_RE.search(password):
        errors.append(
            f"Password must contain at least one special character ({PASSWORD_SPECIAL_CHARS})"
        )
    return errors


def validate_password(password: str) -> None:
    """Raise PasswordPolicyError listing all violations, if any."""
    errors = password_errors(password)
    if errors:
        raise PasswordPolicyError(errors)


def hash_password(password: str) -> str:
    """Return a salted hash of the password."""
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """Check a plain-text password against a stored hash."""
    return pwd_context.verify(password, password_hash)


def create_access_token(user_id: int, username: str) -> str:
    """Create a signed JWT access token for a user.

    Args:
        user_id: Primary key of the user, stored as the ``sub`` claim.
        username: Username, stored as an extra claim.

    Returns:
        The encoded token.
    """
    expire = datetime.now(UTC) + timedelta(minutes=settings.access_token_expire_minutes)
    to_encode: dict[str, Any] = {"sub": str(user_id), "username": username, "exp": expire}
    encoded_jwt: str = jwt.encode(
        to_encode,
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )
    return encoded_jwt


def decode_access_token(token: str) -> dict[str, Any]:
    """Decode and verify a JWT access token.

    Raises:
        jose.JWTError: If the token is malformed, badly signed or expired.
    """
    payload: dict[str, Any] = jwt.decode(
        token,
        settings.secret_key,
        algorithms=[settings.jwt_algorithm],
    )
    return payload
