# src/plikeme/schemas/auth.py
"""Authentication-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Credentials(BaseModel):
    """Username and password submitted to signup or login."""

    username: str = Field(..., description="Account name (trimmed)")
    password: str = Field(..., description="Plain-text password")

    @field_validator("username")
    @classmethod
    def strip_username(cls, v: str) -> str:
        return v.strip()


class SignupRequest(Credentials):
    """Schema for account creation."""


class LoginRequest(Credentials):
    """Schema for login submissions."""


class UserPublic(BaseModel):
    """Minimal public view of an account."""

    id: int
    username: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AuthResponse(BaseModel):
    """Response returned after a successful signup or login."""

    user: UserPublic
    access_token: str = Field(..., description="JWT access token")
    token_type: str = Field("bearer", description="Token type (always 'bearer')")


class CurrentUserResponse(UserPublic):
    """The authenticated user, including guru status."""

    is_guru: bool = False
