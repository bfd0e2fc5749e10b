# src/plikeme/api/v1/endpoints/auth.py
"""Authentication endpoints for the P-LikeMe API."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status
from fastapi.responses import JSONResponse

from plikeme.core.security import (
    PasswordPolicyError,
    create_access_token,
    hash_password,
    validate_password,
    verify_password,
)
from plikeme.core.settings import settings
from plikeme.models import User
from plikeme.schemas.auth import (
    AuthResponse,
    CurrentUserResponse,
    LoginRequest,
    SignupRequest,
    UserPublic,
)

from ..dependencies import CurrentUserDep, SessionDep

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["authentication"])


def _auth_response(user: User) -> AuthResponse:
    return AuthResponse(
        user=UserPublic.model_validate(user),
        access_token=create_access_token(user.id, user.username),
        token_type="bearer",
    )


@router.post(
    "/signup",
    summary="Create an account",
    status_code=status.HTTP_201_CREATED,
    response_model=AuthResponse,
    responses={status.HTTP_400_BAD_REQUEST: {"description": "Invalid username or password"}},
)
async def signup(payload: SignupRequest, db: SessionDep) -> AuthResponse | JSONResponse:
    """Register a new account and log it in.

    Args:
        payload: Username and password.
        db: Database session.

    Returns:
        The new user and an access token.

    Raises:
        HTTPException: 400 for an invalid username, 409 if the name is taken.
    """
    username = payload.username
    if not settings.username_min <= len(username) <= settings.username_max:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=(
                f"Username must be between {settings.username_min} and "
                f"{settings.username_max} characters"
            ),
        )

    try:
        validate_password(payload.password)
    except PasswordPolicyError as err:
        logger.info("signup rejected for %s: weak password", username)
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": str(err), "errors": err.errors},
        )

    if db.query(User).filter(User.username == username).first() is not None:
        logger.info("signup rejected for %s: username taken", username)
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Username already exists",
        )

    user = User(username=username, password_hash=hash_password(payload.password))
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("created user %s (id=%s)", user.username, user.id)
    return _auth_response(user)


@router.post(
    "/login",
    summary="Log in with username and password",
    response_model=AuthResponse,
)
async def login(payload: LoginRequest, db: SessionDep) -> AuthResponse:
    """Authenticate with a username and password."""
    user = db.query(User).filter(User.username == payload.username).first()
    if user is None or not verify_password(payload.password, user.password_hash):
        logger.info("failed login for %s", payload.username)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password",
        )
    return _auth_response(user)


@router.get("/me", response_model=CurrentUserResponse)
async def read_current_user(current_user: CurrentUserDep) -> User:
    """Return the authenticated user."""
    return current_user
