"""Authentication API endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from cms.api.dependencies import CurrentUser, get_settings_store
from cms.config import get_settings
from cms.database import get_db
from cms.models.enums import Role
from cms.schemas.auth import AuthResponse, UserLogin, UserRegister, UserResponse
from cms.services.auth import authenticate_user
from cms.services.settings_store import SettingsStore
from cms.services.tokens import create_session_token
from cms.services.users import create_user

logger = logging.getLogger(__name__)

settings = get_settings()

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


def set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        max_age=settings.session_ttl_seconds,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
        path="/",
    )


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def register(
    user_data: UserRegister,
    db: Annotated[Session, Depends(get_db)],
    store: Annotated[SettingsStore, Depends(get_settings_store)],
):
    """Register a new author account, if registration is enabled."""
    if not store.get_value("allow_registration", default=False):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User registration is currently disabled",
        )

    # Self-registration never grants more than the lowest role
    return create_user(db, user_data.email, user_data.password, user_data.name, role=Role.AUTHOR)


@router.post("/login", response_model=AuthResponse)
def login(
    credentials: UserLogin,
    response: Response,
    db: Annotated[Session, Depends(get_db)],
):
    """Login with email and password; the session token is also set as a cookie."""
    user = authenticate_user(db, credentials.email, credentials.password)

    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    access_token = create_session_token(user.id, user.email, user.role)
    set_session_cookie(response, access_token)
    logger.info(f"User {user.id} logged in")

    return AuthResponse(
        access_token=access_token,
        user=UserResponse.model_validate(user),
    )


@router.get("/me", response_model=UserResponse)
def get_me(current_user: CurrentUser):
    """Get current user information."""
    return current_user


@router.post("/logout")
def logout(response: Response):
    """Clear the session cookie; succeeds whether or not a session exists."""
    response.delete_cookie(key=settings.session_cookie_name, path="/")
    return {"message": "Logged out successfully"}
