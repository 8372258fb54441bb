"""User management API endpoints (admin only)."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from cms.api.dependencies import AdminUser
from cms.database import get_db
from cms.exceptions import InvalidInputError
from cms.models.enums import Role
from cms.schemas.user import DeleteResponse, UserCreate, UserDetail, UserUpdate
from cms.services import users as user_service

router = APIRouter(prefix="/api/v1/users", tags=["users"])


@router.get("", response_model=list[UserDetail])
def list_users(
    current_user: AdminUser,
    db: Annotated[Session, Depends(get_db)],
    role: Role | None = None,
    include_inactive: bool = False,
    limit: Annotated[int, Query(ge=1, le=100)] = 50,
    offset: Annotated[int, Query(ge=0)] = 0,
):
    """List users, optionally filtered by role."""
    return user_service.list_users(
        db, role=role, include_inactive=include_inactive, limit=limit, offset=offset
    )


@router.post("", response_model=UserDetail, status_code=status.HTTP_201_CREATED)
def create_user(
    user_data: UserCreate,
    current_user: AdminUser,
    db: Annotated[Session, Depends(get_db)],
):
    """Create a user with any role."""
    return user_service.create_user(
        db,
        email=user_data.email,
        password=user_data.password,
        name=user_data.name,
        role=user_data.role,
        avatar_url=user_data.avatar_url,
        is_active=user_data.is_active,
    )


@router.get("/{user_id}", response_model=UserDetail)
def get_user(
    user_id: int,
    current_user: AdminUser,
    db: Annotated[Session, Depends(get_db)],
):
    """Get a user, including deactivated ones."""
    return user_service.get_user_or_404(db, user_id)


@router.put("/{user_id}", response_model=UserDetail)
def update_user(
    user_id: int,
    user_data: UserUpdate,
    current_user: AdminUser,
    db: Annotated[Session, Depends(get_db)],
):
    """Update a user."""
    user = user_service.get_user_or_404(db, user_id)
    if user.id == current_user.id and user_data.is_active is False:
        raise InvalidInputError("You cannot deactivate your own account")

    return user_service.update_user(db, user, **user_data.model_dump(exclude_unset=True))


@router.delete("/{user_id}", response_model=DeleteResponse)
def delete_user(
    user_id: int,
    current_user: AdminUser,
    db: Annotated[Session, Depends(get_db)],
    hard: bool = False,
):
    """Deactivate a user, or remove them permanently with ``?hard=true``."""
    user = user_service.get_user_or_404(db, user_id)
    if user.id == current_user.id:
        raise InvalidInputError("You cannot delete your own account")

    if hard:
        user_service.hard_delete_user(db, user)
        return DeleteResponse(message="User permanently deleted")

    user_service.deactivate_user(db, user)
    return DeleteResponse(message="User deactivated successfully")
