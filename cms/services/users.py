"""User account management (the credential store)."""

import logging

from sqlalchemy.orm import Session

from cms.exceptions import ConflictError, InvalidInputError, NotFoundError
from cms.models.enums import Role
from cms.models.user import User
from cms.services.auth import get_password_hash, normalize_email
from cms.services.integrity import commit_or_conflict

logger = logging.getLogger(__name__)

DUPLICATE_EMAIL = "A user with this email already exists"


def get_user(db: Session, user_id: int) -> User | None:
    """Get a user by id, active or not."""
    return db.query(User).filter(User.id == user_id).first()


def get_user_or_404(db: Session, user_id: int) -> User:
    user = get_user(db, user_id)
    if not user:
        raise NotFoundError("User not found")
    return user


def get_user_by_email(db: Session, email: str) -> User | None:
    """Get a user by email, active or not."""
    return db.query(User).filter(User.email == normalize_email(email)).first()


def email_exists(db: Session, email: str, exclude_id: int | None = None) -> bool:
    """Check whether any account, active or inactive, already uses the email."""
    query = db.query(User.id).filter(User.email == normalize_email(email))
    if exclude_id is not None:
        query = query.filter(User.id != exclude_id)
    return db.query(query.exists()).scalar()


def list_users(
    db: Session,
    role: Role | None = None,
    include_inactive: bool = False,
    limit: int = 50,
    offset: int = 0,
) -> list[User]:
    """List users, newest first."""
    query = db.query(User)
    if not include_inactive:
        query = query.filter(User.is_active.is_(True))
    if role is not None:
        query = query.filter(User.role == role)
        return query.order_by(User.name).offset(offset).limit(limit).all()
    return query.order_by(User.created_at.desc(), User.id.desc()).offset(offset).limit(limit).all()


def create_user(
    db: Session,
    email: str,
    password: str,
    name: str,
    role: Role = Role.AUTHOR,
    avatar_url: str | None = None,
    is_active: bool = True,
) -> User:
    """Create a new user; the password is hashed once and never stored."""
    if email_exists(db, email):
        raise ConflictError(DUPLICATE_EMAIL)

    user = User(
        email=normalize_email(email),
        name=name.strip(),
        password_hash=get_password_hash(password),
        role=role,
        avatar_url=avatar_url,
        is_active=is_active,
    )
    db.add(user)
    commit_or_conflict(db, DUPLICATE_EMAIL)
    db.refresh(user)
    logger.info(f"Created user {user.id} with role {user.role.value}")
    return user


def update_user(
    db: Session,
    user: User,
    *,
    email: str | None = None,
    name: str | None = None,
    password: str | None = None,
    role: Role | None = None,
    avatar_url: str | None = None,
    is_active: bool | None = None,
) -> User:
    """Apply the given changes; omitted fields are left untouched."""
    if email is not None:
        if email_exists(db, email, exclude_id=user.id):
            raise ConflictError(DUPLICATE_EMAIL)
        user.email = normalize_email(email)
    if name is not None:
        if not name.strip():
            raise InvalidInputError("Name cannot be empty")
        user.name = name.strip()
    if password is not None:
        user.password_hash = get_password_hash(password)
    if role is not None:
        user.role = role
    if avatar_url is not None:
        user.avatar_url = avatar_url or None
    if is_active is not None:
        user.is_active = is_active

    commit_or_conflict(db, DUPLICATE_EMAIL)
    db.refresh(user)
    return user


def deactivate_user(db: Session, user: User) -> User:
    """Soft delete: keep the row, flip is_active off."""
    user.is_active = False
    db.commit()
    db.refresh(user)
    logger.info(f"Deactivated user {user.id}")
    return user


def hard_delete_user(db: Session, user: User) -> None:
    """Permanently remove the user together with their posts."""
    user_id = user.id
    db.delete(user)
    db.commit()
    logger.info(f"Permanently deleted user {user_id}")
