"""Authentication service for password digests and credential checks."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime

from passlib.context import CryptContext
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from cms.models.enums import Role
from cms.models.user import User

logger = logging.getLogger(__name__)

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


@dataclass(frozen=True)
class AuthenticatedUser:
    """Password-free view of a user, used as the request principal."""

    id: int
    email: str
    name: str
    role: Role
    avatar_url: str | None = None

    @classmethod
    def from_user(cls, user: User) -> "AuthenticatedUser":
        return cls(
            id=user.id,
            email=user.email,
            name=user.name,
            role=Role(user.role),
            avatar_url=user.avatar_url,
        )


def normalize_email(email: str) -> str:
    """Emails are compared and stored stripped and lowercased."""
    return email.strip().lower()


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Hash a password."""
    return pwd_context.hash(password)


def authenticate_user(db: Session, email: str, password: str) -> AuthenticatedUser | None:
    """Authenticate a user by email and password.

    Unknown emails, inactive accounts, wrong passwords and lookup failures all
    return None so callers cannot tell them apart.
    """
    try:
        user = (
            db.query(User)
            .filter(User.email == normalize_email(email), User.is_active.is_(True))
            .first()
        )
        if not user:
            return None
        if not verify_password(password, user.password_hash):
            return None
    except (SQLAlchemyError, ValueError) as e:
        logger.error(f"Login lookup failed: {e}")
        return None

    principal = AuthenticatedUser.from_user(user)
    record_last_login(db, user)
    return principal


def record_last_login(db: Session, user: User) -> None:
    """Store the login time; a failure here never fails the login."""
    try:
        user.last_login = datetime.now(UTC)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.warning(f"Could not record last login for user {user.id}: {e}")


def get_active_user(db: Session, user_id: int) -> AuthenticatedUser | None:
    """Look up a user by id; deactivated accounts resolve to None."""
    try:
        user = db.query(User).filter(User.id == user_id, User.is_active.is_(True)).first()
    except SQLAlchemyError as e:
        logger.error(f"User lookup failed for id {user_id}: {e}")
        return None
    if not user:
        return None
    return AuthenticatedUser.from_user(user)
