"""FastAPI dependencies for the request guard and services.

Every protected request runs the same sequential pipeline: extract a token
(cookie first, then bearer header), verify it, resolve the live user, and,
when the route names one, check the required role. Nothing is cached between
requests.
"""

from collections.abc import Callable
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from cms.config import get_settings
from cms.database import get_db
from cms.models.enums import Role
from cms.services.auth import AuthenticatedUser, get_active_user
from cms.services.categories import CategoryService
from cms.services.permissions import has_role
from cms.services.posts import PostService
from cms.services.settings_store import SettingsStore
from cms.services.tags import TagService
from cms.services.tokens import verify_session_token

settings = get_settings()

security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_session_token(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> str | None:
    """Token from the session cookie, falling back to the Authorization header."""
    token = request.cookies.get(settings.session_cookie_name)
    if not token and credentials is not None:
        token = credentials.credentials
    return token or None


def get_current_user(
    token: Annotated[str | None, Depends(get_session_token)],
    db: Annotated[Session, Depends(get_db)],
) -> AuthenticatedUser:
    """Resolve the authenticated principal or fail with 401."""
    if token is None:
        raise _unauthorized("Authentication required")

    claim = verify_session_token(token)
    if claim is None:
        raise _unauthorized("Invalid or expired token")

    user = get_active_user(db, claim.user_id)
    if user is None:
        raise _unauthorized("User not found")

    return user


def get_optional_user(
    token: Annotated[str | None, Depends(get_session_token)],
    db: Annotated[Session, Depends(get_db)],
) -> AuthenticatedUser | None:
    """Like get_current_user, but anonymous or invalid sessions resolve to None."""
    if token is None:
        return None
    claim = verify_session_token(token)
    if claim is None:
        return None
    return get_active_user(db, claim.user_id)


def require_role(required: Role) -> Callable[..., AuthenticatedUser]:
    """Build a dependency admitting only users at or above ``required``."""

    def dependency(
        current_user: Annotated[AuthenticatedUser, Depends(get_current_user)],
    ) -> AuthenticatedUser:
        if not has_role(current_user, required):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Insufficient permissions",
            )
        return current_user

    return dependency


CurrentUser = Annotated[AuthenticatedUser, Depends(get_current_user)]
OptionalUser = Annotated[AuthenticatedUser | None, Depends(get_optional_user)]
AuthorUser = Annotated[AuthenticatedUser, Depends(require_role(Role.AUTHOR))]
EditorUser = Annotated[AuthenticatedUser, Depends(require_role(Role.EDITOR))]
AdminUser = Annotated[AuthenticatedUser, Depends(require_role(Role.ADMIN))]


def get_category_service(
    db: Annotated[Session, Depends(get_db)],
) -> CategoryService:
    """Get category service with dependencies."""
    return CategoryService(db)


def get_tag_service(
    db: Annotated[Session, Depends(get_db)],
) -> TagService:
    """Get tag service with dependencies."""
    return TagService(db)


def get_settings_store(
    db: Annotated[Session, Depends(get_db)],
) -> SettingsStore:
    """Get settings store with dependencies."""
    return SettingsStore(db)


def get_post_service(
    db: Annotated[Session, Depends(get_db)],
) -> PostService:
    """Get post service with dependencies."""
    return PostService(db)
