"""Signed session tokens carrying a time-boxed claim set."""

from dataclasses import dataclass
from datetime import UTC, datetime

from jose import JWTError, jwt

from cms.config import get_settings
from cms.models.enums import Role

settings = get_settings()

# Tolerated drift between the clock that issued a token and the one verifying it
CLOCK_SKEW_SECONDS = 60


@dataclass(frozen=True)
class SessionClaim:
    """Decoded payload of a session token."""

    user_id: int
    email: str
    role: Role
    issued_at: datetime


def create_session_token(
    user_id: int, email: str, role: Role | str, now: datetime | None = None
) -> str:
    """Issue an HMAC-signed token for the given user."""
    issued_at = now or datetime.now(UTC)
    to_encode = {
        "sub": str(user_id),
        "email": email,
        "role": Role(role).value,
        "iat": int(issued_at.timestamp()),
    }
    return jwt.encode(to_encode, settings.session_secret, algorithm=settings.session_algorithm)


def verify_session_token(token: str, now: datetime | None = None) -> SessionClaim | None:
    """Decode a token and check its age.

    Returns None when the signature does not match, the claim set is
    malformed, or the token is older than the session TTL.
    """
    try:
        payload = jwt.decode(
            token,
            settings.session_secret,
            algorithms=[settings.session_algorithm],
            options={"verify_exp": False, "verify_iat": False},
        )
    except JWTError:
        return None

    try:
        user_id = int(payload["sub"])
        email = str(payload["email"])
        role = Role(payload["role"])
        issued_ts = int(payload["iat"])
    except (KeyError, TypeError, ValueError):
        return None

    current = now or datetime.now(UTC)
    age = int(current.timestamp()) - issued_ts
    if age > settings.session_ttl_seconds or age < -CLOCK_SKEW_SECONDS:
        return None

    return SessionClaim(
        user_id=user_id,
        email=email,
        role=role,
        issued_at=datetime.fromtimestamp(issued_ts, tz=UTC),
    )
