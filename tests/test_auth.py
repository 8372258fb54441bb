"""Authentication and request guard tests."""

from datetime import UTC, datetime, timedelta

from cms.config import get_settings
from cms.models.enums import Role, SettingType
from cms.models.user import User
from cms.services.auth import authenticate_user, get_active_user
from cms.services.settings_store import SettingsStore
from cms.services.tokens import create_session_token
from cms.services.users import create_user, deactivate_user

COOKIE_NAME = get_settings().session_cookie_name
PASSWORD = "secret-pass"


def login(client, headers):
    return client.post(
        "/api/v1/auth/login", json={"email": headers.email, "password": headers.password}
    )


def test_login(client, author_headers):
    """Test login returns a token, the user and sets the session cookie."""
    response = login(client, author_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["access_token"]
    assert data["user"]["email"] == author_headers.email
    assert "password_hash" not in data["user"]

    set_cookie = response.headers["set-cookie"]
    assert f"{COOKIE_NAME}=" in set_cookie
    assert "HttpOnly" in set_cookie
    assert "samesite=lax" in set_cookie.lower()
    assert "Max-Age=86400" in set_cookie


def test_login_normalizes_email(client, author_headers):
    """Test email lookup ignores case and surrounding spaces."""
    response = client.post(
        "/api/v1/auth/login",
        json={"email": f"  {author_headers.email.upper()}", "password": author_headers.password},
    )
    assert response.status_code == 200


def test_login_failures_are_indistinguishable(client, author_headers):
    """Test wrong password and unknown email produce the same response."""
    wrong_password = client.post(
        "/api/v1/auth/login", json={"email": author_headers.email, "password": "wrongpass"}
    )
    unknown_email = client.post(
        "/api/v1/auth/login", json={"email": "nobody@example.com", "password": "wrongpass"}
    )
    assert wrong_password.status_code == 401
    assert unknown_email.status_code == 401
    assert wrong_password.json() == unknown_email.json()


def test_login_records_last_login(db, author_headers):
    """Test a successful login stamps last_login."""
    principal = authenticate_user(db, author_headers.email, author_headers.password)
    assert principal is not None
    assert principal.id == author_headers.user_id

    user = db.query(User).filter(User.id == author_headers.user_id).first()
    assert user.last_login is not None


def test_login_rejects_deactivated_user(db):
    """Test a deactivated account can no longer log in."""
    user = create_user(db, "gone@example.com", PASSWORD, "Gone")
    deactivate_user(db, user)

    assert authenticate_user(db, "gone@example.com", PASSWORD) is None
    assert get_active_user(db, user.id) is None


def test_me_with_bearer_header(client, editor_headers):
    """Test /me resolves the principal from the Authorization header."""
    response = client.get("/api/v1/auth/me", headers=editor_headers)
    assert response.status_code == 200
    assert response.json()["email"] == editor_headers.email
    assert response.json()["role"] == "editor"


def test_me_with_cookie(client, author_headers):
    """Test the cookie set at login authenticates later requests."""
    login(client, author_headers)

    response = client.get("/api/v1/auth/me")
    assert response.status_code == 200
    assert response.json()["id"] == author_headers.user_id


def test_me_requires_token(client):
    """Test a request without any token is rejected."""
    response = client.get("/api/v1/auth/me")
    assert response.status_code == 401
    assert response.json()["detail"] == "Authentication required"


def test_me_rejects_invalid_token(client):
    """Test a garbage token is rejected."""
    response = client.get("/api/v1/auth/me", headers={"Authorization": "Bearer garbage"})
    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid or expired token"


def test_me_rejects_expired_token(client, author_headers):
    """Test a token older than the TTL is rejected."""
    issued = datetime.now(UTC) - timedelta(hours=25)
    token = create_session_token(
        author_headers.user_id, author_headers.email, Role.AUTHOR, now=issued
    )

    response = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid or expired token"


def test_me_rejects_deactivated_user(client, db):
    """Test a still-valid token stops working once its user is deactivated."""
    user = create_user(db, "left@example.com", PASSWORD, "Left")
    token = create_session_token(user.id, user.email, user.role)
    deactivate_user(db, user)

    response = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401
    assert response.json()["detail"] == "User not found"


def test_role_comes_from_live_user(client, db):
    """Test a demoted user loses access even with a token claiming the old role."""
    user = create_user(db, "demoted@example.com", PASSWORD, "Demoted", role=Role.ADMIN)
    token = create_session_token(user.id, user.email, Role.ADMIN)
    user.role = Role.AUTHOR
    db.commit()

    response = client.get("/api/v1/users", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 403
    assert response.json()["detail"] == "Insufficient permissions"


def test_logout_clears_cookie(client, author_headers):
    """Test logout expires the cookie and later requests are anonymous."""
    login(client, author_headers)

    response = client.post("/api/v1/auth/logout")
    assert response.status_code == 200
    set_cookie = response.headers["set-cookie"]
    assert f"{COOKIE_NAME}=" in set_cookie
    assert "Max-Age=0" in set_cookie

    client.cookies.clear()
    assert client.get("/api/v1/auth/me").status_code == 401


def test_logout_without_session(client):
    """Test logout succeeds even when nobody is logged in."""
    response = client.post("/api/v1/auth/logout")
    assert response.status_code == 200


def test_register_disabled_by_default(client):
    """Test registration is refused unless the setting allows it."""
    response = client.post(
        "/api/v1/auth/register",
        json={"email": "new@example.com", "password": "password123", "name": "New"},
    )
    assert response.status_code == 403


def test_register_creates_author(client, db):
    """Test self-registration creates an author account."""
    SettingsStore(db).set("allow_registration", True, SettingType.BOOLEAN)

    response = client.post(
        "/api/v1/auth/register",
        json={"email": "New@Example.com", "password": "password123", "name": "New"},
    )
    assert response.status_code == 201
    assert response.json()["email"] == "new@example.com"
    assert response.json()["role"] == "author"

    duplicate = client.post(
        "/api/v1/auth/register",
        json={"email": "new@example.com", "password": "password123", "name": "Again"},
    )
    assert duplicate.status_code == 409
