"""Application-level tests: health and error mapping."""

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from cms.database import get_db
from cms.main import app


def test_health_check(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_missing_schema_is_service_unavailable():
    """Test queries against an uninitialized database map to 503."""
    empty_engine = create_engine(
        "sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool
    )
    EmptySession = sessionmaker(bind=empty_engine)

    def override_get_db():
        session = EmptySession()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    try:
        with TestClient(app) as test_client:
            response = test_client.get("/api/v1/categories")
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 503
    assert response.json()["detail"].startswith("Database not initialized")


def test_not_found_uses_detail(client):
    response = client.get("/api/v1/categories/12345")
    assert response.status_code == 404
    assert response.json() == {"detail": "Category not found"}


def test_app_imports_with_all_routers():
    """Test the application module imports and registers every router."""
    import importlib

    main = importlib.import_module("cms.main")
    paths = {route.path for route in main.app.routes}
    assert "/api/v1/categories/tree" in paths
    assert "/api/v1/tags/unused" in paths
    assert "/health" in paths
