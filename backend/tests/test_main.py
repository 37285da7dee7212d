"""Tests for FastAPI app entry point."""
from fastapi.testclient import TestClient


def test_health_endpoint_returns_200() -> None:
    """Health check endpoint should return HTTP 200."""
    from pixcraft.main import app
    client = TestClient(app)
    response = client.get("/health")
    assert response.status_code == 200


def test_health_endpoint_returns_status_ok() -> None:
    """Health check response should contain status=ok."""
    from pixcraft.main import app
    client = TestClient(app)
    data = client.get("/health").json()
    assert data["status"] == "ok"
    assert data["version"] == "0.1.0"


def test_health_reports_uninitialized_services() -> None:
    """Without startup, every service is reported unavailable."""
    from pixcraft.main import app
    client = TestClient(app)
    data = client.get("/health").json()
    assert data["services"] == {"generation": "unavailable", "upload": "unavailable", "auth": "unavailable"}


def test_health_reports_initialized_services() -> None:
    from pixcraft.main import app
    app.state.generation_service = object()
    try:
        data = TestClient(app).get("/health").json()
    finally:
        del app.state.generation_service
    assert data["services"]["generation"] == "ok"


def test_app_has_correct_title() -> None:
    """FastAPI app should have the project title."""
    from pixcraft.main import app
    assert app.title == "PixCraft Backend"


def test_app_has_cors_middleware() -> None:
    """App should allow requests from frontend origin."""
    from pixcraft.main import app
    from starlette.middleware.cors import CORSMiddleware
    middleware_classes = [m.cls for m in app.user_middleware]
    assert CORSMiddleware in middleware_classes


def test_validation_error_returns_400() -> None:
    """Malformed bodies are reported as invalid-argument."""
    from pixcraft.api.generation import get_current_uid, get_generation_service
    from pixcraft.main import app
    app.dependency_overrides[get_current_uid] = lambda: "u1"
    app.dependency_overrides[get_generation_service] = lambda: object()
    try:
        client = TestClient(app)
        response = client.post("/api/generations", json={"userId": "u1"})
    finally:
        app.dependency_overrides.clear()
    assert response.status_code == 400
    assert response.json()["detail"] == "Missing or invalid request fields"


def test_lifespan_degrades_when_clients_fail(monkeypatch) -> None:
    """Startup failures leave the app running with services unavailable."""
    from pixcraft.main import app
    from pixcraft.services import storage

    def _boom(*args, **kwargs):
        raise RuntimeError("no credentials")

    monkeypatch.setattr(storage, "StorageService", _boom)
    with TestClient(app) as client:
        data = client.get("/health").json()
    assert data["services"]["generation"] == "unavailable"
