"""
Tests for the Notification service application.
"""

from typing import Any, Dict

import pytest
from unittest.mock import AsyncMock, patch
from fastapi import Depends
from fastapi.testclient import TestClient

from notification_shared.config import ServiceConfig
from notification_shared.errors import MissingConfigurationError, SecretFetchError
from notification_shared.test_helpers import (
    FakeMongoClient,
    FakeParameterStore,
    MOCK_DATABASE_NAME,
    MOCK_DB_NAME_PATH,
    MOCK_ISSUER,
    MOCK_JWT_SECRET_PATH,
    isolate_aws_environment,
    mock_token_generator,
)
from service_notification.app.dependencies import get_current_claims, get_database
from service_notification.app.main import create_app


def add_downstream_routes(app):
    """Routes standing in for the handlers that consume the wired services."""

    @app.get("/whoami")
    async def whoami(claims: Dict[str, Any] = Depends(get_current_claims)):
        return {"sub": claims["sub"]}

    @app.get("/database")
    async def database(db: Any = Depends(get_database)):
        return {"name": db.name}

    return app


@pytest.fixture
def app(config, parameter_store):
    """Create FastAPI app instance."""
    return add_downstream_routes(create_app(config, parameter_store, client_factory=FakeMongoClient))


@pytest.fixture
def client(app):
    """Create test client with startup and shutdown."""
    with TestClient(app) as test_client:
        yield test_client


def test_root_endpoint(client):
    """Test root endpoint."""
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["service"] == "notification"
    assert data["version"] == "1.0.0"


def test_startup_registers_container(client, app, parameter_store):
    container = app.state.container

    assert container.authenticator is not None
    assert container.database is not None
    assert len(parameter_store.calls) == 3


def test_health_check_pings_mongodb(client, app):
    """Test health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["service"] == "notification"
    assert data["status"] == "ok"
    assert data["dependencies"] == {"mongodb": "ok"}
    app.state.container.database.get_database().command.assert_awaited_with("ping")


def test_health_check_reports_mongodb_error(client, app):
    from pymongo.errors import ServerSelectionTimeoutError

    app.state.container.database.get_database().command = AsyncMock(
        side_effect=ServerSelectionTimeoutError("no servers")
    )

    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["dependencies"] == {"mongodb": "error"}


def test_authenticated_request(client):
    token = mock_token_generator.generate_access_token(sub="user-99")

    response = client.get("/whoami", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 200
    assert response.json() == {"sub": "user-99"}


def test_missing_token_challenges(client):
    response = client.get("/whoami")

    assert response.status_code == 401
    assert response.headers["WWW-Authenticate"] == "Bearer"
    assert response.json()["code"] == "AUTHENTICATION_ERROR"


def test_expired_token_rejected(client):
    token = mock_token_generator.generate_access_token(expires_in=-60)

    response = client.get("/whoami", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401
    assert response.json()["message"] == "Token has expired"


def test_database_dependency(client):
    response = client.get("/database")

    assert response.status_code == 200
    assert response.json() == {"name": MOCK_DATABASE_NAME}


def test_request_id_echoed(client):
    response = client.get("/", headers={"X-Request-ID": "req-abc"})

    assert response.headers["X-Request-ID"] == "req-abc"


def test_request_id_generated(client):
    response = client.get("/")

    assert response.headers["X-Request-ID"]


def test_metrics_endpoint(client):
    client.get("/")

    response = client.get("/metrics")

    assert response.status_code == 200
    assert "http_requests_total" in response.text


def test_shutdown_closes_mongo_client(app):
    with TestClient(app):
        mongo_client = app.state.container.database.client

    mongo_client.close.assert_awaited_once()


def test_secret_fetch_failure_aborts_startup(config):
    store = FakeParameterStore(failing=(MOCK_DB_NAME_PATH,))
    app = create_app(config, store, client_factory=FakeMongoClient)

    with pytest.raises(SecretFetchError) as exc_info:
        with TestClient(app):
            pass

    assert exc_info.value.parameter_name == MOCK_DB_NAME_PATH
    assert getattr(app.state, "container", None) is None


def test_missing_configuration_aborts_before_fetch(config_values):
    config_values["jwt_settings"] = {"issuer": MOCK_ISSUER, "audience": None}
    store = FakeParameterStore()
    app = create_app(ServiceConfig(**config_values), store, client_factory=FakeMongoClient)

    with pytest.raises(MissingConfigurationError) as exc_info:
        with TestClient(app):
            pass

    assert exc_info.value.missing_keys == ["JwtSettings:Audience"]
    assert store.calls == []
    assert getattr(app.state, "container", None) is None


def test_missing_configuration_wins_over_aws_setup(tmp_path, monkeypatch):
    isolate_aws_environment(monkeypatch, tmp_path)
    app = create_app(ServiceConfig(), client_factory=FakeMongoClient)

    with pytest.raises(MissingConfigurationError):
        with TestClient(app):
            pass

    assert getattr(app.state, "container", None) is None


def test_unusable_aws_setup_aborts_with_secret_fetch_error(config_values, tmp_path, monkeypatch):
    isolate_aws_environment(monkeypatch, tmp_path)
    config_values["aws"]["region"] = None
    app = create_app(ServiceConfig(**config_values), client_factory=FakeMongoClient)

    with pytest.raises(SecretFetchError) as exc_info:
        with TestClient(app):
            pass

    assert exc_info.value.parameter_name == MOCK_JWT_SECRET_PATH
    assert getattr(app.state, "container", None) is None


def test_docs_available_in_development(config_values, parameter_store):
    config_values["env"] = "development"
    app = create_app(ServiceConfig(**config_values), parameter_store, client_factory=FakeMongoClient)

    with TestClient(app) as client:
        assert client.get("/docs").status_code == 200


def test_docs_hidden_outside_development(config_values, parameter_store):
    config_values["env"] = "production"
    app = create_app(ServiceConfig(**config_values), parameter_store, client_factory=FakeMongoClient)

    with TestClient(app) as client:
        assert client.get("/docs").status_code == 404
        assert client.get("/openapi.json").status_code == 404


def test_https_redirect(config_values, parameter_store):
    config_values["https_redirect"] = True
    app = create_app(ServiceConfig(**config_values), parameter_store, client_factory=FakeMongoClient)

    with TestClient(app) as client:
        response = client.get("/", follow_redirects=False)

    assert response.status_code == 307
    assert response.headers["location"].startswith("https://")


def test_dependencies_unavailable_before_startup(app):
    client = TestClient(app)

    response = client.get("/database")

    assert response.status_code == 503


def test_request_context_cleared_after_unhandled_error(app):
    @app.get("/boom")
    async def boom():
        raise RuntimeError("boom")

    with patch("notification_shared.base_service.clear_context") as clear_context:
        with TestClient(app, raise_server_exceptions=False) as client:
            response = client.get("/boom")

    assert response.status_code == 500
    assert response.json()["code"] == "INTERNAL_ERROR"
    clear_context.assert_called_once()
