"""Unit tests for FastAPI error handlers."""

from __future__ import annotations

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from multi_model_advisor.api.error_handlers import (
    build_error_response,
    extract_error_details,
    get_status_code_for_error,
    register_exception_handlers,
)
from multi_model_advisor.core.exceptions import (
    AdvisorServiceError,
    BackendStatusError,
    BackendUnreachableError,
    ConfigurationError,
    InvalidRequestError,
    MalformedCatalogResponseError,
)


@pytest.fixture
def client() -> TestClient:
    """App whose routes raise each kind of error."""
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/unreachable")
    async def unreachable() -> None:
        raise BackendUnreachableError("down", backend_url="http://ollama:11434")

    @app.get("/invalid")
    async def invalid() -> None:
        raise InvalidRequestError("question is required", field="question")

    @app.get("/unexpected")
    async def unexpected() -> None:
        raise RuntimeError("kaboom")

    return TestClient(app, raise_server_exceptions=False)


class TestStatusCodes:
    """Exception type → HTTP status."""

    @pytest.mark.parametrize(
        ("error", "expected"),
        [
            (InvalidRequestError("x"), 400),
            (BackendStatusError("x"), 502),
            (MalformedCatalogResponseError("x"), 502),
            (BackendUnreachableError("x"), 503),
            (ConfigurationError("x"), 500),
            (AdvisorServiceError("x"), 500),
            (ValueError("x"), 500),
        ],
    )
    def test_mapping(self, error: Exception, expected: int) -> None:
        assert get_status_code_for_error(error) == expected


class TestErrorBody:
    """Error response schema."""

    def test_details_only_include_set_attributes(self) -> None:
        error = BackendStatusError("bad", status_code=500)

        assert extract_error_details(error) == {"status_code": 500}

    def test_build_error_response(self) -> None:
        response = build_error_response(InvalidRequestError("nope", field="question"))

        assert response.error.code == "INVALID_REQUEST"
        assert response.error.message == "nope"
        assert response.error.provider == "multi-model-advisor"
        assert response.error.details == {"field": "question"}


class TestRegisteredHandlers:
    """Handlers produce structured JSON bodies."""

    def test_retriable_error_has_retry_after(self, client: TestClient) -> None:
        response = client.get("/unreachable")

        assert response.status_code == 503
        assert response.headers["Retry-After"] == "2"
        assert response.json()["error"]["type"] == "retriable"
        assert response.json()["error"]["details"]["backend_url"] == "http://ollama:11434"

    def test_invalid_request(self, client: TestClient) -> None:
        response = client.get("/invalid")

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_REQUEST"

    def test_unexpected_error_is_500(self, client: TestClient) -> None:
        response = client.get("/unexpected")

        assert response.status_code == 500
        assert "kaboom" in response.json()["error"]["message"]
