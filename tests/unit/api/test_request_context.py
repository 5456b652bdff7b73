"""Unit tests for the correlation ID middleware."""

import uuid

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.api.constants import CORRELATION_ID_HEADER
from src.api.middleware.request_context import RequestContextMiddleware
from src.core.context import RequestContext


@pytest.fixture
def client() -> TestClient:
    """Provide a client whose endpoint echoes the request context.

    Returns:
        TestClient: The client.
    """
    app = FastAPI()
    app.add_middleware(RequestContextMiddleware)

    @app.get("/context")
    async def context() -> dict[str, str | None]:
        return {
            "correlation_id": RequestContext.get_correlation_id(),
            "operation_id": RequestContext.get_operation_id(),
        }

    return TestClient(app)


@pytest.mark.unit
class TestRequestContextMiddleware:
    """Test correlation ID handling."""

    def test_uses_incoming_id(self, client: TestClient) -> None:
        """Test that a supplied correlation ID is kept and echoed."""
        response = client.get("/context", headers={CORRELATION_ID_HEADER: "abc-123"})

        assert response.json()["correlation_id"] == "abc-123"
        assert response.headers[CORRELATION_ID_HEADER] == "abc-123"

    def test_generates_id(self, client: TestClient) -> None:
        """Test that a correlation ID is generated when none is supplied."""
        response = client.get("/context")

        correlation_id = response.headers[CORRELATION_ID_HEADER]
        assert uuid.UUID(correlation_id).version == 4
        assert response.json()["correlation_id"] == correlation_id

    def test_starts_without_operation(self, client: TestClient) -> None:
        """Test that no operation id leaks in from earlier requests."""
        RequestContext.set_operation_id("stale")

        assert client.get("/context").json()["operation_id"] is None
