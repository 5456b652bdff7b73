"""Shared fixtures for integration tests.

Builds the application from the fixture descriptions with a handler per
operation that echoes the processed parameters.
"""

from collections.abc import AsyncGenerator, Callable, Generator
from pathlib import Path
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from httpx import ASGITransport, AsyncClient
from pytest_mock import MockerFixture
from starlette.responses import Response

from src.api.main import create_app
from src.core.config import DocumentConfig, RequestConfig, Settings, get_settings
from src.core.context import RequestContext
from src.request.message import ApiRequest


def list_pets(request: ApiRequest) -> dict[str, Any]:
    """Echo the listPets parameters."""
    return {
        "limit": request.get("limit"),
        "tags": request.get("tags"),
        "born_after": request.get("born-after"),
        "source": request.get("X-Request-Source"),
        "operation_id": request.meta.operation.operation_id if request.meta else None,
    }


def create_pet(request: ApiRequest) -> Any:  # noqa: ANN401
    """Echo the created pet."""
    return request.get("pet")


async def get_pet(request: ApiRequest) -> dict[str, Any]:
    """Echo the requested pet id."""
    return {"id": request.get("petId"), "verbose": request.get("verbose")}


def list_items(request: ApiRequest) -> dict[str, Any]:
    """Echo the inventory query."""
    return {"ids": request.get("ids"), "since": request.get("since")}


def replace_items(request: ApiRequest) -> Response:
    """Accept an inventory replacement."""
    return Response(status_code=204)


HANDLERS: dict[str, Callable[[ApiRequest], Any]] = {
    "listPets": list_pets,
    "createPet": create_pet,
    "getPetById": get_pet,
    "get_items": list_items,
    "replaceItems": replace_items,
}


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch) -> Generator[None]:
    """Run error handlers with development settings and a clean context."""
    monkeypatch.setenv("ENVIRONMENT", "development")
    get_settings.cache_clear()
    RequestContext.clear()
    yield
    get_settings.cache_clear()
    RequestContext.clear()


@pytest.fixture(autouse=True)
def no_logging_setup(mocker: MockerFixture) -> None:
    """Keep application factories from reconfiguring Loguru."""
    mocker.patch("src.api.main.setup_logging")


@pytest.fixture
def make_app(docs_path: Path) -> Callable[..., FastAPI]:
    """Provide a factory for applications over the fixture descriptions.

    Returns:
        Callable[..., FastAPI]: Factory taking RequestConfig overrides.
    """

    def factory(**request_config: Any) -> FastAPI:
        settings = Settings(
            document_config=DocumentConfig(
                base_path=docs_path, documents=["petstore.yml", "inventory.yml"]
            ),
            request_config=RequestConfig(**request_config),
        )
        return create_app(settings, HANDLERS)

    return factory


@pytest.fixture
def client(make_app: Callable[..., FastAPI]) -> Generator[TestClient]:
    """Provide a client for the default application.

    Yields:
        TestClient: The client.
    """
    with TestClient(make_app()) as test_client:
        yield test_client


@pytest.fixture
async def async_client(make_app: Callable[..., FastAPI]) -> AsyncGenerator[AsyncClient]:
    """Provide an async client for the default application.

    Yields:
        AsyncClient: The client.
    """
    async with AsyncClient(
        transport=ASGITransport(app=make_app()), base_url="http://test"
    ) as test_client:
        yield test_client
