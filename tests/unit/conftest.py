"""Shared fixtures for unit tests."""

import os
from collections.abc import Callable, Generator
from typing import Any

import pytest
from pytest_mock import MockerFixture, MockType

from src.core.config import LogConfig, Settings, get_settings
from src.core.context import RequestContext
from src.core.error_context import _get_sensitive_fields
from src.descriptions.model import Description, Operation, Parameter, ParameterLocation, Path
from src.descriptions.schema import Schema


@pytest.fixture
def mock_settings(monkeypatch: pytest.MonkeyPatch) -> Settings:
    """Provide a real Settings object built from test environment values.

    Returns:
        Settings: Settings object with test defaults.
    """
    monkeypatch.setenv("APP_NAME", "TestApp")
    monkeypatch.setenv("APP_VERSION", "1.0.0")
    monkeypatch.setenv("ENVIRONMENT", "development")
    monkeypatch.setenv("DEBUG", "false")
    monkeypatch.setenv("API_HOST", "127.0.0.1")
    monkeypatch.setenv("API_PORT", "3000")
    return Settings()


@pytest.fixture
def mock_main_dependencies(
    mocker: MockerFixture,
    mock_settings: Settings,
) -> dict[str, MockType]:
    """Mock common main.py dependencies.

    Args:
        mocker: Pytest mocker fixture.
        mock_settings: Mock settings fixture.

    Returns:
        dict[str, MockType]: Dictionary of mocked dependencies.
    """
    mocks = {
        "get_settings": mocker.patch("main.get_settings"),
        "setup_logging": mocker.patch("main.setup_logging"),
        "logger": mocker.patch("main.logger"),
        "uvicorn_run": mocker.patch("uvicorn.run"),
    }
    mocks["get_settings"].return_value = mock_settings
    return mocks


@pytest.fixture(autouse=True)
def clean_lru_cache() -> Generator[None]:
    """Clear the LRU caches before and after each test to ensure isolation."""
    get_settings.cache_clear()
    _get_sensitive_fields.cache_clear()
    yield
    get_settings.cache_clear()
    _get_sensitive_fields.cache_clear()


@pytest.fixture(autouse=True)
def clean_env(
    monkeypatch: pytest.MonkeyPatch,
) -> Generator[pytest.MonkeyPatch]:
    """Backup and restore environment variables to prevent test interference.

    Args:
        monkeypatch: Pytest monkeypatch fixture.

    Returns:
        pytest.MonkeyPatch: The monkeypatch instance for env manipulation.
    """
    original_env = os.environ.copy()

    env_prefixes = [
        "APP_",
        "API_",
        "ENVIRONMENT",
        "DEBUG",
        "LOG_CONFIG__",
        "DOCUMENT_CONFIG__",
        "REQUEST_CONFIG__",
    ]
    for key in list(os.environ.keys()):
        if any(key.startswith(prefix) for prefix in env_prefixes):
            monkeypatch.delenv(key, raising=False)

    yield monkeypatch

    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture(autouse=True)
def clean_context() -> Generator[None]:
    """Clear the request context before and after each test."""
    RequestContext.clear()
    yield
    RequestContext.clear()


@pytest.fixture
def mock_get_settings(mocker: MockerFixture) -> MockType:
    """Mock get_settings with customized sensitive fields for error_context tests.

    Args:
        mocker: Pytest mocker fixture.

    Returns:
        MockType: Mock get_settings function.
    """
    mock_settings = mocker.Mock(spec=Settings)
    mock_log_config = mocker.Mock(spec=LogConfig)
    mock_log_config.sensitive_fields = ["ssn", "date_of_birth", "iban"]
    mock_settings.log_config = mock_log_config

    mock_get_settings_fn = mocker.patch("src.core.error_context.get_settings")
    mock_get_settings_fn.return_value = mock_settings

    _get_sensitive_fields.cache_clear()

    return mock_get_settings_fn


def _make_parameter(
    name: str,
    location: ParameterLocation,
    definition: dict[str, Any],
    *,
    required: bool = False,
    collection_format: str | None = None,
) -> Parameter:
    """Build a parameter from a JSON-schema definition."""
    return Parameter(
        name=name,
        location=location,
        schema=Schema.from_definition(definition),
        required=required,
        collection_format=collection_format,
    )


@pytest.fixture
def make_parameter() -> Callable[..., Parameter]:
    """Provide a factory for parameters built from JSON-schema definitions.

    Returns:
        Callable[..., Parameter]: The factory.
    """
    return _make_parameter


@pytest.fixture
def pets_operation() -> Operation:
    """An operation with one parameter per location.

    Returns:
        Operation: ``GET /pets/{petId}`` with path, query, header and body parameters.
    """
    return Operation.create(
        path="/pets/{petId}",
        method="get",
        operation_id="getPet",
        parameters=[
            _make_parameter("petId", ParameterLocation.PATH, {"type": "integer"}, required=True),
            _make_parameter("limit", ParameterLocation.QUERY, {"type": "integer", "default": 10}),
            _make_parameter("ratio", ParameterLocation.QUERY, {"type": "number"}),
            _make_parameter("verbose", ParameterLocation.QUERY, {"type": "boolean"}),
            _make_parameter("since", ParameterLocation.QUERY, {"type": "string", "format": "date-time"}),
            _make_parameter("X-Trace", ParameterLocation.HEADER, {"type": "string"}),
            _make_parameter(
                "tags",
                ParameterLocation.QUERY,
                {"type": "array", "items": {"type": "integer"}},
                collection_format="pipes",
            ),
            _make_parameter(
                "pet",
                ParameterLocation.BODY,
                {"type": "object", "properties": {"name": {"type": "string"}}},
            ),
        ],
    )


@pytest.fixture
def pets_description(pets_operation: Operation) -> Description:
    """A description holding the pets operation.

    Returns:
        Description: Registered under ``pets.yml``.
    """
    return Description(
        uri="pets.yml",
        paths={
            pets_operation.path: Path(
                pets_operation.path, {pets_operation.method: pets_operation}
            )
        },
        title="Pets",
        version="1.0.0",
    )
