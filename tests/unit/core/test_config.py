"""Unit tests for the configuration module."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from src.core.config import DocumentConfig, RequestConfig, Settings, get_settings


@pytest.mark.unit
class TestSettingsDefaults:
    """Test default configuration values."""

    def test_defaults(self) -> None:
        """Test application and nested defaults."""
        settings = Settings()

        assert settings.app_name == "SpecGate"
        assert settings.environment == "development"
        assert settings.document_config == DocumentConfig()
        assert settings.document_config.base_path == Path("docs")
        assert settings.document_config.documents == []
        assert settings.document_config.cache_enabled is True
        assert settings.document_config.handlers is None
        assert settings.request_config == RequestConfig()
        assert settings.request_config.hydrate_bodies is False
        assert settings.request_config.error_strategy == "handle"

    def test_get_settings_is_cached(self) -> None:
        """Test that get_settings returns the same instance."""
        assert get_settings() is get_settings()


@pytest.mark.unit
class TestSettingsFromEnvironment:
    """Test environment variable overrides."""

    def test_nested_values(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test the double-underscore nested delimiter."""
        monkeypatch.setenv("DOCUMENT_CONFIG__BASE_PATH", "/srv/docs")
        monkeypatch.setenv("DOCUMENT_CONFIG__DOCUMENTS", '["petstore.yml", "orders.json"]')
        monkeypatch.setenv("DOCUMENT_CONFIG__CACHE_ENABLED", "false")
        monkeypatch.setenv("REQUEST_CONFIG__HYDRATE_BODIES", "true")
        monkeypatch.setenv("REQUEST_CONFIG__ERROR_STRATEGY", "fallthrough")

        settings = Settings()

        assert settings.document_config.base_path == Path("/srv/docs")
        assert settings.document_config.documents == ["petstore.yml", "orders.json"]
        assert settings.document_config.cache_enabled is False
        assert settings.request_config.hydrate_bodies is True
        assert settings.request_config.error_strategy == "fallthrough"

    def test_public_document_location(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test the published document location used for parameter links."""
        monkeypatch.setenv("DOCUMENT_CONFIG__PUBLIC__BASE_URL", "/specs")
        monkeypatch.setenv("DOCUMENT_CONFIG__PUBLIC__HOST", "api.example.com")

        public = Settings().document_config.public

        assert public.base_url == "/specs"
        assert public.host == "api.example.com"
        assert public.scheme is None

    def test_invalid_error_strategy(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that unknown error strategies are rejected."""
        monkeypatch.setenv("REQUEST_CONFIG__ERROR_STRATEGY", "ignore")

        with pytest.raises(ValidationError):
            Settings()

    def test_empty_urls_become_none(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that empty doc URLs disable the endpoints."""
        monkeypatch.setenv("DOCS_URL", "")
        monkeypatch.setenv("REDOC_URL", "")

        settings = Settings()

        assert settings.docs_url is None
        assert settings.redoc_url is None


@pytest.mark.unit
class TestFormatterDetection:
    """Test log formatter auto-detection."""

    @pytest.fixture(autouse=True)
    def no_cloud(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Remove cloud platform markers."""
        for key in ("K_SERVICE", "AWS_EXECUTION_ENV"):
            monkeypatch.delenv(key, raising=False)

    @pytest.mark.parametrize(
        ("environment", "expected"),
        [("development", "console"), ("staging", "json"), ("production", "json")],
    )
    def test_by_environment(
        self, monkeypatch: pytest.MonkeyPatch, environment: str, expected: str
    ) -> None:
        """Test the formatter chosen per environment."""
        monkeypatch.setenv("ENVIRONMENT", environment)

        assert Settings().log_config.log_formatter_type == expected

    @pytest.mark.parametrize("variable", ["K_SERVICE", "AWS_EXECUTION_ENV"])
    def test_cloud_platforms_use_json(
        self, monkeypatch: pytest.MonkeyPatch, variable: str
    ) -> None:
        """Test that managed platforms get structured logs even in development."""
        monkeypatch.setenv(variable, "service")

        assert Settings().log_config.log_formatter_type == "json"

    def test_explicit_formatter_wins(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that an explicit formatter is kept."""
        monkeypatch.setenv("ENVIRONMENT", "production")
        monkeypatch.setenv("LOG_CONFIG__LOG_FORMATTER_TYPE", "console")

        assert Settings().log_config.log_formatter_type == "console"
