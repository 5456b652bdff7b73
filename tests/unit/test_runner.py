"""Unit tests for the command-line entry point."""

import pytest
from pytest_mock import MockType

from main import main


@pytest.mark.unit
class TestMain:
    """Test starting uvicorn."""

    def test_runs_app_factory(
        self,
        mock_main_dependencies: dict[str, MockType],
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Test that uvicorn serves the app factory with the configured address."""
        monkeypatch.delenv("PORT", raising=False)

        main()

        mock_main_dependencies["setup_logging"].assert_called_once()
        mock_main_dependencies["uvicorn_run"].assert_called_once()
        args, kwargs = mock_main_dependencies["uvicorn_run"].call_args
        assert args == ("src.api.main:create_app",)
        assert kwargs["factory"] is True
        assert kwargs["host"] == "127.0.0.1"
        assert kwargs["port"] == 3000
        assert kwargs["reload"] is False

    def test_port_from_environment(
        self,
        mock_main_dependencies: dict[str, MockType],
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Test that PORT overrides the configured port."""
        monkeypatch.setenv("PORT", "8080")

        main()

        assert mock_main_dependencies["uvicorn_run"].call_args.kwargs["port"] == 8080

    def test_intercepts_uvicorn_logging(
        self, mock_main_dependencies: dict[str, MockType]
    ) -> None:
        """Test that uvicorn logs are routed through the intercept handler."""
        main()

        log_config = mock_main_dependencies["uvicorn_run"].call_args.kwargs["log_config"]
        assert log_config["handlers"]["default"]["class"] == (
            "src.core.logging.InterceptHandler"
        )
