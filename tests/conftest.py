"""Root conftest.py for the SpecGate test suite.

This file contains project-wide fixtures and pytest configuration.
"""

from pathlib import Path

import pytest

FIXTURES_PATH = Path(__file__).parent / "fixtures"


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "unit: Unit tests that test individual components in isolation"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests that test multiple components"
    )


@pytest.fixture
def docs_path() -> Path:
    """Directory holding the API description fixtures.

    Returns:
        Path: The fixtures docs directory.
    """
    return FIXTURES_PATH / "docs"
