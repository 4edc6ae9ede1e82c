"""Shared pytest configuration for agenda_lite tests."""

import logging
from typing import Any

import pytest

from agenda_lite.lite_logging import LITE_MODULES, SUPPRESSED_LOGGERS


@pytest.fixture(autouse=True)
def restore_logging_levels() -> Any:
    """Restore logger levels changed by logging configuration tests."""
    names = ["", *LITE_MODULES, *SUPPRESSED_LOGGERS]
    saved = {name: logging.getLogger(name).level for name in names}
    yield
    for name, level in saved.items():
        logging.getLogger(name).setLevel(level)


def pytest_configure(config: Any) -> None:
    """Configure pytest with markers."""
    config.addinivalue_line("markers", "unit: Fast unit tests")
    config.addinivalue_line("markers", "critical_path: Core functionality tests")
    config.addinivalue_line("markers", "smoke: Basic smoke tests")
