from collections.abc import Generator
from datetime import date
from types import SimpleNamespace
from typing import Any, Callable

import pytest

from agenda_lite.lite_models import Activity


@pytest.fixture
def simple_settings() -> SimpleNamespace:
    """Lightweight settings object used across lite tests.

    Fields:
      - max_iterations: expansion iteration ceiling
      - enable_expansion: expand recurring activities
    """
    return SimpleNamespace(
        max_iterations=700,
        enable_expansion=True,
    )


@pytest.fixture
def make_activity() -> Callable[..., Activity]:
    """Factory for activities with sensible defaults."""

    def _make(
        activity_id: str = "act-1",
        day: date = date(2024, 1, 15),
        recurrence_rule: str | None = None,
        **kwargs: Any,
    ) -> Activity:
        data: dict[str, Any] = {
            "id": activity_id,
            "title": kwargs.pop("title", f"Activity {activity_id}"),
            "date": day,
            "recurrence_rule": recurrence_rule,
        }
        data.update(kwargs)
        return Activity(**data)

    return _make


@pytest.fixture(autouse=True)
def reset_default_expander() -> Generator[None, Any, None]:
    """Reset the shared expander between tests to prevent state pollution.

    The global _default_expander singleton in lite_rrule_expander keeps the
    settings it was first created with.
    """
    yield
    import agenda_lite.lite_rrule_expander

    agenda_lite.lite_rrule_expander._default_expander = None


@pytest.fixture(autouse=True)
def clean_test_environment(monkeypatch: Any) -> Generator[None, Any, None]:
    """Clear AGENDA_* environment variables before each test."""
    for name in (
        "AGENDA_DEBUG",
        "AGENDA_LOG_LEVEL",
        "AGENDA_MAX_ITERATIONS",
        "AGENDA_HOLIDAYS_PATH",
    ):
        monkeypatch.delenv(name, raising=False)
    yield
