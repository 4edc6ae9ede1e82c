"""Holiday, saint-day and commemorative-date catalog for Agenda Lite.

The catalog is read from YAML with three top-level lists: ``national``,
``commemorative`` and ``saint``. Saint days are stored as ``MM-DD`` and are
projected onto whichever year is displayed.
"""

from __future__ import annotations

import calendar
import logging
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import ValidationError

from .lite_models import CalendarFilterOptions, Holiday, HolidayType

logger = logging.getLogger(__name__)

DEFAULT_HOLIDAYS_PATH = Path(__file__).parent / "data" / "holidays.yaml"

_SECTION_TYPES: dict[str, HolidayType] = {
    "national": HolidayType.NATIONAL,
    "commemorative": HolidayType.COMMEMORATIVE,
    "saint": HolidayType.SAINT,
}


class HolidayCatalogError(Exception):
    """Raised when a holiday catalog file cannot be read or validated."""


class HolidayCatalog:
    """In-memory holiday lists with month and year views."""

    def __init__(
        self,
        national: Optional[list[Holiday]] = None,
        commemorative: Optional[list[Holiday]] = None,
        saint: Optional[list[Holiday]] = None,
    ):
        self.national = list(national or [])
        self.commemorative = list(commemorative or [])
        self.saint = list(saint or [])

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> HolidayCatalog:
        """Build a catalog from a parsed mapping.

        Raises:
            HolidayCatalogError: If a section is not a list or an entry is invalid
        """
        sections: dict[str, list[Holiday]] = {}
        for key, holiday_type in _SECTION_TYPES.items():
            raw_entries = data.get(key) or []
            if not isinstance(raw_entries, list):
                raise HolidayCatalogError(f"Holiday section {key!r} must be a list")
            try:
                sections[key] = [
                    Holiday(date=str(entry["date"]), name=str(entry["name"]), type=holiday_type)
                    for entry in raw_entries
                ]
            except (KeyError, TypeError, ValidationError) as e:
                raise HolidayCatalogError(f"Invalid entry in holiday section {key!r}: {e}") from e
        return cls(**sections)

    @classmethod
    def load(cls, path: Optional[str | Path] = None) -> HolidayCatalog:
        """Load a catalog from YAML (defaults to the bundled pt-BR data).

        Raises:
            HolidayCatalogError: If the file is missing or malformed
        """
        p = Path(path) if path else DEFAULT_HOLIDAYS_PATH
        logger.debug("Loading holiday catalog from %s", p)
        try:
            loaded = yaml.safe_load(p.read_text(encoding="utf-8"))
        except (OSError, yaml.YAMLError) as e:
            raise HolidayCatalogError(f"Unable to read holiday catalog {p}: {e}") from e

        if loaded is None:
            loaded = {}
        if not isinstance(loaded, dict):
            raise HolidayCatalogError(f"Holiday catalog {p} must contain a mapping at top level")

        catalog = cls.from_mapping(loaded)
        logger.debug(
            "Holiday catalog loaded: national=%d commemorative=%d saint=%d",
            len(catalog.national),
            len(catalog.commemorative),
            len(catalog.saint),
        )
        return catalog

    def holidays_by_date(
        self, year: int, filters: Optional[CalendarFilterOptions] = None
    ) -> dict[str, Holiday]:
        """One holiday per ``YYYY-MM-DD`` for ``year``.

        When dates collide, national holidays win over commemorative dates,
        which win over saint days.
        """
        filters = filters or CalendarFilterOptions()
        year_prefix = f"{year:04d}-"
        mapping: dict[str, Holiday] = {}

        if filters.show_saint_days:
            for saint in self.saint:
                projected = _project_saint(saint, year)
                if projected is not None:
                    mapping.setdefault(projected.date, projected)

        if filters.show_commemorative_dates:
            for holiday in self.commemorative:
                if holiday.date.startswith(year_prefix):
                    mapping[holiday.date] = holiday

        if filters.show_holidays:
            for holiday in self.national:
                if holiday.date.startswith(year_prefix):
                    mapping[holiday.date] = holiday

        return mapping

    def national_holidays_for_month(
        self, year: int, month: int, filters: Optional[CalendarFilterOptions] = None
    ) -> list[Holiday]:
        if filters is not None and not filters.show_holidays:
            return []
        return _dated_for_month(self.national, year, month)

    def commemorative_dates_for_month(
        self, year: int, month: int, filters: Optional[CalendarFilterOptions] = None
    ) -> list[Holiday]:
        if filters is not None and not filters.show_commemorative_dates:
            return []
        return _dated_for_month(self.commemorative, year, month)

    def saint_days_for_month(
        self, year: int, month: int, filters: Optional[CalendarFilterOptions] = None
    ) -> list[Holiday]:
        """Saint days of ``month`` projected onto ``year``, sorted by day."""
        if filters is not None and not filters.show_saint_days:
            return []
        projected = [_project_saint(saint, year) for saint in self.saint if saint.month == month]
        return sorted((h for h in projected if h is not None), key=lambda h: h.day)


def _dated_for_month(holidays: list[Holiday], year: int, month: int) -> list[Holiday]:
    return sorted(
        (h for h in holidays if h.year == year and h.month == month),
        key=lambda h: h.day,
    )


def _project_saint(saint: Holiday, year: int) -> Optional[Holiday]:
    # Feb 29 saint days only fall in leap years
    if saint.month == 2 and saint.day == 29 and not calendar.isleap(year):
        return None
    return saint.model_copy(update={"date": f"{year:04d}-{saint.month:02d}-{saint.day:02d}"})
