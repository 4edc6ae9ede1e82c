"""Month and day views over a snapshot of activities."""

import logging
from datetime import date
from typing import Iterable, Optional

from pydantic import BaseModel, Field

from .lite_datetime_utils import day_bounds, month_bounds
from .lite_models import Activity, CalendarFilterOptions, DayEventInfo, Occurrence
from .lite_rrule_expander import LiteRRuleExpander, get_expander

logger = logging.getLogger(__name__)

MAX_DAY_COLORS = 3


class ActivityInstance(BaseModel):
    """An activity placed on one of its occurrence dates."""

    activity: Activity = Field(..., description="Source activity")
    occurrence: Occurrence = Field(..., description="Concrete occurrence")

    @property
    def date(self) -> date:
        return self.occurrence.date

    @property
    def instance_id(self) -> str:
        """Activity ID for the anchor, ``<id>-recur-<YYYY-MM-DD>`` for repeats."""
        if self.occurrence.is_anchor:
            return self.activity.id
        return f"{self.activity.id}-recur-{self.date.isoformat()}"


def events_by_date(
    activities: Iterable[Activity],
    year: int,
    month: int,
    filters: Optional[CalendarFilterOptions] = None,
    expander: Optional[LiteRRuleExpander] = None,
) -> dict[str, DayEventInfo]:
    """Per-day markers for a displayed month, keyed by ``YYYY-MM-DD``.

    Args:
        activities: Activity snapshot (not mutated)
        year: Displayed year
        month: Displayed month (1-12)
        filters: Visibility toggles; events and tasks can be hidden
        expander: Expander to use (defaults to the shared instance)

    Returns:
        Mapping of day to colours (up to three distinct) and occurrence count
    """
    filters = filters or CalendarFilterOptions()
    expander = expander or get_expander()
    window_start, window_end = month_bounds(year, month)
    mapping: dict[str, DayEventInfo] = {}

    for activity in activities:
        if not filters.shows_activity(activity):
            continue
        result = expander.expand_activity(activity, window_start, window_end)
        for occurrence in result.occurrences:
            info = mapping.setdefault(occurrence.date.isoformat(), DayEventInfo())
            if activity.category_color not in info.colors and len(info.colors) < MAX_DAY_COLORS:
                info.colors.append(activity.category_color)
            info.count += 1

    logger.debug("events_by_date %04d-%02d: %d marked days", year, month, len(mapping))
    return mapping


def activities_for_date(
    activities: Iterable[Activity],
    day: date,
    filters: Optional[CalendarFilterOptions] = None,
    expander: Optional[LiteRRuleExpander] = None,
) -> list[ActivityInstance]:
    """Activities occurring on ``day``, all-day first, then by start time."""
    filters = filters or CalendarFilterOptions()
    expander = expander or get_expander()
    window_start, window_end = day_bounds(day)
    instances: list[ActivityInstance] = []

    for activity in activities:
        if not filters.shows_activity(activity):
            continue
        result = expander.expand_activity(activity, window_start, window_end)
        instances.extend(
            ActivityInstance(activity=activity, occurrence=occurrence)
            for occurrence in result.occurrences
        )

    return sorted(instances, key=lambda inst: inst.activity.sort_key)
