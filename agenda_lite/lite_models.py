"""Data models for activities and recurrence - Agenda Lite version."""

from datetime import date, datetime, time
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from .lite_datetime_utils import parse_time_of_day

# Alias so models can expose a field named ``date``
DateType = date


class Frequency(str, Enum):
    """Supported recurrence frequencies."""

    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"
    YEARLY = "YEARLY"


class RecurrenceOption(str, Enum):
    """Named shorthand rules stored in place of a structured RRULE string."""

    NONE = "NONE"
    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"
    YEARLY = "YEARLY"


class ActivityType(str, Enum):
    """Kinds of user activities."""

    EVENT = "event"
    TASK = "task"
    BIRTHDAY = "birthday"


class HolidayType(str, Enum):
    """Holiday catalog categories."""

    NATIONAL = "NATIONAL"
    SAINT = "SAINT"
    COMMEMORATIVE = "COMMEMORATIVE"


class RecurrenceRule(BaseModel):
    """Parsed recurrence rule.

    ``by_days`` holds weekday indexes with Sunday=0 .. Saturday=6 and is only
    consulted for WEEKLY rules.
    """

    frequency: Frequency = Field(..., description="Recurrence frequency")
    interval: int = Field(default=1, ge=1, description="Step size in frequency units")
    by_days: tuple[int, ...] = Field(default=(), description="Weekday indexes, Sunday=0")
    until: Optional[datetime] = Field(default=None, description="Inclusive UTC upper bound")
    count: Optional[int] = Field(default=None, ge=1, description="Maximum iteration steps")

    model_config = ConfigDict(frozen=True)

    @field_validator("by_days")
    @classmethod
    def _normalize_by_days(cls, value: tuple[int, ...]) -> tuple[int, ...]:
        for day in value:
            if not 0 <= day <= 6:
                raise ValueError(f"weekday index out of range: {day}")
        return tuple(sorted(set(value)))

    @property
    def uses_by_days(self) -> bool:
        """True when BYDAY expansion applies to this rule."""
        return self.frequency == Frequency.WEEKLY and bool(self.by_days)


class Activity(BaseModel):
    """A user activity anchored on a calendar date."""

    id: str = Field(..., description="Activity ID")
    title: str = Field(..., description="Activity title")
    date: DateType = Field(..., description="Start date (YYYY-MM-DD)")
    is_all_day: bool = Field(default=True, description="All-day flag")
    start_time: Optional[str] = Field(default=None, description="Start time HH:MM")
    end_time: Optional[str] = Field(default=None, description="End time HH:MM")
    location: Optional[str] = None
    description: Optional[str] = None
    category_color: str = Field(default="#3b82f6", description="Display colour")
    activity_type: ActivityType = Field(default=ActivityType.EVENT)
    recurrence_rule: Optional[str] = Field(default=None, description="Raw recurrence rule text")

    @field_validator("start_time", "end_time")
    @classmethod
    def _validate_time(cls, value: Optional[str]) -> Optional[str]:
        if value is None or value == "":
            return None
        # Stored zero-padded so sort_key orders by string
        return parse_time_of_day(value).strftime("%H:%M")

    @property
    def time_of_day(self) -> time:
        """Start time of day, midnight when the activity has none."""
        if self.start_time:
            return parse_time_of_day(self.start_time)
        return time(0, 0)

    @property
    def anchor(self) -> datetime:
        """First occurrence timestamp (date plus start time)."""
        return datetime.combine(self.date, self.time_of_day)

    @property
    def sort_key(self) -> tuple[int, str]:
        """Ordering for day listings: all-day first, then by start time."""
        if self.is_all_day:
            return (0, "00:00")
        return (1, self.start_time or "00:00")


class Occurrence(BaseModel):
    """A single computed occurrence of an activity."""

    activity_id: Optional[str] = Field(default=None, description="Owning activity ID")
    start: datetime = Field(..., description="Occurrence timestamp")
    is_anchor: bool = Field(default=False, description="True for the activity's own start")

    model_config = ConfigDict(frozen=True)

    @property
    def date(self) -> date:
        return self.start.date()

    @field_serializer("start")
    def serialize_start(self, dt: datetime) -> str:
        """Serialize timestamp to ISO format."""
        return dt.isoformat()


class ExpansionResult(BaseModel):
    """Occurrences found in a window plus a truncation marker."""

    occurrences: list[Occurrence] = Field(default_factory=list)
    truncated: bool = Field(
        default=False, description="True when the iteration ceiling stopped the walk"
    )

    @property
    def dates(self) -> list[date]:
        return [occ.date for occ in self.occurrences]

    @property
    def starts(self) -> list[datetime]:
        return [occ.start for occ in self.occurrences]

    def __len__(self) -> int:
        return len(self.occurrences)


class Holiday(BaseModel):
    """National holiday, saint day or commemorative date.

    Saint days use ``MM-DD`` so they repeat every year; the other kinds use
    ``YYYY-MM-DD``.
    """

    date: str = Field(..., description="YYYY-MM-DD or MM-DD")
    name: str = Field(..., description="Display name")
    type: HolidayType = Field(..., description="Holiday category")

    @property
    def month(self) -> int:
        parts = self.date.split("-")
        return int(parts[-2])

    @property
    def day(self) -> int:
        return int(self.date.split("-")[-1])

    @property
    def year(self) -> Optional[int]:
        parts = self.date.split("-")
        return int(parts[0]) if len(parts) == 3 else None


class CalendarFilterOptions(BaseModel):
    """Visibility toggles applied by the calendar views."""

    show_events: bool = True
    show_tasks: bool = True
    show_holidays: bool = True
    show_saint_days: bool = True
    show_commemorative_dates: bool = True

    def shows_activity(self, activity: Activity) -> bool:
        """Birthdays are always shown; events and tasks follow their toggles."""
        if activity.activity_type == ActivityType.EVENT:
            return self.show_events
        if activity.activity_type == ActivityType.TASK:
            return self.show_tasks
        return True


class DayEventInfo(BaseModel):
    """Per-day marker data for the month grid."""

    colors: list[str] = Field(default_factory=list)
    count: int = 0
