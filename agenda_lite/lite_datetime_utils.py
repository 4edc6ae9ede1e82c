"""Date arithmetic helpers shared by the recurrence parser and expander.

Anchors and query windows are naive wall-clock datetimes. Timezone-aware
values (such as a parsed UNTIL) are normalized to naive UTC before they are
compared, so the engine never mixes offset-naive and offset-aware values.
"""

import calendar
import logging
from datetime import UTC, date, datetime, time, timedelta
from typing import Optional, Union

from dateutil.relativedelta import relativedelta

logger = logging.getLogger(__name__)

# Weekday codes in Sunday-first order; list position is the weekday index.
WEEKDAY_CODES: tuple[str, ...] = ("SU", "MO", "TU", "WE", "TH", "FR", "SA")

UNTIL_FORMAT = "%Y%m%dT%H%M%SZ"

DateLike = Union[date, datetime]


def ensure_timezone_aware(dt: datetime) -> datetime:
    """Ensure datetime is timezone-aware (UTC if originally naive)."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt


def to_naive_utc(dt: datetime) -> datetime:
    """Drop tzinfo after converting aware values to UTC; naive values pass through."""
    if dt.tzinfo is None:
        return dt
    return dt.astimezone(UTC).replace(tzinfo=None)


def as_window_start(value: DateLike) -> datetime:
    """Coerce a date or datetime to an inclusive window start."""
    if isinstance(value, datetime):
        return to_naive_utc(value)
    return datetime.combine(value, time.min)


def as_window_end(value: DateLike) -> datetime:
    """Coerce a date or datetime to an inclusive window end.

    A bare date covers the whole day, up to 23:59:59.999999.
    """
    if isinstance(value, datetime):
        return to_naive_utc(value)
    return datetime.combine(value, time.max)


def day_bounds(day: date) -> tuple[datetime, datetime]:
    """Inclusive bounds of one calendar day."""
    return datetime.combine(day, time.min), datetime.combine(day, time.max)


def month_bounds(year: int, month: int) -> tuple[datetime, datetime]:
    """Inclusive bounds of one calendar month."""
    last_day = calendar.monthrange(year, month)[1]
    return (
        datetime.combine(date(year, month, 1), time.min),
        datetime.combine(date(year, month, last_day), time.max),
    )


def weekday_index(value: DateLike) -> int:
    """Weekday index with Sunday=0 .. Saturday=6."""
    return (value.weekday() + 1) % 7


def weekday_code_to_index(code: str) -> Optional[int]:
    """Map a two-letter weekday code to its index, None for unknown codes."""
    try:
        return WEEKDAY_CODES.index(code)
    except ValueError:
        return None


def weekday_index_to_code(index: int) -> str:
    return WEEKDAY_CODES[index]


def start_of_week(dt: datetime) -> datetime:
    """Sunday of the week containing ``dt``, keeping the time of day."""
    return dt - timedelta(days=weekday_index(dt))


def date_in_week(dt: datetime, target_weekday: int) -> datetime:
    """Date in the Sunday-first week of ``dt`` that falls on ``target_weekday``."""
    return dt + timedelta(days=target_weekday - weekday_index(dt))


def add_months_clamped(cursor: datetime, months: int, day_of_month: int) -> datetime:
    """Step ``months`` forward and land on ``day_of_month``.

    Short target months clamp to their last day (Jan 31 + 1 month -> Feb 28/29)
    instead of spilling into the following month.
    """
    return cursor + relativedelta(months=months, day=day_of_month)


def add_years_clamped(cursor: datetime, years: int, month: int, day_of_month: int) -> datetime:
    """Step ``years`` forward and land on ``month``/``day_of_month``.

    Feb 29 clamps to Feb 28 in non-leap years.
    """
    return cursor + relativedelta(years=years, month=month, day=day_of_month)


def parse_time_of_day(value: str) -> time:
    """Parse an ``HH:MM`` string.

    Raises:
        ValueError: If the value is not a valid 24-hour ``HH:MM`` time
    """
    parts = value.strip().split(":")
    if len(parts) != 2 or not all(p.isdigit() for p in parts):
        raise ValueError(f"Invalid time of day (expected HH:MM): {value!r}")
    return time(int(parts[0]), int(parts[1]))


def parse_activity_date(value: str) -> date:
    """Parse an activity date in ``YYYY-MM-DD`` form.

    Raises:
        ValueError: If the value is not a valid calendar date
    """
    return datetime.strptime(value.strip(), "%Y-%m-%d").date()


def parse_until(value: str) -> Optional[datetime]:
    """Parse an RRULE UNTIL value of the form ``YYYYMMDDTHHMMSSZ``.

    Fields are read by fixed character offsets. Returns a timezone-aware UTC
    datetime, or None when the text is too short or out of range.
    """
    text = value.strip()
    if len(text) < 15 or text[8] != "T":
        logger.debug("UNTIL value has unexpected shape: %r", value)
        return None
    try:
        return datetime(
            int(text[0:4]),
            int(text[4:6]),
            int(text[6:8]),
            int(text[9:11]),
            int(text[11:13]),
            int(text[13:15]),
            tzinfo=UTC,
        )
    except ValueError:
        logger.debug("UNTIL value out of range: %r", value)
        return None


def format_until(dt: datetime) -> str:
    """Format a datetime as an RRULE UNTIL value (UTC, no separators)."""
    return ensure_timezone_aware(dt).astimezone(UTC).strftime(UNTIL_FORMAT)
