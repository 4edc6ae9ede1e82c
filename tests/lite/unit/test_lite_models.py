"""Tests for agenda_lite.lite_models module."""

from datetime import date, datetime, time

import pytest
from pydantic import ValidationError

from agenda_lite.lite_models import (
    Activity,
    ActivityType,
    CalendarFilterOptions,
    ExpansionResult,
    Frequency,
    Holiday,
    HolidayType,
    Occurrence,
    RecurrenceRule,
)

pytestmark = pytest.mark.unit


class TestRecurrenceRule:
    def test_defaults(self):
        rule = RecurrenceRule(frequency=Frequency.DAILY)

        assert rule.interval == 1
        assert rule.by_days == ()
        assert rule.until is None
        assert rule.count is None

    def test_rule_is_frozen(self):
        rule = RecurrenceRule(frequency=Frequency.DAILY)

        with pytest.raises(ValidationError):
            rule.interval = 2

    @pytest.mark.parametrize("field", ["interval", "count"])
    def test_non_positive_values_rejected(self, field):
        with pytest.raises(ValidationError):
            RecurrenceRule(frequency=Frequency.DAILY, **{field: 0})

    def test_by_days_sorted_and_deduplicated(self):
        rule = RecurrenceRule(frequency=Frequency.WEEKLY, by_days=(5, 1, 5, 0))

        assert rule.by_days == (0, 1, 5)

    def test_by_days_out_of_range_rejected(self):
        with pytest.raises(ValidationError):
            RecurrenceRule(frequency=Frequency.WEEKLY, by_days=(7,))

    @pytest.mark.parametrize(
        ("frequency", "by_days", "expected"),
        [
            (Frequency.WEEKLY, (1,), True),
            (Frequency.WEEKLY, (), False),
            (Frequency.MONTHLY, (1,), False),
        ],
    )
    def test_uses_by_days(self, frequency, by_days, expected):
        assert RecurrenceRule(frequency=frequency, by_days=by_days).uses_by_days is expected


class TestActivity:
    def test_minimal_activity(self):
        activity = Activity(id="a1", title="Dentist", date="2024-03-04")

        assert activity.date == date(2024, 3, 4)
        assert activity.is_all_day is True
        assert activity.activity_type == ActivityType.EVENT
        assert activity.anchor == datetime(2024, 3, 4, 0, 0)
        assert activity.time_of_day == time(0, 0)

    def test_anchor_includes_start_time(self):
        activity = Activity(id="a1", title="Standup", date="2024-03-04", is_all_day=False, start_time="09:15")

        assert activity.anchor == datetime(2024, 3, 4, 9, 15)

    def test_empty_time_becomes_none(self):
        activity = Activity(id="a1", title="x", date="2024-03-04", start_time="", end_time="")

        assert activity.start_time is None
        assert activity.end_time is None

    def test_times_stored_zero_padded(self):
        activity = Activity(id="a1", title="x", date="2024-03-04", start_time="7:05", end_time=" 9:30")

        assert activity.start_time == "07:05"
        assert activity.end_time == "09:30"

    @pytest.mark.parametrize("value", ["9am", "25:00", "12"])
    def test_invalid_time_rejected(self, value):
        with pytest.raises(ValidationError):
            Activity(id="a1", title="x", date="2024-03-04", start_time=value)

    def test_invalid_date_rejected(self):
        with pytest.raises(ValidationError):
            Activity(id="a1", title="x", date="2024-02-30")

    def test_sort_key_orders_all_day_first(self):
        all_day = Activity(id="a", title="x", date="2024-03-04")
        early = Activity(id="b", title="x", date="2024-03-04", is_all_day=False, start_time="08:00")
        late = Activity(id="c", title="x", date="2024-03-04", is_all_day=False, start_time="17:30")

        ordered = sorted([late, all_day, early], key=lambda a: a.sort_key)

        assert [a.id for a in ordered] == ["a", "b", "c"]


class TestOccurrenceAndResult:
    def test_occurrence_date(self):
        occ = Occurrence(start=datetime(2024, 1, 2, 10, 0))

        assert occ.date == date(2024, 1, 2)
        assert occ.is_anchor is False

    def test_result_conveniences(self):
        result = ExpansionResult(
            occurrences=[
                Occurrence(start=datetime(2024, 1, 1, 9, 0), is_anchor=True),
                Occurrence(start=datetime(2024, 1, 2, 9, 0)),
            ]
        )

        assert len(result) == 2
        assert result.dates == [date(2024, 1, 1), date(2024, 1, 2)]
        assert result.starts[1] == datetime(2024, 1, 2, 9, 0)
        assert result.truncated is False


class TestHoliday:
    def test_dated_holiday_parts(self):
        holiday = Holiday(date="2024-09-07", name="Independência do Brasil", type=HolidayType.NATIONAL)

        assert (holiday.year, holiday.month, holiday.day) == (2024, 9, 7)

    def test_saint_day_has_no_year(self):
        saint = Holiday(date="06-13", name="Santo Antônio", type=HolidayType.SAINT)

        assert saint.year is None
        assert (saint.month, saint.day) == (6, 13)


class TestCalendarFilterOptions:
    @pytest.mark.parametrize(
        ("activity_type", "filters", "expected"),
        [
            (ActivityType.EVENT, {"show_events": False}, False),
            (ActivityType.TASK, {"show_tasks": False}, False),
            (ActivityType.TASK, {"show_events": False}, True),
            (ActivityType.BIRTHDAY, {"show_events": False, "show_tasks": False}, True),
        ],
    )
    def test_shows_activity(self, activity_type, filters, expected):
        activity = Activity(id="a", title="x", date="2024-01-01", activity_type=activity_type)

        assert CalendarFilterOptions(**filters).shows_activity(activity) is expected
