"""Recurrence expansion logic for Agenda Lite.

``expand`` walks forward from an activity's anchor one iteration step at a
time and collects the occurrences that land inside a query window. The walk
stops on UNTIL, on COUNT (counted in iteration steps, not BYDAY expansions),
when the cursor passes the window, when the cursor cannot advance, or when
the iteration ceiling is reached. Only the ceiling marks the result as
truncated.
"""

# ruff: noqa: I001
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
import logging
from typing import Any, Iterable, Optional, Union

from .lite_datetime_utils import (
    DateLike,
    add_months_clamped,
    add_years_clamped,
    as_window_end,
    as_window_start,
    date_in_week,
    day_bounds,
    start_of_week,
    to_naive_utc,
)
from .lite_models import Activity, ExpansionResult, Frequency, Occurrence, RecurrenceRule
from .lite_rrule_parser import parse_rrule_string

logger = logging.getLogger(__name__)

DEFAULT_MAX_ITERATIONS = 700


class LiteRRuleExpansionError(Exception):
    """Base exception for recurrence expansion errors."""


def _as_anchor(anchor: DateLike) -> datetime:
    if anchor is None:
        raise TypeError("anchor date is required")
    if isinstance(anchor, datetime):
        return to_naive_utc(anchor)
    if isinstance(anchor, date):
        return datetime.combine(anchor, time.min)
    raise TypeError(f"anchor must be a date or datetime, got {type(anchor).__name__}")


def _advance(cursor: datetime, rule: RecurrenceRule, anchor: datetime) -> Optional[datetime]:
    """Next iteration-step cursor, or None for an unknown frequency."""
    if rule.frequency == Frequency.DAILY:
        return cursor + timedelta(days=rule.interval)
    if rule.frequency == Frequency.WEEKLY:
        return cursor + timedelta(days=7 * rule.interval)
    if rule.frequency == Frequency.MONTHLY:
        return add_months_clamped(cursor, rule.interval, anchor.day)
    if rule.frequency == Frequency.YEARLY:
        return add_years_clamped(cursor, rule.interval, anchor.month, anchor.day)
    return None


def expand(
    anchor: DateLike,
    rule: Optional[RecurrenceRule],
    window_start: DateLike,
    window_end: DateLike,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    activity_id: Optional[str] = None,
) -> ExpansionResult:
    """Expand a recurrence into the occurrences intersecting a window.

    Args:
        anchor: First occurrence (date plus time of day); dates mean midnight
        rule: Parsed rule, or None for a one-off activity
        window_start: Inclusive window start; a bare date means 00:00
        window_end: Inclusive window end; a bare date covers the whole day
        max_iterations: Ceiling on iteration steps walked
        activity_id: Optional ID stamped onto each occurrence

    Returns:
        ExpansionResult with ascending, de-duplicated occurrences

    Raises:
        TypeError: If ``anchor`` is missing or not a date/datetime
    """
    anchor_dt = _as_anchor(anchor)
    start = as_window_start(window_start)
    end = as_window_end(window_end)

    if start > end:
        return ExpansionResult()

    found: dict[datetime, Occurrence] = {}

    def emit(candidate: datetime) -> None:
        if start <= candidate <= end and candidate not in found:
            found[candidate] = Occurrence(
                activity_id=activity_id,
                start=candidate,
                is_anchor=candidate == anchor_dt,
            )

    emit(anchor_dt)

    if rule is None:
        return ExpansionResult(occurrences=list(found.values()))

    until = to_naive_utc(rule.until) if rule.until is not None else None
    cursor = anchor_dt
    steps = 0
    truncated = False

    for _ in range(max_iterations):
        if until is not None and cursor > until:
            break
        if rule.count is not None and steps >= rule.count:
            break

        if rule.uses_by_days:
            for weekday in rule.by_days:
                candidate = date_in_week(cursor, weekday)
                if candidate < anchor_dt:
                    continue
                if until is not None and candidate > until:
                    continue
                emit(candidate)
        elif cursor >= anchor_dt:
            emit(cursor)

        if cursor >= anchor_dt:
            steps += 1
            if rule.count is not None and steps >= rule.count:
                break

        next_cursor = _advance(cursor, rule, anchor_dt)
        if next_cursor is None or next_cursor <= cursor:
            logger.debug("Recurrence cursor stalled at %s; stopping", cursor)
            break
        cursor = next_cursor

        horizon = start_of_week(cursor) if rule.uses_by_days else cursor
        if horizon > end:
            break
    else:
        # The series may have ended on UNTIL exactly as the ceiling was reached
        truncated = not (until is not None and cursor > until)

    occurrences = sorted(found.values(), key=lambda occ: occ.start)
    return ExpansionResult(occurrences=occurrences, truncated=truncated)


def occurs_on(
    anchor: DateLike,
    rule: Optional[RecurrenceRule],
    target_date: DateLike,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
) -> bool:
    """True when the recurrence has an occurrence on ``target_date``'s calendar day."""
    day = target_date.date() if isinstance(target_date, datetime) else target_date
    day_start, day_end = day_bounds(day)
    result = expand(anchor, rule, day_start, day_end, max_iterations=max_iterations)
    return bool(result.occurrences)


@dataclass
class RRuleExpanderConfig:
    """Configuration for recurrence expansion."""

    max_iterations: int = DEFAULT_MAX_ITERATIONS
    enable_expansion: bool = True

    @classmethod
    def from_settings(cls, settings: Any) -> "RRuleExpanderConfig":
        """Extract expansion configuration from a settings object.

        Args:
            settings: Object exposing ``max_iterations``/``enable_expansion``,
                or None for defaults

        Returns:
            RRuleExpanderConfig with values from settings or defaults
        """
        return cls(
            max_iterations=getattr(settings, "max_iterations", DEFAULT_MAX_ITERATIONS),
            enable_expansion=getattr(settings, "enable_expansion", True),
        )


class LiteRRuleExpander:
    """Activity-level recurrence expansion.

    Parses each activity's rule text once per call and delegates to
    ``expand``. Activities are read, never mutated.
    """

    def __init__(self, settings: Any = None):
        """Initialize expander with settings.

        Args:
            settings: Configuration object with expansion settings (optional)
        """
        self.config = RRuleExpanderConfig.from_settings(settings)
        logger.debug(
            "LiteRRuleExpander initialized: max_iterations=%d, enable_expansion=%s",
            self.config.max_iterations,
            self.config.enable_expansion,
        )

    def rule_for(self, activity: Activity) -> Optional[RecurrenceRule]:
        """Parsed rule for an activity, None when expansion is disabled."""
        if not self.config.enable_expansion:
            return None
        return parse_rrule_string(activity.recurrence_rule)

    def expand_activity(
        self,
        activity: Activity,
        window_start: DateLike,
        window_end: DateLike,
    ) -> ExpansionResult:
        """Expand one activity into its occurrences within a window.

        Raises:
            LiteRRuleExpansionError: If the activity cannot be expanded
        """
        try:
            result = expand(
                activity.anchor,
                self.rule_for(activity),
                window_start,
                window_end,
                max_iterations=self.config.max_iterations,
                activity_id=activity.id,
            )
        except Exception as e:
            logger.exception("Recurrence expansion failed for activity %s", getattr(activity, "id", None))
            raise LiteRRuleExpansionError(f"Failed to expand activity: {e}") from e

        if result.truncated:
            logger.warning(
                "Recurrence expansion for activity %s stopped at the %d-iteration ceiling "
                "(rule=%r, window=%s..%s)",
                activity.id,
                self.config.max_iterations,
                activity.recurrence_rule,
                window_start,
                window_end,
            )
        return result

    def activity_occurs_on(self, activity: Activity, day: Union[date, datetime]) -> bool:
        """True when the activity has an occurrence on ``day``."""
        target = day.date() if isinstance(day, datetime) else day
        day_start, day_end = day_bounds(target)
        return bool(self.expand_activity(activity, day_start, day_end).occurrences)

    def expand_activities(
        self,
        activities: Iterable[Activity],
        window_start: DateLike,
        window_end: DateLike,
    ) -> dict[str, ExpansionResult]:
        """Expand a snapshot of activities, keyed by activity ID."""
        results: dict[str, ExpansionResult] = {}
        for activity in activities:
            results[activity.id] = self.expand_activity(activity, window_start, window_end)
        logger.debug(
            "Expanded %d activities over %s..%s",
            len(results),
            window_start,
            window_end,
        )
        return results


# Global expander instance (created on first use)
_default_expander: Optional[LiteRRuleExpander] = None


def get_expander(settings: Any = None) -> LiteRRuleExpander:
    """Get or create the shared expander.

    Args:
        settings: Configuration used only when the expander is first created

    Returns:
        LiteRRuleExpander instance
    """
    global _default_expander
    if _default_expander is None:
        _default_expander = LiteRRuleExpander(settings)
    return _default_expander
