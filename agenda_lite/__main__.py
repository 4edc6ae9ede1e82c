"""Command-line entry for agenda_lite.

Three subcommands share one config and one expander:

- ``expand``: expand a single rule from an anchor over a window
- ``day``: list the activities occurring on one day
- ``month``: per-day occurrence counts and holidays for a displayed month
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import ValidationError

from . import _init_logging
from .config_loader import Config, load_config
from .lite_calendar_view import activities_for_date, events_by_date
from .lite_datetime_utils import DateLike, parse_activity_date, parse_time_of_day
from .lite_holidays import HolidayCatalog, HolidayCatalogError
from .lite_logging import configure_lite_logging
from .lite_models import Activity
from .lite_rrule_expander import LiteRRuleExpander, expand
from .lite_rrule_parser import format_rrule_string, parse_rrule_string

logger = logging.getLogger(__name__)


class ActivityFileError(Exception):
    """Raised when an activities file cannot be read or validated."""


def _create_parser() -> argparse.ArgumentParser:
    """Create argument parser for agenda_lite CLI.

    Returns:
        Configured argument parser
    """
    parser = argparse.ArgumentParser(
        prog="agenda_lite",
        description="Agenda Lite - recurrence expansion for a personal calendar",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m agenda_lite expand --date 2024-01-15 --rule "FREQ=DAILY;INTERVAL=2" \\
      --start 2024-01-15 --end 2024-01-20
  python -m agenda_lite day --activities activities.yaml --date 2024-03-04
  python -m agenda_lite month --activities activities.yaml --year 2024 --month 2

Activity files are YAML or JSON lists; quote HH:MM times in YAML.
        """,
    )
    parser.add_argument(
        "--config",
        metavar="PATH",
        help="Path to config file (default: ./agenda.yaml)",
    )
    parser.add_argument(
        "--max-iterations",
        type=int,
        metavar="N",
        help="Override the expansion iteration ceiling",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    expand_parser = subparsers.add_parser("expand", help="Expand one recurrence rule")
    expand_parser.add_argument("--date", required=True, help="Anchor date YYYY-MM-DD")
    expand_parser.add_argument("--time", help="Anchor time of day HH:MM (default 00:00)")
    expand_parser.add_argument("--rule", help="Recurrence rule or option name (omit for one-off)")
    expand_parser.add_argument("--start", required=True, help="Window start (YYYY-MM-DD or ISO datetime)")
    expand_parser.add_argument("--end", required=True, help="Window end (YYYY-MM-DD or ISO datetime)")

    day_parser = subparsers.add_parser("day", help="List activities on one day")
    day_parser.add_argument("--activities", required=True, metavar="FILE", help="Activities file")
    day_parser.add_argument("--date", required=True, help="Day YYYY-MM-DD")

    month_parser = subparsers.add_parser("month", help="Per-day counts and holidays for a month")
    month_parser.add_argument("--activities", required=True, metavar="FILE", help="Activities file")
    month_parser.add_argument("--year", type=int, required=True)
    month_parser.add_argument("--month", type=int, required=True, choices=range(1, 13), metavar="M")

    return parser


def _parse_window_value(value: str) -> DateLike:
    """Bare dates stay dates so a window end covers the whole day."""
    text = value.strip()
    if len(text) == 10:
        return parse_activity_date(text)
    return datetime.fromisoformat(text)


def _normalize_time_value(value: Any) -> Any:
    # YAML 1.1 reads unquoted HH:MM (hours >= 10) as a base-60 integer
    if isinstance(value, int) and not isinstance(value, bool):
        return f"{value // 60:02d}:{value % 60:02d}"
    return value


def load_activities(path: str | Path) -> list[Activity]:
    """Load a YAML or JSON list of activity mappings.

    Raises:
        ActivityFileError: If the file is unreadable or an entry is invalid
    """
    p = Path(path)
    try:
        loaded = yaml.safe_load(p.read_text(encoding="utf-8"))
    except (OSError, ValueError, yaml.YAMLError) as e:
        raise ActivityFileError(f"Unable to read activities file {p}: {e}") from e

    if loaded is None:
        return []
    if not isinstance(loaded, list):
        raise ActivityFileError(f"Activities file {p} must contain a list at top level")

    activities: list[Activity] = []
    for index, entry in enumerate(loaded):
        if not isinstance(entry, dict):
            raise ActivityFileError(f"Activity #{index} in {p} is not a mapping")
        data = dict(entry)
        for key in ("start_time", "end_time"):
            if key in data:
                data[key] = _normalize_time_value(data[key])
        try:
            activities.append(Activity.model_validate(data))
        except ValidationError as e:
            raise ActivityFileError(f"Activity #{index} in {p} is invalid: {e}") from e

    logger.debug("Loaded %d activities from %s", len(activities), p)
    return activities


def _run_expand(args: argparse.Namespace, config: Config) -> int:
    anchor_date = parse_activity_date(args.date)
    time_of_day = parse_time_of_day(args.time) if args.time else None
    anchor = datetime.combine(anchor_date, time_of_day) if time_of_day is not None else anchor_date

    rule = parse_rrule_string(args.rule)
    if args.rule and rule is None:
        print(f"Rule {args.rule!r} not recognized; treating as a one-off activity")
    elif rule is not None:
        print(f"Rule: {format_rrule_string(rule)}")

    result = expand(
        anchor,
        rule,
        _parse_window_value(args.start),
        _parse_window_value(args.end),
        max_iterations=config.max_iterations,
    )
    for occurrence in result.occurrences:
        marker = " (anchor)" if occurrence.is_anchor else ""
        print(f"{occurrence.start:%Y-%m-%d %H:%M}{marker}")
    print(f"{len(result)} occurrence(s)")
    if result.truncated:
        print(
            f"Note: expansion stopped at the {config.max_iterations}-iteration ceiling; "
            "later occurrences in the window are missing"
        )
    return 0


def _run_day(args: argparse.Namespace, config: Config, expander: LiteRRuleExpander) -> int:
    day = parse_activity_date(args.date)
    activities = load_activities(args.activities)
    instances = activities_for_date(activities, day, config.default_filters, expander)

    print(f"{day.isoformat()}: {len(instances)} activit{'y' if len(instances) == 1 else 'ies'}")
    for instance in instances:
        activity = instance.activity
        when = "all day" if activity.is_all_day else (activity.start_time or "00:00")
        print(f"  {when:>7}  {activity.title} [{instance.instance_id}]")
    return 0


def _run_month(args: argparse.Namespace, config: Config, expander: LiteRRuleExpander) -> int:
    activities = load_activities(args.activities)
    markers = events_by_date(activities, args.year, args.month, config.default_filters, expander)

    catalog = HolidayCatalog.load(config.holidays_path)
    month_prefix = f"{args.year:04d}-{args.month:02d}-"
    holidays = {
        key: holiday
        for key, holiday in catalog.holidays_by_date(args.year, config.default_filters).items()
        if key.startswith(month_prefix)
    }

    print(f"{args.year:04d}-{args.month:02d}")
    for key in sorted(set(markers) | set(holidays)):
        info = markers.get(key)
        count = info.count if info else 0
        colors = ",".join(info.colors) if info else ""
        line = f"  {key}  {count:>3}"
        if colors:
            line += f"  {colors}"
        holiday = holidays.get(key)
        if holiday is not None:
            line += f"  * {holiday.name} ({holiday.type.value.lower()})"
        print(line)
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """Run the agenda_lite CLI.

    Returns:
        Process exit code (0 on success, 2 on invalid input)
    """
    parser = _create_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
    except (OSError, ValueError, yaml.YAMLError) as exc:
        print(f"Error: cannot load config: {exc}", file=sys.stderr)
        return 2

    if args.max_iterations is not None:
        clamped = Config.from_dict({"max_iterations": args.max_iterations}).max_iterations
        config = replace(config, max_iterations=clamped)

    _init_logging("DEBUG" if args.debug else config.log_level)
    configure_lite_logging(debug_mode=args.debug, log_level=config.log_level)
    expander = LiteRRuleExpander(config)

    try:
        if args.command == "expand":
            return _run_expand(args, config)
        if args.command == "day":
            return _run_day(args, config, expander)
        return _run_month(args, config, expander)
    except (ActivityFileError, HolidayCatalogError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
