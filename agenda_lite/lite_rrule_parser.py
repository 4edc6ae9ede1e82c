"""Recurrence rule parsing for Agenda Lite.

Two encodings are accepted and resolved into one ``RecurrenceRule`` shape:

- named shorthand rules (``RecurrenceOption`` values, plus the legacy
  Portuguese labels stored by older clients), and
- structured ``FREQ=...;INTERVAL=...;BYDAY=...;UNTIL=...|COUNT=...`` strings.

Parsing is lenient: text that cannot be understood yields ``None`` so callers
treat the activity as non-recurring. ``parse_rrule_string_strict`` is the
raising variant for callers that validate user input.
"""

import logging
from typing import Optional, Union

from .lite_datetime_utils import (
    format_until,
    parse_until,
    weekday_code_to_index,
    weekday_index_to_code,
)
from .lite_models import Frequency, RecurrenceOption, RecurrenceRule

logger = logging.getLogger(__name__)


class LiteRRuleParseError(ValueError):
    """Error parsing a recurrence rule string."""


# Labels stored by older Portuguese-language clients
LEGACY_OPTION_LABELS: dict[str, RecurrenceOption] = {
    "Não se repete": RecurrenceOption.NONE,
    "Todos os dias": RecurrenceOption.DAILY,
    "Toda semana": RecurrenceOption.WEEKLY,
    "Todo mês": RecurrenceOption.MONTHLY,
    "Todo ano": RecurrenceOption.YEARLY,
}

_OPTION_FREQUENCIES: dict[RecurrenceOption, Optional[Frequency]] = {
    RecurrenceOption.NONE: None,
    RecurrenceOption.DAILY: Frequency.DAILY,
    RecurrenceOption.WEEKLY: Frequency.WEEKLY,
    RecurrenceOption.MONTHLY: Frequency.MONTHLY,
    RecurrenceOption.YEARLY: Frequency.YEARLY,
}


def resolve_option(rule_text: str) -> Optional[RecurrenceOption]:
    """Return the named option for ``rule_text``, or None if it is not one."""
    legacy = LEGACY_OPTION_LABELS.get(rule_text)
    if legacy is not None:
        return legacy
    try:
        return RecurrenceOption(rule_text)
    except ValueError:
        return None


def simple_rule(option: Union[RecurrenceOption, str]) -> Optional[RecurrenceRule]:
    """Canonical rule for a named shorthand option (None for NONE)."""
    frequency = _OPTION_FREQUENCIES[RecurrenceOption(option)]
    if frequency is None:
        return None
    return RecurrenceRule(frequency=frequency)


def _parse_positive_int(value: str) -> Optional[int]:
    try:
        parsed = int(value)
    except ValueError:
        return None
    return parsed if parsed > 0 else None


def _parse_structured(rule_text: str, strict: bool) -> Optional[RecurrenceRule]:
    frequency: Optional[Frequency] = None
    interval = 1
    by_days: list[int] = []
    until = None
    count: Optional[int] = None

    for part in rule_text.split(";"):
        if "=" not in part:
            continue
        key, value = part.split("=", 1)
        if not value:
            continue

        if key == "FREQ":
            try:
                frequency = Frequency(value)
            except ValueError:
                frequency = None
        elif key == "INTERVAL":
            interval = _parse_positive_int(value) or 1
        elif key == "BYDAY":
            for code in value.split(","):
                index = weekday_code_to_index(code)
                if index is None:
                    logger.debug("Dropping unknown BYDAY code %r in %r", code, rule_text)
                    continue
                by_days.append(index)
        elif key == "UNTIL":
            until = parse_until(value)
            if until is None:
                if strict:
                    raise LiteRRuleParseError(f"Invalid UNTIL value: {value!r}")
                logger.warning("Ignoring malformed UNTIL %r in rule %r", value, rule_text)
        elif key == "COUNT":
            count = _parse_positive_int(value)
            if count is None:
                logger.debug("Ignoring non-positive COUNT %r in %r", value, rule_text)

    if frequency is None:
        if strict:
            raise LiteRRuleParseError(f"Unsupported or missing FREQ in rule: {rule_text!r}")
        logger.debug("Rule %r has no usable FREQ; treating as non-recurring", rule_text)
        return None

    if until is not None and count is not None:
        logger.debug("Rule %r sets both UNTIL and COUNT; UNTIL takes priority", rule_text)
        count = None

    return RecurrenceRule(
        frequency=frequency,
        interval=interval,
        by_days=tuple(by_days),
        until=until,
        count=count,
    )


def parse_rrule_string(rule_text: Optional[str]) -> Optional[RecurrenceRule]:
    """Parse recurrence rule text into a ``RecurrenceRule``.

    Args:
        rule_text: Named option, structured ``FREQ=`` string, or None/empty

    Returns:
        RecurrenceRule, or None when the text means (or degrades to) no recurrence
    """
    if not rule_text:
        return None

    option = resolve_option(rule_text)
    if option is not None:
        return simple_rule(option)

    if not rule_text.startswith("FREQ="):
        logger.debug("Unrecognized recurrence rule %r; treating as non-recurring", rule_text)
        return None

    return _parse_structured(rule_text, strict=False)


def parse_rrule_string_strict(rule_text: str) -> Optional[RecurrenceRule]:
    """Parse recurrence rule text, raising on malformed input.

    Named options (including NONE) are accepted as-is.

    Raises:
        LiteRRuleParseError: If the text is empty, lacks a ``FREQ=`` prefix,
            names an unknown frequency, or has an unreadable UNTIL
    """
    if not rule_text or not rule_text.strip():
        raise LiteRRuleParseError("Empty recurrence rule")

    option = resolve_option(rule_text)
    if option is not None:
        return simple_rule(option)

    if not rule_text.startswith("FREQ="):
        raise LiteRRuleParseError(f"Recurrence rule must start with FREQ=: {rule_text!r}")

    return _parse_structured(rule_text, strict=True)


def format_rrule_string(rule: RecurrenceRule) -> str:
    """Encode a rule in the structured string form.

    BYDAY is written only for WEEKLY rules. UNTIL wins over COUNT when both
    are set, matching the parser.
    """
    parts = [f"FREQ={rule.frequency.value}", f"INTERVAL={rule.interval}"]
    if rule.uses_by_days:
        parts.append("BYDAY=" + ",".join(weekday_index_to_code(d) for d in rule.by_days))
    if rule.until is not None:
        parts.append(f"UNTIL={format_until(rule.until)}")
    elif rule.count is not None:
        parts.append(f"COUNT={rule.count}")
    return ";".join(parts)
