"""agenda_lite.config_loader

Lightweight config loader for agenda_lite.

- Reads YAML (PyYAML ``safe_load``); JSON files parse too since JSON is YAML.
- Exposes a typed dataclass `Config` and a `load_config()` helper that accepts
  an optional path override.
- `build_config_from_env()` maps ``AGENDA_*`` environment variables onto the
  same keys so they can be merged over file values.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .lite_models import CalendarFilterOptions
from .lite_rrule_expander import DEFAULT_MAX_ITERATIONS

logger = logging.getLogger(__name__)

MIN_MAX_ITERATIONS = 1
MAX_MAX_ITERATIONS = 10000

_TRUTHY = ("1", "true", "yes", "on")


def _coerce_bool(name: str, value: Any) -> bool:
    """Coerce a config flag to bool, warning when it was not one already."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        result = value.strip().lower() in _TRUTHY
    else:
        result = bool(value)
    logger.warning("Config %s=%r is not a bool; coercing to %s", name, value, result)
    return result


@dataclass
class Config:
    """Typed configuration for agenda_lite.

    Fields:
        max_iterations: iteration ceiling for recurrence expansion (1..10000)
        enable_expansion: expand recurring activities (False shows anchors only)
        holidays_path: optional holiday catalog override
        default_filters: visibility toggles applied by the CLI views
        log_level: logging level name
    """

    max_iterations: int = DEFAULT_MAX_ITERATIONS
    enable_expansion: bool = True
    holidays_path: str | None = None
    default_filters: CalendarFilterOptions = field(default_factory=CalendarFilterOptions)
    log_level: str = "INFO"

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> Config:
        """Create Config from a plain mapping, applying defaults and validation.

        Numeric-like values are coerced to int, ``max_iterations`` is clamped
        to 1..10000, and unknown filter keys are ignored. Every coercion logs
        a warning.
        """
        if data is None:
            data = {}

        raw_iterations = data.get("max_iterations", DEFAULT_MAX_ITERATIONS)
        try:
            max_iterations = int(raw_iterations)
        except (TypeError, ValueError):
            logger.warning(
                "Config max_iterations=%r is not an int; using default %d",
                raw_iterations,
                DEFAULT_MAX_ITERATIONS,
            )
            max_iterations = DEFAULT_MAX_ITERATIONS
        if max_iterations < MIN_MAX_ITERATIONS:
            logger.warning("max_iterations %d below minimum; coercing to %d", max_iterations, MIN_MAX_ITERATIONS)
            max_iterations = MIN_MAX_ITERATIONS
        elif max_iterations > MAX_MAX_ITERATIONS:
            logger.warning("max_iterations %d above maximum; coercing to %d", max_iterations, MAX_MAX_ITERATIONS)
            max_iterations = MAX_MAX_ITERATIONS

        enable_expansion = _coerce_bool("enable_expansion", data.get("enable_expansion", True))

        holidays_path = data.get("holidays_path")
        if holidays_path is not None:
            holidays_path = str(holidays_path)

        filters_raw = data.get("default_filters") or {}
        if not isinstance(filters_raw, dict):
            logger.warning("Config default_filters is not a mapping; using defaults")
            filters_raw = {}
        known = set(CalendarFilterOptions.model_fields)
        unknown = set(filters_raw) - known
        if unknown:
            logger.warning("Ignoring unknown filter keys: %s", ", ".join(sorted(unknown)))
        default_filters = CalendarFilterOptions(
            **{k: _coerce_bool(k, v) for k, v in filters_raw.items() if k in known}
        )

        log_level = data.get("log_level", "INFO")
        log_level = str(log_level).upper() if log_level is not None else "INFO"

        return cls(
            max_iterations=max_iterations,
            enable_expansion=enable_expansion,
            holidays_path=holidays_path,
            default_filters=default_filters,
            log_level=log_level,
        )


def build_config_from_env() -> dict[str, Any]:
    """Build a partial configuration mapping from environment variables.

    Recognizes:
    - AGENDA_MAX_ITERATIONS -> 'max_iterations'
    - AGENDA_LOG_LEVEL -> 'log_level'
    - AGENDA_HOLIDAYS_PATH -> 'holidays_path'
    """
    cfg: dict[str, Any] = {}

    max_iterations = os.environ.get("AGENDA_MAX_ITERATIONS")
    if max_iterations:
        cfg["max_iterations"] = max_iterations

    log_level = os.environ.get("AGENDA_LOG_LEVEL")
    if log_level:
        cfg["log_level"] = log_level

    holidays_path = os.environ.get("AGENDA_HOLIDAYS_PATH")
    if holidays_path:
        cfg["holidays_path"] = holidays_path

    if cfg:
        logger.debug("Environment config overrides: %s", ", ".join(sorted(cfg)))
    return cfg


def _load_yaml(path: Path) -> Any:
    loaded = yaml.safe_load(path.read_text(encoding="utf-8"))
    # safe_load returns None for empty files
    return {} if loaded is None else loaded


def load_config(path: str | None = None, use_env: bool = True) -> Config:
    """Load configuration from a YAML file and return a Config instance.

    Args:
        path: Optional path to the config file. Defaults to ./agenda.yaml.
        use_env: Merge ``AGENDA_*`` environment overrides over file values.

    Returns:
        Config dataclass instance with values from file (or defaults).

    Behavior:
    - If file is missing: returns defaults (plus env overrides).
    - If file exists but top-level is not a mapping: raises ValueError.
    """
    p = Path(path) if path else Path.cwd() / "agenda.yaml"
    logger.debug("Attempting to load config from %s", p)

    raw: dict[str, Any] = {}
    if p.exists():
        loaded = _load_yaml(p)
        if not isinstance(loaded, dict):
            logger.warning("Config file %s parsed but top-level is not a mapping: %r", p, loaded)
            raise ValueError("Config file must contain a mapping at top level")  # noqa: TRY004
        raw = loaded
        logger.info("Loaded configuration from %s", p)
    else:
        logger.info("Config file %s not found; using defaults", p)

    if use_env:
        raw = {**raw, **build_config_from_env()}

    cfg = Config.from_dict(raw)
    logger.debug("Configuration values: %s", cfg)
    return cfg
