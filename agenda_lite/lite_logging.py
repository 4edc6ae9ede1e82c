"""
Central logging configuration for agenda_lite.

Keeps the package's own loggers at INFO (or DEBUG when troubleshooting) and
holds third-party loggers at WARNING so expansion traces stay readable.
"""

import logging
import os
from typing import Optional

# Package module loggers tuned by configure_lite_logging()
LITE_MODULES = [
    "agenda_lite",
    "agenda_lite.lite_rrule_parser",
    "agenda_lite.lite_rrule_expander",
    "agenda_lite.lite_calendar_view",
    "agenda_lite.lite_holidays",
    "agenda_lite.config_loader",
]

# Third-party loggers that stay quiet unless reset for troubleshooting
SUPPRESSED_LOGGERS = [
    "asyncio",
    "pydantic",
]


def configure_lite_logging(
    debug_mode: bool = False,
    force_debug: Optional[bool] = None,
    log_level: Optional[str] = None,
) -> None:
    """
    Configure logging levels for agenda_lite.

    Args:
        debug_mode: Whether to enable debug logging for agenda_lite modules
        force_debug: Override debug mode setting (None to use env var detection)
        log_level: Root level name used outside debug mode (default INFO)

    Environment Variables:
        AGENDA_DEBUG: Set to '1', 'true', 'yes', 'on' to force debug logging
        AGENDA_LOG_LEVEL: Override root log level (DEBUG, INFO, WARNING, ERROR)
    """
    env_debug = os.getenv("AGENDA_DEBUG", "").strip().lower() in ("1", "true", "yes", "on")
    env_log_level = os.getenv("AGENDA_LOG_LEVEL", "").upper()

    if force_debug is not None:
        final_debug = force_debug
    elif env_debug:
        final_debug = True
    else:
        final_debug = debug_mode

    root_level = logging.DEBUG if final_debug else logging.INFO
    if not final_debug and log_level and log_level.upper() in ("DEBUG", "INFO", "WARNING", "ERROR"):
        root_level = getattr(logging, log_level.upper())
    if env_log_level in ("DEBUG", "INFO", "WARNING", "ERROR"):
        root_level = getattr(logging, env_log_level)

    root_logger = logging.getLogger()
    root_logger.setLevel(root_level)

    if not root_logger.handlers:
        handler = logging.StreamHandler()
        handler.setLevel(root_level)
        handler.setFormatter(
            logging.Formatter("[%(asctime)s] %(levelname)s - %(name)s - %(message)s")
        )
        root_logger.addHandler(handler)

    logger_config: dict[str, int] = {name: logging.WARNING for name in SUPPRESSED_LOGGERS}

    lite_level = logging.DEBUG if final_debug else logging.INFO
    for module in LITE_MODULES:
        logger_config[module] = lite_level

    for logger_name, level in logger_config.items():
        logging.getLogger(logger_name).setLevel(level)

    if final_debug:
        root_logger.info("Debug logging enabled for agenda_lite modules.")
    else:
        root_logger.info("Production logging configuration applied.")


def reset_logging_to_debug() -> None:
    """
    Reset all loggers to DEBUG level for troubleshooting.
    """
    logging.getLogger().setLevel(logging.DEBUG)

    for logger_name in SUPPRESSED_LOGGERS + LITE_MODULES:
        logging.getLogger(logger_name).setLevel(logging.DEBUG)

    logging.getLogger().info("All loggers reset to DEBUG level for troubleshooting")


def get_logging_status() -> dict[str, str]:
    """
    Get current logging configuration status.

    Returns:
        Dictionary mapping logger names to their current levels
    """
    status = {"root": logging.getLevelName(logging.getLogger().level)}

    for logger_name in ["agenda_lite", "agenda_lite.lite_rrule_expander", *SUPPRESSED_LOGGERS]:
        status[logger_name] = logging.getLevelName(logging.getLogger(logger_name).level)

    return status
