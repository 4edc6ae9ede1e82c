"""agenda_lite - recurrence expansion engine for a personal calendar.

Parses activity recurrence rules, expands them into concrete occurrences for a
query window, and aggregates the results into month and day views alongside a
holiday catalog.
"""

__version__ = "0.1.0"

from typing import Optional


def _init_logging(level_name: Optional[str]) -> None:
    """Initialize root logging to stream to console.

    This sets a colorized formatter and level so that early CLI messages are
    visible. Callers may adjust the level later (e.g. from config).

    The AGENDA_DEBUG environment variable (truthy values: "1", "true", "yes",
    "on") forces DEBUG verbosity to surface parser and expander traces.
    """
    import logging
    import os
    import sys

    from colorlog import ColoredFormatter

    debug_env = os.environ.get("AGENDA_DEBUG", "")
    if debug_env.strip().lower() in ("1", "true", "yes", "on"):
        level_name = "DEBUG"

    root = logging.getLogger()
    # Only configure a handler if none is present to avoid duplicate output.
    if not root.handlers:
        handler = logging.StreamHandler(stream=sys.stderr)
        # HH:MM:SS  LEVEL   logger.name: message (only the level is colorized)
        fmt = "%(asctime)s %(log_color)s%(levelname)-7s%(reset)s %(name)s: %(message)s"
        log_colors = {
            "DEBUG": "cyan",
            "INFO": "green",
            "WARNING": "yellow",
            "ERROR": "red",
            "CRITICAL": "bold_red",
        }
        handler.setFormatter(ColoredFormatter(fmt, datefmt="%H:%M:%S", log_colors=log_colors))
        root.addHandler(handler)

    level = logging.INFO
    if isinstance(level_name, str):
        candidate = getattr(logging, level_name.upper(), None)
        if isinstance(candidate, int):
            level = candidate
    root.setLevel(level)
    logging.getLogger(__name__).debug(
        "Logging initialized at level %s", logging.getLevelName(level)
    )
