"""Logging setup shared by the CLI and the API server.

Levels are set on the `ethmonitor` package logger, so third-party libraries
stay at WARNING unless configured otherwise. Single modules can be tuned
through `Settings.logger_levels`, for example::

    ETHMONITOR_LOGGER_LEVELS='{"ethmonitor.services.task_runner": "DEBUG"}'

which shows every dropped or cancelled enrichment task.
"""

import logging
import sys
from typing import Optional

from ethmonitor.config.settings import Settings, get_settings

PACKAGE_LOGGER = "ethmonitor"

# Worker threads interleave, so the thread name is part of every line.
LOG_FORMAT = "%(asctime)s - %(threadName)s - %(name)s - %(levelname)s - %(message)s"

THIRD_PARTY_LEVELS = {
    "urllib3": logging.WARNING,
    "uvicorn": logging.INFO,
    "uvicorn.access": logging.WARNING,
}


def parse_level(name: str) -> int:
    """Map a level name ("debug", "INFO", ...) to its number."""
    level = logging.getLevelName(name.strip().upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {name!r}")
    return level


def setup_logging(settings: Optional[Settings] = None) -> None:
    """Configure the stdout handler and the ethmonitor logger levels."""
    settings = settings or get_settings()
    package_level = parse_level(settings.log_level)

    logging.basicConfig(
        level=logging.WARNING,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    logging.getLogger(PACKAGE_LOGGER).setLevel(package_level)

    for name, level in THIRD_PARTY_LEVELS.items():
        logging.getLogger(name).setLevel(level)

    # Applied last so they can override anything above.
    for name, level in settings.logger_levels.items():
        logging.getLogger(name).setLevel(parse_level(level))
