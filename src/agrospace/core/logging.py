"""
Logging configuration.

`src/agrospace/config/logging.yaml` keeps third-party loggers at WARNING and
routes the `agrospace` package logger to the console. `configure_logging()`
sets the package level from `app.log_level` (`AGROSPACE_LOG_LEVEL`), or from an
explicit level such as the CLI's `--log-level`.
"""

from __future__ import annotations

import copy
import logging.config

from agrospace.config.settings import get_logging_config, get_settings

PACKAGE_LOGGER = "agrospace"


def configure_logging(level: str | None = None) -> None:
    """Apply the packaged dictConfig with the package logger (and its handlers) at `level`."""
    level = (level or get_settings().app.log_level).upper()
    # get_logging_config() is cached; never hand dictConfig the shared mapping.
    config = copy.deepcopy(get_logging_config())

    package = config.setdefault("loggers", {}).setdefault(PACKAGE_LOGGER, {})
    package["level"] = level
    for name in package.get("handlers", []):
        config["handlers"][name]["level"] = level

    logging.config.dictConfig(config)
