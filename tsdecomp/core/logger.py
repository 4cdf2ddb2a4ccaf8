"""
Logging for tsdecomp.

Library modules only ask for named loggers under the ``tsdecomp`` namespace
and never touch the host program's logging setup. Handlers are attached by
:meth:`Logger.setup`, which the ``tsdecomp`` command line calls once per
invocation.
"""

import logging
import os
import json
import sys
from datetime import datetime, timezone

PACKAGE_LOGGER = "tsdecomp"

logging.getLogger(PACKAGE_LOGGER).addHandler(logging.NullHandler())


class JSONFormatter(logging.Formatter):
    """
    Formatter that outputs log records in JSON format with keys:
    timestamp (in ISO8601 with UTC timezone), level, name, message.
    """

    def format(self, record):
        record_dict = {
            "timestamp": datetime.fromtimestamp(
                record.created, timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }
        return json.dumps(record_dict)


class Logger:
    """
    Named loggers for library modules, plus console output for the CLI.
    """

    _handler: logging.Handler | None = None

    @staticmethod
    def setup(
        level: int | None = None,
        fmt: str | None = None,
        datefmt: str = "%Y-%m-%d %H:%M:%S",
    ) -> logging.Logger:
        """
        Send ``tsdecomp`` log records to stderr.

        Only the ``tsdecomp`` logger is configured; the root logger and its
        handlers are left alone. Calling this again replaces the handler
        installed by the previous call.

        Level falls back to TSDECOMP_LOG_LEVEL (default INFO), format to
        TSDECOMP_LOG_FMT ("json" selects :class:`JSONFormatter`, anything else
        is used as a plain format string).
        """
        if level is None:
            env_level = os.getenv("TSDECOMP_LOG_LEVEL", "INFO").upper()
            level = getattr(logging, env_level, logging.INFO)
        fmt_mode = fmt if fmt is not None else os.getenv("TSDECOMP_LOG_FMT", "")

        handler = logging.StreamHandler(sys.stderr)
        if fmt_mode.lower() == "json":
            handler.setFormatter(JSONFormatter(datefmt=datefmt))
        else:
            handler.setFormatter(
                logging.Formatter(
                    fmt_mode or "%(asctime)s [%(levelname)s] %(name)s – %(message)s",
                    datefmt=datefmt,
                )
            )

        package_logger = logging.getLogger(PACKAGE_LOGGER)
        Logger.reset()
        package_logger.addHandler(handler)
        package_logger.setLevel(level)
        Logger._handler = handler
        return package_logger

    @staticmethod
    def reset() -> None:
        """Remove the handler installed by :meth:`setup` and restore the level."""
        package_logger = logging.getLogger(PACKAGE_LOGGER)
        if Logger._handler is not None:
            package_logger.removeHandler(Logger._handler)
            Logger._handler = None
        package_logger.setLevel(logging.NOTSET)

    @staticmethod
    def get_logger(name: str = PACKAGE_LOGGER) -> logging.Logger:
        """Return the logger for ``name`` without configuring anything."""
        return logging.getLogger(name)
