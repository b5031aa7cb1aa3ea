"""
Root logger setup for turnip-forecaster commands.

Every CLI command calls ``configure_logging(config.logging)`` right after
loading its config.  Engine and report modules only ever ask for
``logging.getLogger(__name__)``; they never install handlers themselves.

Diagnostics go to stderr.  Stdout carries the command's actual output (tables
or ``forecast --json``), so piping a forecast into another tool stays clean
whatever the log level.

With ``json_format = true`` under ``[logging]`` each record becomes a single
JSON line, e.g.::

    {"ts": "2026-04-05T15:00:00Z", "level": "INFO",
     "logger": "turnip_forecaster.engine.forecaster",
     "msg": "Forecast for base price 100: 72 pattern(s), ..."}
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from turnip_forecaster.config import LoggingConfig

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

# Attributes present on every LogRecord; anything else came from ``extra=``.
_RESERVED_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__
) | {"message", "asctime"}


class _JsonFormatter(logging.Formatter):
    """Render a record as ``{"ts", "level", "logger", "msg"}`` plus extras.

    ``exc`` is added when the record carries exception info; keys passed via
    ``extra=`` land at the top level next to the core fields.
    """

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        payload: dict = {
            "ts": created.strftime(LOG_DATE_FORMAT),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        payload.update(
            (key, val)
            for key, val in record.__dict__.items()
            if key not in _RESERVED_ATTRS and not key.startswith("_")
        )
        return json.dumps(payload, default=str)


def _with_format(handler: logging.Handler, level: int, formatter: logging.Formatter) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def configure_logging(config: "LoggingConfig") -> None:
    """Install stderr (and optionally file) handlers on the root logger.

    Replaces whatever handlers the root logger had, so repeated calls never
    duplicate output.  The log file's parent directory is created when
    missing.
    """
    level = getattr(logging, config.level.upper(), logging.INFO)
    formatter: logging.Formatter = (
        _JsonFormatter() if config.json_format
        else logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
    )

    handlers = [_with_format(logging.StreamHandler(sys.stderr), level, formatter)]
    if config.log_file:
        log_path = Path(config.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            _with_format(logging.FileHandler(log_path, encoding="utf-8"), level, formatter)
        )

    logging.basicConfig(level=level, handlers=handlers, force=True)
