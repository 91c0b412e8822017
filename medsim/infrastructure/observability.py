"""Structured Logging: JSON and key=value formatters for the simulation service.

Invariants:
    - All logs include timestamp, level, logger name, and message
    - Simulation extras (feature, event, day, appointment_id, error_code, ...) are
      surfaced by both formatters when present on the record
    - setup_logging installs exactly one MedSim handler, however often it is called
"""

import logging
import json
from datetime import datetime, timezone

EXTRA_KEYS = (
    "feature", "event", "days_advanced", "appointment_id", "day",
    "error_code", "listener", "path",
)


def record_extras(record: logging.LogRecord) -> dict:
    """Known extra fields set on the record, in EXTRA_KEYS order."""
    return {
        key: record.__dict__[key]
        for key in EXTRA_KEYS
        if record.__dict__.get(key) is not None
    }


class JSONFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **record_extras(record),
        }
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False, default=str)


class KeyValueFormatter(logging.Formatter):
    """Human-readable line with extras appended as key=value pairs."""

    def __init__(self):
        super().__init__("%(asctime)s %(levelname)s %(name)s - %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        extras = record_extras(record)
        if not extras:
            return line
        pairs = " ".join(f"{k}={v}" for k, v in extras.items())
        head, sep, tail = line.partition("\n")
        return f"{head} [{pairs}]{sep}{tail}"


def setup_logging(level: str = "INFO", fmt: str = "json") -> logging.Handler:
    """Configure root logging. Replaces a handler from an earlier call."""
    for existing in list(logging.root.handlers):
        if getattr(existing, "_medsim", False):
            logging.root.removeHandler(existing)

    handler = logging.StreamHandler()
    handler.setFormatter(JSONFormatter() if fmt == "json" else KeyValueFormatter())
    handler._medsim = True
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
    return handler
