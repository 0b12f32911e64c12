"""Structured Logging - JSON formatter and setup for production observability.

Invariants:
    - All logs include timestamp, level, logger name, and message
    - Extra fields (network, phase/tier/stakeholder index, error_code) surfaced when present
    - Decimal rates and big-int token amounts are written as strings, never floats
    - JSON format in production, human-readable in development
    - setup_logging called once on startup via lifespan
"""

import logging
import json
from datetime import datetime, timezone
from decimal import Decimal

EXTRA_FIELDS = (
    "network", "error_code", "phase_index", "tier_index",
    "stakeholder_index", "argument", "rate", "tokens", "path",
)

# JSON consumers lose precision past 2**53
_MAX_SAFE_INT = 2**53


class JSONFormatter(logging.Formatter):
    """Format logs as JSON for structured logging in production."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in EXTRA_FIELDS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = _json_safe(val)
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False)


def _json_safe(val):
    if isinstance(val, Decimal):
        return str(val)
    if isinstance(val, int) and not isinstance(val, bool) and abs(val) > _MAX_SAFE_INT:
        return str(val)
    return val


def setup_logging(level: str = "INFO", fmt: str = "json"):
    """Configure logging for the application."""
    handler = logging.StreamHandler()
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s - %(message)s",
        ))
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
