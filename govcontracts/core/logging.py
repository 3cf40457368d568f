"""GovContracts — Structured JSON Logging.

The SAM.gov key travels in the query string, so any URL that reaches a log
line (ours or one echoed inside an httpx error) is scrubbed before output.
"""

import logging
import json
import re
import sys
from datetime import datetime, timezone

from pydantic import ValidationError

from govcontracts.config import get_settings

EXTRA_FIELDS = (
    "state",
    "status_code",
    "posted_from",
    "posted_to",
    "rows",
    "table",
    "duration_ms",
    "error_kind",
)

API_KEY_PATTERN = re.compile(r"(api_key=)([^&\s\"'<>]+)", re.IGNORECASE)


def mask_secret(value: str, visible: int = 4) -> str:
    """Keep the last few characters of a secret for correlation."""
    if not value:
        return ""
    if len(value) <= visible:
        return "****"
    return f"****{value[-visible:]}"


def redact_api_keys(text: str) -> str:
    """Mask every api_key=... query value found in free text."""
    return API_KEY_PATTERN.sub(lambda m: m.group(1) + mask_secret(m.group(2)), text)


class JSONFormatter(logging.Formatter):
    """One JSON object per line: run context as top-level keys, secrets masked."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": redact_api_keys(record.getMessage()),
        }
        if record.exc_info and record.exc_info[0] is not None:
            log_entry["exception"] = redact_api_keys(self.formatException(record.exc_info))
        for key in EXTRA_FIELDS:
            if hasattr(record, key):
                log_entry[key] = getattr(record, key)
        return json.dumps(log_entry, default=str)


def _configured_level() -> int:
    # Invalid settings are reported by the CLI; logging must still come up.
    try:
        level = get_settings().log_level
    except ValidationError:
        level = "INFO"
    return getattr(logging, level.upper(), logging.INFO)


def get_logger(name: str) -> logging.Logger:
    """Return a `govcontracts.<name>` logger writing JSON lines to stdout."""
    logger = logging.getLogger(f"govcontracts.{name}")
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(JSONFormatter())
        logger.addHandler(handler)
    logger.setLevel(_configured_level())
    return logger
