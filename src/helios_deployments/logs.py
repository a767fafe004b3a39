"""Logging helpers.

Plain text for interactive use; JSON lines for scheduled runs whose output
is collected by the invoking scheduler.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict

# Structured extras copied into JSON output when present on a record
_EXTRA_FIELDS = ("log_name", "key", "event")


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        base: Dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }

        for k in _EXTRA_FIELDS:
            v = getattr(record, k, None)
            if v is not None:
                base[k] = v

        if record.exc_info:
            base["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(base, ensure_ascii=True, sort_keys=True)


def configure_logging(level: str = "INFO", json_format: bool = False) -> None:
    """
    Install a single stderr handler on the root logger.

    Args:
        level: Logging level name
        json_format: Emit JSON lines instead of plain text
    """
    handler = logging.StreamHandler(sys.stderr)
    if json_format:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(level.upper())
