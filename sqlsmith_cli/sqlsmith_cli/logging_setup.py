"""Root logger configuration for the CLI.

Logs go to *stderr* so they never mix with merged SQL on *stdout*.  With
``--structured-logs`` (or ``SQLSMITH_STRUCTURED_LOGGING=true``) each record
is emitted as one JSON object per line:

    {
        "timestamp": "2025-05-15T12:34:56.789012+00:00",
        "level": "INFO",
        "logger": "sqlsmith.merger.pipeline",
        "message": "Resolved order for 12 statement(s)",
        "exc_info": "Traceback ..."  // present only on exceptions
    }
"""

from __future__ import annotations

import json
import logging
import sys
import traceback
from datetime import UTC, datetime
from typing import Any

_PLAIN_FORMAT = "%(levelname)s %(name)s: %(message)s"


class JSONFormatter(logging.Formatter):
    """Format log records as single-line JSON."""

    def format(self, record: logging.LogRecord) -> str:
        """Render *record* as a single JSON line."""
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info and record.exc_info[0] is not None:
            payload["exc_info"] = "".join(traceback.format_exception(*record.exc_info))

        return json.dumps(payload, default=str, ensure_ascii=False)


def configure_logging(level: int = logging.INFO, *, structured: bool = False) -> None:
    """Replace the root logger's handlers with a single stderr handler."""
    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JSONFormatter() if structured else logging.Formatter(_PLAIN_FORMAT))
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    # sqlglot warns on every statement it falls back to parsing as a Command.
    logging.getLogger("sqlglot").setLevel(max(level, logging.ERROR))
