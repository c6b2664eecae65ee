# deep_redact/logging_config.py

"""JSON log output for applications embedding deep_redact.

Nothing here runs on import. Applications that want one JSON object per log
line call ``configure_logging`` once at start-up; the traversal trace fields
(``path``, ``action``) then appear as top-level keys.
"""

import logging
import sys
import json
from datetime import datetime, timezone
from typing import Any, Dict

# Attributes every LogRecord carries; anything else arrived through `extra`.
_RECORD_ATTRIBUTES = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None))
) | {"message", "asctime"}


def _extra_fields(record: logging.LogRecord) -> Dict[str, Any]:
    return {
        name: value
        for name, value in vars(record).items()
        if name not in _RECORD_ATTRIBUTES
    }


class StructuredFormatter(logging.Formatter):
    """Renders a record and its ``extra`` fields as a single JSON object."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = _extra_fields(record)
        payload.update(
            timestamp=datetime.now(timezone.utc).isoformat(),
            level=record.levelname,
            logger=record.name,
            message=record.getMessage(),
            module=record.module,
            function=record.funcName,
            line=record.lineno,
        )

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        # Values such as paths or compiled patterns fall back to str().
        return json.dumps(payload, default=str)


def configure_logging(level: str = "INFO") -> None:
    """Routes all logging to stdout as JSON.

    Replaces any handlers already on the root logger.

    Args:
        level: Level name; unknown names fall back to INFO
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    handler.setFormatter(StructuredFormatter())

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level)

    logging.getLogger(__name__).info(
        "JSON logging enabled",
        extra={"log_level": logging.getLevelName(log_level)},
    )
