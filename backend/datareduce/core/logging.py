"""
Structured logging configuration.

Provides JSON logging for log shippers and readable text format for development.
"""
import sys
import logging
import json
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from datareduce.core.config import Settings, get_settings

# LogRecord attributes that are not user-supplied extras
_RESERVED_ATTRS = frozenset((
    'name', 'msg', 'args', 'created', 'filename', 'funcName', 'levelname',
    'levelno', 'lineno', 'module', 'msecs', 'pathname', 'process',
    'processName', 'relativeCreated', 'stack_info', 'thread', 'threadName',
    'exc_info', 'exc_text', 'message', 'taskName',
))


class JSONFormatter(logging.Formatter):
    """
    Structured JSON log formatter.

    Outputs one JSON object per record with timestamp, level, logger,
    message, source location and any ``extra`` fields (metric, duration,
    sizes of a reduction).
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS and not key.startswith('_'):
                log_data[key] = value

        return json.dumps(log_data, default=str)


class TextFormatter(logging.Formatter):
    """Readable text formatter for development."""

    def __init__(self):
        super().__init__(
            fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )


def configure_logging(settings: Optional[Settings] = None) -> None:
    """
    Configure logging for the ``datareduce`` logger tree.

    Uses ``settings.log_format``:
    - 'json': Structured JSON logging
    - 'text': Human-readable format (default)
    """
    settings = settings or get_settings()

    package_logger = logging.getLogger('datareduce')
    package_logger.setLevel(getattr(logging, settings.log_level, logging.INFO))

    # Remove existing handlers
    for handler in package_logger.handlers[:]:
        package_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)

    if settings.log_format == 'json':
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(TextFormatter())

    package_logger.addHandler(handler)
    package_logger.propagate = False

    if settings.log_format == 'json':
        package_logger.info("Structured JSON logging enabled")
