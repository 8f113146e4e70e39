"""
Logging setup for the Daily Reward Exporter

Human-readable console output by default; set JSON_LOGGING=true to add a second
handler emitting one JSON document per record.
"""

import json
import logging
import os
from datetime import datetime, timezone
from typing import Optional

from src.utils.tick_context import tick_id_filter

CONSOLE_FORMAT = '[%(asctime)s] %(levelname)s [%(tick_id)s] - %(message)s'
CONSOLE_DATEFMT = '%Y-%m-%d %H:%M:%S'

# extra= fields copied into JSON output, with their output key
EXTRA_FIELDS = {
    'account': 'account',
    'reward': 'reward',
    'duration': 'duration_seconds',
    'samples': 'samples',
}


class StructuredJSONFormatter(logging.Formatter):
    """JSON formatter with tick ID support."""

    def format(self, record):
        log_data = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'tick_id': getattr(record, 'tick_id', None),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno,
        }

        for attr, key in EXTRA_FIELDS.items():
            if hasattr(record, attr):
                log_data[key] = getattr(record, attr)

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_data)


def json_logging_enabled() -> bool:
    """True if JSON_LOGGING is set to true in the environment."""
    return os.getenv('JSON_LOGGING', 'false').lower() == 'true'


def configure_logging(
    verbose: bool = False,
    json_logging: Optional[bool] = None,
    logger_name: str = "src"
) -> logging.Logger:
    """
    Configure the exporter's loggers.

    Args:
        verbose: Log at DEBUG instead of INFO
        json_logging: Use the JSON handler (defaults to JSON_LOGGING env var)
        logger_name: Parent logger to configure

    Returns:
        The configured logger
    """
    if json_logging is None:
        json_logging = json_logging_enabled()

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt=CONSOLE_DATEFMT))
    handlers = [console_handler]

    if json_logging:
        json_handler = logging.StreamHandler()
        json_handler.setFormatter(StructuredJSONFormatter())
        handlers.append(json_handler)

    logger = logging.getLogger(logger_name)
    for existing in list(logger.handlers):
        logger.removeHandler(existing)
    for handler in handlers:
        handler.addFilter(tick_id_filter)
        logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    logger.propagate = False

    return logger
