# src/core/logging_config.py
# Structured JSON logs for the role breakdown API.

import logging
import sys
from datetime import datetime, timezone
from typing import Optional, TextIO

from pythonjsonlogger import jsonlogger

SERVICE_NAME = "role-breakdown-engine"

# Request context the routers pass through `extra=`; emitted only when present
CONTEXT_FIELDS = ("user_id", "role_id", "selected_role_id")


class RoleEngineJsonFormatter(jsonlogger.JsonFormatter):
    """Adds service, ISO-8601 UTC timestamp, level and request context to every record."""

    def __init__(self, *args, service_name: str = SERVICE_NAME, **kwargs):
        super().__init__(*args, **kwargs)
        self.service_name = service_name

    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)
        log_record['timestamp'] = datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat()
        log_record['level'] = record.levelname
        log_record['logger'] = record.name
        log_record['service'] = self.service_name
        for field in CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                log_record[field] = value


def _json_handler(root_logger: logging.Logger) -> Optional[logging.Handler]:
    for handler in root_logger.handlers:
        if isinstance(handler.formatter, RoleEngineJsonFormatter):
            return handler
    return None


def setup_logging(log_level_str: str = "INFO", stream: Optional[TextIO] = None,
                  service_name: str = SERVICE_NAME) -> logging.Handler:
    """
    Routes root logging through one JSON handler. Calling it again only
    updates the level, so reloads and test runs do not duplicate output.
    Returns the JSON handler.
    """
    log_level = getattr(logging, log_level_str.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    handler = _json_handler(root_logger)
    if handler is None:
        handler = logging.StreamHandler(stream or sys.stdout)
        handler.setFormatter(RoleEngineJsonFormatter('%(message)s', service_name=service_name))
        root_logger.addHandler(handler)
        root_logger.info(f"Structured JSON logging configured with level: {logging.getLevelName(log_level)}")
    else:
        root_logger.debug(f"Structured JSON logging already configured; level set to {logging.getLevelName(log_level)}")
    return handler
