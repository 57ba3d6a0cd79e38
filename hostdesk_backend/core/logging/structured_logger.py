"""
Structured JSON log formatting for HostDesk.
"""

import logging
import traceback
from datetime import datetime
from typing import Any

from pythonjsonlogger.json import JsonFormatter

JSON_LOG_FORMAT = "%(timestamp)s %(level)s %(transaction_id)s %(message)s"
TEXT_LOG_FORMAT = (
    "%(asctime)s | %(levelname)s | %(transaction_id)s | "
    "%(name)s:%(lineno)d | %(message)s"
)

SERVICE_NAME = "hostdesk-backend"


class StructuredFormatter(JsonFormatter):
    """JSON formatter that adds the fields every HostDesk log line carries."""

    def add_fields(
        self,
        log_record: dict[str, Any],
        record: logging.LogRecord,
        message_dict: dict[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)

        log_record["timestamp"] = datetime.now().astimezone().isoformat()
        log_record["transaction_id"] = getattr(record, "transaction_id", None)
        log_record["level"] = record.levelname
        log_record["logger_name"] = record.name
        log_record["function"] = record.funcName
        log_record["line"] = record.lineno
        log_record["service"] = SERVICE_NAME

        if record.exc_info and record.exc_info[0] is not None:
            log_record["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "stacktrace": traceback.format_exception(*record.exc_info),
            }

        for field in ["msg", "args", "created", "msecs", "relativeCreated", "pathname"]:
            log_record.pop(field, None)


def build_formatter(use_json_format: bool) -> logging.Formatter:
    """Return the JSON formatter or a plain one-line text formatter."""
    if use_json_format:
        return StructuredFormatter(fmt=JSON_LOG_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S")
    return logging.Formatter(TEXT_LOG_FORMAT)
