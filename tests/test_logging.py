"""Tests for structured log formatting and transaction id tagging."""

from __future__ import annotations

import json
import logging
import sys

import pytest

from hostdesk_backend.core.logging import (
    StructuredFormatter,
    TransactionIdFilter,
    get_logger,
    set_transaction_id,
)
from hostdesk_backend.core.logging.structured_logger import JSON_LOG_FORMAT

pytestmark = pytest.mark.unit


def _record(msg: str = "store selected", **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="hostdesk_backend.property_management.dependencies",
        level=logging.WARNING,
        pathname=__file__,
        lineno=42,
        msg=msg,
        args=(),
        exc_info=None,
        func="create_store",
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_structured_formatter_emits_service_fields():
    formatter = StructuredFormatter(fmt=JSON_LOG_FORMAT)
    set_transaction_id("txn00001")
    record = _record(operation="create_store")
    TransactionIdFilter().filter(record)

    payload = json.loads(formatter.format(record))

    assert payload["message"] == "store selected"
    assert payload["level"] == "WARNING"
    assert payload["transaction_id"] == "txn00001"
    assert payload["service"] == "hostdesk-backend"
    assert payload["function"] == "create_store"
    assert payload["line"] == 42
    assert payload["operation"] == "create_store"
    assert "pathname" not in payload


def test_structured_formatter_includes_exception():
    formatter = StructuredFormatter(fmt=JSON_LOG_FORMAT)
    try:
        raise RuntimeError("boom")
    except RuntimeError:
        record = _record("failed", exc_info=sys.exc_info())

    payload = json.loads(formatter.format(record))

    assert payload["exception"]["type"] == "RuntimeError"
    assert payload["exception"]["message"] == "boom"


def test_get_logger_prefixes_application_name():
    assert get_logger("directory.client").name == "hostdesk_backend.directory.client"
    assert get_logger().name == "hostdesk_backend"
