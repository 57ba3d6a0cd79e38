"""
Request correlation for log records.
Each request gets a short transaction id that is attached to every log line
emitted while it is being handled and echoed back in the response headers.
"""

import logging
import uuid
from collections.abc import Callable
from contextvars import ContextVar

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

TRANSACTION_HEADER = "x-transaction-id"

_transaction_id: ContextVar[str | None] = ContextVar("transaction_id", default=None)


def generate_transaction_id() -> str:
    """Generate a short id for request tracking."""
    return uuid.uuid4().hex[:8]


def get_transaction_id() -> str:
    """Get the current transaction ID, creating one outside of a request."""
    txn_id = _transaction_id.get()
    if txn_id is None:
        txn_id = generate_transaction_id()
        _transaction_id.set(txn_id)
    return txn_id


def set_transaction_id(txn_id: str) -> None:
    """Set the transaction ID for the current context."""
    _transaction_id.set(txn_id)


class TransactionIdFilter(logging.Filter):
    """Logging filter that stamps records with the current transaction ID."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not getattr(record, "transaction_id", None):
            record.transaction_id = get_transaction_id()
        return True


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Adopt the caller's transaction id header or mint a new one."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        txn_id = request.headers.get(TRANSACTION_HEADER) or generate_transaction_id()
        set_transaction_id(txn_id)

        response = await call_next(request)
        response.headers[TRANSACTION_HEADER] = txn_id
        return response
