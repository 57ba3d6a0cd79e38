"""Logging infrastructure for the HostDesk backend."""

from .file_logger import FileLogger, setup_file_logging
from .logger_config import get_logger, setup_logging, shutdown_logging
from .middleware import (
    RequestIdMiddleware,
    TransactionIdFilter,
    get_transaction_id,
    set_transaction_id,
)
from .structured_logger import StructuredFormatter

__all__ = [
    "FileLogger",
    "setup_file_logging",
    "get_logger",
    "setup_logging",
    "shutdown_logging",
    "RequestIdMiddleware",
    "TransactionIdFilter",
    "StructuredFormatter",
    "get_transaction_id",
    "set_transaction_id",
]
