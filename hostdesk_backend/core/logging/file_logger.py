"""
Queue-backed file logging with size-based rotation.
Handlers run on a listener thread so request handlers never block on disk I/O.
"""

import logging
import os
import queue
import sys
from logging.handlers import QueueHandler, QueueListener, RotatingFileHandler

from .structured_logger import build_formatter


class FileLogger:
    """Owns the log queue, its listener thread and the handlers behind it."""

    def __init__(
        self,
        log_file_path: str = "logs/app.log",
        max_bytes: int = 50 * 1024 * 1024,  # 50MB
        backup_count: int = 5,
        log_level: str = "INFO",
        use_json_format: bool = True,
    ):
        self.log_file_path = log_file_path
        self.max_bytes = max_bytes
        self.backup_count = backup_count
        self.level = getattr(logging, log_level.upper())
        self.use_json_format = use_json_format
        self._log_queue: queue.Queue = queue.Queue()
        self._listener: QueueListener | None = None
        self._queue_handler: QueueHandler | None = None

        log_dir = os.path.dirname(log_file_path)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)

    def _handlers(self) -> list[logging.Handler]:
        formatter = build_formatter(self.use_json_format)

        file_handler = RotatingFileHandler(
            self.log_file_path, maxBytes=self.max_bytes, backupCount=self.backup_count
        )
        console_handler = logging.StreamHandler(sys.stdout)
        for handler in (file_handler, console_handler):
            handler.setLevel(self.level)
            handler.setFormatter(formatter)
        return [console_handler, file_handler]

    def start(self) -> None:
        """Start the listener thread draining the queue into the handlers."""
        self._listener = QueueListener(
            self._log_queue, *self._handlers(), respect_handler_level=True
        )
        self._listener.start()

    def get_queue_handler(self) -> QueueHandler:
        """Handler to attach to loggers; it only enqueues records."""
        if self._queue_handler is None:
            self._queue_handler = QueueHandler(self._log_queue)
            self._queue_handler.setLevel(self.level)
        return self._queue_handler

    def stop(self) -> None:
        """Flush queued records and stop the listener."""
        if self._listener:
            self._listener.stop()
            self._listener = None


def setup_file_logging(
    log_file_path: str = "logs/app.log",
    log_level: str = "INFO",
    use_json_format: bool = True,
    max_bytes: int = 50 * 1024 * 1024,
    backup_count: int = 5,
) -> FileLogger | None:
    """
    Set up file logging with queue-based writing.

    Returns:
        A started FileLogger, or None if the log file could not be opened
    """
    try:
        file_logger = FileLogger(
            log_file_path=log_file_path,
            max_bytes=max_bytes,
            backup_count=backup_count,
            log_level=log_level,
            use_json_format=use_json_format,
        )
        file_logger.start()
        return file_logger
    except OSError as e:
        logging.getLogger("hostdesk_backend").error(
            f"Failed to setup file logging: {e}"
        )
        return None
