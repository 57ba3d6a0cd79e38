"""
Central logging configuration for HostDesk.
Provides setup functions and logger management.
"""

import logging
import sys

from .file_logger import FileLogger, setup_file_logging
from .middleware import TransactionIdFilter
from .structured_logger import build_formatter

ROOT_LOGGER_NAME = "hostdesk_backend"

# Third-party loggers routed through our handlers, with their levels
EXTERNAL_LOGGERS = {
    "sqlalchemy": logging.WARNING,
    "httpx": logging.WARNING,
    "httpcore": logging.WARNING,
    "uvicorn": logging.INFO,
    "fastapi": logging.INFO,
}


class LoggingConfig:
    """Central logging configuration manager."""

    def __init__(self):
        self.file_logger: FileLogger | None = None
        self._is_configured = False

    @property
    def is_configured(self) -> bool:
        return self._is_configured

    def setup(
        self,
        log_to_file: bool = False,
        log_level: str = "INFO",
        log_file_path: str = "logs/app.log",
        use_json_format: bool = True,
        max_bytes: int = 50 * 1024 * 1024,
        backup_count: int = 5,
    ) -> logging.Logger:
        """
        Configure the application logger and the external library loggers.

        Calling it again is a no-op until shutdown() has run.
        """
        if self._is_configured:
            return get_logger()

        handler: logging.Handler | None = None
        if log_to_file:
            self.file_logger = setup_file_logging(
                log_file_path=log_file_path,
                log_level=log_level,
                use_json_format=use_json_format,
                max_bytes=max_bytes,
                backup_count=backup_count,
            )
            if self.file_logger:
                handler = self.file_logger.get_queue_handler()

        if handler is None:
            handler = logging.StreamHandler(sys.stdout)
            handler.setFormatter(build_formatter(use_json_format))

        handler.addFilter(TransactionIdFilter())

        app_logger = logging.getLogger(ROOT_LOGGER_NAME)
        app_logger.handlers = [handler]
        app_logger.setLevel(getattr(logging, log_level.upper()))
        app_logger.propagate = False

        for name, level in EXTERNAL_LOGGERS.items():
            ext_logger = logging.getLogger(name)
            ext_logger.handlers = [handler]
            ext_logger.setLevel(level)
            ext_logger.propagate = False

        self._is_configured = True
        return app_logger

    def shutdown(self) -> None:
        """Shutdown logging gracefully."""
        if self.file_logger:
            self.file_logger.stop()
            self.file_logger = None
        self._is_configured = False


# Global logging configuration instance
_logging_config = LoggingConfig()


def setup_logging(
    log_to_file: bool = False,
    log_level: str = "INFO",
    log_file_path: str = "logs/app.log",
    log_format: str = "json",
    max_bytes: int = 50 * 1024 * 1024,
    backup_count: int = 5,
) -> logging.Logger:
    """
    Set up logging once per process.

    Args:
        log_to_file: Whether to also write to a rotating log file
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_file_path: Path to the log file
        log_format: "json" for structured output, anything else for text
        max_bytes: Maximum file size before rotation
        backup_count: Number of rotated files to keep

    Returns:
        Configured main logger instance
    """
    return _logging_config.setup(
        log_to_file=log_to_file,
        log_level=log_level,
        log_file_path=log_file_path,
        use_json_format=log_format.lower() == "json",
        max_bytes=max_bytes,
        backup_count=backup_count,
    )


def get_logger(name: str | None = None) -> logging.Logger:
    """
    Get a logger instance.

    Args:
        name: Optional logger name (will be prefixed with app name)

    Returns:
        Logger instance
    """
    if name:
        return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
    return logging.getLogger(ROOT_LOGGER_NAME)


def shutdown_logging() -> None:
    """Shutdown logging gracefully."""
    _logging_config.shutdown()
