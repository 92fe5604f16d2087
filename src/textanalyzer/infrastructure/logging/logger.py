"""Application-wide structured logger."""

import logging
import threading
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import Any, Dict, Optional

from rich.logging import RichHandler


LOGGER_NAME = "textanalyzer"

# Attributes every LogRecord has; anything else came in through ``extra``
_RESERVED_ATTRS = set(
    logging.LogRecord("", logging.INFO, "", 0, "", None, None).__dict__
) | {"message", "asctime"}


class ContextFormatter(logging.Formatter):
    """Formatter that appends ``extra`` fields as ``key=value`` pairs."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        context = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _RESERVED_ATTRS and not key.startswith("_")
        }
        if context:
            pairs = " ".join(f"{key}={value}" for key, value in context.items())
            message = f"{message} | {pairs}"
        return message


class TextAnalyzerLogger:
    """
    Singleton wrapper around the ``textanalyzer`` logger.

    Components call ``TextAnalyzerLogger.get_instance()`` and log with
    ``extra={...}`` for structured context. Handlers are installed once by
    ``configure``; until then records propagate to the root logger.
    """

    _instance: Optional["TextAnalyzerLogger"] = None
    _instance_lock = threading.Lock()

    def __init__(self):
        self._logger = logging.getLogger(LOGGER_NAME)
        self._configured = False

    @classmethod
    def get_instance(cls) -> "TextAnalyzerLogger":
        """Return the shared logger, creating it on first use."""
        if cls._instance is None:
            with cls._instance_lock:
                if cls._instance is None:
                    cls._instance = cls()
        return cls._instance

    @classmethod
    def reset(cls):
        """Drop the shared instance and its handlers (used by tests)."""
        with cls._instance_lock:
            if cls._instance is not None:
                cls._instance._remove_handlers()
            cls._instance = None

    def configure(
        self,
        level: str = "INFO",
        console: bool = True,
        file: Optional[str] = None,
        rotation: str = "daily",
        retention_days: int = 30,
    ):
        """
        Install handlers on the logger.

        Args:
            level: Logging level name
            console: Log to the console through Rich
            file: Optional log file path
            rotation: 'daily' for midnight rotation, 'none' for a plain file
            retention_days: Rotated files to keep
        """
        self._remove_handlers()
        self._logger.setLevel(getattr(logging, level.upper(), logging.INFO))

        if console:
            console_handler = RichHandler(show_path=False, rich_tracebacks=True)
            console_handler.setFormatter(ContextFormatter("%(message)s"))
            self._logger.addHandler(console_handler)

        if file:
            log_path = Path(file)
            log_path.parent.mkdir(parents=True, exist_ok=True)
            if rotation == "daily":
                file_handler: logging.Handler = TimedRotatingFileHandler(
                    log_path, when="midnight", backupCount=retention_days, encoding="utf-8"
                )
            else:
                file_handler = logging.FileHandler(log_path, encoding="utf-8")
            file_handler.setFormatter(ContextFormatter(
                "%(asctime)s %(levelname)s [%(threadName)s] %(message)s"
            ))
            self._logger.addHandler(file_handler)

        self._logger.propagate = not self._logger.handlers
        self._configured = True

    def _remove_handlers(self):
        for handler in list(self._logger.handlers):
            self._logger.removeHandler(handler)
            handler.close()
        self._logger.propagate = True
        self._configured = False

    @property
    def is_configured(self) -> bool:
        return self._configured

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    def debug(self, message: str, extra: Optional[Dict[str, Any]] = None, **kwargs):
        self._logger.debug(message, extra=extra, **kwargs)

    def info(self, message: str, extra: Optional[Dict[str, Any]] = None, **kwargs):
        self._logger.info(message, extra=extra, **kwargs)

    def warning(self, message: str, extra: Optional[Dict[str, Any]] = None, **kwargs):
        self._logger.warning(message, extra=extra, **kwargs)

    def error(self, message: str, extra: Optional[Dict[str, Any]] = None, **kwargs):
        self._logger.error(message, extra=extra, **kwargs)
