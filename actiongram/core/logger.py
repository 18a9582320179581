"""ActiongramLogger — Singleton JSON logger for the library and bot layer.

Provides a single, project-wide logger that writes structured JSON to stdout
and, when ``ACTIONGRAM_LOG_DIR`` is set, to a rotating file inside that
directory.
"""

import json
import logging
import os
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from typing import Optional


class _JsonFormatter(logging.Formatter):
    """Format every log record as a single-line JSON object.

    Standard fields (timestamp, level, logger, message, module, func_name)
    are always present.  Any *extra* key-value pairs passed via the ``extra``
    parameter of a logging call are merged into the JSON object, so callers
    can attach call-specific context such as ``api_endpoint``, ``update_id``,
    ``chat_id`` or ``offset``.

    Example::

        logger.info("Update received", extra={"update_id": 7, "offset": 8})

    Produces::

        {"timestamp": "…", "level": "INFO", …, "update_id": 7, "offset": 8}
    """

    # Keys that belong to the standard LogRecord — everything else is extra.
    _BUILTIN_ATTRS: frozenset[str] = frozenset(vars(logging.LogRecord(
        name="", level=0, pathname="", lineno=0, msg="", args=(), exc_info=None,
    )))

    def format(self, record: logging.LogRecord) -> str:
        """Serialize *record* to a JSON string."""
        log_entry: dict = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "func_name": record.funcName,
        }

        for key, value in record.__dict__.items():
            if key not in self._BUILTIN_ATTRS and key not in log_entry:
                log_entry[key] = value

        if record.exc_info:
            log_entry["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, ensure_ascii=False, default=str)


class ActiongramLogger:
    """Singleton logger with a console handler and an optional rotating file.

    Usage::

        from actiongram.core.logger import ActiongramLogger

        logger = ActiongramLogger.get_logger()
        logger.info("Polling started")
    """

    _instance: Optional["ActiongramLogger"] = None
    _logger: Optional[logging.Logger] = None

    _LOGGER_NAME: str = "actiongram"
    _LOG_DIR_ENV: str = "ACTIONGRAM_LOG_DIR"
    _LOG_FILE: str = "actiongram.log"
    _MAX_BYTES: int = 5 * 1024 * 1024  # 5 MB
    _BACKUP_COUNT: int = 5

    def __new__(cls, level: int = logging.INFO) -> "ActiongramLogger":
        """Ensure only one instance is ever created (Singleton)."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._init_logger(level)
        return cls._instance

    # ------------------------------------------------------------------
    # Initialisation helpers
    # ------------------------------------------------------------------

    def _init_logger(self, level: int) -> None:
        """Create the underlying :class:`logging.Logger` and attach handlers."""
        self._logger = logging.getLogger(self._LOGGER_NAME)
        self._logger.setLevel(level)

        # Avoid duplicate handlers if the module is reloaded.
        if self._logger.handlers:
            return

        formatter = _JsonFormatter()

        stream_handler = logging.StreamHandler()
        stream_handler.setLevel(level)
        stream_handler.setFormatter(formatter)
        self._logger.addHandler(stream_handler)

        log_dir = os.environ.get(self._LOG_DIR_ENV)
        if not log_dir:
            return

        os.makedirs(log_dir, exist_ok=True)
        file_handler = RotatingFileHandler(
            os.path.join(log_dir, self._LOG_FILE),
            maxBytes=self._MAX_BYTES,
            backupCount=self._BACKUP_COUNT,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        self._logger.addHandler(file_handler)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @staticmethod
    def get_logger(level: int = logging.INFO) -> logging.Logger:
        """Return the shared :class:`logging.Logger` instance.

        Creates the singleton on first call; subsequent calls return the
        same logger regardless of the *level* argument.
        """
        instance = ActiongramLogger(level)
        assert instance._logger is not None  # guaranteed by __new__
        return instance._logger

    @staticmethod
    def set_level(level: int | str) -> None:
        """Change the level of the shared logger and all of its handlers."""
        logger = ActiongramLogger.get_logger()
        logger.setLevel(level)
        for handler in logger.handlers:
            handler.setLevel(level)

