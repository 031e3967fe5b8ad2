"""EntitlectlLogger — Singleton JSON logger with stderr and rotating file output.

Provides a single, project-wide diagnostics logger that writes structured JSON
to both stderr and ``$ENTITLECTL_LOG_DIR/entitlectl.log`` (with automatic
rotation).  Stdout is left to the command output so piping stays clean.
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from typing import Optional


class _JsonFormatter(logging.Formatter):
    """Format every log record as a single-line JSON object.

    Standard fields (timestamp, level, logger, message, module, func_name)
    are always present.  Any *extra* key-value pairs passed via the ``extra``
    parameter of a logging call are merged into the JSON object, so callers
    can attach request context such as ``kind``, ``principal``, ``path`` or
    ``status_code``.

    Example::

        logger.info(
            "Resolved SCIM identity",
            extra={"kind": "user", "principal": "patrick", "resolved_id": "12345"},
        )

    Produces::

        {"timestamp": "…", "level": "INFO", …, "kind": "user", "principal": "patrick", …}
    """

    # Keys that belong to the standard LogRecord; everything else is extra.
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


def _level_from_env() -> int:
    """Read ``ENTITLECTL_LOG_LEVEL`` (a level name), defaulting to WARNING."""
    name = os.environ.get("ENTITLECTL_LOG_LEVEL", "WARNING").strip().upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.WARNING


class EntitlectlLogger:
    """Singleton logger with dual handlers (stderr + rotating file).

    Usage::

        from core.logger import EntitlectlLogger

        logger = EntitlectlLogger.get_logger()
        logger.debug("Sending request", extra={"method": "GET", "path": "scim/Users"})
    """

    _instance: Optional["EntitlectlLogger"] = None
    _logger: Optional[logging.Logger] = None

    # Rotation settings
    _LOG_FILE: str = "entitlectl.log"
    _MAX_BYTES: int = 5 * 1024 * 1024  # 5 MB
    _BACKUP_COUNT: int = 5

    def __new__(cls, level: Optional[int] = None) -> "EntitlectlLogger":
        """Ensure only one instance is ever created (Singleton)."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._init_logger(level if level is not None else _level_from_env())
        return cls._instance

    # ------------------------------------------------------------------
    # Initialisation helpers
    # ------------------------------------------------------------------

    def _init_logger(self, level: int) -> None:
        """Create the underlying :class:`logging.Logger` and attach handlers."""
        self._logger = logging.getLogger("entitlectl")
        self._logger.setLevel(level)
        self._logger.propagate = False

        # Avoid duplicate handlers if the module is reloaded.
        if self._logger.handlers:
            return

        formatter = _JsonFormatter()

        # --- Console handler (stderr) ---
        stream_handler = logging.StreamHandler(sys.stderr)
        stream_handler.setFormatter(formatter)
        self._logger.addHandler(stream_handler)

        # --- Rotating file handler ---
        log_dir = os.environ.get("ENTITLECTL_LOG_DIR", "logs")
        os.makedirs(log_dir, exist_ok=True)
        log_path = os.path.join(log_dir, self._LOG_FILE)

        file_handler = RotatingFileHandler(
            log_path,
            maxBytes=self._MAX_BYTES,
            backupCount=self._BACKUP_COUNT,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        self._logger.addHandler(file_handler)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @staticmethod
    def get_logger(level: Optional[int] = None) -> logging.Logger:
        """Return the shared :class:`logging.Logger` instance.

        Creates the singleton on first call; subsequent calls return the
        same logger regardless of the *level* argument.  Use
        :meth:`set_level` to change the threshold afterwards.
        """
        instance = EntitlectlLogger(level)
        assert instance._logger is not None  # guaranteed by __new__
        return instance._logger

    @staticmethod
    def set_level(level: int) -> None:
        """Change the threshold of the shared logger (e.g. for ``--verbose``)."""
        EntitlectlLogger.get_logger().setLevel(level)

    def cleanup(self) -> None:
        """Flush and close all handlers attached to the logger."""
        if self._logger is None:
            return
        for handler in list(self._logger.handlers):
            handler.flush()
            handler.close()
            self._logger.removeHandler(handler)
