from __future__ import annotations

import json
import logging
import socket
from abc import ABC, abstractmethod
from datetime import date, datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Mapping, Protocol

from .exceptions import LogDirectoryError

DEFAULT_CHANNEL = "OpenKktSDK"

NOTICE = 25
ALERT = 55
EMERGENCY = 60

logging.addLevelName(NOTICE, "NOTICE")
logging.addLevelName(ALERT, "ALERT")
logging.addLevelName(EMERGENCY, "EMERGENCY")


class LogLevel(str, Enum):
    DEBUG = "debug"
    INFO = "info"
    NOTICE = "notice"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"
    ALERT = "alert"
    EMERGENCY = "emergency"

    @property
    def levelno(self) -> int:
        return _LEVEL_NUMBERS[self]

    @classmethod
    def parse(cls, value: str | LogLevel) -> LogLevel:
        if isinstance(value, LogLevel):
            return value
        try:
            return cls(value.strip().lower())
        except ValueError as exc:
            raise ValueError(f"Invalid log level: {value!r}") from exc


_LEVEL_NUMBERS = {
    LogLevel.DEBUG: logging.DEBUG,
    LogLevel.INFO: logging.INFO,
    LogLevel.NOTICE: NOTICE,
    LogLevel.WARNING: logging.WARNING,
    LogLevel.ERROR: logging.ERROR,
    LogLevel.CRITICAL: logging.CRITICAL,
    LogLevel.ALERT: ALERT,
    LogLevel.EMERGENCY: EMERGENCY,
}


class SdkLogger(Protocol):
    def log(self, level: LogLevel, message: str, context: Mapping[str, Any] | None = None) -> None: ...


class LevelMethodsMixin(ABC):
    """One method per level, all routed through ``log``."""

    @abstractmethod
    def log(self, level: LogLevel, message: str, context: Mapping[str, Any] | None = None) -> None: ...

    def debug(self, message: str, context: Mapping[str, Any] | None = None) -> None:
        self.log(LogLevel.DEBUG, message, context)

    def info(self, message: str, context: Mapping[str, Any] | None = None) -> None:
        self.log(LogLevel.INFO, message, context)

    def notice(self, message: str, context: Mapping[str, Any] | None = None) -> None:
        self.log(LogLevel.NOTICE, message, context)

    def warning(self, message: str, context: Mapping[str, Any] | None = None) -> None:
        self.log(LogLevel.WARNING, message, context)

    def error(self, message: str, context: Mapping[str, Any] | None = None) -> None:
        self.log(LogLevel.ERROR, message, context)

    def critical(self, message: str, context: Mapping[str, Any] | None = None) -> None:
        self.log(LogLevel.CRITICAL, message, context)

    def alert(self, message: str, context: Mapping[str, Any] | None = None) -> None:
        self.log(LogLevel.ALERT, message, context)

    def emergency(self, message: str, context: Mapping[str, Any] | None = None) -> None:
        self.log(LogLevel.EMERGENCY, message, context)


class StdLogger(LevelMethodsMixin):
    """Forwards to a stdlib logger as one JSON payload per record."""

    def __init__(self, name: str = "open_kkt_sdk") -> None:
        self._logger = logging.getLogger(name)

    def log(self, level: LogLevel, message: str, context: Mapping[str, Any] | None = None) -> None:
        level = LogLevel.parse(level)
        payload = {"level": level.value, "message": message, "context": dict(context or {})}
        self._logger.log(level.levelno, json.dumps(payload, ensure_ascii=False, default=str))


class JsonLineFormatter(logging.Formatter):
    def __init__(self, channel: str) -> None:
        super().__init__()
        self.channel = channel
        self.host = socket.gethostname()

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "@timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "@version": 1,
            "host": self.host,
            "message": record.getMessage(),
            "type": self.channel,
            "channel": "daily",
            "level": record.levelname,
            "context": getattr(record, "context", {}),
        }
        return json.dumps(payload, ensure_ascii=False, default=str)


class DailyFileLogger(LevelMethodsMixin):
    """Writes each level to ``<log_dir>/<level>-<YYYY-MM-DD>.log``."""

    def __init__(
        self,
        log_dir: str | Path,
        *,
        channel: str = DEFAULT_CHANNEL,
        min_level: LogLevel | str = LogLevel.DEBUG,
        today: Callable[[], date] = date.today,
    ) -> None:
        self.log_dir = Path(log_dir)
        try:
            self.log_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise LogDirectoryError(f"Unable to create log directory {self.log_dir}: {exc}") from exc
        self.channel = channel
        self.min_level = LogLevel.parse(min_level)
        self._today = today
        self._formatter = JsonLineFormatter(channel)
        self._handlers: dict[LogLevel, tuple[Path, logging.FileHandler]] = {}

    def path_for(self, level: LogLevel) -> Path:
        return self.log_dir / f"{level.value}-{self._today().isoformat()}.log"

    def _handler(self, level: LogLevel) -> logging.FileHandler:
        path = self.path_for(level)
        current = self._handlers.get(level)
        if current is not None:
            current_path, handler = current
            if current_path == path:
                return handler
            handler.close()
        handler = logging.FileHandler(path, encoding="utf-8")
        handler.setFormatter(self._formatter)
        self._handlers[level] = (path, handler)
        return handler

    def log(self, level: LogLevel, message: str, context: Mapping[str, Any] | None = None) -> None:
        level = LogLevel.parse(level)
        if level.levelno < self.min_level.levelno:
            return
        record = logging.LogRecord(
            name=self.channel,
            level=level.levelno,
            pathname=__file__,
            lineno=0,
            msg=message,
            args=None,
            exc_info=None,
        )
        record.context = dict(context or {})
        self._handler(level).handle(record)

    def close(self) -> None:
        for _, handler in self._handlers.values():
            handler.close()
        self._handlers.clear()
