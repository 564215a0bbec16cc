"""
Bridge from the stdlib logging module to a Hook.

    hook = TelegramHook("billing", token, chat_id, asynchronous=True)
    logging.getLogger().addHandler(TelegramHandler(hook))
    logging.getLogger("billing").error("charge failed", extra={"order": 42})
"""
from __future__ import annotations

import logging
import threading

from telegram_hook.app_logging import LOGGER_NAME
from telegram_hook.events import LogEvent, LogLevel
from telegram_hook.hook import TelegramHook

# Attributes every LogRecord has; anything else came in through `extra=`.
_RECORD_ATTRS = frozenset(
    logging.LogRecord("", logging.INFO, "", 0, "", None, None).__dict__
) | {"message", "asctime", "taskName"}

# Loggers whose records describe the delivery itself; forwarding them would loop.
IGNORED_LOGGERS = ("httpx", "httpcore", LOGGER_NAME)


def level_from_stdlib(levelno: int) -> LogLevel:
    """Map a stdlib level number onto LogLevel (custom levels round down)."""
    if levelno >= logging.CRITICAL:
        return LogLevel.FATAL
    if levelno >= logging.ERROR:
        return LogLevel.ERROR
    if levelno >= logging.WARNING:
        return LogLevel.WARNING
    if levelno >= logging.INFO:
        return LogLevel.INFO
    if levelno >= logging.DEBUG:
        return LogLevel.DEBUG
    return LogLevel.TRACE


class TelegramHandler(logging.Handler):
    """logging.Handler that fires a TelegramHook for every record the hook accepts."""

    def __init__(self, hook: TelegramHook, level: int = logging.NOTSET):
        super().__init__(level)
        self.hook = hook
        self._local = threading.local()

    def filter(self, record: logging.LogRecord) -> bool:
        for name in IGNORED_LOGGERS:
            if record.name == name or record.name.startswith(name + "."):
                return False
        return super().filter(record)

    def to_event(self, record: logging.LogRecord) -> LogEvent:
        fields = {k: v for k, v in record.__dict__.items() if k not in _RECORD_ATTRS and not k.startswith("_")}
        if record.exc_info and record.exc_info[1] is not None:
            fields.setdefault("error", record.exc_info[1])
        return LogEvent(
            severity=level_from_stdlib(record.levelno),
            message=record.getMessage(),
            custom_fields=fields,
        )

    def emit(self, record: logging.LogRecord) -> None:
        if getattr(self._local, "emitting", False):
            return
        self._local.emitting = True
        try:
            event = self.to_event(record)
            if self.hook.should_handle(event.severity):
                self.hook.fire(event)
        except Exception:
            self.handleError(record)
        finally:
            self._local.emitting = False
