# telegram_hook/events.py
from dataclasses import dataclass, field, fields as dataclass_fields
from enum import IntEnum
from typing import Any, Dict, List, Optional
import traceback


class LogLevel(IntEnum):
    """Severity ordinal, ascending: a larger value is more severe."""
    TRACE = 5
    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40
    FATAL = 50
    PANIC = 60

    WARN = 30  # alias

    @classmethod
    def parse(cls, value: "str | int | LogLevel") -> "LogLevel":
        if isinstance(value, LogLevel):
            return value
        if isinstance(value, int):
            return cls(value)
        name = str(value).strip().upper()
        if name.isdigit():
            return cls(int(name))
        if name == "CRITICAL":
            return cls.FATAL
        try:
            return cls[name]
        except KeyError:
            raise ValueError(f"not a valid log level: {value!r}") from None


# Framework order: most severe first.
ALL_LEVELS: List[LogLevel] = sorted(LogLevel, reverse=True)


@dataclass
class LogEvent:
    severity: LogLevel = LogLevel.INFO
    message: str = ""
    custom_fields: Dict[str, Any] = field(default_factory=dict)

    # capture formatted exception text if provided
    exception_text: Optional[str] = None

    @classmethod
    def from_message(cls, message: str, severity: LogLevel = LogLevel.INFO, **kwargs) -> "LogEvent":
        """
        Build an event from a message plus keyword fields.

        Keywords naming a dataclass attribute set it; everything else lands in
        ``custom_fields``. ``exc_info`` accepts what stdlib logging accepts
        (True, an exception, or a ``sys.exc_info()`` tuple).
        """
        known = {f.name for f in dataclass_fields(cls)}
        base_kwargs: Dict[str, Any] = {}
        extra: Dict[str, Any] = {}

        for k, v in kwargs.items():
            if k == "exc_info":
                if not v:
                    continue
                if v is True:
                    txt = traceback.format_exc()
                elif isinstance(v, tuple) and len(v) == 3:
                    txt = "".join(traceback.format_exception(*v))
                elif isinstance(v, BaseException):
                    txt = "".join(traceback.format_exception(type(v), v, v.__traceback__))
                else:
                    txt = None
                if txt:
                    base_kwargs["exception_text"] = txt
                continue

            if k in known and k not in ("custom_fields", "severity", "message"):
                base_kwargs[k] = v
            else:
                extra[k] = v

        cf = dict(kwargs.get("custom_fields", {}))
        extra.pop("custom_fields", None)
        cf.update(extra)
        base_kwargs["custom_fields"] = cf

        return cls(severity=LogLevel.parse(severity), message=message, **base_kwargs)

    def as_text(self) -> str:
        return self.message or ""

    def exception_summary(self) -> Optional[str]:
        """Last line of the captured traceback, e.g. ``RuntimeError: kaput``."""
        if not self.exception_text:
            return None
        lines = [line for line in self.exception_text.splitlines() if line.strip()]
        return lines[-1].strip() if lines else None
