"""
Formatters turning LogEvents into Telegram message text.
"""
from __future__ import annotations

import html
from abc import ABC, abstractmethod
from typing import Callable, Dict

from telegram_hook.events import LogEvent, LogLevel


class LogFormatter(ABC):
    """
    Abstract base class for log formatters.

    Formatters convert LogEvent objects into the text a hook sends.
    """

    @abstractmethod
    def format(self, event: LogEvent) -> str:
        """
        Format a LogEvent into the target format.

        Args:
            event: The LogEvent to format

        Returns:
            Formatted string ready to send to the destination
        """
        pass


# TRACE has no entry: trace events get an empty label.
LEVEL_LABELS: Dict[LogLevel, str] = {
    LogLevel.PANIC: "<b>PANIC</b>",
    LogLevel.FATAL: "<b>FATAL</b>",
    LogLevel.ERROR: "<b>ERROR</b>",
    LogLevel.WARNING: "<b>WARNING</b>",
    LogLevel.INFO: "<b>INFO</b>",
    LogLevel.DEBUG: "<b>DEBUG</b>",
}


class TelegramHTMLFormatter(LogFormatter):
    """
    Telegram HTML parse-mode formatter.

    Produces ``<label>@<app name> - <message>`` followed, when the event has
    fields, by a ``<pre>`` block with one escaped ``key: value`` line per field.
    """

    def __init__(self, app_name: Callable[[], str]):
        """
        Args:
            app_name: Callable returning the current application name. It is
                called on every format so renames take effect immediately.
        """
        self._app_name = app_name

    def format(self, event: LogEvent) -> str:
        label = LEVEL_LABELS.get(event.severity, "")
        msg = f"{label}@{self._app_name()} - {event.as_text()}"

        fields = dict(event.custom_fields)
        # a captured exception shows up like the `error` field of a logged exception
        summary = event.exception_summary()
        if summary and "error" not in fields:
            fields["error"] = summary

        if fields:
            lines = [msg, "<pre>"]
            for key in sorted(fields, key=str):
                lines.append(html.escape(f"\t{key}: {fields[key]}"))
            lines.append("</pre>")
            msg = "\n".join(lines)

        return msg
