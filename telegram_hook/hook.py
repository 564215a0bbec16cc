# telegram_hook/hook.py
from __future__ import annotations

import json
import threading
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Dict, List, Optional

import httpx

from telegram_hook.app_logging import tg_logging
from telegram_hook.client import TelegramClient, api_endpoint, redact
from telegram_hook.events import ALL_LEVELS, LogEvent, LogLevel
from telegram_hook.exceptions import DeliveryError, ValidationError, describe_failure, map_api_error
from telegram_hook.formatter import TelegramHTMLFormatter
from telegram_hook.models import SendMessageRequest
from telegram_hook.rwlock import ReadWriteLock

if TYPE_CHECKING:
    from telegram_hook.config import TelegramHookConfig


class Hook(ABC):
    """A consumer the logging pipeline invokes for every event at one of its levels."""

    @abstractmethod
    def levels(self) -> List[LogLevel]:
        ...

    @abstractmethod
    def fire(self, event: LogEvent) -> None:
        ...


class LevelHooks:
    """Hooks registered per level."""

    def __init__(self) -> None:
        self._hooks: Dict[LogLevel, List[Hook]] = {}

    def add(self, hook: Hook) -> "LevelHooks":
        for level in hook.levels():
            self._hooks.setdefault(level, []).append(hook)
        return self

    def hooks_for(self, level: LogLevel) -> List[Hook]:
        return list(self._hooks.get(level, []))

    def fire(self, level: LogLevel, event: LogEvent) -> None:
        # A failing hook must not fail the producer or starve the others.
        for hook in self.hooks_for(level):
            try:
                hook.fire(event)
            except Exception as e:
                tg_logging.error(f"Failed to fire hook {type(hook).__name__}: {e}")


class TelegramHook(Hook):
    """
    Hook sending log events to a Telegram chat via the Bot API.

    Construction verifies the bot token with getMe and raises ValidationError
    (or TransportError) instead of returning an unusable hook. Every setting can
    be read and changed from any thread afterwards.
    """

    def __init__(
        self,
        app_name: str,
        auth_token: str,
        chat_id: str,
        thread_id: str = "",
        *,
        asynchronous: bool = False,
        timeout: Optional[float] = None,
        level: LogLevel = LogLevel.ERROR,
        client: Optional[httpx.Client] = None,
    ):
        """
        Args:
            app_name: Name shown in every message
            auth_token: Bot token
            chat_id: Destination chat
            thread_id: Forum topic inside the chat, empty for none
            asynchronous: Send from a background thread and never block fire()
            timeout: HTTP timeout in seconds; None or <= 0 keeps the client default
            level: Minimum severity delivered
            client: Custom httpx.Client to send requests with
        """
        self._lock = ReadWriteLock()
        self._app_name = app_name
        self._auth_token = auth_token
        self._chat_id = chat_id
        self._thread_id = thread_id
        self._level = LogLevel.parse(level)
        self._async = asynchronous

        if timeout is not None and timeout <= 0:
            timeout = None
        self._client = TelegramClient(timeout=timeout, client=client)
        self.formatter = TelegramHTMLFormatter(self.get_app_name)

        try:
            self.verify_token()
        except Exception:
            self._client.close()
            raise

    @classmethod
    def from_config(cls, config: "TelegramHookConfig", *, client: Optional[httpx.Client] = None) -> "TelegramHook":
        return cls(
            config.app_name,
            config.auth_token.get_secret_value(),
            config.chat_id,
            config.thread_id,
            asynchronous=config.asynchronous,
            timeout=config.timeout,
            level=config.level,
            client=client,
        )

    def close(self) -> None:
        """Close the HTTP client if the hook created it. In-flight async sends may fail."""
        self._client.close()

    # -------- Remote calls --------
    def verify_token(self) -> None:
        """Issue getMe to make sure the bot token is valid before the hook is used."""
        res = self._client.get_me(self.get_auth_token())
        if not res.ok:
            dump = json.dumps(res.model_dump(mode="json"), indent="\t")
            raise ValidationError(
                f"{describe_failure(res)}\n{dump}",
                error_code=res.error_code,
                description=res.description,
                response=res,
            )

    def send_message(self, text: str) -> None:
        """Send one message to the configured chat/thread. Raises on any failure."""
        request = SendMessageRequest(
            chat_id=self.get_chat_id(),
            message_thread_id=self.get_thread_id() or None,
            text=text,
        )
        res = self._client.send_message(self.get_auth_token(), request)
        if not res.ok:
            raise map_api_error(res, DeliveryError)

    # -------- Dispatch --------
    def should_handle(self, level: LogLevel) -> bool:
        """True for the configured level and everything more severe."""
        return LogLevel.parse(level) >= self.get_level()

    def levels(self) -> List[LogLevel]:
        threshold = self.get_level()
        return ALL_LEVELS[:ALL_LEVELS.index(threshold) + 1]

    def create_message(self, event: LogEvent) -> str:
        return self.formatter.format(event)

    def fire(self, event: LogEvent) -> None:
        """
        Send the event to Telegram.

        Synchronous mode raises DeliveryError/TransportError after logging them.
        Asynchronous mode returns at once; failures are only logged.
        """
        msg = self.create_message(event)

        if self.get_async():
            try:
                threading.Thread(
                    target=self._send_detached,
                    args=(msg,),
                    name="telegram-hook-send",
                    daemon=True,
                ).start()
            except RuntimeError as e:
                tg_logging.error(f"Unable to start background send, message dropped: {e}")
            return

        try:
            self.send_message(msg)
        except Exception as e:
            tg_logging.error(f"Unable to send message, {self._redacted(e)}")
            raise

    def _send_detached(self, msg: str) -> None:
        try:
            self.send_message(msg)
        except Exception as e:
            tg_logging.error(f"Encountered error when sending message to Telegram API, {self._redacted(e)}")

    def _redacted(self, err: Exception) -> str:
        return redact(str(err), self.get_auth_token())

    # -------- Configuration --------
    def api_endpoint(self) -> str:
        with self._lock.read_locked():
            return api_endpoint(self._auth_token, self._client.base_url)

    def get_app_name(self) -> str:
        with self._lock.read_locked():
            return self._app_name

    def set_app_name(self, app_name: str) -> None:
        with self._lock.write_locked():
            self._app_name = app_name

    def get_auth_token(self) -> str:
        with self._lock.read_locked():
            return self._auth_token

    def set_auth_token(self, auth_token: str) -> None:
        with self._lock.write_locked():
            self._auth_token = auth_token

    def get_chat_id(self) -> str:
        with self._lock.read_locked():
            return self._chat_id

    def set_chat_id(self, chat_id: str) -> None:
        with self._lock.write_locked():
            self._chat_id = chat_id

    def get_thread_id(self) -> str:
        with self._lock.read_locked():
            return self._thread_id

    def set_thread_id(self, thread_id: str) -> None:
        with self._lock.write_locked():
            self._thread_id = thread_id

    def get_level(self) -> LogLevel:
        with self._lock.read_locked():
            return self._level

    def set_level(self, level: LogLevel) -> None:
        level = LogLevel.parse(level)
        with self._lock.write_locked():
            self._level = level

    def get_async(self) -> bool:
        with self._lock.read_locked():
            return self._async

    def set_async(self, asynchronous: bool) -> None:
        with self._lock.write_locked():
            self._async = asynchronous

    app_name = property(get_app_name, set_app_name)
    auth_token = property(get_auth_token, set_auth_token)
    chat_id = property(get_chat_id, set_chat_id)
    thread_id = property(get_thread_id, set_thread_id)
    level = property(get_level, set_level)
    asynchronous = property(get_async, set_async)
