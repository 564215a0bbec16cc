# telegram_hook/config.py
from typing import Optional

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from telegram_hook.events import LogLevel


class TelegramHookConfig(BaseSettings):
    """
    Hook settings read from TELEGRAM_HOOK_* environment variables, e.g.

        TELEGRAM_HOOK_AUTH_TOKEN=123:abc
        TELEGRAM_HOOK_CHAT_ID=-100200300
        TELEGRAM_HOOK_LEVEL=warn
    """
    model_config = SettingsConfigDict(env_prefix="TELEGRAM_HOOK_", case_sensitive=False)

    app_name: str = "app"
    auth_token: SecretStr = SecretStr("")
    chat_id: str = ""
    thread_id: str = ""
    level: LogLevel = LogLevel.ERROR
    asynchronous: bool = False
    # seconds; unset keeps the client default (30s)
    timeout: Optional[float] = Field(default=None)

    @field_validator("level", mode="before")
    @classmethod
    def _parse_level(cls, value):
        return LogLevel.parse(value)
