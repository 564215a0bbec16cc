"""
Logging hook that delivers log events to a Telegram chat through the Bot API.
"""

from .client import TelegramClient
from .config import TelegramHookConfig
from .events import ALL_LEVELS, LogEvent, LogLevel
from .exceptions import (
    TelegramHookError,
    TransportError,
    TelegramAPIError,
    ValidationError,
    DeliveryError,
)
from .formatter import LogFormatter, TelegramHTMLFormatter
from .handler import TelegramHandler
from .hook import Hook, LevelHooks, TelegramHook
from .models import ApiResponse, ParseMode, SendMessageRequest

__all__ = [
    "TelegramHook",
    "Hook",
    "LevelHooks",
    "TelegramHandler",
    "TelegramClient",
    "TelegramHookConfig",
    "LogEvent",
    "LogLevel",
    "ALL_LEVELS",
    "LogFormatter",
    "TelegramHTMLFormatter",
    "TelegramHookError",
    "TransportError",
    "TelegramAPIError",
    "ValidationError",
    "DeliveryError",
    "ApiResponse",
    "ParseMode",
    "SendMessageRequest",
]

__version__ = "0.1.0"
