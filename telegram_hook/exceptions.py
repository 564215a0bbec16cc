from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .models import ApiResponse


class TelegramHookError(Exception):
    """Base exception for telegram-hook errors."""


class TransportError(TelegramHookError):
    """Raised when the Telegram API can't be reached or answers with an unreadable body."""


class TelegramAPIError(TelegramHookError):
    """Raised when the Telegram API answers with ``ok: false``."""

    def __init__(
        self,
        message: str,
        *,
        error_code: Optional[int] = None,
        description: Optional[str] = None,
        response: Optional["ApiResponse"] = None,
    ):
        super().__init__(message)
        self.error_code = error_code
        self.description = description
        self.response = response


class ValidationError(TelegramAPIError):
    """Raised when getMe rejects the bot token during hook construction."""


class DeliveryError(TelegramAPIError):
    """Raised when sendMessage is rejected."""


def describe_failure(response: "ApiResponse") -> str:
    """Build the human readable summary of an ``ok: false`` response."""
    msg = "Received error response from Telegram API"
    if response.error_code is not None:
        msg = f"{msg} (error code {response.error_code})"
    if response.description is not None:
        msg = f"{msg}: {response.description}"
    return msg


def map_api_error(response: "ApiResponse", error_cls: type[TelegramAPIError]) -> TelegramAPIError:
    """Translate a failed API response into an SDK exception."""
    return error_cls(
        describe_failure(response),
        error_code=response.error_code,
        description=response.description,
        response=response,
    )
