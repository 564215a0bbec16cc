from __future__ import annotations

import logging
import re
from typing import Any, Dict, Optional

import httpx

from .exceptions import TransportError
from .models import ApiResponse, SendMessageRequest

API_BASE_URL = "https://api.telegram.org"
DEFAULT_TIMEOUT = 30.0
REDACTED = "***"

_TOKEN_IN_URL = re.compile(r"/bot[^/\s\"']+(?=/(?:getMe|sendMessage)\b)")


def api_endpoint(auth_token: str, base_url: str = API_BASE_URL) -> str:
    """Token-bearing base URL of the Bot API. Never log this value."""
    return f"{base_url.rstrip('/')}/bot{auth_token}"


def redact(text: str, auth_token: Optional[str]) -> str:
    if auth_token:
        return text.replace(auth_token, REDACTED)
    return text


class RedactTokenFilter(logging.Filter):
    """Rewrites `/bot<token>` in request URLs that httpx logs at INFO."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = _TOKEN_IN_URL.sub(f"/bot{REDACTED}", message)
        if redacted != message:
            record.msg = redacted
            record.args = ()
        return True


def install_log_redaction(logger_name: str = "httpx") -> None:
    logger = logging.getLogger(logger_name)
    if not any(isinstance(f, RedactTokenFilter) for f in logger.filters):
        logger.addFilter(RedactTokenFilter())


class TelegramClient:
    """
    Thin client for the two Bot API methods the hook needs (getMe, sendMessage).

    The bot token is passed per call rather than stored, because the hook lets
    callers swap it at any time. The underlying httpx.Client is shared by all
    threads; close it via `close()` or use `with TelegramClient(...) as client: ...`.

    An injected `client` is never modified: a `timeout` given alongside it is
    applied per request, and `close()` leaves it open.
    """

    def __init__(
        self,
        *,
        base_url: str = API_BASE_URL,
        timeout: Optional[float] = None,
        client: Optional[httpx.Client] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._request_timeout: Optional[httpx.Timeout] = None
        if client is None:
            self._client = httpx.Client(timeout=timeout if timeout is not None else DEFAULT_TIMEOUT)
            self._owns_client = True
        else:
            if timeout is not None:
                self._request_timeout = httpx.Timeout(timeout)
            self._client = client
            self._owns_client = False
        install_log_redaction()

    # -------- Context manager helpers --------
    def __enter__(self) -> "TelegramClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    @property
    def timeout(self) -> httpx.Timeout:
        if self._request_timeout is not None:
            return self._request_timeout
        return self._client.timeout

    # -------- Public API --------
    def get_me(self, auth_token: str) -> ApiResponse:
        """Identity check; succeeds only for a token the Bot API accepts."""
        return self._request(auth_token, "GET", "getMe")

    def send_message(self, auth_token: str, request: SendMessageRequest) -> ApiResponse:
        return self._request(auth_token, "POST", "sendMessage", json=request.to_payload())

    def _request(
        self,
        auth_token: str,
        http_method: str,
        api_method: str,
        *,
        json: Optional[Dict[str, Any]] = None,
    ) -> ApiResponse:
        url = f"{api_endpoint(auth_token, self.base_url)}/{api_method}"
        try:
            response = self._client.request(
                http_method,
                url,
                json=json,
                timeout=self._request_timeout if self._request_timeout is not None else httpx.USE_CLIENT_DEFAULT,
            )
        except httpx.HTTPError as exc:
            # httpx errors reference the token-bearing URL, so they are not chained.
            message = redact(f"{api_method} request failed ({type(exc).__name__}): {exc}", auth_token)
            raise TransportError(message) from None

        # Error replies come with 4xx statuses and the same JSON envelope, so the
        # body is decoded regardless of status.
        try:
            return ApiResponse.model_validate(response.json())
        except ValueError as exc:
            raise TransportError(
                f"{api_method} returned an unreadable response (HTTP {response.status_code})"
            ) from exc
