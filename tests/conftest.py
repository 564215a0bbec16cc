import threading
from typing import Any, Callable, Optional

import httpx
import pytest

from telegram_hook import TelegramHook

TOKEN = "123456:secret-token"

GET_ME_OK = {"ok": True, "result": {"id": 1, "is_bot": True, "username": "hook_bot"}}
SEND_OK = {"ok": True, "result": {"message_id": 7}}


class MockTransport(httpx.BaseTransport):
    """Records requests and answers from per-method scripted replies."""

    def __init__(self) -> None:
        self.calls: list[dict[str, Any]] = []
        self.replies: dict[str, Callable[[httpx.Request], httpx.Response]] = {
            "getMe": lambda request: httpx.Response(200, json=GET_ME_OK),
            "sendMessage": lambda request: httpx.Response(200, json=SEND_OK),
        }
        self.handled = threading.Event()
        self._lock = threading.Lock()

    def reply(self, api_method: str, status: int = 200, json: Optional[Any] = None, **kwargs) -> None:
        self.replies[api_method] = lambda request: httpx.Response(status, json=json, **kwargs)

    def fail(self, api_method: str, exc: Exception) -> None:
        def _raise(request: httpx.Request) -> httpx.Response:
            raise exc
        self.replies[api_method] = _raise

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        api_method = request.url.path.rsplit("/", 1)[-1]
        with self._lock:
            self.calls.append(
                {
                    "method": request.method,
                    "url": str(request.url),
                    "api_method": api_method,
                    "content": request.content,
                    "timeout": request.extensions.get("timeout", {}),
                }
            )
        try:
            return self.replies[api_method](request)
        finally:
            if api_method == "sendMessage":
                self.handled.set()

    def calls_to(self, api_method: str) -> list[dict[str, Any]]:
        with self._lock:
            return [c for c in self.calls if c["api_method"] == api_method]


@pytest.fixture()
def transport():
    return MockTransport()


@pytest.fixture()
def http_client(transport):
    client = httpx.Client(transport=transport)
    yield client
    client.close()


@pytest.fixture()
def make_hook(http_client):
    def _make(app_name: str = "svc", chat_id: str = "-100200", thread_id: str = "", **kwargs) -> TelegramHook:
        return TelegramHook(app_name, TOKEN, chat_id, thread_id, client=http_client, **kwargs)
    return _make


@pytest.fixture()
def hook(make_hook):
    return make_hook()
