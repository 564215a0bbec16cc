import json
import logging

import pytest

from telegram_hook import LevelHooks, LogEvent, LogLevel, TelegramHandler
from telegram_hook.app_logging import tg_logging
from telegram_hook.handler import level_from_stdlib


@pytest.fixture()
def app_logger(hook):
    logger = logging.getLogger("tests.billing")
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    handler = TelegramHandler(hook)
    logger.addHandler(handler)
    yield logger
    logger.removeHandler(handler)


def _sent_texts(transport):
    return [json.loads(c["content"])["text"] for c in transport.calls_to("sendMessage")]


@pytest.mark.parametrize(
    "levelno, expected",
    [
        (logging.CRITICAL, LogLevel.FATAL),
        (logging.ERROR, LogLevel.ERROR),
        (logging.WARNING, LogLevel.WARNING),
        (logging.INFO, LogLevel.INFO),
        (logging.DEBUG, LogLevel.DEBUG),
        (5, LogLevel.TRACE),
        (35, LogLevel.WARNING),
    ],
)
def test_level_mapping(levelno, expected):
    assert level_from_stdlib(levelno) is expected


def test_record_below_threshold_not_sent(app_logger, transport):
    app_logger.warning("just a warning")
    assert transport.calls_to("sendMessage") == []


def test_error_record_sent_with_extra_fields(app_logger, transport):
    app_logger.error("charge %s failed", "c-1", extra={"order": 42})
    assert _sent_texts(transport) == ["<b>ERROR</b>@svc - charge c-1 failed\n<pre>\n\torder: 42\n</pre>"]


def test_exception_becomes_error_field(app_logger, transport):
    try:
        raise ValueError("<bad>")
    except ValueError:
        app_logger.exception("crashed")
    text = _sent_texts(transport)[0]
    assert "\terror: &lt;bad&gt;" in text


def test_delivery_failure_does_not_raise(app_logger, transport, monkeypatch):
    handled = []
    monkeypatch.setattr(TelegramHandler, "handleError", lambda self, record: handled.append(record))
    transport.reply("sendMessage", 400, {"ok": False, "error_code": 400, "description": "Bad Request"})
    app_logger.error("boom")
    assert len(handled) == 1


def test_own_and_http_loggers_ignored(hook):
    handler = TelegramHandler(hook)
    for name in ("httpx", "httpcore.connection", tg_logging.name):
        record = logging.LogRecord(name, logging.ERROR, __file__, 1, "x", None, None)
        assert not handler.filter(record)
    record = logging.LogRecord("httpxtra", logging.ERROR, __file__, 1, "x", None, None)
    assert handler.filter(record)


def test_handler_is_not_reentrant(hook, transport):
    handler = TelegramHandler(hook)
    calls = []

    def fire(event):
        calls.append(event)
        handler.handle(logging.LogRecord("nested", logging.ERROR, __file__, 1, "inner", None, None))

    hook.fire = fire
    handler.handle(logging.LogRecord("outer", logging.ERROR, __file__, 1, "outer", None, None))
    assert [e.message for e in calls] == ["outer"]


def test_level_hooks_dispatch(make_hook, transport):
    errors_only = make_hook(app_name="errors")
    warnings_up = make_hook(app_name="warnings", level=LogLevel.WARNING)
    hooks = LevelHooks().add(errors_only).add(warnings_up)

    assert hooks.hooks_for(LogLevel.ERROR) == [errors_only, warnings_up]
    assert hooks.hooks_for(LogLevel.WARNING) == [warnings_up]
    assert hooks.hooks_for(LogLevel.INFO) == []

    hooks.fire(LogLevel.WARNING, LogEvent(severity=LogLevel.WARNING, message="w"))
    assert _sent_texts(transport) == ["<b>WARNING</b>@warnings - w"]


def test_level_hooks_keep_going_after_failure(make_hook, transport):
    transport.reply("sendMessage", 400, {"ok": False, "error_code": 400, "description": "Bad Request"})
    first = make_hook(app_name="first")
    second = make_hook(app_name="second")
    hooks = LevelHooks().add(first).add(second)
    hooks.fire(LogLevel.ERROR, LogEvent(severity=LogLevel.ERROR, message="e"))
    assert len(transport.calls_to("sendMessage")) == 2
