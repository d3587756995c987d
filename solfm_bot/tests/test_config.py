"""Tests for environment settings and logging setup"""

import logging

from solfm_bot.config import Settings
from solfm_bot.exceptions import BotException, FetchException, NetworkException
from solfm_bot.utils.logging import setup_logging


def test_defaults_from_empty_env(monkeypatch):
    for name in ("TELEGRAM_BOT_TOKEN", "TELEGRAM_ALLOWED_CHAT_IDS", "FILTER_FAILED_TRANSACTIONS"):
        monkeypatch.delenv(name, raising=False)
    settings = Settings.from_env()
    assert settings.TELEGRAM_BOT_TOKEN == ""
    assert settings.TELEGRAM_ALLOWED_CHAT_IDS == []
    assert settings.FILTER_FAILED_TRANSACTIONS is False


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("TELEGRAM_ALLOWED_CHAT_IDS", "100, -200 ,")
    monkeypatch.setenv("TRANSFERS_PAGE_SIZE", "25")
    monkeypatch.setenv("FILTER_FAILED_TRANSACTIONS", "true")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    settings = Settings.from_env()
    assert settings.TELEGRAM_ALLOWED_CHAT_IDS == ["100", "-200"]
    assert settings.TRANSFERS_PAGE_SIZE == 25
    assert settings.FILTER_FAILED_TRANSACTIONS is True
    assert settings.LOG_LEVEL == "DEBUG"


def test_exception_context_in_message():
    exc = FetchException("request failed", status=500)
    assert isinstance(exc, NetworkException)
    assert isinstance(exc, BotException)
    assert exc.message == "request failed"
    assert str(exc) == "request failed [status=500]"


def test_setup_logging_writes_file(settings):
    root = logging.getLogger()
    saved = list(root.handlers), root.level
    try:
        setup_logging(settings)
        logging.getLogger("solfm_bot.test").info("COMMAND help")
        for handler in root.handlers:
            handler.flush()
        log_file = f"{settings.LOG_DIR}/bot.log"
        with open(log_file, encoding="utf-8") as f:
            assert "COMMAND help" in f.read()
        assert logging.getLogger("httpx").level == logging.WARNING
    finally:
        for handler in root.handlers:
            handler.close()
        root.handlers[:] = saved[0]
        root.setLevel(saved[1])
