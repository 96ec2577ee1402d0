"""Tests for logging configuration and async main bootstrap."""

from __future__ import annotations

import json
from types import SimpleNamespace

import pytest
import structlog

from gfinder import main as main_module
from gfinder.config import GoogleSearchSettings
from gfinder.logging import configure_logging
from gfinder.services.forms import FormStore


def test_configure_logging_outputs_json(capsys):
    configure_logging("DEBUG", environment="test")
    logger = structlog.get_logger()
    logger.info("unit-test", foo="bar")
    logger.debug("debug-event")
    out = capsys.readouterr().out
    structlog.reset_defaults()

    first = json.loads(out.splitlines()[0])
    assert first["event"] == "unit-test"
    assert first["foo"] == "bar"
    assert first["service"] == "gfinder"
    assert first["environment"] == "test"
    assert "debug-event" in out


def test_configure_logging_filters_below_level(capsys):
    configure_logging("warning")
    structlog.get_logger().info("hidden-event")
    out = capsys.readouterr().out
    structlog.reset_defaults()

    assert "hidden-event" not in out


class DummyToken:
    def __init__(self, value: str) -> None:
        self.value = value

    def get_secret_value(self) -> str:
        return self.value


class DummyDispatcher:
    def __init__(self) -> None:
        self.included = []
        self.started = False
        self.registered_error_handlers = []
        self.errors = SimpleNamespace(register=self.register_error)

    def include_router(self, router):
        self.included.append(router)

    def register_error(self, handler):
        self.registered_error_handlers.append(handler)

    async def start_polling(self, bot, **kwargs):
        self.started = True
        self.bot = bot
        self.start_kwargs = kwargs


@pytest.mark.asyncio
async def test_main_bootstrap(monkeypatch):
    google = GoogleSearchSettings()
    settings = SimpleNamespace(
        telegram_proxy=None,
        telegram_token=DummyToken("token"),
        environment="test",
        default_language="en",
        log_level="INFO",
        max_chat_forms=50,
        admin_telegram_id=None,
        google=google,
    )
    bot_kwargs = {}

    def fake_bot(*args, **kwargs):
        bot_kwargs.update(kwargs)
        return SimpleNamespace()

    dummy_dispatcher = DummyDispatcher()
    monitors = []

    class DummyMonitor:
        def __init__(self, settings, form_store):
            self.settings = settings
            self.form_store = form_store
            monitors.append(self)

        async def handle_error(self, event, bot):
            return None

    logging_levels = []
    monkeypatch.setattr(
        main_module,
        "configure_logging",
        lambda level, environment=None: logging_levels.append((level, environment)),
    )
    monkeypatch.setattr(main_module, "get_settings", lambda: settings)
    monkeypatch.setattr(main_module, "Bot", fake_bot)
    monkeypatch.setattr(main_module, "Dispatcher", lambda: dummy_dispatcher)
    monkeypatch.setattr(main_module, "ErrorMonitor", DummyMonitor)
    monkeypatch.setattr(main_module, "setup_routers", lambda: "router")

    await main_module.main()

    assert logging_levels == [("INFO", "test")]
    assert bot_kwargs["token"] == "token"
    assert dummy_dispatcher.started is True
    assert dummy_dispatcher.included == ["router"]
    assert dummy_dispatcher.registered_error_handlers == [monitors[0].handle_error]

    form_store = dummy_dispatcher.start_kwargs["form_store"]
    assert isinstance(form_store, FormStore)
    assert monitors[0].form_store is form_store
    assert dummy_dispatcher.start_kwargs["i18n"].default_locale == "en"
