"""Application entrypoint."""

from __future__ import annotations

import asyncio

import httpx
from aiogram import Bot, Dispatcher
from aiogram.client.default import DefaultBotProperties
from aiogram.client.session.aiohttp import AiohttpSession
from aiogram.enums import ParseMode

from gfinder.bot.routers import setup_routers
from gfinder.config import get_settings
from gfinder.i18n import I18nService
from gfinder.logging import configure_logging, logger
from gfinder.services.error_monitor import ErrorMonitor
from gfinder.services.forms import FormStore
from gfinder.services.search import GoogleSearchService


async def main() -> None:
    settings = get_settings()
    configure_logging(settings.log_level, environment=settings.environment)

    session = (
        AiohttpSession(proxy=settings.telegram_proxy) if settings.telegram_proxy else None
    )
    bot = Bot(
        token=settings.telegram_token.get_secret_value(),
        default=DefaultBotProperties(parse_mode=ParseMode.HTML),
        session=session,
    )
    dp = Dispatcher()
    dp.include_router(setup_routers())

    async with httpx.AsyncClient() as http_client:
        search_service = GoogleSearchService(http_client, settings=settings.google)
        form_store = FormStore(search_service, max_forms=settings.max_chat_forms)
        error_monitor = ErrorMonitor(settings=settings, form_store=form_store)
        dp.errors.register(error_monitor.handle_error)

        i18n = I18nService(default_locale=settings.default_language)

        logger.info("bot_starting", environment=settings.environment)
        await dp.start_polling(bot, form_store=form_store, i18n=i18n)


if __name__ == "__main__":
    asyncio.run(main())
