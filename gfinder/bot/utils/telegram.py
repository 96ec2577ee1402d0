"""Telegram sending helpers with retry support."""

from __future__ import annotations

from typing import Any

from aiogram import Bot
from aiogram.exceptions import (
    TelegramBadRequest,
    TelegramNetworkError,
    TelegramRetryAfter,
    TelegramServerError,
)
from aiogram.types import Message

from gfinder.logging import logger
from gfinder.utils.retry import retry_async

TELEGRAM_SEND_MAX_ATTEMPTS = 3
TELEGRAM_SEND_BASE_DELAY = 0.3
TRANSIENT_TELEGRAM_ERRORS = (TelegramNetworkError, TelegramRetryAfter, TelegramServerError)


def _retry_after(exc: BaseException) -> float | None:
    if isinstance(exc, TelegramRetryAfter):
        return float(exc.retry_after)
    return None


async def answer_with_retry(message: Message, text: str, **kwargs: Any) -> Any:
    """Send a reply with retry/backoff."""

    async def _send():
        return await message.answer(text, **kwargs)

    return await retry_async(
        _send,
        max_attempts=TELEGRAM_SEND_MAX_ATTEMPTS,
        base_delay=TELEGRAM_SEND_BASE_DELAY,
        retry_on=TRANSIENT_TELEGRAM_ERRORS,
        delay_hint=_retry_after,
        logger=logger,
        operation_name="telegram_answer",
    )


async def bot_send_with_retry(bot: Bot, *, chat_id: int, text: str, **kwargs: Any) -> Any:
    """Send a message via Bot with retry/backoff."""

    async def _send():
        return await bot.send_message(chat_id=chat_id, text=text, **kwargs)

    return await retry_async(
        _send,
        max_attempts=TELEGRAM_SEND_MAX_ATTEMPTS,
        base_delay=TELEGRAM_SEND_BASE_DELAY,
        retry_on=TRANSIENT_TELEGRAM_ERRORS,
        delay_hint=_retry_after,
        logger=logger,
        operation_name="telegram_send_message",
    )


async def edit_text_safely(message: Message, text: str, **kwargs: Any) -> bool:
    """Edit ``message`` in place; an unchanged text is not an error."""

    try:
        await message.edit_text(text, **kwargs)
    except TelegramBadRequest as exc:
        if "message is not modified" in str(exc):
            return False
        raise
    return True


__all__ = ["answer_with_retry", "bot_send_with_retry", "edit_text_safely"]
