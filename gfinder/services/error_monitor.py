"""Log unhandled bot errors and notify the administrator."""

from __future__ import annotations

import traceback
from typing import Any

from aiogram import Bot
from aiogram.dispatcher.event.bases import UNHANDLED
from aiogram.types import Chat, ErrorEvent, Update, User

from gfinder.bot.utils.telegram import bot_send_with_retry
from gfinder.config import GFinderSettings
from gfinder.logging import logger
from gfinder.services.forms import FormStore

# Telegram messages are limited to 4096 characters.
TELEGRAM_MESSAGE_LIMIT = 3900
TRACEBACK_CHAR_LIMIT = 1800
QUERY_CHAR_LIMIT = 600


class ErrorMonitor:
    """Async error observer for the dispatcher.

    The chat's current generated query is attached to the report, which is
    usually enough to reproduce a failing search.
    """

    def __init__(self, settings: GFinderSettings, form_store: FormStore | None = None) -> None:
        self._settings = settings
        self._form_store = form_store

    async def handle_error(self, event: ErrorEvent, bot: Bot):
        update_id = getattr(event.update, "update_id", None)
        logger.error(
            "bot_error_captured",
            exception_type=event.exception.__class__.__name__,
            exception=str(event.exception),
            update_id=update_id,
        )

        admin_id = self._settings.admin_telegram_id
        if admin_id is None:
            return UNHANDLED

        message = self._build_message(event)
        try:
            await bot_send_with_retry(bot, chat_id=admin_id, text=message, parse_mode=None)
        except Exception:
            logger.exception("error_monitor_notification_failed", update_id=update_id)
        return UNHANDLED

    def _build_message(self, event: ErrorEvent) -> str:
        update = event.update
        exception = event.exception
        source = self._locate_source(update)
        user = getattr(source, "from_user", None)
        chat = self._chat_of(source)

        lines = [
            "GFINDER ERROR",
            f"Environment: {self._settings.environment}",
            f"Exception: {exception.__class__.__name__}: {exception}",
            f"Update ID: {getattr(update, 'update_id', 'unknown')}",
            f"Update Type: {self._update_type(update)}",
            f"User: {self._format_user(user)}",
            f"Chat: {self._format_chat(chat)}",
        ]
        query = self._current_query(chat)
        if query:
            lines.extend(["", "Query:", self._truncate(query, QUERY_CHAR_LIMIT)])
        trace = self._format_traceback(exception)
        if trace:
            lines.extend(["", "Traceback:", trace])

        return self._truncate("\n".join(lines), TELEGRAM_MESSAGE_LIMIT)

    @staticmethod
    def _locate_source(update: Update | None) -> Any | None:
        if update is None:
            return None
        return update.message or update.callback_query or update.edited_message

    @staticmethod
    def _update_type(update: Update | None) -> str:
        if update is None:
            return "unknown"
        for field in ("message", "callback_query", "edited_message"):
            if getattr(update, field, None) is not None:
                return field
        return "other"

    @staticmethod
    def _chat_of(source: Any | None) -> Chat | None:
        if source is None:
            return None
        chat = getattr(source, "chat", None)
        if chat is None:
            message = getattr(source, "message", None)
            chat = getattr(message, "chat", None)
        return chat

    def _current_query(self, chat: Chat | None) -> str:
        if chat is None or self._form_store is None:
            return ""
        form = self._form_store.find(chat.id)
        return form.query if form is not None else ""

    @staticmethod
    def _format_user(user: User | None) -> str:
        if user is None:
            return "unknown"
        segments = [str(user.id)]
        if user.full_name:
            segments.append(user.full_name)
        if user.username:
            segments.append(f"@{user.username}")
        return " | ".join(segments)

    @staticmethod
    def _format_chat(chat: Chat | None) -> str:
        if chat is None:
            return "unknown"
        segments = [str(chat.id), chat.type]
        title = chat.title or chat.username
        if title:
            segments.append(title)
        return " | ".join(segments)

    def _format_traceback(self, exception: Exception) -> str:
        trace = "".join(traceback.format_exception(exception.__class__, exception, exception.__traceback__))
        return self._truncate(trace, TRACEBACK_CHAR_LIMIT) if trace.strip() else ""

    @staticmethod
    def _truncate(value: str, limit: int) -> str:
        value = value.strip()
        if len(value) <= limit:
            return value
        return f"{value[: limit - 15].rstrip()}\n...[truncated]"


__all__ = ["ErrorMonitor"]
