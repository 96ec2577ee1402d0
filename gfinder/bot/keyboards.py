"""Inline keyboards for the search form card."""

from __future__ import annotations

from aiogram.filters.callback_data import CallbackData
from aiogram.types import CopyTextButton, InlineKeyboardButton, InlineKeyboardMarkup
from aiogram.utils.keyboard import InlineKeyboardBuilder

from gfinder.domain.models import DateRange
from gfinder.i18n import I18nService
from gfinder.logging import logger
from gfinder.services.forms import ChatForm
from gfinder.services.query_builder import FILE_TYPES, SITES, google_search_url

# Telegram rejects copy_text payloads longer than this.
COPY_TEXT_LIMIT = 256
SELECTED_MARK = "✅ "


class FormAction(CallbackData, prefix="form"):
    action: str
    value: str = ""


def _mark(selected: bool, label: str) -> str:
    return f"{SELECTED_MARK}{label}" if selected else label


def build_form_keyboard(form: ChatForm, i18n: I18nService, *, locale: str | None = None) -> InlineKeyboardMarkup:
    state = form.state
    builder = InlineKeyboardBuilder()

    for option in FILE_TYPES:
        builder.button(
            text=_mark(state.file_type_filter == option.value, option.label),
            callback_data=FormAction(action="filetype", value=option.key),
        )
    for option in SITES:
        builder.button(
            text=_mark(option.value in state.selected_sites, option.label),
            callback_data=FormAction(action="site", value=option.key),
        )
    for date_range in DateRange:
        builder.button(
            text=_mark(state.date_range is date_range, i18n.gettext(f"date.{date_range.value}", locale=locale)),
            callback_data=FormAction(action="date", value=date_range.value),
        )
    builder.button(
        text=i18n.gettext("button.search", locale=locale),
        callback_data=FormAction(action="search"),
    )
    builder.button(
        text=i18n.gettext("button.clear", locale=locale),
        callback_data=FormAction(action="clear"),
    )
    builder.adjust(3, 3, 3, 3, 3, 2, 2)

    url = google_search_url(form.query)
    if url:
        builder.row(InlineKeyboardButton(text=i18n.gettext("button.open_google", locale=locale), url=url))
    return builder.as_markup()


def build_copy_keyboard(query: str, i18n: I18nService, *, locale: str | None = None) -> InlineKeyboardMarkup | None:
    if len(query) > COPY_TEXT_LIMIT:
        logger.info("copy_button_skipped", query_length=len(query), limit=COPY_TEXT_LIMIT)
        return None
    button = InlineKeyboardButton(
        text=i18n.gettext("button.copy", locale=locale),
        copy_text=CopyTextButton(text=query),
    )
    return InlineKeyboardMarkup(inline_keyboard=[[button]])


__all__ = ["FormAction", "build_copy_keyboard", "build_form_keyboard", "COPY_TEXT_LIMIT"]
