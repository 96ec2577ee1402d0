"""Telegram handlers for the search form."""

from __future__ import annotations

from aiogram import F, Router
from aiogram.enums import ParseMode
from aiogram.filters import Command, CommandObject, CommandStart
from aiogram.types import CallbackQuery, LinkPreviewOptions, Message
from aiogram.utils.text_decorations import html_decoration as hd

from gfinder.bot.keyboards import FormAction, build_copy_keyboard, build_form_keyboard
from gfinder.bot.utils.messages import render_form, render_outcome
from gfinder.bot.utils.telegram import answer_with_retry, edit_text_safely
from gfinder.domain.models import Loading
from gfinder.i18n import I18nService
from gfinder.logging import logger
from gfinder.services.forms import ChatForm, FormStore

router = Router()


def _locale(message: Message | CallbackQuery) -> str | None:
    user = message.from_user
    return getattr(user, "language_code", None) if user is not None else None


async def _send_form(message: Message, form: ChatForm, i18n: I18nService, locale: str | None) -> None:
    sent = await answer_with_retry(
        message,
        render_form(form, i18n, locale=locale),
        parse_mode=ParseMode.HTML,
        reply_markup=build_form_keyboard(form, i18n, locale=locale),
    )
    form.card_message_id = getattr(sent, "message_id", None)


async def _refresh_form(message: Message, form: ChatForm, i18n: I18nService, locale: str | None) -> None:
    await edit_text_safely(
        message,
        render_form(form, i18n, locale=locale),
        parse_mode=ParseMode.HTML,
        reply_markup=build_form_keyboard(form, i18n, locale=locale),
    )


async def run_search(message: Message, form: ChatForm, i18n: I18nService, locale: str | None) -> None:
    """Trigger a search for the form's current query and render the outcome."""

    query = form.query
    if not query.strip():
        await answer_with_retry(message, i18n.gettext("search.nothing_to_search", locale=locale), parse_mode=None)
        return

    status = await answer_with_retry(
        message,
        render_outcome(Loading(query), i18n, locale=locale),
        parse_mode=ParseMode.HTML,
    )
    logger.info("search_triggered", chat_id=message.chat.id, query_length=len(query))
    outcome = await form.session.trigger(query)
    if outcome is None:
        return
    await edit_text_safely(
        status,
        render_outcome(outcome, i18n, locale=locale),
        parse_mode=ParseMode.HTML,
        link_preview_options=LinkPreviewOptions(is_disabled=True),
    )


@router.message(CommandStart())
async def handle_start(message: Message, i18n: I18nService) -> None:
    locale = _locale(message)
    greeting = i18n.gettext(
        "start.greeting",
        locale=locale,
        name=message.from_user.full_name if message.from_user else "",
    )
    await answer_with_retry(message, greeting, parse_mode=None)


@router.message(Command("help"))
async def handle_help(message: Message, i18n: I18nService) -> None:
    await answer_with_retry(message, i18n.gettext("help.text", locale=_locale(message)), parse_mode=None)


@router.message(Command("form"))
async def handle_form(message: Message, form_store: FormStore, i18n: I18nService) -> None:
    form = form_store.get(message.chat.id)
    await _send_form(message, form, i18n, _locale(message))


@router.message(Command("phrase"))
async def handle_phrase(
    message: Message,
    command: CommandObject,
    form_store: FormStore,
    i18n: I18nService,
) -> None:
    form = form_store.get(message.chat.id)
    form.state.exact_phrase = (command.args or "").strip()
    await _send_form(message, form, i18n, _locale(message))


@router.message(Command("exclude"))
async def handle_exclude(
    message: Message,
    command: CommandObject,
    form_store: FormStore,
    i18n: I18nService,
) -> None:
    form = form_store.get(message.chat.id)
    form.state.exclude_terms = command.args or ""
    await _send_form(message, form, i18n, _locale(message))


@router.message(Command("term"))
async def handle_term(
    message: Message,
    command: CommandObject,
    form_store: FormStore,
    i18n: I18nService,
) -> None:
    form = form_store.get(message.chat.id)
    form.state.free_text = (command.args or "").strip()
    await _send_form(message, form, i18n, _locale(message))


@router.message(Command("site"))
async def handle_site(
    message: Message,
    command: CommandObject,
    form_store: FormStore,
    i18n: I18nService,
) -> None:
    form = form_store.get(message.chat.id)
    form.state.custom_site = (command.args or "").strip()
    await _send_form(message, form, i18n, _locale(message))


@router.message(Command("query"))
async def handle_query(message: Message, form_store: FormStore, i18n: I18nService) -> None:
    form = form_store.get(message.chat.id)
    await answer_with_retry(message, hd.code(hd.quote(form.query)), parse_mode=ParseMode.HTML)


@router.message(Command("copy"))
async def handle_copy(message: Message, form_store: FormStore, i18n: I18nService) -> None:
    locale = _locale(message)
    query = form_store.get(message.chat.id).query
    text = f"{hd.quote(i18n.gettext('copy.text', locale=locale))}\n{hd.code(hd.quote(query))}"
    try:
        await answer_with_retry(
            message,
            text,
            parse_mode=ParseMode.HTML,
            reply_markup=build_copy_keyboard(query, i18n, locale=locale),
        )
    except Exception:
        logger.exception("copy_query_failed", chat_id=message.chat.id)


@router.message(Command("search"))
async def handle_search(message: Message, form_store: FormStore, i18n: I18nService) -> None:
    form = form_store.get(message.chat.id)
    await run_search(message, form, i18n, _locale(message))


@router.message(Command("clear"))
async def handle_clear(message: Message, form_store: FormStore, i18n: I18nService) -> None:
    form = form_store.get(message.chat.id)
    form.clear()
    await _send_form(message, form, i18n, _locale(message))


@router.message(F.text & ~F.text.startswith("/"))
async def handle_free_text(message: Message, form_store: FormStore, i18n: I18nService) -> None:
    form = form_store.get(message.chat.id)
    form.state.free_text = message.text.strip()
    await _send_form(message, form, i18n, _locale(message))


@router.callback_query(FormAction.filter())
async def handle_form_action(
    callback: CallbackQuery,
    callback_data: FormAction,
    form_store: FormStore,
    i18n: I18nService,
) -> None:
    locale = _locale(callback)
    message = callback.message
    if message is None:
        await callback.answer()
        return

    form = form_store.get(message.chat.id)
    action = callback_data.action
    try:
        if action == "filetype":
            form.select_file_type(callback_data.value)
        elif action == "site":
            form.toggle_site(callback_data.value)
        elif action == "date":
            form.set_date_range(callback_data.value)
        elif action == "clear":
            form.clear()
        elif action != "search":
            raise KeyError(action)
    except (KeyError, ValueError):
        logger.warning("form_action_rejected", action=action, value=callback_data.value)
        await callback.answer(i18n.gettext("form.unknown_option", locale=locale))
        return

    if action == "search":
        await callback.answer()
        await run_search(message, form, i18n, locale)
        return

    key = "form.cleared" if action == "clear" else "form.updated"
    await callback.answer(i18n.gettext(key, locale=locale))
    await _refresh_form(message, form, i18n, locale)


__all__ = [
    "handle_clear",
    "handle_copy",
    "handle_exclude",
    "handle_form",
    "handle_form_action",
    "handle_free_text",
    "handle_help",
    "handle_phrase",
    "handle_query",
    "handle_search",
    "handle_site",
    "handle_start",
    "handle_term",
    "router",
    "run_search",
]
