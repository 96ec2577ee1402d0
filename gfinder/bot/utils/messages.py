"""HTML rendering of the form card and search outcomes for Telegram."""

from __future__ import annotations

import html

from aiogram.utils.text_decorations import html_decoration as hd

from gfinder.domain.models import (
    Empty,
    Failure,
    Loading,
    SearchInformation,
    SearchOutcome,
    SearchResult,
    Success,
)
from gfinder.i18n import I18nService
from gfinder.services.forms import ChatForm
from gfinder.services.query_builder import FILE_TYPES, parse_exclude_terms

# Telegram messages are limited to 4096 characters.
TELEGRAM_MESSAGE_LIMIT = 3900
SNIPPET_CHAR_LIMIT = 300
TITLE_CHAR_LIMIT = 200


def _field(label: str, value: str) -> str:
    return f"{hd.bold(hd.quote(label))}: {value}"


def _file_type_label(file_type_filter: str | None) -> str | None:
    for option in FILE_TYPES:
        if option.value == file_type_filter:
            return option.label
    return None


def render_form(form: ChatForm, i18n: I18nService, *, locale: str | None = None) -> str:
    state = form.state
    unset = i18n.gettext("form.unset", locale=locale)

    def _t(key: str) -> str:
        return i18n.gettext(key, locale=locale)

    search_term = hd.quote(state.free_text) if state.free_text else hd.italic(hd.quote(form.placeholder))
    file_type = _file_type_label(state.file_type_filter)
    exclusions = parse_exclude_terms(state.exclude_terms)

    lines = [
        hd.bold(hd.quote(_t("form.title"))),
        "",
        _field(_t("form.search_term"), search_term),
        _field(_t("form.file_type"), hd.quote(file_type) if file_type else unset),
        _field(_t("form.exact_phrase"), hd.quote(state.exact_phrase) if state.exact_phrase else unset),
        _field(_t("form.exclude"), hd.quote(", ".join(exclusions)) if exclusions else unset),
        _field(
            _t("form.sites"),
            hd.quote(", ".join(state.selected_sites)) if state.selected_sites else unset,
        ),
        _field(_t("form.custom_site"), hd.quote(state.custom_site) if state.custom_site else unset),
        _field(_t("form.date_range"), hd.quote(_t(f"date.{state.date_range.value}"))),
        "",
        hd.bold(hd.quote(_t("form.generated_query"))),
        hd.code(hd.quote(form.query)),
    ]
    return "\n".join(lines)


def render_summary(info: SearchInformation | None, i18n: I18nService, *, locale: str | None = None) -> str:
    if info is None or info.total_results is None:
        return ""
    seconds = info.search_time if info.search_time is not None else "?"
    return i18n.gettext("search.summary", locale=locale, total=info.total_results, seconds=seconds)


def _clip(text: str, limit: int) -> str:
    text = text.strip()
    if len(text) > limit:
        return f"{text[:limit - 3].rstrip()}..."
    return text


def _result_block(index: int, result: SearchResult) -> str:
    title = _clip(result.title or result.link, TITLE_CHAR_LIMIT)
    block = [f"{index}. {hd.link(hd.quote(title), html.escape(result.link, quote=True))}"]
    if result.display_link:
        block.append(hd.code(hd.quote(_clip(result.display_link, TITLE_CHAR_LIMIT))))
    snippet = _clip(result.snippet or "", SNIPPET_CHAR_LIMIT)
    if snippet:
        block.append(hd.quote(snippet))
    return "\n".join(block)


def _compact_block(index: int, result: SearchResult) -> str:
    # No href: the link itself is what overflows.
    title = _clip(result.title or "", TITLE_CHAR_LIMIT)
    link = _clip(result.link, TELEGRAM_MESSAGE_LIMIT // 2)
    return f"{index}. {hd.quote(title)}\n{hd.code(hd.quote(link))}"


def render_outcome(outcome: SearchOutcome, i18n: I18nService, *, locale: str | None = None) -> str:
    if isinstance(outcome, Loading):
        return hd.quote(i18n.gettext("search.loading", locale=locale))
    if isinstance(outcome, Empty):
        return hd.quote(i18n.gettext("search.empty", locale=locale))
    if isinstance(outcome, Failure):
        return hd.quote(i18n.gettext("search.failure", locale=locale, message=outcome.message))
    if not isinstance(outcome, Success):
        return ""

    blocks: list[str] = []
    summary = render_summary(outcome.info, i18n, locale=locale)
    if summary:
        blocks.append(hd.italic(hd.quote(summary)))
    for index, result in enumerate(outcome.results, start=1):
        block = _result_block(index, result)
        if index == 1 and len("\n\n".join([*blocks, block])) > TELEGRAM_MESSAGE_LIMIT:
            block = _compact_block(index, result)
        if len("\n\n".join([*blocks, block])) > TELEGRAM_MESSAGE_LIMIT:
            break
        blocks.append(block)
    return "\n\n".join(blocks)


__all__ = ["render_form", "render_outcome", "render_summary", "TELEGRAM_MESSAGE_LIMIT"]
