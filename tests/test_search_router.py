"""Tests for the search form handlers with dummy Telegram objects."""

from __future__ import annotations

import pytest
from aiogram.enums import ParseMode
from aiogram.filters import CommandObject

from gfinder.bot.keyboards import FormAction
from gfinder.bot.routers import search as search_router
from gfinder.bot.routers.search import (
    handle_clear,
    handle_copy,
    handle_exclude,
    handle_form,
    handle_form_action,
    handle_free_text,
    handle_help,
    handle_phrase,
    handle_query,
    handle_search,
    handle_site,
    handle_start,
    handle_term,
)
from gfinder.domain.models import Failure, SearchResult, Success
from tests.conftest import DummyCallback, DummyMessage


def _command(name: str, args: str | None = None) -> CommandObject:
    return CommandObject(prefix="/", command=name, args=args)


@pytest.mark.asyncio
async def test_start_greets_user(i18n):
    message = DummyMessage("/start")
    await handle_start(message, i18n)

    assert "Test User" in message.answers[0].text


@pytest.mark.asyncio
async def test_help_lists_commands(i18n):
    message = DummyMessage("/help")
    await handle_help(message, i18n)

    assert "/search" in message.answers[0].text


@pytest.mark.asyncio
async def test_form_card_shows_boilerplate_preview(form_store, i18n):
    message = DummyMessage("/form")
    await handle_form(message, form_store, i18n)

    sent = message.answers[0]
    assert "-inurl:(jsp|pl|php|html|aspx|htm|cf|shtml)" in sent.text
    assert sent.kwargs["parse_mode"] == ParseMode.HTML
    assert sent.kwargs["reply_markup"] is not None
    assert form_store.get(42).card_message_id == sent.message_id


@pytest.mark.asyncio
async def test_free_text_sets_search_term(form_store, i18n):
    message = DummyMessage("  GTA V ")
    await handle_free_text(message, form_store, i18n)

    assert form_store.get(42).state.free_text == "GTA V"
    assert "GTA V -inurl:" in message.answers[0].text


@pytest.mark.asyncio
async def test_phrase_without_argument_clears_phrase(form_store, i18n):
    await handle_phrase(DummyMessage(), _command("phrase", "hello"), form_store, i18n)
    assert form_store.get(42).state.exact_phrase == "hello"

    message = DummyMessage("/phrase")
    await handle_phrase(message, _command("phrase"), form_store, i18n)

    assert form_store.get(42).state.exact_phrase == ""
    assert '"hello"' not in form_store.get(42).query
    assert message.answers[0].kwargs["reply_markup"] is not None


@pytest.mark.asyncio
async def test_exclude_without_argument_clears_exclusions(form_store, i18n):
    await handle_exclude(DummyMessage(), _command("exclude", "a"), form_store, i18n)
    assert form_store.get(42).query.startswith("-a ")

    await handle_exclude(DummyMessage(), _command("exclude"), form_store, i18n)

    assert form_store.get(42).state.exclude_terms == ""
    assert not form_store.get(42).query.startswith("-a ")


@pytest.mark.asyncio
async def test_term_command_sets_and_clears_search_term(form_store, i18n):
    await handle_free_text(DummyMessage("GTA V"), form_store, i18n)
    await handle_term(DummyMessage(), _command("term", " Dune "), form_store, i18n)
    assert form_store.get(42).state.free_text == "Dune"

    message = DummyMessage("/term")
    await handle_term(message, _command("term"), form_store, i18n)

    assert form_store.get(42).state.free_text == ""
    assert form_store.get(42).query.startswith("-inurl:")
    assert "<i>" in message.answers[0].text


@pytest.mark.asyncio
async def test_phrase_and_exclude_update_query(form_store, i18n):
    await handle_phrase(DummyMessage(), _command("phrase", "season 1"), form_store, i18n)
    message = DummyMessage()
    await handle_exclude(message, _command("exclude", " foo, , bar "), form_store, i18n)

    query = form_store.get(42).query
    assert query.startswith('"season 1" -foo -bar ')
    assert "-foo -bar" in message.answers[0].text


@pytest.mark.asyncio
async def test_site_command_sets_and_clears_custom_site(form_store, i18n):
    await handle_site(DummyMessage(), _command("site", "example.com"), form_store, i18n)
    assert form_store.get(42).query.startswith("site:example.com ")

    await handle_site(DummyMessage(), _command("site"), form_store, i18n)
    assert form_store.get(42).state.custom_site == ""


@pytest.mark.asyncio
async def test_query_command_previews_query(form_store, i18n):
    form_store.get(42).state.free_text = "1985"
    message = DummyMessage("/query")
    await handle_query(message, form_store, i18n)

    assert message.answers[0].text.startswith("<code>1985 ")


@pytest.mark.asyncio
async def test_copy_attaches_copy_button(form_store, i18n):
    message = DummyMessage("/copy")
    await handle_copy(message, form_store, i18n)

    markup = message.answers[0].kwargs["reply_markup"]
    button = markup.inline_keyboard[0][0]
    assert button.copy_text.text == form_store.get(42).query


@pytest.mark.asyncio
async def test_copy_failure_is_logged_not_raised(form_store, i18n):
    class FailingMessage(DummyMessage):
        async def answer(self, text: str, **kwargs):
            raise RuntimeError("telegram down")

    message = FailingMessage("/copy")
    await handle_copy(message, form_store, i18n)

    assert form_store.get(42).session.outcome.__class__.__name__ == "Idle"


@pytest.mark.asyncio
async def test_search_renders_results(form_store, fake_search_service, i18n):
    fake_search_service.outcome = Success(
        results=(
            SearchResult(
                title="Index of /iso",
                link="http://mirror.example/iso/",
                snippet="Parent Directory",
                display_link="mirror.example",
            ),
        )
    )
    form_store.get(42).state.free_text = "ubuntu"
    message = DummyMessage("/search")

    await handle_search(message, form_store, i18n)

    assert fake_search_service.queries == [form_store.get(42).query]
    status = message.answers[0]
    assert status.kwargs["parse_mode"] == ParseMode.HTML
    assert status.initial_text == "Searching..."
    rendered, _ = status.edits[-1]
    assert '<a href="http://mirror.example/iso/">Index of /iso</a>' in rendered
    assert "Parent Directory" in rendered


@pytest.mark.asyncio
async def test_search_shows_loading_then_failure(form_store, fake_search_service, i18n):
    fake_search_service.outcome = Failure("API Error: 403 Forbidden")
    message = DummyMessage("/search")

    await handle_search(message, form_store, i18n)

    status = message.answers[0]
    assert status.initial_text == "Searching..."
    assert status.text.startswith("Search failed")
    assert "403" in status.edits[-1][0]
    assert isinstance(form_store.get(42).session.outcome, Failure)


@pytest.mark.asyncio
async def test_search_with_empty_form_still_sends_boilerplate(form_store, fake_search_service, i18n):
    message = DummyMessage("/search")

    await handle_search(message, form_store, i18n)

    assert fake_search_service.queries == [
        "-inurl:(jsp|pl|php|html|aspx|htm|cf|shtml) "
        "-inurl:(listen77|mp3raid|mp3toss|mp3drug|index_of|index-of|wallywashis|downloadmana)"
    ]
    assert "No results found" in message.answers[0].edits[-1][0]


@pytest.mark.asyncio
async def test_search_skips_blank_query(form_store, fake_search_service, i18n, monkeypatch):
    monkeypatch.setattr(type(form_store.get(42)), "query", property(lambda self: "  "))
    message = DummyMessage("/search")

    await handle_search(message, form_store, i18n)

    assert fake_search_service.queries == []
    assert "empty" in message.answers[0].text


@pytest.mark.asyncio
async def test_clear_resets_form(form_store, i18n):
    form_store.get(42).state.free_text = "something"
    message = DummyMessage("/clear")

    await handle_clear(message, form_store, i18n)

    assert form_store.get(42).state.free_text == ""


@pytest.mark.asyncio
async def test_callback_toggles_site_and_refreshes_card(form_store, i18n):
    card = DummyMessage()
    callback = DummyCallback(card)

    await handle_form_action(callback, FormAction(action="site", value="wikipedia"), form_store, i18n)
    await handle_form_action(callback, FormAction(action="site", value="github"), form_store, i18n)

    assert form_store.get(42).state.selected_sites == ["wikipedia.org", "github.com"]
    assert callback.answered == ["Updated", "Updated"]
    assert "(site:wikipedia.org OR site:github.com)" in card.edits[-1][0]


@pytest.mark.asyncio
async def test_callback_selects_file_type_and_date(form_store, i18n):
    card = DummyMessage()
    callback = DummyCallback(card)

    await handle_form_action(callback, FormAction(action="filetype", value="books"), form_store, i18n)
    await handle_form_action(callback, FormAction(action="date", value="year"), form_store, i18n)

    state = form_store.get(42).state
    assert state.file_type_filter.startswith("MOBI|CBZ")
    assert state.date_range.value == "year"
    assert "after:" in card.edits[-1][0]


@pytest.mark.asyncio
async def test_callback_rejects_unknown_option(form_store, i18n):
    card = DummyMessage()
    callback = DummyCallback(card)

    await handle_form_action(callback, FormAction(action="site", value="nope"), form_store, i18n)

    assert callback.answered == ["Unknown option"]
    assert card.edits == []


@pytest.mark.asyncio
async def test_callback_search_runs_search(form_store, fake_search_service, i18n):
    card = DummyMessage()
    callback = DummyCallback(card)

    await handle_form_action(callback, FormAction(action="search"), form_store, i18n)

    assert len(fake_search_service.queries) == 1
    assert callback.answered == [None]
    assert "No results found" in card.answers[0].edits[-1][0]


@pytest.mark.asyncio
async def test_callback_clear(form_store, i18n):
    form_store.get(42).state.exact_phrase = "phrase"
    card = DummyMessage()
    callback = DummyCallback(card)

    await handle_form_action(callback, FormAction(action="clear"), form_store, i18n)

    assert form_store.get(42).state.exact_phrase == ""
    assert callback.answered == ["Form cleared"]


@pytest.mark.asyncio
async def test_callback_without_message_is_acknowledged(form_store, i18n):
    callback = DummyCallback(None)

    await handle_form_action(callback, FormAction(action="search"), form_store, i18n)

    assert callback.answered == [None]
    assert len(form_store) == 0


def test_router_registers_handlers():
    assert search_router.router.message.handlers
    assert search_router.router.callback_query.handlers
