"""Shared pytest fixtures and Telegram test doubles."""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from gfinder.domain.models import Empty, SearchOutcome
from gfinder.i18n import I18nService
from gfinder.services.forms import FormStore


class FakeSearchService:
    def __init__(self, outcome: SearchOutcome | None = None) -> None:
        self.outcome = outcome or Empty()
        self.queries: list[str] = []

    async def search(self, query: str) -> SearchOutcome:
        self.queries.append(query)
        return self.outcome


class DummySentMessage:
    def __init__(self, message_id: int, text: str, kwargs: dict) -> None:
        self.message_id = message_id
        self.text = text
        self.initial_text = text
        self.kwargs = kwargs
        self.edits: list[tuple[str, dict]] = []

    async def edit_text(self, text: str, **kwargs):
        self.edits.append((text, kwargs))
        self.text = text
        return self


class DummyMessage:
    def __init__(self, text: str = "", *, chat_id: int = 42, language_code: str = "en"):
        self.text = text
        self.chat = SimpleNamespace(id=chat_id)
        self.from_user = SimpleNamespace(id=7, full_name="Test User", language_code=language_code)
        self.answers: list[DummySentMessage] = []
        self.edits: list[tuple[str, dict]] = []

    async def answer(self, text: str, **kwargs):
        sent = DummySentMessage(len(self.answers) + 100, text, kwargs)
        self.answers.append(sent)
        return sent

    async def edit_text(self, text: str, **kwargs):
        self.edits.append((text, kwargs))
        return self


class DummyCallback:
    def __init__(self, message: DummyMessage | None, *, language_code: str = "en"):
        self.message = message
        self.from_user = SimpleNamespace(id=7, full_name="Test User", language_code=language_code)
        self.answered: list[str | None] = []

    async def answer(self, text: str | None = None, **kwargs):
        self.answered.append(text)


@pytest.fixture
def fake_search_service() -> FakeSearchService:
    return FakeSearchService()


@pytest.fixture
def form_store(fake_search_service) -> FormStore:
    return FormStore(fake_search_service)


@pytest.fixture
def i18n() -> I18nService:
    return I18nService(default_locale="en")
