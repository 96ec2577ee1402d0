"""In-memory per-chat form state and search sessions."""

from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass, field

from gfinder.domain.models import DateRange, SearchFormState
from gfinder.logging import logger
from gfinder.services.query_builder import (
    FILE_TYPES_BY_KEY,
    SITES_BY_KEY,
    placeholder_for,
    synthesize_query,
)
from gfinder.services.search import GoogleSearchService, SearchSession


@dataclass(slots=True)
class ChatForm:
    session: SearchSession
    state: SearchFormState = field(default_factory=SearchFormState)
    card_message_id: int | None = None

    @property
    def query(self) -> str:
        return synthesize_query(self.state)

    @property
    def placeholder(self) -> str:
        return placeholder_for(self.state.file_type_filter)

    def select_file_type(self, key: str) -> None:
        option = FILE_TYPES_BY_KEY.get(key)
        if option is None:
            raise KeyError(key)
        self.state.file_type_filter = option.value

    def toggle_site(self, key: str) -> bool:
        option = SITES_BY_KEY.get(key)
        if option is None:
            raise KeyError(key)
        return self.state.toggle_site(option.value)

    def set_date_range(self, code: str) -> None:
        self.state.date_range = DateRange(code)

    def clear(self) -> None:
        self.state = SearchFormState()
        self.session.reset()


class FormStore:
    """Keeps one :class:`ChatForm` per chat, in memory.

    At most ``max_forms`` chats are kept; the least recently used form is
    dropped once the bound is exceeded and starts empty on its next use.
    """

    def __init__(self, search_service: GoogleSearchService, *, max_forms: int = 10_000) -> None:
        if max_forms < 1:
            raise ValueError("max_forms must be positive")
        self._search_service = search_service
        self._max_forms = max_forms
        self._forms: OrderedDict[int, ChatForm] = OrderedDict()

    def get(self, chat_id: int) -> ChatForm:
        form = self._forms.get(chat_id)
        if form is None:
            form = ChatForm(session=SearchSession(self._search_service))
            self._forms[chat_id] = form
            while len(self._forms) > self._max_forms:
                evicted, _ = self._forms.popitem(last=False)
                logger.debug("chat_form_evicted", chat_id=evicted)
        else:
            self._forms.move_to_end(chat_id)
        return form

    def find(self, chat_id: int) -> ChatForm | None:
        return self._forms.get(chat_id)

    def __len__(self) -> int:
        return len(self._forms)


__all__ = ["ChatForm", "FormStore"]
