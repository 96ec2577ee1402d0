"""Form state, search results and outcome variants shared across layers."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Union


class DateRange(str, Enum):
    NONE = "none"
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"

    @property
    def days(self) -> int:
        return DATE_RANGE_DAYS[self]


DATE_RANGE_DAYS: dict[DateRange, int] = {
    DateRange.NONE: 0,
    DateRange.DAY: 1,
    DateRange.WEEK: 7,
    DateRange.MONTH: 30,
    DateRange.YEAR: 365,
}


@dataclass(slots=True)
class SearchFormState:
    """Everything the user has entered into the search form.

    ``exclude_terms`` keeps the raw comma separated field; it is parsed at
    synthesis time. ``file_type_filter`` is ``None`` while nothing is
    selected, ``""`` for a bare directory-listing search and ``"-1"`` for
    the "Other" shortcut.
    """

    free_text: str = ""
    file_type_filter: str | None = None
    exact_phrase: str = ""
    exclude_terms: str = ""
    selected_sites: list[str] = field(default_factory=list)
    custom_site: str = ""
    date_range: DateRange = DateRange.NONE

    def toggle_site(self, site: str) -> bool:
        """Add ``site`` to the selection or remove it; return True when selected."""

        if site in self.selected_sites:
            self.selected_sites.remove(site)
            return False
        self.selected_sites.append(site)
        return True


@dataclass(frozen=True, slots=True)
class SearchResult:
    title: str
    link: str
    snippet: str
    display_link: str


@dataclass(frozen=True, slots=True)
class SearchInformation:
    total_results: str | None = None
    search_time: float | None = None


@dataclass(frozen=True, slots=True)
class Idle:
    pass


@dataclass(frozen=True, slots=True)
class Loading:
    query: str


@dataclass(frozen=True, slots=True)
class Success:
    results: tuple[SearchResult, ...]
    info: SearchInformation | None = None


@dataclass(frozen=True, slots=True)
class Empty:
    pass


@dataclass(frozen=True, slots=True)
class Failure:
    message: str


SearchOutcome = Union[Idle, Loading, Success, Empty, Failure]


__all__ = [
    "DATE_RANGE_DAYS",
    "DateRange",
    "Empty",
    "Failure",
    "Idle",
    "Loading",
    "SearchFormState",
    "SearchInformation",
    "SearchOutcome",
    "SearchResult",
    "Success",
]
