"""Google Custom Search client and the per-chat search session."""

from __future__ import annotations

from typing import Any

import httpx

from gfinder.config import GoogleSearchSettings
from gfinder.domain.models import (
    Empty,
    Failure,
    Idle,
    Loading,
    SearchInformation,
    SearchOutcome,
    SearchResult,
    Success,
)
from gfinder.logging import logger
from gfinder.services.exceptions import SearchError, SearchHttpError, SearchTransportError

FALLBACK_ERROR_MESSAGE = "Failed to perform search"


class GoogleSearchService:
    """Issue one Custom Search request per query and classify the response.

    Request-level errors never escape :meth:`search`; they are converted
    into a :class:`Failure` outcome.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        settings: GoogleSearchSettings | None = None,
    ) -> None:
        self._client = http_client
        self._settings = settings or GoogleSearchSettings()

    @staticmethod
    def _read_secret(secret: Any) -> str:
        if not secret:
            return ""
        try:
            return secret.get_secret_value()
        except AttributeError:
            return str(secret)

    async def search(self, query: str) -> SearchOutcome:
        try:
            payload = await self._fetch(query)
        except SearchError as exc:
            logger.warning("search_request_failed", error=str(exc), error_type=type(exc).__name__)
            return Failure(str(exc) or FALLBACK_ERROR_MESSAGE)

        results = _parse_items(payload.get("items"))
        if not results:
            logger.info("search_no_results")
            return Empty()
        logger.info("search_completed", result_count=len(results))
        return Success(results=results, info=_parse_information(payload.get("searchInformation")))

    async def _fetch(self, query: str) -> dict[str, Any]:
        params = {
            "key": self._read_secret(self._settings.api_key),
            "cx": self._read_secret(self._settings.engine_id),
            "q": query,
        }
        request_kwargs: dict[str, Any] = {"params": params}
        if self._settings.request_timeout_seconds is not None:
            request_kwargs["timeout"] = self._settings.request_timeout_seconds

        try:
            response = await self._client.get(str(self._settings.base_url), **request_kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise SearchHttpError(exc.response.status_code, exc.response.reason_phrase) from exc
        except httpx.HTTPError as exc:
            raise SearchTransportError(str(exc)) from exc

        try:
            data = response.json()
        except ValueError as exc:
            raise SearchTransportError(str(exc)) from exc
        if not isinstance(data, dict):
            raise SearchTransportError("Search response format is invalid.")
        return data


class SearchSession:
    """Holds the current outcome for one chat.

    Overlapping searches are not serialized: whichever request resolves
    last writes the outcome.
    """

    def __init__(self, service: GoogleSearchService) -> None:
        self._service = service
        self.outcome: SearchOutcome = Idle()

    async def trigger(self, query: str) -> SearchOutcome | None:
        if not query.strip():
            return None
        self.outcome = Loading(query)
        outcome = await self._service.search(query)
        self.outcome = outcome
        return outcome

    def reset(self) -> None:
        self.outcome = Idle()


def _parse_items(items: Any) -> tuple[SearchResult, ...]:
    if not isinstance(items, list):
        return ()
    return tuple(
        SearchResult(
            title=item.get("title") or "",
            link=item.get("link") or "",
            snippet=item.get("snippet") or "",
            display_link=item.get("displayLink") or "",
        )
        for item in items
        if isinstance(item, dict)
    )


def _parse_information(raw: Any) -> SearchInformation | None:
    if not isinstance(raw, dict):
        return None
    return SearchInformation(
        total_results=raw.get("totalResults"),
        search_time=raw.get("searchTime"),
    )


__all__ = ["FALLBACK_ERROR_MESSAGE", "GoogleSearchService", "SearchSession"]
