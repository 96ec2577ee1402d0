"""Calendar helpers for date-restricted queries."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


def days_before(days: int, *, today: date | None = None) -> date:
    """Return the calendar date ``days`` days before ``today`` (UTC today by default).

    Only the date part is used, so the result never carries a time of day.
    """

    if days < 0:
        raise ValueError("days must not be negative")
    return (today or utc_today()) - timedelta(days=days)


__all__ = ["days_before", "utc_today"]
