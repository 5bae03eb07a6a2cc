"""JSON payload shapes returned by the services.

Keys are camelCase because these dictionaries are served as-is to the map
front-end.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, TypedDict


class HolidayCountPayload(TypedDict):
    iso2: str
    year: int
    month: int
    scope: str
    name: str | None
    count: int


class HolidayDetailsPayload(TypedDict):
    iso2: str
    year: int
    holidays: list[dict[str, Any]]


class CountryTotal(TypedDict):
    name: str
    count: int | None


class TotalsMetrics(TypedDict):
    countriesAttempted: int
    countriesOk: int
    durationMs: int


class HolidayTotalsPayload(TypedDict):
    year: int
    scope: str
    totals: dict[str, CountryTotal]
    metrics: TotalsMetrics
    updatedAt: str


class TodaySetPayload(TypedDict, total=False):
    today: list[str]
    year: int
    generatedAt: str
    ttlSeconds: int
    metrics: dict[str, int]


class TopDayItem(TypedDict):
    iso2: str | None
    country: str | None
    name: str


class TopDayRow(TypedDict):
    date: str
    count: int
    items: list[TopDayItem]


class TopDaysPayload(TypedDict):
    year: int
    top: list[TopDayRow]


class BuildTotalsPayload(TypedDict):
    year: int
    updatedAt: str
    totals: dict[str, dict[str, Any]]
    regions: dict[str, dict[str, int]]


def utc_timestamp(at: datetime | None = None) -> str:
    """ISO 8601 UTC timestamp with millisecond precision and a ``Z`` suffix."""
    moment = at or datetime.now(UTC)
    return moment.astimezone(UTC).isoformat(timespec="milliseconds").replace(
        "+00:00", "Z"
    )
