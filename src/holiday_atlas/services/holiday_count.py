"""Holiday count for one country and month (Calendarific)."""

from __future__ import annotations

import logging
from typing import Any

from holiday_atlas.cache import Cache
from holiday_atlas.holidays.counting import count_calendarific
from holiday_atlas.providers.calendarific import UPSTREAM_TYPES, CalendarificClient
from holiday_atlas.services.params import (
    validate_iso2,
    validate_month,
    validate_scope,
    validate_year,
)
from holiday_atlas.services.payloads import HolidayCountPayload

logger = logging.getLogger(__name__)


def upstream_type(scope: str, raw_type: str | None) -> str | None:
    """Calendarific `type` filter for a request.

    An explicit raw type wins; otherwise the national scope asks upstream for
    national holidays only to keep the payload small.
    """
    candidate = (raw_type or "").strip().lower() or (
        "national" if scope == "national" else ""
    )
    return candidate if candidate in UPSTREAM_TYPES else None


async def holiday_count(
    client: CalendarificClient,
    cache: Cache,
    *,
    iso2: Any,
    year: Any,
    month: Any,
    scope: Any = "national",
    type: str | None = None,  # noqa: A002
    ttl: float | None = None,
) -> HolidayCountPayload:
    """Count holidays in one country-month, filtered by scope.

    Raises:
        ValidationError: For malformed iso2/year/month/scope.
        ProviderError: When the upstream call fails.
    """
    code = validate_iso2(iso2)
    y = validate_year(year)
    m = validate_month(month)
    s = validate_scope(scope)

    cache_key = f"count:{code}-{y}-{m}-{s}"
    cached = cache.get(cache_key)
    if cached is not None:
        return cached

    page = await client.holidays(code, y, month=m, type=upstream_type(s, type))
    out: HolidayCountPayload = {
        "iso2": code,
        "year": y,
        "month": m,
        "scope": s,
        "name": page.country_name,
        "count": count_calendarific(page.holidays, s),
    }
    cache.set(cache_key, out, ttl)
    logger.debug("Counted %d %s holidays for %s %d-%02d", out["count"], s, code, y, m)
    return out
