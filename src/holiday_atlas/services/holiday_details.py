"""Holiday details for one country and year (Nager.Date)."""

from __future__ import annotations

from typing import Any

from holiday_atlas.cache import Cache
from holiday_atlas.providers.nager import NagerClient
from holiday_atlas.services.params import validate_iso2, year_or_default
from holiday_atlas.services.payloads import HolidayDetailsPayload


async def holiday_details(
    client: NagerClient,
    cache: Cache,
    *,
    iso2: Any,
    year: Any = None,
    ttl: float | None = None,
) -> HolidayDetailsPayload:
    """List a country's public holidays sorted by date.

    Each row keeps `global` and `counties` so the front-end can filter by region.
    """
    code = validate_iso2(iso2)
    y = year_or_default(year)

    cache_key = f"details:{code}-{y}"
    cached = cache.get(cache_key)
    if cached is not None:
        return cached

    rows = await client.public_holidays(y, code)
    out: HolidayDetailsPayload = {
        "iso2": code,
        "year": y,
        "holidays": [h.to_dict() for h in sorted(rows, key=lambda h: h.date)],
    }
    cache.set(cache_key, out, ttl)
    return out
