"""National holiday totals for every country in a year (Calendarific fan-out)."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from holiday_atlas.cache import Cache
from holiday_atlas.core.types import WorkItem
from holiday_atlas.holidays.counting import count_calendarific
from holiday_atlas.pipeline.aggregator import AggregatorConfig, aggregate
from holiday_atlas.providers.calendarific import CalendarificClient
from holiday_atlas.providers.world import WorldCountriesClient
from holiday_atlas.services.params import year_or_default
from holiday_atlas.services.payloads import (
    CountryTotal,
    HolidayTotalsPayload,
    utc_timestamp,
)

if TYPE_CHECKING:
    from holiday_atlas.telemetry import TelemetryContextProtocol

logger = logging.getLogger(__name__)

SCOPE = "national"


async def holiday_totals(
    calendarific: CalendarificClient,
    world: WorldCountriesClient,
    cache: Cache,
    *,
    year: Any = None,
    aggregator: AggregatorConfig,
    ttl: float | None = None,
    telemetry: TelemetryContextProtocol | None = None,
) -> HolidayTotalsPayload:
    """Count national holidays per country for `year`.

    Countries whose call fails keep their name with ``count: null``; the
    payload is still returned, with `countriesOk` below `countriesAttempted`.
    Only complete runs are cached: a deadline hit or zero successes skip it.
    """
    y = year_or_default(year)
    cache_key = f"totals:{y}"
    cached = cache.get(cache_key)
    if cached is not None:
        return cached

    countries = await world.countries()
    names = dict(countries)

    async def count_country(item: WorkItem) -> int:
        page = await calendarific.holidays(item.key, item.params["year"])
        return count_calendarific(page.holidays, SCOPE)

    result = await aggregate(
        WorkItem.many(names, year=y),
        count_country,
        aggregator,
        telemetry=telemetry,
    )

    totals: dict[str, CountryTotal] = {
        code: {"name": names[code], "count": result.value_or(code)}
        for code in result.outcomes
    }
    out: HolidayTotalsPayload = {
        "year": y,
        "scope": SCOPE,
        "totals": totals,
        "metrics": {
            "countriesAttempted": result.metrics.attempted,
            "countriesOk": result.metrics.succeeded,
            "durationMs": result.metrics.elapsed_ms,
        },
        "updatedAt": utc_timestamp(),
    }
    if result.deadline_hit:
        logger.warning("Totals for %d cut short by the deadline; result not cached", y)
    elif not result.metrics.succeeded:
        logger.warning("No country totals fetched for %d; result not cached", y)
    else:
        cache.set(cache_key, out, ttl)
    return out
