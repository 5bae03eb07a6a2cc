"""Which countries have a public holiday today (Nager.Date fan-out)."""

from __future__ import annotations

from datetime import UTC, datetime
import json
import logging
import math
from pathlib import Path
from typing import TYPE_CHECKING, Any

from holiday_atlas.cache import Cache
from holiday_atlas.core.exceptions import ProviderError
from holiday_atlas.core.types import WorkItem
from holiday_atlas.pipeline.aggregator import (
    AggregatorConfig,
    aggregate,
    keyed_operation,
)
from holiday_atlas.providers.nager import NagerClient
from holiday_atlas.providers.parsing import is_iso2
from holiday_atlas.services.params import year_or_current
from holiday_atlas.services.payloads import TodaySetPayload, utc_timestamp

if TYPE_CHECKING:
    from holiday_atlas.telemetry import TelemetryContextProtocol

logger = logging.getLogger(__name__)


def universe_from_totals_file(path: Path) -> list[str]:
    """ISO2 codes listed under ``totals`` in a totals-<year>.json file.

    Returns an empty list when the file is missing or unreadable.
    """
    try:
        doc = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return []
    except (OSError, ValueError) as e:
        logger.warning("Could not read %s: %s", path, e)
        return []
    totals = doc.get("totals") if isinstance(doc, dict) else None
    if not isinstance(totals, dict):
        return []
    return [code.upper() for code in totals if is_iso2(code.upper())]


async def country_universe(
    nager: NagerClient,
    cache: Cache,
    *,
    year: int,
    data_dir: Path,
    ttl: float,
) -> list[str]:
    """Country codes to check: the local totals file, else Nager's list."""
    cache_key = f"today-universe:{year}"
    cached = cache.get(cache_key)
    if cached:
        return cached

    codes = universe_from_totals_file(data_dir / f"totals-{year}.json")
    if not codes:
        try:
            codes = [code for code, _ in await nager.available_countries()]
        except ProviderError as e:
            logger.warning("Country universe unavailable for %d: %s", year, e)
            return []
    if codes:
        cache.set(cache_key, codes, ttl)
    return codes


def _empty(year: int) -> TodaySetPayload:
    return {"today": [], "year": year, "generatedAt": utc_timestamp(), "ttlSeconds": 0}


async def today_set(
    nager: NagerClient,
    cache: Cache,
    *,
    year: Any = None,
    data_dir: Path,
    aggregator: AggregatorConfig,
    ttl: float,
    telemetry: TelemetryContextProtocol | None = None,
) -> TodaySetPayload:
    """Sorted ISO2 codes of countries observing a public holiday today.

    Fresh results are served from the cache with their remaining TTL.
    Individual failures or the overall deadline only shrink the list. A run
    cut short by the deadline, or without a single successful check, is not
    cached and reports `ttlSeconds: 0`.
    """
    y = year_or_current(year)
    cache_key = f"today:{y}"
    cached = cache.get(cache_key)
    if cached is not None:
        remaining = cache.remaining_ttl(cache_key)
        return {
            "today": sorted(cached["today"]),
            "year": y,
            "generatedAt": cached["generatedAt"],
            "ttlSeconds": max(0, math.floor(remaining)) if remaining else 0,
            "metrics": cached["metrics"],
        }

    codes = await country_universe(nager, cache, year=y, data_dir=data_dir, ttl=ttl)
    if not codes:
        return _empty(y)

    started = datetime.now(UTC)
    result = await aggregate(
        WorkItem.many(dict.fromkeys(codes)),
        keyed_operation(nager.is_today_public_holiday),
        aggregator,
        telemetry=telemetry,
    )
    today = sorted(code for code, is_today in result.successes().items() if is_today)
    entry = {
        "today": today,
        "generatedAt": utc_timestamp(started),
        "metrics": result.metrics.to_dict(),
    }
    complete = not result.deadline_hit and result.metrics.succeeded > 0
    if complete:
        cache.set(cache_key, entry, ttl)
    else:
        logger.warning(
            "Today-set for %d is partial (%d/%d checked); result not cached",
            y,
            result.metrics.succeeded,
            result.metrics.attempted,
        )
    return {
        "today": today,
        "year": y,
        "generatedAt": entry["generatedAt"],
        "ttlSeconds": math.floor(ttl) if complete else 0,
        "metrics": entry["metrics"],
    }
