"""Offline build of ``totals-<year>.json`` from Nager.Date.

National counts prefer the figure shown on Nager's country table and fall
back to the API (unique dates of nationwide public holidays). Regional counts
and the per-region breakdown always come from the API.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from holiday_atlas.core.exceptions import ProviderError
from holiday_atlas.core.types import Success, WorkItem
from holiday_atlas.holidays.counting import nager_national_count, nager_regional_counts
from holiday_atlas.pipeline.aggregator import AggregatorConfig, aggregate
from holiday_atlas.providers.nager import NagerClient
from holiday_atlas.providers.parsing import NagerHoliday
from holiday_atlas.services.params import validate_year
from holiday_atlas.services.payloads import BuildTotalsPayload, utc_timestamp

if TYPE_CHECKING:
    from holiday_atlas.telemetry import TelemetryContextProtocol

logger = logging.getLogger(__name__)


async def build_totals(
    nager: NagerClient,
    *,
    year: Any,
    aggregator: AggregatorConfig,
    out_path: Path | None = None,
    telemetry: TelemetryContextProtocol | None = None,
) -> BuildTotalsPayload:
    """Compute national/regional totals for every Nager country.

    Writes indented JSON to `out_path` when given. A failed country keeps
    its baseline national count (or null) with regional null.

    Raises:
        ProviderError: When the country list itself cannot be fetched.
    """
    y = validate_year(year)
    try:
        baseline = await nager.country_table_counts()
    except ProviderError as e:
        logger.warning("Nager country table unavailable, using API counts only: %s", e)
        baseline = {}
    countries = list(dict(await nager.available_countries()).items())

    async def fetch(item: WorkItem) -> list[NagerHoliday]:
        return await nager.public_holidays(y, item.key)

    result = await aggregate(
        WorkItem.many(code for code, _ in countries),
        fetch,
        aggregator,
        telemetry=telemetry,
    )

    totals: dict[str, dict[str, Any]] = {}
    regions: dict[str, dict[str, int]] = {}
    fell_back: list[str] = []
    for code, name in countries:
        national = baseline.get(code)
        regional: int | None = None
        per_region: dict[str, int] = {}
        outcome = result[code]
        if isinstance(outcome, Success):
            if national is None:
                national = nager_national_count(outcome.value)
                fell_back.append(code)
            regional, per_region = nager_regional_counts(outcome.value)
        else:
            logger.debug("Keeping baseline for %s: %s", code, outcome.error)
        totals[code] = {"name": name, "national": national, "regional": regional}
        regions[code] = per_region

    if fell_back:
        logger.info("Baseline missing for (used API fallback): %s", ", ".join(fell_back))

    out: BuildTotalsPayload = {
        "year": y,
        "updatedAt": utc_timestamp(),
        "totals": totals,
        "regions": regions,
    }
    if out_path is not None:
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(json.dumps(out, indent=2), encoding="utf-8")
        logger.info("Wrote %s", out_path)
    return out
