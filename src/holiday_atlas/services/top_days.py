"""Busiest holiday dates across countries, computed from local data files.

Sources are tried in order and the first one present wins:

1. ``top-days-<year>.json``: prebuilt, served verbatim.
2. ``holidays-by-date-<year>.json``: ``{date: [{iso2, country, name}]}``.
3. ``totals-<year>.json``: per-country records carrying holiday lists.
4. ``countries/<ISO2>/<year>.json``: one holiday array per country.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
import json
import logging
from pathlib import Path
from typing import Any

from holiday_atlas.core.exceptions import DataSourceNotFoundError
from holiday_atlas.services.params import year_or_current
from holiday_atlas.services.payloads import TopDayItem, TopDayRow, TopDaysPayload

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 20

_LIST_KEYS = ("holidays", "days", "entries", "items", "list")


def _first(record: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        value = record.get(key)
        if value:
            return value
    return None


def pick_date(holiday: Any, year: int) -> str | None:
    """Date of a holiday record as ``YYYY-MM-DD``.

    Accepted shapes: ``date`` (str), ``isoDate``, ``on``, ``d``,
    ``date.iso``, or integer ``month`` and ``day`` within `year`.
    """
    if not isinstance(holiday, Mapping):
        return None
    date = holiday.get("date")
    if isinstance(date, str):
        return date
    for key in ("isoDate", "on", "d"):
        if holiday.get(key):
            return str(holiday[key])
    if isinstance(date, Mapping) and isinstance(date.get("iso"), str):
        return date["iso"]
    month, day = holiday.get("month"), holiday.get("day")
    if isinstance(month, int) and isinstance(day, int):
        return f"{year}-{month:02d}-{day:02d}"
    return None


def pick_name(holiday: Mapping[str, Any]) -> str:
    return str(_first(holiday, "name", "title", "localName") or "Holiday")


def _read_json(path: Path) -> Any:
    return json.loads(path.read_text(encoding="utf-8"))


def _load_source(path: Path) -> Any:
    try:
        return _read_json(path)
    except ValueError as e:
        raise DataSourceNotFoundError(f"{path} is not valid JSON: {e}") from e


def _from_by_date(doc: Any, path: Path) -> Iterable[tuple[str, TopDayItem]]:
    if not isinstance(doc, Mapping):
        raise DataSourceNotFoundError(f"{path}: expected an object keyed by date")
    for date, items in doc.items():
        if not isinstance(items, list):
            continue
        for x in items:
            if not isinstance(x, Mapping):
                continue
            yield date, {
                "iso2": _first(x, "iso2", "code", "countryCode"),
                "country": _first(x, "country", "countryName", "name", "iso2"),
                "name": str(_first(x, "name", "title") or "Holiday"),
            }


def _from_totals(doc: Any, year: int) -> Iterable[tuple[str, TopDayItem]]:
    if isinstance(doc, Mapping) and isinstance(doc.get("totals"), Mapping):
        doc = doc["totals"]
    if isinstance(doc, list):
        records = [r for r in doc if isinstance(r, Mapping)]
    elif isinstance(doc, Mapping):
        records = [
            {"iso2": iso2, **rec} for iso2, rec in doc.items() if isinstance(rec, Mapping)
        ]
    else:
        records = []
    for rec in records:
        iso2 = _first(rec, "iso2", "code", "countryCode", "id")
        country = _first(rec, "country", "countryName", "name") or iso2
        holidays = _first(rec, *_LIST_KEYS)
        if not isinstance(holidays, list):
            continue
        for h in holidays:
            date = pick_date(h, year)
            if date:
                yield date, {"iso2": iso2, "country": country, "name": pick_name(h)}


def _from_country_dir(countries_dir: Path, year: int) -> Iterable[tuple[str, TopDayItem]]:
    for sub in sorted(p for p in countries_dir.iterdir() if p.is_dir()):
        path = sub / f"{year}.json"
        if not path.exists():
            continue
        try:
            rows = _read_json(path)
        except (OSError, ValueError) as e:
            logger.warning("Skipping unreadable %s: %s", path, e)
            continue
        for h in rows if isinstance(rows, list) else []:
            date = pick_date(h, year)
            if date:
                yield date, {
                    "iso2": sub.name,
                    "country": _first(h, "country", "countryName") or sub.name,
                    "name": pick_name(h),
                }


def rank_days(
    entries: Iterable[tuple[str, TopDayItem]], limit: int = DEFAULT_LIMIT
) -> list[TopDayRow]:
    """Group entries by date; most entries first, earlier dates break ties."""
    by_date: dict[str, list[TopDayItem]] = {}
    for date, item in entries:
        if date:
            by_date.setdefault(date, []).append(item)
    rows: list[TopDayRow] = [
        {"date": d, "count": len(items), "items": items} for d, items in by_date.items()
    ]
    rows.sort(key=lambda r: (-r["count"], r["date"]))
    return rows[:limit]


def top_days(
    data_dir: Path, *, year: Any = None, limit: int = DEFAULT_LIMIT
) -> TopDaysPayload | dict[str, Any]:
    """Top `limit` dates by number of countries with a holiday.

    Raises:
        DataSourceNotFoundError: When none of the data sources exist, or the
            one found is not valid JSON of an accepted shape.
    """
    y = year_or_current(year)
    prebuilt = data_dir / f"top-days-{y}.json"
    by_date = data_dir / f"holidays-by-date-{y}.json"
    totals = data_dir / f"totals-{y}.json"
    countries_dir = data_dir / "countries"

    if prebuilt.exists():
        return _load_source(prebuilt)
    if by_date.exists():
        entries = _from_by_date(_load_source(by_date), by_date)
    elif totals.exists():
        entries = _from_totals(_load_source(totals), y)
    elif countries_dir.is_dir():
        entries = _from_country_dir(countries_dir, y)
    else:
        raise DataSourceNotFoundError(f"No data source found under {data_dir}")

    return {"year": y, "top": rank_days(entries, limit)}
