"""Pure parsers for provider responses.

Each function accepts an explicit, enumerated set of payload shapes and turns
them into typed values. Anything else raises `ResponseParseError`, which the
aggregator reports as a network failure for the item.
"""

from __future__ import annotations

import dataclasses
import json
import re
from typing import Any

from bs4 import BeautifulSoup

from holiday_atlas.core.exceptions import ResponseParseError, UpstreamError

_ISO2_RE = re.compile(r"^[A-Z]{2}$")

# GeoJSON property names checked for country code and display name, in order.
WORLD_ISO2_KEYS = ("ISO_A2", "iso_a2", "iso2", "cca2")
WORLD_NAME_KEYS = ("NAME", "ADMIN", "name_long", "name")
WORLD_SKIP_CODES = frozenset({"", "-99", "XK"})


@dataclasses.dataclass(frozen=True, slots=True)
class CalendarificHoliday:
    """A holiday as reported by Calendarific, reduced to the fields we use."""

    name: str
    date_iso: str
    types: tuple[str, ...] = ()
    country_name: str | None = None


@dataclasses.dataclass(frozen=True, slots=True)
class CalendarificPage:
    holidays: tuple[CalendarificHoliday, ...]
    country_name: str | None = None


@dataclasses.dataclass(frozen=True, slots=True)
class NagerHoliday:
    """A holiday row from Nager.Date `PublicHolidays`."""

    date: str
    name: str
    local_name: str | None = None
    types: tuple[str, ...] = ("Public",)
    global_: bool = True
    counties: tuple[str, ...] | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date,
            "name": self.name,
            "localName": self.local_name,
            "types": list(self.types),
            "global": self.global_,
            "counties": list(self.counties) if self.counties is not None else None,
        }


def _require_mapping(value: Any, what: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise ResponseParseError(f"{what}: expected an object, got {type(value).__name__}")
    return value


def _require_list(value: Any, what: str) -> list[Any]:
    if not isinstance(value, list):
        raise ResponseParseError(f"{what}: expected an array, got {type(value).__name__}")
    return value


# --- Calendarific ---


def calendarific_date_iso(date: Any) -> str:
    """Extract the ISO date string from a Calendarific `date` field.

    Accepted shapes, in order: ``{"iso": str}``, ``{"datetime": {"iso": str}}``,
    ``{"datetime": str}``, and a bare ``str``. Returns "" when none match.
    """
    if isinstance(date, str):
        return date
    if isinstance(date, dict):
        iso = date.get("iso")
        if isinstance(iso, str) and iso:
            return iso
        dt = date.get("datetime")
        if isinstance(dt, dict) and isinstance(dt.get("iso"), str):
            return dt["iso"]
        if isinstance(dt, str):
            return dt
    return ""


def _calendarific_holiday(raw: Any) -> CalendarificHoliday:
    row = _require_mapping(raw, "calendarific holiday")
    types = row.get("type") or []
    if isinstance(types, str):
        types = [types]
    country = row.get("country")
    return CalendarificHoliday(
        name=str(row.get("name") or ""),
        date_iso=calendarific_date_iso(row.get("date")),
        types=tuple(str(t) for t in types),
        country_name=country.get("name") if isinstance(country, dict) else None,
    )


def parse_calendarific_holidays(payload: Any) -> CalendarificPage:
    """Parse a Calendarific `/holidays` body.

    Accepted shapes:
        ``{"meta": {"code": 200}, "response": {"holidays": [...]}}``
        ``{"meta": {"code": 200}, "response": []}`` (no holidays)

    Raises:
        UpstreamError: When `meta.code` is present and not 200.
        ResponseParseError: For any other shape.
    """
    body = _require_mapping(payload, "calendarific response")
    meta = _require_mapping(body.get("meta"), "calendarific meta")
    code = meta.get("code")
    if code != 200:
        detail = meta.get("error_detail") or meta.get("error_type")
        status = code if isinstance(code, int) else 502
        raise UpstreamError(status, str(detail) if detail else "calendarific meta error")

    response = body.get("response")
    if isinstance(response, list) and not response:
        return CalendarificPage(holidays=())
    response = _require_mapping(response, "calendarific response.response")
    holidays = tuple(
        _calendarific_holiday(h)
        for h in _require_list(response.get("holidays", []), "calendarific holidays")
    )
    country = response.get("country")
    country_name = holidays[0].country_name if holidays else None
    if country_name is None and isinstance(country, dict):
        country_name = country.get("name")
    return CalendarificPage(holidays=holidays, country_name=country_name)


# --- Nager.Date ---


def _nager_holiday(raw: Any) -> NagerHoliday:
    row = _require_mapping(raw, "nager holiday")
    date = row.get("date")
    if not isinstance(date, str) or not date:
        raise ResponseParseError("nager holiday: missing date")
    types = row.get("types")
    counties = row.get("counties")
    return NagerHoliday(
        date=date,
        name=str(row.get("name") or ""),
        local_name=row.get("localName"),
        types=tuple(str(t) for t in types) if isinstance(types, list) and types else ("Public",),
        global_=bool(row.get("global")),
        counties=tuple(str(c) for c in counties) if isinstance(counties, list) else None,
    )


def parse_nager_holidays(payload: Any) -> list[NagerHoliday]:
    """Parse a Nager.Date `PublicHolidays` body (a JSON array of rows)."""
    return [_nager_holiday(h) for h in _require_list(payload, "nager holidays")]


def parse_nager_countries(payload: Any) -> list[tuple[str, str]]:
    """Parse `AvailableCountries`: ``[{"countryCode": "FR", "name": "France"}]``."""
    out: list[tuple[str, str]] = []
    for raw in _require_list(payload, "nager countries"):
        row = _require_mapping(raw, "nager country")
        code = str(row.get("countryCode") or "").upper()
        if not _ISO2_RE.match(code):
            raise ResponseParseError(f"nager country: bad countryCode {code!r}")
        out.append((code, str(row.get("name") or code)))
    return out


def parse_is_today(status: int, body: bytes) -> bool:
    """Interpret an `IsTodayPublicHoliday` response.

    Accepted shapes: status 204 (not a holiday), status 200 with an empty body
    (holiday), status 200 with a JSON boolean body.
    """
    if status == 204:
        return False
    if status != 200:
        raise UpstreamError(status)
    text = body.strip()
    if not text:
        return True
    try:
        value = json.loads(text)
    except ValueError as e:
        raise ResponseParseError("is-today: body is not JSON") from e
    if not isinstance(value, bool):
        raise ResponseParseError(f"is-today: expected a boolean, got {value!r}")
    return value


def parse_nager_country_table(html: str) -> dict[str, int]:
    """Extract ``{code: holiday_count}`` from the Nager.Date country table page.

    Rows whose first three cells are not (name, ISO2 code, integer) are skipped.
    """
    soup = BeautifulSoup(html, "html.parser")
    counts: dict[str, int] = {}
    for row in soup.find_all("tr"):
        cells = [td.get_text(strip=True) for td in row.find_all("td")]
        if len(cells) < 3:
            continue
        code = re.sub(r"[^A-Z]", "", cells[1].upper())
        try:
            count = int(cells[2])
        except ValueError:
            continue
        if _ISO2_RE.match(code):
            counts[code] = count
    return counts


# --- World GeoJSON ---


def _first_str(props: dict[str, Any], keys: tuple[str, ...]) -> str | None:
    for key in keys:
        value = props.get(key)
        if value:
            return str(value)
    return None


def parse_world_countries(geojson: Any) -> list[tuple[str, str]]:
    """Extract ``(iso2, name)`` pairs from a Natural Earth countries FeatureCollection.

    Invalid codes (``-99``, ``XK``, empty) and repeated codes are skipped.
    """
    doc = _require_mapping(geojson, "world geojson")
    out: list[tuple[str, str]] = []
    seen: set[str] = set()
    for feature in _require_list(doc.get("features") or [], "world features"):
        props = feature.get("properties") if isinstance(feature, dict) else None
        if not isinstance(props, dict):
            continue
        iso2 = (_first_str(props, WORLD_ISO2_KEYS) or "").upper()
        if iso2 in WORLD_SKIP_CODES or iso2 in seen:
            continue
        seen.add(iso2)
        out.append((iso2, _first_str(props, WORLD_NAME_KEYS) or "Unknown"))
    return out


def is_iso2(value: str) -> bool:
    return bool(_ISO2_RE.match(value))
