"""Holiday counting rules.

Calendarific lists the same holiday twice when a weekend date is shifted to
an "(observed)" weekday, and tags each entry with free-form types. Nager.Date
marks nationwide holidays with ``global`` and regional ones with ``counties``.
The functions here turn those lists into the counts shown on the map.
"""

from __future__ import annotations

from collections.abc import Iterable
import re
from typing import Literal

from holiday_atlas.providers.parsing import CalendarificHoliday, NagerHoliday

type Scope = Literal["national", "public", "all"]

SCOPES: tuple[Scope, ...] = ("national", "public", "all")

_SCOPE_PATTERNS: dict[str, re.Pattern[str]] = {
    "national": re.compile(r"national|federal"),
    "public": re.compile(r"national|federal|public|bank"),
}
_OBSERVED_RE = re.compile(r"\s*\(observed\)", re.IGNORECASE)
_PUBLIC_RE = re.compile(r"public", re.IGNORECASE)


def in_scope(holiday: CalendarificHoliday, scope: Scope) -> bool:
    """Whether a Calendarific holiday's types fall inside `scope`."""
    if scope == "all":
        return True
    types = " ".join(t.lower() for t in holiday.types)
    return bool(_SCOPE_PATTERNS[scope].search(types))


def strip_observed(name: str) -> str:
    return _OBSERVED_RE.sub("", name, count=1)


def count_calendarific(holidays: Iterable[CalendarificHoliday], scope: Scope) -> int:
    """Count in-scope holidays, de-duplicated by (date, name sans "(observed)")."""
    seen = {
        (h.date_iso, strip_observed(h.name)) for h in holidays if in_scope(h, scope)
    }
    return len(seen)


def _public_rows(rows: Iterable[NagerHoliday]) -> list[NagerHoliday]:
    return [r for r in rows if any(_PUBLIC_RE.search(t) for t in r.types)]


def nager_national_count(rows: Iterable[NagerHoliday]) -> int:
    """Unique dates of nationwide (``global``) public holidays."""
    return len({r.date for r in _public_rows(rows) if r.global_})


def nager_regional_counts(rows: Iterable[NagerHoliday]) -> tuple[int, dict[str, int]]:
    """Unique regional holiday dates, overall and per ISO 3166-2 region code."""
    public = _public_rows(rows)
    regional_dates = {
        r.date for r in public if not r.global_ and r.counties
    }
    per_region: dict[str, set[str]] = {}
    for r in public:
        if r.global_ or r.counties is None:
            continue
        for code in r.counties:
            per_region.setdefault(code.upper(), set()).add(r.date)
    return len(regional_dates), {k: len(v) for k, v in per_region.items()}
