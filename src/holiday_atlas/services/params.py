"""Validation of caller-supplied parameters.

Each helper accepts loosely typed input (query strings, CLI arguments) and
returns the normalized value or raises `ValidationError`.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, cast

from holiday_atlas.core.exceptions import ValidationError
from holiday_atlas.holidays.counting import SCOPES, Scope
from holiday_atlas.providers.parsing import is_iso2

MIN_YEAR = 1900
MAX_YEAR = 2100


def _as_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value.strip())
    return None


def validate_iso2(value: Any) -> str:
    code = str(value or "").strip().upper()
    if not is_iso2(code):
        raise ValidationError(f"Bad iso2: {value!r}")
    return code


def validate_year(value: Any) -> int:
    year = _as_int(value)
    if year is None or not MIN_YEAR <= year <= MAX_YEAR:
        raise ValidationError(f"Bad year: {value!r}")
    return year


def year_or_default(value: Any) -> int:
    """Valid year, or the current UTC year when the value is missing.

    Unlike `year_or_current`, a present but malformed year is rejected.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        return datetime.now(UTC).year
    return validate_year(value)


def year_or_current(value: Any) -> int:
    """Valid year, or the current UTC year when missing or invalid."""
    try:
        return validate_year(value)
    except ValidationError:
        return datetime.now(UTC).year


def validate_month(value: Any) -> int:
    month = _as_int(value)
    if month is None or not 1 <= month <= 12:
        raise ValidationError(f"Bad month: {value!r}")
    return month


def validate_scope(value: Any) -> Scope:
    scope = str(value or "national").strip().lower()
    if scope not in SCOPES:
        raise ValidationError(f"Bad scope: {value!r}. Must be one of {list(SCOPES)}")
    return cast("Scope", scope)
