"""Calendarific client (https://calendarific.com/api/v2)."""

from __future__ import annotations

import httpx

from holiday_atlas.core.exceptions import MissingKeyError
from holiday_atlas.providers.base import HttpProvider
from holiday_atlas.providers.parsing import CalendarificPage, parse_calendarific_holidays

DEFAULT_BASE_URL = "https://calendarific.com/api/v2"

# Values Calendarific accepts for its `type` filter.
UPSTREAM_TYPES = frozenset({"national", "local", "religious", "observance"})


class CalendarificClient(HttpProvider):
    """Fetches holiday lists per country and year (optionally per month)."""

    def __init__(
        self,
        api_key: str | None,
        *,
        base_url: str = DEFAULT_BASE_URL,
        client: httpx.AsyncClient | None = None,
        timeout: float = 10.0,
    ) -> None:
        if not api_key:
            raise MissingKeyError(
                "Missing Calendarific API key. Set CALENDARIFIC_API_KEY "
                "(or CALENDARIFIC_KEY) or HOLIDAY_ATLAS_CALENDARIFIC_API_KEY."
            )
        super().__init__(client=client, timeout=timeout)
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")

    async def holidays(
        self,
        country: str,
        year: int,
        *,
        month: int | None = None,
        type: str | None = None,  # noqa: A002
    ) -> CalendarificPage:
        """Return the parsed holiday page for one country.

        `type` is forwarded only when Calendarific understands it.
        """
        params: dict[str, str] = {
            "api_key": self._api_key,
            "country": country,
            "year": str(year),
        }
        if month is not None:
            params["month"] = str(month)
        if type and type in UPSTREAM_TYPES:
            params["type"] = type
        payload = await self._get_json(f"{self._base_url}/holidays", params=params)
        return parse_calendarific_holidays(payload)

    def __repr__(self) -> str:
        return f"CalendarificClient(api_key=[REDACTED], base_url={self._base_url!r})"
