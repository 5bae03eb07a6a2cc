"""Nager.Date client (https://date.nager.at)."""

from __future__ import annotations

import httpx

from holiday_atlas.providers.base import HttpProvider
from holiday_atlas.providers.parsing import (
    NagerHoliday,
    parse_is_today,
    parse_nager_countries,
    parse_nager_country_table,
    parse_nager_holidays,
)

DEFAULT_BASE_URL = "https://date.nager.at"


class NagerClient(HttpProvider):
    """Public holidays, availability and "is today a holiday" checks."""

    def __init__(
        self,
        *,
        base_url: str = DEFAULT_BASE_URL,
        client: httpx.AsyncClient | None = None,
        timeout: float = 10.0,
    ) -> None:
        super().__init__(client=client, timeout=timeout)
        self._base_url = base_url.rstrip("/")

    async def public_holidays(self, year: int, country: str) -> list[NagerHoliday]:
        payload = await self._get_json(
            f"{self._base_url}/api/v3/PublicHolidays/{year}/{country}"
        )
        return parse_nager_holidays(payload)

    async def is_today_public_holiday(self, country: str) -> bool:
        """True when today is a public holiday in `country`.

        Nager answers 200 for a holiday and 204 for a regular day.
        """
        response = await self._request(
            f"{self._base_url}/api/v3/IsTodayPublicHoliday/{country}",
            accept=(204,),
        )
        return parse_is_today(response.status_code, response.content)

    async def available_countries(self) -> list[tuple[str, str]]:
        payload = await self._get_json(f"{self._base_url}/api/v3/AvailableCountries")
        return parse_nager_countries(payload)

    async def country_table_counts(self) -> dict[str, int]:
        """Holiday counts per country as shown on the `/Country` page."""
        html = await self._get_text(f"{self._base_url}/Country")
        return parse_nager_country_table(html)
