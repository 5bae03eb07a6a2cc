"""Country universe from a Natural Earth admin-0 GeoJSON file."""

from __future__ import annotations

import httpx

from holiday_atlas.providers.base import HttpProvider
from holiday_atlas.providers.parsing import parse_world_countries

DEFAULT_WORLD_URL = (
    "https://cdn.jsdelivr.net/npm/three-conic-polygon-geometry@1.4.4/"
    "example/geojson/ne_110m_admin_0_countries.geojson"
)


class WorldCountriesClient(HttpProvider):
    def __init__(
        self,
        url: str = DEFAULT_WORLD_URL,
        *,
        client: httpx.AsyncClient | None = None,
        timeout: float = 10.0,
    ) -> None:
        super().__init__(client=client, timeout=timeout)
        self._url = url

    async def countries(self) -> list[tuple[str, str]]:
        """Return ``(iso2, name)`` pairs, skipping invalid or repeated codes."""
        return parse_world_countries(await self._get_json(self._url))
