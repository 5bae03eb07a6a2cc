"""The primary user-facing entry point.

`HolidayAtlas` wires one resolved configuration, one process-scoped cache and
the provider clients into the service functions. A hosting layer (serverless
handler, ASGI route, CLI) keeps a single instance per process and maps its
exceptions to status codes:

- `ValidationError`: 400
- `MissingKeyError`: 500
- `DataSourceNotFoundError`: 501
- `ProviderError` (single-country operations only): 502
"""

from __future__ import annotations

import logging
from pathlib import Path
from types import TracebackType
from typing import TYPE_CHECKING, Any, Self

import httpx

from holiday_atlas.cache import Cache, MemoryCache
from holiday_atlas.config import FrozenConfig, resolve_config
from holiday_atlas.pipeline.aggregator import AggregatorConfig
from holiday_atlas.providers.calendarific import CalendarificClient
from holiday_atlas.providers.nager import NagerClient
from holiday_atlas.providers.world import WorldCountriesClient
from holiday_atlas.services import (
    build_totals,
    holiday_count,
    holiday_details,
    holiday_totals,
    today_set,
    top_days,
)
from holiday_atlas.telemetry import TelemetryContext

if TYPE_CHECKING:
    from holiday_atlas.services.payloads import (
        BuildTotalsPayload,
        HolidayCountPayload,
        HolidayDetailsPayload,
        HolidayTotalsPayload,
        TodaySetPayload,
    )
    from holiday_atlas.telemetry import TelemetryContextProtocol, TelemetryReporter

logger = logging.getLogger(__name__)


class HolidayAtlas:
    """Holiday lookups and aggregations over Calendarific and Nager.Date."""

    def __init__(
        self,
        config: FrozenConfig,
        *,
        cache: Cache | None = None,
        http_client: httpx.AsyncClient | None = None,
        reporters: tuple[TelemetryReporter, ...] = (),
    ) -> None:
        """Initialize the facade.

        Args:
            config: Frozen configuration.
            cache: Memoization store; a fresh `MemoryCache` when omitted.
            http_client: Shared client for all providers. When omitted each
                provider opens its own and `aclose()` releases them.
            reporters: Telemetry reporters (active only when telemetry is enabled).
        """
        self.config = config
        self.cache: Cache = cache if cache is not None else MemoryCache()
        self._http_client = http_client
        self._telemetry: TelemetryContextProtocol = TelemetryContext(*reporters)
        timeout = config.per_item_timeout_ms / 1000
        self._nager = NagerClient(
            base_url=config.nager_base_url, client=http_client, timeout=timeout
        )
        self._world = WorldCountriesClient(
            config.world_geojson_url, client=http_client, timeout=timeout
        )
        self._calendarific: CalendarificClient | None = None

    @property
    def calendarific(self) -> CalendarificClient:
        """Calendarific client, created on first use.

        Raises:
            MissingKeyError: If no Calendarific API key is configured.
        """
        if self._calendarific is None:
            self._calendarific = CalendarificClient(
                self.config.calendarific_api_key,
                base_url=self.config.calendarific_base_url,
                client=self._http_client,
                timeout=self.config.per_item_timeout_ms / 1000,
            )
        return self._calendarific

    def aggregator_config(self, concurrency: int) -> AggregatorConfig:
        return AggregatorConfig(
            concurrency=concurrency,
            per_item_timeout_ms=self.config.per_item_timeout_ms,
            overall_timeout_ms=self.config.overall_timeout_ms,
        )

    async def holiday_count(
        self,
        iso2: Any,
        year: Any,
        month: Any,
        scope: Any = "national",
        type: str | None = None,  # noqa: A002
    ) -> HolidayCountPayload:
        return await holiday_count(
            self.calendarific,
            self.cache,
            iso2=iso2,
            year=year,
            month=month,
            scope=scope,
            type=type,
            ttl=self.config.cache_ttl_seconds,
        )

    async def holiday_details(
        self, iso2: Any, year: Any = None
    ) -> HolidayDetailsPayload:
        return await holiday_details(
            self._nager,
            self.cache,
            iso2=iso2,
            year=year,
            ttl=self.config.cache_ttl_seconds,
        )

    async def holiday_totals(self, year: Any = None) -> HolidayTotalsPayload:
        return await holiday_totals(
            self.calendarific,
            self._world,
            self.cache,
            year=year,
            aggregator=self.aggregator_config(self.config.totals_concurrency),
            ttl=self.config.cache_ttl_seconds,
            telemetry=self._telemetry,
        )

    async def today_set(self, year: Any = None) -> TodaySetPayload:
        return await today_set(
            self._nager,
            self.cache,
            year=year,
            data_dir=self.config.data_dir,
            aggregator=self.aggregator_config(self.config.today_concurrency),
            ttl=self.config.today_ttl_seconds,
            telemetry=self._telemetry,
        )

    def top_days(self, year: Any = None, limit: int | None = None) -> dict[str, Any]:
        return dict(
            top_days(
                self.config.data_dir,
                year=year,
                limit=limit or self.config.top_days_limit,
            )
        )

    async def build_totals(
        self, year: Any, out_path: Path | None = None
    ) -> BuildTotalsPayload:
        if out_path is None:
            out_path = self.config.data_dir / f"totals-{year}.json"
        return await build_totals(
            self._nager,
            year=year,
            aggregator=self.aggregator_config(self.config.totals_concurrency),
            out_path=out_path,
            telemetry=self._telemetry,
        )

    async def aclose(self) -> None:
        """Close provider clients this instance opened."""
        await self._nager.aclose()
        await self._world.aclose()
        if self._calendarific is not None:
            await self._calendarific.aclose()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()


def create_atlas(
    config: FrozenConfig | None = None,
    **kwargs: Any,
) -> HolidayAtlas:
    """Create a `HolidayAtlas`, resolving configuration from the environment
    and config files when none is given.
    """
    final_config = config if config is not None else resolve_config().to_frozen()
    logger.debug("Creating HolidayAtlas with %s", final_config)
    return HolidayAtlas(final_config, **kwargs)
