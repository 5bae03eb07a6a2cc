"""Public-holiday lookups and bounded-concurrency aggregation."""

import importlib.metadata
import logging

from holiday_atlas.atlas import HolidayAtlas, create_atlas
from holiday_atlas.cache import Cache, MemoryCache, NullCache
from holiday_atlas.config import FrozenConfig, resolve_config
from holiday_atlas.core.exceptions import (
    DataSourceNotFoundError,
    HolidayAtlasError,
    ItemTimeoutError,
    MissingKeyError,
    NetworkError,
    ProviderError,
    ResponseParseError,
    UpstreamError,
    ValidationError,
)
from holiday_atlas.core.types import (
    AggregateMetrics,
    AggregateResult,
    Failure,
    Outcome,
    Success,
    WorkItem,
)
from holiday_atlas.pipeline.aggregator import AggregatorConfig, aggregate
from holiday_atlas.telemetry import TelemetryContext, TelemetryReporter

try:
    __version__ = importlib.metadata.version("holiday-atlas")
except importlib.metadata.PackageNotFoundError:
    __version__ = "development"

# Library logging stays silent unless the application configures handlers.
logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [  # noqa: RUF022
    # Entry points
    "HolidayAtlas",
    "create_atlas",
    "aggregate",
    "AggregatorConfig",
    # Configuration
    "FrozenConfig",
    "resolve_config",
    # Caching
    "Cache",
    "MemoryCache",
    "NullCache",
    # Core types
    "WorkItem",
    "Outcome",
    "Success",
    "Failure",
    "AggregateResult",
    "AggregateMetrics",
    # Telemetry
    "TelemetryContext",
    "TelemetryReporter",
    # Exceptions
    "HolidayAtlasError",
    "ValidationError",
    "MissingKeyError",
    "DataSourceNotFoundError",
    "ProviderError",
    "ItemTimeoutError",
    "UpstreamError",
    "NetworkError",
    "ResponseParseError",
]
