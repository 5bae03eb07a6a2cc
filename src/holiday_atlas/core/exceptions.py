"""Exceptions for holiday data fetching and aggregation.

Two families live here. Caller-level errors (`ValidationError`,
`MissingKeyError`, `DataSourceNotFoundError`) stop an operation before it
starts. Provider errors (`ProviderError` and subclasses) describe why a single
upstream call failed; the aggregator carries them as data inside `Failure`
outcomes instead of raising them.
"""

from __future__ import annotations

from typing import ClassVar


class HolidayAtlasError(Exception):
    """Base exception for holiday-atlas errors"""  # noqa: D415


class ValidationError(HolidayAtlasError):
    """Raised when caller-supplied parameters are invalid"""  # noqa: D415


class MissingKeyError(HolidayAtlasError):
    """Raised when a required API key is not configured"""  # noqa: D415


class DataSourceNotFoundError(HolidayAtlasError):
    """Raised when no local data file can serve a request"""  # noqa: D415


class ProviderError(HolidayAtlasError):
    """A single upstream call failed.

    `reason` is a stable tag used when outcomes are serialized to JSON.
    """

    reason: ClassVar[str] = "provider_error"


class ItemTimeoutError(ProviderError):
    """The call did not settle within its time budget.

    `deadline` is True when the failure was synthesized by the aggregator
    because the overall deadline fired before the item finished (or started).
    """

    reason: ClassVar[str] = "timeout"

    def __init__(self, message: str = "timed out", *, deadline: bool = False):
        super().__init__(message)
        self.deadline = deadline


class UpstreamError(ProviderError):
    """The provider answered with a non-success status."""

    reason: ClassVar[str] = "upstream_error"

    def __init__(self, status: int, detail: str | None = None):
        self.status = status
        self.detail = detail
        message = f"upstream responded with status {status}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class NetworkError(ProviderError):
    """Transport-level failure or an unusable response body"""  # noqa: D415

    reason: ClassVar[str] = "network_error"


class ResponseParseError(NetworkError):
    """The response body did not match any accepted shape"""  # noqa: D415
