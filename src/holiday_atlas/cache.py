"""Process-local memoization for provider responses.

The cache is created once per process (or per `HolidayAtlas`), injected into
services, and never persists across restarts. `NullCache` satisfies the same
protocol and stores nothing, which keeps tests free of hidden state.
"""

from __future__ import annotations

from collections.abc import Callable
import time
from typing import Any, Protocol


class Cache(Protocol):
    """Minimal get/set surface used by the services."""

    def get(self, key: str) -> Any | None:
        """Return the value for `key`, or None when absent or expired."""
        ...

    def set(self, key: str, value: Any, ttl: float | None = None) -> None:
        """Store `value` under `key` for `ttl` seconds (None: no expiry)."""
        ...

    def remaining_ttl(self, key: str) -> float | None:
        """Seconds until `key` expires, or None."""
        ...


class MemoryCache:
    """Dictionary-backed cache with a per-entry time-to-live.

    Expired entries are evicted lazily on read. The clock is injectable so
    tests can advance time deterministically.
    """

    def __init__(
        self,
        *,
        default_ttl: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._default_ttl = default_ttl
        self._clock = clock
        # key -> (expires_at or None, value)
        self._entries: dict[str, tuple[float | None, Any]] = {}

    def get(self, key: str) -> Any | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        expires_at, value = entry
        if expires_at is not None and self._clock() >= expires_at:
            del self._entries[key]
            return None
        return value

    def set(self, key: str, value: Any, ttl: float | None = None) -> None:
        ttl = self._default_ttl if ttl is None else ttl
        if ttl is not None and ttl <= 0:
            raise ValueError("ttl must be positive")
        expires_at = self._clock() + ttl if ttl is not None else None
        self._entries[key] = (expires_at, value)

    def remaining_ttl(self, key: str) -> float | None:
        """Seconds until `key` expires; None when absent or without expiry."""
        entry = self._entries.get(key)
        if entry is None or entry[0] is None:
            return None
        remaining = entry[0] - self._clock()
        if remaining <= 0:
            del self._entries[key]
            return None
        return remaining

    def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


class NullCache:
    """Cache that never stores anything."""

    def get(self, key: str) -> Any | None:  # noqa: ARG002
        return None

    def set(self, key: str, value: Any, ttl: float | None = None) -> None:
        pass

    def remaining_ttl(self, key: str) -> float | None:  # noqa: ARG002
        return None
