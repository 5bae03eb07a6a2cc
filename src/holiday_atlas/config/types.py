"""Configuration data types, following the resolve-once, freeze-then-flow pattern."""

from collections.abc import Mapping
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Literal, NamedTuple

ConfigOrigin = Literal["programmatic", "env", "file", "default"]
SourceMap = Mapping[str, ConfigOrigin]

SECRET_FIELDS = frozenset({"calendarific_api_key"})


@dataclass(frozen=True)
class FrozenConfig:
    """Immutable configuration handed to `HolidayAtlas` and the services."""

    calendarific_api_key: str | None
    calendarific_base_url: str
    nager_base_url: str
    world_geojson_url: str
    data_dir: Path
    totals_concurrency: int
    today_concurrency: int
    per_item_timeout_ms: int
    overall_timeout_ms: int
    cache_ttl_seconds: int
    today_ttl_seconds: int
    top_days_limit: int

    def redacted(self) -> dict[str, Any]:
        """Field values with secrets replaced, safe for logs and JSON."""
        out = asdict(self)
        for name in SECRET_FIELDS:
            if out.get(name):
                out[name] = "[REDACTED]"
        out["data_dir"] = str(self.data_dir)
        return out

    def __str__(self) -> str:
        body = ", ".join(f"{k}={v!r}" for k, v in self.redacted().items())
        return f"FrozenConfig({body})"

    def __repr__(self) -> str:
        return self.__str__()


class ResolvedConfig(NamedTuple):
    """Configuration after merging all sources, with per-field origins."""

    values: Mapping[str, Any]
    origin: SourceMap

    def to_frozen(self) -> FrozenConfig:
        return FrozenConfig(**self.values)

    def __getattr__(self, name: str) -> Any:
        try:
            return self.values[name]
        except KeyError:
            raise AttributeError(name) from None

    def with_overrides(self, **overrides: Any) -> "ResolvedConfig":
        """Copy with programmatic overrides applied. Unknown fields are ignored."""
        values = dict(self.values)
        origin = dict(self.origin)
        for field, value in overrides.items():
            if field in values:
                values[field] = value
                origin[field] = "programmatic"
        return ResolvedConfig(values=values, origin=origin)

    def audit(self) -> str:
        """Redacted, human-readable report of where each value came from."""
        lines = []
        for field, value in self.values.items():
            origin = self.origin.get(field, "default")
            if field in SECRET_FIELDS:
                shown = "None" if value is None else "[REDACTED]"
            else:
                shown = str(value)
            if origin == "env" and field not in SECRET_FIELDS:
                lines.append(f"{field}: env:HOLIDAY_ATLAS_{field.upper()}={shown}")
            else:
                lines.append(f"{field}: {origin}:{shown}")
        return "\n".join(lines)

    def __str__(self) -> str:
        return f"ResolvedConfig({self.to_frozen().redacted()!r})"

    def __repr__(self) -> str:
        return self.__str__()
