"""Configuration schema and validation using Pydantic.

`AtlasSettings` validates and coerces values from every configuration source
(environment, TOML files, programmatic overrides) and supplies defaults.
"""

from pathlib import Path
from typing import Any

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AtlasSettings(BaseSettings):
    """Pydantic settings schema for holiday-atlas.

    Environment variables use the ``HOLIDAY_ATLAS_`` prefix. The Calendarific
    key is additionally read from ``CALENDARIFIC_API_KEY`` / ``CALENDARIFIC_KEY``
    by the environment loader.
    """

    model_config = SettingsConfigDict(
        env_prefix="HOLIDAY_ATLAS_",
        env_file=None,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # --- Providers ---

    calendarific_api_key: str | None = Field(
        default=None,
        description="Calendarific API key (required for count and totals)",
    )
    calendarific_base_url: str = Field(
        default="https://calendarific.com/api/v2",
        min_length=1,
    )
    nager_base_url: str = Field(default="https://date.nager.at", min_length=1)
    world_geojson_url: str = Field(
        default=(
            "https://cdn.jsdelivr.net/npm/three-conic-polygon-geometry@1.4.4/"
            "example/geojson/ne_110m_admin_0_countries.geojson"
        ),
        min_length=1,
    )

    # --- Local data ---

    data_dir: Path = Field(
        default=Path("public/data"),
        description="Directory holding totals-<year>.json and friends",
    )

    # --- Aggregation budget ---

    totals_concurrency: int = Field(default=6, ge=1, le=64)
    today_concurrency: int = Field(default=10, ge=1, le=64)
    per_item_timeout_ms: int = Field(default=4500, ge=1)
    overall_timeout_ms: int = Field(default=12000, ge=1)

    # --- Memoization ---

    cache_ttl_seconds: int = Field(
        default=7 * 24 * 3600,
        ge=1,
        description="TTL for counts, details and totals",
    )
    today_ttl_seconds: int = Field(
        default=15 * 60,
        ge=1,
        description="TTL for the today-set and its country universe",
    )
    top_days_limit: int = Field(default=20, ge=1)

    @field_validator("calendarific_api_key", mode="before")
    @classmethod
    def blank_key_is_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @model_validator(mode="after")
    def validate_budget(self) -> "AtlasSettings":
        """Keep the overall deadline above a single item's timeout."""
        if self.overall_timeout_ms <= self.per_item_timeout_ms:
            raise ValueError(
                "overall_timeout_ms must exceed per_item_timeout_ms "
                f"({self.overall_timeout_ms} <= {self.per_item_timeout_ms})"
            )
        return self

    @classmethod
    def defaults(cls) -> dict[str, Any]:
        """Schema defaults without consulting the environment."""
        return {name: field.get_default() for name, field in cls.model_fields.items()}

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump()
