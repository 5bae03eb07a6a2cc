"""Configuration resolution with precedence handling.

Precedence, highest first:
Programmatic > Environment > Project file > Home file > Defaults
"""

import os
from pathlib import Path
from typing import Any

from .env_loader import EnvironmentConfigLoader
from .file_loader import ConfigFileError, FileConfigLoader
from .schema import AtlasSettings
from .types import ConfigOrigin, ResolvedConfig

PROFILE_ENV_VAR = "HOLIDAY_ATLAS_PROFILE"


class ConfigResolver:
    """Merges configuration sources and validates the result."""

    def __init__(self) -> None:
        self.file_loader = FileConfigLoader()
        self.env_loader = EnvironmentConfigLoader()

    def resolve(
        self,
        programmatic: dict[str, Any] | None = None,
        *,
        profile: str | None = None,
        use_env_file: str | Path | None = None,
        project_root: Path | None = None,
    ) -> ResolvedConfig:
        """Resolve configuration from all sources.

        Raises:
            ValueError: If validation fails or the environment holds bad values.
            ConfigFileError: If the project file is malformed.
        """
        merged: dict[str, Any] = AtlasSettings.defaults()
        origin: dict[str, ConfigOrigin] = dict.fromkeys(merged, "default")

        def apply(values: dict[str, Any], source: ConfigOrigin) -> None:
            for field, value in values.items():
                if field in merged:  # only known fields
                    merged[field] = value
                    origin[field] = source

        if profile is None:
            profile = os.getenv(PROFILE_ENV_VAR)

        try:
            apply(self.file_loader.load_home_config(profile=profile), "file")
        except ConfigFileError:
            # A broken home file should not block a run.
            pass

        try:
            apply(
                self.file_loader.load_project_config(
                    project_root=project_root, profile=profile
                ),
                "file",
            )
        except ConfigFileError:
            if profile is None:
                raise

        try:
            apply(self.env_loader.load_env_config(env_file=use_env_file), "env")
        except (ValueError, FileNotFoundError) as e:
            raise ValueError(f"Environment configuration error: {e}") from e

        if programmatic:
            apply(programmatic, "programmatic")

        try:
            validated = AtlasSettings(**merged)
        except Exception as e:
            raise ValueError(f"Configuration validation failed: {e}") from e

        return ResolvedConfig(values=validated.to_dict(), origin=origin)
