"""Environment variable configuration loading.

Reads ``HOLIDAY_ATLAS_*`` variables plus the provider-style Calendarific key
names, optionally after loading a ``.env`` file with python-dotenv.
"""

import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from .schema import AtlasSettings

# Field -> environment variables, first match wins.
ENV_VARS: dict[str, tuple[str, ...]] = {
    "calendarific_api_key": (
        "HOLIDAY_ATLAS_CALENDARIFIC_API_KEY",
        "CALENDARIFIC_API_KEY",
        "CALENDARIFIC_KEY",
    ),
    **{
        name: (f"HOLIDAY_ATLAS_{name.upper()}",)
        for name in AtlasSettings.model_fields
        if name != "calendarific_api_key"
    },
}


class EnvironmentConfigLoader:
    """Loads configuration fields that are actually set in the environment."""

    def load_env_config(self, env_file: str | Path | None = None) -> dict[str, Any]:
        """Return the fields present in the environment, validated.

        Args:
            env_file: Optional ``.env`` file loaded first. Existing variables
                are not overridden.

        Raises:
            FileNotFoundError: If `env_file` does not exist.
            ValueError: If a variable holds an invalid value.
        """
        if env_file:
            path = Path(env_file)
            if not path.exists():
                raise FileNotFoundError(f"Environment file not found: {path}")
            load_dotenv(path, override=False)

        raw: dict[str, str] = {}
        used: dict[str, str] = {}
        for field, names in ENV_VARS.items():
            for name in names:
                if name in os.environ:
                    raw[field] = os.environ[name]
                    used[field] = name
                    break

        if not raw:
            return {}

        # Coerce each value on its own; cross-field rules run once all sources
        # are merged by the resolver.
        result: dict[str, Any] = {}
        for field, value in raw.items():
            annotation = AtlasSettings.model_fields[field].annotation
            try:
                result[field] = TypeAdapter(annotation).validate_python(value)
            except PydanticValidationError as e:
                name = used[field]
                shown = name if field == "calendarific_api_key" else f"{name}={value}"
                raise ValueError(
                    f"Invalid environment variable value: {shown}. Error: {e}"
                ) from e
        return result
