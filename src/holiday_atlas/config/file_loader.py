"""TOML configuration files with profile support.

Two locations are read: ``[tool.holiday_atlas]`` in the nearest
``pyproject.toml`` and the home file ``~/.config/holiday_atlas.toml`` (the
path can be overridden with ``HOLIDAY_ATLAS_CONFIG_HOME``). Either may define
named profiles under ``profiles.<name>``.
"""

import os
from pathlib import Path
import tomllib
from typing import Any

TOOL_SECTION = "holiday_atlas"
HOME_ENV_VAR = "HOLIDAY_ATLAS_CONFIG_HOME"


class ConfigFileError(Exception):
    """Raised when a configuration file cannot be loaded."""

    def __init__(
        self, file_path: Path, message: str, cause: Exception | None = None
    ) -> None:
        self.file_path = file_path
        self.message = message
        self.cause = cause
        super().__init__(f"Config file error in {file_path}: {message}")


def _select_profile(
    section: dict[str, Any], profile: str | None, path: Path
) -> dict[str, Any]:
    if profile:
        profiles = section.get("profiles", {})
        if profile not in profiles:
            raise ConfigFileError(
                path,
                f"Profile '{profile}' not found. Available profiles: {list(profiles)}",
            )
        return dict(profiles[profile])
    config = dict(section)
    config.pop("profiles", None)
    return config


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        with path.open(mode="rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigFileError(path, f"Failed to parse TOML: {e}", cause=e) from e


class FileConfigLoader:
    """Loads configuration from the project and home TOML files."""

    def load_project_config(
        self, project_root: Path | None = None, profile: str | None = None
    ) -> dict[str, Any]:
        """Return the ``[tool.holiday_atlas]`` section (or one of its profiles).

        Empty when no pyproject.toml is found or it has no such section.
        """
        path = self._find_pyproject_toml(project_root)
        if path is None:
            return {}
        section = _read_toml(path).get("tool", {}).get(TOOL_SECTION, {})
        if not section:
            return {}
        return _select_profile(section, profile, path)

    def load_home_config(self, profile: str | None = None) -> dict[str, Any]:
        path = self.home_config_path()
        if not path.exists():
            return {}
        return _select_profile(_read_toml(path), profile, path)

    def home_config_path(self) -> Path:
        override = os.getenv(HOME_ENV_VAR)
        if override:
            return Path(override)
        return Path.home() / ".config" / "holiday_atlas.toml"

    def _find_pyproject_toml(self, start_dir: Path | None = None) -> Path | None:
        current = Path(start_dir or Path.cwd()).resolve()
        while True:
            candidate = current / "pyproject.toml"
            if candidate.exists():
                return candidate
            if current == current.parent:
                return None
            current = current.parent
