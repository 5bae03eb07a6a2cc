"""Configuration for holiday-atlas.

Resolve once, freeze, then pass the `FrozenConfig` to `HolidayAtlas`:

    from holiday_atlas.config import resolve_config

    config = resolve_config().to_frozen()
"""

from .api import print_config_audit, resolve_config
from .file_loader import ConfigFileError, FileConfigLoader
from .resolver import ConfigResolver
from .schema import AtlasSettings
from .types import ConfigOrigin, FrozenConfig, ResolvedConfig, SourceMap

__all__ = [
    "AtlasSettings",
    "ConfigFileError",
    "ConfigOrigin",
    "ConfigResolver",
    "FileConfigLoader",
    "FrozenConfig",
    "ResolvedConfig",
    "SourceMap",
    "print_config_audit",
    "resolve_config",
]
