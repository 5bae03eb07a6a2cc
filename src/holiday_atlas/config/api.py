"""Public entry points for configuration resolution."""

from pathlib import Path
from typing import Any

from .resolver import ConfigResolver
from .types import ResolvedConfig

_resolver = ConfigResolver()


def resolve_config(
    programmatic: dict[str, Any] | None = None,
    *,
    profile: str | None = None,
    use_env_file: str | Path | None = None,
    project_root: Path | None = None,
) -> ResolvedConfig:
    """Resolve configuration from all sources with proper precedence.

    Args:
        programmatic: Overrides with the highest precedence. Unknown fields
            are ignored.
        profile: Profile name from the TOML files. Defaults to
            ``HOLIDAY_ATLAS_PROFILE`` when unset.
        use_env_file: Optional ``.env`` file to load before reading the
            environment.
        project_root: Where to start searching for pyproject.toml.

    Returns:
        ResolvedConfig with merged values and source tracking. Call
        ``.to_frozen()`` for the immutable form used at runtime.

    Example:
        config = resolve_config({"today_concurrency": 4}).to_frozen()
    """
    return _resolver.resolve(
        programmatic,
        profile=profile,
        use_env_file=use_env_file,
        project_root=project_root,
    )


def print_config_audit(**kwargs: Any) -> None:
    """Print the redacted origin report for the effective configuration."""
    print(resolve_config(**kwargs).audit())  # noqa: T201
