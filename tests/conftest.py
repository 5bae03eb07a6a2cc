"""
Global test configuration.
"""

from collections.abc import Generator
from contextlib import contextmanager
import logging
import os
from pathlib import Path
from unittest.mock import patch

import pytest

from holiday_atlas.config import FrozenConfig

_ISOLATED_PREFIXES = ("HOLIDAY_ATLAS_", "CALENDARIFIC_")


# --- Environment Isolation (Autouse) ---
@pytest.fixture(autouse=True)
def isolate_atlas_env(request, monkeypatch):
    """Ensure a clean HOLIDAY_ATLAS_* / CALENDARIFIC_* environment per test.

    Escape hatch: @pytest.mark.allow_env_pollution keeps the current env.
    """
    if request.node.get_closest_marker("allow_env_pollution"):
        return
    for key in list(os.environ):
        if key.startswith(_ISOLATED_PREFIXES):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.delenv("DEBUG", raising=False)


@pytest.fixture(autouse=True)
def neutral_home_config(request, monkeypatch, tmp_path):
    """Point the home config file at an isolated temp path.

    Prevents reading a developer's real ~/.config/holiday_atlas.toml.
    """
    if request.node.get_closest_marker("allow_real_home_config"):
        return
    fake_home = tmp_path / "home_config_isolated" / "holiday_atlas.toml"
    fake_home.parent.mkdir(parents=True, exist_ok=True)
    monkeypatch.setenv("HOLIDAY_ATLAS_CONFIG_HOME", str(fake_home))


@pytest.fixture
def isolated_config_sources(tmp_path):
    """Set up project/home TOML files and env vars for config resolution tests.

    Yields the project root to pass as ``project_root``.
    """

    @contextmanager
    def _setup(
        *,
        pyproject_content: str = "",
        home_content: str = "",
        env_vars: dict[str, str] | None = None,
    ) -> Generator[Path]:
        project_dir = tmp_path / "project"
        project_dir.mkdir(exist_ok=True)
        home_file = tmp_path / "home" / "holiday_atlas.toml"
        home_file.parent.mkdir(exist_ok=True)
        if pyproject_content:
            (project_dir / "pyproject.toml").write_text(pyproject_content)
        if home_content:
            home_file.write_text(home_content)

        clean_env = {
            k: v for k, v in os.environ.items() if not k.startswith(_ISOLATED_PREFIXES)
        }
        clean_env.update(env_vars or {})
        clean_env["HOLIDAY_ATLAS_CONFIG_HOME"] = str(home_file)
        with patch.dict(os.environ, clean_env, clear=True):
            yield project_dir

    return _setup


# --- Logging Fixtures ---
@pytest.fixture(scope="session", autouse=True)
def quiet_noisy_libraries():
    """Sets the log level for noisy external libraries to WARNING."""
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


# --- Test Environment Markers ---
def pytest_configure(config):
    """Configure custom markers for test organization."""
    markers = [
        "unit: Fast, isolated unit tests",
        "integration: Component integration tests with mocked HTTP",
        "slow: Tests that take >1 second",
        "allow_env_pollution: Keep the ambient environment",
        "allow_real_home_config: Read the real home config file",
    ]
    for marker in markers:
        config.addinivalue_line("markers", marker)


# --- Core Fixtures ---


@pytest.fixture
def mock_api_key():
    """Provide a consistent, fake Calendarific key for tests."""
    return "test_calendarific_key_12345"


@pytest.fixture
def frozen_config(tmp_path, mock_api_key) -> FrozenConfig:
    """A fast configuration pointing at a temp data directory."""
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    return FrozenConfig(
        calendarific_api_key=mock_api_key,
        calendarific_base_url="https://calendarific.test/api/v2",
        nager_base_url="https://nager.test",
        world_geojson_url="https://cdn.test/world.geojson",
        data_dir=data_dir,
        totals_concurrency=3,
        today_concurrency=4,
        per_item_timeout_ms=500,
        overall_timeout_ms=2000,
        cache_ttl_seconds=3600,
        today_ttl_seconds=900,
        top_days_limit=20,
    )
