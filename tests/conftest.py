"""Shared test fixtures for stratum tests."""

from __future__ import annotations

import pathlib

import pytest

import stratum.paths
from stratum.manager import ConfigManager


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's environment out of every test."""
    for var in (
        stratum.paths.CONFIG_DIR_VAR,
        stratum.paths.XDG_CONFIG_HOME_VAR,
        stratum.paths.SYS_PLUGIN_PATH_VAR,
    ):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def manager() -> ConfigManager:
    """A manager with embedded defaults only, using non-Windows defaults."""
    return ConfigManager(platform="linux")


@pytest.fixture
def config_dir(tmp_path: pathlib.Path) -> pathlib.Path:
    path = tmp_path / "config"
    path.mkdir()
    return path


@pytest.fixture
def write_config(config_dir: pathlib.Path):
    """Factory for writing ``<name>.toml`` into the config directory."""

    def _create(name: str, content: str) -> pathlib.Path:
        path = config_dir / f"{name}.toml"
        path.write_text(content)
        return path

    return _create
