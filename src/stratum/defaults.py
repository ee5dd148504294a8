"""Embedded default settings.

The TOML assets under ``stratum/assets`` are parsed once, on first
access, and treated as immutable afterwards. Callers receive fresh
copies so that no layer can mutate the cached originals.
"""

from __future__ import annotations

import functools
import importlib.resources
import sys

from stratum.syntax import Syntax
from stratum.tables import Table, normalize_table, overlay, parse_table

BASE = "defaults.toml"
WINDOWS = "windows.toml"

_SYNTAX_ASSETS = {
    Syntax.YAML: "yaml.toml",
    Syntax.MAKEFILE: "makefile.toml",
}


@functools.cache
def _load_asset(name: str) -> Table:
    data = (importlib.resources.files("stratum") / "assets" / name).read_bytes()
    # A broken asset is a packaging bug: let ConfigParseError propagate.
    return parse_table(data)


def platform_overrides(platform: str = sys.platform) -> Table | None:
    if platform == "win32":
        return normalize_table(_load_asset(WINDOWS))
    return None


def platform_defaults(platform: str = sys.platform) -> Table:
    """Return the global defaults, with platform-specific keys applied."""
    return overlay(normalize_table(_load_asset(BASE)), platform_overrides(platform))


def syntax_defaults() -> dict[Syntax, Table]:
    """Return the embedded per-syntax defaults."""
    return {
        syntax: normalize_table(_load_asset(name))
        for syntax, name in _SYNTAX_ASSETS.items()
    }
