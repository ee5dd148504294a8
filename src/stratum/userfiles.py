"""Read-modify-write helpers for user config files.

Used by the ``stratum`` CLI. The manager never writes to the config
directory; edits made here reach a running manager through the reload
dispatcher like any other file change.

Files:
    <config_dir>/preferences.toml   global user settings
    <config_dir>/<syntax>.toml      per-syntax user settings
"""

from __future__ import annotations

import pathlib
import tomllib
from typing import Any

import tomli_w

from stratum.manager import CONFIG_EXTENSION
from stratum.snapshot import field_type
from stratum.tables import Table, load_table, normalize_value


def config_path(config_dir: pathlib.Path, name: str) -> pathlib.Path:
    """Return the file holding the user config called *name*."""
    return config_dir / f"{name}{CONFIG_EXTENSION}"


# ---------------------------------------------------------------------------
# TOML I/O
# ---------------------------------------------------------------------------

def load_user_table(path: pathlib.Path) -> Table:
    """Load *path*, or an empty table if it does not exist.

    Malformed files raise :class:`~stratum.errors.ConfigParseError`
    rather than being silently overwritten.
    """
    if not path.exists():
        return {}
    return load_table(path)


def _write_toml(path: pathlib.Path, data: Table) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(tomli_w.dumps(data).encode())


# ---------------------------------------------------------------------------
# Type coercion
# ---------------------------------------------------------------------------

def coerce(value: str, key: str) -> Any:
    """Coerce a CLI string for *key*.

    Known snapshot fields are coerced to their declared type. Anything
    else is read as a TOML literal, falling back to the raw string.
    """
    target = field_type(key)
    if target is bool:
        return value.lower() in ("true", "1", "yes")
    if target is int:
        number = int(value)
        if number < 0:
            raise ValueError(f"{key} must be a non-negative integer, got {number}")
        return number
    if target is str:
        return value
    if target is list and "[" not in value:
        return [p for p in value.split(",") if p]
    try:
        return normalize_value(tomllib.loads(f"v = {value}")["v"])
    except tomllib.TOMLDecodeError:
        return value


# ---------------------------------------------------------------------------
# Core API
# ---------------------------------------------------------------------------

def set_value(config_dir: pathlib.Path, name: str, key: str, value: Any) -> pathlib.Path:
    """Write *key* = *value* into the user config called *name*."""
    path = config_path(config_dir, name)
    data = load_user_table(path)
    data[key] = normalize_value(value)
    _write_toml(path, data)
    return path


def reset_value(config_dir: pathlib.Path, name: str, key: str) -> bool:
    """Remove *key* from the user config called *name*.

    Returns whether the key was present.
    """
    path = config_path(config_dir, name)
    data = load_user_table(path)
    if key not in data:
        return False
    del data[key]
    _write_toml(path, data)
    return True
