"""Config values, tables, and the one merge rule they share.

A table maps string keys to values; a value is a string, integer,
float, boolean, list of values, or nested table. Tables come from TOML
text or are built in code for single-key overrides. Everything that
enters a layer passes through :func:`normalize_table`, so layers never
share mutable containers with their callers.

Merging is always a *top-level* overlay: a key present in a later table
replaces the earlier value wholesale, including table-valued keys.
"""

from __future__ import annotations

import copy
import datetime
import tomllib
from typing import TYPE_CHECKING, Any, Union

from stratum.errors import ConfigParseError, ConfigValueError

if TYPE_CHECKING:
    import pathlib
    from collections.abc import Mapping

Value = Union[str, int, float, bool, list["Value"], dict[str, "Value"]]
Table = dict[str, Value]

_TOML_DATES = (datetime.datetime, datetime.date, datetime.time)


def type_name(value: Any) -> str:
    """Return the config-level type name of *value* (for diagnostics)."""
    # bool first: it is a subclass of int
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, float):
        return "float"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, dict):
        return "table"
    return type(value).__name__


def normalize_value(value: Any) -> Value:
    """Return a fresh copy of *value* restricted to the config value model.

    TOML dates and times become ISO-8601 strings and tuples become lists.
    Anything else outside the model raises :class:`ConfigValueError`.
    """
    if isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, _TOML_DATES):
        return value.isoformat()
    if isinstance(value, (list, tuple)):
        return [normalize_value(v) for v in value]
    if isinstance(value, dict):
        return normalize_table(value)
    raise ConfigValueError(f"unsupported config value {value!r} ({type_name(value)})")


def normalize_table(table: Mapping[str, Any]) -> Table:
    result: Table = {}
    for key, value in table.items():
        if not isinstance(key, str):
            raise ConfigValueError(f"config keys must be strings, got {key!r}")
        result[key] = normalize_value(value)
    return result


def overlay(*tables: Mapping[str, Value] | None) -> Table:
    """Merge *tables* left to right; later tables win per top-level key.

    ``None`` entries are skipped, so an absent layer contributes nothing.
    Values are deep-copied: the result shares no containers with the inputs.
    """
    result: Table = {}
    for table in tables:
        if table:
            result.update(copy.deepcopy(dict(table)))
    return result


def parse_table(data: bytes | str, path: pathlib.Path | None = None) -> Table:
    """Parse TOML *data* into a normalised table.

    Raises :class:`ConfigParseError` for invalid UTF-8 or invalid TOML.
    *path* only feeds the error message.
    """
    if isinstance(data, bytes):
        try:
            data = data.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ConfigParseError(f"not valid UTF-8 ({exc})", path) from exc
    try:
        return normalize_table(tomllib.loads(data))
    except tomllib.TOMLDecodeError as exc:
        raise ConfigParseError(str(exc), path) from exc


def load_table(path: pathlib.Path) -> Table:
    """Read and parse the TOML file at *path*.

    ``OSError`` (missing file, permissions) propagates unchanged so that
    callers can tell "absent" apart from "malformed".
    """
    return parse_table(path.read_bytes(), path)
