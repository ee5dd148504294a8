"""The resolved, strongly-typed view of a merged config table."""

from __future__ import annotations

import dataclasses
import pathlib
from typing import TYPE_CHECKING, Any

from stratum.errors import MissingFieldError, TypeMismatchError
from stratum.tables import type_name

if TYPE_CHECKING:
    from collections.abc import Mapping


@dataclasses.dataclass
class Config:
    """A container for all user-modifiable settings.

    Produced fresh by :meth:`stratum.manager.ConfigManager.resolve`;
    never cached across layer changes.
    """

    newline: str
    tab_size: int
    translate_tabs_to_spaces: bool
    plugin_search_path: list[pathlib.Path]

    @classmethod
    def from_table(cls, table: Mapping[str, Any]) -> Config:
        """Decode a fully merged table.

        Keys that are not fields are ignored. A missing field raises
        :class:`MissingFieldError`; a value of the wrong type raises
        :class:`TypeMismatchError`.
        """
        newline = _require(table, "newline")
        if not isinstance(newline, str):
            raise TypeMismatchError("newline", "string", type_name(newline))

        tab_size = _require(table, "tab_size")
        if isinstance(tab_size, bool) or not isinstance(tab_size, int):
            raise TypeMismatchError("tab_size", "integer", type_name(tab_size))
        if tab_size < 0:
            raise TypeMismatchError("tab_size", "unsigned integer", str(tab_size))

        translate = _require(table, "translate_tabs_to_spaces")
        if not isinstance(translate, bool):
            raise TypeMismatchError(
                "translate_tabs_to_spaces", "boolean", type_name(translate)
            )

        paths = _require(table, "plugin_search_path")
        if not isinstance(paths, list):
            raise TypeMismatchError("plugin_search_path", "array", type_name(paths))
        for entry in paths:
            if not isinstance(entry, str):
                raise TypeMismatchError(
                    "plugin_search_path", "array of strings",
                    f"array containing {type_name(entry)}",
                )

        return cls(
            newline=newline,
            tab_size=tab_size,
            translate_tabs_to_spaces=translate,
            plugin_search_path=[pathlib.Path(p) for p in paths],
        )

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON/TOML-friendly dict."""
        return {
            "newline": self.newline,
            "tab_size": self.tab_size,
            "translate_tabs_to_spaces": self.translate_tabs_to_spaces,
            "plugin_search_path": [str(p) for p in self.plugin_search_path],
        }


def field_type(name: str) -> type | None:
    """Return the scalar type of snapshot field *name*, or None if unknown."""
    return _FIELD_TYPES.get(name)


_FIELD_TYPES: dict[str, type] = {
    "newline": str,
    "tab_size": int,
    "translate_tabs_to_spaces": bool,
    "plugin_search_path": list,
}


def _require(table: Mapping[str, Any], field: str) -> Any:
    try:
        return table[field]
    except KeyError:
        raise MissingFieldError(field) from None
