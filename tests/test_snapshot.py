"""Tests for stratum.snapshot.Config decoding."""

from __future__ import annotations

import pathlib

import pytest

from stratum.errors import MissingFieldError, ResolveError, TypeMismatchError
from stratum.snapshot import Config, field_type


def _table(**overrides) -> dict:
    table = {
        "newline": "\n",
        "tab_size": 4,
        "translate_tabs_to_spaces": False,
        "plugin_search_path": ["plugins"],
    }
    table.update(overrides)
    return table


class TestFromTable:
    def test_decodes_fields(self) -> None:
        config = Config.from_table(_table())
        assert config.newline == "\n"
        assert config.tab_size == 4
        assert config.translate_tabs_to_spaces is False
        assert config.plugin_search_path == [pathlib.Path("plugins")]

    def test_ignores_unknown_keys(self) -> None:
        config = Config.from_table(_table(font_size=14))
        assert config.tab_size == 4

    def test_missing_field(self) -> None:
        table = _table()
        del table["tab_size"]
        with pytest.raises(MissingFieldError) as info:
            Config.from_table(table)
        assert info.value.field == "tab_size"

    def test_type_mismatch(self) -> None:
        with pytest.raises(TypeMismatchError) as info:
            Config.from_table(_table(tab_size="four"))
        assert info.value.field == "tab_size"
        assert info.value.expected == "integer"
        assert info.value.found == "string"

    def test_bool_is_not_tab_size(self) -> None:
        with pytest.raises(TypeMismatchError, match="tab_size"):
            Config.from_table(_table(tab_size=True))

    def test_negative_tab_size(self) -> None:
        with pytest.raises(TypeMismatchError, match="unsigned"):
            Config.from_table(_table(tab_size=-1))

    def test_integer_is_not_boolean(self) -> None:
        with pytest.raises(TypeMismatchError) as info:
            Config.from_table(_table(translate_tabs_to_spaces=1))
        assert info.value.found == "integer"

    def test_plugin_path_entries_must_be_strings(self) -> None:
        with pytest.raises(TypeMismatchError, match="plugin_search_path"):
            Config.from_table(_table(plugin_search_path=["ok", 3]))

    def test_plugin_path_must_be_array(self) -> None:
        with pytest.raises(TypeMismatchError, match="plugin_search_path"):
            Config.from_table(_table(plugin_search_path="plugins"))

    def test_errors_share_base_class(self) -> None:
        with pytest.raises(ResolveError):
            Config.from_table({})


class TestToDict:
    def test_paths_become_strings(self) -> None:
        config = Config.from_table(_table(plugin_search_path=["a", "/b"]))
        assert config.to_dict()["plugin_search_path"] == ["a", "/b"]


class TestFieldType:
    def test_known_and_unknown(self) -> None:
        assert field_type("tab_size") is int
        assert field_type("translate_tabs_to_spaces") is bool
        assert field_type("nope") is None
