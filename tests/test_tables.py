"""Tests for stratum.tables — value model, overlay, TOML parsing."""

from __future__ import annotations

import datetime
import pathlib

import pytest

from stratum.errors import ConfigParseError, ConfigValueError
from stratum.tables import (
    load_table,
    normalize_table,
    normalize_value,
    overlay,
    parse_table,
    type_name,
)


class TestNormalize:
    def test_scalars_pass_through(self) -> None:
        assert normalize_value("x") == "x"
        assert normalize_value(3) == 3
        assert normalize_value(1.5) == 1.5
        assert normalize_value(True) is True

    def test_containers_are_copied(self) -> None:
        inner = [1, 2]
        table = {"a": inner, "b": {"c": "d"}}
        result = normalize_table(table)
        assert result == table
        inner.append(3)
        table["b"]["c"] = "changed"
        assert result == {"a": [1, 2], "b": {"c": "d"}}

    def test_tuple_becomes_list(self) -> None:
        assert normalize_value(("a", "b")) == ["a", "b"]

    def test_dates_become_strings(self) -> None:
        assert normalize_value(datetime.date(2024, 1, 2)) == "2024-01-02"

    def test_none_rejected(self) -> None:
        with pytest.raises(ConfigValueError, match="unsupported"):
            normalize_value(None)

    def test_non_string_key_rejected(self) -> None:
        with pytest.raises(ConfigValueError, match="keys must be strings"):
            normalize_table({1: "x"})


class TestTypeName:
    def test_bool_is_not_integer(self) -> None:
        assert type_name(True) == "boolean"
        assert type_name(1) == "integer"

    def test_containers(self) -> None:
        assert type_name([]) == "array"
        assert type_name({}) == "table"


class TestOverlay:
    def test_later_tables_win(self) -> None:
        assert overlay({"a": 1, "b": 1}, {"b": 2}, {"c": 3}) == {
            "a": 1, "b": 2, "c": 3,
        }

    def test_none_contributes_nothing(self) -> None:
        assert overlay(None, {"a": 1}, None) == {"a": 1}
        assert overlay() == {}

    def test_table_values_replaced_not_merged(self) -> None:
        base = {"indent": {"width": 4, "style": "space"}}
        user = {"indent": {"width": 2}}
        assert overlay(base, user) == {"indent": {"width": 2}}

    def test_inputs_untouched(self) -> None:
        base = {"a": 1}
        overlay(base, {"a": 2})
        assert base == {"a": 1}


class TestParse:
    def test_parse_text(self) -> None:
        table = parse_table('tab_size = 4\nnewline = "\\n"\n')
        assert table == {"tab_size": 4, "newline": "\n"}

    def test_parse_bytes(self) -> None:
        assert parse_table(b"x = true") == {"x": True}

    def test_invalid_toml(self) -> None:
        with pytest.raises(ConfigParseError):
            parse_table("tab_size = = 4")

    def test_invalid_utf8(self) -> None:
        with pytest.raises(ConfigParseError, match="UTF-8"):
            parse_table(b"x = '\xff'")

    def test_error_mentions_path(self, tmp_path: pathlib.Path) -> None:
        path = tmp_path / "bad.toml"
        path.write_text("[[[")
        with pytest.raises(ConfigParseError) as info:
            load_table(path)
        assert info.value.path == path
        assert str(path) in str(info.value)

    def test_missing_file_raises_oserror(self, tmp_path: pathlib.Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_table(tmp_path / "missing.toml")
