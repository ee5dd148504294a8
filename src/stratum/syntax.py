"""Syntax definitions used as config categories."""

from __future__ import annotations

import enum


class Syntax(enum.Enum):
    PLAINTEXT = "plaintext"
    MARKDOWN = "markdown"
    PYTHON = "python"
    RUST = "rust"
    C = "c"
    GO = "go"
    DART = "dart"
    SWIFT = "swift"
    TOML = "toml"
    YAML = "yaml"
    JSON = "json"
    MAKEFILE = "makefile"

    @classmethod
    def from_name(cls, name: str) -> Syntax | None:
        """Look up a syntax by config name, case-insensitively.

        Returns ``None`` for names that are not a known syntax.
        """
        try:
            return cls(name.lower())
        except ValueError:
            return None
