"""Exception taxonomy for stratum.

Parse failures and unknown config names are recovered locally (logged,
then ignored) by the manager and the reload dispatcher. Decode failures
and an undeterminable config directory are raised to the caller.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import pathlib


class ConfigError(Exception):
    """Base class for every error raised by stratum."""


class ConfigParseError(ConfigError):
    """A config file (or embedded default) is not valid TOML."""

    def __init__(self, message: str, path: pathlib.Path | None = None) -> None:
        self.path = path
        if path is not None:
            message = f"{path}: {message}"
        super().__init__(message)


class ConfigValueError(ConfigError):
    """A value cannot be represented in a config table."""


class ResolveError(ConfigError):
    """A merged table could not be decoded into a :class:`~stratum.snapshot.Config`."""


class TypeMismatchError(ResolveError):
    def __init__(self, field: str, expected: str, found: str) -> None:
        self.field = field
        self.expected = expected
        self.found = found
        super().__init__(
            f"invalid type for {field!r}: expected {expected}, found {found}"
        )


class MissingFieldError(ResolveError):
    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"missing field {field!r}")


class ConfigDirError(ConfigError):
    """No source is available to locate the configuration directory."""
