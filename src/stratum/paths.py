"""Locating the configuration directory.

Precedence (highest to lowest):
1. ``STRATUM_CONFIG_DIR``, used verbatim
2. ``$XDG_CONFIG_HOME/stratum``
3. ``$HOME/.config/stratum``

Environment variables:
- STRATUM_CONFIG_DIR: explicit configuration directory
- XDG_CONFIG_HOME: XDG base directory for configuration
- HOME: home directory (required when neither of the above is set)
- STRATUM_SYS_PLUGIN_PATH: client-provided path to bundled plugins
"""

from __future__ import annotations

import os
import pathlib
from typing import TYPE_CHECKING

from stratum.errors import ConfigDirError

if TYPE_CHECKING:
    from collections.abc import Mapping

APP_DIR_NAME = "stratum"

CONFIG_DIR_VAR = "STRATUM_CONFIG_DIR"
XDG_CONFIG_HOME_VAR = "XDG_CONFIG_HOME"
HOME_VAR = "HOME"
SYS_PLUGIN_PATH_VAR = "STRATUM_SYS_PLUGIN_PATH"


def config_dir_impl(
    explicit: str | None,
    xdg_config_home: str | None,
    home: str | None,
) -> pathlib.Path:
    """Compute the config directory from explicit inputs.

    Environment values are passed in so this stays a pure function.
    Empty strings count as unset.

    Raises:
        ConfigDirError: when only the home branch applies and *home* is unset.
    """
    if explicit:
        return pathlib.Path(explicit)
    if xdg_config_home:
        return pathlib.Path(xdg_config_home) / APP_DIR_NAME
    if not home:
        raise ConfigDirError(
            f"cannot locate the config directory: set {CONFIG_DIR_VAR}, "
            f"{XDG_CONFIG_HOME_VAR} or {HOME_VAR}"
        )
    return pathlib.Path(home) / ".config" / APP_DIR_NAME


def get_config_dir(environ: Mapping[str, str] | None = None) -> pathlib.Path:
    """Return the active config directory for *environ* (default ``os.environ``)."""
    env = os.environ if environ is None else environ
    return config_dir_impl(
        env.get(CONFIG_DIR_VAR),
        env.get(XDG_CONFIG_HOME_VAR),
        env.get(HOME_VAR),
    )


def get_extras_dir(environ: Mapping[str, str] | None = None) -> pathlib.Path | None:
    """Return the client-provided bundled plugin path, if any."""
    env = os.environ if environ is None else environ
    value = env.get(SYS_PLUGIN_PATH_VAR)
    return pathlib.Path(value) if value else None
