"""Layered config resolution.

Settings cascade, lowest to highest precedence::

    global defaults  <  global user (preferences.toml)
        <  syntax defaults  <  syntax user (<syntax>.toml)
        <  session internal overrides  <  session user overrides

Each of the three levels is a :class:`~stratum.layers.LayerPair`. Note
that a syntax pair as a whole outranks the global pair, so a syntax
*default* beats a *user* value set in preferences.toml.

The manager does no locking. Callers serialize every call (reads
included) onto one logical thread of control.
"""

from __future__ import annotations

import logging
import pathlib
import sys
from typing import TYPE_CHECKING, Any

import stratum.defaults
from stratum.errors import ConfigParseError
from stratum.layers import LayerPair
from stratum.paths import get_extras_dir
from stratum.snapshot import Config
from stratum.syntax import Syntax
from stratum.tables import Table, load_table, overlay

if TYPE_CHECKING:
    from collections.abc import Callable, Hashable, Mapping

logger = logging.getLogger("stratum.manager")

CONFIG_EXTENSION = ".toml"
PREFERENCES_NAME = "preferences"
PREFERENCES_FILE = PREFERENCES_NAME + CONFIG_EXTENSION


class ConfigManager:
    """Owns every config layer and resolves snapshots from them."""

    def __init__(
        self,
        *,
        extras_dir: str | pathlib.Path | None = None,
        resolve_category: Callable[[str], Syntax | None] = Syntax.from_name,
        platform: str = sys.platform,
    ) -> None:
        self._defaults = LayerPair(stratum.defaults.platform_defaults(platform))
        self._syntax_specific: dict[Syntax, LayerPair] = {
            syntax: LayerPair(table)
            for syntax, table in stratum.defaults.syntax_defaults().items()
        }
        self._overrides: dict[Hashable, LayerPair] = {}
        self._config_dir: pathlib.Path | None = None
        self._extras_dir = pathlib.Path(extras_dir) if extras_dir is not None else None
        self._resolve_category = resolve_category

    @classmethod
    def from_environ(
        cls,
        environ: Mapping[str, str] | None = None,
        **kwargs: Any,
    ) -> ConfigManager:
        """Build a manager whose extras dir comes from ``STRATUM_SYS_PLUGIN_PATH``."""
        return cls(extras_dir=get_extras_dir(environ), **kwargs)

    @property
    def config_dir(self) -> pathlib.Path | None:
        return self._config_dir

    @property
    def extras_dir(self) -> pathlib.Path | None:
        return self._extras_dir

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def set_config_dir(self, path: str | pathlib.Path) -> None:
        """Point the manager at *path* and load the user configs found there.

        A missing or malformed ``preferences.toml`` yields an empty global
        user layer. Malformed or unrecognised syntax files are logged and
        skipped; the rest still load.
        """
        config_dir = pathlib.Path(path)
        user_config = _load_preferences(config_dir / PREFERENCES_FILE)
        syntax_specific = load_syntax_configs(config_dir, self._resolve_category)
        self._config_dir = config_dir
        self.set_user_configs(user_config, syntax_specific)

    def set_extras_dir(self, path: str | pathlib.Path) -> None:
        self._extras_dir = pathlib.Path(path)

    def set_user_configs(
        self,
        defaults: Mapping[str, Any] | None = None,
        syntax: Mapping[Syntax, Mapping[str, Any]] | None = None,
    ) -> None:
        """Bulk-replace user layers with already parsed tables."""
        if syntax is not None:
            for syn, table in syntax.items():
                self.set_user_syntax(syn, table)
        if defaults is not None:
            self._defaults.set_user(defaults)

    def set_user_syntax(self, syntax: Syntax, table: Mapping[str, Any]) -> None:
        pair = self._syntax_specific.get(syntax)
        if pair is None:
            self._syntax_specific[syntax] = LayerPair(None, table)
        else:
            pair.set_user(table)

    def update_config(self, name: str, table: Mapping[str, Any]) -> bool:
        """Replace the user layer of the config called *name*.

        ``preferences`` targets the global layer; any other name must be a
        known syntax. Unknown names are logged and change nothing.
        Returns whether a layer was replaced.
        """
        if name == PREFERENCES_NAME:
            self._defaults.set_user(table)
            logger.info("Reloaded global preferences")
            return True
        syntax = self._resolve_category(name)
        if syntax is None:
            logger.warning("Unknown config name %r", name)
            return False
        self.set_user_syntax(syntax, table)
        logger.info("Reloaded %s config", syntax)
        return True

    # ------------------------------------------------------------------
    # Session overrides
    # ------------------------------------------------------------------

    def set_override(
        self,
        key: str,
        value: Any,
        session: Hashable,
        *,
        from_user: bool,
    ) -> None:
        """Set a per-session override.

        ``from_user=True`` marks an override requested by a client; it
        lands in the session's user layer and beats overrides computed
        internally (``from_user=False``, base layer).
        """
        pair = self._overrides.get(session)
        if pair is None:
            pair = self._overrides[session] = LayerPair()
        pair.set_single(key, value, from_user=from_user)

    def remove_session(self, session: Hashable) -> None:
        """Forget the overrides of a session that has ended."""
        self._overrides.pop(session, None)

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def resolved_table(
        self,
        syntax: Syntax | None = None,
        session: Hashable | None = None,
    ) -> Table:
        """Return the merged table for *(syntax, session)*, undecoded."""
        syntax_pair = self._syntax_specific.get(syntax) if syntax is not None else None
        if syntax_pair is not None:
            settings = self._defaults.merged_with(syntax_pair)
        else:
            settings = overlay(self._defaults.cache)

        session_pair = self._overrides.get(session) if session is not None else None
        if session_pair is not None:
            settings = overlay(settings, session_pair.cache)
        return settings

    def resolve(
        self,
        syntax: Syntax | None = None,
        session: Hashable | None = None,
    ) -> Config:
        """Generate a snapshot of the current configuration.

        Relative plugin search path entries are joined onto the config
        directory, and the extras dir (if any) is always appended last,
        even if already present.

        Raises:
            ResolveError: when the merged table does not decode.
        """
        config = Config.from_table(self.resolved_table(syntax, session))
        if self._config_dir is not None:
            config.plugin_search_path = [
                self._config_dir / p for p in config.plugin_search_path
            ]
        if self._extras_dir is not None:
            config.plugin_search_path.append(self._extras_dir)
        return config


def _load_preferences(path: pathlib.Path) -> Table:
    try:
        return load_table(path)
    except FileNotFoundError:
        logger.debug("No preferences at %s", path)
    except ConfigParseError as exc:
        logger.warning("Error parsing config: %s", exc)
    except OSError as exc:
        logger.warning("Error reading config %s: %s", path, exc)
    return {}


def load_syntax_configs(
    config_dir: pathlib.Path,
    resolve_category: Callable[[str], Syntax | None] = Syntax.from_name,
) -> dict[Syntax, Table]:
    """Load every syntax-specific config file in *config_dir*."""
    try:
        contents = sorted(config_dir.iterdir())
    except OSError:
        logger.debug("Config directory %s not readable", config_dir)
        return {}

    result: dict[Syntax, Table] = {}
    for config_path in contents:
        if config_path.suffix != CONFIG_EXTENSION or config_path.name == PREFERENCES_FILE:
            continue
        if not config_path.is_file():
            continue

        syntax = resolve_category(config_path.stem)
        if syntax is None:
            logger.warning("Unrecognized syntax name: %r", config_path.stem)
            continue
        try:
            result[syntax] = load_table(config_path)
        except ConfigParseError as exc:
            logger.warning("Error parsing config: %s", exc)
        except OSError as exc:
            logger.warning("Error reading config %s: %s", config_path, exc)
    return result
