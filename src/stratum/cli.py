"""Command line interface for stratum.

Usage:
    stratum dir                               Print the active config directory
    stratum show [--syntax S] [--json]        Dump the resolved config
    stratum get [--syntax S] <key>            Print one effective value
    stratum set [--syntax S] <key> <value>    Write a user config value
    stratum reset [--syntax S] <key>          Remove a user config value
    stratum watch [--syntax S]                Re-resolve on every config change

Every command accepts ``--config-dir`` (default: resolved from the
environment). ``show``, ``get`` and ``watch`` also take ``--extras-dir``
(default: $STRATUM_SYS_PLUGIN_PATH).
"""

from __future__ import annotations

import argparse
import json
import logging
import pathlib
import sys

from stratum import userfiles
from stratum.errors import ConfigError, ResolveError
from stratum.manager import PREFERENCES_NAME, ConfigManager
from stratum.paths import get_config_dir
from stratum.reload import ReloadDispatcher
from stratum.snapshot import field_type
from stratum.syntax import Syntax

logger = logging.getLogger("stratum.cli")


def _parse_syntax(name: str | None) -> Syntax | None:
    if name is None:
        return None
    syntax = Syntax.from_name(name)
    if syntax is None:
        known = ", ".join(s.value for s in Syntax)
        raise ValueError(f"Unknown syntax {name!r} (known: {known})")
    return syntax


def _build_manager(
    config_dir: pathlib.Path,
    extras_dir: pathlib.Path | None = None,
) -> ConfigManager:
    manager = ConfigManager.from_environ()
    if extras_dir is not None:
        manager.set_extras_dir(extras_dir)
    manager.set_config_dir(config_dir)
    return manager


def _print_config(manager: ConfigManager, syntax: Syntax | None, *, as_json: bool) -> None:
    config = manager.resolve(syntax)
    if as_json:
        print(json.dumps(config.to_dict(), indent=2))
        return
    label = syntax.value if syntax is not None else "global"
    print(f"[{label}]")
    for key, value in config.to_dict().items():
        print(f"  {key} = {value!r}")


def cmd_dir(config_dir: pathlib.Path) -> int:
    print(config_dir)
    return 0


def cmd_show(
    config_dir: pathlib.Path,
    *,
    syntax: str | None = None,
    as_json: bool = False,
    extras_dir: pathlib.Path | None = None,
) -> int:
    """Dump the resolved config for an optional syntax."""
    try:
        syn = _parse_syntax(syntax)
        manager = _build_manager(config_dir, extras_dir)
        _print_config(manager, syn, as_json=as_json)
    except (ValueError, ResolveError) as exc:
        print(str(exc), file=sys.stderr)
        return 1
    return 0


def cmd_get(
    config_dir: pathlib.Path,
    key: str,
    *,
    syntax: str | None = None,
    extras_dir: pathlib.Path | None = None,
) -> int:
    """Print the effective value for *key*.

    Snapshot fields are read from the resolved config, so plugin paths
    include the config directory and the extras dir.
    """
    try:
        syn = _parse_syntax(syntax)
        manager = _build_manager(config_dir, extras_dir)
        if field_type(key) is not None:
            table = manager.resolve(syn).to_dict()
        else:
            table = manager.resolved_table(syn)
    except (ValueError, ResolveError) as exc:
        print(str(exc), file=sys.stderr)
        return 1
    if key not in table:
        print(f"Unknown key: {key}", file=sys.stderr)
        return 1
    print(table[key])
    return 0


def cmd_set(
    config_dir: pathlib.Path,
    key: str,
    value: str,
    *,
    syntax: str | None = None,
) -> int:
    """Set a user config value in the TOML file."""
    try:
        syn = _parse_syntax(syntax)
        coerced = userfiles.coerce(value, key)
        name = syn.value if syn is not None else PREFERENCES_NAME
        path = userfiles.set_value(config_dir, name, key, coerced)
    except (ValueError, ConfigError) as exc:
        print(str(exc), file=sys.stderr)
        return 1
    print(f"Set {key} = {coerced!r} ({path})")
    return 0


def cmd_reset(
    config_dir: pathlib.Path,
    key: str,
    *,
    syntax: str | None = None,
) -> int:
    """Remove a user config value."""
    try:
        syn = _parse_syntax(syntax)
        name = syn.value if syn is not None else PREFERENCES_NAME
        removed = userfiles.reset_value(config_dir, name, key)
    except (ValueError, ConfigError) as exc:
        print(str(exc), file=sys.stderr)
        return 1
    if removed:
        print(f"Reset {key} ({name})")
    else:
        print(f"{key} was not set ({name})")
    return 0


def cmd_watch(
    config_dir: pathlib.Path,
    *,
    syntax: str | None = None,
    extras_dir: pathlib.Path | None = None,
    interval: float = 1.0,
) -> int:
    """Print the resolved config, then again after every reload."""
    from stratum.watcher import ConfigWatcher

    try:
        syn = _parse_syntax(syntax)
    except ValueError as exc:
        print(str(exc), file=sys.stderr)
        return 1

    manager = _build_manager(config_dir, extras_dir)
    _print_config(manager, syn, as_json=False)
    config_dir.mkdir(parents=True, exist_ok=True)

    with ConfigWatcher(ReloadDispatcher(manager)) as watcher:
        watcher.start(config_dir)
        print("Press Ctrl+C to stop.")
        try:
            while True:
                if watcher.poll(timeout=interval):
                    try:
                        _print_config(manager, syn, as_json=False)
                    except ResolveError as exc:
                        logger.error("Config no longer resolves: %s", exc)
        except KeyboardInterrupt:
            print("\nWatcher stopped.")
    return 0


def _add_common_args(
    parser: argparse.ArgumentParser,
    *,
    syntax: bool = True,
    extras: bool = True,
) -> None:
    parser.add_argument(
        "--config-dir",
        type=pathlib.Path,
        default=None,
        help="Config directory (default: resolved from the environment)",
    )
    if extras:
        parser.add_argument(
            "--extras-dir",
            type=pathlib.Path,
            default=None,
            help="Extra plugin directory appended to the search path",
        )
    if syntax:
        parser.add_argument("--syntax", default=None, help="Syntax name, e.g. yaml")


def main(argv: list[str] | None = None) -> int:
    """Entry point for ``stratum``."""
    parser = argparse.ArgumentParser(
        prog="stratum",
        description="Layered editor configuration.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="subcmd")

    p_dir = sub.add_parser("dir", help="Print the active config directory")
    _add_common_args(p_dir, syntax=False, extras=False)

    p_show = sub.add_parser("show", help="Dump the resolved config")
    _add_common_args(p_show)
    p_show.add_argument("--json", dest="as_json", action="store_true")

    p_get = sub.add_parser("get", help="Print one effective value")
    _add_common_args(p_get)
    p_get.add_argument("key")

    p_set = sub.add_parser("set", help="Write a user config value")
    _add_common_args(p_set, extras=False)
    p_set.add_argument("key")
    p_set.add_argument("value")

    p_reset = sub.add_parser("reset", help="Remove a user config value")
    _add_common_args(p_reset, extras=False)
    p_reset.add_argument("key")

    p_watch = sub.add_parser("watch", help="Re-resolve on every config change")
    _add_common_args(p_watch)
    p_watch.add_argument(
        "--interval",
        type=float,
        default=1.0,
        help="Seconds to wait for events per poll (default: 1.0)",
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.subcmd is None:
        parser.print_help()
        return 1

    config_dir = args.config_dir
    if config_dir is None:
        try:
            config_dir = get_config_dir()
        except ConfigError as exc:
            print(str(exc), file=sys.stderr)
            return 1

    if args.subcmd == "dir":
        return cmd_dir(config_dir)
    elif args.subcmd == "show":
        return cmd_show(
            config_dir, syntax=args.syntax, as_json=args.as_json,
            extras_dir=args.extras_dir,
        )
    elif args.subcmd == "get":
        return cmd_get(
            config_dir, args.key, syntax=args.syntax, extras_dir=args.extras_dir
        )
    elif args.subcmd == "set":
        return cmd_set(config_dir, args.key, args.value, syntax=args.syntax)
    elif args.subcmd == "reset":
        return cmd_reset(config_dir, args.key, syntax=args.syntax)
    elif args.subcmd == "watch":
        return cmd_watch(
            config_dir, syntax=args.syntax, extras_dir=args.extras_dir,
            interval=args.interval,
        )
    else:
        parser.print_help()
        return 1
