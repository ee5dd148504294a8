"""Reload user configs in response to filesystem events.

Only Created and Modified events for ``*.toml`` files act. The file stem
names the config: ``preferences`` is the global user layer, anything
else is looked up as a syntax. A file that fails to read or parse leaves
the previous layer untouched.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from stratum.errors import ConfigParseError
from stratum.events import EventKind, FsEvent
from stratum.manager import CONFIG_EXTENSION
from stratum.tables import load_table

if TYPE_CHECKING:
    from collections.abc import Iterable

    from stratum.manager import ConfigManager

logger = logging.getLogger("stratum.reload")

_RELOAD_KINDS = frozenset({EventKind.CREATED, EventKind.MODIFIED})


class ReloadDispatcher:
    """Translate :class:`FsEvent`s into user-layer replacements.

    Events must be handed over one at a time, in the order they were
    observed, under the same serialization as every other manager call.
    """

    def __init__(
        self,
        manager: ConfigManager,
        *,
        extension: str = CONFIG_EXTENSION,
    ) -> None:
        self.manager = manager
        self.extension = extension

    def handle(self, event: FsEvent) -> bool:
        """Apply one event. Returns whether a config layer was replaced."""
        if event.kind not in _RELOAD_KINDS or event.path is None:
            logger.debug("Ignoring config fs event: %s", event)
            return False

        path = event.path
        if path.suffix != self.extension:
            return False

        try:
            table = load_table(path)
        except ConfigParseError as exc:
            logger.warning("Error parsing config at %s: %s", path, exc)
            return False
        except OSError as exc:
            logger.warning("Error reading config at %s: %s", path, exc)
            return False

        return self.manager.update_config(path.stem, table)

    def handle_all(self, events: Iterable[FsEvent]) -> int:
        """Apply *events* in order; return how many replaced a layer."""
        return sum(1 for event in events if self.handle(event))
