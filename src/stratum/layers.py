"""A base layer masked by a user layer, with a cached merge."""

from __future__ import annotations

import copy
import types
from typing import TYPE_CHECKING, Any

from stratum.errors import ConfigValueError
from stratum.tables import Table, normalize_table, normalize_value, overlay

if TYPE_CHECKING:
    from collections.abc import Mapping


class LayerPair:
    """Default settings (``base``) masked by user settings (``user``).

    Either layer may be absent. ``cache`` always equals the top-level
    overlay of ``user`` onto ``base`` and is rebuilt eagerly on every
    mutation, so reads never see a stale merge.
    """

    def __init__(
        self,
        base: Mapping[str, Any] | None = None,
        user: Mapping[str, Any] | None = None,
    ) -> None:
        self._base: Table | None = normalize_table(base) if base is not None else None
        self._user: Table | None = normalize_table(user) if user is not None else None
        self._cache: Table = {}
        self.rebuild()

    def __repr__(self) -> str:
        return f"LayerPair(base={self._base!r}, user={self._user!r})"

    @property
    def base(self) -> Table | None:
        return copy.deepcopy(self._base) if self._base is not None else None

    @property
    def user(self) -> Table | None:
        return copy.deepcopy(self._user) if self._user is not None else None

    @property
    def cache(self) -> Mapping[str, Any]:
        """Read-only snapshot of the merged layers.

        Nested lists and tables are copies; changing them leaves the pair
        untouched.
        """
        return types.MappingProxyType(copy.deepcopy(self._cache))

    def rebuild(self) -> None:
        self._cache = overlay(self._base, self._user)

    def set_user(self, user: Mapping[str, Any]) -> None:
        """Replace the whole user layer.

        Keys previously added with :meth:`set_single` are discarded.
        """
        self._user = normalize_table(user)
        self.rebuild()

    def set_single(self, key: str, value: Any, *, from_user: bool) -> None:
        """Insert one key into the user layer (or the base layer).

        The target layer is created empty if it does not exist yet.
        """
        if not isinstance(key, str):
            raise ConfigValueError(f"config keys must be strings, got {key!r}")
        value = normalize_value(value)
        if from_user:
            if self._user is None:
                self._user = {}
            self._user[key] = value
        else:
            if self._base is None:
                self._base = {}
            self._base[key] = value
        self.rebuild()

    def merged_with(self, other: LayerPair) -> Table:
        """Return ``self.cache`` overlaid by ``other.cache``; *other* wins."""
        return overlay(self._cache, other._cache)
