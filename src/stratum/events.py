"""Filesystem change notifications, as consumed by the reload dispatcher."""

from __future__ import annotations

import dataclasses
import enum
import pathlib


class EventKind(enum.Enum):
    CREATED = "created"
    MODIFIED = "modified"
    OTHER = "other"


@dataclasses.dataclass(frozen=True)
class FsEvent:
    kind: EventKind
    path: pathlib.Path | None = None

    @classmethod
    def created(cls, path: str | pathlib.Path) -> FsEvent:
        return cls(EventKind.CREATED, pathlib.Path(path))

    @classmethod
    def modified(cls, path: str | pathlib.Path) -> FsEvent:
        return cls(EventKind.MODIFIED, pathlib.Path(path))

    @classmethod
    def other(cls, path: str | pathlib.Path | None = None) -> FsEvent:
        return cls(EventKind.OTHER, pathlib.Path(path) if path is not None else None)
