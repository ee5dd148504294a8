"""Tests for stratum.watcher — watchdog event translation and draining."""

from __future__ import annotations

import pathlib
import time

import pytest
import watchdog.events

from stratum.events import EventKind, FsEvent
from stratum.manager import ConfigManager
from stratum.reload import ReloadDispatcher
from stratum.watcher import ConfigWatcher, translate_event


@pytest.fixture
def watcher(manager: ConfigManager, config_dir: pathlib.Path):
    manager.set_config_dir(config_dir)
    w = ConfigWatcher(ReloadDispatcher(manager))
    yield w
    w.stop()


class TestTranslateEvent:
    def test_created(self) -> None:
        event = translate_event(watchdog.events.FileCreatedEvent("/c/rust.toml"))
        assert event == FsEvent.created("/c/rust.toml")

    def test_modified(self) -> None:
        event = translate_event(watchdog.events.FileModifiedEvent("/c/rust.toml"))
        assert event.kind is EventKind.MODIFIED

    def test_deleted_is_other(self) -> None:
        event = translate_event(watchdog.events.FileDeletedEvent("/c/rust.toml"))
        assert event.kind is EventKind.OTHER

    def test_directory_is_other(self) -> None:
        event = translate_event(watchdog.events.DirModifiedEvent("/c"))
        assert event.kind is EventKind.OTHER


class TestPoll:
    def test_empty_queue(self, watcher: ConfigWatcher) -> None:
        assert watcher.poll() == 0
        assert watcher.poll(timeout=0.01) == 0

    def test_drains_in_order(
        self, watcher: ConfigWatcher, config_dir: pathlib.Path
    ) -> None:
        prefs = config_dir / "preferences.toml"
        prefs.write_text("tab_size = 5\n")
        watcher.events.put(FsEvent.created(prefs))
        watcher.events.put(FsEvent.other(prefs))
        watcher.events.put(FsEvent.modified(prefs))

        assert watcher.poll() == 2
        assert watcher.events.empty()
        assert watcher.dispatcher.manager.resolve().tab_size == 5


class TestObserver:
    def test_start_twice(self, watcher: ConfigWatcher, config_dir: pathlib.Path) -> None:
        watcher.start(config_dir)
        assert watcher.running
        with pytest.raises(RuntimeError, match="already started"):
            watcher.start(config_dir)
        watcher.stop()
        assert not watcher.running

    def test_reloads_written_file(
        self, watcher: ConfigWatcher, config_dir: pathlib.Path
    ) -> None:
        manager = watcher.dispatcher.manager
        watcher.start(config_dir)
        (config_dir / "preferences.toml").write_text("tab_size = 13\n")

        deadline = time.monotonic() + 5
        while time.monotonic() < deadline and manager.resolve().tab_size != 13:
            watcher.poll(timeout=0.1)
        assert manager.resolve().tab_size == 13
