"""Shared fixtures for the noteslab test suite."""

from __future__ import annotations

from pathlib import Path

import pytest
from gi.repository import GLib

from noteslab.note_store import NoteStore

#: Short enough to keep the suite fast, long enough that back-to-back calls
#: land inside one debounce window
DELAY_MS = 40
#: Long enough for a pending save to fire
SETTLE_MS = 300


def _spin(ms: int) -> None:
    """Iterate the default GLib main loop for ``ms`` milliseconds."""
    loop = GLib.MainLoop()

    def _quit():
        loop.quit()
        return GLib.SOURCE_REMOVE

    GLib.timeout_add(ms, _quit)
    loop.run()


@pytest.fixture()
def spin():
    return _spin


@pytest.fixture()
def settle():
    return lambda: _spin(SETTLE_MS)


@pytest.fixture()
def notes_path(tmp_path: Path) -> str:
    return str(tmp_path / 'notes_v2.json')


@pytest.fixture()
def make_store(notes_path: str):
    """Factory for stores on the shared path; pending saves are cancelled on teardown."""
    stores = []

    def _make(path: str | None = None, delay_ms: int = DELAY_MS) -> NoteStore:
        store = NoteStore(path=path or notes_path, delay_ms=delay_ms)
        stores.append(store)
        return store

    yield _make
    for store in stores:
        store._auto_save.cancel()


@pytest.fixture()
def store(make_store) -> NoteStore:
    return make_store()
