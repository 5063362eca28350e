import os
import random
import tempfile

# Must be set before Qt or the package (which configures logging) is imported
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
_SESSION_HOME = tempfile.mkdtemp(prefix="sticky-notes-tests-")
for _var in ("XDG_DATA_HOME", "XDG_CONFIG_HOME", "XDG_CACHE_HOME"):
    os.environ[_var] = os.path.join(_SESSION_HOME, _var.lower())

import pytest
from PyQt6.QtWidgets import QApplication

from sticky_notes.manager import NotesManager
from sticky_notes.models import Bounds
from sticky_notes.note_store import NoteStore


class FakeView:
    """Records the layer calls a Note makes on its view."""

    def __init__(self, note, manager=None):
        self.note = note
        self.manager = manager
        self.calls = []

    def _record(name):
        def method(self):
            self.calls.append(name)
        return method

    attach = _record("attach")
    detach = _record("detach")
    show_note = _record("show_note")
    hide_note = _record("hide_note")
    raise_note = _record("raise_note")
    refresh = _record("refresh")
    disconnect_handlers = _record("disconnect_handlers")
    dispose = _record("dispose")


@pytest.fixture(scope="session")
def qapp():
    app = QApplication.instance() or QApplication([])
    yield app


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Every test gets its own settings.ini and default data dir."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))


@pytest.fixture
def bounds():
    return Bounds(1920, 1080)


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def notes_dir(tmp_path):
    path = tmp_path / "notes_data"
    path.mkdir()
    return path


@pytest.fixture
def store(notes_dir, bounds, rng):
    return NoteStore(notes_dir, bounds, rng=rng)


@pytest.fixture
def manager(qapp, store, rng):
    notes_manager = NotesManager(store, rng=rng)
    yield notes_manager
    notes_manager.destroy()


@pytest.fixture
def view_manager(qapp, store, rng):
    notes_manager = NotesManager(store, view_factory=FakeView, rng=rng)
    yield notes_manager
    notes_manager.destroy()
