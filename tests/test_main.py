from sticky_notes.main import StickyNotesApp
from sticky_notes import utils


def test_activate_and_deactivate(qapp, tmp_path):
    notes_dir = tmp_path / "notes"
    app = StickyNotesApp(notes_dir=notes_dir, view_factory=None, use_tray=False)

    app.activate()
    assert notes_dir.is_dir()
    assert len(app.manager) == 1
    assert app.manager.notes_visible
    app.manager[0].set_text("keep me")

    app.deactivate()
    assert app.manager is None
    assert (notes_dir / "0_state").exists()
    assert (notes_dir / "0_text").read_text(encoding="utf-8") == "keep me"

    # Records survive a restart
    again = StickyNotesApp(notes_dir=notes_dir, view_factory=None, use_tray=False)
    again.activate()
    assert [note.body for note in again.manager] == ["keep me"]
    again.deactivate()


def test_show_on_startup_setting(qapp, tmp_path):
    utils.set_show_on_startup(False)
    app = StickyNotesApp(notes_dir=tmp_path / "notes", view_factory=None, use_tray=False)
    app.activate()
    assert not app.manager.notes_visible
    app.deactivate()


def test_notify_without_tray(qapp, tmp_path):
    app = StickyNotesApp(notes_dir=tmp_path / "notes", view_factory=None, use_tray=False)
    app.notify("something went wrong")
