import pytest
from PyQt6.QtCore import QPoint, Qt

from sticky_notes import config
from sticky_notes.manager import NotesManager
from sticky_notes.note_widget import NoteWidget


@pytest.fixture
def widget_manager(qapp, store, rng):
    manager = NotesManager(store, view_factory=NoteWidget, rng=rng)
    yield manager
    manager.destroy()


@pytest.fixture
def note(widget_manager):
    note = widget_manager.create()
    note.state = note.state.with_changes(x=100, y=100)
    note.view.refresh()
    return note


def test_widget_mirrors_note(note):
    widget = note.view
    assert isinstance(widget, NoteWidget)
    assert widget.width() == int(note.width)
    assert widget.height() == int(note.height)
    assert f"rgba({note.color[0]},{note.color[1]},{note.color[2]}" in widget.styleSheet()


def test_bold_button(note):
    note.view.bold_button.click()
    assert note.is_bold
    assert "font-weight: bold" in note.view.styleSheet()


def test_options_menu_actions(note, store):
    widget = note.view
    color_actions = widget.options_menu.color_menu.actions()
    assert [a.text() for a in color_actions] == [label for label, _ in config.PRESET_COLORS]

    color_actions[0].trigger()
    assert note.color == config.PRESET_COLORS[0][1]
    assert store.load_state(note.id).color == config.PRESET_COLORS[0][1]

    before = note.font_size
    increase = widget.options_menu.font_menu.actions()[1]
    increase.trigger()
    assert note.font_size == before + config.FONT_SIZE_STEP


def test_typing_saves_text(note, store):
    note.view.text_edit.setPlainText("draft")
    assert note.body == "draft"
    assert store.load_text(note.id) == "draft"


def test_drag_moves_note(note):
    widget = note.view
    widget._on_move_press(Qt.MouseButton.LeftButton, QPoint(0, 0))
    widget._on_move_drag(QPoint(10, 5))
    widget._on_release()
    assert (note.x, note.y) == (110, 105)


def test_right_press_toggles_entry(note):
    note.view._on_move_press(Qt.MouseButton.RightButton, QPoint(0, 0))
    assert note.entry_visible is False
    assert note.view.text_edit.isHidden()


def test_delete_button_confirms(widget_manager, note, monkeypatch):
    monkeypatch.setattr("sticky_notes.note_widget.confirm_delete", lambda parent: False)
    note.view.delete_button.click()
    assert len(widget_manager) == 1

    monkeypatch.setattr("sticky_notes.note_widget.confirm_delete", lambda parent: True)
    note.view.delete_button.click()
    assert len(widget_manager) == 0
    assert note.destroyed


def test_new_button_copies_style(widget_manager, note):
    note.apply_color(5, 6, 7)
    note.view.new_button.click()
    assert len(widget_manager) == 2
    assert widget_manager[1].color == (5, 6, 7)
