import json
import math

from sticky_notes import config
from sticky_notes.models import NoteState
from sticky_notes.note_store import NoteStore


def _read_state(store, note_id):
    return json.loads(store.state_path(note_id).read_text(encoding="utf-8"))


class TestLoadState:

    def test_missing_record_writes_defaults(self, store):
        state = store.load_state(0)

        assert store.state_path(0).exists()
        assert (state.width, state.height) == (250, 180)
        assert state.font_size == config.DEFAULT_FONT_SIZE
        assert state.color == config.DEFAULT_NOTE_COLOR
        assert state.entry_visible is True
        assert state.is_bold is False
        assert 0 <= state.x <= 1920 - 250
        assert 0 <= state.y <= 1080 - 180
        assert _read_state(store, 0) == state.to_dict()

    def test_default_is_idempotent(self, store):
        first = store.load_state(3)
        assert store.load_state(3) == first
        assert store.load_state(3) == first

    def test_missing_record_uses_given_default(self, store):
        default = NoteState(x=10, y=20, color=(1, 2, 3), font_size=16)
        assert store.load_state(0, default) == default
        assert store.load_state(0) == default

    def test_unparsable_record_falls_back(self, store):
        store.state_path(0).write_text("{not json", encoding="utf-8")
        default = NoteState(x=5, y=6)

        state = store.load_state(0, default)

        assert state == default
        assert _read_state(store, 0) == default.to_dict()

    def test_invalid_record_falls_back(self, store):
        store.state_path(1).write_text(json.dumps({"x": 1, "y": 2, "color": "red"}), encoding="utf-8")
        default = NoteState(x=7, y=8)
        assert store.load_state(1, default) == default

    def test_infinite_font_size_falls_back(self, store):
        store.state_path(0).write_text('{"x": 10, "y": 10, "fontSize": Infinity}', encoding="utf-8")
        default = NoteState(x=5, y=6)

        assert store.load_state(0, default) == default
        assert _read_state(store, 0) == default.to_dict()

    def test_overflowing_width_falls_back(self, store):
        store.state_path(0).write_text('{"x": 10, "y": 10, "width": 1' + "0" * 400 + "}", encoding="utf-8")
        default = NoteState(x=5, y=6)
        assert store.load_state(0, default) == default

    def test_unreadable_record_falls_back(self, store):
        store.state_path(0).write_bytes(b"\xff\xfe\x00garbage")
        default = NoteState(x=7, y=8)
        assert store.load_state(0, default) == default

    def test_load_clamps_out_of_bounds_geometry(self, store):
        raw = NoteState(x=9000, y=-40, width=20, height=20).to_dict()
        store.state_path(0).write_text(json.dumps(raw), encoding="utf-8")

        state = store.load_state(0)

        assert (state.width, state.height) == (200, 75)
        assert (state.x, state.y) == (1720, 0)

    def test_nan_position_is_rerandomised(self, store):
        store.position_source = lambda: (123, 456)
        store.state_path(0).write_text('{"x": NaN, "y": 10}', encoding="utf-8")
        state = store.load_state(0)
        assert (state.x, state.y) == (123, 456)


class TestSaveState:

    def test_round_trip(self, store):
        state = NoteState(x=100.5, y=200.25, color=(10, 20, 30), width=320, height=240,
                          font_size=18, entry_visible=False, is_bold=True)
        assert store.save_state(4, state) == state
        assert store.load_state(4) == state

    def test_round_trip_with_clamping(self, store):
        state = NoteState(x=5000, y=5000, width=10, height=10)
        saved = store.save_state(0, state)

        assert (saved.width, saved.height) == (200, 75)
        assert (saved.x, saved.y) == (1720, 1005)
        assert store.load_state(0) == saved

    def test_infinite_size_is_never_written(self, store):
        clean = store.save_state(0, NoteState(x=10, y=10, width=math.inf, height=-math.inf))

        assert (clean.width, clean.height) == (250, 180)
        assert _read_state(store, 0)["width"] == 250
        assert _read_state(store, 0)["height"] == 180

    def test_no_temp_files_left_behind(self, store, notes_dir):
        store.save_state(0, NoteState(x=1, y=1))
        store.save_state(0, NoteState(x=2, y=2))
        store.save_text(0, "hello")
        assert sorted(p.name for p in notes_dir.iterdir()) == ["0_state", "0_text"]

    def test_write_failure_is_swallowed(self, tmp_path, bounds):
        store = NoteStore(tmp_path / "does-not-exist", bounds)
        state = NoteState(x=1, y=2)
        assert store.save_state(0, state) == state
        assert not store.state_path(0).exists()

    def test_failed_write_keeps_previous_record(self, store, monkeypatch):
        original = NoteState(x=1, y=2)
        store.save_state(0, original)

        def broken_replace(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr("sticky_notes.note_store.os.replace", broken_replace)
        store.save_state(0, NoteState(x=50, y=60))
        monkeypatch.undo()

        assert store.load_state(0) == original
        assert sorted(p.name for p in store.notes_dir.iterdir()) == ["0_state"]


class TestText:

    def test_missing_text_is_created_empty(self, store):
        assert store.load_text(2) == ""
        assert store.text_path(2).read_text(encoding="utf-8") == ""

    def test_text_round_trip(self, store):
        body = "Buy milk\nCall Zoë ✓"
        assert store.save_text(0, body)
        assert store.load_text(0) == body

    def test_unreadable_text_returns_empty(self, store):
        store.text_path(0).mkdir()
        assert store.load_text(0) == ""

    def test_save_failure_returns_false(self, tmp_path, bounds):
        store = NoteStore(tmp_path / "missing", bounds)
        assert store.save_text(0, "x") is False


class TestRecordLifecycle:

    def test_delete_record(self, store):
        store.load_state(0)
        store.load_text(0)
        store.delete_record(0)
        assert not store.state_path(0).exists()
        assert not store.text_path(0).exists()

    def test_delete_missing_record_is_fine(self, store):
        store.delete_record(42)

    def test_renumber_moves_records(self, store):
        state = NoteState(x=10, y=20, color=(9, 9, 9))
        store.save_state(2, state)
        store.save_text(2, "last note")

        store.renumber(2, 0, state, "last note")

        assert store.load_state(0) == state
        assert store.load_text(0) == "last note"
        assert not store.state_path(2).exists()
        assert not store.text_path(2).exists()

    def test_renumber_same_slot_keeps_records(self, store):
        state = NoteState(x=10, y=20)
        store.renumber(1, 1, state, "body")
        assert store.has_state(1)
        assert store.load_text(1) == "body"

    def test_ids_on_disk(self, store, notes_dir):
        for note_id in (0, 1, 3):
            store.save_state(note_id, NoteState(x=0, y=0))
        (notes_dir / "7_text").write_text("", encoding="utf-8")
        (notes_dir / ".0_state.abc.tmp").write_text("", encoding="utf-8")
        (notes_dir / "readme").write_text("", encoding="utf-8")

        assert store.ids_on_disk() == [0, 1, 3]

    def test_ids_on_disk_without_directory(self, tmp_path, bounds):
        assert NoteStore(tmp_path / "nope", bounds).ids_on_disk() == []

    def test_nan_default_position_sanitised_on_save(self, store):
        saved = store.save_state(0, NoteState(x=math.nan, y=math.nan))
        assert not math.isnan(saved.x) and not math.isnan(saved.y)
