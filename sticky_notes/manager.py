import random
from typing import Callable, List, Optional, Tuple, Union

from PyQt6.QtCore import QObject, QTimer, pyqtSignal

from . import config
from .errors import NoteCreationError
from .logger import get_logger
from .models import RGB, parse_color
from .note import Note
from .note_store import NoteStore

logger = get_logger()

ColorArg = Union[RGB, str, None]


class NotesManager(QObject):
    """Owns the ordered collection of live notes.

    Note IDs are list indices: the live IDs are always exactly
    range(len(manager)). Creation appends, deletion moves the last note into
    the freed slot (swap-with-last), so at most one note changes identity per
    delete. The order of notes carries no meaning.
    """

    note_created = pyqtSignal(int)
    note_deleted = pyqtSignal(int)
    visibility_changed = pyqtSignal(bool)

    def __init__(self, store: NoteStore, view_factory: Optional[Callable] = None,
                 notifier: Optional[Callable[[str], None]] = None,
                 default_color: Optional[RGB] = None, default_font_size: Optional[int] = None,
                 rng: Optional[random.Random] = None, parent=None):
        super().__init__(parent)
        self._store = store
        self._view_factory = view_factory
        self._notifier = notifier
        self._rng = rng or random.Random()
        self.default_color = default_color or config.DEFAULT_NOTE_COLOR
        self.default_font_size = default_font_size or config.DEFAULT_FONT_SIZE

        self._notes: List[Note] = []
        self._notes_visible = False
        self._notes_loaded = False

        # New notes (and notes that lost their position) avoid existing ones
        self._store.position_source = self.find_free_position

        self._detach_timer = QTimer(self)
        self._detach_timer.setSingleShot(True)
        self._detach_timer.setInterval(config.HIDE_DETACH_DELAY_MS)
        self._detach_timer.timeout.connect(self._detach_all)

    # --- Collection access ---

    def __len__(self):
        return len(self._notes)

    def __iter__(self):
        return iter(list(self._notes))

    def __getitem__(self, note_id: int) -> Note:
        return self._notes[note_id]

    @property
    def notes(self) -> Tuple[Note, ...]:
        return tuple(self._notes)

    @property
    def store(self) -> NoteStore:
        return self._store

    @property
    def notes_visible(self) -> bool:
        return self._notes_visible

    @property
    def notes_loaded(self) -> bool:
        return self._notes_loaded

    @property
    def detach_pending(self) -> bool:
        return self._detach_timer.isActive()

    def ids(self) -> List[int]:
        return [note.id for note in self._notes]

    # --- Lifecycle ---

    def _bind_view_factory(self):
        if self._view_factory is None:
            return None
        return lambda note: self._view_factory(note, self)

    def create(self, initial_color: ColorArg = None, initial_font_size: Optional[int] = None) -> Note:
        """Creates the note with ID len(self) and appends it.

        Existing records for that ID are loaded, otherwise defaults are
        written. Raises NoteCreationError (after notifying the user) if the
        note cannot be built; the collection is unchanged in that case.
        """
        if isinstance(initial_color, str):
            try:
                initial_color = parse_color(initial_color) if initial_color else None
            except ValueError:
                logger.warning(f"Ignoring invalid initial color {initial_color!r}")
                initial_color = None

        next_id = len(self._notes)
        had_records = self._store.has_state(next_id)
        try:
            note = Note(next_id, self._store, initial_color or self.default_color,
                        initial_font_size or self.default_font_size,
                        view_factory=self._bind_view_factory())
        except Exception as e:
            logger.exception(f"Failed to create note n°{next_id}")
            # Defaults written for a brand new ID must not outlive the failed note
            if not had_records:
                self._store.delete_record(next_id)
            if self._notifier is not None:
                self._notifier(f"{config.APP_DISPLAY_NAME} error: failed to load a note")
            raise NoteCreationError(next_id, f"Failed to create note n°{next_id}: {e}") from e

        self._notes.append(note)
        logger.info(f"Created note {next_id}")
        self.note_created.emit(next_id)
        return note

    def delete(self, note_id: int) -> bool:
        """Deletes a note and keeps the ID range dense.

        The records of note_id are removed. Unless it was the last note, the
        last note takes over note_id: its records are rewritten under the new
        ID and the ones under its old ID are removed.
        """
        if not 0 <= note_id < len(self._notes):
            logger.warning(f"Delete requested for unknown note {note_id} (have {len(self._notes)})")
            return False

        logger.info(f"Deleting note with ID {note_id}, total notes: {len(self._notes)}")
        # Handlers go first so nothing fires on a half-removed note
        self._notes[note_id].destroy()
        self._store.delete_record(note_id)

        last_id = len(self._notes) - 1
        if note_id == last_id:
            self._notes.pop()
        else:
            last_note = self._notes.pop()
            self._notes[note_id] = last_note
            last_note.renumber_to(note_id)

        self.note_deleted.emit(note_id)
        return True

    def load_all(self) -> int:
        """Creates a note for every state record in the contiguous range 0, 1, ...

        Scanning stops at the first missing ID; records after a gap are
        reported but not loaded. Creates one default note if none exist.
        Returns the number of notes loaded from disk.
        """
        found = 0
        while self._store.has_state(found):
            try:
                self.create(None, self.default_font_size)
            except NoteCreationError:
                logger.error(f"Stopping note scan at ID {found}")
                break
            found += 1

        if found == 0 and not self._notes:
            logger.info("No existing notes found, creating a default note")
            try:
                self.create(None, self.default_font_size)
            except NoteCreationError as e:
                logger.error(f"Could not create a default note: {e}")

        orphans = [note_id for note_id in self._store.ids_on_disk() if note_id >= len(self._notes)]
        if orphans:
            logger.warning(f"Ignoring state records past the first gap: {orphans}")

        self._notes_loaded = True
        return found

    def destroy(self):
        """Final save and teardown of every note. Records stay on disk."""
        self._detach_timer.stop()
        for note in self._notes:
            try:
                note.save()
                note.destroy()
            except Exception:
                logger.exception(f"Error destroying note {note.id}")
        self._notes = []
        self._notes_visible = False
        logger.info("Notes manager destroyed")

    # --- Placement ---

    def coords_usable(self, x: float, y: float) -> bool:
        """False if (x, y) is within the overlap tolerance of any note's corner."""
        return not any(
            abs(note.x - x) < config.PLACEMENT_TOLERANCE_X and abs(note.y - y) < config.PLACEMENT_TOLERANCE_Y
            for note in self._notes
        )

    def find_free_position(self, attempts: int = config.PLACEMENT_ATTEMPTS) -> Tuple[float, float]:
        """Best-effort spot for a new note.

        Tries up to `attempts` random candidates and returns the first that
        does not overlap an existing note. Overlap is not ruled out: if every
        attempt collides the last candidate is returned anyway.
        """
        x, y = self._store.bounds.random_position(self._rng)
        for _ in range(attempts - 1):
            if self.coords_usable(x, y):
                return x, y
            x, y = self._store.bounds.random_position(self._rng)
        return x, y

    # --- Visibility ---

    def show_all(self):
        # A pending detach from an earlier hide must not hit the shown notes
        self._detach_timer.stop()
        self._notes_visible = True
        for note in self._notes:
            note.show()
        self.visibility_changed.emit(True)

    def hide_all(self):
        self._notes_visible = False
        for note in self._notes:
            note.hide()
        self._detach_timer.start()
        self.visibility_changed.emit(False)

    def only_hide(self):
        """Hides every note without scheduling the layer detach."""
        for note in self._notes:
            note.hide()
        self._notes_visible = False

    def _detach_all(self):
        for note in self._notes:
            note.remove_from_layer()

    def toggle_visibility(self):
        if not self._notes_loaded:
            self.load_all()

        for note in self._notes:
            note.remove_from_layer()
            note.load_into_layer()

        if not self._notes:
            self.create(self.default_color, self.default_font_size)
            self.show_all()
        elif self._notes_visible:
            self.hide_all()
        else:
            self.show_all()

    # --- Handlers for the UI layer ---

    def _is_live(self, note: Note) -> bool:
        return 0 <= note.id < len(self._notes) and self._notes[note.id] is note

    def on_create_requested(self, source: Optional[Note] = None) -> Note:
        if source is not None and self._is_live(source):
            return self.create(source.color, source.font_size)
        return self.create(self.default_color, self.default_font_size)

    def on_delete_requested(self, note: Note) -> bool:
        if not self._is_live(note):
            return False
        return self.delete(note.id)

    def on_color_change_requested(self, note: Note, rgb):
        note.apply_color(*rgb)

    def on_font_size_change_requested(self, note: Note, delta: int) -> bool:
        return note.change_font_size(delta)

    def on_bold_toggle_requested(self, note: Note):
        note.toggle_bold()

    def on_entry_toggle_requested(self, note: Note):
        note.toggle_entry()

    def on_press(self, note: Note):
        note.raise_and_save()

    def on_move_delta(self, note: Note, dx: float, dy: float):
        note.move_by(dx, dy)

    def on_resize_delta(self, note: Note, dw: float, dh: float):
        note.resize_by(dw, dh)

    def on_release(self, note: Note):
        note.release()

    def on_text_changed(self, note: Note, text: str):
        note.set_text(text)

    def on_toggle_visibility_requested(self):
        self.toggle_visibility()
