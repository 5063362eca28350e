import json
import os
import random
import re
import tempfile
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from . import config
from .errors import MalformedStateError, RecordIOError
from .logger import get_logger
from .models import RGB, Bounds, NoteState

logger = get_logger()

_STATE_FILE_RE = re.compile(r"^(\d+)" + re.escape(config.STATE_SUFFIX) + "$")


class NoteStore:
    """Reads and writes the two records (<id>_state, <id>_text) of every note.

    Records are keyed by the note's current integer ID. Public operations
    never raise on I/O or parse problems: they log and fall back to defaults.
    """

    def __init__(self, notes_dir: Path, bounds: Bounds,
                 position_source: Optional[Callable[[], Tuple[float, float]]] = None,
                 rng: Optional[random.Random] = None):
        self.notes_dir = Path(notes_dir)
        self.bounds = bounds
        self._rng = rng or random.Random()
        # Manager swaps in its overlap-avoiding placement once it exists
        self.position_source = position_source or self.random_position

    # --- Paths ---

    def state_path(self, note_id: int) -> Path:
        return self.notes_dir / f"{note_id}{config.STATE_SUFFIX}"

    def text_path(self, note_id: int) -> Path:
        return self.notes_dir / f"{note_id}{config.TEXT_SUFFIX}"

    def has_state(self, note_id: int) -> bool:
        """Existence probe used by the directory scan."""
        return self.state_path(note_id).exists()

    def ids_on_disk(self) -> List[int]:
        """Returns every ID with a state record, sorted, gaps included."""
        if not self.notes_dir.is_dir():
            return []
        ids = []
        for entry in self.notes_dir.iterdir():
            match = _STATE_FILE_RE.match(entry.name)
            if match:
                ids.append(int(match.group(1)))
        return sorted(ids)

    # --- Low-level I/O ---

    def _read(self, path: Path) -> str:
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise RecordIOError(f"Could not read {path}: {e}") from e

    def _write_atomic(self, path: Path, content: str):
        """Writes content to a temp file in the same directory, then replaces path."""
        tmp_name = None
        try:
            fd, tmp_name = tempfile.mkstemp(dir=self.notes_dir, prefix=f".{path.name}.", suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
            os.replace(tmp_name, path)
        except OSError as e:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise RecordIOError(f"Could not write {path}: {e}") from e

    # --- State records ---

    def random_position(self) -> Tuple[float, float]:
        return self.bounds.random_position(self._rng)

    def default_state(self, color: Optional[RGB] = None, font_size: Optional[int] = None) -> NoteState:
        x, y = self.position_source()
        return NoteState(
            x=x,
            y=y,
            color=color or config.DEFAULT_NOTE_COLOR,
            width=config.DEFAULT_NOTE_WIDTH,
            height=config.DEFAULT_NOTE_HEIGHT,
            font_size=font_size or config.DEFAULT_FONT_SIZE,
            entry_visible=True,
            is_bold=False,
        )

    def _write_default(self, note_id: int, default: Optional[NoteState]) -> NoteState:
        state = default if default is not None else self.default_state()
        return self.save_state(note_id, state)

    def load_state(self, note_id: int, default: Optional[NoteState] = None) -> NoteState:
        """Loads the state record for note_id.

        A missing or malformed record is replaced by `default` (or a freshly
        generated default), which is written back before being returned.
        """
        path = self.state_path(note_id)
        if not path.exists():
            logger.debug(f"No state record for note {note_id}, writing defaults")
            return self._write_default(note_id, default)

        try:
            state = NoteState.from_dict(json.loads(self._read(path)))
        except (RecordIOError, ValueError, OverflowError, MalformedStateError) as e:
            # json.JSONDecodeError is a ValueError
            logger.warning(f"State record for note {note_id} unusable, resetting to defaults: {e}")
            return self._write_default(note_id, default)

        clean = self.bounds.sanitize(state, self.position_source)
        if clean != state:
            logger.debug(f"Corrected geometry of note {note_id} on load: {state} -> {clean}")
        logger.debug(f"Loaded note {note_id} at ({clean.x}, {clean.y}) with color {clean.color}")
        return clean

    def save_state(self, note_id: int, state: NoteState) -> NoteState:
        """Clamps state into the working area and overwrites the record.

        Returns the clamped state whether or not the write succeeded.
        """
        clean = self.bounds.sanitize(state, self.position_source)
        try:
            self._write_atomic(self.state_path(note_id), json.dumps(clean.to_dict()))
            logger.debug(f"Saved note {note_id} at ({clean.x}, {clean.y}) with color {clean.color}")
        except RecordIOError as e:
            logger.error(f"Error saving state of note {note_id}: {e}")
        return clean

    # --- Text records ---

    def load_text(self, note_id: int) -> str:
        """Returns the note body, creating an empty record if none exists."""
        path = self.text_path(note_id)
        if not path.exists():
            self.save_text(note_id, "")
            return ""
        try:
            return self._read(path)
        except RecordIOError as e:
            logger.warning(f"Error loading text of note {note_id}: {e}")
            return ""

    def save_text(self, note_id: int, text: str) -> bool:
        try:
            self._write_atomic(self.text_path(note_id), text or "")
            return True
        except RecordIOError as e:
            logger.error(f"Error saving text of note {note_id}: {e}")
            return False

    # --- Record lifecycle ---

    def delete_record(self, note_id: int):
        """Removes both records of note_id; missing records are fine."""
        for path in (self.text_path(note_id), self.state_path(note_id)):
            try:
                path.unlink()
                logger.debug(f"Deleted record {path}")
            except FileNotFoundError:
                pass
            except OSError as e:
                logger.error(f"Error deleting record {path}: {e}")

    def renumber(self, from_id: int, to_id: int, state: NoteState, text: str) -> NoteState:
        """Re-saves a note that moved from from_id to to_id and drops the old records."""
        clean = self.save_state(to_id, state)
        self.save_text(to_id, text)
        if from_id != to_id:
            self.delete_record(from_id)
        logger.debug(f"Renumbered note {from_id} -> {to_id}")
        return clean
