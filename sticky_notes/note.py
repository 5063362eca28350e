from typing import Callable, Optional

from . import config
from .logger import get_logger
from .models import RGB, NoteState, clamp_color
from .note_store import NoteStore

logger = get_logger()


class Note:
    """One live sticky note.

    Holds the in-memory state and body of the note with ID `id`, applies
    mutations coming from the UI and persists them through the NoteStore.
    Rendering is delegated to an optional view (see NoteWidget), which must
    provide attach/detach/show_note/hide_note/raise_note/refresh/
    disconnect_handlers/dispose.
    """

    def __init__(self, note_id: int, store: NoteStore, color: Optional[RGB] = None,
                 font_size: Optional[int] = None, view_factory: Optional[Callable] = None):
        self.id = note_id
        self._store = store
        self._destroyed = False
        self.attached = False
        self.visible = True

        default = store.default_state(color, font_size)
        self.state = store.load_state(note_id, default)
        self.body = store.load_text(note_id)

        self._view = view_factory(self) if view_factory else None
        self.load_into_layer()

    # --- Read-only accessors ---

    @property
    def view(self):
        return self._view

    @property
    def destroyed(self) -> bool:
        return self._destroyed

    @property
    def x(self) -> float:
        return self.state.x

    @property
    def y(self) -> float:
        return self.state.y

    @property
    def width(self) -> float:
        return self.state.width

    @property
    def height(self) -> float:
        return self.state.height

    @property
    def color(self) -> RGB:
        return self.state.color

    @property
    def text_color(self) -> str:
        return self.state.text_color

    @property
    def font_size(self) -> int:
        return self.state.font_size

    @property
    def is_bold(self) -> bool:
        return self.state.is_bold

    @property
    def entry_visible(self) -> bool:
        return self.state.entry_visible

    def __repr__(self):
        return f"<Note id={self.id} pos=({self.x:.0f}, {self.y:.0f}) color={self.color}>"

    # --- Persistence ---

    def persist_state(self):
        self.state = self._store.save_state(self.id, self.state)

    def save(self, with_metadata: bool = True):
        if self._destroyed:
            return
        if with_metadata:
            self.persist_state()
        self._store.save_text(self.id, self.body)

    def renumber_to(self, new_id: int):
        """Moves this note's records from its current ID to new_id."""
        old_id = self.id
        self.id = new_id
        self.state = self._store.renumber(old_id, new_id, self.state, self.body)
        logger.info(f"Moved note from position {old_id} to {new_id}")

    def fix_state(self):
        """Puts an off-screen note back on screen and persists the result."""
        bounds = self._store.bounds
        if bounds.is_off_screen(self.x, self.y):
            x, y = self._store.position_source()
            logger.warning(f"Note {self.id} was off screen at ({self.x}, {self.y}), moving to ({x}, {y})")
            self.state = self.state.with_changes(x=x, y=y)
        self.persist_state()

    # --- Mutations ---

    def _set_geometry(self, x, y, width, height):
        bounds = self._store.bounds
        width, height = bounds.clamp_size(width, height)
        x, y = bounds.clamp_position(x, y, width, height)
        self.state = self.state.with_changes(x=x, y=y, width=width, height=height)
        self._refresh_view()

    def move_by(self, dx: float, dy: float):
        if self._destroyed:
            return
        self._set_geometry(self.x + dx, self.y + dy, self.width, self.height)

    def resize_by(self, dw: float, dh: float):
        if self._destroyed:
            return
        self._set_geometry(self.x, self.y, self.width + dw, self.height + dh)

    def release(self):
        """End of a drag or resize: commit geometry and text."""
        self.save()

    def change_font_size(self, delta: int) -> bool:
        """Applies delta unless the result would be <= 1. Always persists."""
        if self._destroyed:
            return False
        applied = self.font_size + delta > config.MIN_FONT_SIZE_EXCLUSIVE
        if applied:
            self.state = self.state.with_changes(font_size=self.font_size + delta)
            self._refresh_view()
        self.save()
        return applied

    def apply_color(self, r, g, b):
        if self._destroyed:
            return
        self.state = self.state.with_changes(color=clamp_color(r, g, b))
        self._refresh_view()
        self.persist_state()

    def toggle_bold(self):
        if self._destroyed:
            return
        self.state = self.state.with_changes(is_bold=not self.is_bold)
        self._refresh_view()
        self.persist_state()

    def toggle_entry(self):
        if self._destroyed:
            return
        self.state = self.state.with_changes(entry_visible=not self.entry_visible)
        self._refresh_view()
        self.persist_state()

    def set_text(self, text: str):
        if self._destroyed:
            return
        self.body = text or ""
        self._store.save_text(self.id, self.body)

    # --- Rendering layer ---

    def _refresh_view(self):
        if self._view is not None:
            self._view.refresh()

    def load_into_layer(self):
        self.fix_state()
        if self._view is not None:
            self._view.attach()
        self.attached = True

    def remove_from_layer(self):
        if not self.attached:
            return
        try:
            if self._view is not None:
                self._view.detach()
        except Exception:
            logger.exception(f"Error removing note {self.id} from layer")
        self.attached = False

    def show(self):
        if self._destroyed:
            return
        if not self.attached:
            self.load_into_layer()
        self.visible = True
        if self._view is not None:
            self._view.show_note()

    def hide(self):
        self.visible = False
        if self._view is not None:
            self._view.hide_note()

    def raise_and_save(self):
        """Brings the note to the front and persists it (on any press)."""
        if self._view is not None:
            self._view.raise_note()
        self.save()

    def destroy(self):
        """Disconnects handlers and drops the view. Records are left alone."""
        if self._destroyed:
            return
        view = self._view
        if view is not None:
            view.disconnect_handlers()
        self.remove_from_layer()
        self._destroyed = True
        self._view = None
        if view is not None:
            view.dispose()
