"""Exceptions raised by the notes core."""


class NotesError(Exception):
    """Base class for sticky-notes errors."""


class RecordIOError(NotesError):
    """Reading or writing a note record failed."""


class MalformedStateError(NotesError):
    """A state record could not be parsed or failed validation."""


class NoteCreationError(NotesError):
    """Constructing a note failed; the collection is left unchanged."""

    def __init__(self, note_id: int, message: str):
        super().__init__(message)
        self.note_id = note_id
