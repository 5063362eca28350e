from PyQt6.QtCore import QPoint, QRect, Qt, pyqtSignal
from PyQt6.QtGui import QGuiApplication, QIcon, QMouseEvent
from PyQt6.QtWidgets import (QHBoxLayout, QPlainTextEdit, QSizePolicy, QToolButton,
                             QVBoxLayout, QWidget)

from . import config
from .dialogs import confirm_delete
from .logger import get_logger
from .menus import NoteOptionsMenu
from .models import format_color

logger = get_logger()


def screen_work_area() -> QRect:
    """The primary screen's available geometry, or a fixed fallback."""
    screen = QGuiApplication.primaryScreen()
    if screen is None:
        return QRect(0, 0, *config.FALLBACK_WORK_AREA)
    return screen.availableGeometry()


class GrabArea(QWidget):
    """A header region that reports press/drag/release in global coordinates."""
    pressed = pyqtSignal(object, QPoint) # Qt.MouseButton, global position
    dragged = pyqtSignal(QPoint)
    released = pyqtSignal()

    def __init__(self, cursor_shape, parent=None):
        super().__init__(parent)
        self.setCursor(cursor_shape)
        self._grabbing = False

    def mousePressEvent(self, event: QMouseEvent):
        self._grabbing = True
        self.pressed.emit(event.button(), event.globalPosition().toPoint())
        event.accept()

    def mouseMoveEvent(self, event: QMouseEvent):
        if self._grabbing:
            self.dragged.emit(event.globalPosition().toPoint())
        event.accept()

    def mouseReleaseEvent(self, event: QMouseEvent):
        if self._grabbing:
            self._grabbing = False
            self.released.emit()
        event.accept()


class NoteWidget(QWidget):
    """On-screen rendering of one Note.

    Turns raw input into manager handler calls (move/resize deltas, release,
    color, font, bold, delete) and re-renders from the note's state on
    refresh(). Holds no state of its own beyond the current grab point.
    """

    def __init__(self, note, manager, parent=None):
        super().__init__(parent)
        self.note = note
        self.manager = manager
        self._grab_pos = QPoint()
        self._updating_text = False

        self.setWindowFlags(Qt.WindowType.FramelessWindowHint | Qt.WindowType.Tool
                            | Qt.WindowType.WindowStaysOnBottomHint)
        self.setAttribute(Qt.WidgetAttribute.WA_TranslucentBackground)
        self.setMinimumSize(config.MIN_NOTE_WIDTH, config.MIN_NOTE_HEIGHT)
        self._init_ui()
        self._connect_handlers()

    def _init_ui(self):
        self.setLayout(QVBoxLayout())
        self.layout().setContentsMargins(0, 0, 0, 0)
        self.layout().setSpacing(0)

        self.header = QWidget(self)
        self.header.setObjectName("noteHeader")
        header_layout = QHBoxLayout(self.header)
        header_layout.setContentsMargins(4, 2, 4, 2)

        self.new_button = self._header_button("list-add-symbolic", "New")
        self.bold_button = self._header_button("format-text-bold-symbolic", "Toggle bold")
        self.delete_button = self._header_button("user-trash-symbolic", "Delete")
        self.move_handle = GrabArea(Qt.CursorShape.SizeAllCursor, self.header)
        self.move_handle.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Preferred)
        self.options_button = self._header_button("view-more-symbolic", "Note options")
        self.options_menu = NoteOptionsMenu(self.note, self.manager, self)
        self.options_button.setMenu(self.options_menu)
        self.options_button.setPopupMode(QToolButton.ToolButtonPopupMode.InstantPopup)
        self.resize_grip = GrabArea(Qt.CursorShape.SizeFDiagCursor, self.header)
        self.resize_grip.setFixedSize(config.HEADER_BUTTON_ICON_SIZE, config.HEADER_BUTTON_ICON_SIZE)
        self.resize_grip.setToolTip("Resize")

        for widget in (self.new_button, self.bold_button, self.delete_button,
                       self.move_handle, self.options_button, self.resize_grip):
            header_layout.addWidget(widget)
        self.layout().addWidget(self.header)

        self.text_edit = QPlainTextEdit(self)
        self.text_edit.setPlaceholderText(config.PLACEHOLDER_TEXT)
        self.text_edit.setFrameStyle(0)
        self.layout().addWidget(self.text_edit)

    def _header_button(self, icon_name, tooltip):
        button = QToolButton(self.header)
        button.setIcon(QIcon.fromTheme(icon_name))
        button.setToolTip(tooltip)
        button.setAutoRaise(True)
        return button

    def _connect_handlers(self):
        self.new_button.clicked.connect(self._handle_new)
        self.bold_button.clicked.connect(self._handle_bold)
        self.delete_button.clicked.connect(self._handle_delete)
        self.move_handle.pressed.connect(self._on_move_press)
        self.move_handle.dragged.connect(self._on_move_drag)
        self.move_handle.released.connect(self._on_release)
        self.resize_grip.pressed.connect(self._on_resize_press)
        self.resize_grip.dragged.connect(self._on_resize_drag)
        self.resize_grip.released.connect(self._on_release)
        self.text_edit.textChanged.connect(self._on_text_changed)

    def disconnect_handlers(self):
        # Try to disconnect all, simple way for PyQt
        for signal in (self.new_button.clicked, self.bold_button.clicked, self.delete_button.clicked,
                       self.move_handle.pressed, self.move_handle.dragged, self.move_handle.released,
                       self.resize_grip.pressed, self.resize_grip.dragged, self.resize_grip.released,
                       self.text_edit.textChanged):
            try:
                signal.disconnect()
            except TypeError: # Thrown if a signal has no connections
                pass

    # --- Rendering ---

    def _style_sheet(self, alpha):
        state = self.note.state
        rgba = f"rgba({format_color(state.color)}, {alpha})"
        entry_style = (f"background-color: {rgba}; color: {state.text_color}; "
                       f"font-size: {state.font_size}px; font-family: {config.FONT_FAMILY};")
        if state.is_bold:
            entry_style += " font-weight: bold;"
        return (f"QWidget#noteHeader {{ background-color: {rgba}; }}"
                f"QPlainTextEdit {{ {entry_style} border: none; }}")

    def refresh(self):
        """Re-applies geometry, colors, font and body from the note."""
        origin = screen_work_area().topLeft()
        self.setGeometry(origin.x() + int(self.note.x), origin.y() + int(self.note.y),
                         int(self.note.width), int(self.note.height))
        alpha = config.NOTE_ALPHA if self.underMouse() else config.NOTE_ALPHA_IDLE
        self.setStyleSheet(self._style_sheet(alpha))
        self.text_edit.setVisible(self.note.entry_visible)
        if self.text_edit.toPlainText() != self.note.body:
            self._updating_text = True
            try:
                self.text_edit.setPlainText(self.note.body)
            finally:
                self._updating_text = False

    def enterEvent(self, event):
        self.setStyleSheet(self._style_sheet(config.NOTE_ALPHA))
        super().enterEvent(event)

    def leaveEvent(self, event):
        self.setStyleSheet(self._style_sheet(config.NOTE_ALPHA_IDLE))
        super().leaveEvent(event)

    # --- Layer interface used by Note ---

    def attach(self):
        self.refresh()
        if self.note.visible:
            self.show()

    def detach(self):
        self.hide()

    def show_note(self):
        self.refresh()
        self.show()
        self.raise_()

    def hide_note(self):
        self.hide()

    def raise_note(self):
        self.raise_()

    def dispose(self):
        self.close()
        self.deleteLater()

    # --- Input ---

    def _on_move_press(self, button, global_pos: QPoint):
        if button == Qt.MouseButton.RightButton:
            self.manager.on_entry_toggle_requested(self.note)
        self.manager.on_press(self.note)
        self._grab_pos = global_pos

    def _on_move_drag(self, global_pos: QPoint):
        delta = global_pos - self._grab_pos
        self.manager.on_move_delta(self.note, delta.x(), delta.y())
        self._grab_pos = global_pos

    def _on_resize_press(self, button, global_pos: QPoint):
        self.manager.on_press(self.note)
        self._grab_pos = global_pos

    def _on_resize_drag(self, global_pos: QPoint):
        delta = global_pos - self._grab_pos
        # The grip sits top-right: dragging up grows the note upwards
        self.manager.on_resize_delta(self.note, delta.x(), -delta.y())
        self.manager.on_move_delta(self.note, 0, delta.y())
        self._grab_pos = global_pos

    def _on_release(self):
        self.manager.on_release(self.note)

    def _on_text_changed(self):
        if self._updating_text:
            return
        self.manager.on_text_changed(self.note, self.text_edit.toPlainText())

    def _handle_new(self):
        self.manager.on_create_requested(self.note)

    def _handle_bold(self):
        self.manager.on_bold_toggle_requested(self.note)

    def _handle_delete(self):
        if confirm_delete(self):
            self.manager.on_delete_requested(self.note)
