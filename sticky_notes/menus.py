from PyQt6.QtGui import QColor, QIcon, QPixmap
from PyQt6.QtWidgets import QMenu

from . import config


def _color_icon(rgb) -> QIcon:
    pixmap = QPixmap(config.HEADER_BUTTON_ICON_SIZE, config.HEADER_BUTTON_ICON_SIZE)
    pixmap.fill(QColor(*rgb))
    return QIcon(pixmap)


class NoteOptionsMenu(QMenu):
    """Per-note popup with the color presets and the font size steps."""

    def __init__(self, note, manager, parent=None):
        super().__init__(parent)
        self.note = note
        self.manager = manager
        self._build_menu()

    def _build_menu(self):
        self.color_menu = self.addMenu("Color")
        for label, rgb in config.PRESET_COLORS:
            action = self.color_menu.addAction(_color_icon(rgb), label)
            # Default args pin the loop values for each action
            action.triggered.connect(lambda checked=False, rgb=rgb: self._apply_color(rgb))

        self.font_menu = self.addMenu("Font size")
        for label, delta in config.FONT_SIZE_ACTIONS:
            action = self.font_menu.addAction(label)
            action.triggered.connect(lambda checked=False, delta=delta: self._change_font_size(delta))

    def _apply_color(self, rgb):
        self.manager.on_color_change_requested(self.note, rgb)

    def _change_font_size(self, delta):
        self.manager.on_font_size_change_requested(self.note, delta)
