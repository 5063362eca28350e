import sys

from PyQt6.QtGui import QAction, QIcon
from PyQt6.QtWidgets import QApplication, QMenu, QSystemTrayIcon

from . import config, utils
from .errors import RecordIOError
from .logger import configure as configure_logging, get_logger
from .manager import NotesManager
from .models import Bounds
from .note_store import NoteStore
from .note_widget import NoteWidget, screen_work_area

logger = get_logger()


class StickyNotesApp:
    """Entry points for the notes: activate() at startup, deactivate() at shutdown."""

    def __init__(self, notes_dir=None, view_factory=NoteWidget, use_tray=True):
        self.notes_dir = notes_dir
        self.view_factory = view_factory
        self.use_tray = use_tray
        self.manager = None
        self.tray_icon = None

    def activate(self):
        notes_dir = self.notes_dir or utils.get_notes_dir()
        try:
            utils.ensure_data_dir(notes_dir)
        except RecordIOError as e:
            logger.error(f"Error creating notes directory: {e}")

        area = screen_work_area()
        store = NoteStore(notes_dir, Bounds(area.width(), area.height()))
        self.manager = NotesManager(
            store,
            view_factory=self.view_factory,
            notifier=self.notify,
            default_color=utils.get_default_color(),
            default_font_size=utils.get_default_font_size(),
        )
        if self.use_tray:
            self._init_tray_icon()

        self.manager.load_all()
        if utils.get_show_on_startup():
            self.manager.show_all()
            logger.info("Showing notes on startup")
        else:
            self.manager.only_hide()
        logger.info(f"{config.APP_DISPLAY_NAME} activated with {len(self.manager)} notes in {notes_dir}")

    def deactivate(self):
        if self.manager is not None:
            self.manager.only_hide()
            self.manager.destroy()
            self.manager.deleteLater()
            self.manager = None

        if self.tray_icon is not None:
            self.tray_icon.hide()
            self.tray_icon.deleteLater()
            self.tray_icon = None
        logger.info(f"{config.APP_DISPLAY_NAME} deactivated")

    def _init_tray_icon(self):
        """Panel button: left click toggles all notes."""
        if not QSystemTrayIcon.isSystemTrayAvailable():
            logger.warning("No system tray available, notes toggle button disabled")
            return
        self.tray_icon = QSystemTrayIcon(QIcon.fromTheme("document-edit-symbolic"))
        self.tray_icon.setToolTip("Show notes")
        self.tray_icon.activated.connect(self._on_tray_activated)

        menu = QMenu()
        new_action = QAction("New note", menu)
        new_action.triggered.connect(lambda: self.manager.on_create_requested())
        toggle_action = QAction("Show/Hide notes", menu)
        toggle_action.triggered.connect(lambda: self.manager.on_toggle_visibility_requested())
        quit_action = QAction("Quit", menu)
        quit_action.triggered.connect(QApplication.quit)
        for action in (new_action, toggle_action, quit_action):
            menu.addAction(action)
        self._tray_menu = menu
        self.tray_icon.setContextMenu(menu)
        self.tray_icon.show()

    def _on_tray_activated(self, reason):
        if reason == QSystemTrayIcon.ActivationReason.Trigger and self.manager is not None:
            self.manager.on_toggle_visibility_requested()

    def notify(self, message: str):
        """User-visible notification (tray balloon when available)."""
        logger.warning(message)
        if self.tray_icon is not None:
            self.tray_icon.showMessage(config.APP_DISPLAY_NAME, message,
                                       QSystemTrayIcon.MessageIcon.Warning)


def main():
    configure_logging()
    qt_app = QApplication(sys.argv)
    qt_app.setApplicationName(config.APP_NAME)
    qt_app.setQuitOnLastWindowClosed(False) # Notes live in the tray

    notes_app = StickyNotesApp()
    notes_app.activate()
    qt_app.aboutToQuit.connect(notes_app.deactivate)
    sys.exit(qt_app.exec())


if __name__ == "__main__":
    main()
