from PyQt6.QtWidgets import QMessageBox


def confirm(parent, title: str, message: str) -> bool:
    """Modal yes/no prompt. Returns True only if the user picked Yes."""
    answer = QMessageBox.question(
        parent, title, message,
        QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No,
        QMessageBox.StandardButton.No,
    )
    return answer == QMessageBox.StandardButton.Yes


def confirm_delete(parent) -> bool:
    return confirm(parent, "Delete note", "Are you sure you want to delete this note?")
