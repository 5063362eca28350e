import os
from pathlib import Path
from typing import Optional, Tuple

from PyQt6.QtCore import QSettings

from . import config
from .errors import RecordIOError
from .models import parse_color


def _xdg_dir(env_var: str, fallback: Path) -> Path:
    value = os.environ.get(env_var)
    return Path(value) if value else fallback


def get_config_dir() -> Path:
    """Returns the application's config directory."""
    return _xdg_dir('XDG_CONFIG_HOME', Path.home() / ".config") / config.APP_NAME


def get_cache_dir() -> Path:
    """Returns the application's cache directory (log files live here)."""
    return _xdg_dir('XDG_CACHE_HOME', Path.home() / ".cache") / config.APP_NAME


def get_default_notes_dir() -> Path:
    """Returns the default notes-data directory, e.g. ~/.local/share/notes_data."""
    return _xdg_dir('XDG_DATA_HOME', Path.home() / ".local" / "share") / config.NOTES_DIR_NAME


def get_settings_file() -> Path:
    """Returns the path to the settings.ini file."""
    return get_config_dir() / config.SETTINGS_FILE_NAME


def get_qsettings() -> QSettings:
    """Returns a QSettings instance bound to <config dir>/settings.ini."""
    return QSettings(str(get_settings_file()), QSettings.Format.IniFormat)


def ensure_data_dir(path: Path) -> Path:
    """Creates the notes-data directory if it is missing.

    Raises RecordIOError if the path exists but is not a directory, or
    cannot be created.
    """
    if path.exists() and not path.is_dir():
        raise RecordIOError(f"Notes path exists but is not a directory: {path}")
    try:
        path.mkdir(mode=config.NOTES_DIR_MODE, parents=True, exist_ok=True)
    except OSError as e:
        raise RecordIOError(f"Could not create notes directory {path}: {e}") from e
    return path


# --- Global Settings Accessors ---

def get_notes_dir() -> Path:
    settings = get_qsettings()
    value = settings.value(config.SETTINGS_KEY_DATA_DIR, "", type=str)
    return Path(value).expanduser() if value else get_default_notes_dir()


def set_notes_dir(path: Optional[Path]):
    settings = get_qsettings()
    if path is None:
        settings.remove(config.SETTINGS_KEY_DATA_DIR)
    else:
        settings.setValue(config.SETTINGS_KEY_DATA_DIR, str(path))
    settings.sync() # Ensure it's written to disk


def get_default_color() -> Tuple[int, int, int]:
    settings = get_qsettings()
    fallback = ",".join(str(c) for c in config.DEFAULT_NOTE_COLOR)
    value = settings.value(config.SETTINGS_KEY_DEFAULT_COLOR, fallback, type=str)
    try:
        return parse_color(value)
    except ValueError:
        return config.DEFAULT_NOTE_COLOR


def set_default_color(rgb: Tuple[int, int, int]):
    settings = get_qsettings()
    settings.setValue(config.SETTINGS_KEY_DEFAULT_COLOR, ",".join(str(int(c)) for c in rgb))
    settings.sync()


def get_default_font_size() -> int:
    settings = get_qsettings()
    size = settings.value(config.SETTINGS_KEY_DEFAULT_FONT_SIZE, config.DEFAULT_FONT_SIZE, type=int)
    return size if size > config.MIN_FONT_SIZE_EXCLUSIVE else config.DEFAULT_FONT_SIZE


def set_default_font_size(size: int):
    settings = get_qsettings()
    settings.setValue(config.SETTINGS_KEY_DEFAULT_FONT_SIZE, int(size))
    settings.sync()


def get_show_on_startup() -> bool:
    settings = get_qsettings()
    return settings.value(config.SETTINGS_KEY_SHOW_ON_STARTUP, True, type=bool)


def set_show_on_startup(show: bool):
    settings = get_qsettings()
    settings.setValue(config.SETTINGS_KEY_SHOW_ON_STARTUP, bool(show))
    settings.sync()
