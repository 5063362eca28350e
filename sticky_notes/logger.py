import sys
from pathlib import Path
from typing import Optional

from loguru import logger as _logger

from . import config
from .utils import get_cache_dir

_LOG_INITIALISED = False


def configure(log_path: Optional[Path] = None) -> None:
    """Sets up the loguru sinks once per process: stderr at INFO, a rotating file at DEBUG."""
    global _LOG_INITIALISED
    if _LOG_INITIALISED:
        return
    target = log_path or (get_cache_dir() / config.LOG_FILE_NAME)

    _logger.remove()
    if sys.stderr is not None:
        _logger.add(sys.stderr, level="INFO")
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        _logger.add(
            target,
            level="DEBUG",
            rotation="1 MB",
            retention=3,
            encoding="utf-8",
            backtrace=True,
            diagnose=False,
        )
    except OSError as e:
        _logger.warning(f"Log file {target} unavailable, logging to stderr only: {e}")
    _LOG_INITIALISED = True


def get_logger():
    """Return the shared logger instance."""
    configure()
    return _logger
