"""Logging set-up for the ``curvetone`` logger tree.

Console output goes through rich on stderr; every record at DEBUG and above
is also appended to ``curvetone.log`` under :func:`get_log_dir`.
"""

from __future__ import annotations

import logging
import os
import traceback
from datetime import datetime
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

LOG_DIR_ENV = "CURVETONE_LOG_DIR"
DEBUG_ENV = "CURVETONE_DEBUG"
LOG_FILE = "curvetone.log"

_LOGGER = logging.getLogger("curvetone.logging")
_FILE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def debug_enabled() -> bool:
    return bool(os.environ.get(DEBUG_ENV))


def get_log_dir() -> Path:
    configured = os.environ.get(LOG_DIR_ENV)
    if configured:
        return Path(configured).expanduser()
    return Path.home() / ".cache" / "curvetone" / "logs"


def get_log_path() -> Path:
    return get_log_dir() / LOG_FILE


def _console_handler() -> logging.Handler:
    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        show_time=False,
        rich_tracebacks=debug_enabled(),
    )
    handler.setLevel(logging.DEBUG if debug_enabled() else logging.INFO)
    return handler


def _file_handler() -> logging.Handler | None:
    try:
        get_log_dir().mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(get_log_path(), encoding="utf-8")
    except OSError as exc:
        _LOGGER.warning("Failed to configure file logging: %s", exc)
        return None
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(_FILE_FORMAT))
    return handler


def configure_logging(*, force: bool = False) -> None:
    """Attach curvetone's handlers once; ``force`` replaces them.

    The console handler is skipped when the host application already
    configured the root logger, so records are not printed twice.
    """

    logger = logging.getLogger("curvetone")
    if logger.handlers and not force:
        return
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    logger.setLevel(logging.DEBUG)
    if force or not logging.getLogger().handlers:
        logger.addHandler(_console_handler())
    file_handler = _file_handler()
    if file_handler is not None:
        logger.addHandler(file_handler)


def log_exception(context: str, exc: BaseException) -> Path | None:
    """Append ``exc`` with its traceback to the log file and return the file path."""

    path = get_log_path()
    entry = "".join(
        [
            f"[{datetime.now().isoformat()}] {context} failed: {type(exc).__name__}: {exc}\n",
            *traceback.format_exception(type(exc), exc, exc.__traceback__),
            "\n",
        ]
    )
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("a", encoding="utf-8") as handle:
            handle.write(entry)
    except OSError as log_exc:
        _LOGGER.warning("Failed to write log file %s: %s", path, log_exc)
        return None
    return path
