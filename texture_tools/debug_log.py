"""Opt-in debug log file for the engine and the CLI.

Set ``TEXTURETOOLS_DEBUG`` to any non-empty value to record every
``texture_tools`` DEBUG message in a fresh file each run. The file name comes
from ``TEXTURETOOLS_DEBUG_LOG`` and is resolved against the working directory.
"""
from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Mapping

from .config import ENV_PREFIX

DEBUG_ENV = ENV_PREFIX + "DEBUG"
DEBUG_LOG_ENV = ENV_PREFIX + "DEBUG_LOG"
DEFAULT_LOG_NAME = "texture_tools_debug.log"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

package_logger = logging.getLogger("texture_tools")
_EXCEPTION_HOOK_INSTALLED = False


def debug_log_path(environ: Mapping[str, str] | None = None) -> Path | None:
    """Where the debug log goes, or None when debug logging is off."""

    environ = os.environ if environ is None else environ
    if not environ.get(DEBUG_ENV):
        return None
    path = Path(environ.get(DEBUG_LOG_ENV) or DEFAULT_LOG_NAME)
    return path if path.is_absolute() else Path.cwd() / path


def _attach_file_handler(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(path, mode="w", encoding="utf-8")
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root = logging.getLogger()
    # one debug file per process, the newest wins
    for stale in [h for h in root.handlers if isinstance(h, logging.FileHandler)]:
        root.removeHandler(stale)
        stale.close()
    root.addHandler(handler)
    root.setLevel(logging.DEBUG)


def _log_uncaught_exceptions() -> None:
    global _EXCEPTION_HOOK_INSTALLED
    if _EXCEPTION_HOOK_INSTALLED:
        return
    chained = sys.excepthook

    def hook(exc_type, exc_value, exc_traceback):
        package_logger.error("Uncaught exception", exc_info=(exc_type, exc_value, exc_traceback))
        chained(exc_type, exc_value, exc_traceback)

    sys.excepthook = hook
    _EXCEPTION_HOOK_INSTALLED = True


def setup_debug_logging() -> Path | None:
    path = debug_log_path()
    if path is None:
        if not any(isinstance(h, logging.NullHandler) for h in package_logger.handlers):
            package_logger.addHandler(logging.NullHandler())
        return None
    _attach_file_handler(path)
    _log_uncaught_exceptions()
    package_logger.info("TextureTools debug logging enabled at %s", path)
    return path
