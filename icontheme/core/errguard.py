# icontheme/core/errguard.py
from __future__ import annotations

import logging
import os
import platform
import sys
import tempfile
import threading
import traceback
from datetime import datetime
from logging.handlers import RotatingFileHandler
from typing import Optional, Union

# ----------- global state -----------
_APP_NAME = "icontheme"
_LOGGER: Optional[logging.Logger] = None
_INSTALLED = False  # idempotence

_FORMAT = "%(asctime)s [%(levelname)s] %(threadName)s %(name)s:%(lineno)d - %(message)s"
_DATEFMT = "%Y-%m-%d %H:%M:%S"


# ----------- utilities -----------
def _default_logs_dir(app_name: str) -> str:
    from .config import _state_dir

    for path in (
        os.path.join(str(_state_dir()), "logs"),
        os.path.join(tempfile.gettempdir(), f"{app_name}_logs"),
    ):
        try:
            os.makedirs(path, exist_ok=True)
            return path
        except OSError:
            continue
    return tempfile.gettempdir()


def _fmt_env() -> str:
    parts = [
        f"Python: {sys.version.split()[0]}",
        f"Platform: {platform.platform()}",
        f"Exe: {sys.executable}",
        f"PID: {os.getpid()}",
        f"Time: {datetime.now().isoformat(timespec='seconds')}",
        f"WD: {os.getcwd()}",
    ]
    return " | ".join(parts)


def _level(level: Union[int, str]) -> int:
    if isinstance(level, int):
        return level
    return getattr(logging, str(level).upper(), logging.INFO)


def _build_logger(app_name: str, logs_dir: Optional[str], verbose: bool, level: Union[int, str]) -> logging.Logger:
    logs_dir = logs_dir or _default_logs_dir(app_name)
    log_path = os.path.join(logs_dir, f"{app_name}.log")

    logger = logging.getLogger(app_name)
    logger.setLevel(logging.DEBUG if verbose else _level(level))

    # avoid duplicate handlers on reinstall
    if not any(isinstance(h, RotatingFileHandler) and getattr(h, "_it_path", None) == log_path
               for h in logger.handlers):
        try:
            os.makedirs(logs_dir, exist_ok=True)
            fh = RotatingFileHandler(log_path, maxBytes=2_000_000, backupCount=5, encoding="utf-8")
        except OSError as exc:
            sys.stderr.write(f"File logging disabled ({log_path}): {exc}\n")
        else:
            fh._it_path = log_path  # marker
            fh.setFormatter(logging.Formatter(_FORMAT, datefmt=_DATEFMT))
            logger.addHandler(fh)

    if not any(isinstance(h, logging.StreamHandler) and getattr(h, "_it_stderr", False)
               for h in logger.handlers):
        sh = logging.StreamHandler(sys.stderr)
        sh._it_stderr = True
        sh.setFormatter(logging.Formatter(_FORMAT, datefmt=_DATEFMT))
        sh.setLevel(logging.DEBUG if verbose else logging.INFO)
        logger.addHandler(sh)

    logger.debug("Logger ready at %s", log_path)
    return logger


# ----------- error hooks -----------
def _sys_excepthook(exc_type, exc, tb) -> None:
    msg = "".join(traceback.format_exception(exc_type, exc, tb))
    if _LOGGER:
        _LOGGER.critical("Uncaught exception\nENV: %s\n%s", _fmt_env(), msg)
    else:
        sys.__excepthook__(exc_type, exc, tb)


def _thread_excepthook(args: threading.ExceptHookArgs) -> None:
    msg = "".join(traceback.format_exception(args.exc_type, args.exc_value, args.exc_traceback))
    if _LOGGER:
        thread_name = args.thread.name if args.thread else "?"
        _LOGGER.critical("Exception in thread '%s'\n%s", thread_name, msg)


# ----------- public API -----------
def install_error_guard(
    app_name: str = "icontheme",
    logs_dir: Optional[str] = None,
    verbose: bool = False,
    level: Union[int, str] = logging.INFO,
) -> logging.Logger:
    """
    Configure the package logger and install the exception hooks.
    Idempotent: calling it again only returns the existing logger.
    """
    global _INSTALLED, _LOGGER, _APP_NAME
    _APP_NAME = app_name

    if _LOGGER is None:
        _LOGGER = _build_logger(app_name, logs_dir, verbose, level)

    if not _INSTALLED:
        sys.excepthook = _sys_excepthook
        threading.excepthook = _thread_excepthook
        _INSTALLED = True
        _LOGGER.debug("Error guard installed. %s", _fmt_env())
    else:
        _LOGGER.debug("Error guard already installed; skipping.")

    return _LOGGER


def on_exit_flush() -> None:
    """Flush and close handlers before the process exits."""
    logging.shutdown()


def log(msg: str, level: int = logging.INFO) -> None:
    get_logger().log(level, msg)


def get_logger() -> logging.Logger:
    if _LOGGER is None:
        # lazy init so early messages are not lost
        return install_error_guard(_APP_NAME, None, verbose=False)
    return _LOGGER
