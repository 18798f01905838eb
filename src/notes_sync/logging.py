from __future__ import annotations

from rich.console import Console
from rich.logging import RichHandler
import logging

ROOT_LOGGER = "notes_sync"

_console = Console()
_err_console = Console(stderr=True)

def get_logger(name: str = ROOT_LOGGER) -> logging.Logger:
    root = logging.getLogger(ROOT_LOGGER)
    if not root.handlers:
        handler = RichHandler(console=_err_console, show_time=True, show_level=True, show_path=False)
        formatter = logging.Formatter("%(message)s")
        handler.setFormatter(formatter)
        root.addHandler(handler)
        root.setLevel(logging.WARNING)
        root.propagate = False
    # module loggers hang off the package logger and share its handler
    return logging.getLogger(name)

def set_level(level: int) -> None:
    get_logger().setLevel(level)

def console() -> Console:
    return _console
