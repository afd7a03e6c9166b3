"""
Logging configuration for the subscription tracker.

``setup_logging`` configures the root logger once per process with a
console handler and an optional file handler.  Request access logs
from uvicorn are noisy during development, so they are lowered to
``WARNING`` unless debug mode is on.
"""

import logging
from pathlib import Path
from typing import Iterable, Optional


LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

NOISY_LOGGERS = ("uvicorn.access",)


def setup_logging(
    level: str = "INFO",
    logfile: Optional[str] = None,
    *,
    debug: bool = False,
    noisy_loggers: Iterable[str] = NOISY_LOGGERS,
) -> None:
    """Configure the root logger.

    Parameters
    ----------
    level : str
        Logging level name (e.g. ``"DEBUG"``, ``"INFO"``).  Case
        insensitive; unknown names fall back to ``INFO``.
    logfile : Optional[str]
        Path of a file that receives a copy of every record.  Resolved
        relative to the current working directory.
    debug : bool
        When true, ``noisy_loggers`` keep the root level instead of
        being raised to ``WARNING``.
    noisy_loggers : Iterable[str]
        Logger names to quieten outside debug mode.
    """
    root = logging.getLogger()
    if root.handlers:
        # Already configured (test runner, repeated ``create_app``).
        return

    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    root.addHandler(console_handler)

    if logfile:
        file_handler = logging.FileHandler(Path(logfile).resolve(), encoding="utf-8")
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    if not debug:
        for name in noisy_loggers:
            logging.getLogger(name).setLevel(logging.WARNING)
