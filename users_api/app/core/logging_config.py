"""
Logging configuration for the Users API.

``setup_logging`` attaches a console handler, and optionally a file
handler, to the root logger.  Modules obtain their loggers with
``logging.getLogger(__name__)`` and never configure handlers
themselves, so calling ``setup_logging`` once at application start is
enough.  Repeated calls (tests, several ``create_app`` invocations)
leave the existing handlers alone.
"""

import logging
from pathlib import Path
from typing import List, Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
PACKAGE_LOGGER = "users_api"


def setup_logging(level: str = "INFO", logfile: Optional[str] = None, debug: bool = False) -> None:
    """Configure logging for the ``users_api`` package.

    The package logger always gets the requested level, so the setting
    takes effect even when a host process (uvicorn, pytest) has
    already configured the root logger.  Handlers are attached to the
    root logger only if it has none yet.

    Parameters
    ----------
    level : str
        Logging level name (e.g. ``"DEBUG"``, ``"INFO"``).  Case
        insensitive; unknown names fall back to ``INFO``.
    logfile : Optional[str]
        Path to a file that receives a copy of every record.  Parent
        directories are created when missing.
    debug : bool
        ``Settings.debug``; forces ``DEBUG`` regardless of ``level``.
    """
    numeric_level = logging.DEBUG if debug else getattr(logging, level.upper(), logging.INFO)
    logging.getLogger(PACKAGE_LOGGER).setLevel(numeric_level)

    root = logging.getLogger()
    if root.handlers:
        return

    root.setLevel(numeric_level)
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if logfile:
        log_path = Path(logfile).resolve()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)
