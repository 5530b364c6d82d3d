"""
Logging setup for the catalog service.

Records go to stderr and, when ``LOG_FILE`` is set, to a size-rotated
file next to it.  uvicorn's own loggers are routed through the same
handlers so request lines and application messages share one format.
"""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import List, Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Loggers uvicorn configures for itself; cleared so they propagate to root
SERVER_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


def resolve_level(name: str) -> int:
    """Map a level name such as ``"debug"`` to its numeric value.

    Unknown names resolve to ``logging.INFO``.
    """
    level = logging.getLevelName(str(name).strip().upper())
    return level if isinstance(level, int) else logging.INFO


def build_handlers(
    logfile: Optional[str] = None,
    max_bytes: int = 0,
    backup_count: int = 0,
) -> List[logging.Handler]:
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if logfile:
        path = Path(logfile).resolve()
        path.parent.mkdir(parents=True, exist_ok=True)
        # max_bytes == 0 never rolls over
        handlers.append(
            RotatingFileHandler(path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8")
        )
    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def setup_logging(
    level: str = "INFO",
    logfile: Optional[str] = None,
    max_bytes: int = 0,
    backup_count: int = 0,
) -> bool:
    """Configure the root logger once per process.

    Parameters
    ----------
    level : str
        Level name, case insensitive.
    logfile : Optional[str]
        File to write to in addition to stderr.  Parent directories
        are created when missing.
    max_bytes, backup_count : int
        Rotation settings for the file handler.

    Returns
    -------
    bool
        ``False`` when the root logger already had handlers and nothing
        was changed.
    """
    root = logging.getLogger()
    if root.handlers:
        return False

    root.setLevel(resolve_level(level))
    for handler in build_handlers(logfile, max_bytes, backup_count):
        root.addHandler(handler)

    for name in SERVER_LOGGERS:
        server_logger = logging.getLogger(name)
        server_logger.handlers.clear()
        server_logger.propagate = True
    return True
