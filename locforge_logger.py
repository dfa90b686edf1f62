# -*- coding: utf-8 -*-
"""
LocForge central logging module.

Provides the standard logging configuration for the whole application.
Log files are stored under ~/.locforge/logs/.

Handlers are only configured on the root 'locforge' logger.
Child loggers propagate to root and do not add handlers themselves.
"""

import logging
from pathlib import Path
from datetime import datetime

# Log directory
LOG_DIR = Path.home() / ".locforge" / "logs"

# Log file name (dated)
LOG_FILE = LOG_DIR / f"locforge_{datetime.now().strftime('%Y%m%d')}.log"

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)-28s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Flag to track if root logger is configured
_root_configured = False


def _configure_root_logger():
    """Configure the root 'locforge' logger with handlers (once only)."""
    global _root_configured
    if _root_configured:
        return

    root_logger = logging.getLogger("locforge")
    root_logger.setLevel(logging.DEBUG)

    # Prevent propagation to Python's root logger to avoid duplicates
    root_logger.propagate = False

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
    root_logger.addHandler(console_handler)

    try:
        LOG_DIR.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(LOG_FILE, encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
        root_logger.addHandler(file_handler)
    except OSError as e:
        # Read-only home (CI, sandboxes): console logging only
        root_logger.warning(f"File logging disabled, cannot write to {LOG_DIR}: {e}")

    _root_configured = True


def set_console_level(level: int) -> None:
    """Change the console handler level (e.g. DEBUG for --debug)."""
    _configure_root_logger()
    for handler in logging.getLogger("locforge").handlers:
        if isinstance(handler, logging.StreamHandler) and not isinstance(handler, logging.FileHandler):
            handler.setLevel(level)


# Main application logger - configure root on module load
_configure_root_logger()
logger = logging.getLogger("locforge")


def get_logger(name: str) -> logging.Logger:
    """
    Return a child logger for a module.

    Child loggers do NOT add handlers - they propagate to the root 'locforge' logger.

    Args:
        name: Module name

    Returns:
        Logger named locforge.{name}
    """
    _configure_root_logger()
    return logging.getLogger(f"locforge.{name}")
