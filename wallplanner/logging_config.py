"""
Logging Configuration

Attaches console (and optionally file) output to the ``wallplanner`` logger
namespace. uvicorn configures its own ``uvicorn`` and ``uvicorn.access``
loggers before the app is imported; those are left alone, and records from
this package do not propagate into them or the root logger.
"""
import logging
import os
import sys
from typing import Mapping, Optional

PACKAGE_LOGGER = "wallplanner"
LEVEL_ENV = "WALLPLANNER_LOG_LEVEL"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%H:%M:%S"

# Handlers created here carry one of these names so a second call can find them
CONSOLE_HANDLER = "wallplanner.console"
FILE_HANDLER = "wallplanner.file"


def level_from_env(environ: Optional[Mapping[str, str]] = None,
                   default: int = logging.INFO) -> int:
    """Level named by WALLPLANNER_LOG_LEVEL (e.g. ``debug``), else ``default``"""
    environ = os.environ if environ is None else environ
    name = environ.get(LEVEL_ENV, "").strip().upper()
    level = getattr(logging, name, None) if name else None
    return level if isinstance(level, int) else default


def _make_handler(handler: logging.Handler, name: str, level: int) -> logging.Handler:
    handler.set_name(name)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    return handler


def setup_logging(level: Optional[int] = None, log_file: Optional[str] = None) -> None:
    """
    Configure the 'wallplanner' logger.

    Safe to call repeatedly (uvicorn --reload re-imports the app): handlers
    from an earlier call are replaced, handlers added by anyone else stay.

    Args:
        level: Logging level; defaults to WALLPLANNER_LOG_LEVEL or INFO.
        log_file: Optional path to also write the log to (truncated).
    """
    if level is None:
        level = level_from_env()

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)
    logger.propagate = False

    for handler in list(logger.handlers):
        if handler.get_name() in (CONSOLE_HANDLER, FILE_HANDLER):
            logger.removeHandler(handler)
            handler.close()

    logger.addHandler(_make_handler(logging.StreamHandler(sys.stdout), CONSOLE_HANDLER, level))
    if log_file:
        file_handler = logging.FileHandler(log_file, mode="w", encoding="utf-8")
        logger.addHandler(_make_handler(file_handler, FILE_HANDLER, level))

    logger.debug("Logging configured at %s", logging.getLevelName(level))
