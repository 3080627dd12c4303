import logging
import os
import sys
from typing import Final

_LOG_FORMAT: Final[str] = "%(asctime)s [%(levelname)s] %(name)s - %(message)s"
_TRUTHY: Final[frozenset] = frozenset({"1", "true", "yes", "on"})


def configure_logger(name: str, *, verbosity: int = 1) -> logging.Logger:
    """Return a logger for command-line entry points.

    Inside the web process Django's ``LOGGING`` dict owns the handlers, so the
    logger is returned untouched whenever the root logger is already set up.
    ``verbosity`` follows Django's management command convention
    (0 = warnings only, 1 = info, 2+ = debug).
    """

    logger = logging.getLogger(name)

    if os.getenv("LOG_ENABLED", "1").strip().lower() not in _TRUTHY:
        logger.disabled = True
        return logger

    if logger.handlers or logging.getLogger().handlers:
        return logger

    if verbosity <= 0:
        log_level = "WARNING"
    elif verbosity >= 2:
        log_level = "DEBUG"
    else:
        log_level = os.getenv("LOG_LEVEL", "INFO").upper()

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(log_level)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT))

    logger.setLevel(log_level)
    logger.addHandler(handler)
    logger.propagate = False

    return logger
