"""Responsibility: Configure and expose the shared file-backed project logger."""

import logging  # Python logging framework for structured file logs.
import os  # Apply restrictive file permissions to log output.

from .config import LOG_LEVEL, LOG_PATH  # Central path and level for project logs.


def setup_logger() -> logging.Logger:
    logger = logging.getLogger("ffcapture")
    logger.setLevel(getattr(logging, LOG_LEVEL, logging.INFO))
    if logger.handlers:
        return logger

    try:
        LOG_PATH.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(LOG_PATH)
    except OSError:
        # Read-only home or sandboxed runner: keep the library importable.
        handler = logging.NullHandler()
    formatter = logging.Formatter("%(asctime)s %(levelname)s %(message)s")
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    if isinstance(handler, logging.FileHandler):
        try:
            os.chmod(LOG_PATH, 0o600)
        except OSError as exc:
            logger.debug("Could not chmod log path=%s err=%s", LOG_PATH, exc)
    return logger


LOGGER = setup_logger()
