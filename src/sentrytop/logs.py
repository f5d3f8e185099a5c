"""Logging setup.

The Textual screen owns the terminal, so while the dashboard runs log
records only go to a file, if one was given.
"""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "WARNING", log_file: str | None = None, stderr: bool = False) -> None:
    """Attach a handler to the ``sentrytop`` logger."""
    logger = logging.getLogger("sentrytop")
    logger.setLevel(level.upper())
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    handler: logging.Handler
    if log_file:
        handler = logging.FileHandler(log_file, encoding="utf-8")
    elif stderr:
        handler = logging.StreamHandler()
    else:
        handler = logging.NullHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
