"""Logging setup for the service and its HTTP and storage clients."""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# Client libraries log every request at INFO; keep them to warnings.
QUIET_LOGGERS = ("httpx", "httpcore", "google", "urllib3")


def configure_logging(level: str = "INFO") -> None:
    """Attach one stream handler to the ``around`` logger and set its level.

    Calling it again only updates the level. An unknown level name raises
    ``ValueError``.
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        raise ValueError(f"Unknown log level: {level}")
    logger = logging.getLogger("around")
    logger.setLevel(numeric_level)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric_level, logging.WARNING))
    if logger.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False
