"""Logging configuration helpers."""

import logging

# httpx logs every request line at INFO.
_NOISY_LOGGERS = ("httpx", "httpcore")


def configure_logging(level: int | str = logging.INFO) -> None:
    """Configure the ``food_scanner`` logger with a single stream handler.

    Safe to call more than once; later calls only change the level.
    """
    logger = logging.getLogger("food_scanner")
    logger.setLevel(level.upper() if isinstance(level, str) else level)
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    if logger.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s: %(name)s: %(message)s")
    )
    logger.addHandler(handler)
    logger.propagate = False
