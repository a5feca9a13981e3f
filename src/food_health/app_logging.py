"""Logging configuration helpers."""

import logging

_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Attach one stream handler to the food_health logger.

    Repeated calls only update the level.
    """
    logger = logging.getLogger("food_health")
    logger.setLevel(level.upper())
    if any(getattr(handler, "_food_health", False) for handler in logger.handlers):
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(_FORMAT))
    handler._food_health = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    logger.propagate = False
