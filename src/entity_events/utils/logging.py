"""Package logger setup driven by handler configuration.

Every module logs through ``logging.getLogger(__name__)`` under the
``entity_events`` namespace. When a :class:`~entity_events.config.HandlerConfig`
carries a ``log_level``, the handler calls :func:`configure_logger` so the
registration and dispatch trail becomes visible without the embedding
application wiring its own handler.
"""

from __future__ import annotations

import logging

PACKAGE_LOGGER = "entity_events"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def resolve_level(level: int | str) -> int:
    """Return the numeric logging level for ``level``.

    Accepts an ``int`` or a level name such as ``"debug"`` in any case.

    Raises:
        ValueError: If ``level`` names no known logging level.
    """

    if isinstance(level, int):
        return level
    numeric = logging.getLevelName(level.strip().upper())
    if not isinstance(numeric, int):
        raise ValueError(f"Unknown logging level: {level!r}")
    return numeric


def configure_logger(level: int | str, name: str = PACKAGE_LOGGER) -> logging.Logger:
    """Set the level of the package logger and give it a stream handler.

    A handler is only added when the logger has none, so applications that
    already route ``entity_events`` records keep their own setup; the level is
    applied either way.
    """

    logger = logging.getLogger(name)
    logger.setLevel(resolve_level(level))

    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)

    return logger


__all__ = ["LOG_FORMAT", "PACKAGE_LOGGER", "configure_logger", "resolve_level"]
