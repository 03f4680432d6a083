"""Shared utilities for entity-events."""

from .logging import configure_logger, resolve_level

__all__ = ["configure_logger", "resolve_level"]
