"""
Core exceptions for entity-events.

This module defines the base exception class shared by every part of the
package along with the configuration error raised while loading handler
settings. Event dispatch errors live beside the dispatch code in
:mod:`entity_events.events` and derive from :class:`EntityEventsError`.
"""

import logging
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class EntityEventsError(Exception):
    """Base exception class for all entity-events errors."""

    def __init__(self, message: str, error_code: Optional[str] = None, context: Optional[Dict[str, Any]] = None):
        """
        Initialize an entity-events error.

        Args:
            message: Human-readable error message
            error_code: Optional error code for programmatic handling
            context: Optional context information for debugging
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.context = context or {}

        logger.debug("%s: %s", type(self).__name__, message, extra={
            "error_code": error_code,
            "error_context": self.context,
        })


class ConfigurationError(EntityEventsError):
    """Raised when handler configuration cannot be loaded or validated."""

    def __init__(self, message: str, source: Optional[str] = None):
        """
        Initialize a configuration error.

        Args:
            message: Description of the problem
            source: Optional file path or environment variable that was being read
        """
        self.source = source
        super().__init__(
            message,
            error_code="CONFIGURATION_ERROR",
            context={"source": source} if source else None,
        )


__all__ = ["ConfigurationError", "EntityEventsError"]
