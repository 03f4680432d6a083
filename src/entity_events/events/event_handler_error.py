"""Base exception hierarchy for the dispatch subsystem.

Every failure raised by the listener registry or the dispatch engine derives
from :class:`EventHandlerError`, which in turn derives from the package-wide
:class:`~entity_events.exceptions.EntityEventsError`. Keeping the base class
in its own module lets the derived exceptions import it without circular
dependencies.
"""

from entity_events.exceptions import EntityEventsError


class EventHandlerError(EntityEventsError):
    """Base exception for failures within the event handler infrastructure.

    The exception acts as a marker so callers can catch dispatch problems
    without masking unrelated runtime errors.
    """


__all__ = ["EventHandlerError"]
