"""Exception module for malformed event names."""

from .event_handler_error import EventHandlerError


class InvalidEventNameError(EventHandlerError):
    """Raised when an event name is not a non-empty string.

    Names that were simply never registered are not invalid; they resolve to
    an empty listener set.
    """


__all__ = ["InvalidEventNameError"]
