"""Exception module for listener registration failures."""

from .event_handler_error import EventHandlerError


class EventRegistrationError(EventHandlerError):
    """Raised when a listener cannot be registered with a handler.

    The exception surfaces eagerly from ``on`` and ``once`` when the supplied
    action is not callable, so the mistake never reaches trigger time.
    """


__all__ = ["EventRegistrationError"]
