"""Exception module for listener execution failures."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .event_handler_error import EventHandlerError

if TYPE_CHECKING:  # pragma: no cover - typing only
    from .entity_event import EntityEvent
    from .event_listener import EventListener


class ListenerExecutionError(EventHandlerError):
    """Raised when a listener fails and error isolation is disabled.

    The exception is chained to the original error raised by the listener's
    action and keeps references to the failing listener and the event record
    being dispatched.
    """

    def __init__(self, message: str, listener: "EventListener", event: "EntityEvent") -> None:
        self.listener = listener
        self.event = event
        context: dict[str, Any] = {"event_name": event.event_name}
        super().__init__(message, error_code="LISTENER_EXECUTION_FAILED", context=context)


__all__ = ["ListenerExecutionError"]
