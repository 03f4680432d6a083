"""Event dispatch infrastructure with single-class modules."""

from .entity_event import MISSING, EntityEvent
from .event_handler import ALIASED_METHODS, EventHandler
from .event_handler_error import EventHandlerError
from .event_listener import EventListener
from .event_name import ALL_EVENTS, EventName, EventNames, normalize_event_names
from .event_registration_error import EventRegistrationError
from .evented import Evented, SupportsEvents
from .invalid_event_name_error import InvalidEventNameError
from .listener_execution_error import ListenerExecutionError
from .once_action import OnceAction

__all__ = [
    "ALIASED_METHODS",
    "ALL_EVENTS",
    "EntityEvent",
    "EventHandler",
    "EventHandlerError",
    "EventListener",
    "EventName",
    "EventNames",
    "EventRegistrationError",
    "Evented",
    "InvalidEventNameError",
    "ListenerExecutionError",
    "MISSING",
    "OnceAction",
    "SupportsEvents",
    "normalize_event_names",
]
