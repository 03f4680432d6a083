"""In-process publish/subscribe for arbitrary entities."""

from .config import HandlerConfig, get_default_handler_config, load_handler_config, load_handler_config_from_env
from .events import (
    ALL_EVENTS,
    MISSING,
    EntityEvent,
    EventHandler,
    EventHandlerError,
    EventListener,
    EventName,
    EventRegistrationError,
    Evented,
    InvalidEventNameError,
    ListenerExecutionError,
    OnceAction,
    SupportsEvents,
)
from .exceptions import ConfigurationError, EntityEventsError

__version__ = "1.0.0"

__all__ = [
    "ALL_EVENTS",
    "ConfigurationError",
    "EntityEvent",
    "EntityEventsError",
    "EventHandler",
    "EventHandlerError",
    "EventListener",
    "EventName",
    "EventRegistrationError",
    "Evented",
    "HandlerConfig",
    "InvalidEventNameError",
    "ListenerExecutionError",
    "MISSING",
    "OnceAction",
    "SupportsEvents",
    "get_default_handler_config",
    "load_handler_config",
    "load_handler_config_from_env",
]
