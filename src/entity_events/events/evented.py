"""Explicit delegation of the event interface to an owned handler."""

from __future__ import annotations

from typing import Any, Callable, ClassVar, Optional, Protocol, runtime_checkable

from entity_events.config import HandlerConfig

from .entity_event import EntityEvent
from .event_handler import EventHandler
from .event_name import EventNames


@runtime_checkable
class SupportsEvents(Protocol):
    """Structural type for any entity exposing the event interface."""

    def on(self, event_names: EventNames, action: Callable[[EntityEvent], Any], context: Any = None) -> Any:
        ...  # pragma: no cover - Protocol

    def once(self, event_names: EventNames, action: Callable[[EntityEvent], Any], context: Any = None) -> Any:
        ...  # pragma: no cover - Protocol

    def off(
        self,
        event_names: Optional[EventNames] = None,
        action: Optional[Callable[..., Any]] = None,
        context: Any = None,
    ) -> Any:
        ...  # pragma: no cover - Protocol

    def trigger(self, event_names: EventNames, data: Any = None) -> Any:
        ...  # pragma: no cover - Protocol


class Evented:
    """Mixin giving an entity its own :class:`EventHandler`.

    Subclasses call ``super().__init__()`` (or :meth:`init_events`) and gain
    ``on``, ``once``, ``off`` and ``trigger`` methods that delegate to the
    handler stored on ``self.events``. The handler lives and dies with the
    entity.

    Example::

        class Document(Evented):
            declared_events = ("save", "close")

        doc = Document()
        doc.on("save", lambda event: print(event.get_data("id")))
        doc.trigger("save", {"id": 1})
    """

    declared_events: ClassVar[tuple[str, ...]] = ()
    events: EventHandler

    def __init__(self, *args: Any, event_config: Optional[HandlerConfig] = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.init_events(event_config)

    def init_events(self, config: Optional[HandlerConfig] = None) -> EventHandler:
        """Create the handler for this entity, replacing any existing one."""

        self.events = EventHandler(self, self.declared_events, config)
        return self.events

    def on(self, event_names: EventNames, action: Callable[[EntityEvent], Any], context: Any = None) -> Any:
        return self.events.on(event_names, action, context)

    def once(self, event_names: EventNames, action: Callable[[EntityEvent], Any], context: Any = None) -> Any:
        return self.events.once(event_names, action, context)

    def off(
        self,
        event_names: Optional[EventNames] = None,
        action: Optional[Callable[..., Any]] = None,
        context: Any = None,
    ) -> Any:
        return self.events.off(event_names, action, context)

    def trigger(self, event_names: EventNames, data: Any = None) -> Any:
        return self.events.trigger(event_names, data)


__all__ = ["Evented", "SupportsEvents"]
