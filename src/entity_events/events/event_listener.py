"""Single subscription of an action to a named event."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Optional

from .event_name import EventName
from .once_action import OnceAction

if TYPE_CHECKING:  # pragma: no cover - typing only
    from .entity_event import EntityEvent
    from .event_handler import EventHandler


class EventListener:
    """Bind an action and its context to one event name of a handler.

    Args:
        event_name: Name of the bucket the listener lives in.
        handler: Handler that owns the listener.
        action: Callable invoked with the :class:`EntityEvent` being
            dispatched.
        context: Subscriber the action runs on behalf of. Defaults to the
            handler's entity. The context is visible to the running action as
            ``event.context`` and is used to select listeners for removal.
    """

    def __init__(
        self,
        event_name: EventName,
        handler: "EventHandler",
        action: Callable[["EntityEvent"], Any],
        context: Any = None,
    ) -> None:
        self.event_name = event_name
        self.handler = handler
        self.action = action
        self.context = context if context is not None else handler.get_entity()
        self.wraps: Optional[Callable[..., Any]] = action.wraps if isinstance(action, OnceAction) else None

    def get_event(self) -> EventName:
        return self.event_name

    def get_handler(self) -> "EventHandler":
        return self.handler

    def get_entity(self) -> Any:
        return self.handler.get_entity()

    def get_action(self) -> Callable[["EntityEvent"], Any]:
        return self.action

    def get_context(self) -> Any:
        return self.context

    def trigger(self, event: "EntityEvent") -> bool:
        """Invoke the action with ``event`` unless its propagation was stopped.

        Returns:
            ``True`` when the action ran, ``False`` when it was skipped.
        """

        if not event.is_propagating():
            return False

        previous = event._enter_listener(self)
        try:
            self.action(event)
        finally:
            event._enter_listener(previous)
        return True

    def matches(self, action: Optional[Callable[..., Any]] = None, context: Any = None) -> bool:
        """Return whether the listener satisfies every given removal criterion.

        Args:
            action: Action to compare against, either the registered action or
                the original action wrapped by a ``once`` registration.
            context: Context to compare against by identity.
        """

        if action is not None and action != self.action and (self.wraps is None or action != self.wraps):
            return False
        if context is not None and context is not self.context:
            return False
        return True

    def __repr__(self) -> str:
        return f"{type(self).__name__}(event_name={self.event_name!r}, action={self.action!r})"


__all__ = ["EventListener"]
