"""Self-removing action wrapper used by ``once`` registrations."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable

from .event_name import EventName

if TYPE_CHECKING:  # pragma: no cover - typing only
    from .entity_event import EntityEvent
    from .event_handler import EventHandler


class OnceAction:
    """Wrap an action so it runs at most once.

    On its first call the wrapper removes itself from every bucket it was
    registered in and only then invokes the wrapped action, so an action that
    re-triggers its own event cannot reach itself again. A wrapper that has
    already fired ignores further calls, which covers copies of it still
    sitting in a dispatch snapshot taken before the removal.

    Attributes:
        wraps: The original action, used when matching removal criteria.
    """

    def __init__(
        self,
        handler: "EventHandler",
        event_names: tuple[EventName, ...],
        action: Callable[["EntityEvent"], Any],
    ) -> None:
        self.handler = handler
        self.event_names = event_names
        self.wraps = action
        self.fired = False

    def __call__(self, event: "EntityEvent") -> Any:
        if self.fired:
            return None
        self.fired = True
        self.handler.off(self.event_names, self)
        return self.wraps(event)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.wraps!r}, event_names={self.event_names!r})"


__all__ = ["OnceAction"]
