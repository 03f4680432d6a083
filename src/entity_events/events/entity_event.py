"""Event record passed to listeners during dispatch."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Mapping, Optional

from .event_name import EventName

if TYPE_CHECKING:  # pragma: no cover - typing only
    from .event_handler import EventHandler
    from .event_listener import EventListener


class _Missing:
    """Sentinel type returned by :meth:`EntityEvent.get_data` for absent keys."""

    _instance: Optional["_Missing"] = None

    def __new__(cls) -> "_Missing":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()


class EntityEvent:
    """One occurrence of a named event raised by a handler.

    A record is created per event name on every trigger and shared by all
    listeners invoked for it. Listeners read the payload through
    :meth:`get_data` and may halt the remaining fan-out with
    :meth:`stop_propagation`.

    Attributes:
        data: Payload mapping. Non-mapping payloads are replaced with an
            empty dict.
        errors: Listener failures recorded while dispatching under error
            isolation, as ``(listener, exception)`` pairs.
    """

    def __init__(self, event_name: EventName, handler: "EventHandler", data: Any = None) -> None:
        self._event_name = event_name
        self._handler = handler
        self.data: Mapping[str, Any] = data if isinstance(data, Mapping) else {}
        self._propagating = True
        self._listener: Optional["EventListener"] = None
        self.errors: list[tuple["EventListener", Exception]] = []

    @property
    def event_name(self) -> EventName:
        return self._event_name

    @property
    def handler(self) -> "EventHandler":
        return self._handler

    @property
    def propagating(self) -> bool:
        return self._propagating

    @property
    def listener(self) -> Optional["EventListener"]:
        """Listener whose action is currently running, if any."""

        return self._listener

    @property
    def context(self) -> Any:
        """Context of the listener currently running, or ``None`` between calls."""

        return self._listener.context if self._listener is not None else None

    def get_event(self) -> EventName:
        return self._event_name

    def get_handler(self) -> "EventHandler":
        return self._handler

    def get_entity(self) -> Any:
        return self._handler.get_entity()

    def get_data(self, key: str, default: Any = MISSING) -> Any:
        """Return the payload value stored under ``key``.

        Args:
            key: Payload key to look up.
            default: Value returned when the key is absent. Defaults to the
                :data:`MISSING` sentinel so an absent key can be told apart
                from a key holding ``None``.
        """

        if key in self.data:
            return self.data[key]
        return default

    def stop_propagation(self) -> None:
        """Prevent listeners later in this record's fan-out from running."""

        self._propagating = False

    def is_propagating(self) -> bool:
        return self._propagating

    @property
    def has_errors(self) -> bool:
        """Return whether any listener raised while this record was dispatched."""

        return bool(self.errors)

    def _enter_listener(self, listener: Optional["EventListener"]) -> Optional["EventListener"]:
        previous = self._listener
        self._listener = listener
        return previous

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(event_name={self._event_name!r}, data={self.data!r}, "
            f"propagating={self._propagating!r})"
        )


__all__ = ["EntityEvent", "MISSING"]
