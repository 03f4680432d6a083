"""Event name type and normalisation helpers."""

from __future__ import annotations

from typing import Iterable, NewType

from .invalid_event_name_error import InvalidEventNameError

EventName = NewType("EventName", str)

# Reserved wildcard bucket; its listeners receive every triggered event.
ALL_EVENTS = EventName("all")

EventNames = str | Iterable[str]


def normalize_event_names(names: EventNames) -> tuple[EventName, ...]:
    """Return ``names`` as a tuple of validated event names.

    Args:
        names: A single event name or an iterable of event names.

    Returns:
        The names in the order given. Duplicates are kept.

    Raises:
        InvalidEventNameError: If a name is not a non-empty string, or if
            ``names`` is neither a string nor an iterable.
    """

    if isinstance(names, str):
        candidates: Iterable[object] = (names,)
    else:
        try:
            candidates = tuple(names)
        except TypeError as error:
            raise InvalidEventNameError(
                f"Event names must be a string or an iterable of strings, got {type(names).__name__}"
            ) from error

    normalized = []
    for candidate in candidates:
        if not isinstance(candidate, str) or not candidate:
            raise InvalidEventNameError(f"Event name must be a non-empty string, got {candidate!r}")
        normalized.append(EventName(candidate))
    return tuple(normalized)


__all__ = ["ALL_EVENTS", "EventName", "EventNames", "normalize_event_names"]
