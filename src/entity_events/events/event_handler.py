"""Listener registry and dispatch engine for one entity."""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, Optional, TypeVar

from entity_events.config import HandlerConfig, get_default_handler_config
from entity_events.utils.logging import configure_logger

from .entity_event import EntityEvent
from .event_handler_error import EventHandlerError
from .event_listener import EventListener
from .event_name import ALL_EVENTS, EventName, EventNames, normalize_event_names
from .event_registration_error import EventRegistrationError
from .invalid_event_name_error import InvalidEventNameError
from .listener_execution_error import ListenerExecutionError
from .once_action import OnceAction

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

ALIASED_METHODS = ("on", "once", "off", "trigger")


class EventHandler:
    """Publish-subscribe registry attached to an arbitrary entity.

    Listeners are kept in buckets keyed by event name. Triggering an event
    dispatches one :class:`EntityEvent` to the event's bucket and then to the
    wildcard ``all`` bucket, in registration order, until a listener stops
    its propagation.

    Args:
        entity: Object the handler instruments. The handler returns it from
            every fluent call and, unless disabled, installs delegating
            ``on``/``once``/``off``/``trigger`` methods on it.
        events: Optional event names to declare up front. Buckets are created
            lazily regardless.
        config: Handler configuration. Defaults to
            :func:`~entity_events.config.get_default_handler_config`.
    """

    def __init__(
        self,
        entity: Any,
        events: Optional[EventNames] = None,
        config: Optional[HandlerConfig] = None,
    ) -> None:
        self.entity = entity
        self.config = config or get_default_handler_config()
        if self.config.log_level is not None:
            configure_logger(self.config.log_level)
        self.listeners: dict[EventName, list[EventListener]] = {ALL_EVENTS: []}

        declared = list(normalize_event_names(self.config.declared_events))
        if events is not None:
            declared.extend(normalize_event_names(events))
        for name in declared:
            self.listeners.setdefault(name, [])

        if self.config.alias_entity:
            self.alias()

    def get_entity(self) -> Any:
        return self.entity

    def alias(self) -> None:
        """Install delegating ``on``, ``once``, ``off`` and ``trigger`` on the entity.

        Entities built on :class:`~entity_events.events.evented.Evented`
        already delegate explicitly and are left untouched.

        Raises:
            EventHandlerError: If the entity does not accept new attributes.
        """

        from .evented import Evented

        if isinstance(self.entity, Evented):
            return

        for method_name in ALIASED_METHODS:
            try:
                setattr(self.entity, method_name, getattr(self, method_name))
            except (AttributeError, TypeError) as error:
                raise EventHandlerError(
                    f"Cannot alias '{method_name}' onto {type(self.entity).__name__}: {error}",
                    error_code="ALIAS_FAILED",
                ) from error

        logger.debug("Aliased event methods onto %s", type(self.entity).__name__)

    def on(self, event_names: EventNames, action: Callable[[EntityEvent], Any], context: Any = None) -> Any:
        """Add a listener to the entity for the specified events.

        Args:
            event_names: Event name or iterable of names to listen to.
            action: Callable invoked with the dispatched :class:`EntityEvent`.
            context: Subscriber the action runs on behalf of. Defaults to the
                entity.

        Returns:
            The entity the handler is attached to.

        Raises:
            EventRegistrationError: If ``action`` is not callable.
            InvalidEventNameError: If an event name is not a non-empty string.
        """

        names = normalize_event_names(event_names)
        self._ensure_callable(action)
        for name in names:
            self._register(name, action, context)
        return self.entity

    def once(self, event_names: EventNames, action: Callable[[EntityEvent], Any], context: Any = None) -> Any:
        """Add a listener that fires at most once across all the given events.

        The registered action is an :class:`OnceAction` which removes itself
        from every named bucket before calling ``action``. Passing the
        original ``action`` to :meth:`off` still removes it.

        Returns:
            The entity the handler is attached to.
        """

        names = normalize_event_names(event_names)
        self._ensure_callable(action)
        wrapper = OnceAction(self, names, action)
        for name in names:
            self._register(name, wrapper, context)
        return self.entity

    def off(
        self,
        event_names: Optional[EventNames] = None,
        action: Optional[Callable[..., Any]] = None,
        context: Any = None,
    ) -> Any:
        """Remove listeners matching the provided criteria.

        With no arguments every bucket, ``all`` included, is emptied. With
        only ``action`` and/or ``context`` every bucket is filtered. With only
        event names the named buckets are emptied. With names and criteria
        the named buckets are filtered. A listener is removed only when it
        matches every criterion given.

        Returns:
            The entity the handler is attached to.
        """

        has_criteria = action is not None or context is not None

        if event_names is None:
            if not has_criteria:
                self.clear()
            else:
                for name in list(self.listeners):
                    self._retain_unmatched(name, action, context)
            return self.entity

        for name in normalize_event_names(event_names):
            if name not in self.listeners:
                continue
            if has_criteria:
                self._retain_unmatched(name, action, context)
            else:
                self.listeners[name] = []
                logger.debug("Cleared listeners for '%s'", name)
        return self.entity

    def trigger(self, event_names: EventNames, data: Any = None) -> Any:
        """Trigger all listeners for the provided events.

        Args:
            event_names: Event name or iterable of names to trigger.
            data: Payload mapping exposed through :meth:`EntityEvent.get_data`.

        Returns:
            The entity the handler is attached to.

        Raises:
            ListenerExecutionError: If a listener raises while error isolation
                is disabled.
        """

        self.emit(event_names, data)
        return self.entity

    def emit(self, event_names: EventNames, data: Any = None) -> list[EntityEvent]:
        """Dispatch the provided events and return their records.

        Behaves like :meth:`trigger` but hands back one :class:`EntityEvent`
        per event name so callers can inspect recorded listener errors and
        whether propagation was stopped.
        """

        records = []
        for name in normalize_event_names(event_names):
            event = EntityEvent(name, self, data)
            snapshot = tuple(self.listeners.get(name, ())) + tuple(self.listeners[ALL_EVENTS])

            logger.debug("Triggering '%s' for %d listeners", name, len(snapshot))
            self._dispatch(snapshot, event)
            records.append(event)
        return records

    def listen(self, event_names: EventNames, context: Any = None) -> Callable[[F], F]:
        """Return a decorator registering the decorated function with :meth:`on`."""

        def decorator(func: F) -> F:
            self.on(event_names, func, context)
            return func

        return decorator

    def clear(self) -> None:
        """Empty every bucket. Bucket names, ``all`` included, are kept."""

        for name in self.listeners:
            self.listeners[name] = []
        logger.debug("Cleared all listeners on %s", type(self.entity).__name__)

    def listeners_for(self, event_name: str) -> tuple[EventListener, ...]:
        """Return the listeners registered for ``event_name`` in dispatch order."""

        names = normalize_event_names(event_name)
        if len(names) != 1:
            raise InvalidEventNameError(f"Expected exactly one event name, got {len(names)}")
        name = names[0]
        return tuple(self.listeners.get(name, ()))

    def has_listeners(self, event_name: Optional[str] = None) -> bool:
        """Return whether ``event_name`` (or any event when omitted) has listeners."""

        if event_name is None:
            return any(self.listeners.values())
        return bool(self.listeners_for(event_name))

    def event_names(self) -> tuple[EventName, ...]:
        """Return every event name that currently has a bucket."""

        return tuple(self.listeners)

    def _register(self, name: EventName, action: Callable[..., Any], context: Any) -> None:
        bucket = self.listeners.setdefault(name, [])
        bucket.append(EventListener(name, self, action, context))
        logger.debug("Registered listener %r for '%s'", action, name)

        threshold = self.config.warn_listener_count
        if threshold is not None and len(bucket) == threshold + 1:
            logger.warning(
                "Event '%s' on %s has more than %d listeners; listeners may be leaking",
                name,
                type(self.entity).__name__,
                threshold,
            )

    def _retain_unmatched(self, name: EventName, action: Optional[Callable[..., Any]], context: Any) -> None:
        bucket = self.listeners[name]
        retained = [listener for listener in bucket if not listener.matches(action, context)]
        if len(retained) != len(bucket):
            logger.debug("Removed %d listeners from '%s'", len(bucket) - len(retained), name)
        self.listeners[name] = retained

    def _dispatch(self, listeners: Iterable[EventListener], event: EntityEvent) -> None:
        for listener in listeners:
            if not event.is_propagating():
                logger.debug("Propagation of '%s' stopped before %r", event.event_name, listener)
                break

            try:
                listener.trigger(event)
            except Exception as error:
                if not self.config.isolate_errors:
                    # Failures from nested triggers are already wrapped.
                    if isinstance(error, ListenerExecutionError):
                        raise
                    raise ListenerExecutionError(
                        f"Error in listener {listener!r} for event '{event.event_name}': {error}",
                        listener,
                        event,
                    ) from error
                self._record_failure(listener, event, error)

    @staticmethod
    def _ensure_callable(action: Any) -> None:
        if not callable(action):
            raise EventRegistrationError(
                f"Listener action must be callable, got {type(action).__name__}",
                error_code="ACTION_NOT_CALLABLE",
            )

    @staticmethod
    def _record_failure(listener: EventListener, event: EntityEvent, error: Exception) -> None:
        logger.error(
            "Error in listener %r for event '%s': %s",
            listener,
            event.event_name,
            error,
            exc_info=error,
        )
        event.errors.append((listener, error))


__all__ = ["ALIASED_METHODS", "EventHandler"]
