import logging
from types import SimpleNamespace
from typing import Any, List

import pytest

from entity_events.config import HandlerConfig
from entity_events.events import (
    ALL_EVENTS,
    EntityEvent,
    EventHandler,
    EventHandlerError,
    EventRegistrationError,
    InvalidEventNameError,
    ListenerExecutionError,
)


class _Recorder:
    def __init__(self) -> None:
        self.calls: List[Any] = []

    def make(self, label: str):
        def action(event: EntityEvent) -> None:
            self.calls.append(label)

        action.__name__ = f"action_{label}"
        return action


@pytest.fixture
def entity() -> SimpleNamespace:
    return SimpleNamespace(name="document")


@pytest.fixture
def handler(entity: SimpleNamespace) -> EventHandler:
    return EventHandler(entity)


@pytest.fixture
def recorder() -> _Recorder:
    return _Recorder()


def test_new_handler_has_only_the_wildcard_bucket(handler: EventHandler) -> None:
    assert handler.event_names() == (ALL_EVENTS,)
    assert handler.listeners[ALL_EVENTS] == []
    assert not handler.has_listeners()


def test_declared_events_create_empty_buckets(entity: SimpleNamespace) -> None:
    config = HandlerConfig(declared_events=("open",))
    handler = EventHandler(entity, ["save", "close"], config=config)

    assert set(handler.event_names()) == {"all", "open", "save", "close"}
    assert not handler.has_listeners()


def test_save_scenario_passes_payload_and_context(handler: EventHandler, entity: SimpleNamespace) -> None:
    ctx = object()
    received: List[tuple[Any, Any, Any]] = []

    def on_save(event: EntityEvent) -> None:
        received.append((event.get_data("id"), event.get_event(), event.context))

    handler.on("save", on_save, ctx)
    handler.trigger("save", {"id": 1})

    assert received == [(1, "save", ctx)]


def test_registration_order_is_dispatch_order_and_wildcard_runs_last(
    handler: EventHandler, recorder: _Recorder
) -> None:
    handler.on("all", recorder.make("f3"))
    handler.on("a", recorder.make("f1"))
    handler.on("a", recorder.make("f2"))

    handler.trigger("a")

    assert recorder.calls == ["f1", "f2", "f3"]


def test_wildcard_listeners_receive_every_event(handler: EventHandler) -> None:
    seen: List[str] = []
    handler.on("all", lambda event: seen.append(event.event_name))

    handler.trigger("x", {"value": 1})
    handler.trigger(["y", "z"])

    assert seen == ["x", "y", "z"]


def test_triggering_the_wildcard_name_runs_wildcard_listeners_twice(
    handler: EventHandler, recorder: _Recorder
) -> None:
    handler.on("all", recorder.make("wild"))

    handler.trigger("all")

    assert recorder.calls == ["wild", "wild"]


def test_on_accepts_multiple_names(handler: EventHandler, recorder: _Recorder) -> None:
    handler.on(["a", "b"], recorder.make("both"))

    handler.trigger("a")
    handler.trigger("b")

    assert recorder.calls == ["both", "both"]


def test_duplicate_registrations_both_fire(handler: EventHandler, recorder: _Recorder) -> None:
    action = recorder.make("dup")
    handler.on("a", action)
    handler.on("a", action)

    handler.trigger("a")

    assert recorder.calls == ["dup", "dup"]


def test_operations_return_the_entity(handler: EventHandler, entity: SimpleNamespace) -> None:
    action = lambda event: None  # noqa: E731

    assert handler.on("a", action) is entity
    assert handler.once("a", action) is entity
    assert handler.trigger("a") is entity
    assert handler.off("a", action) is entity
    assert handler.off() is entity


def test_unknown_event_names_are_noops(handler: EventHandler, recorder: _Recorder) -> None:
    handler.on("known", recorder.make("known"))
    before = handler.event_names()

    handler.trigger("never-registered")
    handler.off("never-registered")
    handler.off("never-registered", recorder.make("other"))

    assert recorder.calls == []
    assert handler.event_names() == before
    assert len(handler.listeners_for("known")) == 1


def test_once_listener_fires_exactly_once(handler: EventHandler) -> None:
    calls: List[str] = []

    def ready(event: EntityEvent) -> None:
        calls.append(event.event_name)

    handler.once("ready", ready)
    handler.trigger("ready")
    handler.trigger("ready")

    assert calls == ["ready"]
    assert handler.listeners_for("ready") == ()


def test_once_across_several_names_fires_once_in_total(handler: EventHandler, recorder: _Recorder) -> None:
    handler.once(["a", "b"], recorder.make("once"))

    handler.trigger(["a", "b"])
    handler.trigger("b")

    assert recorder.calls == ["once"]
    assert not handler.has_listeners()


def test_once_listener_does_not_reenter_when_retriggering(handler: EventHandler) -> None:
    calls: List[int] = []

    def retrigger(event: EntityEvent) -> None:
        calls.append(len(calls))
        handler.trigger("loop")

    handler.once("loop", retrigger)
    handler.trigger("loop")

    assert calls == [0]


def test_once_wrapper_already_fired_in_nested_trigger_is_skipped_in_outer_snapshot(
    handler: EventHandler, recorder: _Recorder
) -> None:
    nested = {"done": False}

    def first(event: EntityEvent) -> None:
        if not nested["done"]:
            nested["done"] = True
            handler.trigger("a")

    handler.on("a", first)
    handler.once("a", recorder.make("once"))

    handler.trigger("a")

    assert recorder.calls == ["once"]


def test_off_with_original_action_removes_once_listener(handler: EventHandler, recorder: _Recorder) -> None:
    action = recorder.make("once")
    handler.once("a", action)

    handler.off("a", action)
    handler.trigger("a")

    assert recorder.calls == []


def test_off_by_action_keeps_other_actions(handler: EventHandler, recorder: _Recorder) -> None:
    keep = recorder.make("keep")
    drop = recorder.make("drop")
    handler.on("a", keep)
    handler.on("a", drop)
    handler.once("a", drop)

    handler.off("a", drop)
    handler.trigger("a")

    assert recorder.calls == ["keep"]


def test_off_by_bound_method_matches_fresh_bound_method(handler: EventHandler) -> None:
    class Subscriber:
        def __init__(self) -> None:
            self.count = 0

        def handle(self, event: EntityEvent) -> None:
            self.count += 1

    subscriber = Subscriber()
    handler.on("a", subscriber.handle)
    handler.off("a", subscriber.handle)
    handler.trigger("a")

    assert subscriber.count == 0


def test_off_with_names_and_context_requires_both_criteria(handler: EventHandler, recorder: _Recorder) -> None:
    ctx_a, ctx_b = object(), object()
    action = recorder.make("shared")
    other = recorder.make("other")
    handler.on("a", action, ctx_a)
    handler.on("a", action, ctx_b)
    handler.on("a", other, ctx_a)

    handler.off("a", action, ctx_a)

    remaining = [(listener.action, listener.context) for listener in handler.listeners_for("a")]
    assert remaining == [(action, ctx_b), (other, ctx_a)]


def test_off_with_names_only_clears_those_buckets(handler: EventHandler, recorder: _Recorder) -> None:
    handler.on("a", recorder.make("a"))
    handler.on("b", recorder.make("b"))
    handler.on("all", recorder.make("wild"))

    handler.off("a")
    handler.trigger(["a", "b"])

    assert recorder.calls == ["wild", "b", "wild"]


def test_off_with_no_arguments_clears_everything_including_wildcard(
    handler: EventHandler, recorder: _Recorder
) -> None:
    handler.on("a", recorder.make("a"))
    handler.on("all", recorder.make("wild"))

    handler.off()
    handler.trigger("a")

    assert recorder.calls == []
    assert ALL_EVENTS in handler.event_names()
    assert handler.listeners[ALL_EVENTS] == []


def test_off_with_context_only_scans_every_bucket(handler: EventHandler, recorder: _Recorder) -> None:
    ctx = object()
    handler.on("a", recorder.make("a-ctx"), ctx)
    handler.on("b", recorder.make("b-ctx"), ctx)
    handler.on("all", recorder.make("wild-ctx"), ctx)
    handler.on("a", recorder.make("a-default"))

    handler.off(context=ctx)
    handler.trigger(["a", "b"])

    assert recorder.calls == ["a-default"]


def test_off_with_action_and_context_but_no_names_uses_full_match(handler: EventHandler, recorder: _Recorder) -> None:
    ctx = object()
    action = recorder.make("target")
    handler.on("a", action, ctx)
    handler.on("b", action)

    handler.off(None, action, ctx)
    handler.trigger(["a", "b"])

    assert recorder.calls == ["target"]
    assert handler.listeners_for("a") == ()


def test_default_context_is_the_entity(handler: EventHandler, entity: SimpleNamespace, recorder: _Recorder) -> None:
    handler.on("a", recorder.make("a"))

    handler.off(context=entity)

    assert not handler.has_listeners("a")


def test_stop_propagation_halts_remaining_listeners_including_wildcard(
    handler: EventHandler, recorder: _Recorder
) -> None:
    def stopper(event: EntityEvent) -> None:
        recorder.calls.append("stopper")
        event.stop_propagation()

    handler.on("a", stopper)
    handler.on("a", recorder.make("after"))
    handler.on("all", recorder.make("wild"))

    records = handler.emit("a")
    handler.trigger("b")

    assert recorder.calls == ["stopper", "wild"]
    assert records[0].is_propagating() is False


def test_stop_propagation_on_one_name_does_not_affect_the_next(handler: EventHandler, recorder: _Recorder) -> None:
    handler.on("a", lambda event: event.stop_propagation())
    handler.on("all", recorder.make("wild"))

    handler.trigger(["a", "b"])

    assert recorder.calls == ["wild"]


def test_registrations_during_dispatch_apply_to_later_triggers(handler: EventHandler, recorder: _Recorder) -> None:
    late = recorder.make("late")

    def register_more(event: EntityEvent) -> None:
        recorder.calls.append("first")
        handler.on("a", late)
        handler.on("all", late)

    handler.on("a", register_more)
    handler.trigger("a")
    assert recorder.calls == ["first"]

    handler.off("a", register_more)
    handler.trigger("a")
    assert recorder.calls == ["first", "late", "late"]


def test_removal_during_dispatch_applies_to_later_triggers(handler: EventHandler, recorder: _Recorder) -> None:
    second = recorder.make("second")

    def remove_second(event: EntityEvent) -> None:
        recorder.calls.append("first")
        handler.off("a", second)

    handler.on("a", remove_second)
    handler.on("a", second)

    handler.trigger("a")
    handler.trigger("a")

    assert recorder.calls == ["first", "second", "first"]


@pytest.mark.parametrize("action", [None, 42, "callback"])
def test_non_callable_actions_are_rejected_eagerly(handler: EventHandler, action: Any) -> None:
    with pytest.raises(EventRegistrationError):
        handler.on("a", action)
    with pytest.raises(EventRegistrationError):
        handler.once("a", action)

    assert "a" not in handler.event_names()


@pytest.mark.parametrize("names", ["", [""], ["ok", 3], 7])
def test_invalid_event_names_are_rejected(handler: EventHandler, names: Any) -> None:
    with pytest.raises(InvalidEventNameError):
        handler.on(names, lambda event: None)
    with pytest.raises(InvalidEventNameError):
        handler.trigger(names)


def test_listener_failure_is_isolated_and_recorded(
    handler: EventHandler, recorder: _Recorder, caplog: pytest.LogCaptureFixture
) -> None:
    def broken(event: EntityEvent) -> None:
        raise RuntimeError("boom")

    handler.on("a", broken)
    handler.on("a", recorder.make("after"))

    with caplog.at_level(logging.ERROR, logger="entity_events.events.event_handler"):
        (record,) = handler.emit("a")

    assert recorder.calls == ["after"]
    assert record.has_errors
    listener, error = record.errors[0]
    assert listener.action is broken
    assert isinstance(error, RuntimeError)
    assert "boom" in caplog.text


def test_listener_failure_aborts_when_isolation_disabled(entity: SimpleNamespace, recorder: _Recorder) -> None:
    handler = EventHandler(entity, config=HandlerConfig(isolate_errors=False))

    def broken(event: EntityEvent) -> None:
        raise ValueError("bad payload")

    handler.on("a", broken)
    handler.on("a", recorder.make("after"))

    with pytest.raises(ListenerExecutionError) as excinfo:
        handler.trigger("a")

    assert recorder.calls == []
    assert isinstance(excinfo.value.__cause__, ValueError)
    assert excinfo.value.listener.action is broken
    assert excinfo.value.event.event_name == "a"


def test_nested_failure_is_not_wrapped_twice(entity: SimpleNamespace) -> None:
    handler = EventHandler(entity, config=HandlerConfig(isolate_errors=False))

    def inner(event: EntityEvent) -> None:
        raise KeyError("missing")

    handler.on("inner", inner)
    handler.on("outer", lambda event: handler.trigger("inner"))

    with pytest.raises(ListenerExecutionError) as excinfo:
        handler.trigger("outer")

    assert excinfo.value.event.event_name == "inner"
    assert isinstance(excinfo.value.__cause__, KeyError)


def test_alias_installs_delegating_methods(entity: SimpleNamespace, recorder: _Recorder) -> None:
    EventHandler(entity)

    assert entity.on("a", recorder.make("a")) is entity
    entity.once("a", recorder.make("once"))
    entity.trigger("a").trigger("a")
    entity.off()
    entity.trigger("a")

    assert recorder.calls == ["a", "once", "a"]


def test_alias_can_be_disabled(entity: SimpleNamespace) -> None:
    EventHandler(entity, config=HandlerConfig(alias_entity=False))

    assert not hasattr(entity, "on")


def test_alias_fails_for_entities_without_attribute_storage() -> None:
    class Slotted:
        __slots__ = ("value",)

    with pytest.raises(EventHandlerError):
        EventHandler(Slotted())


def test_listen_decorator_registers_and_returns_function(handler: EventHandler) -> None:
    seen: List[Any] = []

    @handler.listen("save")
    def on_save(event: EntityEvent) -> None:
        seen.append(event.get_data("id"))

    handler.trigger("save", {"id": 7})

    assert seen == [7]
    assert handler.listeners_for("save")[0].action is on_save


def test_warns_when_bucket_grows_past_threshold(
    entity: SimpleNamespace, caplog: pytest.LogCaptureFixture
) -> None:
    handler = EventHandler(entity, config=HandlerConfig(warn_listener_count=2))

    with caplog.at_level(logging.WARNING, logger="entity_events.events.event_handler"):
        for _ in range(4):
            handler.on("tick", lambda event: None)

    warnings = [record for record in caplog.records if record.levelno == logging.WARNING]
    assert len(warnings) == 1
    assert "tick" in warnings[0].getMessage()


def test_once_wildcard_listener_fires_once_when_triggering_all(handler: EventHandler, recorder: _Recorder) -> None:
    handler.once("all", recorder.make("once"))

    handler.trigger("all")

    assert recorder.calls == ["once"]


@pytest.mark.parametrize("names", [["a", "b"], []])
def test_listeners_for_requires_a_single_name(handler: EventHandler, names: Any) -> None:
    handler.on("a", lambda event: None)

    with pytest.raises(InvalidEventNameError):
        handler.listeners_for(names)
    with pytest.raises(InvalidEventNameError):
        handler.has_listeners(names)
