"""Unit tests for Event, EventHeap and CallbackEntity."""

import pytest

from dispatchsim.core.callback_entity import CallbackEntity
from dispatchsim.core.event import Event
from dispatchsim.core.event_heap import EventHeap
from dispatchsim.core.temporal import Instant

_sink = CallbackEntity("sink", fn=lambda _e: None)


def test_event_requires_target():
    with pytest.raises(ValueError):
        Event(time=Instant.Epoch, event_type="Orphan")


def test_cancel_is_idempotent():
    event = Event(time=Instant.from_seconds(1.0), event_type="Test", target=_sink)
    assert not event.cancelled
    event.cancel()
    event.cancel()
    assert event.cancelled


def test_context_metadata():
    event = Event(
        time=Instant.Epoch,
        event_type="Test",
        target=_sink,
        context={"metadata": {"job_id": 3}},
    )
    assert event.get_context("job_id") == 3
    assert event.get_context("missing") is None

    event.add_context("worker_id", 1)
    assert event.get_context("worker_id") == 1


def test_simultaneous_events_pop_in_insertion_order():
    t = Instant.from_seconds(1.0)
    first = Event(time=t, event_type="A", target=_sink)
    second = Event(time=t, event_type="B", target=_sink)
    earlier = Event(time=Instant.Epoch, event_type="C", target=_sink)

    heap = EventHeap([second, first])
    heap.push(earlier)

    assert [heap.pop().event_type for _ in range(3)] == ["C", "A", "B"]
    assert not heap.has_events()


def test_heap_primary_events_ignore_daemon_and_cancelled():
    daemon = Event(time=Instant.Epoch, event_type="Tick", target=_sink, daemon=True)
    cancelled = Event(time=Instant.Epoch, event_type="Gone", target=_sink)
    cancelled.cancel()

    heap = EventHeap([daemon, cancelled])
    assert heap.size() == 2
    assert not heap.has_primary_events()

    heap.push(Event(time=Instant.Epoch, event_type="Work", target=_sink))
    assert heap.has_primary_events()


def test_invoke_normalizes_handler_results():
    follow_up = Event(time=Instant.Epoch, event_type="FollowUp", target=_sink)

    single = CallbackEntity("single", fn=lambda _e: follow_up)
    many = CallbackEntity("many", fn=lambda _e: [follow_up, follow_up])
    nothing = CallbackEntity("nothing", fn=lambda _e: None)

    assert Event(time=Instant.Epoch, event_type="X", target=single).invoke() == [follow_up]
    assert len(Event(time=Instant.Epoch, event_type="X", target=many).invoke()) == 2
    assert Event(time=Instant.Epoch, event_type="X", target=nothing).invoke() == []


def test_once_wraps_function():
    calls = []
    event = Event.once(Instant.Epoch, "Ping", fn=calls.append)

    assert isinstance(event.target, CallbackEntity)
    event.invoke()
    assert calls == [event]

