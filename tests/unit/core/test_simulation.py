"""Unit tests for Simulation and Entity wiring."""

import threading

import pytest

from dispatchsim.core.entity import Entity
from dispatchsim.core.event import Event
from dispatchsim.core.simulation import Simulation
from dispatchsim.core.temporal import Instant


class Recorder(Entity):
    """Records (time, event_type) for every event received."""

    def __init__(self, name: str = "recorder"):
        super().__init__(name)
        self.received: list[tuple[float, str]] = []

    def handle_event(self, event):
        self.received.append((self.now.to_seconds(), event.event_type))
        if event.event_type == "Echo":
            return Event(time=self.now + 1.0, event_type="Reply", target=self)
        return None


def at(seconds, event_type, target, **kwargs):
    return Event(time=Instant.from_seconds(seconds), event_type=event_type, target=target, **kwargs)


class TestEntityAttachment:
    def test_now_before_attachment_raises(self):
        with pytest.raises(RuntimeError):
            Recorder().now

    def test_schedule_before_attachment_raises(self):
        recorder = Recorder()
        with pytest.raises(RuntimeError):
            recorder.schedule(at(1.0, "X", recorder))

    def test_simulation_injects_clock(self):
        recorder = Recorder()
        Simulation(start_time=Instant.from_seconds(5.0), entities=[recorder])
        assert recorder.now == Instant.from_seconds(5.0)


class TestRun:
    def test_processes_events_in_time_order(self):
        recorder = Recorder()
        sim = Simulation(entities=[recorder])
        sim.schedule([at(3.0, "C", recorder), at(1.0, "A", recorder), at(2.0, "B", recorder)])

        summary = sim.run()

        assert recorder.received == [(1.0, "A"), (2.0, "B"), (3.0, "C")]
        assert summary.total_events_processed == 3
        assert summary.entities["recorder"].events_handled == 3

    def test_handler_results_are_scheduled(self):
        recorder = Recorder()
        sim = Simulation(entities=[recorder])
        sim.schedule(at(1.0, "Echo", recorder))

        sim.run()

        assert recorder.received == [(1.0, "Echo"), (2.0, "Reply")]

    def test_cancelled_events_skipped_and_counted(self):
        recorder = Recorder()
        sim = Simulation(entities=[recorder])
        doomed = at(2.0, "B", recorder)
        sim.schedule([at(1.0, "A", recorder), doomed, at(3.0, "C", recorder)])
        doomed.cancel()

        summary = sim.run()

        assert [t for _, t in recorder.received] == ["A", "C"]
        assert summary.events_cancelled == 1

    def test_end_time_stops_run(self):
        recorder = Recorder()
        sim = Simulation(duration=2.5, entities=[recorder])
        sim.schedule([at(1.0, "A", recorder), at(2.0, "B", recorder), at(3.0, "C", recorder)])

        sim.run()

        assert [t for _, t in recorder.received] == ["A", "B"]
        assert sim.pending_event_count == 1

    def test_daemon_events_do_not_keep_run_alive(self):
        recorder = Recorder()
        sim = Simulation(entities=[recorder])
        sim.schedule([at(1.0, "Work", recorder), at(5.0, "Tick", recorder, daemon=True)])

        sim.run()

        assert recorder.received == [(1.0, "Work")]

    def test_end_time_and_duration_are_exclusive(self):
        with pytest.raises(ValueError):
            Simulation(end_time=Instant.from_seconds(1.0), duration=1.0)

    def test_handler_exceptions_propagate(self):
        class Broken(Entity):
            def handle_event(self, event):
                raise KeyError("boom")

        broken = Broken("broken")
        sim = Simulation(entities=[broken])
        sim.schedule(at(1.0, "X", broken))

        with pytest.raises(KeyError):
            sim.run()


class TestStepping:
    def test_advance_moves_clock_even_without_events(self):
        sim = Simulation()
        sim.advance(7.5)
        assert sim.now == Instant.from_seconds(7.5)

    def test_run_until_is_inclusive(self):
        recorder = Recorder()
        sim = Simulation(entities=[recorder])
        sim.schedule([at(1.0, "A", recorder), at(2.0, "B", recorder)])

        sim.run_until(Instant.from_seconds(1.0))
        assert [t for _, t in recorder.received] == ["A"]

        sim.advance(1.0)
        assert [t for _, t in recorder.received] == ["A", "B"]

    def test_run_until_processes_daemon_events(self):
        recorder = Recorder()
        sim = Simulation(entities=[recorder])
        sim.schedule(at(1.0, "Tick", recorder, daemon=True))

        sim.advance(2.0)
        assert recorder.received == [(1.0, "Tick")]

    def test_cannot_run_backwards(self):
        sim = Simulation()
        sim.advance(5.0)
        with pytest.raises(ValueError):
            sim.run_until(Instant.from_seconds(1.0))
        with pytest.raises(ValueError):
            sim.advance(-1.0)

    def test_once_events_can_be_scheduled_directly(self):
        sim = Simulation()
        seen = []
        sim.schedule(Event.once(Instant.from_seconds(1.0), "Ping", fn=lambda e: seen.append(e.time)))

        sim.advance(1.0)
        assert seen == [Instant.from_seconds(1.0)]

    def test_summary_duration(self):
        sim = Simulation()
        sim.advance(4.0)
        assert sim.summary.duration_s == pytest.approx(4.0)
        assert "Simulation Summary" in str(sim.summary)


class TestThreadedScheduling:
    def test_schedule_from_other_threads_while_stepping(self):
        recorder = Recorder()
        sim = Simulation(entities=[recorder])

        def producer(offset):
            for i in range(200):
                sim.schedule(at(offset + i * 0.01, "Work", recorder))

        threads = [threading.Thread(target=producer, args=(float(n),)) for n in range(4)]
        for thread in threads:
            thread.start()
        for _ in range(100):
            sim.advance(0.05)
        for thread in threads:
            thread.join()
        sim.advance(10.0)

        assert len(recorder.received) == 800
        assert sim.pending_event_count == 0
