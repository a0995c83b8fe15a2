"""Core simulation engine components."""

from dispatchsim.core.callback_entity import CallbackEntity
from dispatchsim.core.clock import Clock
from dispatchsim.core.entity import Entity, Scheduler
from dispatchsim.core.event import Event
from dispatchsim.core.event_heap import EventHeap
from dispatchsim.core.simulation import Simulation
from dispatchsim.core.temporal import Duration, Instant

__all__ = [
    "CallbackEntity",
    "Clock",
    "Duration",
    "Entity",
    "Event",
    "EventHeap",
    "Instant",
    "Scheduler",
    "Simulation",
]
