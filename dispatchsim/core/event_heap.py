import heapq
from typing import Union

from dispatchsim.core.event import Event


class EventHeap:
    def __init__(self, events: list[Event] | None = None):
        """Store Events directly on the heap.

        Event implements ordering by (time, insertion order), so there's no
        need to store (time, event) tuples.
        """
        self._heap = list(events) if events else []
        heapq.heapify(self._heap)

    def push(self, events: Union[Event, list[Event]]) -> None:
        """Push an Event or a list of Events onto the heap."""
        if isinstance(events, list):
            for event in events:
                heapq.heappush(self._heap, event)
        else:
            heapq.heappush(self._heap, events)

    def pop(self) -> Event:
        return heapq.heappop(self._heap)

    def peek(self) -> Event:
        return self._heap[0]

    def has_events(self) -> bool:
        return bool(self._heap)

    def has_primary_events(self) -> bool:
        """True if any live, non-daemon event remains."""
        return any(not e.daemon and not e.cancelled for e in self._heap)

    def size(self) -> int:
        return len(self._heap)
