from dispatchsim.core.temporal import Instant


class Clock:
    """Current virtual time, shared by the simulation and its entities."""

    def __init__(self, start_time: Instant = Instant.Epoch):
        self._current_time = start_time

    @property
    def now(self) -> Instant:
        return self._current_time

    def update(self, time: Instant) -> None:
        self._current_time = time
