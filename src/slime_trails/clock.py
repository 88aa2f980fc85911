import time


class SimulationClock:
    """Tracks the time between ticks.

    The first call to `update` only records a timestamp and reports a delta
    of zero, so nothing jumps on the first frame.
    """

    def __init__(self, time_source=time.perf_counter):
        self.time_source = time_source
        self.last_tick = None
        self.delta_time = 0.0
        self.fps = 0.0

    def reset(self):
        self.last_tick = None
        self.delta_time = 0.0
        self.fps = 0.0

    def update(self):
        now = self.time_source()
        if self.last_tick is None:
            self.last_tick = now
            self.delta_time = 0.0
            self.fps = 0.0
            return self.delta_time

        self.delta_time = max(now - self.last_tick, 0.0)
        self.last_tick = now
        self.fps = 1.0 / self.delta_time if self.delta_time > 0 else 0.0
        return self.delta_time
