"""
Deterministic clock and frame scheduler.

Stand-ins for the display refresh driver: the clock only moves when the
scheduler steps a frame, so a coast can be replayed frame by frame (tests,
CLI simulation).
"""
from __future__ import annotations
from typing import Callable, List, Optional


class ManualClock:
    """Horloge monotone pilotée à la main (secondes)."""

    def __init__(self, now: float = 0.0):
        self.now = float(now)

    def __call__(self) -> float:
        return self.now

    def advance(self, dt: float) -> float:
        if dt < 0:
            raise ValueError("a monotonic clock cannot go back")
        self.now += dt
        return self.now


class ManualFrameHandle:
    def __init__(self, scheduler: "ManualFrameScheduler", callback: Callable[[], None], interval: int, first_frame: int):
        self._scheduler = scheduler
        self.callback = callback
        self.interval = interval
        self.first_frame = first_frame
        self.valid = True

    def invalidate(self) -> None:
        if self.valid:
            self.valid = False
            self._scheduler._handles.remove(self)

    def is_due(self, frame: int) -> bool:
        return (frame - self.first_frame) % self.interval == 0


class ManualFrameScheduler:
    """
    Frame scheduler stepped explicitly.

    Each `step()` advances the clock by one frame and fires every registered
    callback whose interval divides the frames elapsed since its registration.
    """

    def __init__(self, clock: Optional[ManualClock] = None, frame_rate: float = 60.0):
        if not frame_rate > 0:
            raise ValueError("frame_rate must be > 0")
        self.clock = clock if clock is not None else ManualClock()
        self.frame_duration = 1.0 / frame_rate
        self.frame = 0
        self._handles: List[ManualFrameHandle] = []

    @property
    def active(self) -> int:
        return len(self._handles)

    def register(self, callback: Callable[[], None], interval: int = 1) -> ManualFrameHandle:
        if interval < 1:
            raise ValueError("interval must be >= 1")
        handle = ManualFrameHandle(self, callback, interval, self.frame)
        self._handles.append(handle)
        return handle

    def step(self) -> None:
        self.frame += 1
        self.clock.advance(self.frame_duration)
        for handle in list(self._handles):
            # un callback précédent a pu invalider celui-ci
            if handle.valid and handle.is_due(self.frame):
                handle.callback()

    def run_frames(self, n: int) -> None:
        for _ in range(n):
            self.step()

    def run_until_idle(self, max_frames: int = 1_000_000) -> int:
        """Step until no callback is registered; returns the number of frames run."""
        frames = 0
        while self._handles and frames < max_frames:
            self.step()
            frames += 1
        return frames
