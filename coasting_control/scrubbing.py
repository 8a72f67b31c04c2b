from __future__ import annotations
from typing import Callable, List, Optional
import time

from coasting_decay.decay import DecayEnvironment, DEFAULT_ENVIRONMENT
from common.utils import clamp

from .controller import CoastingController
from .session import Clock, CoastObserver, FrameScheduler


class MomentumScrubber(CoastObserver):
    """
    Position sur un axe, bornée à [lower, upper], déplacée au doigt puis par inertie.

    begin_touch() -> drag(delta)* -> release(velocity) : le relâcher lance un coast
    depuis la position courante ; atteindre une borne arrête le coast.
    """

    def __init__(
        self,
        lower: float,
        upper: float,
        environment: DecayEnvironment = DEFAULT_ENVIRONMENT,
        scheduler: Optional[FrameScheduler] = None,
        clock: Clock = time.monotonic,
        position: Optional[float] = None,
    ):
        if lower > upper:
            raise ValueError(f"Expected lower <= upper, got [{lower}, {upper}]")
        self.lower = lower
        self.upper = upper
        self._position = clamp(lower if position is None else position, lower, upper)
        self._anchor = self._position
        self._enabled = True
        self.touching = False
        self._listeners: List[Callable[[float], None]] = []
        self.controller = CoastingController(environment, scheduler, delegate=self, clock=clock)

    # --- position ---

    @property
    def position(self) -> float:
        return self._position

    @position.setter
    def position(self, value: float) -> None:
        value = clamp(value, self.lower, self.upper)
        if value != self._position:
            self._position = value
            for listener in list(self._listeners):
                listener(value)

    def add_listener(self, listener: Callable[[float], None]) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: Callable[[float], None]) -> None:
        self._listeners.remove(listener)

    # --- state ---

    @property
    def enabled(self) -> bool:
        return self._enabled

    @enabled.setter
    def enabled(self, value: bool) -> None:
        self._enabled = bool(value)
        if not self._enabled:
            self.touching = False
            self.controller.stop()

    @property
    def coasting(self) -> bool:
        return self.controller.is_coasting

    # --- touch ---

    def begin_touch(self) -> None:
        if not self._enabled:
            return
        self.controller.stop()
        self.touching = True

    def drag(self, delta: float) -> None:
        if self.touching:
            self.position = self._position + delta

    def release(self, velocity: float = 0.0) -> None:
        if not self.touching:
            return
        self.touching = False
        self._anchor = self._position
        self.controller.start_coasting(velocity)

    # --- coast events ---

    def on_progress(self, elapsed: float, velocity: float, distance: float) -> None:
        target = self._anchor + distance
        self.position = target
        if target < self.lower or target > self.upper:
            self.controller.stop()
