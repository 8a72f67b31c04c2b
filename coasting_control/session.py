"""
Coasting session: samples one fling's decay model against a clock.

A session binds a fixed DecayEnvironment to one initial speed v0, caches the
terminal values (t_stop, distance_stop) on first use, and is driven by an
external per-frame scheduler that calls `tick()`:

    NOT_STARTED --start--> RUNNING --tick, elapsed >= t_stop--> COMPLETED
                              |  ^
                              |  +--start (implicit cancel, new run)
                              +--stop/cancel--> CANCELLED

COMPLETED and CANCELLED are the two stopped states; `start()` from either
begins a new run. Everything runs on the scheduler's thread, no locking.
"""
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Protocol
import logging
import time

from coasting_decay.decay import DecayEnvironment

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


class FrameHandle(Protocol):
    def invalidate(self) -> None: ...


class FrameScheduler(Protocol):
    def register(self, callback: Callable[[], None], interval: int) -> FrameHandle: ...


@dataclass(frozen=True)
class CoastTiming:
    frame_interval: int = 2          # un échantillon toutes les 2 frames (~30 Hz sur 60 Hz)
    frame_budget: float = 1.0 / 60.0  # au-delà, le tick est signalé comme trop lent

    def validate(self) -> None:
        if self.frame_interval < 1:
            raise ValueError(f"frame_interval must be >= 1, got {self.frame_interval}")
        if not self.frame_budget > 0.0:
            raise ValueError(f"frame_budget must be > 0, got {self.frame_budget}")


class CoastState(Enum):
    NOT_STARTED = "not_started"
    RUNNING = "running"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class CoastObserver:
    """Lifecycle hooks of a coast. The base class only logs."""

    def will_start_coast(self) -> None:
        logger.debug("will start coast")

    def on_progress(self, elapsed: float, velocity: float, distance: float) -> None:
        logger.debug("coast t=%.4f v=%.4f d=%.4f", elapsed, velocity, distance)

    def on_completed(self, elapsed: float) -> None:
        logger.debug("coast completed at t=%.4f", elapsed)

    def on_cancelled(self) -> None:
        logger.debug("coast cancelled")


class CoastingSession:
    """
    One coast from initial speed `v0` in a fixed `environment`.

    Args:
        environment: decay ratio and speed floor
        v0: initial speed, as a magnitude (> 0); direction is the caller's business
        scheduler: per-frame scheduler; when None the caller drives `tick()`/`advance()`
        observer: receives will_start/progress/completed/cancelled notifications
        clock: monotonic time source, in seconds
        timing: frame interval and per-tick budget
        cost_clock: timer used to measure the cost of a tick
    """

    def __init__(
        self,
        environment: DecayEnvironment,
        v0: float,
        scheduler: Optional[FrameScheduler] = None,
        observer: Optional[CoastObserver] = None,
        clock: Clock = time.monotonic,
        timing: CoastTiming = CoastTiming(),
        cost_clock: Clock = time.perf_counter,
    ):
        timing.validate()
        self.environment = environment
        self.v0 = float(v0)
        self.scheduler = scheduler
        self.observer = observer if observer is not None else CoastObserver()
        self.clock = clock
        self.timing = timing
        self.cost_clock = cost_clock

        self._t_stop: Optional[float] = None
        self._distance_stop: Optional[float] = None

        self._state = CoastState.NOT_STARTED
        self._start_time: Optional[float] = None
        self._last_elapsed: Optional[float] = None
        self._handle: Optional[FrameHandle] = None
        self._run = 0

    def __repr__(self) -> str:
        return f"CoastingSession(v0={self.v0}, r={self.environment.r}, vmin={self.environment.vmin}, state={self._state.value})"

    # --- cached terminal values ---

    @property
    def t_stop(self) -> float:
        if self._t_stop is None:
            self._t_stop = self.environment.stopping_time(self.v0)
        return self._t_stop

    @property
    def distance_stop(self) -> float:
        if self._distance_stop is None:
            self._distance_stop = self.distance(self.t_stop)
        return self._distance_stop

    # --- sampling ---

    def velocity(self, t: float) -> float:
        return self.environment.velocity(self.v0, t)

    def distance(self, t: float) -> float:
        # jamais d'extrapolation au-delà de l'arrêt : plateau à distance_stop
        t_stop = self.t_stop
        return self.environment.distance(self.v0, t if t < t_stop else t_stop)

    def time_for_distance(self, distance: float) -> float:
        return self.environment.time_for_distance(self.v0, distance)

    # --- lifecycle ---

    @property
    def state(self) -> CoastState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state is CoastState.RUNNING

    @property
    def is_stopped(self) -> bool:
        return self._state in (CoastState.COMPLETED, CoastState.CANCELLED)

    @property
    def start_time(self) -> Optional[float]:
        return self._start_time

    @property
    def last_elapsed(self) -> Optional[float]:
        return self._last_elapsed

    def start(self, start_time: Optional[float] = None) -> None:
        """Begin (or restart) the coast at `start_time`, defaulting to now."""
        if self._state is CoastState.RUNNING:
            self.stop()

        self._run += 1
        run = self._run
        self._start_time = self.clock() if start_time is None else float(start_time)
        self._last_elapsed = None
        self._state = CoastState.RUNNING
        logger.debug("coast started: %r", self)

        self.observer.will_start_coast()
        # l'observateur a pu arrêter ou relancer la session : un seul handle par run
        if self.scheduler is not None and run == self._run and self._state is CoastState.RUNNING:
            self._handle = self.scheduler.register(self.tick, self.timing.frame_interval)

    def stop(self) -> None:
        """Cancel a running coast; no effect (and no notification) otherwise."""
        was_running = self._state is CoastState.RUNNING
        self._release()
        if was_running:
            self._state = CoastState.CANCELLED
            self.observer.on_cancelled()

    cancel = stop

    def tick(self) -> None:
        """Per-frame callback: sample at the current clock time."""
        if self._state is not CoastState.RUNNING:
            return
        began = self.cost_clock()
        self.advance(self.clock() - self._start_time)
        cost = self.cost_clock() - began
        if cost > self.timing.frame_budget:
            logger.warning(
                "coast tick took %.2f ms, over the %.2f ms frame budget",
                cost * 1e3, self.timing.frame_budget * 1e3,
            )

    def advance(self, elapsed: float) -> None:
        """Sample the coast `elapsed` seconds after its start; completes once elapsed >= t_stop."""
        if self._state is not CoastState.RUNNING:
            return
        run = self._run
        self._last_elapsed = elapsed
        self.observer.on_progress(elapsed, self.velocity(elapsed), self.distance(elapsed))

        # l'observateur a pu arrêter ou relancer la session
        if run != self._run or self._state is not CoastState.RUNNING:
            return
        # NaN t_stop (v0 <= 0) : terminé dès le premier tick
        if not elapsed < self.t_stop:
            self._release()
            self._state = CoastState.COMPLETED
            logger.debug("coast completed after %.4f s", elapsed)
            self.observer.on_completed(elapsed)

    def _release(self) -> None:
        if self._handle is not None:
            handle, self._handle = self._handle, None
            handle.invalidate()
