from __future__ import annotations
from typing import Optional
import logging
import math
import time

from coasting_decay.decay import DecayEnvironment
from common.utils import direction

from .session import Clock, CoastObserver, CoastTiming, CoastingSession, FrameScheduler

logger = logging.getLogger(__name__)


class _SignedRelay(CoastObserver):
    """Forwards a session's events to the controller's delegate, sign restored."""

    def __init__(self, controller: "CoastingController", sign: float):
        self.controller = controller
        self.sign = sign

    def will_start_coast(self) -> None:
        if self.controller.delegate is not None:
            self.controller.delegate.will_start_coast()

    def on_progress(self, elapsed: float, velocity: float, distance: float) -> None:
        if self.controller.delegate is not None:
            self.controller.delegate.on_progress(elapsed, self.sign * velocity, self.sign * distance)

    def on_completed(self, elapsed: float) -> None:
        if self.controller.delegate is not None:
            self.controller.delegate.on_completed(elapsed)

    def on_cancelled(self) -> None:
        if self.controller.delegate is not None:
            self.controller.delegate.on_cancelled()


class CoastingController:
    """
    Turns signed flings into coasts.

    Each `start_coasting(v)` builds a fresh CoastingSession for |v| in the
    controller's environment; the sign of `v` is the direction and is applied
    back to the velocity and distance reported to `delegate`.
    """

    def __init__(
        self,
        environment: DecayEnvironment,
        scheduler: Optional[FrameScheduler] = None,
        delegate: Optional[CoastObserver] = None,
        clock: Clock = time.monotonic,
        timing: CoastTiming = CoastTiming(),
    ):
        self.environment = environment
        self.scheduler = scheduler
        self.delegate = delegate
        self.clock = clock
        self.timing = timing
        self.initial_velocity = 0.0
        self._session: Optional[CoastingSession] = None

    @property
    def session(self) -> Optional[CoastingSession]:
        return self._session

    @property
    def is_coasting(self) -> bool:
        return self._session is not None and self._session.is_running

    def start_coasting(self, initial_velocity: float) -> Optional[CoastingSession]:
        """Stop any running coast, then coast from `initial_velocity` (sign = direction)."""
        self.stop()
        sign = direction(initial_velocity)
        if sign == 0.0:
            logger.debug("no coast for initial velocity %r", initial_velocity)
            return None

        self.initial_velocity = initial_velocity
        self._session = CoastingSession(
            self.environment,
            math.fabs(initial_velocity),
            scheduler=self.scheduler,
            observer=_SignedRelay(self, sign),
            clock=self.clock,
            timing=self.timing,
        )
        self._session.start()
        return self._session

    def stop(self) -> None:
        if self._session is not None:
            self._session.stop()

    def invalidate(self) -> None:
        """Stop and detach the delegate; the controller sends no more events."""
        self.stop()
        self.delegate = None
