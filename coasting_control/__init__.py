from .session import (
    CoastingSession,
    CoastObserver,
    CoastState,
    CoastTiming,
    FrameHandle,
    FrameScheduler,
)
from .scheduling import ManualClock, ManualFrameScheduler
from .controller import CoastingController
from .scrubbing import MomentumScrubber

__all__ = [
    "CoastingSession",
    "CoastObserver",
    "CoastState",
    "CoastTiming",
    "FrameHandle",
    "FrameScheduler",
    "ManualClock",
    "ManualFrameScheduler",
    "CoastingController",
    "MomentumScrubber",
]
