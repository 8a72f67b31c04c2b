from .decay import (
    DecayEnvironment,
    DEFAULT_ENVIRONMENT,
    velocity_unclamped,
    velocity,
    stopping_time,
    distance,
    distance_at_stop,
    time_for_distance,
    resistance_to_end_after,
)
from .vectorized import (
    velocity_array,
    distance_array,
    sample_coast,
    coast_table,
)

__all__ = [
    "DecayEnvironment",
    "DEFAULT_ENVIRONMENT",
    "velocity_unclamped",
    "velocity",
    "stopping_time",
    "distance",
    "distance_at_stop",
    "time_for_distance",
    "resistance_to_end_after",
    "velocity_array",
    "distance_array",
    "sample_coast",
    "coast_table",
]
