import math


def clamp(value: float, min_value: float, max_value: float) -> float:
    """Force une valeur à rester entre min_value et max_value."""
    return max(min_value, min(value, max_value))


def direction(value: float) -> float:
    """Signe d'une vitesse : -1.0, 0.0 ou +1.0 (0.0 pour NaN)."""
    if math.isnan(value) or value == 0.0:
        return 0.0
    return math.copysign(1.0, value)
