from __future__ import annotations
from typing import Tuple
import math

import numpy as np
import pandas as pd

from .decay import DecayEnvironment, DEFAULT_ENVIRONMENT, VMIN_RTOL


def velocity_array(v0: float, t: "np.ndarray", env: DecayEnvironment = DEFAULT_ENVIRONMENT) -> "np.ndarray":
    """Version NumPy de velocity() : même clamp à 0 sous vmin."""
    t = np.asarray(t, dtype=np.float64)
    v = v0 * np.exp(t * env.ln_r)
    return np.where(v < env.vmin * (1.0 - VMIN_RTOL), 0.0, v)


def distance_array(v0: float, t: "np.ndarray", env: DecayEnvironment = DEFAULT_ENVIRONMENT) -> "np.ndarray":
    """
    Version NumPy de la distance, t borné par le temps d'arrêt
    (la distance reste constante une fois le mobile arrêté).
    """
    t = np.asarray(t, dtype=np.float64)
    t_stop = env.stopping_time(v0)
    if math.isnan(t_stop):
        return np.full(t.shape, np.nan)
    tc = np.minimum(t, t_stop)
    return v0 * (np.exp(tc * env.ln_r) - 1.0) / env.ln_r


def sample_coast(
    v0: float,
    env: DecayEnvironment = DEFAULT_ENVIRONMENT,
    num_points: int = 50,
) -> Tuple["np.ndarray", "np.ndarray", "np.ndarray"]:
    """
    Échantillonne un coast complet sur linspace(0, t_stop, num_points).
    Retourne (t, v, d).
    """
    if num_points < 2:
        raise ValueError("num_points must be >= 2")
    t_stop = env.stopping_time(v0)
    if math.isnan(t_stop):
        raise ValueError(f"initial speed must be > 0, got {v0}")
    t = np.linspace(0.0, t_stop, num_points)
    return t, velocity_array(v0, t, env), distance_array(v0, t, env)


def coast_table(
    v0: float,
    env: DecayEnvironment = DEFAULT_ENVIRONMENT,
    num_points: int = 50,
) -> pd.DataFrame:
    t, v, d = sample_coast(v0, env, num_points)
    return pd.DataFrame({"t": t, "velocity": v, "distance": d})
