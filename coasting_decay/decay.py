from __future__ import annotations
from dataclasses import dataclass, field
import math

# Coasting : la traînée est proportionnelle à la vitesse, donc
#   v'(t) = v0 * r^t            (r = fraction de vitesse conservée par seconde)
#   v(t)  = v'(t) si v'(t) >= vmin, sinon 0
#   d(t)  = ∫ v'(t) dt = v0 * (r^t - 1) / ln(r)
# r^t est calculé comme exp(t * ln(r)) avec ln(r) mis en cache.

# tolérance relative du seuil vmin : v(t_stop) doit rester vmin malgré l'arrondi
VMIN_RTOL = 1e-12


@dataclass(frozen=True)
class DecayEnvironment:
    """Environnement de décroissance exponentielle (r, vmin) fixé pour tous les coasts."""
    r: float = 0.95      # 0 < r < 1
    vmin: float = 0.1    # > 0, en dessous le mobile s'arrête net
    ln_r: float = field(init=False, repr=False, compare=False)
    ln_vmin: float = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        self.validate()
        object.__setattr__(self, "ln_r", math.log(self.r))
        object.__setattr__(self, "ln_vmin", math.log(self.vmin))

    def validate(self) -> None:
        if not (0.0 < self.r < 1.0):
            raise ValueError(f"Expected 0.0 < r < 1.0, got r={self.r}")
        if not self.vmin > 0.0:
            raise ValueError(f"Expected vmin > 0.0, got vmin={self.vmin}")

    def power_r(self, exponent: float) -> float:
        """r**exponent, sans appel à pow()."""
        return math.exp(self.ln_r * exponent)

    def velocity_unclamped(self, v0: float, t: float) -> float:
        return v0 * self.power_r(t)

    def velocity(self, v0: float, t: float) -> float:
        """v(t), ramenée à 0 dès que la vitesse brute passe sous vmin."""
        v = self.velocity_unclamped(v0, t)
        return 0.0 if v < self.vmin * (1.0 - VMIN_RTOL) else v

    def stopping_time(self, v0: float) -> float:
        r"""
        Instant où la vitesse atteint vmin :  vmin = v0 * r^t  =>  t = (ln vmin - ln v0) / ln r.
        NaN si v0 <= 0. Un v0 déjà sous vmin ne coaste pas (t = 0).
        Forme exacte : l'écriture ln(vmin) / (v0 * ln r) qu'on trouve parfois ne résout pas
        vmin = v0 * r^t (v(t) y vaut v0 * vmin^(1/v0), pas vmin).
        """
        if not v0 > 0.0:
            return math.nan
        if v0 <= self.vmin:
            return 0.0
        return (self.ln_vmin - math.log(v0)) / self.ln_r

    def distance(self, v0: float, t: float) -> float:
        """Intégrale de v'(t) sur [0, t]. Pas de clamp ici : l'appelant borne t par stopping_time."""
        return v0 * (self.power_r(t) - 1.0) / self.ln_r

    def distance_at_stop(self, v0: float) -> float:
        return self.distance(v0, self.stopping_time(v0))

    def time_for_distance(self, v0: float, distance: float) -> float:
        """
        Inverse de distance() :
            distance*ln(r)/v0 + 1 = r^t   =>   t = ln(distance*ln(r)/v0 + 1) / ln(r)
        NaN quand le mobile ne parcourra jamais `distance` (v0 <= 0, distance < 0
        ou distance > distance_at_stop(v0)).
        """
        if not v0 > 0.0:
            return math.nan
        if not (0.0 <= distance <= self.distance_at_stop(v0)):
            return math.nan
        inner = distance * self.ln_r / v0 + 1.0
        if inner <= 0.0:
            return math.nan
        return math.log(inner) / self.ln_r


DEFAULT_ENVIRONMENT = DecayEnvironment()


def velocity_unclamped(v0: float, t: float, env: DecayEnvironment = DEFAULT_ENVIRONMENT) -> float:
    return env.velocity_unclamped(v0, t)


def velocity(v0: float, t: float, env: DecayEnvironment = DEFAULT_ENVIRONMENT) -> float:
    """
    v0: vitesse initiale (module), t: secondes depuis le début du coast.
    Retourne 0.0 une fois la vitesse passée sous env.vmin.
    """
    return env.velocity(v0, t)


def stopping_time(v0: float, env: DecayEnvironment = DEFAULT_ENVIRONMENT) -> float:
    return env.stopping_time(v0)


def distance(v0: float, t: float, env: DecayEnvironment = DEFAULT_ENVIRONMENT) -> float:
    return env.distance(v0, t)


def distance_at_stop(v0: float, env: DecayEnvironment = DEFAULT_ENVIRONMENT) -> float:
    return env.distance_at_stop(v0)


def time_for_distance(v0: float, distance: float, env: DecayEnvironment = DEFAULT_ENVIRONMENT) -> float:
    return env.time_for_distance(v0, distance)


def resistance_to_end_after(desired_time: float, initial_speed: float, vmin: float) -> float:
    """
    Ratio r tel qu'un coast partant de `initial_speed` s'arrête après `desired_time` secondes.
    En pratique on passe la vitesse initiale maximale attendue.
        vmin = v0 * r^T   =>   r = exp((ln vmin - ln v0) / T)
    NaN si aucun r dans (0, 1) ne convient.
    """
    if not (desired_time > 0.0 and vmin > 0.0 and initial_speed > vmin):
        return math.nan
    return math.exp((math.log(vmin) - math.log(initial_speed)) / desired_time)
