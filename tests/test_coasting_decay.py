import math
import pytest

from coasting_decay.decay import (
    DecayEnvironment,
    velocity,
    velocity_unclamped,
    stopping_time,
    distance,
    distance_at_stop,
    time_for_distance,
    resistance_to_end_after,
)

ENV = DecayEnvironment(r=0.95, vmin=0.1)

def test_environment_caches_logs():
    assert ENV.ln_r == math.log(0.95)
    assert ENV.ln_vmin == math.log(0.1)
    assert ENV.ln_r < 0

@pytest.mark.parametrize("r, vmin", [
    (0.0, 0.1), (1.0, 0.1), (1.5, 0.1), (-0.2, 0.1), (float("nan"), 0.1),
    (0.9, 0.0), (0.9, -1.0),
])
def test_environment_rejects_invalid(r, vmin):
    with pytest.raises(ValueError):
        DecayEnvironment(r=r, vmin=vmin)

def test_environment_is_immutable():
    with pytest.raises(Exception):
        ENV.r = 0.5

def test_velocity_decays_then_clamps_to_zero():
    assert velocity(10.0, 0, ENV) == 10.0
    assert velocity(10.0, 1.0, ENV) == pytest.approx(9.5)
    t = stopping_time(10.0, ENV)
    assert velocity(10.0, t + 1e-3, ENV) == 0.0
    assert velocity(10.0, 10 * t, ENV) == 0.0
    # jamais la valeur parasite 9 dans la branche bornée
    assert velocity(0.05, 0.0, ENV) == 0.0

@pytest.mark.parametrize("r, vmin, v0", [
    (0.95, 0.1, 10.0), (0.5, 0.01, 3.0), (0.2, 1.0, 250.0), (0.999, 0.5, 0.75),
])
def test_velocity_at_stopping_time_is_vmin(r, vmin, v0):
    env = DecayEnvironment(r=r, vmin=vmin)
    t = stopping_time(v0, env)
    assert t > 0
    assert velocity_unclamped(v0, t, env) == pytest.approx(vmin, rel=1e-9)
    assert velocity(v0, t, env) == pytest.approx(vmin, rel=1e-9)

def test_stopping_time_is_exact_solution_not_scaled_log():
    v0 = 10.0
    t = stopping_time(v0, ENV)
    assert ENV.velocity_unclamped(v0, t) == pytest.approx(ENV.vmin, rel=1e-12)
    scaled = math.log(ENV.vmin) / (v0 * math.log(ENV.r))
    assert scaled == pytest.approx(4.4892, abs=1e-3)
    assert ENV.velocity_unclamped(v0, scaled) == pytest.approx(v0 * ENV.vmin ** (1 / v0))
    assert ENV.velocity_unclamped(v0, scaled) > 10 * ENV.vmin

def test_velocity_clamp_tolerance_edge():
    below = ENV.vmin * (1.0 - 1e-9)
    inside = ENV.vmin * (1.0 - 1e-14)
    assert velocity(below, 0.0, ENV) == 0.0
    assert velocity(inside, 0.0, ENV) == inside
    assert velocity(ENV.vmin, 0.0, ENV) == ENV.vmin
    # à t_stop, un ulp d'arrondi sous vmin reste vmin
    t = stopping_time(10.0, ENV)
    assert velocity(10.0, t, ENV) > 0.0
    assert velocity(10.0, t + 1e-6, ENV) == 0.0

def test_concrete_scenario():
    # r=0.95, vmin=0.1, v0=10
    t_stop = stopping_time(10.0, ENV)
    assert t_stop == pytest.approx(math.log(0.1 / 10.0) / math.log(0.95), abs=1e-9)
    assert t_stop == pytest.approx(89.7811, abs=1e-3)

    d_stop = distance_at_stop(10.0, ENV)
    assert d_stop == pytest.approx(10.0 * (0.95 ** t_stop - 1) / math.log(0.95), abs=1e-6)
    assert d_stop == pytest.approx((0.1 - 10.0) / math.log(0.95), abs=1e-6)
    assert d_stop == pytest.approx(193.0077, abs=1e-3)

def test_stopping_time_domain():
    assert math.isnan(stopping_time(0.0, ENV))
    assert math.isnan(stopping_time(-3.0, ENV))
    assert stopping_time(0.05, ENV) == 0.0  # déjà sous vmin : pas de coast
    assert stopping_time(ENV.vmin, ENV) == 0.0

def test_distance_is_integral_of_velocity():
    v0, t = 10.0, 3.0
    n = 20000
    dt = t / n
    riemann = sum(velocity_unclamped(v0, (k + 0.5) * dt, ENV) for k in range(n)) * dt
    assert distance(v0, t, ENV) == pytest.approx(riemann, rel=1e-6)
    assert distance(v0, 0.0, ENV) == 0.0

def test_distance_monotonic_until_stop():
    v0 = 10.0
    t_stop = stopping_time(v0, ENV)
    ts = [t_stop * k / 100 for k in range(101)]
    ds = [distance(v0, t, ENV) for t in ts]
    assert all(b >= a for a, b in zip(ds, ds[1:]))
    assert ds[-1] == pytest.approx(distance_at_stop(v0, ENV))

@pytest.mark.parametrize("frac", [0.0, 0.1, 0.25, 0.5, 0.9, 0.999, 1.0])
def test_time_for_distance_round_trip(frac):
    v0 = 10.0
    d = frac * distance_at_stop(v0, ENV)
    t = time_for_distance(v0, d, ENV)
    assert not math.isnan(t)
    assert distance(v0, t, ENV) == pytest.approx(d, abs=1e-9)

def test_time_for_distance_invalid_is_nan():
    v0 = 10.0
    d_stop = distance_at_stop(v0, ENV)
    assert math.isnan(time_for_distance(v0, d_stop * 1.01, ENV))
    # au-delà de v0/|ln r| le logarithme serait négatif : NaN, pas d'exception
    assert math.isnan(time_for_distance(v0, 10 * d_stop, ENV))
    assert math.isnan(time_for_distance(0.0, 1.0, ENV))
    assert math.isnan(time_for_distance(-1.0, 1.0, ENV))
    assert math.isnan(time_for_distance(v0, -1.0, ENV))

def test_time_for_distance_at_stop_is_stopping_time():
    v0 = 10.0
    t = time_for_distance(v0, distance_at_stop(v0, ENV), ENV)
    assert t == pytest.approx(stopping_time(v0, ENV), rel=1e-9)

def test_module_functions_default_environment():
    assert stopping_time(10.0) == pytest.approx(stopping_time(10.0, ENV))
    assert velocity(10.0, 2.0) == pytest.approx(ENV.velocity(10.0, 2.0))

def test_resistance_to_end_after():
    r = resistance_to_end_after(2.5, 40.0, 0.1)
    assert 0.0 < r < 1.0
    env = DecayEnvironment(r=r, vmin=0.1)
    assert stopping_time(40.0, env) == pytest.approx(2.5, rel=1e-9)

@pytest.mark.parametrize("desired_time, speed, vmin", [
    (0.0, 10.0, 0.1), (-1.0, 10.0, 0.1), (1.0, 0.05, 0.1), (1.0, 10.0, 0.0),
])
def test_resistance_to_end_after_invalid_is_nan(desired_time, speed, vmin):
    assert math.isnan(resistance_to_end_after(desired_time, speed, vmin))
