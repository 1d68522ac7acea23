import math
import random

import pytest

from twobody.config import SimulationConfig
from twobody.constants import EARTH_MASS, G, MOON_MASS
from twobody.physics import TwoBodyPhysics, circular_orbit_velocity, orbital_period, separation
from twobody.vector_utils import vec_cross, vec_dot, vec_len


def test_derivative_at_initial_state(earth_moon):
    physics = TwoBodyPhysics(earth_moon)
    du = physics.derivative(earth_moon.initial_state)
    l = 3.844e8
    # position derivatives are the velocities
    assert du[0:2] == (0.0, 1.131e1)
    assert du[4:6] == (0.0, -9.189e2)
    # inverse-square attraction along x, towards each other
    assert du[2] == pytest.approx(G * MOON_MASS / l ** 2, rel=1e-12)
    assert du[6] == pytest.approx(-G * EARTH_MASS / l ** 2, rel=1e-12)
    assert du[3] == 0.0
    assert du[7] == 0.0


def test_physics_is_callable_as_derivative(earth_moon):
    physics = TwoBodyPhysics(earth_moon)
    u = earth_moon.initial_state
    assert physics(u) == physics.derivative(u)


def test_alpha_changes_the_power_law():
    u = (0.0, 0.0, 0.0, 0.0, 2.0, 0.0, 0.0, 0.0)
    cfg = SimulationConfig(gravitational_constant=1.0, mass_primary=1.0, mass_secondary=1.0,
                           primary={"position": (0.0, 0.0), "velocity": (0.0, 0.0)},
                           secondary={"position": (2.0, 0.0), "velocity": (0.0, 0.0)})
    inverse_square = TwoBodyPhysics(cfg).derivative(u)
    inverse_cube = TwoBodyPhysics(cfg.with_overrides(alpha=3.0)).derivative(u)
    assert inverse_square[2] == pytest.approx(1.0 / 4.0)
    assert inverse_cube[2] == pytest.approx(1.0 / 8.0)


def _random_states(n, seed=7):
    rng = random.Random(seed)
    for _ in range(n):
        u = tuple(rng.uniform(-1e9, 1e9) if i % 4 < 2 else rng.uniform(-2e3, 2e3) for i in range(8))
        if separation(u) > 1.0:
            yield u


@pytest.mark.parametrize("alpha", [1.0, 2.0, 2.5, 3.0])
def test_newtons_third_law(alpha, earth_moon):
    physics = TwoBodyPhysics(earth_moon.with_overrides(alpha=alpha))
    for u in _random_states(200):
        du = physics.derivative(u)
        a1 = (du[2], du[3])
        a2 = (du[6], du[7])
        # exactly antiparallel
        assert abs(vec_cross(a1, a2)) <= 1e-12 * vec_len(a1) * vec_len(a2)
        assert vec_dot(a1, a2) < 0
        # equal and opposite forces
        assert vec_len(a1) * EARTH_MASS == pytest.approx(vec_len(a2) * MOON_MASS, rel=1e-12)


def test_coincident_bodies_are_a_singularity(earth_moon):
    physics = TwoBodyPhysics(earth_moon)
    with pytest.raises(ZeroDivisionError):
        physics.derivative((1.0, 1.0, 0.0, 0.0, 1.0, 1.0, 0.0, 0.0))


def test_nan_state_propagates(earth_moon):
    physics = TwoBodyPhysics(earth_moon)
    du = physics.derivative((float("nan"), 0.0, 0.0, 0.0, 1.0, 0.0, 0.0, 0.0))
    assert math.isnan(du[2]) and math.isnan(du[6])


def test_energy_of_inverse_square_law(earth_moon):
    physics = TwoBodyPhysics(earth_moon)
    u = earth_moon.initial_state
    kinetic = 0.5 * EARTH_MASS * 1.131e1 ** 2 + 0.5 * MOON_MASS * 9.189e2 ** 2
    potential = -G * EARTH_MASS * MOON_MASS / 3.844e8
    assert physics.kinetic_energy(u) == pytest.approx(kinetic, rel=1e-12)
    assert physics.potential_energy(u) == pytest.approx(potential, rel=1e-12)
    assert physics.total_energy(u) == pytest.approx(kinetic + potential, rel=1e-12)
    assert physics.total_energy(u) < 0  # bound


def test_logarithmic_potential_for_alpha_one(earth_moon):
    physics = TwoBodyPhysics(earth_moon.with_overrides(alpha=1.0))
    u = earth_moon.initial_state
    assert physics.potential_energy(u) == pytest.approx(G * EARTH_MASS * MOON_MASS * math.log(3.844e8))


def test_angular_momentum_and_momentum(earth_moon):
    physics = TwoBodyPhysics(earth_moon)
    u = earth_moon.initial_state
    # only the moon is off the origin: L = M2 * x2 * vy2
    assert physics.angular_momentum(u) == pytest.approx(MOON_MASS * 3.844e8 * -9.189e2)
    px, py = physics.momentum(u)
    assert px == 0.0
    assert py == pytest.approx(EARTH_MASS * 1.131e1 - MOON_MASS * 9.189e2)


def test_circular_orbit_velocity():
    assert circular_orbit_velocity(4.0, 1.0) == 2.0
    assert circular_orbit_velocity(4.0, 0.0) == 0.0


def test_orbital_period_of_earth_moon(earth_moon):
    # the relative speed (930.2 m/s) is below circular speed, so the start is apoapsis
    # of an ellipse with a ~21.4 day period
    assert orbital_period(earth_moon) == pytest.approx(1.8494e6, rel=1e-3)


def test_orbital_period_needs_inverse_square_and_bound_orbit(earth_moon):
    with pytest.raises(ValueError):
        orbital_period(earth_moon.with_overrides(alpha=3.0))
    escape = earth_moon.with_overrides(secondary={"position": (3.844e8, 0.0), "velocity": (0.0, -2000.0)})
    with pytest.raises(ValueError):
        orbital_period(escape)
