import time

import pytest

from twobody.config import SimulationConfig
from twobody.integrators import make_integrator
from twobody.physics import TwoBodyPhysics


@pytest.fixture
def earth_moon():
    return SimulationConfig()


@pytest.fixture
def fast_config():
    # ~1 ms between ticks so threaded tests finish quickly
    return SimulationConfig(seconds_per_revolution=0.3)


def integrate(config, steps, dt=None):
    """Advance the configured initial state `steps` times without a controller."""
    physics = TwoBodyPhysics(config)
    integrator = make_integrator(config.algorithm)
    dt = config.time_step if dt is None else dt
    u = config.initial_state
    for _ in range(steps):
        u = integrator.advance(u, dt, physics.derivative)
    return u


def wait_until(predicate, timeout=5.0, interval=0.005):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(interval)
    return predicate()
