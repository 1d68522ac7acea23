import math
import random

import pytest

from twobody.data_models import (
    Algorithm,
    Body,
    PRIMARY,
    SECONDARY,
    SimulationState,
    body_position,
    from_joint_state,
    to_joint_state,
)


def test_joint_state_field_order():
    primary = Body(position=(1.0, 2.0), velocity=(3.0, 4.0))
    secondary = Body(position=(5.0, 6.0), velocity=(7.0, 8.0))
    assert to_joint_state(primary, secondary) == (1.0, 2.0, 3.0, 4.0, 5.0, 6.0, 7.0, 8.0)


def test_round_trip_is_identity_for_finite_values():
    rng = random.Random(1234)
    samples = [
        (0.0, -0.0, 1e-300, -1e-300, 1e300, -1e300, 5e-324, 1.7976931348623157e308),
        (3.844e8, 0.0, 0.0, -9.189e2, 0.0, 0.0, 0.0, 1.131e1),
    ]
    samples += [tuple(rng.uniform(-1e12, 1e12) for _ in range(8)) for _ in range(50)]
    for u in samples:
        back = to_joint_state(*from_joint_state(u))
        assert back == u
        # bitwise, including the sign of zero
        assert all(math.copysign(1.0, a) == math.copysign(1.0, b) for a, b in zip(back, u))


def test_from_joint_state_rejects_wrong_length():
    with pytest.raises(ValueError):
        from_joint_state((0.0,) * 7)


def test_body_position_lookup():
    u = (1.0, 2.0, 3.0, 4.0, 5.0, 6.0, 7.0, 8.0)
    assert body_position(u, PRIMARY) == (1.0, 2.0)
    assert body_position(u, SECONDARY) == (5.0, 6.0)
    with pytest.raises(KeyError):
        body_position(u, "tertiary")


@pytest.mark.parametrize("name,expected", [
    ("rk4", Algorithm.RK4),
    ("RK4", Algorithm.RK4),
    ("Runge-Kutta-4", Algorithm.RK4),
    ("euler", Algorithm.EULER),
    (" Euler ", Algorithm.EULER),
    (Algorithm.EULER, Algorithm.EULER),
])
def test_algorithm_parse(name, expected):
    assert Algorithm.parse(name) is expected


def test_algorithm_parse_unknown():
    with pytest.raises(ValueError, match="leapfrog"):
        Algorithm.parse("leapfrog")


def test_simulation_state_advanced_counts_steps():
    s = SimulationState(state=(0.0,) * 8)
    s2 = s.advanced([1.0] * 8)
    assert s.step_count == 0
    assert s2.step_count == 1
    assert s2.state == (1.0,) * 8
