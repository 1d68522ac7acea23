#!/usr/bin/env python3
"""
Fixed-step explicit integrators for the joint state.

Both integrators advance a flat state tuple by one time step, given a function
that returns the state's time-derivative. They hold no state between calls, so
the same inputs always produce the same outputs bit for bit.
"""
from typing import Callable, Sequence, Tuple

from .data_models import Algorithm
from .vector_utils import state_add, state_axpy, state_zeros

DerivativeFn = Callable[[Sequence[float]], Sequence[float]]


class Integrator:
    """Interface shared by the integration methods."""

    algorithm: Algorithm

    def advance(self, state: Sequence[float], dt: float, derivative_fn: DerivativeFn) -> Tuple[float, ...]:
        raise NotImplementedError

    def __repr__(self):
        return f"{type(self).__name__}()"


class EulerIntegrator(Integrator):
    """
    Explicit (forward) Euler method, first order.

    One derivative evaluation per step: u' = u + dt * f(u). Cheap, but the local
    truncation error is large; it needs a much smaller dt than RK4 for
    comparable accuracy (about an hour for the Earth-Moon system).
    """

    algorithm = Algorithm.EULER

    def advance(self, state, dt, derivative_fn):
        return state_axpy(state, dt, derivative_fn(state))


class RungeKutta4Integrator(Integrator):
    """
    Classical fourth-order Runge-Kutta method.

    Four derivative evaluations per step, combined as a weighted average of
    slopes:

    1) du1 = f(u0)
    2) du2 = f(u0 + dt/2 * du1)
    3) du3 = f(u0 + dt/2 * du2)
    4) du4 = f(u0 + dt * du3)

    u' = u0 + dt/6 * du1 + dt/3 * du2 + dt/3 * du3 + dt/6 * du4

    Each stage input is built from u0 and the previous stage's derivative. The
    accumulation order is fixed so that trajectories are reproducible.
    """

    algorithm = Algorithm.RK4

    def advance(self, state, dt, derivative_fn):
        u0 = tuple(state)
        stage_dt = (dt / 2.0, dt / 2.0, dt, 0.0)
        weights = (dt / 6.0, dt / 3.0, dt / 3.0, dt / 6.0)
        u = u0
        acc = state_zeros(len(u0))
        for j in range(4):
            du = derivative_fn(u)
            # stage 4 has offset 0: its evaluation point is never used
            u = state_axpy(u0, stage_dt[j], du)
            acc = state_axpy(acc, weights[j], du)
        return state_add(u0, acc)


_INTEGRATORS = {
    Algorithm.EULER: EulerIntegrator,
    Algorithm.RK4: RungeKutta4Integrator,
}


def make_integrator(algorithm) -> Integrator:
    """Instantiate the integrator for an Algorithm (or its name)."""
    return _INTEGRATORS[Algorithm.parse(algorithm)]()
