#!/usr/bin/env python3
"""
Core Physics Model for the two-body simulator

Responsibilities
- Compute the time-derivative of the joint state [x1, y1, vx1, vy1, x2, y2, vx2, vy2]
  under a generalised inverse-power gravity law F = G*M1*M2 / r^alpha.
- Provide conserved-quantity diagnostics (total energy, angular momentum) and a few
  orbital helpers (circular velocity, Kepler period of the relative orbit).

Units and conventions
- World space positions are in meters [m].
- Velocities are in meters per second [m/s].
- Masses are in kilograms [kg].
- The gravitational constant G is expressed in SI: m^3 kg^-1 s^-2.

Numerical notes
- No softening: the force law is exact. When the separation reaches zero the
  derivative divides by zero (ZeroDivisionError) and the simulation cannot go on.
  Near-zero separations overflow to inf/NaN, which then propagate through every
  later state. Both are treated as fatal; nothing here tries to recover.
- The forces are computed once per pair and applied with opposite signs, so
  |a1| * M1 == |a2| * M2 holds up to rounding for every evaluated state.

Threading
- This module is pure compute. It is called by SimulationController with the
  controller lock held.
"""

import math
from typing import Tuple

from .config import SimulationConfig
from .data_models import JointState
from .vector_utils import vec_cross, vec_len, vec_sub


class TwoBodyPhysics:
    """
    Gravitational model for a primary (M1) and a secondary (M2).

    The acceleration of each body is:

        a1 =  G * M2 * d / l^(alpha + 1)
        a2 = -G * M1 * d / l^(alpha + 1)

    where d = r2 - r1 and l = |d|. With alpha = 2 this is Newton's inverse-square law.
    """

    def __init__(self, config: SimulationConfig):
        self.gm_primary = config.gravitational_constant * config.mass_primary
        self.gm_secondary = config.gravitational_constant * config.mass_secondary
        self.mass_primary = config.mass_primary
        self.mass_secondary = config.mass_secondary
        self.gravitational_constant = config.gravitational_constant
        self.alpha = config.alpha

    def derivative(self, u: JointState) -> JointState:
        """
        Time-derivative of the joint state.

        Args:
            u: Joint state (x1, y1, vx1, vy1, x2, y2, vx2, vy2).

        Returns:
            (vx1, vy1, ax1, ay1, vx2, vy2, ax2, ay2)
        """
        x1, y1, vx1, vy1, x2, y2, vx2, vy2 = u
        # vector from primary to secondary
        dx = x2 - x1
        dy = y2 - y1
        l = math.sqrt(dx * dx + dy * dy)
        p = self.alpha + 1
        k1 = self.gm_secondary / l ** p
        k2 = -self.gm_primary / l ** p
        return (vx1, vy1, k1 * dx, k1 * dy, vx2, vy2, k2 * dx, k2 * dy)

    __call__ = derivative

    def kinetic_energy(self, u: JointState) -> float:
        v1_sq = u[2] * u[2] + u[3] * u[3]
        v2_sq = u[6] * u[6] + u[7] * u[7]
        return 0.5 * self.mass_primary * v1_sq + 0.5 * self.mass_secondary * v2_sq

    def potential_energy(self, u: JointState) -> float:
        """
        Potential of the 1/r^alpha force, zero at infinity when alpha > 1.

        For alpha == 1 the potential is logarithmic (reference at l = 1 m).
        """
        l = separation(u)
        gmm = self.gravitational_constant * self.mass_primary * self.mass_secondary
        if self.alpha == 1.0:
            return gmm * math.log(l)
        return -gmm / ((self.alpha - 1.0) * l ** (self.alpha - 1.0))

    def total_energy(self, u: JointState) -> float:
        """Total mechanical energy [J]."""
        return self.kinetic_energy(u) + self.potential_energy(u)

    def angular_momentum(self, u: JointState) -> float:
        """z component of the total angular momentum about the origin [kg m^2 s^-1]."""
        l1 = vec_cross((u[0], u[1]), (u[2], u[3]))
        l2 = vec_cross((u[4], u[5]), (u[6], u[7]))
        return self.mass_primary * l1 + self.mass_secondary * l2

    def momentum(self, u: JointState) -> Tuple[float, float]:
        """Total linear momentum (px, py) [kg m s^-1]."""
        return (
            self.mass_primary * u[2] + self.mass_secondary * u[6],
            self.mass_primary * u[3] + self.mass_secondary * u[7],
        )


def separation(u: JointState) -> float:
    """Distance between the two bodies in meters."""
    return vec_len(vec_sub((u[4], u[5]), (u[0], u[1])))


def circular_orbit_velocity(gm: float, orbital_radius: float) -> float:
    """
    Relative speed needed for a circular orbit under the inverse-square law.

    For a circular orbit gravity provides exactly the centripetal force:
    G * M / r = v^2 / r, therefore v = sqrt(G * M / r).

    Args:
        gm: Gravitational parameter G * (M1 + M2) in m^3/s^2
        orbital_radius: Orbital radius in meters

    Returns:
        Orbital velocity in m/s for a circular orbit
    """
    if orbital_radius <= 0:
        return 0.0

    return math.sqrt(gm / orbital_radius)


def orbital_period(config: SimulationConfig) -> float:
    """
    Kepler period of the relative orbit described by the initial conditions.

    Uses the vis-viva energy of the relative motion to get the semi-major axis
    and Kepler's third law T = 2*pi*sqrt(a^3 / mu), with mu = G * (M1 + M2).

    Raises:
        ValueError: if alpha != 2 or the initial conditions are not bound.
    """
    if config.alpha != 2.0:
        raise ValueError(f"Kepler period is only defined for alpha == 2, got {config.alpha}")
    mu = config.gravitational_constant * (config.mass_primary + config.mass_secondary)
    r = config.initial_separation
    v = vec_len(vec_sub(config.secondary.velocity, config.primary.velocity))
    specific_energy = 0.5 * v * v - mu / r
    if specific_energy >= 0:
        raise ValueError("initial conditions describe an unbound (parabolic or hyperbolic) orbit")
    semi_major_axis = -mu / (2.0 * specific_energy)
    return 2.0 * math.pi * math.sqrt(semi_major_axis ** 3 / mu)
