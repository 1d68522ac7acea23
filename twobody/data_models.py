#!/usr/bin/env python3
"""
Data models for the two-body simulator.

This module defines the value types shared between physics, integrators, the
controller and the viewer.

Units and usage
- position is in meters [m], velocity in meters per second [m/s].
- Masses are configuration constants (see twobody.config), not body state.
- The joint state is the flat 8-tuple [x1, y1, vx1, vy1, x2, y2, vx2, vy2]
  that the integrators advance; Body pairs convert to and from it losslessly.
- SimulationState is mutated only by SimulationController under its lock.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Tuple

JointState = Tuple[float, float, float, float, float, float, float, float]

PRIMARY = "primary"
SECONDARY = "secondary"
BODY_NAMES = (PRIMARY, SECONDARY)

# offset of each body's block inside the joint state
_BODY_OFFSET = {PRIMARY: 0, SECONDARY: 4}


class Algorithm(Enum):
    """Integration method, chosen once per simulation."""
    EULER = "euler"
    RK4 = "rk4"

    @classmethod
    def parse(cls, value) -> "Algorithm":
        """
        Accept an Algorithm or a case-insensitive name.

        Raises:
            ValueError: if the name is not a known algorithm.
        """
        if isinstance(value, cls):
            return value
        name = str(value).strip().lower().replace("-", "_")
        aliases = {
            "euler": cls.EULER,
            "rk4": cls.RK4,
            "runge_kutta_4": cls.RK4,
            "runge_kutta": cls.RK4,
        }
        try:
            return aliases[name]
        except KeyError:
            raise ValueError(f"unknown algorithm {value!r}; expected one of: euler, rk4") from None


@dataclass(frozen=True)
class Body:
    """
    Kinematic state of one point mass.

    Fields:
    - position: 2D position (x, y) in meters
    - velocity: 2D velocity (vx, vy) in meters/second
    """
    position: Tuple[float, float]
    velocity: Tuple[float, float]


def to_joint_state(primary: Body, secondary: Body) -> JointState:
    """Pack two bodies into the flat vector integrated by the numerical method."""
    return (
        primary.position[0], primary.position[1],
        primary.velocity[0], primary.velocity[1],
        secondary.position[0], secondary.position[1],
        secondary.velocity[0], secondary.velocity[1],
    )


def from_joint_state(u: JointState) -> Tuple[Body, Body]:
    """Unpack a joint state into (primary, secondary)."""
    if len(u) != 8:
        raise ValueError(f"joint state must have 8 components, got {len(u)}")
    primary = Body(position=(u[0], u[1]), velocity=(u[2], u[3]))
    secondary = Body(position=(u[4], u[5]), velocity=(u[6], u[7]))
    return primary, secondary


def body_position(u: JointState, body: str) -> Tuple[float, float]:
    """Position of the named body inside a joint state."""
    i = _BODY_OFFSET[body]
    return (u[i], u[i + 1])


@dataclass(frozen=True)
class SimulationState:
    """Joint state plus the number of integration steps taken since reset."""
    state: JointState
    step_count: int = 0

    def advanced(self, new_state: JointState) -> "SimulationState":
        return SimulationState(state=tuple(new_state), step_count=self.step_count + 1)
