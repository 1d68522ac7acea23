#!/usr/bin/env python3
"""
Vector helper functions.

The 2-D helpers work on (x, y) tuples. The joint-state helpers work on the flat
8-tuples the integrators advance; they are plain loops over floats so that the
same inputs always produce bit-identical outputs.
"""
import math
from typing import Sequence, Tuple

Vec2 = Tuple[float, float]


def vec_sub(a: Vec2, b: Vec2) -> Vec2:
    return (a[0] - b[0], a[1] - b[1])


def vec_len(a: Vec2) -> float:
    return math.hypot(a[0], a[1])


def vec_cross(a: Vec2, b: Vec2) -> float:
    """z component of the 3-D cross product of two planar vectors."""
    return a[0] * b[1] - a[1] * b[0]


def vec_dot(a: Vec2, b: Vec2) -> float:
    return a[0] * b[0] + a[1] * b[1]


def state_axpy(u: Sequence[float], s: float, du: Sequence[float]) -> Tuple[float, ...]:
    """Return u + s * du component-wise."""
    return tuple(ui + s * dui for ui, dui in zip(u, du))


def state_add(u: Sequence[float], v: Sequence[float]) -> Tuple[float, ...]:
    return tuple(ui + vi for ui, vi in zip(u, v))


def state_zeros(n: int) -> Tuple[float, ...]:
    return (0.0,) * n
