#!/usr/bin/env python3
"""
Simulation configuration.

A SimulationConfig is fixed when a simulation is created: physical constants,
initial conditions, the integration method and the pacing parameters that only
influence how fast the animation runs and how densely trails are sampled.

Invalid values fail fast with ConfigurationError instead of surfacing later as
a division by zero inside the stepping thread.
"""
import logging
import math
from dataclasses import dataclass, field, replace
from typing import Optional, Tuple

from .constants import (
    AVG_MOON_EARTH_DISTANCE,
    AVG_MOON_SPEED,
    DEFAULT_ALPHA,
    DEFAULT_TIME_STEP,
    EARTH_MASS,
    EARTH_POSITION,
    EARTH_VELOCITY,
    G,
    MOON_MASS,
    MOON_POSITION,
    MOON_VELOCITY,
    SECONDS_PER_REVOLUTION,
    SYNODIC_MONTH,
    VIEW_HEIGHT,
    VIEW_WIDTH,
    VISUAL_RESOLUTION,
)
from .data_models import Algorithm, Body, JointState, to_joint_state
from .vector_utils import vec_len, vec_sub

logger = logging.getLogger(__name__)


class ConfigurationError(ValueError):
    """Raised when a simulation is configured with unusable values."""


def _earth():
    return Body(position=EARTH_POSITION, velocity=EARTH_VELOCITY)


def _moon():
    return Body(position=MOON_POSITION, velocity=MOON_VELOCITY)


@dataclass(frozen=True)
class SimulationConfig:
    """
    Immutable simulation parameters (SI units).

    The defaults describe the Earth-Moon system integrated with RK4 at a
    2.4 hour step, one revolution animated in three wall-clock seconds.
    """
    gravitational_constant: float = G
    mass_primary: float = EARTH_MASS
    mass_secondary: float = MOON_MASS
    alpha: float = DEFAULT_ALPHA
    time_step: float = DEFAULT_TIME_STEP
    algorithm: Algorithm = Algorithm.RK4
    primary: Body = field(default_factory=_earth)
    secondary: Body = field(default_factory=_moon)
    seconds_per_revolution: float = SECONDS_PER_REVOLUTION
    # pacing / sampling heuristics
    revolution_period: float = SYNODIC_MONTH
    reference_distance: float = AVG_MOON_EARTH_DISTANCE
    reference_speed: float = AVG_MOON_SPEED
    visual_resolution: float = VISUAL_RESOLUTION
    decimation_factor: Optional[int] = None

    def __post_init__(self):
        try:
            algorithm = Algorithm.parse(self.algorithm)
        except ValueError as exc:
            raise ConfigurationError(str(exc)) from None
        # frozen dataclass: normalise through object.__setattr__
        object.__setattr__(self, "algorithm", algorithm)
        object.__setattr__(self, "primary", _coerce_body(self.primary, "primary"))
        object.__setattr__(self, "secondary", _coerce_body(self.secondary, "secondary"))
        self._validate()
        logger.debug("Configured %s integration: dt=%g s, alpha=%g, separation=%.6e m",
                     self.algorithm.value, self.time_step, self.alpha, self.initial_separation)

    def _validate(self) -> None:
        positive = (
            "gravitational_constant",
            "mass_primary",
            "mass_secondary",
            "time_step",
            "seconds_per_revolution",
            "revolution_period",
            "reference_distance",
            "reference_speed",
            "visual_resolution",
        )
        for name in positive:
            value = getattr(self, name)
            if not _is_finite_number(value) or value <= 0:
                raise ConfigurationError(f"{name} must be a positive finite number, got {value!r}")
        if not _is_finite_number(self.alpha):
            raise ConfigurationError(f"alpha must be a finite number, got {self.alpha!r}")
        for component in self.initial_state:
            if not _is_finite_number(component):
                raise ConfigurationError(f"initial conditions must be finite, got {self.initial_state!r}")
        if self.initial_separation == 0.0:
            raise ConfigurationError("initial positions coincide; the bodies need a non-zero separation")
        if self.decimation_factor is not None:
            if isinstance(self.decimation_factor, bool) or not isinstance(self.decimation_factor, int) \
                    or self.decimation_factor < 1:
                raise ConfigurationError(
                    f"decimation_factor must be a positive integer, got {self.decimation_factor!r}")

    @property
    def initial_state(self) -> JointState:
        return to_joint_state(self.primary, self.secondary)

    @property
    def initial_separation(self) -> float:
        return vec_len(vec_sub(self.secondary.position, self.primary.position))

    @property
    def step_delay_us(self) -> int:
        """
        Wall-clock delay between two ticks in microseconds.

        Chosen so that one revolution_period of simulated time takes
        seconds_per_revolution of real time, whatever the time step.
        """
        steps_per_revolution = self.revolution_period / self.time_step
        return max(1, int(round(self.seconds_per_revolution * 1e6 / steps_per_revolution)))

    def compute_decimation(self, screen_size: Tuple[int, int] = (VIEW_WIDTH, VIEW_HEIGHT)) -> int:
        """
        Number of steps between two recorded trail samples.

        Aims for roughly visual_resolution pixels between consecutive samples of
        the secondary at the largest scale the viewport can render. Any positive
        integer is valid; an explicit decimation_factor takes precedence.
        """
        if self.decimation_factor is not None:
            return self.decimation_factor
        max_render_scale = max(screen_size) / (self.reference_distance * 2)
        if max_render_scale <= 0:
            raise ConfigurationError(f"screen size must be positive, got {screen_size!r}")
        pixels_per_step = self.reference_speed * self.time_step * max_render_scale
        return max(1, int(math.ceil(self.visual_resolution / pixels_per_step)))

    def with_overrides(self, **changes) -> "SimulationConfig":
        """Return a copy with some fields replaced (validated again)."""
        return replace(self, **changes)


def _is_finite_number(value) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def _coerce_body(value, label: str) -> Body:
    if isinstance(value, Body):
        return Body(position=_pair(value.position, label), velocity=_pair(value.velocity, label))
    try:
        return Body(position=_pair(value["position"], label), velocity=_pair(value["velocity"], label))
    except (KeyError, TypeError) as exc:
        raise ConfigurationError(f"{label} needs 'position' and 'velocity' pairs: {exc}") from None


def _pair(value, label: str) -> Tuple[float, float]:
    try:
        x, y = value
        return (float(x), float(y))
    except (TypeError, ValueError):
        raise ConfigurationError(f"{label}: expected an (x, y) pair, got {value!r}") from None
