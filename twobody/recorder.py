#!/usr/bin/env python3
"""
Trajectory history for rendering.

The recorder keeps one append-only list of sampled positions per body. Samples
are taken every `decimation` steps by the controller; the viewer uses
last_segment() to extend its cached drawing and full_history() to redraw
everything after a resize or reset.

Not thread-safe on its own: SimulationController calls it with its lock held.
"""
from typing import Dict, List, Tuple

from .data_models import BODY_NAMES, JointState, body_position

Point = Tuple[float, float]


class TrajectoryRecorder:
    def __init__(self, decimation: int):
        if decimation < 1:
            raise ValueError(f"decimation must be a positive integer, got {decimation}")
        self.decimation = int(decimation)
        self._paths: Dict[str, List[Point]] = {name: [] for name in BODY_NAMES}

    def reset(self, initial_state: JointState) -> None:
        """Drop all history; each body starts again from its initial position."""
        for name in BODY_NAMES:
            self._paths[name] = [body_position(initial_state, name)]

    def sample(self, state: JointState) -> None:
        """Append the current position of each body."""
        for name in BODY_NAMES:
            self._paths[name].append(body_position(state, name))

    def should_sample(self, step_count: int) -> bool:
        return step_count % self.decimation == 0

    def last_segment(self, body: str) -> Tuple[Point, Point]:
        """
        The two most recent samples of a body, oldest first.

        Before the first sample after a reset the single initial point is
        returned twice (a zero-length segment).
        """
        path = self._paths[body]
        if len(path) == 1:
            return (path[0], path[0])
        return (path[-2], path[-1])

    def full_history(self, body: str) -> List[Point]:
        """Copy of every sample of a body, in chronological order."""
        return list(self._paths[body])

    def latest(self, body: str) -> Point:
        return self._paths[body][-1]

    def __len__(self):
        return len(self._paths[BODY_NAMES[0]])
