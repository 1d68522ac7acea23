#!/usr/bin/env python3
"""
Camera utilities for 2D world-to-screen transforms.
"""
from typing import Optional, Tuple

from .constants import AVG_MOON_EARTH_DISTANCE, SAFE_COORD_LIMIT, VIEW_HEIGHT, VIEW_WIDTH


class Camera2D:
    """
    Maps world coordinates (meters, y up) to screen pixels (y down).

    The world origin sits at the viewport centre and the scale is chosen so a
    square of 2 * reference_distance fits the smaller viewport dimension.
    """

    def __init__(self, reference_distance: float = AVG_MOON_EARTH_DISTANCE,
                 viewport_size: Tuple[int, int] = (VIEW_WIDTH, VIEW_HEIGHT)):
        self.reference_distance = reference_distance
        self.viewport_size = viewport_size
        self.scale = 1.0  # pixels per meter
        self.origin = (0.0, 0.0)
        self.set_viewport_size(*viewport_size)

    def set_viewport_size(self, w: int, h: int) -> None:
        w, h = max(1, int(w)), max(1, int(h))
        self.viewport_size = (w, h)
        self.origin = (w / 2.0, h / 2.0)
        span = self.reference_distance * 2
        self.scale = min(w / span, h / span)

    def world_to_screen(self, pos: Tuple[float, float]) -> Tuple[float, float]:
        px = self.origin[0] + pos[0] * self.scale
        py = self.origin[1] - pos[1] * self.scale
        return (px, py)

    def to_pixel(self, pos: Tuple[float, float]) -> Optional[Tuple[int, int]]:
        """Integer screen point, or None when off-limits or not finite."""
        px, py = self.world_to_screen(pos)
        try:
            x, y = int(px), int(py)
        except (ValueError, OverflowError):
            return None
        if -SAFE_COORD_LIMIT <= x <= SAFE_COORD_LIMIT and -SAFE_COORD_LIMIT <= y <= SAFE_COORD_LIMIT:
            return (x, y)
        return None
