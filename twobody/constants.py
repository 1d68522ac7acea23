#!/usr/bin/env python3
"""
Shared constants for the two-body simulator (SI units unless stated otherwise).

Keeping constants in one place helps ensure values are consistent across the
codebase and makes tuning easier.
"""

# Physical constants
G = 6.6743e-11  # m^3 kg^-1 s^-2
EARTH_MASS = 5.972e24  # kg
MOON_MASS = 7.349e22  # kg

# Earth-Moon initial conditions (origin at Earth, Moon on the +x axis)
EARTH_POSITION = (0.0, 0.0)  # m
EARTH_VELOCITY = (0.0, 1.131e1)  # m/s
MOON_POSITION = (3.844e8, 0.0)  # m
MOON_VELOCITY = (0.0, -9.189e2)  # m/s

# Integration defaults
# 8.64e4 s (one day) is enough for RK4; Euler needs roughly 3.6e3 s (one hour)
DEFAULT_TIME_STEP = 8.64e3  # s
DEFAULT_ALPHA = 2.0  # exponent of the 1/r^alpha force law

# Pacing heuristics, only used to derive tick cadence and trail decimation
AVG_MOON_EARTH_DISTANCE = 3.844e8  # m
AVG_MOON_SPEED = 9.189e2  # m/s
SYNODIC_MONTH = 2.628e6  # s, simulated seconds per revolution
SECONDS_PER_REVOLUTION = 3.0  # wall-clock seconds per revolution
VISUAL_RESOLUTION = 10.0  # px between consecutive trail samples

# Rendering (viewport)
VIEW_WIDTH = 1100
VIEW_HEIGHT = 800
MIN_VIEW_WIDTH = 700
MIN_VIEW_HEIGHT = 500
BACKGROUND_COLOR = (255, 255, 255)
PRIMARY_COLOR = (192, 57, 43)
SECONDARY_COLOR = (41, 128, 185)
TRAIL_WIDTH = 2
MARKER_RADIUS = 4

# Safety: avoid drawing outside reasonable integer pixel ranges
SAFE_COORD_LIMIT = 30000
