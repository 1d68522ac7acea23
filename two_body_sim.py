#!/usr/bin/env python3
"""
Two-body simulator application entry point and viewer coordination.

What this module does
- Creates a SimulationController from the default Earth-Moon configuration or a
  JSON preset, and starts two event loops: a Pygame rendering thread (viewport)
  and the Dear PyGui control panel (running on the main thread).
- The controller steps the simulation on its own timer thread; this module only
  reads positions and trail history and issues start/stop/reset commands.

Threading model
- Trails are drawn onto a cached surface. New segments are added by a segment
  listener that runs on the stepping thread while the controller lock is held;
  the render thread blits the cache under the same lock. On resize or reset the
  cache is dropped and rebuilt from the full history.
- The UI class runs in the main thread via Dear PyGui and calls the
  controller's lock-protected commands.

Running
1) Install: `pip install -e .`
2) Run: `python two_body_sim.py [preset.json]`

Keys (viewport): Space start/stop, R reset, Esc quit.
"""

import logging
import sys
import threading
from typing import Optional

import dearpygui.dearpygui as dpg
import pygame
from pygame import gfxdraw

from twobody.camera import Camera2D
from twobody.config import ConfigurationError, SimulationConfig
from twobody.constants import (
    BACKGROUND_COLOR,
    MARKER_RADIUS,
    MIN_VIEW_HEIGHT,
    MIN_VIEW_WIDTH,
    PRIMARY_COLOR,
    SECONDARY_COLOR,
    TRAIL_WIDTH,
    VIEW_HEIGHT,
    VIEW_WIDTH,
)
from twobody.data_models import PRIMARY, SECONDARY
from twobody.presets_loader import list_presets, load_preset
from twobody.scheduler import SimulationController

logger = logging.getLogger("two_body_sim")

BODY_COLORS = {PRIMARY: PRIMARY_COLOR, SECONDARY: SECONDARY_COLOR}
SECONDS_PER_DAY = 86400.0

# ============================================================
# Pygame Renderer Thread
# ============================================================

class PygameRenderer(threading.Thread):
    """
    Pygame loop: draws cached trails and body markers.
    """
    def __init__(self, sim: SimulationController):
        super().__init__(daemon=True)
        self.sim: Optional[SimulationController] = None
        self.camera = Camera2D(reference_distance=sim.config.reference_distance)
        self.surface = None
        self.trail_surface = None  # guarded by sim.lock
        self.clock = None
        self.running = True
        self._generation = None
        self._initial_energy = 0.0
        self.attach(sim)

    def attach(self, sim: SimulationController):
        """Switch to another controller (e.g. after loading a preset)."""
        old = self.sim
        if old is not None:
            old.remove_segment_listener(self.on_new_segment)
        self.sim = sim
        with sim.lock:
            self.camera.reference_distance = sim.config.reference_distance
            self.camera.set_viewport_size(*self.camera.viewport_size)
            self.trail_surface = None
            self._initial_energy = sim.physics.total_energy(sim.config.initial_state)
        sim.add_segment_listener(self.on_new_segment)

    def on_new_segment(self, sim: SimulationController):
        # called on the stepping thread with sim.lock held
        if self.trail_surface is None:
            return
        for body, color in BODY_COLORS.items():
            start, end = sim.last_segment(body)
            self._draw_segment(start, end, color)

    def rebuild_trails(self):
        """Redraw every recorded segment onto a fresh cache surface. Caller holds sim.lock."""
        self.trail_surface = pygame.Surface(self.camera.viewport_size, pygame.SRCALPHA)
        for body, color in BODY_COLORS.items():
            path = self.sim.full_history(body)
            for start, end in zip(path, path[1:]):
                self._draw_segment(start, end, color)
        self._generation = self.sim.generation

    def _draw_segment(self, start, end, color):
        a = self.camera.to_pixel(start)
        b = self.camera.to_pixel(end)
        if a is None or b is None:
            return
        pygame.draw.line(self.trail_surface, color, a, b, TRAIL_WIDTH)

    def run(self):
        pygame.init()
        pygame.display.set_caption("Two Body Problem Simulation - Viewport")
        self.surface = pygame.display.set_mode((VIEW_WIDTH, VIEW_HEIGHT), pygame.RESIZABLE)
        with self.sim.lock:
            self.camera.set_viewport_size(VIEW_WIDTH, VIEW_HEIGHT)
            self.trail_surface = None
        self.clock = pygame.time.Clock()

        while self.running:
            self.handle_events()
            self.draw()
            self.clock.tick(60)

        pygame.quit()

    def handle_events(self):
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False

            elif event.type == pygame.VIDEORESIZE:
                w = max(event.w, MIN_VIEW_WIDTH)
                h = max(event.h, MIN_VIEW_HEIGHT)
                self.surface = pygame.display.set_mode((w, h), pygame.RESIZABLE)
                with self.sim.lock:
                    self.camera.set_viewport_size(w, h)
                    self.trail_surface = None

            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_SPACE:
                    if self.sim.running:
                        self.sim.stop()
                    else:
                        self.sim.start()
                elif event.key == pygame.K_r:
                    self.sim.reset()
                elif event.key == pygame.K_ESCAPE:
                    self.running = False

    def draw(self):
        surf = self.surface
        surf.fill(BACKGROUND_COLOR)

        sim = self.sim
        with sim.lock:
            if self.trail_surface is None or self._generation != sim.generation:
                self.rebuild_trails()
            surf.blit(self.trail_surface, (0, 0))
            markers = {body: sim.current_position(body) for body in BODY_COLORS}
            step_count = sim.step_count
            state = sim.state
            playing = sim.running
            fault = sim.fault

        for body, pos in markers.items():
            p = self.camera.to_pixel(pos)
            if p is None:
                continue
            gfxdraw.filled_circle(surf, p[0], p[1], MARKER_RADIUS, BODY_COLORS[body])
            gfxdraw.aacircle(surf, p[0], p[1], MARKER_RADIUS, BODY_COLORS[body])

        days = step_count * sim.config.time_step / SECONDS_PER_DAY
        drift = energy_drift(sim, state, self._initial_energy)
        draw_text(surf, f"t = {days:8.2f} d   steps: {step_count}   dE/E0: {drift:+.2e}", 10, 10, (60, 60, 60))
        status = "Running" if playing else "Stopped"
        if fault is not None:
            status = f"Fault: {fault!r}"
        draw_text(surf, f"[{status}]  Space: start/stop  R: reset", 10, 30, (60, 60, 60))

        pygame.display.flip()


def energy_drift(sim: SimulationController, state, initial_energy: float) -> float:
    """Relative change of total energy since the initial state."""
    if initial_energy == 0:
        return 0.0
    try:
        return (sim.physics.total_energy(state) - initial_energy) / abs(initial_energy)
    except (ZeroDivisionError, OverflowError):
        return float("nan")


_cached_font = None

def draw_text(surface, text, x, y, color):
    global _cached_font
    if not pygame.font.get_init():
        pygame.font.init()
    if _cached_font is None:
        _cached_font = pygame.font.SysFont("consolas", 16)
    img = _cached_font.render(text, True, color)
    surface.blit(img, (x, y))

# ============================================================
# Dear PyGui UI
# ============================================================

class UI:
    """
    Dear PyGui control panel: preset selection and Start / Stop / Reset.
    """
    def __init__(self, sim: SimulationController, renderer: PygameRenderer):
        self.sim = sim
        self.renderer = renderer
        self.status_msg_id = None
        self.info_id = None
        self._preset_map = {display: fn for fn, display in list_presets()}

        self._build_ui()
        self._schedule_sync()

    def _schedule_sync(self):
        """Reschedule the periodic sync callback using frame callbacks (approx ~10Hz)."""
        current = dpg.get_frame_count()
        dpg.set_frame_callback(current + 6, self._sync_ui_with_sim)

    def _build_ui(self):
        dpg.create_context()
        dpg.create_viewport(title='Two Body Problem - Controls', width=420, height=220)

        with dpg.window(label="Controls", width=400, height=200, pos=(10, 10), tag="main_window"):
            if self._preset_map:
                with dpg.group(horizontal=True):
                    dpg.add_text("Preset:")
                    dpg.add_combo(list(self._preset_map.keys()),
                                  default_value=next(iter(self._preset_map)),
                                  width=240,
                                  tag="preset_combo")
                    dpg.add_button(label="Load", callback=lambda: self.load_preset(dpg.get_value("preset_combo")))
                dpg.add_separator()
            with dpg.group(horizontal=True):
                dpg.add_button(label="Start", callback=lambda: self._command("start"))
                dpg.add_button(label="Stop", callback=lambda: self._command("stop"))
                dpg.add_button(label="Reset", callback=lambda: self._command("reset"))
            dpg.add_separator()
            self.info_id = dpg.add_text("")
            self.status_msg_id = dpg.add_text("", color=(180, 220, 180))

        dpg.setup_dearpygui()
        dpg.show_viewport()

    def _set_status(self, msg: str, color=(180, 220, 180)):
        dpg.set_value(self.status_msg_id, msg)
        dpg.configure_item(self.status_msg_id, color=color)

    def _set_error(self, msg: str):
        self._set_status(msg, color=(255, 120, 120))

    def _command(self, name: str):
        getattr(self.sim, name)()
        self._set_status(f"{name.capitalize()}: {self.sim.status.value}")

    def load_preset(self, display_name: str):
        fn = self._preset_map.get(display_name)
        if fn is None:
            return
        try:
            config = load_preset(fn)
        except ConfigurationError as exc:
            logger.error("Cannot load preset %s: %s", fn, exc)
            self._set_error(str(exc))
            return
        self.sim.stop()
        self.sim = SimulationController(config)
        self.renderer.attach(self.sim)
        self._set_status(f"Loaded preset: {display_name}")

    def _sync_ui_with_sim(self):
        snap = self.sim.snapshot()
        cfg = self.sim.config
        dpg.set_value(self.info_id,
                      f"{cfg.algorithm.value.upper()}  dt={cfg.time_step:g} s  "
                      f"steps={snap.step_count}  samples={len(snap.full_history(PRIMARY))}")
        if not self.renderer.is_alive():
            dpg.stop_dearpygui()
            return
        self._schedule_sync()

# ============================================================
# Application Entry
# ============================================================

def build_config(argv) -> SimulationConfig:
    if len(argv) > 1:
        return load_preset(argv[1])
    return SimulationConfig()


def main(argv=None):
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s  %(levelname)-7s  %(name)s  %(message)s",
        datefmt="%H:%M:%S"
    )
    argv = sys.argv if argv is None else argv
    try:
        config = build_config(argv)
    except ConfigurationError as exc:
        logger.error("Invalid configuration: %s", exc)
        return 2

    sim = SimulationController(config)
    renderer = PygameRenderer(sim)

    # Start Pygame renderer thread
    renderer.start()

    ui = UI(sim, renderer)

    try:
        dpg.start_dearpygui()
    finally:
        ui.sim.stop()
        renderer.running = False
        renderer.join(timeout=2.0)
        dpg.destroy_context()
    return 0

if __name__ == "__main__":
    sys.exit(main())
