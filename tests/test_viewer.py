import os

import pytest

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
pygame = pytest.importorskip("pygame")
pytest.importorskip("dearpygui.dearpygui")

import two_body_sim  # noqa: E402
from twobody.camera import Camera2D  # noqa: E402
from twobody.config import SimulationConfig  # noqa: E402
from twobody.scheduler import SimulationController  # noqa: E402


@pytest.fixture
def sim():
    return SimulationController(SimulationConfig(decimation_factor=1))


def _painted(surface):
    return surface.get_bounding_rect().width > 0


def test_camera_fits_reference_orbit():
    cam = Camera2D(reference_distance=100.0, viewport_size=(400, 200))
    assert cam.scale == 1.0
    assert cam.world_to_screen((0.0, 0.0)) == (200.0, 100.0)
    # y axis points up on screen
    assert cam.world_to_screen((100.0, 50.0)) == (300.0, 50.0)
    assert cam.to_pixel((float("nan"), 0.0)) is None
    assert cam.to_pixel((1e9, 0.0)) is None


def test_trail_cache_is_extended_incrementally(sim):
    renderer = two_body_sim.PygameRenderer(sim)
    with sim.lock:
        renderer.rebuild_trails()
    assert not _painted(renderer.trail_surface)

    for _ in range(20):
        sim.step()
    assert _painted(renderer.trail_surface)


def test_trail_cache_rebuilds_after_reset(sim):
    renderer = two_body_sim.PygameRenderer(sim)
    for _ in range(20):
        sim.step()
    with sim.lock:
        renderer.rebuild_trails()
    assert _painted(renderer.trail_surface)
    sim.reset()
    assert renderer._generation != sim.generation
    with sim.lock:
        renderer.rebuild_trails()
    assert not _painted(renderer.trail_surface)


def test_attach_moves_listener_to_new_controller(sim):
    renderer = two_body_sim.PygameRenderer(sim)
    other = SimulationController(SimulationConfig(decimation_factor=1))
    renderer.attach(other)
    with other.lock:
        renderer.rebuild_trails()
    for _ in range(20):
        sim.step()
    assert not _painted(renderer.trail_surface)
    for _ in range(20):
        other.step()
    assert _painted(renderer.trail_surface)


def test_energy_drift_starts_at_zero(sim):
    e0 = sim.physics.total_energy(sim.config.initial_state)
    assert two_body_sim.energy_drift(sim, sim.config.initial_state, e0) == 0.0
    for _ in range(50):
        sim.step()
    assert abs(two_body_sim.energy_drift(sim, sim.state, e0)) < 1e-3


def test_build_config(tmp_path):
    assert two_body_sim.build_config(["two_body_sim.py"]) == SimulationConfig()
    assert two_body_sim.build_config(["two_body_sim.py", "earth_moon_euler.json"]).time_step == 3600.0
