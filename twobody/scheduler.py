#!/usr/bin/env python3
"""
Simulation controller and fixed-rate stepping.

What this module does
- PeriodicTask: a daemon thread that calls a function at a fixed nominal period.
  A late tick re-anchors the schedule: ticks never fire twice to catch up.
  Cancelling only prevents future ticks; a tick already running completes.
- SimulationController: owns the joint state, step counter and trajectory
  history, and exposes the start/stop/reset lifecycle plus locked snapshot
  queries for a rendering collaborator.

Threading model
- The stepping thread mutates state only while holding `controller.lock`
  (a re-entrant lock). One integration step plus the optional trail sample
  happen in one critical section, so readers never see a half-updated state.
- Renderers read through the query methods, each of which takes the same lock.
  Several queries can be grouped consistently with `with controller.lock:`,
  or snapshot() can be used to copy everything at once.
- Segment listeners are called on the stepping thread with the lock held, right
  after a new trail sample is appended.
"""
import logging
import threading
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple

from .config import SimulationConfig
from .constants import VIEW_HEIGHT, VIEW_WIDTH
from .data_models import BODY_NAMES, JointState, SimulationState, body_position
from .integrators import make_integrator
from .physics import TwoBodyPhysics
from .recorder import Point, TrajectoryRecorder

logger = logging.getLogger(__name__)


class PeriodicTask(threading.Thread):
    """
    Call `fn(task)` every `period` seconds on a dedicated daemon thread.

    The first call happens immediately. If `fn` raises, the exception is logged,
    stored in `error`, passed to `on_error` and no further ticks run.
    """

    def __init__(self, fn: Callable[["PeriodicTask"], None], period: float,
                 on_error: Optional[Callable[["PeriodicTask", BaseException], None]] = None,
                 name: str = "twobody-ticker"):
        super().__init__(name=name, daemon=True)
        if period <= 0:
            raise ValueError(f"period must be positive, got {period}")
        self.period = period
        self.error: Optional[BaseException] = None
        self._fn = fn
        self._on_error = on_error
        self._cancel_event = threading.Event()

    @property
    def cancelled(self) -> bool:
        return self._cancel_event.is_set()

    def cancel(self) -> None:
        """Prevent future ticks. Does not interrupt a tick in progress."""
        self._cancel_event.set()

    def run(self):
        next_tick = time.monotonic()
        while not self._cancel_event.is_set():
            try:
                self._fn(self)
            except Exception as exc:
                self.error = exc
                self._cancel_event.set()
                logger.exception("Periodic task %s failed; no further ticks will run", self.name)
                if self._on_error is not None:
                    self._on_error(self, exc)
                return
            next_tick += self.period
            delay = next_tick - time.monotonic()
            if delay < 0:
                # late: resume the cadence from now
                next_tick = time.monotonic()
                delay = 0.0
            if self._cancel_event.wait(delay):
                return


class SimulationStatus(Enum):
    STOPPED = "stopped"
    RUNNING = "running"


@dataclass(frozen=True)
class Snapshot:
    """Consistent copy of everything a renderer needs, taken under one lock acquisition."""
    status: SimulationStatus
    generation: int
    step_count: int
    state: JointState
    positions: Dict[str, Point]
    histories: Dict[str, Tuple[Point, ...]]

    def current_position(self, body: str) -> Point:
        return self.positions[body]

    def full_history(self, body: str) -> Tuple[Point, ...]:
        return self.histories[body]

    def last_segment(self, body: str) -> Tuple[Point, Point]:
        path = self.histories[body]
        if len(path) == 1:
            return (path[0], path[0])
        return (path[-2], path[-1])


SegmentListener = Callable[["SimulationController"], None]


class SimulationController:
    """
    Shared simulation state between the stepping thread and a renderer.

    Lifecycle: STOPPED -> start() -> RUNNING -> stop() -> STOPPED. reset() works
    from either state, leaves the controller STOPPED and restores the configured
    initial conditions. Redundant commands are no-ops.
    """

    def __init__(self, config: Optional[SimulationConfig] = None,
                 screen_size: Tuple[int, int] = (VIEW_WIDTH, VIEW_HEIGHT)):
        self.config = config if config is not None else SimulationConfig()
        self.lock = threading.RLock()
        self.physics = TwoBodyPhysics(self.config)
        self.integrator = make_integrator(self.config.algorithm)
        self.decimation = self.config.compute_decimation(screen_size)
        self.recorder = TrajectoryRecorder(self.decimation)
        self.fault: Optional[BaseException] = None
        self.generation = 0

        self._listeners: List[SegmentListener] = []
        self._task: Optional[PeriodicTask] = None
        self._last_task: Optional[PeriodicTask] = None

        self.initialize()
        logger.info("Simulation ready: %s, dt=%g s, tick every %d us, sample every %d steps",
                    self.integrator.algorithm.value, self.config.time_step,
                    self.config.step_delay_us, self.decimation)

    # -----------------------
    # Lifecycle
    # -----------------------

    def initialize(self) -> None:
        """Restore the configured initial state and a one-sample history."""
        with self.lock:
            self._sim = SimulationState(state=self.config.initial_state, step_count=0)
            self.recorder.reset(self._sim.state)
            self.generation += 1

    @property
    def status(self) -> SimulationStatus:
        with self.lock:
            return SimulationStatus.RUNNING if self._task is not None else SimulationStatus.STOPPED

    @property
    def running(self) -> bool:
        return self.status is SimulationStatus.RUNNING

    def start(self) -> None:
        with self.lock:
            if self._task is not None:
                logger.debug("start() ignored: already running")
                return
            task = PeriodicTask(self._tick, self.config.step_delay_us / 1e6, on_error=self._on_tick_error)
            self._task = task
            self._last_task = task
            task.start()
            logger.info("Simulation started at step %d", self._sim.step_count)

    def stop(self) -> None:
        with self.lock:
            if self._task is None:
                logger.debug("stop() ignored: already stopped")
                return
            self._task.cancel()
            self._task = None
            logger.info("Simulation stopped at step %d", self._sim.step_count)

    def reset(self) -> None:
        with self.lock:
            if self._task is not None:
                self.stop()
            self.fault = None
            self.initialize()
            logger.info("Simulation reset")

    def join(self, timeout: Optional[float] = None) -> bool:
        """
        Wait for the most recent stepping thread to exit.

        Returns True if no stepping thread is alive afterwards.
        """
        task = self._last_task
        if task is None or task is threading.current_thread():
            return True
        task.join(timeout)
        return not task.is_alive()

    # -----------------------
    # Stepping
    # -----------------------

    def step(self) -> None:
        """Advance one integration step (sampling the trail when due)."""
        with self.lock:
            self._step_locked()

    def _tick(self, task: PeriodicTask) -> None:
        with self.lock:
            # a tick racing with stop()/reset() must not advance the new state
            if task.cancelled or task is not self._task:
                return
            self._step_locked()

    def _step_locked(self) -> None:
        new_state = self.integrator.advance(self._sim.state, self.config.time_step, self.physics.derivative)
        self._sim = self._sim.advanced(new_state)
        if self.recorder.should_sample(self._sim.step_count):
            self.recorder.sample(self._sim.state)
            for listener in list(self._listeners):
                listener(self)

    def _on_tick_error(self, task: PeriodicTask, exc: BaseException) -> None:
        with self.lock:
            self.fault = exc
            if self._task is task:
                self._task = None

    def add_segment_listener(self, listener: SegmentListener) -> None:
        with self.lock:
            self._listeners.append(listener)

    def remove_segment_listener(self, listener: SegmentListener) -> None:
        with self.lock:
            self._listeners.remove(listener)

    # -----------------------
    # Queries
    # -----------------------

    @property
    def step_count(self) -> int:
        with self.lock:
            return self._sim.step_count

    @property
    def state(self) -> JointState:
        with self.lock:
            return self._sim.state

    def current_position(self, body: str) -> Point:
        with self.lock:
            return body_position(self._sim.state, body)

    def full_history(self, body: str) -> List[Point]:
        with self.lock:
            return self.recorder.full_history(body)

    def last_segment(self, body: str) -> Tuple[Point, Point]:
        with self.lock:
            return self.recorder.last_segment(body)

    def snapshot(self) -> Snapshot:
        with self.lock:
            state = self._sim.state
            return Snapshot(
                status=self.status,
                generation=self.generation,
                step_count=self._sim.step_count,
                state=state,
                positions={name: body_position(state, name) for name in BODY_NAMES},
                histories={name: tuple(self.recorder.full_history(name)) for name in BODY_NAMES},
            )
