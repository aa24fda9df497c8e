"""Debug output: log lines and drawings, rendered off the tick thread.

The tick thread collects drawables while it runs, and `EEG.show` hands them over to a
`DrawingThread` in one batch. Handing over never blocks: when the renderer falls behind,
whole frames are dropped.
"""
import math
from dataclasses import dataclass
from queue import Queue, Full
from threading import Thread
from typing import List, Tuple

import numpy as np
from rlbot.utils.logging_utils import get_logger

from formula_none.physics.constants import BALL_RADIUS


@dataclass(frozen=True)
class Print:
    text: str
    color: str = "white"


@dataclass(frozen=True)
class GhostBall:
    location: np.ndarray
    color: str = "white"


@dataclass(frozen=True)
class GhostCar:
    location: np.ndarray
    rotation: np.ndarray
    color: str = "white"


@dataclass(frozen=True)
class Line:
    start: np.ndarray
    end: np.ndarray
    color: str = "white"


@dataclass(frozen=True)
class Arc:
    center: np.ndarray
    radius: float
    theta1: float
    theta2: float
    color: str = "white"


@dataclass(frozen=True)
class Crosshair:
    location: np.ndarray
    color: str = "red"


ARC_POINTS = 16
DRAW_HEIGHT = 20.0


def _point(xy, z: float = DRAW_HEIGHT) -> List[float]:
    return [float(xy[0]), float(xy[1]), float(xy[2]) if len(xy) > 2 else z]


def _circle(center, radius: float, theta1: float, theta2: float) -> List[List[float]]:
    z = float(center[2]) if len(center) > 2 else DRAW_HEIGHT
    points = []
    for i in range(ARC_POINTS + 1):
        theta = theta1 + (theta2 - theta1) * i / ARC_POINTS
        points.append([center[0] + radius * math.cos(theta), center[1] + radius * math.sin(theta), z])
    return points


def render(renderer, drawables: Tuple):
    """Renders one frame worth of drawables."""
    renderer.begin_rendering()

    text_y = 20
    for drawable in drawables:
        color = getattr(renderer, drawable.color)()

        if isinstance(drawable, Print):
            renderer.draw_string_2d(20, text_y, 1, 1, drawable.text, color)
            text_y += 20
        elif isinstance(drawable, Line):
            renderer.draw_line_3d(_point(drawable.start), _point(drawable.end), color)
        elif isinstance(drawable, Arc):
            points = _circle(drawable.center, drawable.radius, drawable.theta1, drawable.theta2)
            renderer.draw_polyline_3d(points, color)
        elif isinstance(drawable, GhostBall):
            points = _circle(drawable.location, BALL_RADIUS, 0.0, 2 * math.pi)
            renderer.draw_polyline_3d(points, color)
        elif isinstance(drawable, GhostCar):
            location = np.array(_point(drawable.location))
            nose = location + 100.0 * drawable.rotation[:, 0]
            renderer.draw_rect_3d(_point(location), 10, 10, True, color, centered=True)
            renderer.draw_line_3d(_point(location), _point(nose), color)
        elif isinstance(drawable, Crosshair):
            location = np.array(_point(drawable.location))
            for axis in np.eye(3) * 50.0:
                renderer.draw_line_3d(_point(location - axis), _point(location + axis), color)
        else:
            raise TypeError(f"can't draw {drawable!r}")

    renderer.end_rendering()


_STOP = object()


class DrawingThread(Thread):
    def __init__(self, renderer, queue_size: int, logger):
        super().__init__(daemon=True, name="eeg")
        self.renderer = renderer
        self.queue = Queue(maxsize=queue_size)
        self.logger = logger

    def run(self):
        while True:
            batch = self.queue.get()
            if batch is _STOP:
                break
            try:
                render(self.renderer, batch)
            except Exception:
                self.logger.exception("rendering failed")

    def stop(self):
        """Asks the thread to exit once it has rendered what is already queued."""
        self.queue.put(_STOP)


class EEG:
    def __init__(self, renderer=None, queue_size: int = 8, enabled: bool = True, name: str = "formula_none"):
        self.logger = get_logger(name)
        self.draw_list = []
        self.dropped_frames = 0
        self._thread = None

        if enabled and renderer is not None:
            self._thread = DrawingThread(renderer, queue_size, self.logger)
            self._thread.start()

    @property
    def enabled(self) -> bool:
        return self._thread is not None

    def log(self, category: str, message: str):
        line = f"[{category}] {message}"
        self.logger.debug(line)
        self.draw(Print(line, "grey"))

    def draw(self, drawable):
        if self.enabled:
            self.draw_list.append(drawable)

    def show(self):
        """Sends this tick's drawables to the renderer and starts a new frame."""
        draw_list, self.draw_list = tuple(self.draw_list), []
        if self._thread is None:
            return

        try:
            self._thread.queue.put_nowait(draw_list)
        except Full:
            self.dropped_frames += 1

    def close(self):
        if self._thread is None:
            return
        thread, self._thread = self._thread, None
        thread.stop()
        thread.join()
