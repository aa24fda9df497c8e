"""Fixtures shared by the tests: state builders, a kinematic car, stub planners and a fake renderer."""
import math
import time
from typing import List, Optional

import numpy as np
from rlbot.agents.base_agent import SimpleControllerState

from formula_none.behavior.context import Context
from formula_none.eeg import EEG
from formula_none.physics.car_1d import curvature
from formula_none.predict.ball_prediction import BallPrediction, BallPredictor, BallState
from formula_none.routing.models import AgentState, RoutePlan, RoutePlanner, SegmentPlan, SegmentRunner
from formula_none.skeleton.game_data import GameData
from formula_none.util.linear_algebra import direction_2d


def car_state(x=0.0, y=0.0, yaw=0.0, speed=0.0, boost=100.0, side_speed=0.0) -> AgentState:
    """A car on the floor. `side_speed` is velocity toward the positive yaw side."""
    velocity = direction_2d(yaw) * speed + direction_2d(yaw + math.pi / 2) * side_speed
    return AgentState.on_ground_2d(np.array([x, y]), yaw, velocity, boost)


def airborne_state(z=500.0) -> AgentState:
    car = car_state()
    return AgentState(
        np.array([0.0, 0.0, z]), car.rotation, np.array([0.0, 0.0, -100.0]), boost=50.0, has_wheel_contact=False
    )


def predict(location, velocity=(0.0, 0.0, 0.0), duration=6.0) -> BallPrediction:
    return BallPredictor(duration).predict(BallState(np.array(location, dtype=float), np.array(velocity, dtype=float)))


def resting_ball_prediction(x=0.0, y=0.0) -> BallPrediction:
    return predict([x, y, 92.75])


def make_context(car: AgentState, ball_prediction: Optional[BallPrediction] = None, time=0.0, ball=None) -> Context:
    game = GameData()
    game.my_car = car
    game.time = time
    if ball is not None:
        game.ball = ball
    if ball_prediction is None:
        ball_prediction = predict(game.ball.location, game.ball.velocity)
    return Context(game, ball_prediction, EEG())


class KinematicCar:

    """Drives on the floor at constant speed. Steering turns it on the speed's turning circle."""

    def __init__(self, car: AgentState):
        self.location = np.array(car.location_2d)
        self.yaw = car.yaw
        self.speed = car.speed
        self.boost = car.boost

    def state(self) -> AgentState:
        return AgentState.on_ground_2d(self.location, self.yaw, direction_2d(self.yaw) * self.speed, self.boost)

    def step(self, controls: SimpleControllerState, dt: float = 1 / 60):
        turn = controls.steer * self.speed * curvature(self.speed) * dt
        self.location = self.location + direction_2d(self.yaw + turn / 2) * self.speed * dt
        self.yaw += turn


class StubRunner(SegmentRunner):
    def __init__(self, results):
        self.results = list(results)

    def execute(self, ctx):
        return self.results.pop(0) if len(self.results) > 1 else self.results[0]


class StubSegment(SegmentPlan):

    """Goes from `start` to `end` in `duration`, its runner replays `results`."""

    def __init__(self, start: AgentState, end: AgentState, duration: float = 1.0, results=None):
        self._start = start
        self._end = end
        self._duration = duration
        self.results = results if results is not None else [SimpleControllerState(throttle=1.0)]
        self.run_calls = 0

    def start(self):
        return self._start

    def end(self):
        return self._end

    def duration(self):
        return self._duration

    def run(self):
        self.run_calls += 1
        return StubRunner(self.results)


class StubPlanner(RoutePlanner):

    """Plans a segment from `segment_factory(ctx)`, or raises `error`. Records its calls."""

    def __init__(self, segment_factory=None, next: Optional[RoutePlanner] = None, error: Exception = None):
        self.segment_factory = segment_factory
        self.next = next
        self.error = error
        self.calls: List = []

    def plan(self, ctx):
        self.calls.append(ctx)
        if self.error is not None:
            raise self.error
        return RoutePlan(self.segment_factory(ctx), self.next)


class RecordingRenderer:
    """Stands in for the rlbot renderer, remembers the frames it drew."""

    def __init__(self, fail: bool = False, delay: float = 0.0):
        self.fail = fail
        self.delay = delay
        self.frames = []
        self.current = None

    def begin_rendering(self, group_id="default"):
        self.current = []

    def end_rendering(self):
        if self.fail:
            raise RuntimeError("renderer is broken")
        if self.delay:
            time.sleep(self.delay)
        self.frames.append(self.current)

    def draw_string_2d(self, x, y, scale_x, scale_y, text, color):
        self.current.append(("string", text))

    def draw_line_3d(self, start, end, color):
        self.current.append(("line", start, end))

    def draw_polyline_3d(self, points, color):
        self.current.append(("polyline", points))

    def draw_rect_3d(self, location, width, height, fill, color, centered=False):
        self.current.append(("rect", location))

    def __getattr__(self, name):
        # colors, like renderer.white()
        return lambda: name
