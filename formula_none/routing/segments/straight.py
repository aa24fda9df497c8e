from enum import Enum

import numpy as np
from rlbot.agents.base_agent import SimpleControllerState

from formula_none.eeg import Line
from formula_none.physics.car_1d import throttle_for_speed, boost_for_speed
from formula_none.physics.constants import MAX_CAR_SPEED
from formula_none.routing.models import AgentState, SegmentPlan, SegmentRunner, SegmentRunAction
from formula_none.routing.recover import NotOnFlatGround
from formula_none.util.linear_algebra import norm, to_2d, to_3d, signed_angle_2d, angle_2d
from formula_none.util.numerics import clip

# a straight is given up on once it runs this late
TIMEOUT_SLACK = 1.0

# steering controller gains, on the angle to the end point and on the yaw rate
STEER_P = 3.0
STEER_D = 0.3

# don't boost unless facing the end point this closely
BOOST_MAX_ANGLE = 0.3


class StraightMode(Enum):
    ASAP = "asap"
    ON_TIME = "on_time"


class Straight(SegmentPlan):

    """Drive in a straight line from the start location to `end_loc`.

    `ASAP` goes full throttle. `ON_TIME` paces the car so that it gets there after `duration`."""

    def __init__(
        self,
        start: AgentState,
        end_loc: np.ndarray,
        duration: float,
        end_speed: float,
        end_boost: float,
        mode: StraightMode = StraightMode.ASAP,
        allow_boost: bool = True,
    ):
        self._start = start
        self.end_loc = to_2d(end_loc)
        self._duration = duration
        self.end_speed = end_speed
        self.end_boost = end_boost
        self.mode = mode
        self.allow_boost = allow_boost

        offset = self.end_loc - start.location_2d
        length = norm(offset)
        self.direction = offset / length if length > 1e-6 else start.forward_2d
        self.length = length

    def start(self) -> AgentState:
        return self._start

    def end(self) -> AgentState:
        return AgentState.on_ground_2d(
            self.end_loc, angle_2d(self.direction), self.direction * self.end_speed, self.end_boost
        )

    def duration(self) -> float:
        return self._duration

    def run(self) -> SegmentRunner:
        return StraightRunner(self)

    def draw(self, eeg):
        eeg.draw(Line(to_3d(self._start.location_2d), to_3d(self.end_loc), "cyan"))


class StraightRunner(SegmentRunner):
    def __init__(self, plan: Straight):
        self.plan = plan
        self.start_time = None

    def execute(self, ctx):
        me = ctx.me()
        plan = self.plan

        if self.start_time is None:
            self.start_time = ctx.time
        elapsed = ctx.time - self.start_time

        if NotOnFlatGround.evaluate(me):
            ctx.eeg.log(self.name, "not on flat ground")
            return SegmentRunAction.FAILURE

        remaining = float(np.dot(plan.end_loc - me.location_2d, plan.direction))
        if remaining <= 0.0:
            return SegmentRunAction.SUCCESS

        time_left = plan.duration() - elapsed
        if plan.mode is StraightMode.ON_TIME and time_left <= 0.0:
            ctx.eeg.log(self.name, f"out of time, {remaining:.0f} short")
            return SegmentRunAction.SUCCESS
        if elapsed > plan.duration() + TIMEOUT_SLACK:
            ctx.eeg.log(self.name, f"timed out, {remaining:.0f} short")
            return SegmentRunAction.FAILURE

        angle = signed_angle_2d(me.forward_2d, plan.end_loc - me.location_2d)
        controls = SimpleControllerState()
        controls.steer = clip(STEER_P * angle - STEER_D * me.angular_velocity[2])

        facing = abs(angle) < BOOST_MAX_ANGLE
        speed = float(np.dot(me.velocity_2d, me.forward_2d))

        if plan.mode is StraightMode.ASAP:
            controls.throttle = 1.0
            controls.boost = plan.allow_boost and facing and me.boost > 0 and speed < MAX_CAR_SPEED - 10
        else:
            desired_speed = clip(remaining / max(time_left, 1e-3), 0.0, MAX_CAR_SPEED)
            controls.throttle = throttle_for_speed(speed, desired_speed)
            controls.boost = plan.allow_boost and facing and me.boost > 0 and boost_for_speed(speed, desired_speed)

        return controls
