import math

import numpy as np
from rlbot.agents.base_agent import SimpleControllerState

from formula_none.eeg import Arc, Print, Crosshair
from formula_none.routing.models import AgentState, SegmentPlan, SegmentRunner, SegmentRunAction
from formula_none.routing.recover import NotOnFlatGround
from formula_none.util.linear_algebra import to_2d, to_3d, rotate_2d, signed_angle_2d, angle_2d
from formula_none.util.numerics import DEGREES, sign

# close enough to facing the target
YAW_TOLERANCE = 3 * DEGREES

# a sweep this close to a full circle means the car missed the end and went around
DEGENERATE_SWEEP = 330 * DEGREES

# below this speed the turn is timed as if driving at it
MIN_TURN_SPEED = 500.0


class Turn(SegmentPlan):

    """Turn on a circle of `radius` around `center`, until facing `target_loc`.

    The car leaves the circle at `projected_end_loc`, where the tangent points at the target.
    A positive sweep turns toward positive yaw."""

    def __init__(
        self,
        start: AgentState,
        target_loc: np.ndarray,
        center: np.ndarray,
        radius: float,
        projected_end_loc: np.ndarray,
    ):
        self._start = start
        self.target_loc = to_2d(target_loc)
        self.center = to_2d(center)
        self.radius = radius
        self.projected_end_loc = to_2d(projected_end_loc)

        turn_sign = sign(signed_angle_2d(start.forward_2d, self.target_loc - start.location_2d))
        self.sweep = self.sweep_to(self.projected_end_loc, turn_sign)

    def sweep_to(self, loc: np.ndarray, turn_sign: int = 0) -> float:
        """Angle swept around the center to get from the start to loc, in the turning direction."""
        turn_sign = turn_sign or sign(self.sweep)
        sweep = signed_angle_2d(self._start.location_2d - self.center, to_2d(loc) - self.center)
        if turn_sign > 0 and sweep < 0:
            sweep += 2 * math.pi
        elif turn_sign < 0 and sweep > 0:
            sweep -= 2 * math.pi
        return sweep

    def start(self) -> AgentState:
        return self._start

    def end(self) -> AgentState:
        start = self._start
        location = self.center + rotate_2d(start.location_2d - self.center, self.sweep)
        velocity = rotate_2d(start.velocity_2d, self.sweep)
        return AgentState.on_ground_2d(location, start.yaw + self.sweep, velocity, start.boost)

    def duration(self) -> float:
        return self.radius * abs(self.sweep) / max(self._start.speed, MIN_TURN_SPEED)

    def run(self) -> SegmentRunner:
        return Turner(self)

    def draw(self, eeg):
        theta1 = angle_2d(self._start.location_2d - self.center)
        eeg.draw(Arc(to_3d(self.center), self.radius, theta1, theta1 + self.sweep, "orange"))
        eeg.draw(Crosshair(to_3d(self.projected_end_loc)))


class Turner(SegmentRunner):
    def __init__(self, plan: Turn):
        self.plan = plan

    def execute(self, ctx):
        me = ctx.me()

        if NotOnFlatGround.evaluate(me):
            ctx.eeg.log(self.name, "not on flat ground")
            return SegmentRunAction.FAILURE

        yaw_diff = signed_angle_2d(me.forward_2d, self.plan.target_loc - me.location_2d)
        if abs(yaw_diff) < YAW_TOLERANCE:
            ctx.eeg.log(self.name, "facing the target")
            return SegmentRunAction.SUCCESS

        swept = self.plan.sweep_to(me.location_2d)
        degenerate = abs(swept) >= DEGENERATE_SWEEP
        if degenerate:
            ctx.eeg.log(self.name, f"degenerate sweep {math.degrees(swept):.0f}")
            ctx.eeg.draw(Print("degenerate sweep", "green"))
        elif abs(swept) >= abs(self.plan.sweep) - YAW_TOLERANCE:
            ctx.eeg.log(self.name, "swept the planned angle")
            return SegmentRunAction.SUCCESS

        return SimpleControllerState(steer=float(sign(yaw_diff)), throttle=1.0)
