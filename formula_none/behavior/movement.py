import math

import numpy as np
from rlbot.agents.base_agent import SimpleControllerState

from formula_none.behavior.behavior import Behavior, Action, Yield, Return
from formula_none.routing.recover import NotOnFlatGround, IsSkidding
from formula_none.util.linear_algebra import signed_angle_2d
from formula_none.util.numerics import clip, normalize_angle

# orientation gain for leveling out in the air
LEVEL_P = 3.0


class GetToFlatGround(Behavior):

    """Gets the car back on its wheels, on the floor."""

    @staticmethod
    def on_flat_ground(car) -> bool:
        return not NotOnFlatGround.evaluate(car)

    def execute(self, ctx) -> Action:
        me = ctx.me()

        if self.on_flat_ground(me):
            return Return()

        controls = SimpleControllerState()

        if me.has_wheel_contact:
            if me.location[2] > NotOnFlatGround.MAX_Z:
                # on a wall, drive down it
                controls.throttle = 1.0
                down = me.local(np.array([0.0, 0.0, -1.0]))
                controls.steer = clip(3.0 * signed_angle_2d(np.array([1.0, 0.0]), down))
            else:
                # tilted on the floor or stuck on the side, jump to get unstuck
                controls.jump = True
            return Yield(controls)

        if me.location[2] < NotOnFlatGround.MAX_Z * 2 and me.up[2] < 0.0:
            # upside down on the floor
            controls.jump = True
            return Yield(controls)

        # in the air, keep the wheels down
        controls.roll = clip(LEVEL_P * me.right[2])
        controls.pitch = clip(-LEVEL_P * me.forward[2])
        controls.throttle = 1.0
        return Yield(controls)


class SkidRecover(Behavior):

    """Steers out of a skid, so that the car ends up facing `target_loc`."""

    # how far ahead to anticipate the car's rotation, in seconds
    LOOKAHEAD = 0.25

    def __init__(self, target_loc: np.ndarray):
        self.target_loc = np.array(target_loc[:2], dtype=np.float64)

    def execute(self, ctx) -> Action:
        me = ctx.me()

        if not IsSkidding.evaluate(me):
            return Return()

        target_yaw = math.atan2(self.target_loc[1] - me.location[1], self.target_loc[0] - me.location[0])
        future_yaw = me.yaw + me.angular_velocity[2] * self.LOOKAHEAD
        steer = clip(normalize_angle(target_yaw - future_yaw) * 2.0)

        ctx.eeg.log(self.name, f"steer {steer:.2f}")
        return Yield(SimpleControllerState(steer=steer, throttle=1.0))
