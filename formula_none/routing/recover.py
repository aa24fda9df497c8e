"""Errors raised by route planners, the checks that raise them, and how to recover."""
import math
from typing import Optional

import numpy as np

from formula_none.util.linear_algebra import to_2d


class RoutePlanError(Exception):

    """A planner could not produce a plan from the state it was given.

    Recoverable errors know which behavior gets the car back into a plannable state."""

    def recover(self, ctx) -> Optional["Behavior"]:
        return None


class MustBeOnFlatGround(RoutePlanError):
    def recover(self, ctx):
        from formula_none.behavior.movement import GetToFlatGround

        return GetToFlatGround()


class MustNotBeSkidding(RoutePlanError):
    def __init__(self, recover_target_loc: np.ndarray):
        super().__init__(f"skidding, recover toward {np.round(recover_target_loc, 1)}")
        self.recover_target_loc = to_2d(recover_target_loc)

    def recover(self, ctx):
        from formula_none.behavior.behavior import Priority
        from formula_none.behavior.higher_order import Chain
        from formula_none.behavior.movement import SkidRecover
        from formula_none.routing.behavior import FollowRoute
        from formula_none.routing.plan.ground_turn import TurnPlanner

        return Chain(
            Priority.IDLE,
            [
                SkidRecover(self.recover_target_loc),
                FollowRoute(TurnPlanner(self.recover_target_loc)).never_recover(True),
            ],
        )


class UnknownIntercept(RoutePlanError):
    pass


class TurningRadiusTooTight(RoutePlanError):
    pass


class PlanChainTooLong(RoutePlanError):
    pass


class NotOnFlatGround:

    """The car is in the air, on a wall, or tilted."""

    MAX_Z = 50.0
    MIN_UP_Z = math.cos(math.radians(15))

    @classmethod
    def evaluate(cls, car) -> bool:
        return not car.has_wheel_contact or car.location[2] > cls.MAX_Z or car.up[2] < cls.MIN_UP_Z


class IsSkidding:

    """The car slides sideways too fast to steer precisely."""

    MAX_SIDE_SPEED = 400.0

    @classmethod
    def evaluate(cls, car) -> bool:
        side_speed = car.velocity[0] * car.right[0] + car.velocity[1] * car.right[1]
        return abs(side_speed) > cls.MAX_SIDE_SPEED
