from typing import Optional

import numpy as np

from formula_none.physics.car_1d import time_to_distance
from formula_none.routing.models import PlanningContext, RoutePlan, RoutePlanner
from formula_none.routing.recover import NotOnFlatGround, MustBeOnFlatGround
from formula_none.routing.segments.straight import Straight, StraightMode
from formula_none.util.linear_algebra import norm, to_2d


class GroundStraightPlanner(RoutePlanner):

    """Drive straight to `target_loc`, assuming the car already faces it.

    With `target_time`, the straight takes that long instead of as long as the 1-D model
    says. `end_chop` seconds are cut off the end so that whatever comes next has time to act."""

    def __init__(
        self,
        target_loc: np.ndarray,
        target_time: Optional[float] = None,
        end_chop: float = 0.0,
        mode: StraightMode = StraightMode.ASAP,
        allow_boost: bool = True,
    ):
        self.target_loc = to_2d(target_loc)
        self.target_time = target_time
        self.end_chop = end_chop
        self.mode = mode
        self.allow_boost = allow_boost

    def plan(self, ctx: PlanningContext) -> RoutePlan:
        start = ctx.start
        if NotOnFlatGround.evaluate(start):
            raise MustBeOnFlatGround()

        offset = self.target_loc - start.location_2d
        distance = norm(offset)
        direction = offset / distance if distance > 1e-6 else start.forward_2d
        speed = float(np.dot(start.velocity_2d, direction))
        boost = start.boost if self.allow_boost else 0.0

        time, end_speed, end_boost = time_to_distance(distance, speed, float(boost))
        if not self.allow_boost:
            end_boost = start.boost
        if self.target_time is not None:
            time = max(self.target_time, 0.0)
            end_speed = min(end_speed, distance / time) if time > 0 else end_speed
            end_boost = start.boost

        chop = min(self.end_chop, time)
        chop_distance = min(end_speed * chop, distance)
        end_loc = self.target_loc - direction * chop_distance

        return RoutePlan(
            Straight(start, end_loc, time - chop, end_speed, end_boost, self.mode, self.allow_boost)
        )
