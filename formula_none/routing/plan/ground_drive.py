import numpy as np

from formula_none.routing.models import PlanningContext, RoutePlan, RoutePlanner
from formula_none.routing.plan.ground_straight import GroundStraightPlanner
from formula_none.routing.plan.ground_turn import TurnPlanner
from formula_none.routing.recover import NotOnFlatGround, IsSkidding, MustBeOnFlatGround, MustNotBeSkidding
from formula_none.util.linear_algebra import to_2d


class GroundDrive(RoutePlanner):

    """Drive to a point on the floor: turn toward it, then go straight as fast as possible."""

    def __init__(self, target_loc: np.ndarray, allow_boost: bool = True):
        self.target_loc = to_2d(target_loc)
        self.allow_boost = allow_boost

    def plan(self, ctx: PlanningContext) -> RoutePlan:
        if NotOnFlatGround.evaluate(ctx.start):
            raise MustBeOnFlatGround()
        if IsSkidding.evaluate(ctx.start):
            raise MustNotBeSkidding(self.target_loc)

        straight = GroundStraightPlanner(self.target_loc, allow_boost=self.allow_boost)
        return TurnPlanner(self.target_loc, straight).plan(ctx)
