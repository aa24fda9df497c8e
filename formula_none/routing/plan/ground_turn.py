import math
from typing import Optional

import numpy as np

from formula_none.physics.car_1d import turn_radius
from formula_none.routing.models import PlanningContext, RoutePlan, RoutePlanner
from formula_none.routing.plan.higher_order import ChainedPlanner
from formula_none.routing.plan.pathing import avoid_plowing_into_goal_wall
from formula_none.routing.recover import (
    NotOnFlatGround,
    IsSkidding,
    MustBeOnFlatGround,
    MustNotBeSkidding,
    TurningRadiusTooTight,
)
from formula_none.routing.segments.null import NullSegment
from formula_none.routing.segments.turn import Turn, YAW_TOLERANCE
from formula_none.util.linear_algebra import norm, to_2d, signed_angle_2d, perpendicular_2d, angle_2d, direction_2d
from formula_none.util.numerics import sign


class PathingUnawareTurnPlanner(RoutePlanner):

    """Turn at full lock until facing `target_loc`, then continue with `next`.

    Doesn't care about what's in the way."""

    def __init__(self, target_loc: np.ndarray, next: Optional[RoutePlanner] = None):
        self.target_loc = to_2d(target_loc)
        self.next = next

    def plan(self, ctx: PlanningContext) -> RoutePlan:
        start = ctx.start
        if NotOnFlatGround.evaluate(start):
            raise MustBeOnFlatGround()
        if IsSkidding.evaluate(start):
            raise MustNotBeSkidding(self.target_loc)

        angle = signed_angle_2d(start.forward_2d, self.target_loc - start.location_2d)
        if abs(angle) < YAW_TOLERANCE:
            if self.next is not None:
                return self.next.plan(ctx)
            return RoutePlan(NullSegment(start))

        turn_sign = sign(angle)
        radius = turn_radius(norm(start.velocity_2d))
        center = start.location_2d + perpendicular_2d(start.forward_2d) * radius * turn_sign

        center_to_target = self.target_loc - center
        distance = norm(center_to_target)
        if distance <= radius:
            raise TurningRadiusTooTight(f"target is {distance:.0f} from the center, radius is {radius:.0f}")

        # leave the circle where the tangent points at the target
        tangent_angle = angle_2d(center_to_target) - turn_sign * math.acos(radius / distance)
        projected_end_loc = center + direction_2d(tangent_angle) * radius

        segment = Turn(start, self.target_loc, center, radius, projected_end_loc)
        return RoutePlan(segment, self.next)


class TurnPlanner(PathingUnawareTurnPlanner):

    """Like `PathingUnawareTurnPlanner`, but goes around the goal post instead of through the wall."""

    def plan(self, ctx: PlanningContext) -> RoutePlan:
        detour = avoid_plowing_into_goal_wall(ctx.start, self.target_loc)
        if detour is not None:
            planner = ChainedPlanner.chain([detour, PathingUnawareTurnPlanner(self.target_loc, self.next)])
            return planner.plan(ctx)
        return super().plan(ctx)
