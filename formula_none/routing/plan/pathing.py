import math
from typing import Optional

import numpy as np
from rlbot.utils.logging_utils import get_logger

from formula_none.physics.constants import FIELD_MAX_Y, GOALPOST_X
from formula_none.routing.models import AgentState, RoutePlanner
from formula_none.util.linear_algebra import to_2d

logger = get_logger("pathing")

# how far inside the field to pass the post
GOAL_WALL_MARGIN = 125.0


def avoid_goal_wall_waypoint(start: AgentState, target_loc: np.ndarray) -> Optional[np.ndarray]:
    """If driving from `start` to `target_loc` crosses the goal line beside the goal,
    returns a waypoint just inside the post to drive to first."""
    target_loc = to_2d(target_loc)
    side = math.copysign(1.0, start.location[1])

    brink = FIELD_MAX_Y * side
    if math.copysign(1.0, brink - start.location[1]) == math.copysign(1.0, brink - target_loc[1]):
        return None

    # some slack, previous segments might have left us a bit off
    if abs(start.location[0]) >= GOALPOST_X + 200.0:
        logger.warning("avoid_goal_wall_waypoint: starting position outside the field?")
        return None

    brink = (FIELD_MAX_Y - 50.0) * side
    ray = start.forward_2d
    if abs(ray[1]) < 1e-6:
        cross_x = math.copysign(math.inf, ray[0])
    else:
        cross_x = start.location[0] + (brink - start.location[1]) / ray[1] * ray[0]

    if abs(cross_x) < GOALPOST_X - GOAL_WALL_MARGIN:
        return None

    return np.array(
        [
            (GOALPOST_X - GOAL_WALL_MARGIN) * math.copysign(1.0, cross_x),
            (FIELD_MAX_Y - GOAL_WALL_MARGIN) * side,
        ]
    )


def avoid_plowing_into_goal_wall(start: AgentState, target_loc: np.ndarray) -> Optional[RoutePlanner]:
    """The detour around the post, if one is needed: face the waypoint, then drive to it
    without boosting, which keeps the turn around the post tight."""
    from formula_none.routing.plan.ground_straight import GroundStraightPlanner
    from formula_none.routing.plan.ground_turn import PathingUnawareTurnPlanner
    from formula_none.routing.plan.higher_order import ChainedPlanner

    waypoint = avoid_goal_wall_waypoint(start, target_loc)
    if waypoint is None:
        return None

    return ChainedPlanner.chain(
        [
            PathingUnawareTurnPlanner(waypoint),
            GroundStraightPlanner(waypoint, allow_boost=False),
        ]
    )
