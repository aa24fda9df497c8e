from formula_none.predict.intercept import NaiveIntercept, naive_ground_intercept, ground_hit_predicate
from formula_none.routing.models import PlanningContext, RoutePlan, RoutePlanner
from formula_none.routing.plan.ground_straight import GroundStraightPlanner
from formula_none.routing.plan.ground_turn import TurnPlanner
from formula_none.routing.recover import (
    NotOnFlatGround,
    IsSkidding,
    MustBeOnFlatGround,
    MustNotBeSkidding,
    UnknownIntercept,
)
from formula_none.routing.segments.straight import StraightMode

# leave this much time at the end of the approach for the hit itself
INTERCEPT_END_CHOP = 0.5


def _guess_intercept(ctx: PlanningContext) -> NaiveIntercept:
    start = ctx.start
    if NotOnFlatGround.evaluate(start):
        raise MustBeOnFlatGround()

    # rough first pass, the car is assumed to drive straight at the ball
    guess = naive_ground_intercept(
        ctx.ball_prediction, start.location, start.velocity, start.boost, ground_hit_predicate()
    )
    if guess is None:
        raise UnknownIntercept("no reachable ground intercept")

    if IsSkidding.evaluate(start):
        raise MustNotBeSkidding(guess.car_loc)

    return guess


class GroundIntercept(RoutePlanner):

    """Face the ball where it can be hit on the ground, then drive there in time."""

    def plan(self, ctx: PlanningContext) -> RoutePlan:
        guess = _guess_intercept(ctx)
        return TurnPlanner(guess.ball_loc, GroundInterceptStraight()).plan(ctx)


class GroundInterceptStraight(RoutePlanner):
    def plan(self, ctx: PlanningContext) -> RoutePlan:
        guess = _guess_intercept(ctx)
        return GroundStraightPlanner(
            guess.car_loc, guess.time, INTERCEPT_END_CHOP, StraightMode.ON_TIME
        ).plan(ctx)
