from rlbot.agents.base_agent import SimpleControllerState

from formula_none.behavior.behavior import Behavior, Priority, Action, Yield, Call
from formula_none.behavior.higher_order import Chain, Yielder
from formula_none.behavior.movement import GetToFlatGround
from formula_none.predict.intercept import naive_ground_intercept, ground_hit_predicate
from formula_none.routing.behavior import FollowRoute
from formula_none.routing.plan.ground_drive import GroundDrive
from formula_none.routing.plan.ground_intercept import GroundIntercept, INTERCEPT_END_CHOP
from formula_none.util.linear_algebra import distance_2d

# close enough to our goal to just wait there
GOAL_WAIT_DISTANCE = 500.0
HOME_DEPTH = 0.95

# after a failed plan, drive on for this long before planning again
FALLBACK_DURATION = 0.3


class RootBehavior(Behavior):

    """Bottom of the stack. Chases the ball when it can be hit on the ground, otherwise goes home."""

    def __init__(self):
        self.aborted_at = None

    def on_child_abort(self, ctx, child: Behavior):
        super().on_child_abort(ctx, child)
        self.aborted_at = ctx.time

    def execute(self, ctx) -> Action:
        # planning again from the same state would fail the same way
        if self.aborted_at == ctx.time:
            return Call(Yielder(SimpleControllerState(throttle=1.0), FALLBACK_DURATION))

        me = ctx.me()
        if not GetToFlatGround.on_flat_ground(me):
            return Call(GetToFlatGround())

        intercept = naive_ground_intercept(
            ctx.ball_prediction, me.location, me.velocity, me.boost, ground_hit_predicate()
        )
        if intercept is not None:
            return Call(
                Chain(
                    Priority.STRIKE,
                    [
                        FollowRoute(GroundIntercept(), Priority.STRIKE).same_ball_trajectory(True),
                        Yielder(SimpleControllerState(throttle=1.0, boost=True), INTERCEPT_END_CHOP),
                    ],
                )
            )

        # a bit in front of the goal line
        home = ctx.game.own_goal_location * HOME_DEPTH
        if distance_2d(me.location, home) < GOAL_WAIT_DISTANCE:
            return Yield(SimpleControllerState())
        return Call(FollowRoute(GroundDrive(home)))
