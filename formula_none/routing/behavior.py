"""Following a route, segment after segment, with the plan checked before every commitment."""
from dataclasses import dataclass
from typing import Optional, Union

from rlbot.agents.base_agent import SimpleControllerState

from formula_none.behavior.behavior import Behavior, Priority, Action, Yield, Return, Abort, RootCall
from formula_none.behavior.rules import SameBallTrajectory
from formula_none.eeg import Print
from formula_none.routing.models import (
    PlanningContext,
    ProvisionalExpansionError,
    RoutePlan,
    RoutePlanner,
    SegmentRunAction,
    SegmentRunner,
)
from formula_none.routing.recover import RoutePlanError

# a route whose segments all finish instantly must not hang the tick
MAX_SEGMENTS_PER_TICK = 10


@dataclass(frozen=True)
class NotStarted:
    planner: RoutePlanner


@dataclass
class Running:
    plan: RoutePlan
    runner: SegmentRunner
    started_at: float


class FollowRoute(Behavior):

    """Plans a route with `planner` and drives it.

    Before driving a segment, the rest of the route is planned out provisionally from that
    segment's end. If any step of it fails, the route is not started: the error is turned
    into its recovery behavior (`RootCall`), or into an `Abort` when it has none or when
    recovering is forbidden with `never_recover`."""

    def __init__(self, planner: RoutePlanner, priority: Priority = Priority.IDLE):
        self.priority = priority
        self.state: Union[NotStarted, Running] = NotStarted(planner)
        self._never_recover = False
        self._same_ball_trajectory: Optional[SameBallTrajectory] = None

    def never_recover(self, never_recover: bool) -> "FollowRoute":
        """Abort instead of recovering from planning errors. Recovery behaviors use this
        so that a failing recovery does not recover again, forever."""
        self._never_recover = never_recover
        return self

    def same_ball_trajectory(self, enabled: bool) -> "FollowRoute":
        self._same_ball_trajectory = SameBallTrajectory() if enabled else None
        return self

    @property
    def name(self) -> str:
        if isinstance(self.state, Running):
            return f"FollowRoute({self.state.plan.segment.name})"
        return f"FollowRoute({self.state.planner.name})"

    def execute(self, ctx) -> Action:
        if self._same_ball_trajectory is not None:
            action = self._same_ball_trajectory.execute(ctx)
            if action is not None:
                return action

        if isinstance(self.state, NotStarted):
            action = self._advance(ctx, self.state.planner)
            if action is not None:
                return action

        self._draw(ctx)
        return self._go(ctx)

    def _advance(self, ctx, planner: RoutePlanner) -> Optional[Action]:
        """Plans the next segment and commits to it if the rest of the route checks out."""
        ctx.eeg.log(self.name, f"planning with {planner.name}")
        planning = PlanningContext.from_context(ctx)

        try:
            plan = planner.plan(planning)
        except RoutePlanError as error:
            return self._handle_error(ctx, planner.name, error)

        ctx.eeg.log(self.name, f"next segment is {plan.segment.name}")
        try:
            plan.provisional_expand(planning)
        except ProvisionalExpansionError as error:
            return self._handle_error(ctx, error.planner_name, error.error)

        self.state = Running(plan, plan.segment.run(), ctx.time)
        return None

    def _handle_error(self, ctx, planner_name: str, error: RoutePlanError) -> Action:
        ctx.eeg.log(self.name, f"error {error!r} in planner {planner_name}")

        recovery = error.recover(ctx)
        if recovery is None:
            ctx.eeg.log(self.name, "no recovery, aborting")
            return Abort()
        if self._never_recover:
            ctx.eeg.log(self.name, "recoverable, but recovering is not allowed here")
            return Abort()

        ctx.eeg.log(self.name, f"recovering with {recovery.name}")
        return RootCall(recovery)

    def _draw(self, ctx):
        """Draws what's left of the route. Only for show, errors don't change anything."""
        running = self.state
        elapsed = ctx.time - running.started_at
        planning = PlanningContext(running.plan.segment.start(), ctx.ball_prediction, ctx.time - elapsed)
        try:
            expansion = running.plan.provisional_expand(planning, elapsed)
        except ProvisionalExpansionError as error:
            ctx.eeg.log(self.name, f"expansion failed: {error}")
            ctx.eeg.draw(Print(f"expansion failed at {error.planner_name}", "red"))
            return

        for segment in expansion:
            segment.draw(ctx.eeg)

    def _go(self, ctx) -> Action:
        for _ in range(MAX_SEGMENTS_PER_TICK):
            running = self.state
            ctx.eeg.draw(Print(running.plan.segment.name, "yellow"))

            result = running.runner.execute(ctx)
            if result is SegmentRunAction.FAILURE:
                ctx.eeg.log(self.name, f"segment {running.plan.segment.name} failed, aborting")
                return Abort()
            if isinstance(result, SimpleControllerState):
                return Yield(result)

            next_planner = running.plan.next
            if next_planner is None:
                ctx.eeg.log(self.name, "route finished")
                return Return()

            action = self._advance(ctx, next_planner)
            if action is not None:
                return action

        ctx.eeg.log(self.name, f"more than {MAX_SEGMENTS_PER_TICK} segments finished in one tick")
        return Abort()
