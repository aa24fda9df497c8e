"""Behaviors built out of other behaviors."""
from collections import deque
from typing import Callable, Iterable, Optional

from rlbot.agents.base_agent import SimpleControllerState

from formula_none.behavior.behavior import (
    Behavior,
    Priority,
    Action,
    Yield,
    Return,
    Abort,
    TailCall,
    should_preempt,
)
from formula_none.behavior.runner import MAX_ACTIONS_PER_TICK


class While(Behavior):

    """Runs `child` as long as `predicate(ctx)` holds, returns as soon as it doesn't."""

    def __init__(self, predicate: Callable, child: Behavior):
        self.predicate = predicate
        self.child = child

    @property
    def name(self) -> str:
        return f"While({self.child.name})"

    @property
    def priority(self) -> Priority:
        return self.child.priority

    def execute(self, ctx) -> Action:
        if not self.predicate(ctx):
            return Return()
        return self.child.execute(ctx)


class Chain(Behavior):

    """Runs children one after the other, inline.

    A child that returns hands over to the next one within the same tick. A child that
    aborts aborts the whole chain."""

    def __init__(self, priority: Priority, children: Iterable[Behavior]):
        self.priority = priority
        self.children = deque(children)

    @property
    def name(self) -> str:
        if not self.children:
            return "Chain"
        return f"Chain({self.children[0].name}, {len(self.children)} left)"

    def execute(self, ctx) -> Action:
        for _ in range(MAX_ACTIONS_PER_TICK):
            if not self.children:
                return Return()

            child = self.children[0]
            action = child.execute(ctx)

            if isinstance(action, Return):
                self.children.popleft()
            elif isinstance(action, TailCall):
                self.children[0] = action.behavior
            elif isinstance(action, Abort):
                ctx.eeg.log(self.name, f"child {child.name} aborted")
                return action
            else:
                return action

        ctx.eeg.log(self.name, "children keep handing over, giving up")
        return Abort()


class Preempt(Behavior):

    """Runs `child`, but lets `proposer(ctx)` swap in something more important.

    The running child is only replaced by a proposal of strictly higher priority."""

    def __init__(self, proposer: Callable[..., Optional[Behavior]], child: Behavior):
        self.proposer = proposer
        self.child = child

    @property
    def name(self) -> str:
        return f"Preempt({self.child.name})"

    @property
    def priority(self) -> Priority:
        return self.child.priority

    def execute(self, ctx) -> Action:
        proposal = self.proposer(ctx)
        if proposal is not None and should_preempt(proposal, self.child):
            ctx.eeg.log(self.name, f"preempted by {proposal.name}")
            self.child = proposal
        return self.child.execute(ctx)


class Yielder(Behavior):

    """Sends the same controls for a while."""

    def __init__(self, controls: SimpleControllerState, duration: float, priority: Priority = Priority.IDLE):
        self.controls = controls
        self.duration = duration
        self.priority = priority
        self.start_time = None

    def execute(self, ctx) -> Action:
        if self.start_time is None:
            self.start_time = ctx.time
        if ctx.time - self.start_time >= self.duration:
            return Return()
        return Yield(self.controls)
