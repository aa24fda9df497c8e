"""Behaviors and the actions they return to the runner.

Each tick the runner executes the behavior on top of its stack, which answers with an action:
yield controls for this tick, finish, or hand control to another behavior."""
from dataclasses import dataclass
from enum import IntEnum

from rlbot.agents.base_agent import SimpleControllerState


class Priority(IntEnum):
    IDLE = 0
    DEFENSE = 1
    STRIKE = 2


def should_preempt(proposed: "Behavior", current: "Behavior") -> bool:
    """Only a strictly more important behavior replaces the running one."""
    return proposed.priority > current.priority


class Action:
    pass


@dataclass(frozen=True)
class Yield(Action):
    """Use these controls this tick, and run me again next tick."""

    controls: SimpleControllerState


@dataclass(frozen=True)
class Return(Action):
    """I'm done, resume my parent."""


@dataclass(frozen=True)
class Abort(Action):
    """I failed, resume my parent and tell it."""


@dataclass(frozen=True)
class Call(Action):
    """Run this child until it returns, then resume me."""

    behavior: "Behavior"


@dataclass(frozen=True)
class RootCall(Action):
    """Throw away the whole stack and run this instead."""

    behavior: "Behavior"


@dataclass(frozen=True)
class TailCall(Action):
    """Replace me with this behavior."""

    behavior: "Behavior"


class Behavior:

    priority = Priority.IDLE

    @property
    def name(self) -> str:
        return type(self).__name__

    def execute(self, ctx) -> Action:
        raise NotImplementedError

    def on_child_abort(self, ctx, child: "Behavior"):
        ctx.eeg.log(self.name, f"child {child.name} aborted")
