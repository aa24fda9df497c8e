"""Data model of route planning.

A `RoutePlanner` turns a `PlanningContext` into a `RoutePlan`: one `SegmentPlan` that can be
driven right away, plus an optional planner for whatever comes after it. Deferring the next
step keeps plans cheap, and `RoutePlan.provisional_expand` checks that the deferred steps
will work out before the car commits to the first one.
"""
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Optional, Tuple, Union

import numpy as np
from rlbot.agents.base_agent import SimpleControllerState

from formula_none.physics.constants import CAR_REST_HEIGHT
from formula_none.predict.ball_prediction import BallPrediction
from formula_none.routing.recover import RoutePlanError, PlanChainTooLong
from formula_none.skeleton.conversion import rotation_to_matrix
from formula_none.util.linear_algebra import norm, to_2d

# deepest chain of deferred planners a plan may expand into
MAX_EXPANSION_DEPTH = 16


def _frozen(vec) -> np.ndarray:
    array = np.array(vec, dtype=np.float64)
    array.flags.writeable = False
    return array


@dataclass(frozen=True)
class AgentState:
    location: np.ndarray
    rotation: np.ndarray  # columns are the forward, right and up directions
    velocity: np.ndarray = field(default_factory=lambda: np.zeros(3))
    angular_velocity: np.ndarray = field(default_factory=lambda: np.zeros(3))
    boost: float = 0.0
    has_wheel_contact: bool = True

    def __post_init__(self):
        object.__setattr__(self, "location", _frozen(self.location))
        object.__setattr__(self, "rotation", _frozen(self.rotation).reshape(3, 3))
        object.__setattr__(self, "velocity", _frozen(self.velocity))
        object.__setattr__(self, "angular_velocity", _frozen(self.angular_velocity))

    @classmethod
    def on_ground_2d(
        cls, location: np.ndarray, yaw: float, velocity: np.ndarray = (0.0, 0.0), boost: float = 0.0
    ) -> "AgentState":
        """A car resting on its wheels on the floor, at a 2d location."""
        return cls(
            location=np.array([location[0], location[1], CAR_REST_HEIGHT]),
            rotation=rotation_to_matrix([0.0, yaw, 0.0]),
            velocity=np.array([velocity[0], velocity[1], 0.0]),
            boost=boost,
        )

    @property
    def forward(self) -> np.ndarray:
        return self.rotation[:, 0]

    @property
    def right(self) -> np.ndarray:
        return self.rotation[:, 1]

    @property
    def up(self) -> np.ndarray:
        return self.rotation[:, 2]

    @property
    def yaw(self) -> float:
        return math.atan2(self.forward[1], self.forward[0])

    @property
    def speed(self) -> float:
        return norm(self.velocity)

    @property
    def location_2d(self) -> np.ndarray:
        return to_2d(self.location)

    @property
    def velocity_2d(self) -> np.ndarray:
        return to_2d(self.velocity)

    @property
    def forward_2d(self) -> np.ndarray:
        forward = to_2d(self.forward)
        length = norm(forward)
        return forward / length if length > 1e-6 else np.array([1.0, 0.0])

    def local(self, vec: np.ndarray) -> np.ndarray:
        """World vector expressed in the car's (forward, right, up) frame."""
        return np.dot(vec, self.rotation)

    def with_boost(self, boost: float) -> "AgentState":
        return AgentState(
            self.location, self.rotation, self.velocity, self.angular_velocity, boost, self.has_wheel_contact
        )

    def approx_equals(self, other: "AgentState", tolerance: float = 1e-3) -> bool:
        return (
            np.allclose(self.location, other.location, rtol=0.0, atol=tolerance)
            and np.allclose(self.rotation, other.rotation, rtol=0.0, atol=tolerance)
            and np.allclose(self.velocity, other.velocity, rtol=0.0, atol=tolerance)
        )


@dataclass(frozen=True)
class PlanningContext:
    start: AgentState
    ball_prediction: BallPrediction
    game_time: float = 0.0

    @classmethod
    def from_context(cls, ctx) -> "PlanningContext":
        return cls(ctx.me(), ctx.ball_prediction, ctx.time)

    def advanced(self, segment: "SegmentPlan", elapsed: float = 0.0) -> "PlanningContext":
        """The context at the end of a segment that started at this context's state,
        `elapsed` seconds ago."""
        remaining = max(segment.duration() - elapsed, 0.0)
        return PlanningContext(segment.end(), self.ball_prediction.advanced(remaining), self.game_time + remaining)


class SegmentRunAction(Enum):
    SUCCESS = "success"
    FAILURE = "failure"


SegmentResult = Union[SimpleControllerState, SegmentRunAction]


class SegmentRunner:

    """Drives one segment, one tick at a time."""

    @property
    def name(self) -> str:
        return type(self).__name__

    def execute(self, ctx) -> SegmentResult:
        raise NotImplementedError


class SegmentPlan:

    """A piece of path with a known start state, end state and duration.

    The end state is where the next segment of the route starts."""

    @property
    def name(self) -> str:
        return type(self).__name__

    def start(self) -> AgentState:
        raise NotImplementedError

    def end(self) -> AgentState:
        raise NotImplementedError

    def duration(self) -> float:
        raise NotImplementedError

    def run(self) -> SegmentRunner:
        raise NotImplementedError

    def draw(self, eeg):
        pass


class RoutePlanner:
    @property
    def name(self) -> str:
        return type(self).__name__

    def plan(self, ctx: PlanningContext) -> "RoutePlan":
        raise NotImplementedError


@dataclass(frozen=True)
class ProvisionalExpansion:
    segments: Tuple[SegmentPlan, ...]

    def __iter__(self) -> Iterator[SegmentPlan]:
        return iter(self.segments)

    def __len__(self) -> int:
        return len(self.segments)

    def __getitem__(self, index: int) -> SegmentPlan:
        return self.segments[index]

    def duration(self) -> float:
        return sum(segment.duration() for segment in self.segments)


class ProvisionalExpansionError(Exception):
    def __init__(self, planner_name: str, error: RoutePlanError, step: int):
        super().__init__(f"{planner_name} failed at step {step}: {error!r}")
        self.planner_name = planner_name
        self.error = error
        self.step = step


@dataclass(frozen=True)
class RoutePlan:
    segment: SegmentPlan
    next: Optional[RoutePlanner] = None

    def provisional_expand(self, ctx: PlanningContext, elapsed: float = 0.0) -> ProvisionalExpansion:
        """Plans every deferred step ahead of time, each from the end of the previous segment.

        `ctx` is the context `self.segment` started from, `elapsed` the time spent driving it so far.
        Nothing is committed to; the same call can be repeated every tick.
        """
        segments = [self.segment]
        plan = self
        step_ctx = ctx.advanced(self.segment, elapsed)

        while plan.next is not None:
            planner = plan.next
            if len(segments) >= MAX_EXPANSION_DEPTH:
                error = PlanChainTooLong(f"more than {MAX_EXPANSION_DEPTH} segments")
                raise ProvisionalExpansionError(planner.name, error, len(segments))
            try:
                plan = planner.plan(step_ctx)
            except RoutePlanError as error:
                raise ProvisionalExpansionError(planner.name, error, len(segments)) from error
            segments.append(plan.segment)
            step_ctx = step_ctx.advanced(plan.segment)

        return ProvisionalExpansion(tuple(segments))
