from dataclasses import dataclass, field
from typing import Iterator, NamedTuple, Optional

import numpy as np

from formula_none.physics.ball import simulate
from formula_none.physics.constants import BALL_RADIUS


def _frozen(vec) -> np.ndarray:
    array = np.array(vec, dtype=np.float64)
    array.flags.writeable = False
    return array


@dataclass(frozen=True)
class BallState:
    location: np.ndarray = field(default_factory=lambda: np.array([0.0, 0.0, BALL_RADIUS]))
    velocity: np.ndarray = field(default_factory=lambda: np.zeros(3))
    angular_velocity: np.ndarray = field(default_factory=lambda: np.zeros(3))

    def __post_init__(self):
        object.__setattr__(self, "location", _frozen(self.location))
        object.__setattr__(self, "velocity", _frozen(self.velocity))
        object.__setattr__(self, "angular_velocity", _frozen(self.angular_velocity))


class PredictedFrame(NamedTuple):
    time: float  # seconds from the moment the prediction was made
    location: np.ndarray
    velocity: np.ndarray
    angular_velocity: np.ndarray


class BallPrediction:

    """Read-only sequence of predicted ball frames, ordered by time.

    Iterating always starts from the first frame, so the same prediction can be searched
    by several planners during a tick."""

    def __init__(
        self,
        times: np.ndarray,
        locations: np.ndarray,
        velocities: np.ndarray,
        angular_velocities: np.ndarray,
        origin: Optional[np.ndarray] = None,
    ):
        self._times = _frozen(times)
        self._locations = _frozen(locations).reshape(-1, 3)
        self._velocities = _frozen(velocities).reshape(-1, 3)
        self._angular_velocities = _frozen(angular_velocities).reshape(-1, 3)

        # ball location at time 0, used to interpolate before the first frame
        if origin is None:
            origin = self._locations[0] if len(self._times) else np.zeros(3)
        self._origin = _frozen(origin)

    @property
    def times(self) -> np.ndarray:
        return self._times

    def __len__(self) -> int:
        return len(self._times)

    def __getitem__(self, index: int) -> PredictedFrame:
        return PredictedFrame(
            float(self._times[index]),
            self._locations[index],
            self._velocities[index],
            self._angular_velocities[index],
        )

    def __iter__(self) -> Iterator[PredictedFrame]:
        for i in range(len(self)):
            yield self[i]

    def last(self) -> Optional[PredictedFrame]:
        if len(self) == 0:
            return None
        return self[len(self) - 1]

    def frame_at_time(self, time: float) -> Optional[PredictedFrame]:
        """First frame at or after time, None if the prediction ends before that."""
        index = int(np.searchsorted(self._times, time - 1e-9))
        if index >= len(self):
            return None
        return self[index]

    def location_at_time(self, time: float) -> np.ndarray:
        """Ball location linearly interpolated between frames, clamped to the predicted horizon."""
        times = np.concatenate(([0.0], self._times))
        locations = np.vstack((self._origin.reshape(1, 3), self._locations))
        return np.array([np.interp(time, times, locations[:, axis]) for axis in range(3)])

    def advanced(self, dt: float) -> "BallPrediction":
        """The same prediction, as seen dt seconds from now."""
        mask = self._times >= dt - 1e-9
        return BallPrediction(
            self._times[mask] - dt,
            self._locations[mask],
            self._velocities[mask],
            self._angular_velocities[mask],
            origin=self.location_at_time(dt),
        )


class BallPredictor:

    """Predicts where the ball will be, frame by frame, starting from an observed state.

    Pure and deterministic: the same ball state always gives the same prediction."""

    def __init__(self, duration: float = 6.0, rate: int = 60, substeps: int = 2):
        if duration <= 0 or rate <= 0 or substeps <= 0:
            raise ValueError("duration, rate and substeps must be positive")
        self.duration = duration
        self.rate = rate
        self.substeps = substeps

    @property
    def num_frames(self) -> int:
        return int(round(self.duration * self.rate))

    def predict(self, ball: BallState) -> BallPrediction:
        dt = 1.0 / self.rate
        locations, velocities, angular_velocities = simulate(
            np.array(ball.location, dtype=np.float64),
            np.array(ball.velocity, dtype=np.float64),
            np.array(ball.angular_velocity, dtype=np.float64),
            self.num_frames,
            dt,
            self.substeps,
        )
        times = dt * np.arange(1, len(locations) + 1)
        return BallPrediction(times, locations, velocities, angular_velocities, origin=ball.location)
