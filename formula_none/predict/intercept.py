from dataclasses import dataclass
from typing import Callable, Optional

import numpy as np

from formula_none.physics.car_1d import drive_forward
from formula_none.predict.ball_prediction import BallPrediction, PredictedFrame
from formula_none.util.linear_algebra import norm

# distance between the ball centre and the car centre when they touch, roughly
CONTACT_RADII = 200.0

GROUND_HIT_MAX_BALL_Z = 150.0


@dataclass(frozen=True)
class NaiveIntercept:
    time: float
    ball_loc: np.ndarray
    ball_vel: np.ndarray
    car_loc: np.ndarray
    car_speed: float


def ground_hit_predicate(max_ball_z: float = GROUND_HIT_MAX_BALL_Z) -> Callable[[PredictedFrame], bool]:
    """Frames where the ball is low and not rising, so a car on the ground can hit it."""

    def predicate(frame: PredictedFrame) -> bool:
        return frame.location[2] < max_ball_z and frame.velocity[2] < 25

    return predicate


def naive_ground_intercept(
    prediction: BallPrediction,
    start_loc: np.ndarray,
    start_vel: np.ndarray,
    start_boost: float,
    predicate: Callable[[PredictedFrame], bool],
) -> Optional[NaiveIntercept]:
    """Earliest predicted frame the car can reach by driving straight at the ball.

    Turning is ignored and the car is assumed to go full throttle from its current speed.
    Returns None if no frame passing the predicate is reachable within the prediction.
    """
    if len(prediction) == 0:
        return None

    times = prediction.times
    start_loc_2d = np.array([start_loc[0], start_loc[1]])
    distances, speeds = drive_forward(times, norm(start_vel), float(start_boost))

    for i, frame in enumerate(prediction):
        if not predicate(frame):
            continue

        offset = frame.location[:2] - start_loc_2d
        distance = norm(offset)
        if distances[i] < distance - CONTACT_RADII:
            continue

        # stop short of the ball centre, on the line from the car
        if distance > 1e-6:
            car_loc_2d = frame.location[:2] - offset / distance * min(CONTACT_RADII, distance)
        else:
            car_loc_2d = start_loc_2d
        car_loc = np.array([car_loc_2d[0], car_loc_2d[1], start_loc[2]])

        return NaiveIntercept(
            time=frame.time,
            ball_loc=frame.location,
            ball_vel=frame.velocity,
            car_loc=car_loc,
            car_speed=float(speeds[i]),
        )

    return None
