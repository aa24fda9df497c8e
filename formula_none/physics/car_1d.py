"""Straight line model of the car driving at full throttle, boosting while it can."""
import numpy as np
from numba import njit

from formula_none.physics.constants import (
    PHYSICS_DT,
    MAX_CAR_SPEED,
    THROTTLE_ACCELERATION_0,
    THROTTLE_ACCELERATION_1400,
    THROTTLE_MID_SPEED,
    THROTTLE_MAX_SPEED,
    BOOST_ACCELERATION,
    BOOST_CONSUMPTION_RATE,
    BREAK_ACCELERATION,
    COAST_ACCELERATION,
    TURN_SPEEDS,
    TURN_CURVATURES,
)


@njit(cache=True)
def throttle_acceleration(speed: float) -> float:
    """Acceleration at full throttle. Driving backwards full throttle means braking."""
    if speed < 0.0:
        return BREAK_ACCELERATION
    if speed < THROTTLE_MID_SPEED:
        slope = (THROTTLE_ACCELERATION_0 - THROTTLE_ACCELERATION_1400) / THROTTLE_MID_SPEED
        return THROTTLE_ACCELERATION_0 - slope * speed
    if speed < THROTTLE_MAX_SPEED:
        slope = THROTTLE_ACCELERATION_1400 / (THROTTLE_MAX_SPEED - THROTTLE_MID_SPEED)
        return slope * (THROTTLE_MAX_SPEED - speed)
    return 0.0


@njit(cache=True)
def _step(speed, boost, dt):
    to_boost = boost > 0.0 and speed >= 0.0 and speed < MAX_CAR_SPEED
    acceleration = throttle_acceleration(speed)
    if to_boost:
        acceleration += BOOST_ACCELERATION
        boost = max(boost - BOOST_CONSUMPTION_RATE * dt, 0.0)
    new_speed = min(speed + acceleration * dt, MAX_CAR_SPEED)
    return (speed + new_speed) * 0.5 * dt, new_speed, boost


@njit(cache=True)
def drive_forward(times, initial_speed, boost):
    """Distance covered and speed reached at each of the (ascending) times.

    :param times: numpy array of time offsets in seconds
    :param initial_speed: forward speed at time 0
    :param boost: boost amount available at time 0
    :return: (distances, speeds) arrays, same shape as times
    """
    distances = np.empty(times.shape[0])
    speeds = np.empty(times.shape[0])

    t = 0.0
    distance = 0.0
    speed = initial_speed
    for i in range(times.shape[0]):
        while t < times[i] - 1e-9:
            dt = min(PHYSICS_DT, times[i] - t)
            d, speed, boost = _step(speed, boost, dt)
            distance += d
            t += dt
        distances[i] = distance
        speeds[i] = speed

    return distances, speeds


@njit(cache=True)
def time_to_distance(distance, initial_speed, boost, max_time=10.0):
    """Time needed to cover distance, with the speed and boost left at that time.
    Gives up at max_time."""
    t = 0.0
    covered = 0.0
    speed = initial_speed
    while covered < distance and t < max_time:
        d, new_speed, new_boost = _step(speed, boost, PHYSICS_DT)
        if d > 0.0 and covered + d >= distance:
            fraction = (distance - covered) / d
            return t + fraction * PHYSICS_DT, speed + fraction * (new_speed - speed), new_boost
        covered += d
        speed = new_speed
        boost = new_boost
        t += PHYSICS_DT
    return t, speed, boost


def curvature(speed: float) -> float:
    """Inverse of the turning radius at full steer for a given forward speed."""
    return float(np.interp(abs(speed), TURN_SPEEDS, TURN_CURVATURES))


def turn_radius(speed: float) -> float:
    return 1.0 / curvature(speed)


def throttle_for_speed(speed: float, desired_speed: float, dt: float = PHYSICS_DT) -> float:
    """Throttle input that brings the forward speed closest to desired_speed after dt."""
    acceleration = (desired_speed - speed) / dt
    if acceleration > 0.0:
        available = throttle_acceleration(speed)
        if available <= 0.0:
            return 1.0
        return min(acceleration / available, 1.0)
    if acceleration > -COAST_ACCELERATION:
        return 0.0
    return -1.0


def boost_for_speed(speed: float, desired_speed: float, dt: float = PHYSICS_DT) -> bool:
    """Whether throttle alone is too slow to reach desired_speed after dt."""
    if speed >= MAX_CAR_SPEED:
        return False
    return (desired_speed - speed) / dt > throttle_acceleration(speed) + BOOST_ACCELERATION / 2
