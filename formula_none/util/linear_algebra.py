import math

import numpy as np


def norm(vec: np.ndarray) -> float:
    return math.sqrt(float(np.dot(vec, vec)))


def to_2d(vec: np.ndarray) -> np.ndarray:
    return np.array([vec[0], vec[1]], dtype=np.float64)


def to_3d(vec: np.ndarray, z: float = 0.0) -> np.ndarray:
    return np.array([vec[0], vec[1], z], dtype=np.float64)


def distance_2d(a: np.ndarray, b: np.ndarray) -> float:
    return math.hypot(b[0] - a[0], b[1] - a[1])


def angle_2d(vec: np.ndarray) -> float:
    """Direction of a vector in the ground plane, in radians from the x axis."""
    return math.atan2(vec[1], vec[0])


def signed_angle_2d(frm: np.ndarray, to: np.ndarray) -> float:
    """Angle needed to rotate `frm` onto `to` in the ground plane, in (-pi, pi]."""
    cross = frm[0] * to[1] - frm[1] * to[0]
    dot = frm[0] * to[0] + frm[1] * to[1]
    return math.atan2(cross, dot)


def rotate_2d(vec: np.ndarray, angle: float) -> np.ndarray:
    c = math.cos(angle)
    s = math.sin(angle)
    return np.array([c * vec[0] - s * vec[1], s * vec[0] + c * vec[1]])


def perpendicular_2d(vec: np.ndarray) -> np.ndarray:
    """The vector rotated a quarter turn in the direction of positive yaw."""
    return np.array([-vec[1], vec[0]], dtype=np.float64)


def direction_2d(angle: float) -> np.ndarray:
    return np.array([math.cos(angle), math.sin(angle)])
