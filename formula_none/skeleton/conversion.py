import math

import numpy as np
from rlbot.utils.structures.game_data_struct import Vector3, Rotator


def vector3_to_numpy(vector: Vector3) -> np.ndarray:
    """Converts Vector3 to numpy array"""
    return np.array([vector.x, vector.y, vector.z], dtype=np.float64)


def rotator_to_matrix(rotator: Rotator) -> np.ndarray:
    return rotation_to_matrix([rotator.pitch, rotator.yaw, rotator.roll])


def rotation_to_matrix(rotation) -> np.ndarray:
    """Converts [pitch, yaw, roll] to a read-only matrix whose columns are the car's
    forward, right and up directions in world coordinates."""
    cp, sp = math.cos(rotation[0]), math.sin(rotation[0])
    cy, sy = math.cos(rotation[1]), math.sin(rotation[1])
    cr, sr = math.cos(rotation[2]), math.sin(rotation[2])

    theta = np.array(
        [
            [cp * cy, cy * sp * sr - cr * sy, -cr * cy * sp - sr * sy],
            [cp * sy, sy * sp * sr + cr * cy, -cr * sy * sp + sr * cy],
            [sp, -cp * sr, cp * cr],
        ]
    )
    theta.flags.writeable = False
    return theta
