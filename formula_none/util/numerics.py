import math

PI = math.pi
DEGREES = PI / 180


def clip(x: float, low: float = -1.0, high: float = 1.0) -> float:
    """Returns x limited to the range [low, high]"""
    return max(low, min(high, x))


def sign(x: float) -> int:
    """Returns 1 if x > 0 else -1, so the car always picks a side to steer to."""
    return 1 if x > 0 else -1


def normalize_angle(angle: float) -> float:
    """Wraps any angle into the [-pi, pi) range, example: normalize_angle(3 * pi / 2) = -pi / 2"""
    return (angle + PI) % (2 * PI) - PI
