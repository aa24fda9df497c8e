"""Ball physics on a box-shaped standard arena.

Bounces follow the impulse model described by Chip (RLUtilities): the normal component
is reflected with restitution, the tangential component loses speed to friction
limited by the normal impulse, and friction feeds back into the spin.
The rounded corners and the goal interiors are approximated by flat walls.
"""
import math

import numpy as np
from numba import njit

from formula_none.physics.constants import (
    GRAVITY,
    BALL_RADIUS,
    BALL_DRAG,
    BALL_MAX_SPEED,
    BALL_MAX_ANGULAR_SPEED,
    BALL_RESTITUTION,
    BALL_FRICTION,
    BALL_SURFACE_FRICTION,
    BALL_SPIN_COEFFICIENT,
    FIELD_MAX_X,
    FIELD_MAX_Y,
    FIELD_CEILING,
    GOALPOST_X,
    GOAL_HEIGHT,
)


@njit(cache=True)
def _cap_norm(vec, limit):
    length = math.sqrt(vec[0] * vec[0] + vec[1] * vec[1] + vec[2] * vec[2])
    if length > limit:
        scale = limit / length
        vec[0] *= scale
        vec[1] *= scale
        vec[2] *= scale


@njit(cache=True)
def _collide(loc, vel, ang_vel, nx, ny, nz, penetration):
    """Pushes the ball out of a surface with normal n and applies the bounce impulse in place."""
    loc[0] += nx * penetration
    loc[1] += ny * penetration
    loc[2] += nz * penetration

    v_n = vel[0] * nx + vel[1] * ny + vel[2] * nz
    if v_n >= 0.0:
        return

    perp_x = v_n * nx
    perp_y = v_n * ny
    perp_z = v_n * nz

    # velocity of the contact point relative to the surface
    s_x = vel[0] - perp_x + BALL_RADIUS * (ny * ang_vel[2] - nz * ang_vel[1])
    s_y = vel[1] - perp_y + BALL_RADIUS * (nz * ang_vel[0] - nx * ang_vel[2])
    s_z = vel[2] - perp_z + BALL_RADIUS * (nx * ang_vel[1] - ny * ang_vel[0])
    s_norm = math.sqrt(s_x * s_x + s_y * s_y + s_z * s_z)

    ratio = abs(v_n) / max(s_norm, 0.0001)
    k = min(1.0, BALL_FRICTION * ratio) * BALL_SURFACE_FRICTION
    para_x = -k * s_x
    para_y = -k * s_y
    para_z = -k * s_z

    spin = BALL_SPIN_COEFFICIENT * BALL_RADIUS
    ang_vel[0] += spin * (para_y * nz - para_z * ny)
    ang_vel[1] += spin * (para_z * nx - para_x * nz)
    ang_vel[2] += spin * (para_x * ny - para_y * nx)

    vel[0] += -(1.0 + BALL_RESTITUTION) * perp_x + para_x
    vel[1] += -(1.0 + BALL_RESTITUTION) * perp_y + para_y
    vel[2] += -(1.0 + BALL_RESTITUTION) * perp_z + para_z


@njit(cache=True)
def in_goal(loc) -> bool:
    return abs(loc[1]) > FIELD_MAX_Y + BALL_RADIUS and abs(loc[0]) < GOALPOST_X and loc[2] < GOAL_HEIGHT


@njit(cache=True)
def step(loc, vel, ang_vel, dt):
    """Advances the ball by dt seconds, in place."""
    vel[2] += GRAVITY * dt
    drag = 1.0 - BALL_DRAG * dt
    vel[0] *= drag
    vel[1] *= drag
    vel[2] *= drag
    _cap_norm(vel, BALL_MAX_SPEED)
    _cap_norm(ang_vel, BALL_MAX_ANGULAR_SPEED)

    loc[0] += vel[0] * dt
    loc[1] += vel[1] * dt
    loc[2] += vel[2] * dt

    if loc[2] < BALL_RADIUS:
        _collide(loc, vel, ang_vel, 0.0, 0.0, 1.0, BALL_RADIUS - loc[2])
    elif loc[2] > FIELD_CEILING - BALL_RADIUS:
        _collide(loc, vel, ang_vel, 0.0, 0.0, -1.0, loc[2] - (FIELD_CEILING - BALL_RADIUS))

    if loc[0] > FIELD_MAX_X - BALL_RADIUS:
        _collide(loc, vel, ang_vel, -1.0, 0.0, 0.0, loc[0] - (FIELD_MAX_X - BALL_RADIUS))
    elif loc[0] < BALL_RADIUS - FIELD_MAX_X:
        _collide(loc, vel, ang_vel, 1.0, 0.0, 0.0, (BALL_RADIUS - FIELD_MAX_X) - loc[0])

    # the back walls have a hole where the goal is
    in_mouth = abs(loc[0]) < GOALPOST_X - BALL_RADIUS and loc[2] < GOAL_HEIGHT - BALL_RADIUS
    if not in_mouth and abs(loc[1]) <= FIELD_MAX_Y + BALL_RADIUS:
        if loc[1] > FIELD_MAX_Y - BALL_RADIUS:
            _collide(loc, vel, ang_vel, 0.0, -1.0, 0.0, loc[1] - (FIELD_MAX_Y - BALL_RADIUS))
        elif loc[1] < BALL_RADIUS - FIELD_MAX_Y:
            _collide(loc, vel, ang_vel, 0.0, 1.0, 0.0, (BALL_RADIUS - FIELD_MAX_Y) - loc[1])


@njit(cache=True)
def simulate(location, velocity, angular_velocity, num_frames, dt, substeps):
    """Simulates up to num_frames frames, dt seconds apart, each split into substeps steps.

    Returns the locations, velocities and angular velocities of the frames, as three
    (n, 3) arrays with n <= num_frames. The simulation ends early if the ball goes into a goal.
    """
    locations = np.empty((num_frames, 3))
    velocities = np.empty((num_frames, 3))
    angular_velocities = np.empty((num_frames, 3))

    loc = location.copy()
    vel = velocity.copy()
    ang_vel = angular_velocity.copy()
    h = dt / substeps

    count = 0
    for i in range(num_frames):
        for _ in range(substeps):
            step(loc, vel, ang_vel, h)
        if in_goal(loc):
            break
        locations[i, :] = loc
        velocities[i, :] = vel
        angular_velocities[i, :] = ang_vel
        count += 1

    return locations[:count], velocities[:count], angular_velocities[:count]
