import numpy as np

GRAVITY = -650.0
PHYSICS_DT = 1 / 120

# ball
BALL_RADIUS = 92.75
BALL_DRAG = 0.0305  # fraction of velocity lost per second
BALL_MAX_SPEED = 6000.0
BALL_MAX_ANGULAR_SPEED = 6.0
BALL_RESTITUTION = 0.6
BALL_FRICTION = 2.0  # scales the normal impulse into the friction limit
BALL_SURFACE_FRICTION = 0.285
BALL_SPIN_COEFFICIENT = 0.0003

# arena, standard soccar
FIELD_MAX_X = 4096.0
FIELD_MAX_Y = 5120.0
FIELD_CEILING = 2044.0
GOALPOST_X = 892.755
GOAL_HEIGHT = 642.775

# car
CAR_REST_HEIGHT = 17.01
MAX_CAR_SPEED = 2300.0
THROTTLE_ACCELERATION_0 = 1600.0
THROTTLE_ACCELERATION_1400 = 160.0
THROTTLE_MID_SPEED = 1400.0
THROTTLE_MAX_SPEED = 1410.0
BOOST_ACCELERATION = 991.6667
BOOST_CONSUMPTION_RATE = 33.3  # per second
BREAK_ACCELERATION = 3500.0
COAST_ACCELERATION = 525.0

# the car turns on a circle whose curvature depends on its speed
TURN_SPEEDS = np.array([0.0, 500.0, 1000.0, 1500.0, 1750.0, 2300.0])
TURN_CURVATURES = np.array([0.0069, 0.00398, 0.00235, 0.001375, 0.0011, 0.00088])
TURN_SPEEDS.flags.writeable = False
TURN_CURVATURES.flags.writeable = False
