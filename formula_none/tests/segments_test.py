import math
import unittest

import numpy as np
from rlbot.agents.base_agent import SimpleControllerState

from formula_none.physics.car_1d import turn_radius
from formula_none.routing.models import PlanningContext, SegmentRunAction
from formula_none.routing.plan.ground_turn import PathingUnawareTurnPlanner
from formula_none.routing.segments.null import NullSegment
from formula_none.routing.segments.straight import Straight, StraightMode
from formula_none.routing.segments.turn import Turn
from formula_none.tests.helpers import KinematicCar, airborne_state, car_state, make_context, resting_ball_prediction
from formula_none.util.numerics import normalize_angle

DT = 1 / 60


def drive(segment, car: KinematicCar, max_ticks: int = 600):
    """Runs a segment on the kinematic car until it stops yielding controls."""
    runner = segment.run()
    prediction = resting_ball_prediction(0.0, 4000.0)
    for tick in range(max_ticks):
        result = runner.execute(make_context(car.state(), prediction, time=tick * DT))
        if not isinstance(result, SimpleControllerState):
            return result, tick
        car.step(result, DT)
    raise AssertionError(f"{segment.name} did not finish in {max_ticks} ticks")


class TurnTests(unittest.TestCase):
    def quarter_turn(self, side: int) -> Turn:
        radius = turn_radius(1000.0)
        target = np.array([radius, side * (radius + 2000.0)])
        ctx = PlanningContext(car_state(speed=1000.0), resting_ball_prediction(0.0, 4000.0))
        return PathingUnawareTurnPlanner(target).plan(ctx).segment

    def test_quarter_turn_completes_on_heading(self):
        turn = self.quarter_turn(1)
        self.assertAlmostEqual(turn.sweep, math.pi / 2)
        car = KinematicCar(turn.start())

        result, _ = drive(turn, car)

        self.assertIs(result, SegmentRunAction.SUCCESS)
        self.assertLess(abs(normalize_angle(car.yaw - turn.end().yaw)), math.radians(3))

    def test_quarter_turn_the_other_way(self):
        turn = self.quarter_turn(-1)
        self.assertAlmostEqual(turn.sweep, -math.pi / 2)
        car = KinematicCar(turn.start())

        result, _ = drive(turn, car)

        self.assertIs(result, SegmentRunAction.SUCCESS)
        self.assertLess(abs(normalize_angle(car.yaw - turn.end().yaw)), math.radians(3))

    def test_duration_matches_driving_time(self):
        turn = self.quarter_turn(1)

        _, ticks = drive(turn, KinematicCar(turn.start()))

        self.assertAlmostEqual(ticks * DT, turn.duration(), delta=0.1)

    def test_fails_in_the_air(self):
        turn = self.quarter_turn(1)
        result = turn.run().execute(make_context(airborne_state()))
        self.assertIs(result, SegmentRunAction.FAILURE)

    def test_steers_toward_the_target(self):
        turn = self.quarter_turn(-1)
        controls = turn.run().execute(make_context(turn.start()))
        self.assertEqual(controls.steer, -1.0)
        self.assertEqual(controls.throttle, 1.0)


class StraightTests(unittest.TestCase):
    def test_reaches_the_end(self):
        start = car_state(speed=1000.0)
        straight = Straight(start, np.array([1500.0, 0.0]), 1.5, 1000.0, 100.0, StraightMode.ASAP)

        result, ticks = drive(straight, KinematicCar(start))

        self.assertIs(result, SegmentRunAction.SUCCESS)
        self.assertAlmostEqual(ticks * DT, 1.5, delta=2 * DT)

    def test_times_out(self):
        start = car_state(speed=0.0)
        straight = Straight(start, np.array([1500.0, 0.0]), 0.5, 1000.0, 100.0, StraightMode.ASAP)

        result, ticks = drive(straight, KinematicCar(start))

        self.assertIs(result, SegmentRunAction.FAILURE)
        self.assertGreater(ticks * DT, 1.5)

    def test_on_time_ends_when_time_is_up(self):
        start = car_state(speed=0.0)
        straight = Straight(start, np.array([1500.0, 0.0]), 0.5, 1000.0, 100.0, StraightMode.ON_TIME)

        result, ticks = drive(straight, KinematicCar(start))

        self.assertIs(result, SegmentRunAction.SUCCESS)
        self.assertAlmostEqual(ticks * DT, 0.5, delta=2 * DT)

    def test_boosts_when_in_a_hurry(self):
        start = car_state(speed=0.0)
        straight = Straight(start, np.array([1500.0, 0.0]), 1.0, 2000.0, 50.0, StraightMode.ASAP)

        controls = straight.run().execute(make_context(start))

        self.assertEqual(controls.throttle, 1.0)
        self.assertTrue(controls.boost)

    def test_no_boost(self):
        start = car_state(speed=0.0)
        straight = Straight(start, np.array([1500.0, 0.0]), 1.0, 1400.0, 100.0, allow_boost=False)

        controls = straight.run().execute(make_context(start))

        self.assertFalse(controls.boost)

    def test_end_state(self):
        start = car_state(speed=500.0)
        end = Straight(start, np.array([0.0, 1500.0]), 1.0, 1200.0, 80.0).end()

        np.testing.assert_allclose(end.location_2d, [0.0, 1500.0])
        self.assertAlmostEqual(end.yaw, math.pi / 2)
        self.assertAlmostEqual(end.speed, 1200.0)
        self.assertEqual(end.boost, 80.0)


class NullSegmentTests(unittest.TestCase):
    def test_null_segment(self):
        start = car_state(x=100.0)
        segment = NullSegment(start)

        self.assertIs(segment.end(), start)
        self.assertEqual(segment.duration(), 0.0)
        self.assertIs(segment.run().execute(make_context(start)), SegmentRunAction.SUCCESS)


if __name__ == "__main__":
    unittest.main()
