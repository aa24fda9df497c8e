from typing import List

import numpy as np
from rlbot.utils.structures.game_data_struct import GameTickPacket, PlayerInfo, BallInfo, GameInfo, MAX_PLAYERS

from formula_none.physics.constants import FIELD_MAX_Y
from formula_none.predict.ball_prediction import BallState
from formula_none.routing.models import AgentState
from formula_none.skeleton.conversion import vector3_to_numpy, rotator_to_matrix


def read_car(game_car: PlayerInfo) -> AgentState:
    physics = game_car.physics
    return AgentState(
        location=vector3_to_numpy(physics.location),
        rotation=rotator_to_matrix(physics.rotation),
        velocity=vector3_to_numpy(physics.velocity),
        angular_velocity=vector3_to_numpy(physics.angular_velocity),
        boost=float(game_car.boost),
        has_wheel_contact=bool(game_car.has_wheel_contact),
    )


def read_ball(game_ball: BallInfo) -> BallState:
    physics = game_ball.physics
    return BallState(
        location=vector3_to_numpy(physics.location),
        velocity=vector3_to_numpy(physics.velocity),
        angular_velocity=vector3_to_numpy(physics.angular_velocity),
    )


class GameData:

    """Snapshot of the world for one tick, converted from the rlbot packet."""

    def __init__(self, name: str = "formula_none", team: int = 0, index: int = 0):

        self.name = name
        self.index = index
        self.team = team

        self.my_car = AgentState.on_ground_2d(np.zeros(2), 0.0)
        self.teammates: List[AgentState] = []
        self.opponents: List[AgentState] = []

        self.ball = BallState()

        self.time = 0.0
        self.round_active = False
        self.kickoff_pause = False
        self.match_ended = False

        self.counter = 0

    def read_game_tick_packet(self, game_tick_packet: GameTickPacket):
        """Reads the whole packet. Call once per tick before anything else looks at the data."""

        self.read_game_cars(game_tick_packet.game_cars, game_tick_packet.num_cars)
        self.ball = read_ball(game_tick_packet.game_ball)
        self.read_game_info(game_tick_packet.game_info)
        self.counter += 1

    def read_game_cars(self, game_cars: PlayerInfo * MAX_PLAYERS, num_cars: int):

        self.teammates = []
        self.opponents = []

        for i in range(num_cars):
            car = read_car(game_cars[i])
            if i == self.index:
                self.my_car = car
            elif game_cars[i].team == self.team:
                self.teammates.append(car)
            else:
                self.opponents.append(car)

    def read_game_info(self, game_info: GameInfo):

        self.time = game_info.seconds_elapsed
        self.round_active = game_info.is_round_active
        self.kickoff_pause = game_info.is_kickoff_pause
        self.match_ended = game_info.is_match_ended

    @property
    def own_goal_location(self) -> np.ndarray:
        """Centre of our goal line, blue team defends negative y."""
        side = -1 if self.team == 0 else 1
        return np.array([0.0, side * FIELD_MAX_Y])

    @property
    def opponent_goal_location(self) -> np.ndarray:
        return -self.own_goal_location
