import time

from rlbot.agents.base_agent import BaseAgent, SimpleControllerState
from rlbot.utils.structures.game_data_struct import GameTickPacket

from formula_none.skeleton.game_data import GameData


class SkeletonAgent(BaseAgent):

    """Base class inheriting from BaseAgent that converts the packet into our internal
    data structure before anything else runs, and keeps an eye on how long ticks take."""

    # a tick slower than this makes the bot miss frames
    TICK_TIME = 1 / 120

    def __init__(self, name: str = "skeleton", team: int = 0, index: int = 0):

        super(SkeletonAgent, self).__init__(name, team, index)

        self.game_data = GameData(self.name, self.team, self.index)
        self.controls = SimpleControllerState()

    def get_output(self, game_tick_packet: GameTickPacket) -> SimpleControllerState:
        """Overriding this function is not advised, use get_controls() instead."""

        chrono_start = time.time()

        self.game_data.read_game_tick_packet(game_tick_packet)
        self.controls = self.get_controls()

        delta_time = time.time() - chrono_start

        if delta_time > self.TICK_TIME:
            self.logger.warn(f"Slow to execute on tick {self.game_data.counter}: {delta_time / self.TICK_TIME:.0%}")

        return self.controls

    def get_controls(self) -> SimpleControllerState:
        """Function to override by inheriting classes"""
        return self.controls
