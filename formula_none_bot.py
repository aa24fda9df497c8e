from rlbot.agents.base_agent import BOT_CONFIG_AGENT_HEADER, SimpleControllerState
from rlbot.parsing.custom_config import ConfigHeader, ConfigObject

from formula_none.behavior.context import Context
from formula_none.behavior.root import RootBehavior
from formula_none.behavior.runner import Runner
from formula_none.eeg import EEG
from formula_none.predict.ball_prediction import BallPredictor
from formula_none.skeleton.skeleton_agent import SkeletonAgent


class FormulaNone(SkeletonAgent):
    def __init__(self, name, team, index):
        super(FormulaNone, self).__init__(name, team, index)

        self.rendering_enabled = True
        self.prediction_duration = 6.0
        self.prediction_rate = 60
        self.debug_queue_size = 8

        self.predictor = None
        self.runner = Runner(root_factory=RootBehavior)
        self.eeg = None

    @staticmethod
    def create_agent_configurations(config: ConfigObject):
        params = config.get_header(BOT_CONFIG_AGENT_HEADER)
        params.add_value("rendering_enabled", bool, default=True, description="Draw routes and debug text on screen.")
        params.add_value("prediction_duration", float, default=6.0, description="Seconds of ball prediction.")
        params.add_value("prediction_rate", int, default=60, description="Ball prediction frames per second.")
        params.add_value(
            "debug_queue_size", int, default=8, description="Frames of drawings to buffer before dropping them."
        )

    def load_config(self, config_header: ConfigHeader):
        self.rendering_enabled = config_header.getboolean("rendering_enabled")
        self.prediction_duration = config_header.getfloat("prediction_duration")
        self.prediction_rate = config_header.getint("prediction_rate")
        self.debug_queue_size = config_header.getint("debug_queue_size")

    def initialize_agent(self):
        self.predictor = BallPredictor(self.prediction_duration, self.prediction_rate)
        self.eeg = EEG(self.renderer, self.debug_queue_size, self.rendering_enabled, self.name)
        self.logger.info(f"predicting {self.prediction_duration}s of ball at {self.prediction_rate} fps")

    def get_controls(self) -> SimpleControllerState:
        ball_prediction = self.predictor.predict(self.game_data.ball)
        ctx = Context(self.game_data, ball_prediction, self.eeg)

        controls = self.runner.execute(ctx)
        self.eeg.show()

        if controls is None:
            return SimpleControllerState()
        return controls

    def retire(self):
        if self.eeg is not None:
            self.eeg.close()
