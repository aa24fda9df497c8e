from formula_none.eeg import EEG
from formula_none.predict.ball_prediction import BallPrediction
from formula_none.routing.models import AgentState


class Context:

    """Everything a behavior may look at during one tick."""

    def __init__(self, game, ball_prediction: BallPrediction, eeg: EEG):
        self.game = game
        self.ball_prediction = ball_prediction
        self.eeg = eeg

    def me(self) -> AgentState:
        return self.game.my_car

    @property
    def time(self) -> float:
        return self.game.time
