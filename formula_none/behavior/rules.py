from typing import Optional

from formula_none.behavior.behavior import Action, Abort
from formula_none.predict.ball_prediction import BallPrediction
from formula_none.util.linear_algebra import norm


class SameBallTrajectory:

    """Notices when the ball leaves the path predicted for it, usually because someone touched it.

    Not a behavior by itself, routes check it at the start of their tick."""

    # how far the ball may be from where we expected it
    TOLERANCE = 50.0

    def __init__(self):
        self.prediction: Optional[BallPrediction] = None
        self.predicted_at = 0.0

    def execute(self, ctx) -> Optional[Action]:
        if self.prediction is not None:
            expected = self.prediction.location_at_time(ctx.time - self.predicted_at)
            deviation = norm(expected - ctx.game.ball.location)
            if deviation >= self.TOLERANCE:
                ctx.eeg.log("SameBallTrajectory", f"ball is {deviation:.0f} off its trajectory")
                return Abort()

        self.prediction = ctx.ball_prediction
        self.predicted_at = ctx.time
        return None
