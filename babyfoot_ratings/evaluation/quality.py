"""How well the engine's pre-game expectations predicted the results."""

from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np

from ..base import GameRating
from .metrics import accuracy, brier_score, log_loss


@dataclass(frozen=True)
class PredictionQuality:
    """Scores of the team 1 expectations over a processed history."""

    total_games: int
    brier: float
    log_loss: float
    accuracy: float

    def summary(self) -> str:
        return (
            f"Prediction quality over {self.total_games:,} games:\n"
            f"  Brier Score: {self.brier:.4f}\n"
            f"  Log Loss: {self.log_loss:.4f}\n"
            f"  Accuracy: {self.accuracy:.4f}"
        )


def prediction_quality(history: Sequence[GameRating]) -> Optional[PredictionQuality]:
    """Score every processed game's expectation; None for an empty history."""
    if not history:
        return None

    predictions = np.array([gr.team1_expected for gr in history], dtype=np.float64)
    actuals = np.array(
        [1.0 if gr.game.winning_team == 1 else 0.0 for gr in history],
        dtype=np.float64,
    )
    return PredictionQuality(
        total_games=len(history),
        brier=brier_score(predictions, actuals),
        log_loss=log_loss(predictions, actuals),
        accuracy=accuracy(predictions, actuals),
    )
