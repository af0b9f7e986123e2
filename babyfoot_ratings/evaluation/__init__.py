from .metrics import accuracy, brier_score, log_loss
from .quality import PredictionQuality, prediction_quality

__all__ = [
    "brier_score",
    "log_loss",
    "accuracy",
    "PredictionQuality",
    "prediction_quality",
]
