"""Scoring rules for pre-game team expectations (numpy-based)."""

import numpy as np


def brier_score(predictions: np.ndarray, actuals: np.ndarray) -> float:
    """
    Mean squared error of the predicted team 1 win probability.

    Lower is better: 0 is perfect, always predicting 0.5 scores 0.25.

    Args:
        predictions: (N,) Expected score of team 1
        actuals: (N,) 1.0 when team 1 won, 0.0 otherwise
    """
    return float(np.mean((predictions - actuals) ** 2))


def log_loss(
    predictions: np.ndarray,
    actuals: np.ndarray,
    eps: float = 1e-15,
) -> float:
    """
    Cross-entropy of the predicted team 1 win probability.

    Lower is better: always predicting 0.5 scores ~0.693.
    """
    predictions = np.clip(predictions, eps, 1 - eps)
    loss = -(actuals * np.log(predictions) + (1 - actuals) * np.log(1 - predictions))
    return float(np.mean(loss))


def accuracy(predictions: np.ndarray, actuals: np.ndarray) -> float:
    """Share of games whose favourite (expected score > 0.5) won."""
    predicted_wins = predictions > 0.5
    actual_wins = actuals > 0.5
    return float(np.mean(predicted_wins == actual_wins))
