"""Numba-compiled pairwise Elo expectation shared by snapshots and the engine."""

from numba import njit


@njit(cache=True)
def expected_score(rating_a: float, rating_b: float, skill_factor: float) -> float:
    """Expected score for player A against player B."""
    return 1.0 / (1.0 + 10.0 ** (skill_factor * (rating_b - rating_a)))
