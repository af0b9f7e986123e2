"""
Numba-compiled core of the 2v2 team Elo update.

Every game, whether processed incrementally or replayed during a rebuild,
goes through ``update_team_game`` so both paths produce identical floats.
Slots 0 and 1 are team 1, slots 2 and 3 are team 2.
"""

import numpy as np
from numba import njit

from ...base._numba_core import expected_score


@njit(cache=True)
def point_factor(score_diff: float, base: float) -> float:
    """Margin-of-victory multiplier for a score difference."""
    return base + np.log10(score_diff + 1.0) ** 3


@njit(cache=True)
def k_factor(games_played: float, k_base: float, decay_games: float) -> float:
    """Update magnitude, decaying with the number of games already played."""
    return k_base / (1.0 + games_played / decay_games)


@njit(cache=True)
def team_expected_scores(ratings: np.ndarray, skill_factor: float) -> np.ndarray:
    """
    Expected scores of team 1 and team 2.

    A player's expectation is the mean of their pairwise expectations against
    both opponents; a team's is the mean of its two players'.
    """
    player_expected = np.empty(4, dtype=np.float64)
    for i in range(4):
        if i < 2:
            o1, o2 = 2, 3
        else:
            o1, o2 = 0, 1
        player_expected[i] = 0.5 * (
            expected_score(ratings[i], ratings[o1], skill_factor)
            + expected_score(ratings[i], ratings[o2], skill_factor)
        )

    teams = np.empty(2, dtype=np.float64)
    teams[0] = 0.5 * (player_expected[0] + player_expected[1])
    teams[1] = 0.5 * (player_expected[2] + player_expected[3])
    return teams


@njit(cache=True)
def update_team_game(
    ratings: np.ndarray,
    games_played: np.ndarray,
    team1_score: int,
    team2_score: int,
    skill_factor: float,
    k_base: float,
    decay_games: float,
    point_factor_base: float,
):
    """
    Compute the four post-game ratings of one 2v2 game.

    Args:
        ratings: (4,) float64 pre-game ratings in slot order
        games_played: (4,) int64 games played before this one
        team1_score: Points scored by team 1
        team2_score: Points scored by team 2
        skill_factor: Slope of the logistic expectation (1/500 by default)
        k_base: K-factor of a player with no games
        decay_games: Games after which the K-factor has halved
        point_factor_base: Point factor of a game won by zero points

    Returns:
        (new_ratings, team1_expected)
    """
    expected = team_expected_scores(ratings, skill_factor)

    # Equal scores count as a team 2 win.
    actual = np.empty(2, dtype=np.float64)
    if team1_score > team2_score:
        actual[0] = 1.0
        actual[1] = 0.0
    else:
        actual[0] = 0.0
        actual[1] = 1.0

    pf = point_factor(float(abs(team1_score - team2_score)), point_factor_base)

    new_ratings = np.empty(4, dtype=np.float64)
    for i in range(4):
        team = 0 if i < 2 else 1
        k = k_factor(float(games_played[i]), k_base, decay_games)
        new_ratings[i] = ratings[i] + k * pf * (actual[team] - expected[team])

    return new_ratings, expected[0]
