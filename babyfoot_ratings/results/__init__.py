"""Read-only queries over the engine state and the record store."""

from .history import (
    GameInfo,
    PlayerGameInfo,
    RatingEvolution,
    game_lookup,
    match_history,
    match_history_frame,
    rating_evolution,
    resolve_game_number,
    round_score,
)
from .player_metrics import PairRecord, PlayerMetrics, WinsAndLosses, player_metrics
from .standings import Standings, active_player_scores, ratings_sorted_by_score

__all__ = [
    "GameInfo",
    "PlayerGameInfo",
    "RatingEvolution",
    "game_lookup",
    "match_history",
    "match_history_frame",
    "rating_evolution",
    "resolve_game_number",
    "round_score",
    "PairRecord",
    "PlayerMetrics",
    "WinsAndLosses",
    "player_metrics",
    "Standings",
    "active_player_scores",
    "ratings_sorted_by_score",
]
