"""
Babyfoot Ratings - Elo ratings for a 2v2 league.

Maintains player ratings from a chronological stream of 2v2 results and
answers analytical queries over the rating history. The per-game update is
compiled with Numba; read models export to Polars DataFrames.

Quick Start:
    from babyfoot_ratings import InMemoryRecordStore, League

    store = InMemoryRecordStore.from_files("players.csv", "games.csv")
    league = League(store)

    # Record a game: {alice, bob} beat {carol, dave} 10-4
    league.add_game(alice, bob, carol, dave, 10, 4, played_at)

    print(league.standings().top(10))
    print(league.player_metrics(alice).to_dict())
    print(league.rating_evolution(alice).to_dataframe())
    print(league.game_lookup(1))

Command-line interface:
    python -m babyfoot_ratings standings players.csv games.csv --top 20
"""

from .base import GameRating, RatingSnapshot, SnapshotArena
from .data import Game, InMemoryRecordStore, Player, RecordStore
from .errors import InvalidGameError, InvariantViolation, RatingsError
from .evaluation import PredictionQuality, prediction_quality
from .league import League, canonical_order
from .results import (
    GameInfo,
    PlayerMetrics,
    RatingEvolution,
    Standings,
    game_lookup,
    match_history,
    player_metrics,
    rating_evolution,
    ratings_sorted_by_score,
)
from .systems import TeamElo, TeamEloConfig

__version__ = "0.1.0"

__all__ = [
    # Data
    "Game",
    "Player",
    "RecordStore",
    "InMemoryRecordStore",
    # Snapshots
    "RatingSnapshot",
    "GameRating",
    "SnapshotArena",
    # Engine
    "TeamElo",
    "TeamEloConfig",
    # Queries
    "GameInfo",
    "PlayerMetrics",
    "RatingEvolution",
    "Standings",
    "game_lookup",
    "match_history",
    "player_metrics",
    "rating_evolution",
    "ratings_sorted_by_score",
    # Evaluation
    "PredictionQuality",
    "prediction_quality",
    # League
    "League",
    "canonical_order",
    # Errors
    "RatingsError",
    "InvalidGameError",
    "InvariantViolation",
]
