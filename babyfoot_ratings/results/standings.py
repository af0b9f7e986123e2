"""
Standings of the active players.

Wraps the engine's current ratings in numpy arrays for ranking and exports
them as Polars DataFrames.
"""

import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import numpy as np
import polars as pl

from ..base import RatingSnapshot
from ..data import RecordStore
from ..systems import TeamElo


def _compute_ranks(ratings: np.ndarray) -> np.ndarray:
    """
    Compute ranks for all players in O(n log n).

    Returns array where ranks[i] = rank of player i (1 = highest). Equal
    ratings keep their input order.
    """
    n = len(ratings)
    sorted_indices = np.argsort(-ratings, kind="stable")
    ranks = np.empty(n, dtype=np.int32)
    ranks[sorted_indices] = np.arange(1, n + 1)
    return ranks


def ratings_sorted_by_score(engine: TeamElo) -> List[RatingSnapshot]:
    """Active players' current snapshots, highest score first."""
    return sorted(engine.get_active_ratings(), key=lambda s: s.score, reverse=True)


def active_player_scores(engine: TeamElo, store: RecordStore) -> Dict[str, Dict]:
    """Username -> floored score and short name of every active player."""
    result = {}
    for snapshot in engine.get_active_ratings():
        player = store.get_player_by_id(snapshot.player_id)
        if player is None:
            continue
        result[player.username] = {
            "score": math.floor(snapshot.score),
            "shortName": player.short_name,
        }
    return result


@dataclass
class Standings:
    """
    Queryable view of the active players' current ratings.

    Attributes:
        player_ids: Active player ids, in record store order
        ratings: Current rating of each player (same order)
        games_played: Games played by each player
        names: Mapping of player_id -> short name
    """

    player_ids: np.ndarray
    ratings: np.ndarray
    games_played: np.ndarray
    names: Dict[int, str] = field(default_factory=dict)

    _ranks: Optional[np.ndarray] = field(default=None, repr=False)

    def __post_init__(self):
        self.player_ids = np.ascontiguousarray(self.player_ids, dtype=np.int64)
        self.ratings = np.ascontiguousarray(self.ratings, dtype=np.float64)
        self.games_played = np.ascontiguousarray(self.games_played, dtype=np.int64)
        self._ranks = None
        self._index = {int(pid): i for i, pid in enumerate(self.player_ids)}

    @classmethod
    def from_engine(cls, engine: TeamElo, store: RecordStore) -> "Standings":
        snapshots = engine.get_active_ratings()
        names = {}
        for snapshot in snapshots:
            player = store.get_player_by_id(snapshot.player_id)
            names[snapshot.player_id] = player.short_name if player is not None else ""
        return cls(
            player_ids=np.array([s.player_id for s in snapshots], dtype=np.int64),
            ratings=np.array([s.score for s in snapshots], dtype=np.float64),
            games_played=np.array([s.games_played for s in snapshots], dtype=np.int64),
            names=names,
        )

    @property
    def num_players(self) -> int:
        return len(self.ratings)

    @property
    def ranks(self) -> np.ndarray:
        """Lazily computed ranks array (1 = highest rated)."""
        if self._ranks is None:
            self._ranks = _compute_ranks(self.ratings)
        return self._ranks

    def rank(self, player_id: int) -> Optional[int]:
        """Rank of an active player, or None if they are not listed."""
        index = self._index.get(player_id)
        return None if index is None else int(self.ranks[index])

    def get_rating(self, player_id: int) -> Optional[float]:
        index = self._index.get(player_id)
        return None if index is None else float(self.ratings[index])

    def top(self, n: int = 10) -> pl.DataFrame:
        """Top N players with columns: rank, player_id, name, rating, games."""
        return self.to_dataframe().head(n)

    def to_dataframe(self) -> pl.DataFrame:
        """All active players, sorted by rating descending."""
        order = np.argsort(self.ranks, kind="stable")
        return pl.DataFrame({
            "rank": self.ranks[order],
            "player_id": self.player_ids[order],
            "name": [self.names.get(int(pid), "") for pid in self.player_ids[order]],
            "rating": self.ratings[order],
            "games": self.games_played[order],
        })

    def __repr__(self) -> str:
        return f"Standings(players={self.num_players})"

    def __str__(self) -> str:
        if not self.num_players:
            return "Standings\n  Players: 0"
        lines = [
            "Standings",
            f"  Players: {self.num_players:,}",
            f"  Rating range: {self.ratings.min():.1f} - {self.ratings.max():.1f}",
            f"  Mean rating: {self.ratings.mean():.1f}",
        ]
        return "\n".join(lines)
