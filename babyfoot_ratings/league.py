"""
League facade: keeps the record store and the rating engine in sync.

Every write goes to the store first; the engine is then updated
incrementally (new game) or rebuilt (deleted game).
"""

import logging
from datetime import datetime
from typing import Dict, List, Optional, Tuple, Union

from .base import GameRating, RatingSnapshot
from .data import Game, Player, RecordStore
from .evaluation import PredictionQuality, prediction_quality
from .results import (
    GameInfo,
    PlayerMetrics,
    RatingEvolution,
    Standings,
    active_player_scores,
    game_lookup,
    match_history,
    player_metrics,
    rating_evolution,
    ratings_sorted_by_score,
)
from .systems import TeamElo, TeamEloConfig

logger = logging.getLogger(__name__)

PlayerRef = Union[Player, int]


def canonical_order(
    p1: int, p2: int, p3: int, p4: int, score1: int, score2: int,
) -> Tuple[int, int, int, int, int, int]:
    """
    Order players so equivalent games are stored identically: the lower id
    first within each team, and the team holding the lowest id as team 1.
    """
    if p2 < p1:
        p1, p2 = p2, p1
    if p4 < p3:
        p3, p4 = p4, p3
    if p3 < p1:
        p1, p2, p3, p4, score1, score2 = p3, p4, p1, p2, score2, score1
    return p1, p2, p3, p4, score1, score2


def _player_id(player: PlayerRef) -> int:
    return player.id if isinstance(player, Player) else int(player)


class League:
    """
    Ratings of a 2v2 league backed by a record store.

    Parameters:
        store: Record store holding players and games
        config: Engine configuration (default: TeamEloConfig())

    Example:
        >>> league = League(InMemoryRecordStore.from_files("players.csv", "games.csv"))
        >>> league.add_game(alice, bob, carol, dave, 10, 4, played_at)
        >>> league.standings().top(5)
    """

    def __init__(self, store: RecordStore, config: Optional[TeamEloConfig] = None):
        self.store = store
        self.config = config or TeamEloConfig()
        self.engine = TeamElo(
            store,
            initial_rating=self.config.initial_rating,
            skill_factor=self.config.skill_factor,
            k_factor=self.config.k_factor,
            k_decay_games=self.config.k_decay_games,
            point_factor_base=self.config.point_factor_base,
        )

    # =========================================================================
    # Mutations
    # =========================================================================

    def add_game(
        self,
        p1: PlayerRef,
        p2: PlayerRef,
        p3: PlayerRef,
        p4: PlayerRef,
        team1_score: int,
        team2_score: int,
        game_date: datetime,
        submitted_by: Optional[PlayerRef] = None,
    ) -> Game:
        """Record a game ({p1, p2} vs {p3, p4}) and update the ratings."""
        ids = canonical_order(
            _player_id(p1), _player_id(p2), _player_id(p3), _player_id(p4),
            team1_score, team2_score,
        )
        game = Game.new(
            *ids,
            game_date=game_date,
            submitted_by=_player_id(submitted_by) if submitted_by is not None else None,
        )

        with self.engine.locked():
            self.store.insert_game(game)
            self.engine.process_game(game)
        return game

    def delete_game(self, game_id: str) -> bool:
        """Delete a game and rebuild the ratings; False if it does not exist."""
        with self.engine.locked():
            if not self.store.delete_game(game_id):
                logger.warning(f"Cannot delete unknown game {game_id}")
                return False
            self.engine.rebuild()
        return True

    # =========================================================================
    # Queries
    # =========================================================================

    def _resolve(self, player: PlayerRef) -> Optional[Player]:
        return self.store.get_player_by_id(_player_id(player))

    def rating(self, player: PlayerRef) -> RatingSnapshot:
        return self.engine.get_rating(player)

    def ratings_sorted_by_score(self) -> List[RatingSnapshot]:
        return ratings_sorted_by_score(self.engine)

    def match_history(self) -> List[GameRating]:
        return match_history(self.engine)

    def player_metrics(self, player: PlayerRef) -> Optional[PlayerMetrics]:
        resolved = self._resolve(player)
        return None if resolved is None else player_metrics(self.store, resolved)

    def rating_evolution(self, player: PlayerRef) -> Optional[RatingEvolution]:
        resolved = self._resolve(player)
        return None if resolved is None else rating_evolution(self.engine, resolved)

    def game_lookup(self, number_or_id: Union[int, str]) -> Optional[GameInfo]:
        return game_lookup(self.engine, self.store, number_or_id)

    def active_player_scores(self) -> Dict[str, Dict]:
        return active_player_scores(self.engine, self.store)

    def standings(self) -> Standings:
        return Standings.from_engine(self.engine, self.store)

    def prediction_quality(self) -> Optional[PredictionQuality]:
        return prediction_quality(self.engine.get_history())

    def __repr__(self) -> str:
        return f"League({self.store!r}, {self.engine!r})"
