"""
Incremental 2v2 Elo engine with full-rebuild fallback.

Games must be processed in ascending game date. A game that arrives earlier
than the last processed one cannot be applied incrementally, so the engine
rebuilds every rating from the record store instead; the final state for a
given set of games is therefore independent of submission order.

Mutations (``get_rating`` on an unseen player, ``process_game``, ``rebuild``)
go through a single re-entrant lock. Reads take the same lock, and a rebuild
publishes its new state only once it is complete.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Dict, List, Optional, Union

import numpy as np

from ...base import GameRating, RatingSnapshot, SnapshotArena
from ...data import Game, Player, RecordStore
from ._numba_core import update_team_game

logger = logging.getLogger(__name__)

PlayerRef = Union[Player, int]


@dataclass
class TeamEloConfig:
    """Configuration for the 2v2 Elo engine."""

    initial_rating: float = 1500.0
    skill_factor: float = 1.0 / 500.0  # Chess uses 1/400; lower means more luck
    k_factor: float = 50.0
    k_decay_games: float = 300.0
    point_factor_base: float = 2.0


class _EngineState:
    """Everything the engine derives from the game history."""

    __slots__ = ("arena", "history", "positions")

    def __init__(self):
        self.arena = SnapshotArena()
        self.history: List[GameRating] = []
        self.positions: Dict[str, int] = {}  # game id -> 1-based position


def _player_id(player: PlayerRef) -> int:
    return player.id if isinstance(player, Player) else int(player)


class TeamElo:
    """
    Elo rating engine for 2v2 games.

    Each player's expectation is the mean of their logistic expectations
    against both opponents, and team expectations average the two players.
    The winner's margin scales the update through the point factor, and each
    player's K-factor decays with the games they have played.

    Parameters:
        store: Record store providing games and active players
        initial_rating: Rating of a player with no games (default: 1500)
        skill_factor: Slope of the logistic expectation (default: 1/500)
        k_factor: K-factor of a new player (default: 50)
        k_decay_games: Games after which the K-factor has halved (default: 300)
        point_factor_base: Point factor of a zero-margin game (default: 2)

    Example:
        >>> engine = TeamElo(store)
        >>> engine.process_game(game)
        >>> engine.get_rating(player).score
    """

    def __init__(
        self,
        store: RecordStore,
        initial_rating: float = 1500.0,
        skill_factor: float = 1.0 / 500.0,
        k_factor: float = 50.0,
        k_decay_games: float = 300.0,
        point_factor_base: float = 2.0,
    ):
        self.store = store
        self.config = TeamEloConfig(
            initial_rating=initial_rating,
            skill_factor=skill_factor,
            k_factor=k_factor,
            k_decay_games=k_decay_games,
            point_factor_base=point_factor_base,
        )
        self._lock = threading.RLock()
        self._state = _EngineState()
        self.rebuild()

    # =========================================================================
    # Mutations
    # =========================================================================

    def get_rating(self, player: PlayerRef) -> RatingSnapshot:
        """
        Current snapshot of a player.

        A player never seen before gets (and keeps) the initial snapshot.
        """
        player_id = _player_id(player)
        with self._lock:
            return self._current(self._state, player_id)

    def process_game(self, game: Game) -> Optional[GameRating]:
        """
        Apply one game to the ratings.

        If the game was played before the last processed game, every rating
        is rebuilt from the record store instead, which must already contain
        the game. Returns the game's rating, or None if a rebuild did not
        find it in the store.
        """
        with self._lock:
            state = self._state
            if state.history and game.game_date < state.history[-1].game.game_date:
                logger.info(
                    f"Game {game.id} played {game.game_date.isoformat()} precedes the "
                    f"last processed game; rebuilding ratings"
                )
                self.rebuild()
                return self.game_rating_of(game.id)

            if game.id in state.positions:
                raise ValueError(f"Game {game.id} has already been processed")
            return self._apply(state, game)

    def rebuild(self) -> None:
        """Recompute all ratings from every game in the record store."""
        with self._lock:
            state = _EngineState()
            games = sorted(self.store.list_all_games(), key=lambda g: g.game_date)

            for game in games:
                self._apply(state, game)

            if not games:
                for player in self.store.list_active_players():
                    self._current(state, player.id)

            self._state = state
            logger.info(f"Rebuilt ratings from {len(games):,} games")

    def _current(self, state: _EngineState, player_id: int) -> RatingSnapshot:
        snapshot = state.arena.current(player_id)
        if snapshot is None:
            snapshot = state.arena.start(player_id, self.config.initial_rating)
        return snapshot

    def _apply(self, state: _EngineState, game: Game) -> GameRating:
        before = [self._current(state, pid) for pid in game.player_ids]

        ratings = np.array([s.score for s in before], dtype=np.float64)
        games_played = np.array([s.games_played for s in before], dtype=np.int64)
        new_ratings, team1_expected = update_team_game(
            ratings,
            games_played,
            int(game.team1_score),
            int(game.team2_score),
            float(self.config.skill_factor),
            float(self.config.k_factor),
            float(self.config.k_decay_games),
            float(self.config.point_factor_base),
        )

        after = tuple(
            state.arena.extend(prev, float(score), game)
            for prev, score in zip(before, new_ratings)
        )
        game_rating = GameRating(game=game, ratings=after, team1_expected=float(team1_expected))
        state.history.append(game_rating)
        state.positions[game.id] = len(state.history)

        logger.debug(
            f"Processed game {game.id} ({game.team1_score}-{game.team2_score}), "
            f"team 1 expected {team1_expected:.3f}"
        )
        return game_rating

    # =========================================================================
    # Reads
    # =========================================================================

    def locked(self) -> "threading.RLock":
        """
        The engine lock, for callers combining several reads.

        Holding it guarantees no game is processed and no rebuild is
        published until the block exits.
        """
        return self._lock

    def get_active_ratings(self) -> List[RatingSnapshot]:
        """
        Current snapshot of every active player, in record store order.

        Active players without a snapshot are reported at the initial rating.
        """
        with self._lock:
            arena = self._state.arena
            result = []
            for player in self.store.list_active_players():
                snapshot = arena.current(player.id)
                if snapshot is None:
                    snapshot = RatingSnapshot(player.id, self.config.initial_rating)
                result.append(snapshot)
            return result

    def get_history(self) -> List[GameRating]:
        """Processed games in processing (chronological) order."""
        with self._lock:
            return list(self._state.history)

    def get_game_rating_by_position(self, position: int) -> Optional[GameRating]:
        """Game rating at a 1-based position, or None when out of range."""
        with self._lock:
            history = self._state.history
            if position <= 0 or position > len(history):
                return None
            return history[position - 1]

    def position_of(self, game_id: str) -> Optional[int]:
        with self._lock:
            return self._state.positions.get(game_id)

    def game_rating_of(self, game_id: str) -> Optional[GameRating]:
        position = self.position_of(game_id)
        return None if position is None else self.get_game_rating_by_position(position)

    def current_snapshot(self, player: PlayerRef) -> Optional[RatingSnapshot]:
        """Current snapshot without creating one for unseen players."""
        with self._lock:
            return self._state.arena.current(_player_id(player))

    def snapshot_chain(self, player: PlayerRef) -> List[RatingSnapshot]:
        """A player's snapshots, initial snapshot first."""
        with self._lock:
            return self._state.arena.chain(_player_id(player))

    def previous_of(self, snapshot: RatingSnapshot) -> Optional[RatingSnapshot]:
        with self._lock:
            return self._state.arena.previous_of(snapshot)

    @property
    def num_games(self) -> int:
        with self._lock:
            return len(self._state.history)

    def __len__(self) -> int:
        return self.num_games

    def __repr__(self) -> str:
        with self._lock:
            state = self._state
            return (
                f"TeamElo(k_factor={self.config.k_factor}, "
                f"initial_rating={self.config.initial_rating}, "
                f"players={len(state.arena)}, games={len(state.history)})"
            )
