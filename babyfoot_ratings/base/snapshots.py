"""Immutable rating snapshots and the per-player arena that stores them."""

from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Tuple

from ..data.types import Game
from ..errors import InvariantViolation
from ._numba_core import expected_score


@dataclass(frozen=True)
class RatingSnapshot:
    """
    A player's rating immediately after one processed game.

    Snapshots form an append-only chain per player. ``previous`` is the index
    of the preceding snapshot in that chain, which is always
    ``games_played - 1``; the synthetic initial snapshot has no game and no
    previous.
    """

    player_id: int
    score: float
    game: Optional[Game] = None
    games_played: int = 0
    previous: Optional[int] = None

    @property
    def is_initial(self) -> bool:
        return self.game is None

    def expected_score_against(self, other: "RatingSnapshot", skill_factor: float) -> float:
        """Expected score of this player against ``other``."""
        return expected_score(self.score, other.score, skill_factor)


@dataclass(frozen=True)
class GameRating:
    """The four snapshots produced by processing one game."""

    game: Game
    ratings: Tuple[RatingSnapshot, RatingSnapshot, RatingSnapshot, RatingSnapshot]
    team1_expected: float = 0.5  # Pre-game expected score of team 1

    def __post_init__(self):
        ratings = tuple(self.ratings)
        if len(ratings) != 4:
            raise InvariantViolation(
                f"Game {self.game.id} rating has {len(ratings)} snapshots, expected 4"
            )
        for slot, (player_id, snapshot) in enumerate(zip(self.game.player_ids, ratings), 1):
            if snapshot.player_id != player_id or snapshot.game is not self.game:
                raise InvariantViolation(
                    f"Game {self.game.id} slot {slot} holds a snapshot for "
                    f"player {snapshot.player_id}, expected {player_id}"
                )
        object.__setattr__(self, "ratings", ratings)

    @property
    def rating_player1(self) -> RatingSnapshot:
        return self.ratings[0]

    @property
    def rating_player2(self) -> RatingSnapshot:
        return self.ratings[1]

    @property
    def rating_player3(self) -> RatingSnapshot:
        return self.ratings[2]

    @property
    def rating_player4(self) -> RatingSnapshot:
        return self.ratings[3]

    def rating_of(self, player_id: int) -> Optional[RatingSnapshot]:
        for snapshot in self.ratings:
            if snapshot.player_id == player_id:
                return snapshot
        return None


class SnapshotArena:
    """
    Append-only storage of every player's snapshot chain.

    Each player owns a list indexed by games played, so a snapshot's
    ``previous`` index addresses its predecessor in the same list.
    """

    def __init__(self):
        self._chains: Dict[int, List[RatingSnapshot]] = {}

    def __contains__(self, player_id: int) -> bool:
        return player_id in self._chains

    def __len__(self) -> int:
        return len(self._chains)

    def __iter__(self) -> Iterator[int]:
        return iter(self._chains)

    def current(self, player_id: int) -> Optional[RatingSnapshot]:
        chain = self._chains.get(player_id)
        return chain[-1] if chain else None

    def chain(self, player_id: int) -> List[RatingSnapshot]:
        """A copy of the player's chain, initial snapshot first."""
        return list(self._chains.get(player_id, ()))

    def previous_of(self, snapshot: RatingSnapshot) -> Optional[RatingSnapshot]:
        if snapshot.previous is None:
            return None
        return self._chains[snapshot.player_id][snapshot.previous]

    def start(self, player_id: int, initial_rating: float) -> RatingSnapshot:
        """Create the synthetic initial snapshot for a player without one."""
        if player_id in self._chains:
            raise InvariantViolation(f"Player {player_id} already has a rating chain")
        snapshot = RatingSnapshot(player_id=player_id, score=initial_rating)
        self._chains[player_id] = [snapshot]
        return snapshot

    def extend(self, previous: RatingSnapshot, score: float, game: Game) -> RatingSnapshot:
        """Append the snapshot that follows ``previous`` after ``game``."""
        chain = self._chains[previous.player_id]
        if chain[-1] is not previous:
            raise InvariantViolation(
                f"Player {previous.player_id} snapshot is not the head of its chain"
            )
        snapshot = RatingSnapshot(
            player_id=previous.player_id,
            score=score,
            game=game,
            games_played=previous.games_played + 1,
            previous=len(chain) - 1,
        )
        chain.append(snapshot)
        return snapshot
