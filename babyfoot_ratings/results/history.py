"""
Read models over the processed game history.

- rating_evolution: a player's rating after each of their games
- game_lookup: one game's pre/post ratings plus its neighbours
- match_history: processed games, most recent first
"""

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Optional, Tuple, Union

import polars as pl

from ..base import GameRating, RatingSnapshot
from ..data import Player, RecordStore
from ..systems import TeamElo


def round_score(score: float) -> int:
    """Round half up, for presentation only."""
    return int(math.floor(score + 0.5))


# =============================================================================
# Rating evolution
# =============================================================================

@dataclass(frozen=True)
class RatingEvolution:
    """A player's rounded rating after each processed game, oldest first."""

    player_id: int
    username: str
    short_name: str
    dates: Tuple[datetime, ...]
    ratings: Tuple[int, ...]

    def __len__(self) -> int:
        return len(self.ratings)

    def to_dict(self) -> Dict:
        return {
            "player": {"username": self.username, "shortName": self.short_name},
            "timeSeries": {
                "x": [int(d.timestamp() * 1000) for d in self.dates],
                "y": list(self.ratings),
            },
        }

    def to_dataframe(self) -> pl.DataFrame:
        return pl.DataFrame(
            {"date": list(self.dates), "rating": list(self.ratings)},
            schema={"date": pl.Datetime(time_zone="UTC"), "rating": pl.Int64},
        )


def rating_evolution(engine: TeamElo, player: Player) -> RatingEvolution:
    """
    Walk the player's snapshot chain back from the current snapshot to the
    initial one and return it in chronological order.
    """
    chain = engine.snapshot_chain(player.id)

    dates: List[datetime] = []
    ratings: List[int] = []
    index = len(chain) - 1 if chain else None
    while index is not None:
        snapshot = chain[index]
        if snapshot.is_initial:
            break
        dates.append(snapshot.game.game_date)
        ratings.append(round_score(snapshot.score))
        index = snapshot.previous

    dates.reverse()
    ratings.reverse()
    return RatingEvolution(
        player_id=player.id,
        username=player.username,
        short_name=player.short_name,
        dates=tuple(dates),
        ratings=tuple(ratings),
    )


# =============================================================================
# Game lookup
# =============================================================================

@dataclass(frozen=True)
class PlayerGameInfo:
    """One player's slot in a looked-up game."""

    player_id: int
    username: str
    short_name: str
    game_number: int      # The player's n-th game
    previous_score: float
    new_score: float

    def to_dict(self) -> Dict:
        return {
            "username": self.username,
            "shortName": self.short_name,
            "gameNumber": self.game_number,
            "previousScore": self.previous_score,
            "newScore": self.new_score,
        }


@dataclass(frozen=True)
class GameInfo:
    """A processed game with its rating changes and neighbouring games."""

    id: str
    number: int
    date: datetime
    submission_date: Optional[datetime]
    players: Tuple[PlayerGameInfo, PlayerGameInfo, PlayerGameInfo, PlayerGameInfo]
    score_team1: int
    score_team2: int
    submitted_by: Optional[str] = None
    previous_game_id: Optional[str] = None
    next_game_id: Optional[str] = None

    def to_dict(self) -> Dict:
        info = {
            "id": self.id,
            "number": self.number,
            "date": self.date,
            "submissionDate": self.submission_date,
            "scoreTeam1": self.score_team1,
            "scoreTeam2": self.score_team2,
        }
        for slot, player in enumerate(self.players, 1):
            info[f"player{slot}"] = player.to_dict()
        if self.submitted_by is not None:
            info["submittedBy"] = self.submitted_by
        if self.previous_game_id is not None:
            info["previousGame"] = {"id": self.previous_game_id}
        if self.next_game_id is not None:
            info["nextGame"] = {"id": self.next_game_id}
        return info


def resolve_game_number(history: List[GameRating], number_or_id: Union[int, str]) -> int:
    """
    1-based position of a game given its number or an id prefix.

    Returns 0 when nothing matches. A prefix matching several games resolves
    to the earliest one.
    """
    if isinstance(number_or_id, int) and not isinstance(number_or_id, bool):
        return number_or_id if 1 <= number_or_id <= len(history) else 0

    prefix = str(number_or_id)
    for position, game_rating in enumerate(history, 1):
        if game_rating.game.id.startswith(prefix):
            return position
    return 0


def _player_game_info(
    engine: TeamElo,
    store: RecordStore,
    snapshot: RatingSnapshot,
) -> PlayerGameInfo:
    previous = engine.previous_of(snapshot)
    player = store.get_player_by_id(snapshot.player_id)
    return PlayerGameInfo(
        player_id=snapshot.player_id,
        username=player.username if player is not None else "",
        short_name=player.short_name if player is not None else "",
        game_number=snapshot.games_played,
        previous_score=previous.score,
        new_score=snapshot.score,
    )


def game_lookup(
    engine: TeamElo,
    store: RecordStore,
    number_or_id: Union[int, str],
) -> Optional[GameInfo]:
    """Look a game up by sequence number or id prefix; None if not found."""
    with engine.locked():
        history = engine.get_history()
        number = resolve_game_number(history, number_or_id)
        if not number:
            return None

        game_rating = history[number - 1]
        game = game_rating.game
        players = tuple(_player_game_info(engine, store, s) for s in game_rating.ratings)

    submitted_by = None
    if game.submitted_by is not None:
        submitter = store.get_player_by_id(game.submitted_by)
        if submitter is not None:
            submitted_by = submitter.short_name

    return GameInfo(
        id=game.id,
        number=number,
        date=game.game_date,
        submission_date=game.submission_date,
        players=players,
        score_team1=game.team1_score,
        score_team2=game.team2_score,
        submitted_by=submitted_by,
        previous_game_id=history[number - 2].game.id if number > 1 else None,
        next_game_id=history[number].game.id if number < len(history) else None,
    )


# =============================================================================
# Match history
# =============================================================================

def match_history(engine: TeamElo) -> List[GameRating]:
    """Processed games, most recent first."""
    return engine.get_history()[::-1]


def match_history_frame(history: List[GameRating], store: RecordStore) -> pl.DataFrame:
    """One row per game with the four players' names and post-game ratings."""
    names = {}
    rows: Dict[str, list] = {
        "id": [], "date": [], "team1_score": [], "team2_score": [],
    }
    for slot in range(1, 5):
        rows[f"player{slot}"] = []
        rows[f"rating{slot}"] = []

    for game_rating in history:
        game = game_rating.game
        rows["id"].append(game.id)
        rows["date"].append(game.game_date)
        rows["team1_score"].append(game.team1_score)
        rows["team2_score"].append(game.team2_score)
        for slot, snapshot in enumerate(game_rating.ratings, 1):
            if snapshot.player_id not in names:
                player = store.get_player_by_id(snapshot.player_id)
                names[snapshot.player_id] = player.short_name if player is not None else ""
            rows[f"player{slot}"].append(names[snapshot.player_id])
            rows[f"rating{slot}"].append(round_score(snapshot.score))

    return pl.DataFrame(rows, schema_overrides={"date": pl.Datetime(time_zone="UTC")})
