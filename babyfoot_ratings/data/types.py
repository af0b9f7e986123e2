"""Player and game records consumed by the rating engine."""

import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Tuple

from ..errors import InvalidGameError

MIN_TEAM_SCORE = -10
MAX_TEAM_SCORE = 10


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes so game dates always compare."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


@dataclass(eq=False)
class Player:
    """
    A registered player.

    Identity is the integer id assigned by the record store; names and the
    active flag may change over time without affecting rating history.
    """

    id: int
    username: str
    first_name: str
    last_name: str
    active: bool = True
    short_name: Optional[str] = None  # Display name, disambiguated by the store

    def __post_init__(self):
        if self.short_name is None:
            self.short_name = self.first_name

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def won(self, game: "Game") -> bool:
        """Whether this player was on the winning team of ``game``."""
        return game.team_of_player(self.id) == game.winning_team

    def __eq__(self, other) -> bool:
        if not isinstance(other, Player):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)


@dataclass(frozen=True)
class Game:
    """
    A submitted 2v2 result.

    Slots 1 and 2 form team 1, slots 3 and 4 form team 2. Games are never
    mutated once created.
    """

    id: str                  # Content-independent token (uuid4 string)
    game_date: datetime      # When the game was played, used for ordering
    player1: int
    player2: int
    player3: int
    player4: int
    team1_score: int
    team2_score: int
    submission_date: Optional[datetime] = None
    submitted_by: Optional[int] = None

    def __post_init__(self):
        object.__setattr__(self, "game_date", as_utc(self.game_date))
        if self.submission_date is not None:
            object.__setattr__(self, "submission_date", as_utc(self.submission_date))

        ids = self.player_ids
        if any(p is None for p in ids):
            raise InvalidGameError(f"Game {self.id} is missing a player: {ids}")
        if len(set(ids)) != 4:
            raise InvalidGameError(f"Game {self.id} repeats a player: {ids}")
        for score in (self.team1_score, self.team2_score):
            if not MIN_TEAM_SCORE <= score <= MAX_TEAM_SCORE:
                raise InvalidGameError(
                    f"Game {self.id} score {score} outside "
                    f"[{MIN_TEAM_SCORE}, {MAX_TEAM_SCORE}]"
                )

    @classmethod
    def new(
        cls,
        player1: int,
        player2: int,
        player3: int,
        player4: int,
        team1_score: int,
        team2_score: int,
        game_date: datetime,
        submitted_by: Optional[int] = None,
    ) -> "Game":
        """Create a game with a fresh identifier, submitted now."""
        return cls(
            id=str(uuid.uuid4()),
            game_date=game_date,
            player1=player1,
            player2=player2,
            player3=player3,
            player4=player4,
            team1_score=team1_score,
            team2_score=team2_score,
            submission_date=datetime.now(timezone.utc),
            submitted_by=submitted_by,
        )

    @property
    def player_ids(self) -> Tuple[int, int, int, int]:
        return (self.player1, self.player2, self.player3, self.player4)

    @property
    def winning_team(self) -> int:
        # Ties go to team 2.
        return 1 if self.team1_score > self.team2_score else 2

    @property
    def losing_team(self) -> int:
        return 3 - self.winning_team

    def team_of_player(self, player_id: int) -> int:
        """Team number (1 or 2) of a player, or 0 if they did not play."""
        if player_id in (self.player1, self.player2):
            return 1
        if player_id in (self.player3, self.player4):
            return 2
        return 0

    def team_score(self, team: int) -> int:
        if team == 1:
            return self.team1_score
        if team == 2:
            return self.team2_score
        return 0

    def partner_and_rivals(self, player_id: int) -> Tuple[int, ...]:
        """
        The player's partner followed by the two rivals.

        Returns an empty tuple when the player is not part of the game.
        """
        if player_id == self.player1:
            return (self.player2, self.player3, self.player4)
        if player_id == self.player2:
            return (self.player1, self.player3, self.player4)
        if player_id == self.player3:
            return (self.player4, self.player1, self.player2)
        if player_id == self.player4:
            return (self.player3, self.player1, self.player2)
        return ()
