"""Record store interface and an in-memory implementation.

The rating engine never persists anything itself; it reads players and games
through a ``RecordStore`` and is kept in sync by the caller after each write.
Uses Polars to load records from CSV or parquet files.
"""

from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional, Protocol, Sequence, Union, runtime_checkable

import polars as pl

from .types import Game, Player, as_utc

PLAYER_COLUMNS = {"id", "username", "first_name", "last_name"}
GAME_COLUMNS = {
    "id", "game_date",
    "player1", "player2", "player3", "player4",
    "team1_score", "team2_score",
}


@runtime_checkable
class RecordStore(Protocol):
    """Player and game records the engine reads from."""

    def list_all_games(self) -> Sequence[Game]:
        """All games, in the store's native order."""
        ...

    def list_active_players(self) -> Sequence[Player]:
        ...

    def get_player_by_id(self, player_id: int) -> Optional[Player]:
        ...

    def insert_game(self, game: Game) -> None:
        ...

    def delete_game(self, game_id: str) -> bool:
        """Remove a game; returns False if no game had that id."""
        ...


def _to_datetime(value) -> Optional[datetime]:
    """Accept epoch seconds, ISO strings or datetimes."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return as_utc(value)
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value, tz=timezone.utc)
    return as_utc(datetime.fromisoformat(str(value)))


def _read_frame(path: Union[str, Path]) -> pl.DataFrame:
    path = Path(path)
    if path.suffix == ".parquet":
        return pl.read_parquet(path)
    return pl.read_csv(path, try_parse_dates=True)


class InMemoryRecordStore:
    """
    Dict-backed record store.

    Players and games keep insertion order, which is the "native order" used
    to break ties between games played at the same time.
    """

    def __init__(
        self,
        players: Optional[Sequence[Player]] = None,
        games: Optional[Sequence[Game]] = None,
    ):
        self._players: Dict[int, Player] = {}
        self._games: Dict[str, Game] = {}

        for player in players or ():
            self._players[player.id] = player
        for game in games or ():
            self.insert_game(game)

    # =========================================================================
    # Loading
    # =========================================================================

    @classmethod
    def from_dataframes(cls, players: pl.DataFrame, games: pl.DataFrame) -> "InMemoryRecordStore":
        """
        Build a store from player and game frames.

        Player columns: id, username, first_name, last_name and optionally
        active, short_name. Game columns: id, game_date, player1..player4,
        team1_score, team2_score and optionally submission_date, submitted_by.
        """
        missing = PLAYER_COLUMNS - set(players.columns)
        if missing:
            raise ValueError(f"Missing required player columns: {missing}")
        missing = GAME_COLUMNS - set(games.columns)
        if missing:
            raise ValueError(f"Missing required game columns: {missing}")

        store = cls()
        for row in players.iter_rows(named=True):
            active = row.get("active")
            store._players[int(row["id"])] = Player(
                id=int(row["id"]),
                username=row["username"],
                first_name=row["first_name"],
                last_name=row["last_name"],
                active=True if active is None else bool(active),
                short_name=row.get("short_name"),
            )

        for row in games.iter_rows(named=True):
            submitted_by = row.get("submitted_by")
            store.insert_game(Game(
                id=str(row["id"]),
                game_date=_to_datetime(row["game_date"]),
                player1=int(row["player1"]),
                player2=int(row["player2"]),
                player3=int(row["player3"]),
                player4=int(row["player4"]),
                team1_score=int(row["team1_score"]),
                team2_score=int(row["team2_score"]),
                submission_date=_to_datetime(row.get("submission_date")),
                submitted_by=int(submitted_by) if submitted_by is not None else None,
            ))
        return store

    @classmethod
    def from_files(
        cls,
        players_path: Union[str, Path],
        games_path: Union[str, Path],
    ) -> "InMemoryRecordStore":
        """Load a store from CSV or parquet files."""
        return cls.from_dataframes(_read_frame(players_path), _read_frame(games_path))

    # =========================================================================
    # Players
    # =========================================================================

    def add_player(self, username: str, first_name: str, last_name: str) -> Player:
        """
        Register a player, or return the existing one with the same username
        or the same first and last names.
        """
        for player in self._players.values():
            if player.username == username or (
                player.first_name == first_name and player.last_name == last_name
            ):
                return player

        player_id = max(self._players, default=0) + 1
        player = Player(player_id, username, first_name, last_name)
        self._players[player_id] = player
        return player

    def get_player_by_id(self, player_id: int) -> Optional[Player]:
        return self._players.get(player_id)

    def get_player_by_username(self, username: str) -> Optional[Player]:
        for player in self._players.values():
            if player.username == username:
                return player
        return None

    def list_all_players(self) -> List[Player]:
        return list(self._players.values())

    def list_active_players(self) -> List[Player]:
        return [p for p in self._players.values() if p.active]

    def set_active(self, player_id: int, active: bool) -> None:
        self._players[player_id].active = active

    def update_player_names(
        self,
        player_id: int,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
    ) -> Player:
        """
        Rename a player. Empty or missing names are kept as they were, and
        the short name is reset to the (new) first name.
        """
        player = self._players[player_id]
        player.first_name = first_name or player.first_name
        player.last_name = last_name or player.last_name
        player.short_name = player.first_name
        return player

    def update_player_username(self, player_id: int, username: str) -> bool:
        """Change a player's username; False if another player already uses it."""
        if not username:
            raise ValueError("Username must not be empty")

        player = self._players[player_id]
        if player.username == username:
            return True

        other = self.get_player_by_username(username)
        if other is not None:
            return False

        player.username = username
        return True

    # =========================================================================
    # Games
    # =========================================================================

    def list_all_games(self) -> List[Game]:
        return list(self._games.values())

    def get_game(self, game_id: str) -> Optional[Game]:
        return self._games.get(game_id)

    def insert_game(self, game: Game) -> None:
        if game.id in self._games:
            raise ValueError(f"Game {game.id} already exists")
        self._games[game.id] = game

    def delete_game(self, game_id: str) -> bool:
        return self._games.pop(game_id, None) is not None

    def __len__(self) -> int:
        return len(self._games)

    def __repr__(self) -> str:
        return f"InMemoryRecordStore(players={len(self._players):,}, games={len(self._games):,})"
