"""Tests for the in-memory record store and its file loaders."""

from datetime import datetime, timezone

import polars as pl
import pytest

from babyfoot_ratings import Game, InMemoryRecordStore, Player, RecordStore

WHEN = datetime(2024, 6, 1, 9, 0, tzinfo=timezone.utc)


def players_frame():
    return pl.DataFrame({
        "id": [1, 2, 3, 4],
        "username": ["alice", "bob", "carol", "dave"],
        "first_name": ["Alice", "Bob", "Carol", "Dave"],
        "last_name": ["Martin", "Durand", "Roux", "Petit"],
        "active": [True, True, None, False],
    })


def test_store_satisfies_protocol():
    assert isinstance(InMemoryRecordStore(), RecordStore)


def test_from_dataframes_parses_dates():
    games = pl.DataFrame({
        "id": ["g1", "g2"],
        "game_date": [int(WHEN.timestamp()), int(WHEN.timestamp()) + 60],
        "player1": [1, 1],
        "player2": [2, 3],
        "player3": [3, 2],
        "player4": [4, 4],
        "team1_score": [10, 4],
        "team2_score": [3, 10],
        "submitted_by": [2, None],
    })
    store = InMemoryRecordStore.from_dataframes(players_frame(), games)

    assert len(store) == 2
    first = store.get_game("g1")
    assert first.game_date == WHEN
    assert first.submitted_by == 2
    assert store.get_game("g2").submitted_by is None

    # A missing "active" flag means active.
    assert [p.id for p in store.list_active_players()] == [1, 2, 3]


def test_from_dataframes_accepts_iso_strings():
    games = pl.DataFrame({
        "id": ["g1"],
        "game_date": ["2024-06-01T09:00:00+00:00"],
        "player1": [1], "player2": [2], "player3": [3], "player4": [4],
        "team1_score": [10], "team2_score": [-2],
    })
    store = InMemoryRecordStore.from_dataframes(players_frame(), games)
    assert store.get_game("g1").game_date == WHEN
    assert store.get_game("g1").team2_score == -2


def test_from_dataframes_requires_columns():
    with pytest.raises(ValueError, match="player columns"):
        InMemoryRecordStore.from_dataframes(players_frame().drop("username"), pl.DataFrame())

    games = pl.DataFrame({"id": ["g1"], "game_date": [WHEN]})
    with pytest.raises(ValueError, match="game columns"):
        InMemoryRecordStore.from_dataframes(players_frame(), games)


def test_from_files_reads_csv(tmp_path):
    players_path = tmp_path / "players.csv"
    games_path = tmp_path / "games.csv"
    players_frame().write_csv(players_path)
    games_path.write_text(
        "id,game_date,player1,player2,player3,player4,team1_score,team2_score\n"
        "g1,2024-06-01T09:00:00+00:00,1,2,3,4,10,6\n"
        "g2,2024-06-01T10:00:00+00:00,1,3,2,4,7,10\n"
    )

    store = InMemoryRecordStore.from_files(players_path, games_path)
    assert [g.id for g in store.list_all_games()] == ["g1", "g2"]
    assert store.get_game("g1").game_date == WHEN
    assert store.get_player_by_username("carol").id == 3


def test_add_player_deduplicates():
    store = InMemoryRecordStore([Player(5, "eve", "Eve", "Blanc")])

    frank = store.add_player("frank", "Frank", "Noir")
    assert frank.id == 6
    assert store.add_player("frank", "Someone", "Else") is frank
    assert store.add_player("frankie", "Frank", "Noir") is frank
    assert len(store.list_all_players()) == 2


def test_insert_and_delete_games():
    store = InMemoryRecordStore([Player(i, f"u{i}", f"F{i}", f"L{i}") for i in range(1, 5)])
    game = Game("g1", WHEN, 1, 2, 3, 4, 10, 0)

    store.insert_game(game)
    with pytest.raises(ValueError):
        store.insert_game(game)

    assert store.delete_game("g1")
    assert not store.delete_game("g1")
    assert store.list_all_games() == []


def test_set_active():
    store = InMemoryRecordStore([Player(1, "alice", "Alice", "Martin")])
    store.set_active(1, False)
    assert store.list_active_players() == []
    assert "players=1" in repr(store)


def test_update_player_names_resets_short_name():
    store = InMemoryRecordStore([Player(1, "alice", "Alice", "Martin", short_name="Ali")])

    player = store.update_player_names(1, "Alicia", "")
    assert player.first_name == "Alicia"
    assert player.last_name == "Martin"
    assert player.short_name == "Alicia"
    assert player.full_name == "Alicia Martin"


def test_update_player_username_refuses_taken_names():
    store = InMemoryRecordStore([
        Player(1, "alice", "Alice", "Martin"),
        Player(2, "bob", "Bob", "Durand"),
    ])

    assert not store.update_player_username(1, "bob")
    assert store.get_player_by_id(1).username == "alice"

    assert store.update_player_username(1, "ally")
    assert store.get_player_by_username("ally").id == 1
    assert store.get_player_by_username("alice") is None
    assert store.update_player_username(1, "ally")

    with pytest.raises(ValueError):
        store.update_player_username(1, "")
