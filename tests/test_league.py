"""Tests for the League facade: writes keep the store and ratings in sync."""

import threading
from datetime import datetime, timedelta, timezone

import numpy as np

from babyfoot_ratings import InMemoryRecordStore, League, TeamEloConfig, canonical_order

START = datetime(2024, 9, 2, 12, 0, tzinfo=timezone.utc)


def make_league(num_players: int = 6, config=None) -> League:
    store = InMemoryRecordStore()
    for i in range(1, num_players + 1):
        store.add_player(f"user{i}", f"First{i}", f"Last{i}")
    return League(store, config)


def test_canonical_order():
    assert canonical_order(4, 3, 2, 1, 10, 5) == (1, 2, 3, 4, 5, 10)
    assert canonical_order(1, 2, 3, 4, 10, 5) == (1, 2, 3, 4, 10, 5)
    assert canonical_order(2, 1, 4, 3, 6, 10) == (1, 2, 3, 4, 6, 10)


def test_add_game_persists_and_rates():
    league = make_league()
    store = league.store

    game = league.add_game(4, 3, 2, 1, 10, 5, START, submitted_by=1)

    assert store.get_game(game.id) is game
    assert game.player_ids == (1, 2, 3, 4)
    assert (game.team1_score, game.team2_score) == (5, 10)
    assert game.submitted_by == 1
    assert league.rating(3).score > 1500.0
    assert league.rating(1).score < 1500.0
    assert league.rating(5).score == 1500.0


def test_add_game_accepts_player_objects():
    league = make_league()
    p = [league.store.get_player_by_id(i) for i in range(1, 5)]

    game = league.add_game(p[0], p[1], p[2], p[3], 10, 2, START)
    assert game.player_ids == (1, 2, 3, 4)
    assert league.rating(p[0]).games_played == 1


def test_backdated_game_keeps_history_chronological():
    league = make_league()

    league.add_game(1, 2, 3, 4, 10, 2, START + timedelta(days=2))
    league.add_game(1, 3, 2, 4, 10, 7, START + timedelta(days=3))
    backdated = league.add_game(1, 4, 2, 3, 3, 10, START)

    history = league.engine.get_history()
    dates = [gr.game.game_date for gr in history]
    assert dates == sorted(dates)
    assert history[0].game.id == backdated.id
    assert league.match_history()[-1].game.id == backdated.id


def test_delete_game_rebuilds():
    league = make_league()
    league.add_game(1, 2, 3, 4, 10, 2, START)
    middle = league.add_game(1, 3, 2, 4, 10, 7, START + timedelta(hours=1))
    league.add_game(1, 4, 2, 3, 6, 10, START + timedelta(hours=2))

    assert league.delete_game(middle.id)
    assert league.store.get_game(middle.id) is None
    assert len(league.engine.get_history()) == 2

    fresh = League(league.store)
    for pid in range(1, 7):
        assert league.rating(pid).score == fresh.rating(pid).score


def test_delete_unknown_game():
    league = make_league()
    league.add_game(1, 2, 3, 4, 10, 2, START)

    assert not league.delete_game("does-not-exist")
    assert len(league.engine.get_history()) == 1


def test_delete_last_game_resets_active_players():
    league = make_league()
    game = league.add_game(1, 2, 3, 4, 10, 2, START)

    assert league.delete_game(game.id)
    assert league.engine.get_history() == []
    for pid in range(1, 7):
        assert league.rating(pid).score == 1500.0
        assert league.rating(pid).games_played == 0


def test_queries_for_unknown_players_return_none():
    league = make_league()
    assert league.player_metrics(99) is None
    assert league.rating_evolution(99) is None
    assert league.game_lookup(1) is None
    assert league.prediction_quality() is None


def test_league_queries():
    league = make_league()
    game = league.add_game(1, 2, 3, 4, 10, 2, START)
    league.add_game(1, 3, 5, 6, 10, 9, START + timedelta(hours=1))

    assert league.player_metrics(1).games_played == 2
    assert len(league.rating_evolution(1)) == 2
    assert league.game_lookup(game.id[:8]).number == 1
    assert league.game_lookup(2).previous_game_id == game.id
    assert set(league.active_player_scores()) == {f"user{i}" for i in range(1, 7)}
    assert league.standings().num_players == 6
    assert league.prediction_quality().total_games == 2

    scores = [s.score for s in league.ratings_sorted_by_score()]
    assert scores == sorted(scores, reverse=True)


def test_config_is_passed_to_engine():
    league = make_league(config=TeamEloConfig(initial_rating=1000.0))
    assert league.rating(1).score == 1000.0
    assert league.engine.config.initial_rating == 1000.0


def test_concurrent_writers_match_sequential_replay():
    league = make_league(num_players=8)
    rng = np.random.RandomState(3)
    offsets = rng.permutation(80)
    lineups = [rng.choice(8, 4, replace=False) + 1 for _ in range(80)]

    def submit(worker: int):
        for i in range(worker, 80, 4):
            p1, p2, p3, p4 = (int(p) for p in lineups[i])
            league.add_game(p1, p2, p3, p4, 10, int(i % 10), START + timedelta(minutes=int(offsets[i])))

    threads = [threading.Thread(target=submit, args=(w,)) for w in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    history = league.engine.get_history()
    assert len(history) == 80
    dates = [gr.game.game_date for gr in history]
    assert dates == sorted(dates)

    replay = League(league.store)
    for pid in range(1, 9):
        assert league.rating(pid).score == replay.rating(pid).score
