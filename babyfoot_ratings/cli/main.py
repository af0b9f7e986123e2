"""
Command-line interface for league ratings.

Usage:
    babyfoot-ratings standings <players> <games> [--top N]
    babyfoot-ratings history <players> <games> [--limit N]
    babyfoot-ratings player <players> <games> <username>
    babyfoot-ratings evolution <players> <games> <username>
    babyfoot-ratings game <players> <games> <number-or-id-prefix>
    babyfoot-ratings quality <players> <games>

Players and games are read from CSV or parquet files.
"""

import argparse
import json
import sys

from ..utils import setup_logger


def load_league(args):
    from ..data import InMemoryRecordStore
    from ..league import League

    store = InMemoryRecordStore.from_files(args.players, args.games)
    return League(store)


def _find_player(league, username):
    player = league.store.get_player_by_username(username)
    if player is None:
        print(f"Unknown player: {username}")
    return player


def cmd_standings(args):
    """Show the active players by rating."""
    league = load_league(args)
    standings = league.standings()
    print(f"{standings}\n")
    print(standings.top(args.top))
    return 0


def cmd_history(args):
    """Show the most recent games."""
    from ..results import match_history_frame

    league = load_league(args)
    history = league.match_history()[:args.limit]
    print(match_history_frame(history, league.store))
    return 0


def cmd_player(args):
    """Show a player's metrics."""
    league = load_league(args)
    player = _find_player(league, args.username)
    if player is None:
        return 1

    metrics = league.player_metrics(player)
    print(json.dumps(metrics.to_dict(), indent=2))
    return 0


def cmd_evolution(args):
    """Show a player's rating after each of their games."""
    league = load_league(args)
    player = _find_player(league, args.username)
    if player is None:
        return 1

    evolution = league.rating_evolution(player)
    print(evolution.to_dataframe())
    return 0


def cmd_game(args):
    """Show one game by sequence number or id prefix."""
    league = load_league(args)
    ref = int(args.ref) if args.ref.isdigit() else args.ref
    info = league.game_lookup(ref)
    if info is None:
        print(f"No game matches {args.ref}")
        return 1

    print(json.dumps(info.to_dict(), indent=2, default=str))
    return 0


def cmd_quality(args):
    """Score the pre-game expectations against the results."""
    league = load_league(args)
    quality = league.prediction_quality()
    if quality is None:
        print("No games recorded")
        return 1

    print(quality.summary())
    return 0


def main(argv=None):
    """Main entry point for CLI."""
    parser = argparse.ArgumentParser(
        description="2v2 league ratings",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="Logging level (default: WARNING)")
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    def add_common_args(p):
        p.add_argument("players", help="Path to players CSV or parquet file")
        p.add_argument("games", help="Path to games CSV or parquet file")

    standings_parser = subparsers.add_parser("standings", help="Show player standings")
    add_common_args(standings_parser)
    standings_parser.add_argument("--top", "-t", type=int, default=10,
                                  help="Show top N players (default: 10)")

    history_parser = subparsers.add_parser("history", help="Show recent games")
    add_common_args(history_parser)
    history_parser.add_argument("--limit", "-n", type=int, default=20,
                                help="Number of games (default: 20)")

    player_parser = subparsers.add_parser("player", help="Show player metrics")
    add_common_args(player_parser)
    player_parser.add_argument("username", help="Player username")

    evolution_parser = subparsers.add_parser("evolution", help="Show rating evolution")
    add_common_args(evolution_parser)
    evolution_parser.add_argument("username", help="Player username")

    game_parser = subparsers.add_parser("game", help="Show one game")
    add_common_args(game_parser)
    game_parser.add_argument(
        "ref",
        help="Game sequence number or id prefix; an all-digit value is always "
             "read as a sequence number",
    )

    quality_parser = subparsers.add_parser("quality", help="Score rating predictions")
    add_common_args(quality_parser)

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    setup_logger("babyfoot_ratings", args.log_level)

    commands = {
        "standings": cmd_standings,
        "history": cmd_history,
        "player": cmd_player,
        "evolution": cmd_evolution,
        "game": cmd_game,
        "quality": cmd_quality,
    }

    return commands[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
