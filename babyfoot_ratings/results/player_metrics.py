"""Per-player win/loss metrics, partner and rival breakdowns."""

from dataclasses import dataclass, field
from typing import Callable, Dict, Optional

from ..data import Player, RecordStore


@dataclass
class WinsAndLosses:
    """Running win/loss tally."""

    wins: int = 0
    losses: int = 0

    def record(self, won: bool) -> None:
        if won:
            self.wins += 1
        else:
            self.losses += 1

    @property
    def totals(self) -> int:
        return self.wins + self.losses

    @property
    def win_rate(self) -> float:
        return self.wins / self.totals if self.totals else 0.0

    @property
    def loss_rate(self) -> float:
        return self.losses / self.totals if self.totals else 0.0


@dataclass(frozen=True)
class PairRecord:
    """Games played with (or against) one other player."""

    player_id: int
    short_name: str
    wins: int
    losses: int

    def to_dict(self) -> Dict:
        return {"shortName": self.short_name, "wins": self.wins, "losses": self.losses}


@dataclass(frozen=True)
class PlayerMetrics:
    """
    Aggregated results of one player.

    The partner and rival records are None when the player has no games.
    """

    player_id: int
    username: str
    short_name: str
    games_played: int = 0
    games_won: int = 0
    total_points_scored: int = 0
    main_partner: Optional[PairRecord] = None
    best_partner: Optional[PairRecord] = None
    worst_partner: Optional[PairRecord] = None
    main_rival: Optional[PairRecord] = None
    easiest_rival: Optional[PairRecord] = None
    strongest_rival: Optional[PairRecord] = None
    partners: Dict[int, WinsAndLosses] = field(default_factory=dict, repr=False)
    rivals: Dict[int, WinsAndLosses] = field(default_factory=dict, repr=False)

    @property
    def games_lost(self) -> int:
        return self.games_played - self.games_won

    def to_dict(self) -> Dict:
        result = {
            "player": {"username": self.username, "shortName": self.short_name},
            "games": {
                "played": self.games_played,
                "won": self.games_won,
                "lost": self.games_lost,
            },
            "totalPointsScored": self.total_points_scored,
        }
        if self.games_played:
            result["partners"] = {
                "main": self.main_partner.to_dict(),
                "best": self.best_partner.to_dict(),
                "worst": self.worst_partner.to_dict(),
            }
            result["rivals"] = {
                "main": self.main_rival.to_dict(),
                "easiest": self.easiest_rival.to_dict(),
                "strongest": self.strongest_rival.to_dict(),
            }
        return result


def _max_record(
    tallies: Dict[int, WinsAndLosses],
    key: Callable[[WinsAndLosses], float],
    store: RecordStore,
) -> PairRecord:
    """Record with the highest key; the first one seen wins ties."""
    best_id, best_tally, best_value = None, None, -1.0
    for other_id, tally in tallies.items():
        value = key(tally)
        if value > best_value:
            best_id, best_tally, best_value = other_id, tally, value

    other = store.get_player_by_id(best_id)
    return PairRecord(
        player_id=best_id,
        short_name=other.short_name if other is not None else "",
        wins=best_tally.wins,
        losses=best_tally.losses,
    )


def player_metrics(store: RecordStore, player: Player) -> PlayerMetrics:
    """
    Aggregate every game of ``player`` in record store order.

    Returns zeroed metrics when the player has no games.
    """
    games_played = 0
    games_won = 0
    total_points = 0
    partners: Dict[int, WinsAndLosses] = {}
    rivals: Dict[int, WinsAndLosses] = {}

    for game in store.list_all_games():
        team = game.team_of_player(player.id)
        if not team:
            continue

        games_played += 1
        total_points += game.team_score(team)
        won = game.winning_team == team
        if won:
            games_won += 1

        partner, rival1, rival2 = game.partner_and_rivals(player.id)
        partners.setdefault(partner, WinsAndLosses()).record(won)
        rivals.setdefault(rival1, WinsAndLosses()).record(won)
        rivals.setdefault(rival2, WinsAndLosses()).record(won)

    if not games_played:
        return PlayerMetrics(
            player_id=player.id,
            username=player.username,
            short_name=player.short_name,
        )

    return PlayerMetrics(
        player_id=player.id,
        username=player.username,
        short_name=player.short_name,
        games_played=games_played,
        games_won=games_won,
        total_points_scored=total_points,
        main_partner=_max_record(partners, lambda t: t.totals, store),
        best_partner=_max_record(partners, lambda t: t.win_rate, store),
        worst_partner=_max_record(partners, lambda t: t.loss_rate, store),
        main_rival=_max_record(rivals, lambda t: t.totals, store),
        easiest_rival=_max_record(rivals, lambda t: t.win_rate, store),
        strongest_rival=_max_record(rivals, lambda t: t.loss_rate, store),
        partners=partners,
        rivals=rivals,
    )
