"""2v2 team Elo rating engine."""

from .engine import TeamElo, TeamEloConfig

__all__ = ["TeamElo", "TeamEloConfig"]
