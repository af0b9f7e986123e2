"""Rating engine implementations.

- TeamElo: incremental 2v2 Elo with margin-of-victory scaling, experience
  decaying K-factor and a full rebuild when games arrive out of order.

The update kernel is compiled with Numba.
"""

from .team_elo import TeamElo, TeamEloConfig

__all__ = ["TeamElo", "TeamEloConfig"]
