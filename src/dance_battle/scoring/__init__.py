"""Scoring sub-package for the dance-battle project.

Exports the pure aggregation and ranking functions so other modules can
do::

    from dance_battle.scoring import build_leaderboard, total_score
"""

from dance_battle.scoring.leaderboard import (
    LeaderboardRow,
    build_leaderboard,
    rank_rows,
)
from dance_battle.scoring.totals import total_score, totals_by_competitor

__all__ = [
    "LeaderboardRow",
    "build_leaderboard",
    "rank_rows",
    "total_score",
    "totals_by_competitor",
]
