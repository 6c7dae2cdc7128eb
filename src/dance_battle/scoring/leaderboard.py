"""Leaderboard ranking for the dance-battle project.

Competitors are ordered by descending total score.  ``sorted`` is stable,
so competitors with equal totals keep their roster (insertion) order.
Nothing is cached: every call recomputes from the collections it is given.
"""

from __future__ import annotations

import logging
from typing import Iterable, NamedTuple, Sequence

from dance_battle.models import Competitor, ScoreRecord
from dance_battle.scoring.totals import total_score, totals_by_competitor

logger = logging.getLogger(__name__)


class LeaderboardRow(NamedTuple):
    rank: int
    competitor: Competitor
    creativity: float
    technique: float
    presentation: float
    total: float


def build_leaderboard(
    competitors: Sequence[Competitor],
    scores: Iterable[ScoreRecord],
) -> list[Competitor]:
    """Return *competitors* ranked by descending total score.

    Args:
        competitors: The roster in insertion order.
        scores: All score records.

    Returns:
        A new list; ties keep their relative order from *competitors*.
    """
    totals = totals_by_competitor(scores)
    return sorted(competitors, key=lambda c: -totals.get(c.id, 0))


def rank_rows(
    competitors: Sequence[Competitor],
    scores: Iterable[ScoreRecord],
) -> list[LeaderboardRow]:
    """Return one display row per competitor in leaderboard order.

    Ranks are positions starting at 1; tied competitors get consecutive
    ranks in roster order.  Unscored competitors show zeroes.
    """
    scores = list(scores)
    by_competitor = {record.competitor_id: record for record in scores}

    rows = []
    for position, competitor in enumerate(
        build_leaderboard(competitors, scores), start=1
    ):
        record = by_competitor.get(competitor.id)
        rows.append(
            LeaderboardRow(
                rank=position,
                competitor=competitor,
                creativity=record.creativity if record else 0,
                technique=record.technique if record else 0,
                presentation=record.presentation if record else 0,
                total=total_score(record),
            )
        )

    logger.debug("Ranked %d competitors", len(rows))
    return rows
