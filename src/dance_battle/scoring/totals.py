"""Total-score aggregation for the dance-battle project.

A competitor's total is the sum of their creativity, technique and
presentation scores.  Competitors without a score record total 0.
"""

from __future__ import annotations

from typing import Iterable

from dance_battle.models import ScoreRecord


def total_score(record: ScoreRecord | None) -> float:
    """Return the category sum of *record*, or 0 when there is none."""
    if record is None:
        return 0
    return record.creativity + record.technique + record.presentation


def totals_by_competitor(scores: Iterable[ScoreRecord]) -> dict[str, float]:
    """Map each scored competitor id to its total.

    Args:
        scores: Score records; at most one per competitor is expected,
                but repeated ids are summed rather than lost.

    Returns:
        A dict of ``competitor_id -> total``.
    """
    totals: dict[str, float] = {}
    for record in scores:
        totals[record.competitor_id] = (
            totals.get(record.competitor_id, 0) + total_score(record)
        )
    return totals
