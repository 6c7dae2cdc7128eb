"""Load and save the scoreboard state through a key-value store.

The state lives under two independent keys, each holding a JSON array:

- ``danceBattleCompetitors`` -- ``[{"id": ..., "name": ...}, ...]`` in
  roster order.
- ``danceBattleScores`` -- ``[{"competitorId": ..., "creativity": ...,
  "technique": ..., "presentation": ...}, ...]``.

Absent keys load as empty lists.  Present but malformed values raise
:class:`~dance_battle.errors.CorruptStateError` and are left untouched in
the store.
"""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass, field

from dance_battle.errors import CorruptStateError
from dance_battle.models import CATEGORIES, Competitor, ScoreRecord
from dance_battle.storage import KeyValueStore

logger = logging.getLogger(__name__)

COMPETITORS_KEY = "danceBattleCompetitors"
SCORES_KEY = "danceBattleScores"


@dataclass
class ScoreboardState:
    competitors: list[Competitor] = field(default_factory=list)
    scores: list[ScoreRecord] = field(default_factory=list)


class StateStore:
    """Reads and writes :class:`ScoreboardState` through *store*."""

    def __init__(self, store: KeyValueStore) -> None:
        self.store = store

    def load(self) -> ScoreboardState:
        """Read both keys and return the decoded state.

        Score records pointing at a competitor that is not in the roster
        are dropped with a warning.

        Raises:
            CorruptStateError: if either stored value cannot be decoded.
        """
        competitors = [
            _decode_competitor(item)
            for item in _read_array(self.store, COMPETITORS_KEY)
        ]
        scores = [
            _decode_score(item)
            for item in _read_array(self.store, SCORES_KEY)
        ]

        known_ids = {c.id for c in competitors}
        orphans = [s for s in scores if s.competitor_id not in known_ids]
        if orphans:
            logger.warning(
                "Dropping %d score record(s) for unknown competitors: %s",
                len(orphans), ", ".join(s.competitor_id for s in orphans),
            )
            scores = [s for s in scores if s.competitor_id in known_ids]

        logger.debug(
            "Loaded state: %d competitors, %d score records",
            len(competitors), len(scores),
        )
        return ScoreboardState(competitors=competitors, scores=scores)

    def save(self, state: ScoreboardState) -> None:
        """Rewrite both keys with the full *state*."""
        self.store.set(
            COMPETITORS_KEY,
            json.dumps([c.to_dict() for c in state.competitors]),
        )
        self.store.set(
            SCORES_KEY,
            json.dumps([s.to_dict() for s in state.scores]),
        )
        logger.debug(
            "Saved state: %d competitors, %d score records",
            len(state.competitors), len(state.scores),
        )

    def clear(self) -> None:
        """Remove both keys from the store."""
        self.store.delete(COMPETITORS_KEY)
        self.store.delete(SCORES_KEY)
        logger.info("Cleared stored scoreboard state")


# ---------------------------------------------------------------------------
# Private helpers
# ---------------------------------------------------------------------------

def _read_array(store: KeyValueStore, key: str) -> list:
    raw = store.get(key)
    if raw is None:
        return []
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise CorruptStateError(key, f"invalid JSON ({exc.msg})") from exc
    if not isinstance(data, list):
        raise CorruptStateError(key, "expected a JSON array")
    return data


def _decode_competitor(item) -> Competitor:
    if not isinstance(item, dict):
        raise CorruptStateError(COMPETITORS_KEY, "entry is not an object")
    if not isinstance(item.get("id"), str) or not isinstance(item.get("name"), str):
        raise CorruptStateError(
            COMPETITORS_KEY, f"entry {item!r} lacks a string id and name"
        )
    return Competitor.from_dict(item)


def _decode_score(item) -> ScoreRecord:
    if not isinstance(item, dict):
        raise CorruptStateError(SCORES_KEY, "entry is not an object")
    if not isinstance(item.get("competitorId"), str):
        raise CorruptStateError(
            SCORES_KEY, f"entry {item!r} lacks a string competitorId"
        )
    for category in CATEGORIES:
        value = item.get(category, 0)
        if (
            isinstance(value, bool)
            or not isinstance(value, (int, float))
            or (isinstance(value, float) and not math.isfinite(value))
        ):
            raise CorruptStateError(
                SCORES_KEY, f"{category} value {value!r} is not a number"
            )
    return ScoreRecord.from_dict(item)
