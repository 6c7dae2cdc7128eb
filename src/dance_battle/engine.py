"""Scoreboard engine: the roster, the score records and their mutations.

The engine owns the in-memory competitor list and score list.  State is
read from the injected store once, when the engine is constructed, and
written back in full after every successful mutation.

Repeated submissions for the same competitor overwrite the existing
score record; a competitor never has more than one.
"""

from __future__ import annotations

import logging
import math
from typing import Mapping

from dance_battle.errors import ValidationError
from dance_battle.models import (
    CATEGORIES,
    Competitor,
    ScoreEntry,
    ScoreRecord,
    new_competitor_id,
)
from dance_battle.scoring.leaderboard import (
    LeaderboardRow,
    build_leaderboard,
    rank_rows,
)
from dance_battle.scoring.totals import total_score
from dance_battle.state import ScoreboardState, StateStore
from dance_battle.storage import KeyValueStore

logger = logging.getLogger(__name__)

EMPTY_NAME_MESSAGE = "Competitor name cannot be empty."
DUPLICATE_NAME_MESSAGE = "Competitor name already exists."
NO_SELECTION_MESSAGE = "Please select a competitor."
UNKNOWN_COMPETITOR_MESSAGE = "Competitor not found."


class Scoreboard:
    """Dance-battle scoreboard bound to a persistent store.

    Args:
        store: A :class:`StateStore`, or any :class:`KeyValueStore`
               (wrapped in a ``StateStore``).
        max_score: Upper bound for each category value.  ``None`` accepts
                   any finite number.

    Raises:
        CorruptStateError: if the store holds malformed state.
    """

    def __init__(
        self,
        store: StateStore | KeyValueStore,
        max_score: float | None = None,
    ) -> None:
        if not isinstance(store, StateStore):
            store = StateStore(store)
        self.store = store
        self.max_score = max_score

        state = self.store.load()
        self._competitors: list[Competitor] = state.competitors
        self._scores: list[ScoreRecord] = state.scores

        self.entry = ScoreEntry()
        self.error: str | None = None

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def competitors(self) -> tuple[Competitor, ...]:
        """The roster in insertion order."""
        return tuple(self._competitors)

    @property
    def scores(self) -> tuple[ScoreRecord, ...]:
        return tuple(self._scores)

    def get_competitor(self, competitor_id: str) -> Competitor | None:
        for competitor in self._competitors:
            if competitor.id == competitor_id:
                return competitor
        return None

    def find_competitor(self, name: str) -> Competitor | None:
        """Return the competitor whose name matches *name* exactly."""
        name = name.strip()
        for competitor in self._competitors:
            if competitor.name == name:
                return competitor
        return None

    def get_score(self, competitor_id: str) -> ScoreRecord | None:
        for record in self._scores:
            if record.competitor_id == competitor_id:
                return record
        return None

    def total_score(self, competitor_id: str) -> float:
        """Return the competitor's category sum, 0 if unscored or unknown."""
        return total_score(self.get_score(competitor_id))

    def leaderboard(self) -> list[Competitor]:
        """Return a fresh snapshot of competitors ranked by total score."""
        return build_leaderboard(self._competitors, self._scores)

    def ranked(self) -> list[LeaderboardRow]:
        """Return leaderboard rows with rank, category values and total."""
        return rank_rows(self._competitors, self._scores)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add_competitor(self, name: str) -> Competitor:
        """Append a new competitor called *name* to the roster.

        Raises:
            ValidationError: if *name* is blank or already taken.
        """
        name = (name or "").strip()
        if not name:
            self._fail(EMPTY_NAME_MESSAGE)
        if self.find_competitor(name) is not None:
            self._fail(DUPLICATE_NAME_MESSAGE)

        competitor = Competitor(id=new_competitor_id(), name=name)
        self._competitors.append(competitor)
        self.error = None
        self._save()

        logger.info("Added competitor %r (id=%s)", name, competitor.id)
        return competitor

    def remove_competitor(self, competitor_id: str) -> bool:
        """Remove a competitor and its score record.

        Returns:
            ``True`` if a competitor was removed, ``False`` if the id was
            not on the roster.
        """
        before = len(self._competitors)
        self._competitors = [
            c for c in self._competitors if c.id != competitor_id
        ]
        self._scores = [
            s for s in self._scores if s.competitor_id != competitor_id
        ]
        if self.entry.competitor_id == competitor_id:
            self.entry.competitor_id = ""
        self._save()

        removed = len(self._competitors) < before
        if removed:
            logger.info("Removed competitor id=%s", competitor_id)
        else:
            logger.debug("remove_competitor: id=%s not on roster", competitor_id)
        return removed

    def submit_score(
        self,
        competitor_id: str,
        scores: Mapping[str, float] | None = None,
    ) -> ScoreRecord:
        """Record *scores* for a competitor, replacing any earlier record.

        Args:
            competitor_id: Id of a competitor on the roster.
            scores: Category name to value; missing categories count as 0.

        Raises:
            ValidationError: if no competitor is selected, the competitor
                is unknown, or a category name or value is invalid.
        """
        if not competitor_id:
            self._fail(NO_SELECTION_MESSAGE)
        if self.get_competitor(competitor_id) is None:
            self._fail(UNKNOWN_COMPETITOR_MESSAGE)

        values = self._validate_scores(scores or {})
        record = ScoreRecord(competitor_id=competitor_id, **values)

        for index, existing in enumerate(self._scores):
            if existing.competitor_id == competitor_id:
                self._scores[index] = record
                break
        else:
            self._scores.append(record)

        self.entry.reset()
        self.error = None
        self._save()

        logger.info(
            "Saved score for id=%s: total=%s [cre=%s, tec=%s, pre=%s]",
            competitor_id, total_score(record),
            record.creativity, record.technique, record.presentation,
        )
        return record

    def reset(self) -> None:
        """Drop every competitor and score record."""
        self._competitors = []
        self._scores = []
        self.entry.reset()
        self.error = None
        self._save()
        logger.info("Scoreboard reset")

    # ------------------------------------------------------------------
    # Pending score entry
    # ------------------------------------------------------------------

    def select_competitor(self, competitor_id: str) -> None:
        self.entry.competitor_id = competitor_id

    def set_entry_score(self, category: str, value: float) -> None:
        """Set one category of the pending entry."""
        if category not in CATEGORIES:
            self._fail(f"Unknown score category: {category}.")
        self.entry.scores[category] = value

    def submit_entry(self) -> ScoreRecord:
        """Submit the pending entry via :meth:`submit_score`."""
        return self.submit_score(self.entry.competitor_id, dict(self.entry.scores))

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _fail(self, message: str) -> None:
        self.error = message
        logger.debug("Validation failed: %s", message)
        raise ValidationError(message)

    def _validate_scores(self, scores: Mapping[str, float]) -> dict:
        unknown = sorted(set(scores) - set(CATEGORIES))
        if unknown:
            self._fail(f"Unknown score category: {', '.join(unknown)}.")

        values = {}
        for category in CATEGORIES:
            value = scores.get(category, 0)
            if (
                isinstance(value, bool)
                or not isinstance(value, (int, float))
                or (isinstance(value, float) and not math.isfinite(value))
            ):
                self._fail(f"{category.capitalize()} score must be a number.")
            if self.max_score is not None and not 0 <= value <= self.max_score:
                self._fail(
                    f"{category.capitalize()} score must be between 0 "
                    f"and {self.max_score}."
                )
            values[category] = value
        return values

    def _save(self) -> None:
        self.store.save(
            ScoreboardState(
                competitors=list(self._competitors),
                scores=list(self._scores),
            )
        )
