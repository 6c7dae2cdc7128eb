"""Data model for the dance-battle scoreboard.

Competitors and score records are plain dataclasses.  They serialize to
the camelCase JSON objects stored under ``danceBattleCompetitors`` and
``danceBattleScores`` so a store written by one session can be read back
by any other.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field

# Scoring categories in display order.
CATEGORIES = ("creativity", "technique", "presentation")

CATEGORY_LABELS = {
    "creativity": "Creativity",
    "technique": "Technique",
    "presentation": "Presentation",
}


def new_competitor_id() -> str:
    """Return a fresh random identifier for a competitor."""
    return str(uuid.uuid4())


@dataclass(frozen=True)
class Competitor:
    """A named dancer on the roster.

    ``id`` is generated once on creation and never changes; score records
    refer to the competitor through it.  ``name`` is trimmed and unique on
    the roster (case-sensitive).
    """

    id: str
    name: str

    def to_dict(self) -> dict:
        """Return the stored ``{"id": ..., "name": ...}`` form."""
        return {"id": self.id, "name": self.name}

    @classmethod
    def from_dict(cls, data: dict) -> Competitor:
        """Build a competitor from its stored form."""
        return cls(id=str(data["id"]), name=str(data["name"]))


@dataclass(frozen=True)
class ScoreRecord:
    """The per-category scores assigned to one competitor."""

    competitor_id: str
    creativity: float = 0
    technique: float = 0
    presentation: float = 0

    def to_dict(self) -> dict:
        return {
            "competitorId": self.competitor_id,
            "creativity": self.creativity,
            "technique": self.technique,
            "presentation": self.presentation,
        }

    @classmethod
    def from_dict(cls, data: dict) -> ScoreRecord:
        return cls(
            competitor_id=str(data["competitorId"]),
            creativity=data.get("creativity", 0),
            technique=data.get("technique", 0),
            presentation=data.get("presentation", 0),
        )


@dataclass
class ScoreEntry:
    """Pending score-entry fields, filled in before a submission.

    Never persisted; reset to an empty selection and zeroes after every
    successful submission.
    """

    competitor_id: str = ""
    scores: dict = field(default_factory=lambda: dict.fromkeys(CATEGORIES, 0))

    def reset(self) -> None:
        self.competitor_id = ""
        self.scores = dict.fromkeys(CATEGORIES, 0)
