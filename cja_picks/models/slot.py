"""
Slot value types for golf-style prediction scoring.

A slot is one (schedule, division, split) race that every player is expected to
predict a winner for. Scoring a slot yields a tagged outcome so new scoring tiers
can be added without touching the aggregation code.
"""

from dataclasses import dataclass
from enum import Enum

from cja_picks.utils.constants import UNKNOWN_TRACK_LABEL, Split

SlotKey = tuple[str, int, str]


@dataclass(frozen=True)
class Slot:
    """One schedule x division x split combination."""

    schedule_id: str
    week: int
    division: int
    split: Split
    track_name: str = UNKNOWN_TRACK_LABEL
    race_date: str | None = None

    @property
    def key(self) -> SlotKey:
        return (self.schedule_id, self.division, self.split)


class SlotOutcome(Enum):
    """How a slot was scored."""

    SCORED = "scored"  # predicted driver finished, points = split position
    PENALIZED = "penalized"  # wrong/no-show driver or no prediction, points = field + 1
    UNCONTESTED = "uncontested"  # no results recorded yet, ignored by aggregation


@dataclass(frozen=True)
class SlotScore:
    """Result of scoring one slot for one player."""

    outcome: SlotOutcome
    points: int = 0
    finish_position: int | None = None

    @property
    def contested(self) -> bool:
        return self.outcome is not SlotOutcome.UNCONTESTED
