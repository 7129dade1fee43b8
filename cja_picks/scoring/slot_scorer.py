"""
Golf-style slot scoring.

Lower is better. A correct pick scores the driver's split position; a pick that did
not finish and no pick at all both score one place worse than the whole field, so
abstaining is never cheaper than guessing.

Rules are evaluated in priority order; the first one returning a score wins.
"""

from collections.abc import Callable

from cja_picks.models.slot import Slot, SlotOutcome, SlotScore
from cja_picks.scoring.result_index import ResultIndex

ScoringRule = Callable[[Slot, str | None, ResultIndex], SlotScore | None]


def _uncontested(slot: Slot, driver_id: str | None, index: ResultIndex) -> SlotScore | None:
    if not index.is_contested(slot.key):
        return SlotScore(outcome=SlotOutcome.UNCONTESTED)
    return None


def _predicted_finisher(slot: Slot, driver_id: str | None, index: ResultIndex) -> SlotScore | None:
    position = index.finish_position(slot.key, driver_id)
    if position is not None:
        return SlotScore(outcome=SlotOutcome.SCORED, points=position, finish_position=position)
    return None


def _field_penalty(slot: Slot, driver_id: str | None, index: ResultIndex) -> SlotScore:
    penalty = index.participant_count(slot.key) + 1
    return SlotScore(outcome=SlotOutcome.PENALIZED, points=penalty, finish_position=penalty)


SCORING_RULES: tuple[ScoringRule, ...] = (
    _uncontested,
    _predicted_finisher,
    _field_penalty,
)


def score_slot(slot: Slot, driver_id: str | None, index: ResultIndex) -> SlotScore:
    """
    Score one slot for one player.

    Args:
        slot: The slot being scored
        driver_id: The player's predicted driver, or None if they did not predict
        index: Results for the season

    Returns:
        SlotScore tagged SCORED, PENALIZED or UNCONTESTED
    """
    for rule in SCORING_RULES:
        score = rule(slot, driver_id, index)
        if score is not None:
            return score

    raise RuntimeError(f"No scoring rule matched slot {slot.key}")
