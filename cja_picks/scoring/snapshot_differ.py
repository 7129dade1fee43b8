"""
Week-over-week leaderboard movement.

Both snapshots are re-derived from the same prediction/result history on every
call; no historical ranks are stored. The prior snapshot is the leaderboard as it
stood after the week before the latest scored week.
"""

import logging
from collections.abc import Mapping, Sequence

from cja_picks.models.slot import Slot
from cja_picks.scoring.aggregator import PredictionBook, build_leaderboard
from cja_picks.scoring.result_index import ResultIndex
from cja_picks.types import LeaderboardEntry, PositionChange

logger = logging.getLogger(__name__)


def latest_scored_week(slots: Sequence[Slot], index: ResultIndex) -> int | None:
    """Highest week with at least one contested slot, or None if nothing is scored."""
    weeks = [slot.week for slot in slots if index.is_contested(slot.key)]
    return max(weeks) if weeks else None


def diff_positions(
    current: Sequence[LeaderboardEntry],
    prior: Sequence[LeaderboardEntry],
) -> dict[str, PositionChange]:
    """
    Compare ranks between two snapshots.

    Positive change means the player moved up. Players absent from the prior
    snapshot are flagged new with no change.
    """
    prior_ranks = {entry["user_id"]: entry["rank"] for entry in prior}
    changes: dict[str, PositionChange] = {}

    for entry in current:
        prior_rank = prior_ranks.get(entry["user_id"])
        if prior_rank is None:
            changes[entry["user_id"]] = {"change": 0, "is_new": True}
        else:
            changes[entry["user_id"]] = {"change": prior_rank - entry["rank"], "is_new": False}

    return changes


def leaderboard_with_movement(
    slots: Sequence[Slot],
    book: PredictionBook,
    index: ResultIndex,
    display_names: Mapping[str, str] | None = None,
) -> list[LeaderboardEntry]:
    """
    Current leaderboard annotated with each player's position change.

    Args:
        slots: Full season slot universe
        book: Indexed predictions
        index: Indexed results

    Returns:
        Current leaderboard entries, each with a ``position_change``
    """
    current = build_leaderboard(slots, book, index, display_names)

    max_week = latest_scored_week(slots, index)
    prior: list[LeaderboardEntry] = []
    if max_week is not None and max_week - 1 >= 1:
        boundary = max_week - 1
        prior_slots = [slot for slot in slots if slot.week <= boundary]
        prior = build_leaderboard(prior_slots, book, index, display_names, max_week=boundary)
        logger.debug(f"Prior snapshot through week {boundary}: {len(prior)} player(s)")
    else:
        logger.debug("No prior snapshot: first scored week of the season")

    changes = diff_positions(current, prior)
    for entry in current:
        entry["position_change"] = changes[entry["user_id"]]

    return current
