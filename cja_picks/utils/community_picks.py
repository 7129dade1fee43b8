"""Aggregates how the community split its picks across drivers in each slot."""

import logging
from collections import Counter
from collections.abc import Iterable

from cja_picks.models.slot import SlotKey
from cja_picks.scoring.aggregator import PredictionBook
from cja_picks.types import PredictionRow, ScheduleRow

logger = logging.getLogger(__name__)


def community_pick_distribution(
    predictions: Iterable[PredictionRow],
    schedules: Iterable[ScheduleRow],
    week: int | None = None,
) -> dict[SlotKey, list[dict]]:
    """
    Count picks per driver for every slot.

    Each player counts once per slot: repeated rows collapse to the latest pick,
    and rows that do not resolve to a schedule, slot and driver are skipped.

    Args:
        predictions: Prediction rows
        schedules: Season schedule rows, used to resolve weeks
        week: If given, only slots in this week are counted

    Returns:
        slot key -> [{"driver_id", "count", "percentage"}] sorted by count desc, then driver id
    """
    book = PredictionBook.from_rows(predictions, schedules)
    counts: dict[SlotKey, Counter] = {}

    for _user_id, key, row in book.entries():
        if week is not None and book.week_of(key[0]) != week:
            continue
        counts.setdefault(key, Counter())[row["driver_id"]] += 1

    distribution = {}
    for key in sorted(counts):
        counter = counts[key]
        total = sum(counter.values())
        distribution[key] = [
            {"driver_id": driver_id, "count": count, "percentage": count / total * 100}
            for driver_id, count in sorted(counter.items(), key=lambda item: (-item[1], item[0]))
        ]

    logger.debug(f"Community picks for {len(distribution)} slot(s)")
    return distribution
