"""Enumerates every slot a player was obligated to predict in a season."""

import logging
from collections.abc import Iterable, Sequence

from cja_picks.models.slot import Slot
from cja_picks.types import ScheduleRow
from cja_picks.utils.constants import DIVISIONS, SPLITS, UNKNOWN_TRACK_LABEL

logger = logging.getLogger(__name__)


def build_slot_universe(
    schedules: Iterable[ScheduleRow],
    divisions: Sequence[int] = DIVISIONS,
    splits: Sequence[str] = SPLITS,
    max_week: int | None = None,
) -> list[Slot]:
    """
    Build the full schedule x division x split slot set.

    The result does not depend on predictions or results: a slot nobody predicted is
    still in the universe so that abstaining can be penalized.

    Args:
        schedules: Season schedule rows (id, week, optional track_name/race_date)
        divisions: Division numbers to enumerate
        splits: Split names to enumerate, in display order
        max_week: If given, only schedules with week <= max_week are included

    Returns:
        Slots ordered by week, then division, then split order
    """
    slots = []
    seen_ids: set[str] = set()

    for schedule in sorted(schedules, key=lambda s: (s.get("week") or 0, str(s.get("id")))):
        schedule_id = schedule.get("id")
        week = schedule.get("week")
        if not schedule_id or not isinstance(week, int):
            logger.warning(f"Skipping schedule without id/week: {schedule}")
            continue
        if schedule_id in seen_ids:
            continue
        seen_ids.add(schedule_id)

        if max_week is not None and week > max_week:
            continue

        track_name = schedule.get("track_name") or UNKNOWN_TRACK_LABEL
        race_date = schedule.get("race_date")
        for division in divisions:
            for split in splits:
                slots.append(
                    Slot(
                        schedule_id=schedule_id,
                        week=week,
                        division=division,
                        split=split,
                        track_name=track_name,
                        race_date=race_date,
                    )
                )

    logger.debug(f"Built slot universe: {len(seen_ids)} schedule(s), {len(slots)} slot(s)")
    return slots
