"""Indexes recorded race results by slot."""

import logging
from collections.abc import Iterable
from datetime import datetime

from cja_picks.models.slot import SlotKey
from cja_picks.types import RaceResultRow, ScheduleRow
from cja_picks.utils.constants import DIVISIONS, SPLITS
from cja_picks.utils.dates import to_utc_datetime

logger = logging.getLogger(__name__)


def _is_position(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 1


class ResultIndex:
    """
    Finish positions and participant counts per slot.

    A slot with no recorded result is uncontested: there is nothing to score
    against yet. Split positions are assumed unique per slot upstream.
    """

    def __init__(self):
        self._positions: dict[SlotKey, dict[str, int]] = {}
        self.warnings: list[str] = []

    @classmethod
    def from_rows(
        cls,
        results: Iterable[RaceResultRow],
        schedules: Iterable[ScheduleRow] | None = None,
        as_of: datetime | None = None,
    ) -> "ResultIndex":
        """
        Build the index from result rows.

        Args:
            results: Race result rows
            schedules: If given, results for schedules outside this set are dropped
            as_of: If given together with schedules, results for schedules racing
                after this moment are ignored; an unparseable race date counts as undated

        Returns:
            Populated ResultIndex (warnings lists every dropped row)
        """
        index = cls()

        known_ids = None
        future_ids: set[str] = set()
        if schedules is not None:
            schedules = list(schedules)
            known_ids = {s.get("id") for s in schedules}
            if as_of is not None:
                cutoff = to_utc_datetime(as_of)
                for schedule in schedules:
                    try:
                        race_date = to_utc_datetime(schedule.get("race_date"))
                    except ValueError:
                        index._drop(
                            f"Schedule {schedule.get('id')} has invalid race date "
                            f"{schedule.get('race_date')!r}, treated as undated"
                        )
                        continue
                    if race_date is not None and race_date > cutoff:
                        future_ids.add(schedule.get("id"))

        for row in results:
            schedule_id = row.get("schedule_id")
            if known_ids is not None and schedule_id not in known_ids:
                index._drop(f"Result for unknown schedule {schedule_id} dropped")
                continue
            if schedule_id in future_ids:
                continue
            index.add(row)

        logger.debug(
            f"Indexed results for {len(index._positions)} contested slot(s), "
            f"{len(index.warnings)} row(s) dropped"
        )
        return index

    def add(self, row: RaceResultRow) -> bool:
        """Record one result row. Returns False if the row was dropped."""
        division = row.get("division")
        split = row.get("split")
        driver_id = row.get("driver_id")
        position = row.get("split_position")

        if division not in DIVISIONS or split not in SPLITS:
            return self._drop(f"Result with invalid division/split {division}/{split} dropped")
        if not driver_id:
            return self._drop(f"Result without driver in {row.get('schedule_id')} dropped")
        if not _is_position(position):
            return self._drop(f"Result for driver {driver_id} without split position dropped")

        key = (row["schedule_id"], division, split)
        slot_positions = self._positions.setdefault(key, {})
        if driver_id in slot_positions:
            return self._drop(f"Duplicate result for driver {driver_id} in {key} ignored")

        slot_positions[driver_id] = position
        return True

    def _drop(self, message: str) -> bool:
        logger.warning(message)
        self.warnings.append(message)
        return False

    def participant_count(self, key: SlotKey) -> int:
        """Number of distinct drivers with a recorded finish in the slot."""
        return len(self._positions.get(key, {}))

    def is_contested(self, key: SlotKey) -> bool:
        return self.participant_count(key) > 0

    def finish_position(self, key: SlotKey, driver_id: str | None) -> int | None:
        """Split position of the driver in the slot, or None if they have no result."""
        if driver_id is None:
            return None
        return self._positions.get(key, {}).get(driver_id)

    def positions(self, key: SlotKey) -> dict[str, int]:
        """Copy of the driver -> split position map for the slot."""
        return dict(self._positions.get(key, {}))

    def contested_keys(self) -> set[SlotKey]:
        return set(self._positions)
