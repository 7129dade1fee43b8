"""
Sums slot scores into per-player totals and a ranked leaderboard.

Every slot in the universe is scored for every player, so a missing pick is
penalized rather than ignored. Uncontested slots contribute neither points nor
weeks: "no data yet" is not "zero points".
"""

import logging
from collections.abc import Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass, field

from cja_picks.models.slot import Slot, SlotKey, SlotScore
from cja_picks.scoring.result_index import ResultIndex
from cja_picks.scoring.slot_scorer import score_slot
from cja_picks.types import DriverRow, LeaderboardEntry, PredictionRow, ScheduleRow
from cja_picks.utils.constants import ANONYMOUS_LABEL, DIVISIONS, SPLITS

logger = logging.getLogger(__name__)


class PredictionBook:
    """
    Predictions indexed by player and slot.

    Holds at most one prediction per (player, slot); when the input repeats a slot
    the most recently updated row replaces the earlier one. Rows that cannot be
    resolved against the season's schedules (or the driver roster, when one is
    given) are dropped and recorded in ``warnings``.
    """

    def __init__(self):
        self._by_user: dict[str, dict[SlotKey, PredictionRow]] = {}
        self._weeks: dict[str, int] = {}
        self.warnings: list[str] = []

    @classmethod
    def from_rows(
        cls,
        predictions: Iterable[PredictionRow],
        schedules: Iterable[ScheduleRow],
        drivers: Iterable[DriverRow] | None = None,
    ) -> "PredictionBook":
        book = cls()
        book._weeks = {
            s["id"]: s["week"] for s in schedules if s.get("id") and isinstance(s.get("week"), int)
        }
        driver_ids = None if drivers is None else {d.get("id") for d in drivers}

        for row in predictions:
            book._add(row, driver_ids)

        logger.debug(
            f"Indexed predictions for {len(book._by_user)} player(s), "
            f"{len(book.warnings)} row(s) dropped"
        )
        return book

    def _add(self, row: PredictionRow, driver_ids: set[str] | None) -> None:
        user_id = row.get("user_id")
        schedule_id = row.get("schedule_id")
        division = row.get("division")
        split = row.get("split")
        driver_id = row.get("driver_id")

        if not user_id:
            return self._drop(f"Prediction {row.get('id')} without user dropped")
        if schedule_id not in self._weeks:
            return self._drop(
                f"Prediction {row.get('id')} for unknown schedule {schedule_id} dropped"
            )
        if division not in DIVISIONS or split not in SPLITS:
            return self._drop(
                f"Prediction {row.get('id')} with invalid division/split {division}/{split} dropped"
            )
        if not driver_id or (driver_ids is not None and driver_id not in driver_ids):
            return self._drop(f"Prediction {row.get('id')} for unknown driver {driver_id} dropped")

        key = (schedule_id, division, split)
        user_slots = self._by_user.setdefault(user_id, {})
        existing = user_slots.get(key)
        if existing is not None:
            logger.warning(f"Duplicate prediction for user {user_id} in {key}, keeping latest")
            if (existing.get("updated_at") or "") > (row.get("updated_at") or ""):
                return
        user_slots[key] = row

    def _drop(self, message: str) -> None:
        logger.warning(message)
        self.warnings.append(message)

    def users(self, max_week: int | None = None) -> list[str]:
        """Players with at least one prediction (on a schedule up to max_week)."""
        return sorted(
            user_id
            for user_id, slots in self._by_user.items()
            if any(max_week is None or self._weeks[key[0]] <= max_week for key in slots)
        )

    def prediction_for(self, user_id: str, key: SlotKey) -> PredictionRow | None:
        return self._by_user.get(user_id, {}).get(key)

    def week_of(self, schedule_id: str) -> int | None:
        return self._weeks.get(schedule_id)

    def entries(self) -> Iterator[tuple[str, SlotKey, PredictionRow]]:
        """Every kept prediction as (user_id, slot key, row), ordered by user."""
        for user_id in sorted(self._by_user):
            for key, row in self._by_user[user_id].items():
                yield user_id, key, row


@dataclass
class ScoredSlot:
    """One slot of a player's season with its score and the pick behind it."""

    slot: Slot
    score: SlotScore
    prediction: PredictionRow | None = None


@dataclass
class UserSeasonScore:
    """A player's aggregated golf score over a slot universe."""

    user_id: str
    total_points: int = 0
    weeks: set[int] = field(default_factory=set)
    scored_slots: list[ScoredSlot] = field(default_factory=list)

    @property
    def weeks_participated(self) -> int:
        return len(self.weeks)

    @property
    def average_points(self) -> float:
        if not self.weeks:
            return 0.0
        return self.total_points / len(self.weeks)

    def weekly_totals(self) -> dict[int, int]:
        """Points per week over contested slots."""
        totals: dict[int, int] = {}
        for scored in self.scored_slots:
            if scored.score.contested:
                totals[scored.slot.week] = totals.get(scored.slot.week, 0) + scored.score.points
        return totals


def aggregate_user(
    user_id: str,
    slots: Sequence[Slot],
    book: PredictionBook,
    index: ResultIndex,
) -> UserSeasonScore:
    """Score every slot in the universe for one player and sum the contested ones."""
    season = UserSeasonScore(user_id=user_id)

    for slot in slots:
        prediction = book.prediction_for(user_id, slot.key)
        driver_id = prediction.get("driver_id") if prediction else None
        score = score_slot(slot, driver_id, index)
        season.scored_slots.append(ScoredSlot(slot=slot, score=score, prediction=prediction))

        if not score.contested:
            continue
        season.total_points += score.points
        season.weeks.add(slot.week)

    return season


def assign_competition_ranks(entries: list[LeaderboardEntry]) -> list[LeaderboardEntry]:
    """
    Rank entries already sorted by total points ascending.

    Standard competition ranking: tied totals share a rank, and the next distinct
    total takes its 1-based position in the list (1, 1, 3, ...).
    """
    previous_points = None
    rank = 0
    for position, entry in enumerate(entries, start=1):
        if entry["total_points"] != previous_points:
            rank = position
            previous_points = entry["total_points"]
        entry["rank"] = rank
    return entries


def build_leaderboard(
    slots: Sequence[Slot],
    book: PredictionBook,
    index: ResultIndex,
    display_names: Mapping[str, str] | None = None,
    max_week: int | None = None,
) -> list[LeaderboardEntry]:
    """
    Build a ranked leaderboard over the given slot universe.

    Args:
        slots: Slot universe (already limited to the weeks of interest)
        book: Indexed predictions
        index: Indexed results
        display_names: user_id -> display name; missing names use a placeholder
        max_week: Only players with a prediction on a schedule up to this week count

    Returns:
        Entries sorted by total points ascending (ties by user id), with ranks
    """
    display_names = display_names or {}
    entries: list[LeaderboardEntry] = []

    for user_id in book.users(max_week=max_week):
        season = aggregate_user(user_id, slots, book, index)
        if not season.weeks:
            # Nothing contested yet for this player
            continue
        entries.append(
            {
                "user_id": user_id,
                "display_name": display_names.get(user_id) or ANONYMOUS_LABEL,
                "total_points": season.total_points,
                "weeks_participated": season.weeks_participated,
                "average_points": season.average_points,
                "rank": 0,
            }
        )

    entries.sort(key=lambda e: (e["total_points"], e["user_id"]))
    return assign_competition_ranks(entries)
