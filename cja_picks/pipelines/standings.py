"""
Standings pipeline: fetch a season's rows, then score them.

The fetch step talks to the table store; everything after it is a pure function of
the fetched rows, so the same rows always produce the same standings. A failed
fetch aborts the whole computation rather than ranking players on partial data.
"""

import logging
from collections.abc import Iterable, Mapping
from datetime import datetime

from cja_picks.models.slot import SlotOutcome
from cja_picks.persistence.race_data import RaceDataRepository
from cja_picks.scoring import (
    PredictionBook,
    ResultIndex,
    aggregate_user,
    build_slot_universe,
    leaderboard_with_movement,
)
from cja_picks.types import (
    DriverRow,
    LeaderboardEntry,
    PredictedDriver,
    PredictionResult,
    PredictionRow,
    RaceResultRow,
    ScheduleRow,
    UserHistory,
    WeeklyScore,
)
from cja_picks.utils.community_picks import community_pick_distribution
from cja_picks.utils.config_loader import get_app_config
from cja_picks.utils.config_schema import AppConfig
from cja_picks.utils.constants import MISSING_PREDICTION_PREFIX, UNKNOWN_DRIVER_LABEL

logger = logging.getLogger(__name__)


def _predicted_driver(driver_id: str, drivers: Mapping[str, DriverRow]) -> PredictedDriver:
    driver = drivers.get(driver_id, {})
    return {
        "id": driver_id,
        "first_name": driver.get("first_name"),
        "last_name": driver.get("last_name"),
        "short_name": driver.get("short_name") or UNKNOWN_DRIVER_LABEL,
        "driver_number": driver.get("driver_number"),
    }


def build_user_history(
    user_id: str,
    season_id: str,
    schedules: list[ScheduleRow],
    predictions: Iterable[PredictionRow],
    results: Iterable[RaceResultRow],
    drivers: Iterable[DriverRow] | None = None,
    as_of: datetime | None = None,
    config: AppConfig | None = None,
) -> UserHistory:
    """
    Score one player's season.

    Lists every pick they made (scored or not yet resulted) plus a penalty row for
    each contested slot they skipped, with per-week and season totals. The driver
    roster only labels picks; a driver missing from it is still scored.
    """
    config = config or AppConfig()
    driver_map = {d["id"]: d for d in drivers or []}

    slots = build_slot_universe(
        schedules, divisions=config.scoring.divisions, splits=config.scoring.splits
    )
    index = ResultIndex.from_rows(results, schedules, as_of=as_of)
    book = PredictionBook.from_rows(
        (p for p in predictions if p.get("user_id") == user_id), schedules
    )
    season = aggregate_user(user_id, slots, book, index)

    per_prediction: list[PredictionResult] = []
    weekly: dict[int, WeeklyScore] = {}

    for scored in season.scored_slots:
        slot, score, prediction = scored.slot, scored.score, scored.prediction
        if prediction is None and not score.contested:
            continue

        if prediction is not None:
            prediction_id = prediction.get("id") or "-".join(
                [slot.schedule_id, str(slot.division), slot.split]
            )
            predicted_driver = _predicted_driver(prediction["driver_id"], driver_map)
        else:
            prediction_id = "-".join(
                [MISSING_PREDICTION_PREFIX, slot.schedule_id, str(slot.division), slot.split]
            )
            predicted_driver = {
                "id": "",
                "first_name": None,
                "last_name": None,
                "short_name": config.display.no_prediction_label,
                "driver_number": None,
            }

        per_prediction.append(
            {
                "id": prediction_id,
                "week": slot.week,
                "track_name": slot.track_name,
                "division": slot.division,
                "split": slot.split,
                "predicted_driver": predicted_driver,
                "finish_position": score.finish_position,
                "points": score.points,
                "race_date": slot.race_date,
                "outcome": score.outcome.value,
            }
        )

        if score.outcome is SlotOutcome.UNCONTESTED:
            continue
        week = weekly.setdefault(
            slot.week,
            {
                "week": slot.week,
                "track_name": slot.track_name,
                "total_points": 0,
                "prediction_count": 0,
                "race_date": slot.race_date,
            },
        )
        week["total_points"] += score.points
        week["prediction_count"] += 1

    logger.info(
        f"Scored history for user {user_id}: {season.total_points} point(s) "
        f"over {season.weeks_participated} week(s)"
    )
    return {
        "user_id": user_id,
        "season_id": season_id,
        "per_prediction_results": per_prediction,
        "weekly_scores": [weekly[w] for w in sorted(weekly)],
        "total_score": season.total_points,
        "warnings": book.warnings + index.warnings,
    }


def build_standings(
    schedules: list[ScheduleRow],
    predictions: Iterable[PredictionRow],
    results: Iterable[RaceResultRow],
    display_names: Mapping[str, str] | None = None,
    as_of: datetime | None = None,
    config: AppConfig | None = None,
) -> list[LeaderboardEntry]:
    """Rank every player of the season and annotate week-over-week movement."""
    config = config or AppConfig()
    display_names = display_names or {}

    slots = build_slot_universe(
        schedules, divisions=config.scoring.divisions, splits=config.scoring.splits
    )
    index = ResultIndex.from_rows(results, schedules, as_of=as_of)
    book = PredictionBook.from_rows(predictions, schedules)

    names = {
        user_id: display_names.get(user_id) or config.display.anonymous_label
        for user_id in book.users()
    }
    leaderboard = leaderboard_with_movement(slots, book, index, names)

    dropped = len(book.warnings) + len(index.warnings)
    if dropped:
        logger.warning(f"{dropped} unresolvable row(s) left out of the standings")
    logger.info(f"Built leaderboard with {len(leaderboard)} player(s)")
    return leaderboard


class StandingsPipeline:
    """Fetches a season's rows from the table store and scores them."""

    def __init__(
        self,
        repository: RaceDataRepository | None = None,
        config: AppConfig | None = None,
    ):
        self.config = config or get_app_config()
        self.repository = repository or RaceDataRepository(
            tables=self.config.tables, page_size=self.config.fetch.page_size
        )

    def compute_user_history(
        self, user_id: str, season_id: str, as_of: datetime | None = None
    ) -> UserHistory:
        """
        Score one player's season.

        Raises:
            DataFetchError: If any required rows cannot be fetched
        """
        schedules = self.repository.fetch_schedules(season_id)
        schedule_ids = [s["id"] for s in schedules]
        predictions = self.repository.fetch_predictions(season_id, schedule_ids, user_id=user_id)
        results = self.repository.fetch_results(schedule_ids)
        drivers = self.repository.fetch_drivers()

        return build_user_history(
            user_id, season_id, schedules, predictions, results, drivers, as_of, self.config
        )

    def compute_leaderboard(
        self, season_id: str, as_of: datetime | None = None
    ) -> list[LeaderboardEntry]:
        """
        Rank every player of the season.

        Raises:
            DataFetchError: If schedules, predictions or results cannot be fetched
        """
        schedules = self.repository.fetch_schedules(season_id)
        schedule_ids = [s["id"] for s in schedules]
        predictions = self.repository.fetch_predictions(season_id, schedule_ids)
        results = self.repository.fetch_results(schedule_ids)
        display_names = self.repository.fetch_display_names(
            {p["user_id"] for p in predictions if p.get("user_id")}
        )

        return build_standings(schedules, predictions, results, display_names, as_of, self.config)

    def compute_community_picks(self, season_id: str, week: int | None = None) -> dict:
        """Pick distribution per slot for the season (optionally one week)."""
        schedules = self.repository.fetch_schedules(season_id)
        predictions = self.repository.fetch_predictions(season_id, [s["id"] for s in schedules])
        return community_pick_distribution(predictions, schedules, week=week)
