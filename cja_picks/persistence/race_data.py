"""
Race data repository: reads and writes the prediction game's tables in Supabase.

Reads page through the table store because responses are capped. Any read
failure is raised as DataFetchError so callers never score a partial data set;
display names are the one cosmetic join that degrades to placeholders instead.
"""

import logging
from collections.abc import Callable, Iterable
from datetime import UTC, datetime
from typing import Any

from cja_picks.types import DriverRow, PredictionRow, RaceResultRow, ScheduleRow
from cja_picks.utils.config_schema import TablesConfig
from cja_picks.utils.constants import DEFAULT_PAGE_SIZE, DIVISIONS, SPLITS, UNKNOWN_TRACK_LABEL
from cja_picks.utils.dates import to_utc_datetime
from cja_picks.utils.prediction_lock import check_prediction_editable

from .db import get_supabase_client

logger = logging.getLogger(__name__)

PREDICTION_COLUMNS = "id, user_id, schedule_id, division, split, driver_id, updated_at"
RESULT_COLUMNS = "schedule_id, division, split, driver_id, split_position"
SCHEDULE_COLUMNS = "id, season_id, week, race_date, track:tracks(name)"
DRIVER_COLUMNS = "id, first_name, last_name, short_name, driver_number, division, division_split"
PREDICTION_CONFLICT_KEY = "user_id,schedule_id,division,split"


class DataFetchError(RuntimeError):
    """Raised when the table store cannot be read."""


class RaceDataRepository:
    """Table store access for seasons, schedules, predictions, results and drivers."""

    def __init__(
        self,
        client=None,
        tables: TablesConfig | None = None,
        page_size: int = DEFAULT_PAGE_SIZE,
    ):
        self._client = client
        self.tables = tables or TablesConfig()
        self.page_size = page_size

    @property
    def client(self):
        if self._client is None:
            self._client = get_supabase_client()
        return self._client

    # Reads

    def fetch_season(self, season_id: str) -> dict[str, Any] | None:
        """Fetch one season row, or None if it does not exist."""
        rows = self._execute(
            lambda: self.client.table(self.tables.seasons)
            .select("*")
            .eq("id", season_id)
            .limit(1),
            f"season {season_id}",
        )
        return rows[0] if rows else None

    def fetch_latest_season(self) -> dict[str, Any] | None:
        """Fetch the season with the highest season number."""
        rows = self._execute(
            lambda: self.client.table(self.tables.seasons)
            .select("*")
            .order("season_number", desc=True)
            .limit(1),
            "latest season",
        )
        return rows[0] if rows else None

    def fetch_schedules(self, season_id: str) -> list[ScheduleRow]:
        """Fetch a season's race weeks ordered by week, with the track name joined in."""
        rows = self._fetch_all(
            lambda: self.client.table(self.tables.schedules)
            .select(SCHEDULE_COLUMNS)
            .eq("season_id", season_id)
            .order("week"),
            f"schedules for season {season_id}",
        )

        schedules = []
        for row in rows:
            track = row.get("track") or {}
            schedules.append(
                {
                    "id": row["id"],
                    "season_id": row.get("season_id", season_id),
                    "week": row["week"],
                    "race_date": row.get("race_date"),
                    "track_name": track.get("name") or UNKNOWN_TRACK_LABEL,
                }
            )
        return schedules

    def fetch_predictions(
        self,
        season_id: str,
        schedule_ids: Iterable[str],
        user_id: str | None = None,
    ) -> list[PredictionRow]:
        """Fetch predictions on the given schedules, optionally for a single player."""
        schedule_ids = list(schedule_ids)
        if not schedule_ids:
            return []

        def build_query():
            query = (
                self.client.table(self.tables.predictions)
                .select(PREDICTION_COLUMNS)
                .in_("schedule_id", schedule_ids)
            )
            if user_id:
                query = query.eq("user_id", user_id)
            return query.order("id")

        scope = f"user {user_id}" if user_id else "all users"
        return self._fetch_all(build_query, f"predictions for season {season_id} ({scope})")

    def fetch_results(self, schedule_ids: Iterable[str]) -> list[RaceResultRow]:
        """Fetch race results for the given schedules."""
        schedule_ids = list(schedule_ids)
        if not schedule_ids:
            return []

        return self._fetch_all(
            lambda: self.client.table(self.tables.results)
            .select(RESULT_COLUMNS)
            .in_("schedule_id", schedule_ids)
            .order("schedule_id")
            .order("division")
            .order("split")
            .order("split_position"),
            f"results for {len(schedule_ids)} schedule(s)",
        )

    def fetch_drivers(self) -> list[DriverRow]:
        """Fetch the public driver roster."""
        return self._fetch_all(
            lambda: self.client.table(self.tables.drivers).select(DRIVER_COLUMNS).order("id"),
            "drivers",
        )

    def fetch_display_names(self, user_ids: Iterable[str]) -> dict[str, str]:
        """
        Fetch display names for players.

        Names are cosmetic: on failure a warning is logged and an empty mapping is
        returned so callers fall back to placeholders.
        """
        user_ids = sorted(set(user_ids))
        if not user_ids:
            return {}

        try:
            rows = self._fetch_all(
                lambda: self.client.table(self.tables.profiles)
                .select("user_id, display_name")
                .in_("user_id", user_ids)
                .order("user_id"),
                "display names",
            )
        except DataFetchError as e:
            logger.warning(f"Display names unavailable, using placeholders: {e}")
            return {}

        return {row["user_id"]: row["display_name"] for row in rows if row.get("display_name")}

    def fetch_display_name(self, user_id: str) -> str | None:
        """Display name for one player, or None if unknown."""
        return self.fetch_display_names([user_id]).get(user_id)

    # Writes

    def save_prediction(
        self,
        user_id: str,
        season: dict[str, Any],
        schedule: ScheduleRow,
        division: int,
        split: str,
        driver_id: str,
        now: datetime | None = None,
    ) -> PredictionRow:
        """
        Insert or replace a player's pick for one slot.

        Upserts on (user_id, schedule_id, division, split) so a resubmission
        replaces the earlier pick instead of adding a second one.

        Raises:
            ValueError: If the slot or schedule is invalid
            PredictionLockedError: If the deadline for the schedule's week has passed
            RuntimeError: If the write fails
        """
        self._validate_slot(season, schedule, division, split)
        now = to_utc_datetime(now) if now is not None else datetime.now(UTC)
        check_prediction_editable(season, schedule["week"], now)

        row = {
            "user_id": user_id,
            "schedule_id": schedule["id"],
            "division": division,
            "split": split,
            "driver_id": driver_id,
            "updated_at": now.isoformat(),
        }

        try:
            result = (
                self.client.table(self.tables.predictions)
                .upsert(row, on_conflict=PREDICTION_CONFLICT_KEY)
                .execute()
            )
        except Exception as e:
            logger.error(f"Prediction save failed: {e}")
            raise RuntimeError(f"Failed to save prediction: {e}") from e

        if not result.data:
            raise RuntimeError("Prediction upsert returned no data")

        logger.info(
            f"Saved prediction: user {user_id}, week {schedule['week']}, D{division} {split}"
        )
        return result.data[0]

    def delete_prediction(
        self,
        user_id: str,
        season: dict[str, Any],
        schedule: ScheduleRow,
        division: int,
        split: str,
        now: datetime | None = None,
    ) -> None:
        """
        Remove a player's pick for one slot.

        Raises:
            ValueError: If there is no pick to delete
            PredictionLockedError: If the deadline for the schedule's week has passed
            RuntimeError: If the delete fails
        """
        self._validate_slot(season, schedule, division, split)
        check_prediction_editable(season, schedule["week"], now)

        try:
            result = (
                self.client.table(self.tables.predictions)
                .delete()
                .eq("user_id", user_id)
                .eq("schedule_id", schedule["id"])
                .eq("division", division)
                .eq("split", split)
                .execute()
            )
        except Exception as e:
            logger.error(f"Prediction delete failed: {e}")
            raise RuntimeError(f"Failed to delete prediction: {e}") from e

        if not result.data:
            raise ValueError("No prediction found to delete")

        logger.info(
            f"Deleted prediction: user {user_id}, week {schedule['week']}, D{division} {split}"
        )

    # Private helpers

    @staticmethod
    def _validate_slot(
        season: dict[str, Any], schedule: ScheduleRow, division: int, split: str
    ) -> None:
        if division not in DIVISIONS:
            raise ValueError(f"Invalid division {division}, expected one of {list(DIVISIONS)}")
        if split not in SPLITS:
            raise ValueError(f"Invalid split {split}, expected one of {list(SPLITS)}")
        schedule_season = schedule.get("season_id")
        if schedule_season is not None and schedule_season != season.get("id"):
            raise ValueError(
                f"Schedule {schedule['id']} belongs to season {schedule_season}, "
                f"not {season.get('id')}"
            )

    def _execute(self, build_query: Callable[[], Any], description: str) -> list[dict]:
        try:
            result = build_query().execute()
        except Exception as e:
            logger.error(f"Failed to fetch {description}: {e}")
            raise DataFetchError(f"Failed to fetch {description}: {e}") from e
        return result.data or []

    def _fetch_all(self, build_query: Callable[[], Any], description: str) -> list[dict]:
        """Read every row of a query, one page at a time."""
        rows: list[dict] = []
        start = 0

        while True:
            end = start + self.page_size - 1
            page = self._execute(lambda: build_query().range(start, end), description)
            rows.extend(page)
            if len(page) < self.page_size:
                break
            start += self.page_size

        logger.debug(f"Fetched {len(rows)} row(s): {description}")
        return rows
