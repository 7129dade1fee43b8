"""Type definitions for table rows and standings data structures."""

from typing import NotRequired, TypedDict


class ScheduleRow(TypedDict):
    """One race week of a season."""

    id: str
    week: int
    race_date: NotRequired[str | None]
    season_id: NotRequired[str]
    track_name: NotRequired[str]


class PredictionRow(TypedDict):
    """A player's pick for one slot."""

    user_id: str
    schedule_id: str
    division: int
    split: str
    driver_id: str
    id: NotRequired[str]
    updated_at: NotRequired[str]


class RaceResultRow(TypedDict):
    """One driver's finish in one slot."""

    schedule_id: str
    division: int
    split: str
    driver_id: str
    split_position: int


class DriverRow(TypedDict):
    """Public driver record."""

    id: str
    short_name: str
    first_name: NotRequired[str | None]
    last_name: NotRequired[str | None]
    driver_number: NotRequired[int | None]
    division: NotRequired[int]
    division_split: NotRequired[str]


class PredictedDriver(TypedDict):
    """Driver details attached to a scored prediction."""

    id: str
    first_name: str | None
    last_name: str | None
    short_name: str
    driver_number: int | None


class PredictionResult(TypedDict):
    """A single scored (or penalty) slot in a player's history."""

    id: str
    week: int
    track_name: str
    division: int
    split: str
    predicted_driver: PredictedDriver
    finish_position: int | None
    points: int
    race_date: str | None
    outcome: str


class WeeklyScore(TypedDict):
    """Points summed over the contested slots of one race week."""

    week: int
    track_name: str
    total_points: int
    prediction_count: int
    race_date: str | None


class UserHistory(TypedDict):
    """Everything the results page shows for one player."""

    user_id: str
    season_id: str
    per_prediction_results: list[PredictionResult]
    weekly_scores: list[WeeklyScore]
    total_score: int
    warnings: list[str]


class PositionChange(TypedDict):
    """Week-over-week movement on the leaderboard."""

    change: int
    is_new: bool


class LeaderboardEntry(TypedDict):
    """One row of the all-time leaderboard."""

    user_id: str
    display_name: str
    total_points: int
    weeks_participated: int
    average_points: float
    rank: int
    position_change: NotRequired[PositionChange]
